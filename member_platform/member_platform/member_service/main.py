from fastapi import FastAPI, Depends, Header, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.orm import Session
from contextlib import asynccontextmanager
from typing import Optional
import logging

from .accounts import register_user, login_user, delete_user
from .auth import authenticate, parse_authorization
from .config import Settings
from .db import Database, get_db
from .errors import AccountError, ErrorKind
from .models import User
from .routes import health
from .schemas import (
    UserCreate,
    UserLogin,
    RegisteredUser,
    LoggedInUser,
    RegistrationResponse,
    LoginResponse,
    MessageResponse,
    ErrorResponse,
)
from .utils.event_logger import configure_logging, log_account_event

logger = logging.getLogger(__name__)


def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
) -> User:
    try:
        return authenticate(db, parse_authorization(authorization))
    except AccountError:
        log_account_event("access_denied", None, request)
        raise
    except Exception as e:
        logger.exception("Access check failed")
        raise AccountError(ErrorKind.INTERNAL) from e


async def account_error_handler(request: Request, exc: AccountError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = AccountError(ErrorKind.VALIDATION)
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    error = AccountError(ErrorKind.INTERNAL)
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


def error_responses(*status_codes: int) -> dict:
    return {code: {"model": ErrorResponse} for code in status_codes}


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()
    configure_logging(settings.LOG_LEVEL, settings.LOG_DIR)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Open the store on startup and release it on shutdown"""
        database = Database(
            settings.DATABASE_URL,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            echo=settings.LOG_LEVEL.upper() == "DEBUG",
        )
        database.init()
        app.state.db = database
        logger.info("Member Service startup complete")
        try:
            yield
        finally:
            database.dispose()

    app = FastAPI(
        title="Member Service",
        description="Account registration, login and token-guarded deletion",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AccountError, account_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(health.router)

    @app.get("/", response_class=PlainTextResponse)
    def root():
        return settings.GREETING

    @app.post(
        "/register",
        response_model=RegistrationResponse,
        status_code=status.HTTP_201_CREATED,
        responses=error_responses(400, 500),
    )
    def register(user: UserCreate, request: Request, db: Session = Depends(get_db)):
        try:
            new_user = register_user(db, user.username, user.useremail, user.password)
        except AccountError:
            raise
        except Exception as e:
            logger.exception(f"Registration error for user {user.username}")
            raise AccountError(ErrorKind.INTERNAL) from e

        log_account_event("register", new_user, request)
        return RegistrationResponse(response=RegisteredUser.model_validate(new_user))

    @app.post("/login", response_model=LoginResponse, responses=error_responses(400, 401, 500))
    def login(
        credentials: UserLogin,
        request: Request,
        db: Session = Depends(get_db),
    ):
        try:
            user = login_user(db, credentials.username, credentials.password, settings.MEMBER_DISCOUNT)
        except AccountError:
            # Log login failure event if user exists
            known = db.query(User).filter(User.username == credentials.username).first()
            log_account_event("login_failure", known, request)
            raise
        except Exception as e:
            logger.exception(f"Login error for user {credentials.username}")
            raise AccountError(ErrorKind.INTERNAL) from e

        log_account_event("login_success", user, request)
        return LoginResponse(response=LoggedInUser.model_validate(user))

    @app.delete(
        "/delete/{user_id}",
        response_model=MessageResponse,
        responses=error_responses(401, 403, 404, 500),
    )
    def delete_account(
        user_id: str,
        request: Request,
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
    ):
        actor_id = current_user.id
        try:
            delete_user(db, user_id, current_user, settings.REQUIRE_DELETE_OWNERSHIP)
        except AccountError:
            raise
        except Exception as e:
            logger.exception(f"Delete error for user_id={user_id}, actor_id={actor_id}")
            raise AccountError(ErrorKind.INTERNAL) from e

        log_account_event("account_deleted", current_user, request, {"target_id": user_id})
        return MessageResponse(response="Account deleted")

    return app


app = create_app()


def run() -> None:
    import uvicorn

    settings = app.state.settings
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
