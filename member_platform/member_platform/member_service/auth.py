from passlib.context import CryptContext
from sqlalchemy.orm import Session
from typing import Optional

from .errors import AccountError, ErrorKind
from .models import User

# Use pbkdf2_sha256 to avoid external bcrypt backend issues in some environments
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not plain_password or not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # stored value is not a recognised hash
        return False

def parse_authorization(authorization: Optional[str]) -> Optional[str]:
    """
    Extract the token from an Authorization header value.

    The header normally carries the raw token. A leading "Bearer " scheme is
    accepted and stripped.
    """
    if not authorization:
        return None
    token = authorization.strip()
    scheme, _, rest = token.partition(" ")
    if scheme.lower() == "bearer":
        token = rest.strip()
    return token or None

def authenticate(db: Session, token: Optional[str]) -> User:
    """
    Resolve an access token to its account.

    Args:
        db: Database session
        token: Token presented by the client

    Returns:
        The User whose stored access token equals ``token``

    Raises:
        AccountError: unauthorized if the token is missing or unknown
    """
    if not token:
        raise AccountError(ErrorKind.UNAUTHORIZED)
    user = db.query(User).filter(User.access_token == token).first()
    if not user:
        raise AccountError(ErrorKind.UNAUTHORIZED)
    return user
