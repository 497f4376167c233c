from pydantic import BaseModel, ConfigDict, Field


class UserCreate(BaseModel):
    username: str
    useremail: str
    password: str


class UserLogin(BaseModel):
    username: str
    password: str


class RegisteredUser(BaseModel):
    username: str
    useremail: str
    id: str
    access_token: str = Field(serialization_alias="accessToken")

    model_config = ConfigDict(from_attributes=True)


class LoggedInUser(RegisteredUser):
    discount: float


class RegistrationResponse(BaseModel):
    success: bool = True
    response: RegisteredUser


class LoginResponse(BaseModel):
    success: bool = True
    response: LoggedInUser


class MessageResponse(BaseModel):
    success: bool = True
    response: str


# Errors
class ErrorDetail(BaseModel):
    error: str
    message: str


class ErrorResponse(BaseModel):
    success: bool = False
    response: ErrorDetail

    model_config = ConfigDict(json_schema_extra={
        "examples": [
            {"success": False, "response": {"error": "unauthorized", "message": "Please log in"}}
        ]
    })
