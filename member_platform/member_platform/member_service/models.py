from sqlalchemy import Column, String, Boolean, Float
from sqlalchemy.orm import validates
from .db import Base
from .errors import USERNAME_REQUIRED, EMAIL_REQUIRED, PASSWORD_REQUIRED, INVALID_EMAIL
from .tokens import generate_access_token
import re
import uuid

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class User(Base):
    __tablename__ = "users"
    id = Column(String, primary_key=True, default=lambda: uuid.uuid4().hex)
    username = Column(String, unique=True, index=True, nullable=False)
    useremail = Column(String, unique=True, index=True, nullable=False)
    # salted hash, never the plain password
    password = Column(String, nullable=False)
    # Membership, granted on first successful login
    is_member = Column(Boolean, default=False, nullable=False)
    discount = Column(Float, default=0.0, nullable=False)
    access_token = Column(String, unique=True, index=True, nullable=False, default=generate_access_token)

    @validates("username")
    def validate_username(self, key, value):
        if not value:
            raise ValueError(USERNAME_REQUIRED)
        return value

    @validates("useremail")
    def validate_useremail(self, key, value):
        if not value:
            raise ValueError(EMAIL_REQUIRED)
        if not EMAIL_PATTERN.fullmatch(value):
            raise ValueError(INVALID_EMAIL)
        return value.lower()

    @validates("password")
    def validate_password(self, key, value):
        if not value:
            raise ValueError(PASSWORD_REQUIRED)
        return value

    def __repr__(self):
        return f"<User(id={self.id}, username={self.username}, is_member={self.is_member})>"
