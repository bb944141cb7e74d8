from typing import Optional

from pydantic import BaseModel, model_validator
from app.db.models.user import User

class RegisterRequest(BaseModel):
    first_name: str
    last_name: str
    email: str
    password: str

class LoginRequest(BaseModel):
    email: str
    password: str

class UserProfile(BaseModel):
    user_id: int
    full_name: str
    email: str
    profile_image_url: Optional[str] = None

    @classmethod
    def from_user(cls, user: User) -> "UserProfile":
        return cls(
            user_id=user.id,
            full_name=user.full_name,
            email=user.email,
            profile_image_url=user.profile_image_url,
        )

class TokenPair(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"

class ResponseCore(BaseModel):
    user_profile: UserProfile
    tokens: Optional[TokenPair] = None

class RegisterResponse(BaseModel):
    response_message: str
    response: Optional[ResponseCore] = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def check_response_or_error(self):
        if (self.response is None) == (self.error is None):
            raise ValueError("exactly one of 'response' and 'error' must be set")
        return self
