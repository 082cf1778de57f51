from pydantic import BaseModel

from app.models.provider import ProviderPublic


class LoginRequest(BaseModel):
    username: str
    password: str


class AccessToken(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int  # seconds
    provider: ProviderPublic


class PasswordChangeRequest(BaseModel):
    current_password: str
    new_password: str
