"""
Pydantic schemas for authentication endpoints.
Defines request/response models for signup and signin.
"""
from pydantic import BaseModel, Field


class SigninRequest(BaseModel):
    """
    Request model for the signin endpoint.
    """
    username: str = Field(min_length=1, max_length=256)
    password: str = Field(min_length=1)


class SignupRequest(BaseModel):
    """
    Request model for the signup endpoint.
    New accounts always start with the MEMBER role.
    """
    username: str = Field(min_length=1, max_length=256)
    email: str = Field(min_length=3, max_length=256, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(min_length=1, max_length=128)


class JwtResponse(BaseModel):
    """
    Response model for successful signin.
    """
    accessToken: str  # Bearer token for the Authorization header
    tokenType: str = "Bearer"
    id: int
    username: str
    email: str
    role: str  # "MEMBER" or "ADMIN"


class MessageResponse(BaseModel):
    message: str
