# app/api/routers/auth.py
from fastapi import APIRouter

from app.schemas.auth import JwtResponse, MessageResponse, SigninRequest, SignupRequest
from app.services.authenticator import Authenticator

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signin", response_model=JwtResponse)
async def signin(body: SigninRequest):
    """
    Authenticate a user and issue an access token.

    Args:
        body: Request body containing username and password

    Returns:
        JwtResponse: accessToken plus the user's id, username, email and role

    Raises:
        InvalidCredentialsError (401): Unknown username or wrong password.
            Both cases produce the same response.
    """
    result = await Authenticator().sign_in(body.username, body.password)
    return JwtResponse(
        accessToken=result.access_token,
        id=result.id,
        username=result.username,
        email=result.email,
        role=result.role.value,
    )


@router.post("/signup", response_model=MessageResponse)
async def signup(body: SignupRequest):
    """
    Register a new account with the MEMBER role.

    No token is issued; the client signs in afterwards.

    Raises:
        UsernameTakenError (400): "Error: Username is already taken!"
        EmailTakenError (400): "Error: Email is already in use!"
    """
    await Authenticator().sign_up(body.username, body.email, body.password)
    return MessageResponse(message="User registered successfully!")
