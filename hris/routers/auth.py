import logging

from fastapi import APIRouter

from hris.exceptions import AuthenticationError, ValidationError
from hris.models.users import public_user
from hris.schemas.auth import LoginRequest
from hris.utils.app_utils import Token, authenticate_user, create_access_token

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=Token)
async def login_for_access_token(credentials: LoginRequest):
    """
    Exchange e-mail and password for a bearer token.
    Args:
        credentials (LoginRequest): JSON body with email and password. The e-mail
            is trimmed and lower-cased before lookup.
    Returns:
        Token: {"token": str, "tokenType": "bearer", "user": profile without password}
    Raises:
        ValidationError: 400 if either field is empty
        AuthenticationError: 401 "Invalid credentials" for an unknown e-mail or a
            wrong password alike
    """
    email = credentials.email.strip().lower()
    password = credentials.password.strip()

    if not email or not password:
        raise ValidationError(detail="Email and password are required")

    user = authenticate_user(email=email, password=password)
    if not user:
        raise AuthenticationError(detail="Invalid credentials")

    token = create_access_token(payload={"id": user["id"], "email": user["email"], "role": user["role"]})
    logger.info("User %s logged in", user["id"])

    return Token(token=token, token_type="bearer", user=public_user(user))
