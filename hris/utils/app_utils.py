import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

import bcrypt
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from pydantic import BaseModel
from pytz import UTC

from hris.config import settings
from hris.db import users_collection
from hris.exceptions import AuthenticationError, get_user_exception
from hris.models.base import CamelModel
from hris.models.users import UserRole

logger = logging.getLogger(__name__)

oauth2_bearer = OAuth2PasswordBearer(tokenUrl="api/auth/login")


class Token(CamelModel):
    token: str
    token_type: str
    user: dict


class Identity(BaseModel):
    """Who is calling: the only part of a user the rest of the app looks at."""

    id: str
    email: str
    role: UserRole
    name: Optional[str] = None


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt()
    hashed_password = bcrypt.hashpw(password.encode("utf-8"), salt)
    return hashed_password.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not isinstance(hashed_password, str) or len(hashed_password) < 10:
        return False

    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError as e:
        # malformed hash in the database; same answer as a wrong password
        logger.warning("bcrypt check failed: %s", e)
        return False


def create_access_token(payload: Dict[str, Any], expiry: Optional[timedelta] = None) -> str:
    if expiry is None:
        expiry = timedelta(hours=settings.ACCESS_TOKEN_EXPIRE_HOURS)

    data_to_encode = {"data": payload}
    data_to_encode.update({"exp": datetime.now(UTC) + expiry})
    encoded_data: str = jwt.encode(data_to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    return encoded_data


def authenticate_user(email: str, password: str):
    """
    authenticates user
    args:-
        - email: login e-mail, compared case-insensitively
        - password: plain password
    Returns the stored user record or False. Unknown e-mail and wrong password
    are deliberately indistinguishable to the caller.
    """
    email = email.strip().lower()
    user = next(
        (u for u in users_collection.find() if (u.get("email") or "").lower() == email),
        None,
    )
    if not user:
        return False

    if not verify_password(plain_password=password, hashed_password=user.get("password")):
        return False
    return user


def identity_from_user(user: dict) -> Identity:
    return Identity(id=user["id"], email=user["email"], role=user["role"], name=user.get("name"))


async def get_current_user(token: str = Depends(oauth2_bearer)) -> Identity:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.info("Rejected bearer token: %s", e)
        raise AuthenticationError(detail="Could not validate user.")

    data = payload.get("data")
    if not isinstance(data, dict) or data.get("id") is None:
        raise AuthenticationError(detail="Invalid token data.")

    user = users_collection.find_one({"id": data["id"]})
    if not user:
        raise get_user_exception()

    return identity_from_user(user)
