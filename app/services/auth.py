from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError
from typing import Annotated
from ..config import SECRET_KEY, ALGORITHM, AUTH_TOKEN_URL
import logging

# Logger
logger = logging.getLogger(__name__)

# The identity provider issues the tokens, this service only verifies them
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=AUTH_TOKEN_URL)


async def get_current_user(
    token: Annotated[str, Depends(oauth2_scheme)]):
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if not SECRET_KEY:
        logger.error("SECRET_KEY is not configured, rejecting all tokens")
        raise credentials_exception
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM],
                             options={"verify_aud": False})
        user_id: str = payload.get("sub")
        email: str = payload.get("email")
        if user_id is None:
            raise credentials_exception
        return {
            'id': user_id,
            'email': email,
        }
    except JWTError as e:
        logger.warning(f"Rejected token: {e}")
        raise credentials_exception
