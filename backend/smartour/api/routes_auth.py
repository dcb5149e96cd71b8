"""
Dashboard login. A single configured account; no sessions or tokens are issued.
"""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel
import logging
import secrets

from smartour.core.config import settings
from smartour.core.rate_limiting import limiter, LOGIN_LIMIT

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    success: bool
    message: str


def credentials_match(username: str, password: str) -> bool:
    user_ok = secrets.compare_digest(username.encode(), settings.dashboard_username.encode())
    pass_ok = secrets.compare_digest(password.encode(), settings.dashboard_password.encode())
    return user_ok and pass_ok


@router.post("/login", response_model=LoginResponse)
@limiter.limit(LOGIN_LIMIT)
def login(request: Request, body: LoginRequest):
    if credentials_match(body.username, body.password):
        logger.info(f"Dashboard login succeeded for {body.username}")
        return LoginResponse(success=True, message="Login successful")

    logger.warning(f"Dashboard login failed for {body.username}")
    return JSONResponse(
        status_code=401,
        content={"success": False, "message": "Invalid username or password"},
    )
