"""Admin session checks.

The admin panel sends its session token as `Authorization: Bearer <token>`;
it is compared against `settings.admin_api_token`. With no token configured
nobody is an admin.
"""

from __future__ import annotations
import secrets
from typing import Optional

from fastapi import Depends, HTTPException, Request
from starlette import status

from storefront_fx.core.config import Settings


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def is_admin_token(settings: Settings, authorization: Optional[str]) -> bool:
    expected = settings.admin_api_token
    token = _bearer_token(authorization)
    if not expected or not token:
        return False
    return secrets.compare_digest(token.encode(), expected.encode())


def is_admin_request(
    request: Request, settings: Settings = Depends(get_app_settings)
) -> bool:
    return is_admin_token(settings, request.headers.get("authorization"))


def require_admin(is_admin: bool = Depends(is_admin_request)) -> bool:
    if not is_admin:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="admin session required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return True
