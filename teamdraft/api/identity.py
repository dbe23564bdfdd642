from __future__ import annotations

import secrets
from collections.abc import Mapping

import structlog
from fastapi import HTTPException, Request

from teamdraft.core.config import get_settings

logger = structlog.get_logger(__name__)

GATEWAY_TOKEN_HEADER = "X-Gateway-Token"
USER_ID_HEADER = "X-User-Id"
USER_ID_MAX_LENGTH = 64


def is_valid_gateway_token(*, expected_token: str, received_token: str | None) -> bool:
    if not expected_token or not received_token:
        return False
    return secrets.compare_digest(expected_token, received_token)


def resolve_user_id(raw_user_id: str | None) -> str | None:
    if raw_user_id is None:
        return None
    user_id = raw_user_id.strip()
    if not user_id or len(user_id) > USER_ID_MAX_LENGTH:
        return None
    return user_id


def authenticate_headers(headers: Mapping[str, str]) -> str | None:
    """Acting user id forwarded by the authenticating gateway, if the request carries one."""
    if not is_valid_gateway_token(
        expected_token=get_settings().gateway_token,
        received_token=headers.get(GATEWAY_TOKEN_HEADER),
    ):
        return None
    return resolve_user_id(headers.get(USER_ID_HEADER))


def require_user_id(request: Request) -> str:
    user_id = authenticate_headers(request.headers)
    if user_id is None:
        logger.info("request_unauthenticated", path=request.url.path)
        raise HTTPException(status_code=401, detail={"code": "E_UNAUTHENTICATED"})
    return user_id
