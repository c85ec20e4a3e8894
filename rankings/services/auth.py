"""Bearer-token authorization against the platform identity service."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import httpx

from rankings.core.config import settings
from rankings.core.errors import AuthorizationError, ConfigurationError
from rankings.core.logging import get_logger

log = get_logger("auth")


@dataclass(frozen=True)
class Principal:
    user_id: str
    role: str


class Authorizer(ABC):
    """``authorize(token) -> Principal`` or raise AuthorizationError."""

    @abstractmethod
    async def authorize(self, token: Optional[str]) -> Principal:
        ...


class HttpAuthorizer(Authorizer):
    """Resolves a token by calling ``AUTH_URL`` with it as a bearer credential.

    The identity service is expected to answer 2xx with
    ``{"user_id": ..., "role": ...}`` for a valid token.
    """

    def __init__(self, auth_url: Optional[str] = None, client: Optional[httpx.AsyncClient] = None):
        self.auth_url = auth_url or settings.AUTH_URL
        self.client = client

    async def authorize(self, token: Optional[str]) -> Principal:
        if not token:
            raise AuthorizationError("Missing authorization header")
        if not self.auth_url:
            raise ConfigurationError("AUTH_URL not configured")

        headers = {"Authorization": f"Bearer {token}"}
        try:
            if self.client is not None:
                resp = await self.client.get(self.auth_url, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=10.0) as client:
                    resp = await client.get(self.auth_url, headers=headers)
        except httpx.HTTPError as exc:
            log.error(f"Identity service unreachable: {exc}")
            raise AuthorizationError("Unauthorized") from exc

        if resp.status_code != 200:
            raise AuthorizationError("Unauthorized")

        try:
            body = resp.json()
        except ValueError as exc:
            raise AuthorizationError("Unauthorized") from exc
        if not isinstance(body, dict):
            raise AuthorizationError("Unauthorized")

        user_id = body.get("user_id") or body.get("id")
        if not user_id:
            raise AuthorizationError("Unauthorized")
        return Principal(user_id=str(user_id), role=str(body.get("role") or ""))


def require_role(principal: Principal, role: str = settings.ADMIN_ROLE) -> Principal:
    if principal.role != role:
        raise AuthorizationError("Admin access required", status_code=403)
    return principal
