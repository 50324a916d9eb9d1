from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from memos_mcp.core.client import MemosClient, MemosContractError, Transport
from memos_mcp.core.models import AuthUser

_TOOL = "auth"


class _CurrentUser(BaseModel):
    model_config = ConfigDict(extra="ignore")

    user: AuthUser


class _SignIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    access_token: str = Field(alias="accessToken", min_length=1)


class AuthService:
    def __init__(self, client: Transport):
        self.client = client

    async def current_user(self) -> AuthUser:
        """Return the user the session's credential belongs to."""
        data = await self.client.request_model(
            _CurrentUser, "GET", "auth/me", tool=_TOOL
        )
        return data.user

    async def sign_in(self, username: str, password: str) -> MemosClient:
        """
        Exchange username/password for a short-lived credential.

        Returns a new derived session; the caller's session is untouched. The
        caller owns the derived session and must release it with
        ``await session.cleanup()`` (or ``async with session:``).
        """
        if not username or not password:
            raise MemosContractError("sign_in requires a username and a password.")
        body = {"passwordCredentials": {"username": username, "password": password}}
        data = await self.client.request_model(
            _SignIn, "POST", "auth/signin", json=body, tool=_TOOL
        )
        return self.client.derive(data.access_token)


__all__ = ["AuthService"]
