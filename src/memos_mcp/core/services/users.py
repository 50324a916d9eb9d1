from __future__ import annotations

from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field

from memos_mcp.core.client import MemosContractError, Transport
from memos_mcp.core.models import PersonalAccessToken, User

_TOOL = "users"


class _CreatedToken(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    personal_access_token: PersonalAccessToken = Field(alias="personalAccessToken")
    token: str


class UserService:
    """User management and personal access tokens, on the caller's session."""

    def __init__(self, client: Transport):
        self.client = client

    async def create(self, user: User) -> User:
        body = user.to_wire()
        if user.password is not None:
            body["password"] = user.password.get_secret_value()
        return await self.client.request_model(
            User, "POST", "users", json=body, tool=_TOOL
        )

    async def delete(self, user: User) -> None:
        if not user.name:
            raise MemosContractError("delete requires a user name.")
        await self.client.request_empty("DELETE", user.name, tool=_TOOL)

    async def create_personal_access_token(
        self, user: User, description: str, expires_in_days: int
    ) -> Tuple[PersonalAccessToken, str]:
        """
        Issue a personal access token for `user`.

        Returns the token record and its plaintext value. The plaintext is
        only ever returned here; the server cannot produce it again.
        """
        if not user.name:
            raise MemosContractError(
                "create_personal_access_token requires a user name."
            )
        body = {
            "parent": user.name,
            "description": description,
            "expiresInDays": expires_in_days,
        }
        data = await self.client.request_model(
            _CreatedToken,
            "POST",
            f"{user.name}/personalAccessTokens",
            json=body,
            tool=_TOOL,
        )
        return data.personal_access_token, data.token

    async def delete_personal_access_token(self, token: PersonalAccessToken) -> None:
        if not token.name:
            raise MemosContractError(
                "delete_personal_access_token requires a token name."
            )
        await self.client.request_empty("DELETE", token.name, tool=_TOOL)


__all__ = ["UserService"]
