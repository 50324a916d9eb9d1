import logging

import pytest
import respx
from httpx import Response
from memos_mcp.core.client import MemosHTTPError
from memos_mcp.transports.bootstrap import connect_from_env

HOST_API = "http://memos.env:5230/api/v1"


@pytest.fixture(autouse=True)
def memos_env(monkeypatch):
    monkeypatch.setattr("memos_mcp.core.config.load_dotenv", lambda *a, **k: None)
    monkeypatch.setenv("MEMOS_HOST", "memos.env:5230")
    monkeypatch.setenv("MEMOS_TOKEN", "memos_pat_env")


@pytest.mark.asyncio
@respx.mock
async def test_connect_from_env_verifies_identity(caplog):
    route = respx.get(f"{HOST_API}/auth/me").mock(
        return_value=Response(
            200,
            json={"user": {"username": "alice", "role": "USER", "state": "NORMAL"}},
        )
    )

    with caplog.at_level(logging.INFO, logger="memos_mcp.bootstrap"):
        client = await connect_from_env()
    await client.aclose()

    assert route.called
    assert client.base_url == HOST_API
    assert client.derived is False
    messages = [r.getMessage() for r in caplog.records]
    assert "Successfully authenticated to memos server as user: alice" in messages


@pytest.mark.asyncio
@respx.mock
async def test_connect_from_env_rejected_credential_is_fatal():
    respx.get(f"{HOST_API}/auth/me").mock(return_value=Response(401, text="bad token"))

    with pytest.raises(MemosHTTPError) as exc:
        await connect_from_env()

    assert exc.value.status_code == 401


@pytest.mark.asyncio
async def test_connect_from_env_missing_config_is_fatal(monkeypatch):
    monkeypatch.delenv("MEMOS_TOKEN")

    with pytest.raises(ValueError):
        await connect_from_env()
