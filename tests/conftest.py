import pytest
from memos_mcp.core.client import MemosClient

BASE_URL = "http://memos.test/api/v1"


def api(path: str) -> str:
    return f"{BASE_URL}/{path}"


def note_payload(name: str = "memos/abc", content: str = "hello", **extra) -> dict:
    payload = {
        "name": name,
        "state": "NORMAL",
        "creator": "users/1",
        "createTime": "2025-01-02T03:04:05Z",
        "updateTime": "2025-01-02T03:04:05Z",
        "displayTime": "2025-01-02T03:04:05Z",
        "content": content,
        "visibility": "PRIVATE",
        "tags": [],
        "pinned": False,
        "attachments": [],
        "relations": [],
        "reactions": [],
        "parent": "",
        "snippet": content,
    }
    payload.update(extra)
    return payload


@pytest.fixture
def client():
    return MemosClient(base_url=BASE_URL, token="memos_pat_test")
