from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from memos_mcp.core.client import MemosContractError, Transport
from memos_mcp.core.models import Attachment, Note, Reaction, Relation

# Fields a PATCH is allowed to touch; everything else on a Note is read-only.
UPDATE_MASK = ("content", "state", "visibility", "tags", "pinned")

_TOOL = "notes"


class _Wrapper(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class _NotePage(_Wrapper):
    memos: List[Note] = Field(default_factory=list)
    next_page_token: str = Field(default="", alias="nextPageToken")


class _Attachments(_Wrapper):
    attachments: List[Attachment] = Field(default_factory=list)


class _Relations(_Wrapper):
    relations: List[Relation] = Field(default_factory=list)


class _Reactions(_Wrapper):
    reactions: List[Reaction] = Field(default_factory=list)


def _require_name(name: Optional[str], operation: str) -> str:
    if not name:
        raise MemosContractError(f"{operation} requires a note name.")
    return name


class NoteService:
    """Memos (notes) and their comments, attachments, relations and reactions."""

    def __init__(self, client: Transport):
        self.client = client

    async def create(self, note: Note) -> Note:
        return await self.client.request_model(
            Note, "POST", "memos", json=note.to_wire(), tool=_TOOL
        )

    async def get(self, name: str) -> Note:
        name = _require_name(name, "get")
        return await self.client.request_model(Note, "GET", name, tool=_TOOL)

    async def update(self, note: Note) -> Note:
        """PATCH the note; only UPDATE_MASK fields are sent as mutable."""
        name = _require_name(note.name, "update")
        body = note.to_wire(include={"name", *UPDATE_MASK})
        return await self.client.request_model(
            Note,
            "PATCH",
            name,
            params={"updateMask": ",".join(UPDATE_MASK)},
            json=body,
            tool=_TOOL,
        )

    async def delete(self, name: str) -> None:
        name = _require_name(name, "delete")
        await self.client.request_empty("DELETE", name, tool=_TOOL)

    async def list(
        self, *, page_size: Optional[int] = None, filter: Optional[str] = None
    ) -> List[Note]:
        """
        Drain every page of the memo list, following nextPageToken until the
        server stops returning one. Pages are fetched in order; a failure on
        any page fails the whole call.
        """
        notes: List[Note] = []
        page_token = ""
        while True:
            params: Dict[str, Any] = {}
            if page_size is not None:
                params["pageSize"] = page_size
            if filter:
                params["filter"] = filter
            if page_token:
                params["pageToken"] = page_token

            page = await self.client.request_model(
                _NotePage, "GET", "memos", params=params or None, tool=_TOOL
            )
            notes.extend(page.memos)

            if not page.next_page_token:
                break
            page_token = page.next_page_token
        return notes

    # --- Comments ---

    async def create_comment(self, parent_name: str, comment: Note) -> Note:
        parent_name = _require_name(parent_name, "create_comment")
        return await self.client.request_model(
            Note,
            "POST",
            f"{parent_name}/comments",
            json=comment.to_wire(),
            tool=_TOOL,
        )

    async def list_comments(self, name: str) -> List[Note]:
        name = _require_name(name, "list_comments")
        page = await self.client.request_model(
            _NotePage, "GET", f"{name}/comments", tool=_TOOL
        )
        return page.memos

    # --- Attachments ---

    async def list_attachments(self, name: str) -> List[Attachment]:
        name = _require_name(name, "list_attachments")
        data = await self.client.request_model(
            _Attachments, "GET", f"{name}/attachments", tool=_TOOL
        )
        return data.attachments

    async def set_attachments(self, name: str, attachments: List[Attachment]) -> None:
        name = _require_name(name, "set_attachments")
        body = {"name": name, "attachments": [a.to_wire() for a in attachments]}
        await self.client.request_empty(
            "POST", f"{name}/attachments", json=body, tool=_TOOL
        )

    # --- Relations ---

    async def list_relations(self, name: str) -> List[Relation]:
        name = _require_name(name, "list_relations")
        data = await self.client.request_model(
            _Relations, "GET", f"{name}/relations", tool=_TOOL
        )
        return data.relations

    async def set_relations(self, name: str, relations: List[Relation]) -> None:
        name = _require_name(name, "set_relations")
        body = {"name": name, "relations": [r.to_wire() for r in relations]}
        await self.client.request_empty(
            "POST", f"{name}/relations", json=body, tool=_TOOL
        )

    # --- Reactions ---

    async def list_reactions(self, name: str) -> List[Reaction]:
        name = _require_name(name, "list_reactions")
        data = await self.client.request_model(
            _Reactions, "GET", f"{name}/reactions", tool=_TOOL
        )
        return data.reactions

    async def upsert_reaction(self, name: str, reaction: Reaction) -> Reaction:
        name = _require_name(name, "upsert_reaction")
        body = {"name": name, "reaction": reaction.to_wire()}
        return await self.client.request_model(
            Reaction, "POST", f"{name}/reactions", json=body, tool=_TOOL
        )

    async def delete_reaction(self, reaction_name: str) -> None:
        if not reaction_name:
            raise MemosContractError("delete_reaction requires a reaction name.")
        await self.client.request_empty("DELETE", reaction_name, tool=_TOOL)


__all__ = ["NoteService", "UPDATE_MASK"]
