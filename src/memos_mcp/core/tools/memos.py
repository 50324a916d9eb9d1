from __future__ import annotations

from typing import Dict, List, Optional

from memos_mcp.core.client import MemosClient
from memos_mcp.core.models import Attachment, Note, Reaction, Relation
from memos_mcp.core.registry import tool_annotations
from memos_mcp.core.services.notes import NoteService

_OK = {"status": "success"}


@tool_annotations(title="List notes", read_only=True)
async def list_memos(
    client: MemosClient,
    page_size: Optional[int] = None,
    filter: Optional[str] = None,
) -> List[Note]:
    """
    List all notes.
    Every page is fetched; page_size only changes how many notes each request
    carries. `filter` is passed to the server unchanged (CEL expression,
    e.g. `tag in ["work"]`).
    """
    return await NoteService(client).list(page_size=page_size, filter=filter)


@tool_annotations(title="Get a note", read_only=True)
async def get_memo(client: MemosClient, name: str) -> Note:
    """Get a memo (note) by its name field, e.g. memos/abc123."""
    return await NoteService(client).get(name)


@tool_annotations(title="Create a note")
async def create_memo(client: MemosClient, note: Note) -> Note:
    """Create a new memo (note) with given content."""
    return await NoteService(client).create(note)


@tool_annotations(title="Update a note", idempotent=True)
async def update_memo(client: MemosClient, note: Note) -> Note:
    """
    Update an existing memo (note) by its name field.
    Only content, state, visibility, tags and pinned are changed.
    """
    return await NoteService(client).update(note)


@tool_annotations(title="Delete a note", destructive=True)
async def delete_memo(client: MemosClient, name: str) -> Dict[str, str]:
    """Delete a memo (note) by its name field."""
    await NoteService(client).delete(name)
    return dict(_OK)


@tool_annotations(title="Create a note comment")
async def create_memo_comment(
    client: MemosClient, memo_name: str, comment: Note
) -> Note:
    """Create a memo (note) comment. The comment is itself a note."""
    return await NoteService(client).create_comment(memo_name, comment)


@tool_annotations(title="List note comments", read_only=True)
async def list_memo_comments(client: MemosClient, name: str) -> List[Note]:
    """List comments of a memo (note) by its name field."""
    return await NoteService(client).list_comments(name)


@tool_annotations(title="List note attachments", read_only=True)
async def list_memo_attachments(client: MemosClient, name: str) -> List[Attachment]:
    """List attachments of a memo (note)."""
    return await NoteService(client).list_attachments(name)


@tool_annotations(title="Set note attachments", idempotent=True)
async def set_memo_attachments(
    client: MemosClient, name: str, attachments: List[Attachment]
) -> Dict[str, str]:
    """Replace the attachments of a memo (note) with the given list."""
    await NoteService(client).set_attachments(name, attachments)
    return dict(_OK)


@tool_annotations(title="List note relations", read_only=True)
async def list_memo_relations(client: MemosClient, name: str) -> List[Relation]:
    """List relations (references and comments) of a memo (note)."""
    return await NoteService(client).list_relations(name)


@tool_annotations(title="Set note relations", idempotent=True)
async def set_memo_relations(
    client: MemosClient, name: str, relations: List[Relation]
) -> Dict[str, str]:
    """Replace the relations of a memo (note) with the given list."""
    await NoteService(client).set_relations(name, relations)
    return dict(_OK)


@tool_annotations(title="List note reactions", read_only=True)
async def list_memo_reactions(client: MemosClient, name: str) -> List[Reaction]:
    """List reactions on a memo (note)."""
    return await NoteService(client).list_reactions(name)


@tool_annotations(title="React to a note")
async def upsert_memo_reaction(
    client: MemosClient, name: str, reaction_type: str
) -> Reaction:
    """Add a reaction (an emoji such as 👍) to a memo (note)."""
    reaction = Reaction(content_id=name, reaction_type=reaction_type)
    return await NoteService(client).upsert_reaction(name, reaction)


@tool_annotations(title="Remove a note reaction", destructive=True)
async def delete_memo_reaction(client: MemosClient, reaction_name: str) -> Dict[str, str]:
    """Delete a reaction by its name, e.g. memos/abc123/reactions/7."""
    await NoteService(client).delete_reaction(reaction_name)
    return dict(_OK)
