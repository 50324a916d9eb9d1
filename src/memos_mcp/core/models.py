from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr


class WireModel(BaseModel):
    """
    Base for Memos API payloads.
    Fields are snake_case in Python and camelCase on the wire; unknown keys
    from newer servers are ignored.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_wire(self, **kwargs: Any) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True, **kwargs)


# --- Notes ---


class NoteState(str, Enum):
    STATE_UNSPECIFIED = "STATE_UNSPECIFIED"
    NORMAL = "NORMAL"
    ARCHIVED = "ARCHIVED"


class Visibility(str, Enum):
    VISIBILITY_UNSPECIFIED = "VISIBILITY_UNSPECIFIED"
    PRIVATE = "PRIVATE"
    PROTECTED = "PROTECTED"
    PUBLIC = "PUBLIC"


class RelationType(str, Enum):
    TYPE_UNSPECIFIED = "TYPE_UNSPECIFIED"
    REFERENCE = "REFERENCE"
    COMMENT = "COMMENT"


class Location(WireModel):
    placeholder: str = ""
    latitude: float = 0.0
    longitude: float = 0.0


class Attachment(WireModel):
    name: str = ""
    create_time: Optional[datetime] = Field(default=None, alias="createTime")
    filename: str = ""
    external_link: str = Field(default="", alias="externalLink")
    mime_type: str = Field(alias="type")
    # int64 travels as a JSON string
    size: str = ""
    memo: str = ""


class MemoRef(WireModel):
    name: str = ""
    snippet: str = ""


class Relation(WireModel):
    memo: MemoRef = Field(default_factory=MemoRef)
    related_memo: MemoRef = Field(default_factory=MemoRef, alias="relatedMemo")
    relation_type: RelationType = Field(alias="type")


class Reaction(WireModel):
    name: Optional[str] = None
    creator: Optional[str] = None
    content_id: str = Field(default="", alias="contentId")
    reaction_type: str = Field(default="", alias="reactionType")
    create_time: Optional[datetime] = Field(default=None, alias="createTime")


class Note(WireModel):
    """A memo. `name` stays empty until the server assigns one on creation."""

    name: Optional[str] = Field(
        default=None, description="Unique identifier of the note, e.g. memos/abc123."
    )
    state: NoteState = Field(
        default=NoteState.NORMAL, description="The state of the note."
    )
    creator: Optional[str] = None
    create_time: Optional[datetime] = Field(
        default=None, alias="createTime", description="The creation time of the note."
    )
    update_time: Optional[datetime] = Field(
        default=None,
        alias="updateTime",
        description="The last update time of the note.",
    )
    display_time: Optional[datetime] = Field(
        default=None, alias="displayTime", description="The display time of the note."
    )
    content: str = Field(description="The content of the note in Markdown format.")
    visibility: Visibility = Field(description="The visibility level of the note.")
    tags: List[str] = Field(
        default_factory=list,
        description=(
            "Tags associated with the note. To update tags, add tags in "
            "`#<tag>` format within the content."
        ),
    )
    pinned: bool = False
    attachments: List[Attachment] = Field(default_factory=list)
    relations: List[Relation] = Field(default_factory=list)
    reactions: List[Reaction] = Field(default_factory=list)
    property: Optional[Dict[str, Any]] = None
    parent: str = ""
    snippet: str = ""
    location: Optional[Location] = None


# --- Users: auth context ---


class AuthRole(str, Enum):
    ROLE_UNSPECIFIED = "ROLE_UNSPECIFIED"
    HOST = "HOST"
    ADMIN = "ADMIN"
    USER = "USER"


class AuthState(str, Enum):
    STATE_UNSPECIFIED = "STATE_UNSPECIFIED"
    NORMAL = "NORMAL"
    ARCHIVED = "ARCHIVED"


class AuthUser(WireModel):
    """The signed-in user as reported by auth/me."""

    name: str = ""
    role: AuthRole
    username: str
    email: str = ""
    display_name: str = Field(default="", alias="displayName")
    avatar_url: str = Field(default="", alias="avatarUrl")
    description: str = ""
    state: AuthState


# --- Users: user management context ---


class UserRole(str, Enum):
    ROLE_UNSPECIFIED = "ROLE_UNSPECIFIED"
    ADMIN = "ADMIN"
    USER = "USER"


class UserState(str, Enum):
    STATE_UNSPECIFIED = "STATE_UNSPECIFIED"
    NORMAL = "NORMAL"
    ARCHIVED = "ARCHIVED"


class User(WireModel):
    name: str = ""
    role: UserRole = UserRole.USER
    username: str
    email: str = ""
    display_name: str = Field(default="", alias="displayName")
    avatar_url: str = Field(default="", alias="avatarUrl")
    description: str = ""
    # write-only: sent on create, never part of to_wire()
    password: Optional[SecretStr] = Field(default=None, exclude=True)
    state: UserState = UserState.NORMAL


class PersonalAccessToken(WireModel):
    name: str
    description: str = ""
    created_at: datetime = Field(alias="createdAt")
    expires_at: Optional[datetime] = Field(default=None, alias="expiresAt")
    last_used_at: Optional[datetime] = Field(default=None, alias="lastUsedAt")


__all__ = [
    "WireModel",
    "NoteState",
    "Visibility",
    "RelationType",
    "Location",
    "Attachment",
    "MemoRef",
    "Relation",
    "Reaction",
    "Note",
    "AuthRole",
    "AuthState",
    "AuthUser",
    "UserRole",
    "UserState",
    "User",
    "PersonalAccessToken",
]
