"""Channel models."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from anomanet.utils.clock import utc_now


ChannelType = Literal[
    "lobby",
    "mysteries",
    "tech-support",
    "off-topic",
    "signals",
    "archives",
    "private",
    "redacted",
    "query",
]


class Channel(BaseModel):
    """A chat channel; `hidden` channels stay out of the list until discovered."""

    id: str
    name: str
    type: ChannelType
    locked: bool
    unread_count: int = Field(default=0, ge=0)
    unlocked_at: datetime | None = None
    description: str | None = None
    hidden: bool = False


class QueryWindow(Channel):
    """Private message window with another user. Never locked."""

    type: Literal["query"] = "query"
    locked: bool = False
    target_user_id: str
    target_username: str


class ChannelState(BaseModel):
    channels: list[Channel] = Field(default_factory=list)
    query_windows: list[QueryWindow] = Field(default_factory=list)
    last_updated: datetime = Field(default_factory=utc_now)
