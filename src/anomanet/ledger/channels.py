"""Channel ledger: per-user channel list and query windows."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping

from anomanet.errors import NotFoundError
from anomanet.ledger.base import DocumentLedger
from anomanet.models.channel import Channel, ChannelState, QueryWindow
from anomanet.storage.paths import user_channel_state_path


def create_default_channel_state(now: datetime) -> ChannelState:
    """Seven channels: four open, three locked behind unlock conditions."""

    channels = [
        Channel(id="lobby", name="lobby", type="lobby", locked=False,
                description="Main gathering place for AnomaNet users"),
        Channel(id="mysteries", name="mysteries", type="mysteries", locked=False,
                description="Active cases and investigations"),
        Channel(id="tech-support", name="tech-support", type="tech-support", locked=False,
                description="Help and command documentation"),
        Channel(id="off-topic", name="off-topic", type="off-topic", locked=False,
                description="Casual chat"),
        Channel(id="signals", name="signals", type="signals", locked=True,
                description="Signal receiver for evidence pulls"),
        Channel(id="archives", name="archives", type="archives", locked=True,
                description="Search historical records"),
        Channel(id="private", name="private", type="private", locked=True,
                description="Private communications"),
    ]
    return ChannelState(channels=channels, query_windows=[], last_updated=now)


def get_channel_by_id(state: ChannelState, channel_id: str) -> Channel | None:
    """Regular channels first, then query windows."""

    for channel in state.channels:
        if channel.id == channel_id:
            return channel
    for window in state.query_windows:
        if window.id == channel_id:
            return window
    return None


def is_channel_unlocked(state: ChannelState, channel_id: str) -> bool:
    channel = get_channel_by_id(state, channel_id)
    return channel is not None and not channel.locked


def get_visible_channels(state: ChannelState) -> list[Channel]:
    return [c for c in state.channels if not c.hidden]


class ChannelLedger(DocumentLedger):
    """Async operations over `users/{user_id}/channels.json`."""

    async def get_channel_state(self, user_id: str) -> ChannelState | None:
        return await self._load(user_channel_state_path(user_id), ChannelState)

    async def get_or_create_channel_state(self, user_id: str) -> ChannelState:
        existing = await self.get_channel_state(user_id)
        if existing is not None:
            return existing

        state = create_default_channel_state(self.now())
        await self.save_channel_state(user_id, state)
        return state

    async def save_channel_state(self, user_id: str, state: ChannelState) -> None:
        state.last_updated = self.now()
        await self._save(user_channel_state_path(user_id), state)

    async def update_channel(self, user_id: str, channel_id: str, updates: Mapping[str, Any]) -> ChannelState:
        """Apply `updates` to a regular channel or a query window."""

        state = await self.get_or_create_channel_state(user_id)
        for index, channel in enumerate(state.channels):
            if channel.id == channel_id:
                state.channels[index] = Channel.model_validate(
                    {**channel.model_dump(), **updates, "id": channel_id}
                )
                break
        else:
            for index, window in enumerate(state.query_windows):
                if window.id == channel_id:
                    state.query_windows[index] = QueryWindow.model_validate(
                        {**window.model_dump(), **updates, "id": channel_id, "type": "query"}
                    )
                    break
            else:
                raise NotFoundError(f"Channel not found: {channel_id}")

        await self.save_channel_state(user_id, state)
        return state

    async def unlock_channel(self, user_id: str, channel_id: str) -> ChannelState:
        return await self.update_channel(user_id, channel_id, {"locked": False, "unlocked_at": self.now()})

    async def discover_channel(self, user_id: str, channel_id: str) -> ChannelState:
        """Reveal a hidden channel and unlock it."""

        return await self.update_channel(
            user_id,
            channel_id,
            {"hidden": False, "locked": False, "unlocked_at": self.now()},
        )

    async def mark_channel_read(self, user_id: str, channel_id: str) -> ChannelState:
        return await self.update_channel(user_id, channel_id, {"unread_count": 0})

    async def increment_unread_count(self, user_id: str, channel_id: str, increment: int = 1) -> ChannelState:
        state = await self.get_or_create_channel_state(user_id)
        channel = get_channel_by_id(state, channel_id)
        if channel is None:
            raise NotFoundError(f"Channel not found: {channel_id}")
        return await self.update_channel(user_id, channel_id, {"unread_count": channel.unread_count + increment})

    async def add_query_window(self, user_id: str, window: QueryWindow) -> ChannelState:
        """Open a query window; an existing id is left untouched."""

        state = await self.get_or_create_channel_state(user_id)
        if any(q.id == window.id for q in state.query_windows):
            return state
        state.query_windows.append(window)
        await self.save_channel_state(user_id, state)
        return state

    async def remove_query_window(self, user_id: str, window_id: str) -> ChannelState:
        state = await self.get_or_create_channel_state(user_id)
        state.query_windows = [q for q in state.query_windows if q.id != window_id]
        await self.save_channel_state(user_id, state)
        return state

    async def update_query_window(self, user_id: str, window_id: str, updates: Mapping[str, Any]) -> ChannelState:
        state = await self.get_or_create_channel_state(user_id)
        if not any(q.id == window_id for q in state.query_windows):
            raise NotFoundError(f"Query window not found: {window_id}")
        return await self.update_channel(user_id, window_id, updates)
