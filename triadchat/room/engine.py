"""Rooms and the engine that tracks them and the active one."""

from __future__ import annotations

import re
import time
from collections.abc import Iterable
from dataclasses import dataclass, field

from triadchat.message import RoomId
from triadchat.modes import AiMode
from triadchat.room.member import Member

AI_MEMBER_ID = "ops-ai"

_INDEX = re.compile(r"\+?[0-9]+")


class UnknownRoomError(LookupError):
    """Raised when a room id or index does not name a known room."""


@dataclass
class Room:
    id: RoomId
    members: list[Member] = field(default_factory=list)
    ai_mode: AiMode | None = None


class RoomEngine:
    """Keeps the known rooms in creation order and which one is active."""

    def __init__(self) -> None:
        self._rooms: list[Room] = []
        self._active_room_id: RoomId | None = None
        self._next_room_number = 0

    def create_room(
        self, owner: str, peer_ids: Iterable[str], ai_mode: AiMode | None = None
    ) -> Room:
        """Create a room owned by ``owner`` and make it active."""
        members = [Member.human(owner), *(Member.human(peer) for peer in peer_ids)]
        if ai_mode is not None:
            members.append(Member.ai(AI_MEMBER_ID, ai_mode))

        self._next_room_number += 1
        ts_ms = max(time.time_ns(), 0) // 1_000_000
        room = Room(f"{owner}-{ts_ms}-{self._next_room_number}", members, ai_mode)
        self._active_room_id = room.id
        self._rooms.append(room)
        return room

    def insert_room(self, room: Room) -> None:
        """Add a room unless one with its id exists, and make it active."""
        if not any(existing.id == room.id for existing in self._rooms):
            self._rooms.append(room)
        self._active_room_id = room.id

    def create_remote_room(
        self, room_id: str, member_ids: Iterable[str], ai_mode: AiMode | None = None
    ) -> Room:
        """Register a room announced by a peer and make it active."""
        members = []
        for member_id in member_ids:
            if member_id == AI_MEMBER_ID:
                if ai_mode is not None:
                    members.append(Member.ai(member_id, ai_mode))
                else:
                    members.append(Member.remote_ai(member_id))
            else:
                members.append(Member.human(member_id))
        room = Room(str(room_id), members, ai_mode)
        self.insert_room(room)
        return room

    def rooms(self) -> list[Room]:
        return list(self._rooms)

    def active_room_id(self) -> str | None:
        return self._active_room_id

    def resolve_room(self, target: str) -> Room | None:
        """Find a room by 1-based index or by id."""
        if _INDEX.fullmatch(target) is not None:
            index = int(target)
            if 1 <= index <= len(self._rooms):
                return self._rooms[index - 1]
            return None
        return next((room for room in self._rooms if room.id == target), None)

    def switch_active(self, room_id: str) -> None:
        room = self.resolve_room(room_id)
        if room is None:
            raise UnknownRoomError(f"unknown room id: {room_id}")
        self._active_room_id = room.id

    def active_room(self) -> Room | None:
        if self._active_room_id is None:
            return None
        return next((room for room in self._rooms if room.id == self._active_room_id), None)