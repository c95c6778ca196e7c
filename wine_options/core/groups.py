from __future__ import annotations

import logging
import random
import string
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from threading import RLock
from typing import Callable, Dict, List, Optional

from .errors import GroupFullError, GroupNotFoundError
from .models import ScoreSummary

LOGGER = logging.getLogger(__name__)

GROUP_CODE_LENGTH = 8
GROUP_CODE_ALPHABET = string.ascii_uppercase + string.digits
DEFAULT_MAX_MEMBERS = 10
DEFAULT_GROUP_LIFETIME = timedelta(hours=24)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class GroupMember:
    player_id: str
    player_name: str
    joined_at: datetime
    score: Optional[ScoreSummary] = None


@dataclass
class WineGameGroup:
    """A shared challenge other players join with a short code."""

    code: str
    name: str
    creator_id: str
    created_at: datetime
    expires_at: datetime
    max_members: int = DEFAULT_MAX_MEMBERS
    is_active: bool = True
    members: List[GroupMember] = field(default_factory=list)

    def find_member(self, player_id: str) -> Optional[GroupMember]:
        for member in self.members:
            if member.player_id == player_id:
                return member
        return None


class GroupRegistry:
    """In-memory store of group challenges."""

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = _utcnow,
        lifetime: timedelta = DEFAULT_GROUP_LIFETIME,
    ) -> None:
        self._groups: Dict[str, WineGameGroup] = {}
        self._rng = rng or random.Random()
        self._clock = clock
        self._lifetime = lifetime
        self._lock = RLock()

    def _new_code(self) -> str:
        for _ in range(64):
            code = "".join(self._rng.choice(GROUP_CODE_ALPHABET) for _ in range(GROUP_CODE_LENGTH))
            if code not in self._groups:
                return code
        raise RuntimeError("Unable to allocate a unique group code.")

    def create_group(
        self,
        name: str,
        creator_id: str,
        creator_name: str,
        summary: Optional[ScoreSummary] = None,
    ) -> WineGameGroup:
        if not name.strip():
            raise ValueError("Group name must not be empty.")
        if not creator_name.strip():
            raise ValueError("Player name must not be empty.")

        now = self._clock()
        with self._lock:
            self._drop_expired(now)
            group = WineGameGroup(
                code=self._new_code(),
                name=name.strip(),
                creator_id=creator_id,
                created_at=now,
                expires_at=now + self._lifetime,
            )
            self._groups[group.code] = group
            self.join_group(group.code, creator_name, creator_id, summary)
        LOGGER.info("Created group %s (%s) for %s", group.code, group.name, creator_id)
        return group

    def _drop_expired(self, now: datetime) -> None:
        expired = [code for code, group in self._groups.items() if now >= group.expires_at]
        for code in expired:
            self._groups.pop(code).is_active = False
        if expired:
            LOGGER.info("Dropped %s expired groups", len(expired))

    def get_group(self, code: str) -> WineGameGroup:
        with self._lock:
            group = self._groups.get(code.strip().upper())
            if group is None or not group.is_active:
                raise GroupNotFoundError("Group not found or expired")
            if self._clock() >= group.expires_at:
                group.is_active = False
                del self._groups[group.code]
                raise GroupNotFoundError("Group not found or expired")
            return group

    def join_group(
        self,
        code: str,
        player_name: str,
        player_id: str,
        summary: Optional[ScoreSummary] = None,
    ) -> WineGameGroup:
        if not player_name.strip():
            raise ValueError("Player name must not be empty.")

        with self._lock:
            group = self.get_group(code)
            existing = group.find_member(player_id)
            if existing is not None:
                if summary is not None:
                    existing.score = summary
                return group

            if len(group.members) >= group.max_members:
                raise GroupFullError("Group is full")

            group.members.append(
                GroupMember(
                    player_id=player_id,
                    player_name=player_name.strip(),
                    joined_at=self._clock(),
                    score=summary,
                )
            )
        LOGGER.info("%s joined group %s", player_id, group.code)
        return group

    def record_score(self, code: str, player_id: str, summary: ScoreSummary) -> None:
        with self._lock:
            group = self.get_group(code)
            member = group.find_member(player_id)
            if member is None:
                raise GroupNotFoundError(f"{player_id} is not a member of group {group.code}")
            member.score = summary

    def leaderboard(self, code: str) -> List[GroupMember]:
        """Members with a score first, best total first; ties keep join order."""
        with self._lock:
            group = self.get_group(code)
            return sorted(
                group.members,
                key=lambda member: (member.score is None, -(member.score.total if member.score else 0)),
            )
