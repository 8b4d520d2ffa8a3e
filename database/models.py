"""Records persisted by the promotion store."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True, slots=True)
class Location:
    id: str
    name: str
    prize: str
    emoji: str

    def info(self) -> Dict[str, str]:
        return {"name": self.name, "prize": self.prize, "emoji": self.emoji}


@dataclass(frozen=True, slots=True)
class VisitAttempt:
    """One adjudicated visit notification.

    ``access_time`` and ``user_agent`` are reported by the client and only
    displayed; ``timestamp`` is the server's receipt time.
    """

    id: int
    location_id: str
    access_time: Optional[str]
    ip: str
    user_agent: Optional[str]
    timestamp: str
    is_winner: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "locationId": self.location_id,
            "accessTime": self.access_time,
            "ip": self.ip,
            "userAgent": self.user_agent,
            "timestamp": self.timestamp,
            "isWinner": self.is_winner,
        }


@dataclass(frozen=True, slots=True)
class WinnerRecord:
    location_id: str
    attempt_id: int
    access_time: Optional[str]
    ip: str
    user_agent: Optional[str]
    timestamp: str

    @classmethod
    def from_attempt(cls, attempt: VisitAttempt) -> "WinnerRecord":
        return cls(
            location_id=attempt.location_id,
            attempt_id=attempt.id,
            access_time=attempt.access_time,
            ip=attempt.ip,
            user_agent=attempt.user_agent,
            timestamp=attempt.timestamp,
        )

    def to_attempt(self) -> VisitAttempt:
        return VisitAttempt(
            id=self.attempt_id,
            location_id=self.location_id,
            access_time=self.access_time,
            ip=self.ip,
            user_agent=self.user_agent,
            timestamp=self.timestamp,
            is_winner=True,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.attempt_id,
            "locationId": self.location_id,
            "accessTime": self.access_time,
            "ip": self.ip,
            "userAgent": self.user_agent,
            "timestamp": self.timestamp,
            "winner": True,
        }


@dataclass(frozen=True, slots=True)
class VisitAttemptResult:
    is_winner: bool
    location_name: str
    prize: str
    emoji: str
    access_time: Optional[str]
    winner_time: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isWinner": self.is_winner,
            "locationName": self.location_name,
            "prize": self.prize,
            "emoji": self.emoji,
            "accessTime": self.access_time,
            "winnerTime": self.winner_time,
        }
