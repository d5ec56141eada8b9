from enum import Enum
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
import json


class EventType(str, Enum):
    # Access control
    MANAGER_ADDED = "manager.added"

    # Tournament lifecycle
    TOURNAMENT_CREATED = "tournament.created"

    # Forum
    TOURNAMENT_COMMENT_ADDED = "tournament.comment_added"
    TOURNAMENT_FOLLOWED = "tournament.followed"


@dataclass
class Event:
    type: EventType
    tournament_id: Optional[int] = None
    timestamp: str = None
    data: dict = None

    def __post_init__(self):
        if self.timestamp is None:
            self.timestamp = datetime.utcnow().isoformat() + "Z"
        if self.data is None:
            self.data = {}

    def to_dict(self) -> dict:
        return {
            "type": self.type.value if isinstance(self.type, EventType) else self.type,
            "tournament_id": self.tournament_id,
            "timestamp": self.timestamp,
            "data": self.data
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


def manager_added_event(identity: str, timestamp: datetime = None) -> Event:
    return Event(
        type=EventType.MANAGER_ADDED,
        timestamp=_stamp(timestamp),
        data={"manager": identity}
    )


def tournament_created_event(tournament_id: int, timestamp: datetime = None) -> Event:
    return Event(
        type=EventType.TOURNAMENT_CREATED,
        tournament_id=tournament_id,
        timestamp=_stamp(timestamp)
    )


def comment_added_event(tournament_id: int, timestamp: datetime = None) -> Event:
    return Event(
        type=EventType.TOURNAMENT_COMMENT_ADDED,
        tournament_id=tournament_id,
        timestamp=_stamp(timestamp)
    )


def tournament_followed_event(tournament_id: int, follower: str, timestamp: datetime = None) -> Event:
    return Event(
        type=EventType.TOURNAMENT_FOLLOWED,
        tournament_id=tournament_id,
        timestamp=_stamp(timestamp),
        data={"follower": follower}
    )


def _stamp(moment: Optional[datetime]) -> Optional[str]:
    if moment is None:
        return None
    return moment.isoformat() + "Z"
