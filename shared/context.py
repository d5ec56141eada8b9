from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from .errors import InvalidIdentity

ZERO_IDENTITY = "0x" + "0" * 40


def is_zero_identity(identity: Optional[str]) -> bool:
    """True for the reserved "unset" identity and anything equivalent to it.

    Raises InvalidIdentity for values that are not strings.
    """
    if identity is None:
        return True
    if not isinstance(identity, str):
        raise InvalidIdentity("Identity must be a string", identity=repr(identity))
    if not identity:
        return True
    value = identity.lower()
    if value.startswith("0x"):
        value = value[2:]
    return set(value) <= {"0"}


def to_naive_utc(moment: datetime) -> datetime:
    """Timestamps are stored as naive UTC; aware values are converted."""
    if moment.tzinfo is not None:
        return moment.astimezone(timezone.utc).replace(tzinfo=None)
    return moment


@dataclass(frozen=True)
class RequestContext:
    """Who is calling and when.

    Built once per operation by whatever hosts the hub. Services never read
    the clock themselves, so every check inside one call sees the same time.
    """
    caller: str
    now: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self):
        if is_zero_identity(self.caller):
            raise InvalidIdentity("Caller must not be the zero identity")
        object.__setattr__(self, "now", to_naive_utc(self.now))
