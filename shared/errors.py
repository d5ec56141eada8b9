from typing import Optional


class HubError(Exception):
    """Base error for every rejected hub operation."""

    kind = "error"
    default_reason = "Operation rejected"

    def __init__(self, reason: Optional[str] = None, **details):
        self.reason = reason or self.default_reason
        self.details = details
        super().__init__(self.reason)

    def to_dict(self) -> dict:
        return {
            "error": type(self).__name__,
            "kind": self.kind,
            "reason": self.reason,
            "details": self.details,
        }


# Categories

class AuthorizationError(HubError):
    kind = "authorization"


class ValidationError(HubError):
    kind = "validation"


class StateConflictError(HubError):
    kind = "state_conflict"


class LifecycleError(HubError):
    kind = "lifecycle"


class RateLimitError(HubError):
    kind = "rate_limit"


# Authorization

class Unauthorized(AuthorizationError):
    default_reason = "Caller is not allowed to perform this operation"


# Validation

class InvalidIdentity(ValidationError):
    default_reason = "Identity must not be the zero identity"


class EmptyField(ValidationError):
    default_reason = "Field must not be empty"


class InvalidDate(ValidationError):
    default_reason = "Date must be in the future"


class InvalidCapacity(ValidationError):
    default_reason = "Max players must be a positive even number"


class InvalidDifficulty(ValidationError):
    default_reason = "Unknown difficulty"


class DuplicateWinner(ValidationError):
    default_reason = "Winners must be two different players"


class NotRegistered(ValidationError):
    default_reason = "Winner is not registered for this tournament"


# State conflicts

class AlreadyManager(StateConflictError):
    default_reason = "Identity is already a manager"


class AlreadyRegistered(StateConflictError):
    default_reason = "Player is already registered for this tournament"


# Lifecycle

class UnknownTournament(LifecycleError):
    default_reason = "Tournament does not exist"


class RegistrationEnded(LifecycleError):
    default_reason = "Registration for this tournament has ended"


class CompleteTournament(LifecycleError):
    default_reason = "Tournament is full"


# Rate limiting

class TooSoon(RateLimitError):
    default_reason = "Wait before posting again"
