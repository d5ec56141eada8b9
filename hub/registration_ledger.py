import logging
from typing import List

from shared.context import RequestContext
from shared.errors import AlreadyRegistered, CompleteTournament, RegistrationEnded

from .models import db, Registration, commit_or_rollback
from .tournament_registry import TournamentRegistry

logger = logging.getLogger(__name__)


class RegistrationLedger:
    """
    Player registrations. One-way: a registration is never withdrawn.
    Enforces the registration deadline (tournament date) and capacity.
    """

    def __init__(self, registry: TournamentRegistry):
        self.registry = registry

    def is_registered(self, tournament_id: int, player: str) -> bool:
        return Registration.exists(tournament_id, player)

    def register_player(self, ctx: RequestContext, tournament_id: int) -> Registration:
        """Register the caller. Checks run existence, duplicate, deadline, capacity."""
        tournament = self.registry.require_tournament(tournament_id)

        if self.is_registered(tournament_id, ctx.caller):
            raise AlreadyRegistered(tournament_id=tournament_id, player=ctx.caller)
        if ctx.now >= tournament.date:
            raise RegistrationEnded(tournament_id=tournament_id, date=tournament.date.isoformat())
        if tournament.registrations_available == 0:
            raise CompleteTournament(tournament_id=tournament_id)

        registration = Registration(
            tournament_id=tournament_id,
            player=ctx.caller,
            registered_at=ctx.now
        )
        db.session.add(registration)
        tournament.registrations_available -= 1
        commit_or_rollback()

        logger.info(
            f"Player {ctx.caller} registered for tournament {tournament_id} "
            f"({tournament.registrations_available} places left)"
        )
        return registration

    def get_tournaments_by_player(self, ctx: RequestContext) -> List[int]:
        """Ids the caller registered for, in registration order."""
        rows = db.session.query(Registration.tournament_id).filter_by(
            player=ctx.caller
        ).order_by(Registration.id).all()
        return [row.tournament_id for row in rows]

    def get_players(self, tournament_id: int) -> List[str]:
        self.registry.require_tournament(tournament_id)
        rows = db.session.query(Registration.player).filter_by(
            tournament_id=tournament_id
        ).order_by(Registration.id).all()
        return [row.player for row in rows]
