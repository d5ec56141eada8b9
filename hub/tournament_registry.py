import logging
from datetime import datetime
from typing import List

from shared.context import RequestContext, is_zero_identity, to_naive_utc
from shared.errors import (
    DuplicateWinner,
    EmptyField,
    InvalidCapacity,
    InvalidDate,
    InvalidDifficulty,
    InvalidIdentity,
    NotRegistered,
    Unauthorized,
    UnknownTournament,
)
from shared.events import tournament_created_event

from .access_control import AccessControl
from .models import db, Difficulty, Registration, Tournament, commit_or_rollback
from .notifier import Notifier

logger = logging.getLogger(__name__)


class TournamentRegistry:
    """
    Manages tournament records:
    - Create tournaments on behalf of managers (ids 0, 1, 2, ...)
    - Index tournaments by creating manager
    - Existence and creator checks for the other components
    - Record the winning pair
    """

    def __init__(self, access: AccessControl, notifier: Notifier = None):
        self.access = access
        self.notifier = notifier or access.notifier

    def tournament_count(self) -> int:
        return db.session.query(db.func.count(Tournament.id)).scalar()

    def exists(self, tournament_id: int) -> bool:
        if isinstance(tournament_id, bool) or not isinstance(tournament_id, int):
            return False
        return 0 <= tournament_id < self.tournament_count()

    def require_tournament(self, tournament_id: int) -> Tournament:
        """Bounds check against the dense id range, then load the record."""
        if not self.exists(tournament_id):
            raise UnknownTournament(tournament_id=tournament_id)
        return db.session.get(Tournament, tournament_id)

    def get_tournament(self, tournament_id: int) -> Tournament:
        return self.require_tournament(tournament_id)

    def require_creator(self, ctx: RequestContext, tournament_id: int) -> Tournament:
        tournament = self.require_tournament(tournament_id)
        if tournament.manager != ctx.caller:
            raise Unauthorized(
                "Only the manager who created this tournament can do this",
                tournament_id=tournament_id,
                caller=ctx.caller
            )
        return tournament

    def add_tournament(
        self,
        ctx: RequestContext,
        city: str,
        date: datetime,
        difficulty: int,
        max_players: int
    ) -> Tournament:
        """Create a tournament owned by the calling manager."""
        self.access.require_manager(ctx)

        if not city:
            raise EmptyField("City must not be empty", field="city")

        date = to_naive_utc(date)
        if date <= ctx.now:
            raise InvalidDate(date=date.isoformat(), now=ctx.now.isoformat())

        # Even head count, not a number of pairs
        if isinstance(max_players, bool) or not isinstance(max_players, int) \
                or max_players <= 0 or max_players % 2 != 0:
            raise InvalidCapacity(max_players=max_players)

        try:
            tier = Difficulty.from_code(difficulty)
        except ValueError:
            raise InvalidDifficulty(difficulty=difficulty)

        tournament = Tournament(
            id=self.tournament_count(),
            manager=ctx.caller,
            city=city,
            date=date,
            difficulty=tier.value,
            max_players=max_players,
            registrations_available=max_players,
            comment_count=0,
            created_at=ctx.now
        )
        db.session.add(tournament)
        commit_or_rollback()

        logger.info(
            f"Manager {ctx.caller} created tournament {tournament.id} "
            f"in {city} ({tier.name}, {max_players} players)"
        )
        self.notifier.emit(tournament_created_event(tournament.id, ctx.now))
        return tournament

    def get_tournaments(self, ctx: RequestContext) -> List[int]:
        """Ids of the tournaments the calling manager created, oldest first."""
        self.access.require_manager(ctx)
        rows = db.session.query(Tournament.id).filter_by(manager=ctx.caller).order_by(Tournament.id).all()
        return [row.id for row in rows]

    def list_tournaments(self, limit: int = 50, offset: int = 0) -> List[Tournament]:
        return Tournament.query.order_by(Tournament.id).offset(offset).limit(limit).all()

    def add_winners(self, ctx: RequestContext, tournament_id: int, winner1: str, winner2: str) -> Tournament:
        """
        Record the winning pair. Both players must be registered.
        A later call with another registered pair overwrites the winners.
        """
        tournament = self.require_creator(ctx, tournament_id)

        if is_zero_identity(winner1) or is_zero_identity(winner2):
            raise InvalidIdentity("Winners must not be the zero identity", winner1=winner1, winner2=winner2)
        if winner1 == winner2:
            raise DuplicateWinner(winner=winner1)
        for winner in (winner1, winner2):
            if not Registration.exists(tournament_id, winner):
                raise NotRegistered(tournament_id=tournament_id, player=winner)

        if tournament.has_winners:
            logger.warning(
                f"Overwriting winners of tournament {tournament_id} "
                f"({tournament.winner1}, {tournament.winner2})"
            )
        tournament.winner1 = winner1
        tournament.winner2 = winner2
        commit_or_rollback()

        logger.info(f"Tournament {tournament_id} won by {winner1} and {winner2}")
        return tournament

