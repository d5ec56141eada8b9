import logging
from datetime import datetime, timedelta
from typing import List, Optional

from shared.context import RequestContext, is_zero_identity
from shared.errors import EmptyField, InvalidIdentity, TooSoon
from shared.events import comment_added_event, tournament_followed_event

from .models import db, Comment, Exchange, Follow, Message, PostTimestamp, commit_or_rollback
from .notifier import Notifier
from .tournament_registry import TournamentRegistry

logger = logging.getLogger(__name__)

DEFAULT_COOLDOWN_SECONDS = 2


class ForumAndMessaging:
    """
    Public comments, follow flags and private manager/player threads.

    Every post (comment, player message, manager response) is throttled
    per author. The cooldown is shared by all channels: a comment and a
    message from the same author count against the same timestamp.
    """

    def __init__(
        self,
        registry: TournamentRegistry,
        notifier: Notifier = None,
        cooldown_seconds: int = DEFAULT_COOLDOWN_SECONDS
    ):
        self.registry = registry
        self.notifier = notifier or registry.notifier
        self.cooldown = timedelta(seconds=cooldown_seconds)

    # ==================== Throttling ====================

    def last_post_at(self, author: str) -> Optional[datetime]:
        stamp = db.session.get(PostTimestamp, author)
        return stamp.posted_at if stamp else None

    def wait_until_new_post(self, ctx: RequestContext):
        """Raise TooSoon unless more than the cooldown has elapsed since the caller's last post."""
        last = self.last_post_at(ctx.caller)
        if last is not None and ctx.now - last <= self.cooldown:
            raise TooSoon(
                author=ctx.caller,
                last_post=last.isoformat(),
                retry_after=(last + self.cooldown - ctx.now).total_seconds()
            )

    def _touch(self, ctx: RequestContext):
        stamp = db.session.get(PostTimestamp, ctx.caller)
        if stamp is None:
            db.session.add(PostTimestamp(author=ctx.caller, posted_at=ctx.now))
        else:
            stamp.posted_at = ctx.now

    # ==================== Public comments ====================

    def add_comment(self, ctx: RequestContext, tournament_id: int, text: str) -> Comment:
        tournament = self.registry.require_tournament(tournament_id)
        if not text:
            raise EmptyField("Comment must not be empty", field="text")
        self.wait_until_new_post(ctx)

        comment = Comment(
            tournament_id=tournament_id,
            position=tournament.comment_count,
            text=text,
            author=ctx.caller,
            posted_at=ctx.now
        )
        db.session.add(comment)
        tournament.comment_count += 1
        self._touch(ctx)
        commit_or_rollback()

        logger.info(f"{ctx.caller} commented on tournament {tournament_id} (#{comment.position})")
        self.notifier.emit(comment_added_event(tournament_id, ctx.now))
        return comment

    def comment_count(self, tournament_id: int) -> int:
        return self.registry.require_tournament(tournament_id).comment_count

    def get_comment(self, tournament_id: int, index: int) -> Comment:
        self.registry.require_tournament(tournament_id)
        comment = Comment.query.filter_by(tournament_id=tournament_id, position=index).first()
        if comment is None:
            raise IndexError(f"Tournament {tournament_id} has no comment #{index}")
        return comment

    def get_comments(self, tournament_id: int) -> List[Comment]:
        self.registry.require_tournament(tournament_id)
        return Comment.query.filter_by(tournament_id=tournament_id).order_by(Comment.position).all()

    # ==================== Follow ====================

    def follow_tournament(self, ctx: RequestContext, tournament_id: int, follow: bool) -> bool:
        """Set the caller's follow flag. Only following emits an event."""
        self.registry.require_tournament(tournament_id)
        if not isinstance(follow, bool):
            raise TypeError(f"follow must be a bool, got {follow!r}")

        flag = Follow.query.filter_by(tournament_id=tournament_id, player=ctx.caller).first()
        if flag is None:
            flag = Follow(tournament_id=tournament_id, player=ctx.caller)
            db.session.add(flag)
        flag.following = follow
        flag.updated_at = ctx.now
        commit_or_rollback()

        logger.debug(f"{ctx.caller} follow={flag.following} on tournament {tournament_id}")
        if flag.following:
            self.notifier.emit(tournament_followed_event(tournament_id, ctx.caller, ctx.now))
        return flag.following

    def is_following(self, tournament_id: int, player: str) -> bool:
        flag = Follow.query.filter_by(tournament_id=tournament_id, player=player).first()
        return bool(flag and flag.following)

    def get_followers(self, tournament_id: int) -> List[str]:
        self.registry.require_tournament(tournament_id)
        flags = Follow.query.filter_by(tournament_id=tournament_id, following=True).order_by(Follow.id).all()
        return [f.player for f in flags]

    # ==================== Manager/player threads ====================

    def add_message_to_manager(self, ctx: RequestContext, tournament_id: int, text: str) -> Message:
        """Append the caller's message to their thread with the tournament manager."""
        self.registry.require_tournament(tournament_id)
        if not text:
            raise EmptyField("Message must not be empty", field="text")
        self.wait_until_new_post(ctx)

        message = self._append(tournament_id, ctx.caller, ctx.caller, text, ctx.now)
        # First entry of the thread: record the player as a participant
        if message.position == 0:
            db.session.add(Exchange(
                tournament_id=tournament_id,
                position=self._exchange_count(tournament_id),
                participant=ctx.caller
            ))
        self._touch(ctx)
        commit_or_rollback()

        logger.info(f"{ctx.caller} messaged the manager of tournament {tournament_id}")
        return message

    def add_response_to_player(self, ctx: RequestContext, tournament_id: int, player: str, text: str) -> Message:
        """Manager reply, appended to the same thread as the player's messages."""
        self.registry.require_creator(ctx, tournament_id)
        if is_zero_identity(player):
            raise InvalidIdentity(player=player)
        if not text:
            raise EmptyField("Response must not be empty", field="text")
        self.wait_until_new_post(ctx)

        message = self._append(tournament_id, player, ctx.caller, text, ctx.now)
        self._touch(ctx)
        commit_or_rollback()

        logger.info(f"Manager {ctx.caller} answered {player} on tournament {tournament_id}")
        return message

    def get_exchanges(self, tournament_id: int) -> List[str]:
        """Players who have messaged the manager, in order of first message."""
        rows = db.session.query(Exchange.participant).filter_by(
            tournament_id=tournament_id
        ).order_by(Exchange.position).all()
        return [row.participant for row in rows]

    def get_messages_manager_player(self, tournament_id: int, player: str) -> List[Message]:
        self.registry.require_tournament(tournament_id)
        if is_zero_identity(player):
            raise InvalidIdentity(player=player)
        return Message.query.filter_by(
            tournament_id=tournament_id,
            participant=player
        ).order_by(Message.position).all()

    def _append(self, tournament_id: int, participant: str, author: str, text: str, now: datetime) -> Message:
        position = Message.query.filter_by(tournament_id=tournament_id, participant=participant).count()
        message = Message(
            tournament_id=tournament_id,
            participant=participant,
            position=position,
            text=text,
            author=author,
            posted_at=now
        )
        db.session.add(message)
        return message

    def _exchange_count(self, tournament_id: int) -> int:
        return Exchange.query.filter_by(tournament_id=tournament_id).count()
