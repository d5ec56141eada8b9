import logging

from shared.context import RequestContext, is_zero_identity
from shared.errors import AlreadyManager, InvalidIdentity, Unauthorized
from shared.events import manager_added_event

from .models import db, Manager, commit_or_rollback
from .notifier import Notifier

logger = logging.getLogger(__name__)


class AccessControl:
    """
    Trust root of the hub:
    - Single owner fixed at construction
    - Manager set, grown only by the owner, never shrunk
    """

    def __init__(self, owner: str, notifier: Notifier = None):
        if is_zero_identity(owner):
            raise InvalidIdentity("Owner must not be the zero identity")
        self._owner = owner
        self.notifier = notifier or Notifier()

    @property
    def owner(self) -> str:
        return self._owner

    def is_owner(self, identity: str) -> bool:
        return identity == self._owner

    def is_manager(self, identity: str) -> bool:
        if is_zero_identity(identity):
            return False
        return db.session.get(Manager, identity) is not None

    def require_owner(self, ctx: RequestContext):
        if not self.is_owner(ctx.caller):
            raise Unauthorized("Only the owner can do this", caller=ctx.caller)

    def require_manager(self, ctx: RequestContext):
        if not self.is_manager(ctx.caller):
            raise Unauthorized("Only managers can do this", caller=ctx.caller)

    def add_manager(self, ctx: RequestContext, identity: str) -> Manager:
        """Grant tournament-creation rights to an identity."""
        self.require_owner(ctx)
        if is_zero_identity(identity):
            raise InvalidIdentity(identity=identity)
        if self.is_manager(identity):
            raise AlreadyManager(identity=identity)

        manager = Manager(identity=identity, added_at=ctx.now)
        db.session.add(manager)
        commit_or_rollback()

        logger.info(f"Owner added manager {identity}")
        self.notifier.emit(manager_added_event(identity, ctx.now))
        return manager

    def list_managers(self):
        return [m.identity for m in Manager.query.order_by(Manager.added_at, Manager.identity).all()]

