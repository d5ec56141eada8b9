import logging
from collections import deque
from typing import List, Optional

import redis

from shared.events import Event, EventType
from shared.pubsub import PubSubClient

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_SIZE = 1000


class Notifier:
    """
    Ordered record of events emitted by committed hub operations.
    Fans each event out over redis pub/sub when a client is configured.
    Only the most recent `history_size` events are kept in memory.
    """

    def __init__(self, pubsub: Optional[PubSubClient] = None, history_size: int = DEFAULT_HISTORY_SIZE):
        self.pubsub = pubsub
        self._history = deque(maxlen=history_size)

    def emit(self, event: Event) -> Event:
        self._history.append(event)
        logger.info(f"Event {event.type.value} tournament={event.tournament_id} data={event.data}")

        if self.pubsub is None:
            return event

        # Operation is already committed; publish failures are only logged
        try:
            if event.tournament_id is None:
                self.pubsub.publish_global(event)
            else:
                self.pubsub.publish_tournament_event(event.tournament_id, event)
                self.pubsub.log_event(event.tournament_id, event)
        except redis.RedisError as e:
            logger.error(f"Failed to publish {event.type.value}: {e}")
        return event

    @property
    def history(self) -> List[Event]:
        return list(self._history)

    def events_of_type(self, event_type: EventType) -> List[Event]:
        return [e for e in self._history if e.type == event_type]

    def clear(self):
        self._history.clear()
