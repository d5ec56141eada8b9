import os
import redis
from .events import Event

GLOBAL_CHANNEL = "global:announcements"


class PubSubClient:
    def __init__(self, redis_url: str = None, client: redis.Redis = None):
        self.redis_url = redis_url or os.getenv('REDIS_URL', 'redis://localhost:6379')
        self.redis = client or redis.from_url(
            self.redis_url,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5
        )

    def publish(self, channel: str, event: Event):
        self.redis.publish(channel, event.to_json())

    def publish_tournament_event(self, tournament_id: int, event: Event):
        channel = f"tournament:{tournament_id}:events"
        self.publish(channel, event)

        self.redis.publish(GLOBAL_CHANNEL, event.to_json())

    def publish_global(self, event: Event):
        self.publish(GLOBAL_CHANNEL, event)

    def log_event(self, tournament_id: int, event: Event):
        key = f"tournament:{tournament_id}:event_log"
        self.redis.lpush(key, event.to_json())
        self.redis.ltrim(key, 0, 999)

