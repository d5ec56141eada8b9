"""
Unit tests for hub events, the Notifier and the redis PubSubClient.
"""
import json
import pytest
import redis
from datetime import datetime

from hub.notifier import Notifier
from shared.events import (
    EventType,
    comment_added_event,
    manager_added_event,
    tournament_created_event,
    tournament_followed_event,
)
from shared.pubsub import GLOBAL_CHANNEL, PubSubClient


class TestEvent:
    """Tests for the Event dataclass and constructors."""
    
    def test_event_types(self):
        assert EventType.MANAGER_ADDED.value == "manager.added"
        assert EventType.TOURNAMENT_CREATED.value == "tournament.created"
        assert EventType.TOURNAMENT_COMMENT_ADDED.value == "tournament.comment_added"
        assert EventType.TOURNAMENT_FOLLOWED.value == "tournament.followed"
    
    def test_timestamp_from_context_time(self):
        event = tournament_created_event(3, datetime(2026, 6, 1, 12, 0, 0))
        assert event.timestamp == "2026-06-01T12:00:00Z"
    
    def test_default_timestamp(self):
        event = comment_added_event(0)
        assert event.timestamp.endswith("Z")
        
    def test_followed_event_carries_follower(self):
        data = json.loads(tournament_followed_event(1, "0xabc").to_json())
        assert data["type"] == "tournament.followed"
        assert data["tournament_id"] == 1
        assert data["data"] == {"follower": "0xabc"}
    
    def test_manager_added_has_no_tournament(self):
        data = json.loads(manager_added_event("0xabc").to_json())
        assert data["tournament_id"] is None
        assert data["data"] == {"manager": "0xabc"}


class TestNotifier:
    """Tests for Notifier."""
    
    def test_history_in_order(self):
        notifier = Notifier()
        notifier.emit(manager_added_event("0xabc"))
        notifier.emit(tournament_created_event(0))
        
        assert [e.type for e in notifier.history] == [
            EventType.MANAGER_ADDED,
            EventType.TOURNAMENT_CREATED,
        ]
    
    def test_history_is_capped(self):
        """Only the most recent events are kept."""
        notifier = Notifier(history_size=3)
        for tournament_id in range(5):
            notifier.emit(tournament_created_event(tournament_id))
        
        assert [e.tournament_id for e in notifier.history] == [2, 3, 4]
    
    def test_history_is_a_copy(self):
        notifier = Notifier()
        notifier.emit(tournament_created_event(0))
        notifier.history.clear()
        
        assert len(notifier.history) == 1
    
    def test_tournament_event_published(self, mocker):
        pubsub = mocker.MagicMock()
        notifier = Notifier(pubsub=pubsub)
        event = comment_added_event(2)
        
        notifier.emit(event)
        
        pubsub.publish_tournament_event.assert_called_once_with(2, event)
        pubsub.log_event.assert_called_once_with(2, event)
        pubsub.publish_global.assert_not_called()
    
    def test_global_event_published(self, mocker):
        pubsub = mocker.MagicMock()
        notifier = Notifier(pubsub=pubsub)
        event = manager_added_event("0xabc")
        
        notifier.emit(event)
        
        pubsub.publish_global.assert_called_once_with(event)
        pubsub.publish_tournament_event.assert_not_called()
    
    def test_publish_failure_is_logged(self, mocker):
        pubsub = mocker.MagicMock()
        pubsub.publish_tournament_event.side_effect = redis.ConnectionError("down")
        notifier = Notifier(pubsub=pubsub)
        
        notifier.emit(tournament_created_event(0))
        
        assert len(notifier.history) == 1


class TestPubSubClient:
    """Tests for PubSubClient with a mocked redis connection."""
    
    @pytest.fixture
    def client(self, mocker):
        return PubSubClient(client=mocker.MagicMock())
    
    def test_publish_tournament_event(self, client):
        event = tournament_created_event(5)
        client.publish_tournament_event(5, event)
        
        client.redis.publish.assert_any_call("tournament:5:events", event.to_json())
        client.redis.publish.assert_any_call(GLOBAL_CHANNEL, event.to_json())
    
    def test_log_event_is_capped(self, client):
        event = tournament_created_event(5)
        client.log_event(5, event)
        
        client.redis.lpush.assert_called_once_with("tournament:5:event_log", event.to_json())
        client.redis.ltrim.assert_called_once_with("tournament:5:event_log", 0, 999)
    
