"""
Pytest configuration and fixtures for tournament hub tests.
"""
import os
import sys
from datetime import datetime, timedelta

import pytest

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from hub.app import create_app
from hub.models import db
from shared.context import RequestContext

OWNER = '0x00000000000000000000000000000000000000a0'
MANAGER = '0x00000000000000000000000000000000000000b1'
OTHER_MANAGER = '0x00000000000000000000000000000000000000b2'
PLAYERS = [f'0x00000000000000000000000000000000000000c{i}' for i in range(1, 8)]
NOW = datetime(2026, 6, 1, 12, 0, 0)


@pytest.fixture(scope='function')
def app():
    """Fresh application and in-memory store per test."""
    app = create_app('testing', owner=OWNER)

    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def owner():
    return OWNER


@pytest.fixture
def manager():
    return MANAGER


@pytest.fixture
def other_manager():
    return OTHER_MANAGER


@pytest.fixture
def players():
    return list(PLAYERS)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def ctx():
    """Build a RequestContext `seconds` after the reference time."""
    def make(caller: str, seconds: float = 0) -> RequestContext:
        return RequestContext(caller=caller, now=NOW + timedelta(seconds=seconds))
    return make


@pytest.fixture
def notifier(app):
    return app.notifier


@pytest.fixture
def access(app):
    return app.access


@pytest.fixture
def registry(app):
    return app.registry


@pytest.fixture
def ledger(app):
    return app.ledger


@pytest.fixture
def forum(app):
    return app.forum


@pytest.fixture
def managers(access, ctx):
    """MANAGER and OTHER_MANAGER appointed by the owner."""
    access.add_manager(ctx(OWNER), MANAGER)
    access.add_manager(ctx(OWNER), OTHER_MANAGER)
    return [MANAGER, OTHER_MANAGER]


@pytest.fixture
def lyon(registry, managers, ctx):
    """Tournament 0: Lyon, P250, 4 players, 1000 seconds from now."""
    return registry.add_tournament(
        ctx(MANAGER),
        city='Lyon',
        date=NOW + timedelta(seconds=1000),
        difficulty=2,
        max_players=4
    )
