import logging
import os
from flask import Flask

from shared.pubsub import PubSubClient

from .access_control import AccessControl
from .config import config
from .forum import ForumAndMessaging
from .models import db
from .notifier import Notifier
from .registration_ledger import RegistrationLedger
from .tournament_registry import TournamentRegistry


def create_app(config_name: str = None, owner: str = None) -> Flask:
    """Application factory: store, event fan-out and the four hub services."""
    if config_name is None:
        config_name = os.getenv('FLASK_ENV', 'development')
    
    app = Flask(__name__)
    app.config.from_object(config[config_name])
    configure_logging(app)
    
    # Initialize extensions
    db.init_app(app)
    
    # Create tables
    with app.app_context():
        db.create_all()
    
    pubsub = None
    if app.config.get('USE_REDIS'):
        pubsub = PubSubClient(redis_url=app.config['REDIS_URL'])
    notifier = Notifier(pubsub=pubsub, history_size=app.config['EVENT_HISTORY_SIZE'])
    
    # Initialize services
    access = AccessControl(owner or app.config['HUB_OWNER'], notifier=notifier)
    registry = TournamentRegistry(access, notifier=notifier)
    ledger = RegistrationLedger(registry)
    forum = ForumAndMessaging(
        registry,
        notifier=notifier,
        cooldown_seconds=app.config['POST_COOLDOWN_SECONDS']
    )
    
    # Store services on app for access by the hosting environment
    app.notifier = notifier
    app.access = access
    app.registry = registry
    app.ledger = ledger
    app.forum = forum
    
    app.logger.info(f"Tournament hub ready (owner {access.owner}, env {config_name})")
    return app


def configure_logging(app: Flask):
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s'
    )
    logging.getLogger('hub').setLevel(level)
