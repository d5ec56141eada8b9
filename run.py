#!/usr/bin/env python3
"""
Entry point for the Tournament Hub.

Usage:
    python run.py                    # Create tables and print a summary (default)
    python run.py init-db            # Create tables only
    python run.py status             # Print a summary of the store

Environment Variables:
    FLASK_ENV: development, production or testing (default: development)
    HUB_OWNER: identity of the hub owner (required)
    DATABASE_URL: SQLAlchemy database URL
    USE_REDIS / REDIS_URL: publish hub events over redis pub/sub
"""
import sys


def init_db():
    """Create the hub tables."""
    from hub.app import create_app

    app = create_app()
    print(f"Tables ready at {app.config['SQLALCHEMY_DATABASE_URI']}")
    return app


def print_status():
    """Print owner, managers and tournaments."""
    app = init_db()

    with app.app_context():
        managers = app.access.list_managers()
        print(f"Owner: {app.access.owner}")
        print(f"Managers ({len(managers)}):")
        for identity in managers:
            print(f"  - {identity}")

        tournaments = app.registry.list_tournaments(limit=1000)
        print(f"Tournaments ({app.registry.tournament_count()}):")
        for t in tournaments:
            print(
                f"  #{t.id} {t.city} {t.date:%Y-%m-%d} {t.difficulty_tier.name} "
                f"{t.max_players - t.registrations_available}/{t.max_players} players"
            )


if __name__ == '__main__':
    mode = sys.argv[1] if len(sys.argv) > 1 else 'status'

    if mode == 'init-db':
        init_db()
    elif mode == 'status':
        print_status()
    else:
        print(f"Unknown mode: {mode}")
        print("Usage: python run.py [init-db|status]")
        sys.exit(1)
