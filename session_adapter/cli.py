"""CLI commands for the session store.

cleanup-sessions is meant to be run periodically by cron or a similar
scheduler, not per request.
"""

import argparse
import asyncio
import logging
import sys

from sqlalchemy.orm import Session

from session_adapter.adapters import SQLAlchemyAdapter
from session_adapter.config import settings
from session_adapter.database import SessionLocal, engine, init_db
from session_adapter.models import Session as UserSession, User


def _adapter(db: Session) -> SQLAlchemyAdapter:
    return SQLAlchemyAdapter(db, UserSession, User)


def create_tables() -> None:
    """Create the users and sessions tables."""
    init_db(engine)
    print("Tables created.")


def cleanup_sessions() -> int:
    """Delete every expired session and report how many went."""
    db: Session = SessionLocal()

    try:
        count = asyncio.run(_adapter(db).delete_expired_sessions())
        print(f"Deleted {count} expired session(s).")
        return count
    finally:
        db.close()


def list_sessions(user_id: str) -> None:
    """Print the sessions of a user."""
    db: Session = SessionLocal()

    try:
        sessions = asyncio.run(_adapter(db).get_user_sessions(user_id))
        if not sessions:
            print(f"No sessions for user '{user_id}'.")
            return
        for session in sessions:
            print(f"{session.id}\texpires {session.expires_at.isoformat()}")
    finally:
        db.close()


def revoke_sessions(user_id: str) -> None:
    """Delete all sessions of a user."""
    db: Session = SessionLocal()

    try:
        asyncio.run(_adapter(db).delete_user_sessions(user_id))
        print(f"Sessions revoked for user '{user_id}'.")
    finally:
        db.close()


def main():
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    parser = argparse.ArgumentParser(description="Session store CLI")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("init-db", help="Create the users and sessions tables")
    subparsers.add_parser("cleanup-sessions", help="Delete expired sessions")

    # list-sessions command
    list_parser = subparsers.add_parser("list-sessions", help="List a user's sessions")
    list_parser.add_argument("--user-id", required=True, help="User ID")

    # revoke-sessions command
    revoke_parser = subparsers.add_parser(
        "revoke-sessions", help="Delete all sessions of a user"
    )
    revoke_parser.add_argument("--user-id", required=True, help="User ID")

    args = parser.parse_args()

    if args.command == "init-db":
        create_tables()
    elif args.command == "cleanup-sessions":
        cleanup_sessions()
    elif args.command == "list-sessions":
        list_sessions(args.user_id)
    elif args.command == "revoke-sessions":
        revoke_sessions(args.user_id)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
