"""Command line entrypoint.

    shl-notifier run                         poll until the process is stopped
    shl-notifier tick                        run a single polling iteration
    shl-notifier add-user ID --team LHF --token TOKEN
"""

from __future__ import annotations

import argparse
import sys

from pydantic import ValidationError

from .app import build_app
from .logging import logger
from .models import User


def _add_user(args: argparse.Namespace) -> int:
    try:
        user = User(id=args.user_id, teams=args.team or [], apn_token=args.token)
    except ValidationError as exc:
        logger.error("add_user_invalid", user_id=args.user_id, error=str(exc))
        return 2

    app = build_app()
    stored = app.users.add_user(user)
    logger.info("add_user_complete", user_id=user.id, stored=user.is_notifiable(), users=len(stored))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Poll live SHL games and push game events to subscribers")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("run", help="Poll for the lifetime of the process")
    sub.add_parser("tick", help="Run a single polling iteration and exit")

    add_user = sub.add_parser("add-user", help="Add or update a push subscriber")
    add_user.add_argument("user_id")
    add_user.add_argument("--team", action="append", help="Team code to follow (repeatable)")
    add_user.add_argument("--token", help="APNs device token")

    args = parser.parse_args(argv)

    if args.command == "add-user":
        return _add_user(args)

    app = build_app()
    if args.command == "tick":
        delay = app.loop.run_once()
        logger.info("tick_complete", live_games=len(app.loop.get_live_games()), next_in=delay)
        return 0

    try:
        app.loop.run_forever()
    except KeyboardInterrupt:
        logger.info("game_loop_stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
