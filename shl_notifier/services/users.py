"""Subscriber store.

Users without a push token or without any followed team are removed rather
than stored, so every stored user is a valid notification target.
"""

from __future__ import annotations

from pydantic import TypeAdapter

from ..logging import logger
from ..models import User
from ..persistence import KeyValueStore

users_adapter: TypeAdapter[list[User]] = TypeAdapter(list[User])


class UserService:
    def __init__(self, db: KeyValueStore[list[User]]) -> None:
        self.db = db

    def add_user(self, user: User) -> list[User]:
        """Insert or replace a user by id, dropping users that cannot be notified."""
        users = [u for u in self.db.read() if u.id != user.id]
        if user.is_notifiable():
            users.append(user)
            logger.info("user_stored", user_id=user.id, teams=user.teams)
        else:
            logger.info(
                "user_removed_not_notifiable",
                user_id=user.id,
                has_token=user.apn_token is not None,
                teams=len(user.teams),
            )
        return self.db.write(users)

    def read(self, user_id: str) -> User | None:
        return next((u for u in self.db.read() if u.id == user_id), None)

    def read_cached(self, user_id: str) -> User | None:
        return next((u for u in self.db.read_cached() if u.id == user_id), None)

    def subscribers(self) -> list[User]:
        """Every stored user that is currently a valid notification target."""
        return [u for u in self.db.read() if u.is_notifiable()]
