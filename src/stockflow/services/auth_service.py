from __future__ import annotations

import logging
from typing import Optional

from stockflow.domain.errors import AuthorizationError
from stockflow.domain.models import User
from stockflow.ids import IdFactory, uuid_ids
from stockflow.repositories.entity_store import EntityStore

log = logging.getLogger(__name__)


class AuthService:
    """Captures who is using the app.

    There is no credential check: the password only has to be present. The
    user record is kept in the store so it survives restarts until logout.
    """

    def __init__(self, store: EntityStore, id_factory: IdFactory = uuid_ids):
        self.store = store
        self.new_id = id_factory

    def current_user(self) -> Optional[User]:
        return self.store.user

    def login(self, email: str, password: str) -> User:
        email_clean = (email or "").strip()
        if not email_clean or not (password or "").strip():
            raise AuthorizationError("Email and password are required.")
        return self._start_session(email_clean, email_clean.split("@")[0])

    def register(self, name: str, email: str, password: str) -> User:
        name_clean = (name or "").strip()
        if not name_clean:
            raise AuthorizationError("Name is required.")
        email_clean = (email or "").strip()
        if not email_clean or not (password or "").strip():
            raise AuthorizationError("Email and password are required.")
        return self._start_session(email_clean, name_clean)

    def logout(self) -> None:
        user = self.store.user
        self.store.set_user(None)
        if user:
            log.info("session_closed user_id=%s", user.id)

    def _start_session(self, email: str, name: str) -> User:
        user = User(id=self.new_id(), email=email, name=name)
        self.store.set_user(user)
        log.info("session_started user_id=%s email=%s", user.id, user.email)
        return user
