"""Credential manager — registration and login.

Learn: Registration stores a bcrypt hash, never the password. Login
answers with one generic error whether the username is unknown or the
password is wrong, so the endpoint cannot be used to discover which
usernames exist. An unknown username still pays for one bcrypt check
against a throwaway hash, so response time does not give it away either.
"""

from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache

import structlog

from inkwell.auth.jwt import SessionTokenService
from inkwell.auth.password import hash_password, verify_password
from inkwell.db.models import User
from inkwell.db.repository import CredentialStore
from inkwell.errors import Conflict, InvalidCredentials

logger = structlog.get_logger()


@lru_cache(maxsize=4)
def _dummy_hash(rounds: int) -> str:
    return hash_password("inkwell-dummy-password", rounds=rounds)


@dataclass(frozen=True)
class IssuedToken:
    token: str
    expires_at: datetime


class CredentialManager:
    """Registers users and exchanges username/password for a session token."""

    def __init__(
        self,
        store: CredentialStore,
        tokens: SessionTokenService,
        bcrypt_rounds: int = 12,
    ):
        self.store = store
        self.tokens = tokens
        self.bcrypt_rounds = bcrypt_rounds

    async def register(self, username: str, password: str, email: str) -> User:
        """Create a credential record.

        Raises Conflict if the username or the email is taken, and
        HashingFailure if bcrypt fails.
        """
        existing = await self.store.find_by_username_or_email(username, email)
        if existing is not None:
            logger.info("auth.register_conflict", username=username)
            raise Conflict("Username or email already exists")

        password_hash = hash_password(password, rounds=self.bcrypt_rounds)
        user = await self.store.insert_credential(
            username=username, email=email, password_hash=password_hash
        )
        logger.info("auth.registered", user_id=user.id, username=user.username)
        return user

    async def login(self, username: str, password: str) -> IssuedToken:
        """Verify credentials and issue a session token."""
        user = await self.store.find_by_username(username)
        if user is not None:
            stored = user.password_hash
        else:
            stored = _dummy_hash(self.bcrypt_rounds)
        if not verify_password(password, stored) or user is None:
            logger.info("auth.login_failed", username=username)
            raise InvalidCredentials()

        token, expires_at = self.tokens.issue(user_id=user.id, username=user.username)
        logger.info("auth.login_succeeded", user_id=user.id, username=user.username)
        return IssuedToken(token=token, expires_at=expires_at)
