"""Authentication domain service.

E-mail/password accounts. The signed-in user is recorded by the store so
it survives between CLI invocations.
"""

import re
from typing import Callable, Optional

import structlog
from werkzeug.security import check_password_hash, generate_password_hash

from financy.database.base import Database
from financy.domain.entities import User
from financy.domain.errors import AuthError

logger = structlog.get_logger(__name__)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 6

AuthStateListener = Callable[[Optional[User]], None]


def validate_credentials(email: str, password: str) -> str:
    """Check e-mail format and password length. Returns the normalized e-mail.

    Raises:
        AuthError: With code auth/invalid-email or auth/weak-password
    """
    email = (email or "").strip().lower()
    if not EMAIL_PATTERN.match(email):
        raise AuthError("auth/invalid-email")
    if password is None or len(password) < MIN_PASSWORD_LENGTH:
        raise AuthError("auth/weak-password")
    return email


class AuthService:
    """Service for signing users up, in and out."""

    def __init__(self, db: Database):
        """Initialize auth service.

        Args:
            db: Database instance
        """
        self.db = db
        self._listeners: list[AuthStateListener] = []

    @property
    def current_user(self) -> Optional[User]:
        """The signed-in user, or None."""
        user_id = self.db.get_session_user_id()
        if user_id is None:
            return None
        return self.db.get_user(user_id)

    def on_auth_state_change(self, listener: AuthStateListener) -> Callable[[], None]:
        """Subscribe to sign-in/sign-out events.

        The listener is called right away with the current user, then on
        every change. Returns a function that unsubscribes it.
        """
        self._listeners.append(listener)
        listener(self.current_user)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def sign_up(self, email: str, password: str) -> User:
        """Register a new account and sign it in.

        Raises:
            AuthError: If credentials are invalid or the e-mail is taken
        """
        email = validate_credentials(email, password)
        if self.db.get_user_credentials(email) is not None:
            raise AuthError("auth/email-already-in-use")

        user_id = self.db.create_user(email, generate_password_hash(password))
        logger.info("user_signed_up", user_id=user_id)
        return self._start_session(User(uid=user_id, email=email))

    def sign_in(self, email: str, password: str) -> User:
        """Sign in with e-mail and password.

        Raises:
            AuthError: If the user doesn't exist or the password is wrong
        """
        email = validate_credentials(email, password)
        credentials = self.db.get_user_credentials(email)
        if credentials is None:
            raise AuthError("auth/user-not-found")

        user, password_hash = credentials
        if not check_password_hash(password_hash, password):
            logger.warning("sign_in_rejected", user_id=user.uid)
            raise AuthError("auth/wrong-password")

        logger.info("user_signed_in", user_id=user.uid)
        return self._start_session(user)

    def sign_out(self) -> None:
        """Sign the current user out. Signing out twice is harmless."""
        self.db.set_session_user_id(None)
        logger.info("user_signed_out")
        self._notify(None)

    def _start_session(self, user: User) -> User:
        self.db.set_session_user_id(user.uid)
        self._notify(user)
        return user

    def _notify(self, user: Optional[User]) -> None:
        for listener in list(self._listeners):
            listener(user)
