"""Session authentication stub.

Nothing is verified or stored: any credentials sign in, and the user
exists only for the lifetime of the session object.
"""

import logging

from .core.models import User

logger = logging.getLogger(__name__)

STUB_USER_ID = "1"
STUB_USER_NAME = "John Doe"


class AuthSession:
    """Signed-in state for one session."""

    def __init__(self):
        self.user: User | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def login(self, email: str, password: str) -> User:
        self.user = User(id=STUB_USER_ID, name=STUB_USER_NAME, email=email)
        logger.info(f"Signed in {email}")
        return self.user

    def signup(self, name: str, email: str, password: str) -> User:
        self.user = User(id=STUB_USER_ID, name=name, email=email)
        logger.info(f"Signed up {email}")
        return self.user

    def logout(self) -> None:
        self.user = None
