import structlog

from ...domain.entities import User
from ...domain.errors import Conflict

logger = structlog.get_logger()


class IUserRepository:
    def get_by_email(self, email: str) -> User | None: ...
    def create(self, email: str, name: str | None = None, photo_url: str | None = None) -> User: ...


class RegisterUser:
    """Create-if-absent keyed by email; returns (user, created)."""

    def __init__(self, repo: IUserRepository):
        self.repo = repo

    def execute(self, email: str, name: str | None = None, photo_url: str | None = None) -> tuple[User, bool]:
        existing = self.repo.get_by_email(email)
        if existing:
            return existing, False
        try:
            user = self.repo.create(email, name=name, photo_url=photo_url)
        except Conflict:
            # lost a race against a concurrent sign-in for the same email
            return self.repo.get_by_email(email), False
        logger.info("user_created", email=email, user_id=user.id)
        return user, True
