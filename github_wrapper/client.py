"""Entry point tying the resource wrappers to one shared RequestEngine."""

import httpx

from .issue import Issue
from .models import Credentials
from .repository import Repository
from .request_engine import RequestEngine
from .search import Search
from .settings import Settings, get_settings
from .user import User


class GitHub:
    """Factory for API wrappers sharing a single engine and auth header.

    Usable as an async context manager, which closes the HTTP client on exit.
    """

    def __init__(
        self,
        credentials: Credentials | None = None,
        api_base: str | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.engine = RequestEngine(credentials, api_base=api_base, client=client)

    @classmethod
    def from_settings(cls, settings: Settings | None = None, client: httpx.AsyncClient | None = None):
        settings = settings or get_settings()
        return cls(
            Credentials.from_settings(settings),
            api_base=settings.github_api_base,
            client=client,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def aclose(self):
        await self.engine.aclose()

    def get_repo(self, user: str, name: str | None = None) -> Repository:
        """Repository by owner and name, or by ``owner/name`` alone."""
        if name is None:
            return Repository(self.engine, fullname=user)
        return Repository(self.engine, user, name)

    def get_issues(self, user: str, name: str) -> Issue:
        return Issue(self.engine, user, name)

    def search(self, defaults: dict | None = None) -> Search:
        return Search(self.engine, defaults)

    def get_user(self, username: str | None = None) -> User:
        return User(self.engine, username)
