"""User API wrapper."""

from urllib.parse import urlencode

from .request_engine import RequestEngine
from .resource import Resource


class User(Resource):
    """The authenticated user, or a named user when ``username`` is given."""

    def __init__(self, engine: RequestEngine, username: str | None = None):
        super().__init__(engine)
        self.username = username

    def _user_path(self) -> str:
        return f"/users/{self.username}" if self.username else "/user"

    async def show(self, callback=None):
        return await self._request("GET", self._user_path(), None, callback)

    async def notifications(self, options: dict | None = None, callback=None):
        return await self._request("GET", "/notifications", options or {}, callback)

    async def list_repos(self, options: dict | None = None, callback=None):
        path = f"{self._user_path()}/repos"
        if options:
            path = f"{path}?{urlencode(options, doseq=True)}"
        return await self._request_all_pages(path, callback)
