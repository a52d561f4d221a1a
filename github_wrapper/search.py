"""Search API wrapper."""

import logging

from .request_engine import RequestEngine
from .resource import Resource

log = logging.getLogger("github_wrapper.search")


def options_with_defaults(options: dict | None = None) -> dict:
    """Copy of ``options`` with the list defaults filled in."""
    request_options = dict(options or {})
    request_options["type"] = request_options.get("type") or "all"
    request_options["sort"] = request_options.get("sort") or "updated"
    request_options["per_page"] = request_options.get("per_page") or "100"
    return request_options


class Search(Resource):
    """Searches over repositories, code, issues and users.

    ``defaults`` are applied to every search and overridden per call.
    """

    def __init__(self, engine: RequestEngine, defaults: dict | None = None):
        super().__init__(engine)
        self._defaults = options_with_defaults(defaults)

    @property
    def defaults(self) -> dict:
        return dict(self._defaults)

    def _extend_defaults(self, options: dict | None) -> dict:
        return {**self._defaults, **(options or {})}

    async def _search(self, scope: str, options: dict | None, callback):
        request_options = self._extend_defaults(options)
        log.debug("searching %s with options: %s", scope, request_options)
        return await self._request("GET", f"/search/{scope}", request_options, callback)

    async def repositories(self, options: dict | None = None, callback=None):
        return await self._search("repositories", options, callback)

    async def code(self, options: dict | None = None, callback=None):
        return await self._search("code", options, callback)

    async def issues(self, options: dict | None = None, callback=None):
        return await self._search("issues", options, callback)

    async def users(self, options: dict | None = None, callback=None):
        return await self._search("users", options, callback)
