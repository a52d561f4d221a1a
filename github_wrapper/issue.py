"""Issue API wrapper for a single repository."""

import logging
from urllib.parse import urlencode

from .request_engine import RequestEngine
from .resource import Resource

log = logging.getLogger("github_wrapper.issue")


class Issue(Resource):
    """Issues and issue comments of ``user/name``."""

    def __init__(self, engine: RequestEngine, user: str, name: str):
        super().__init__(engine)
        self.fullname = f"{user}/{name}"
        self._issues_path = f"/repos/{user}/{name}/issues"

    async def list_issues(self, options: dict | None = None, callback=None):
        """Every issue matching ``options`` (state, labels, ...), across all pages."""
        path = self._issues_path
        if options:
            path = f"{path}?{urlencode(options, doseq=True)}"
        return await self._request_all_pages(path, callback)

    async def get_issue(self, number: int, callback=None):
        return await self._request("GET", f"{self._issues_path}/{number}", None, callback)

    async def create_issue(self, options: dict, callback=None):
        return await self._request("POST", self._issues_path, options, callback)

    async def edit_issue(self, number: int, options: dict, callback=None):
        return await self._request("PATCH", f"{self._issues_path}/{number}", options, callback)

    async def list_issue_comments(self, number: int, callback=None):
        return await self._request_all_pages(f"{self._issues_path}/{number}/comments", callback)

    async def create_issue_comment(self, number: int, body: str, callback=None):
        log.debug("commenting on %s#%s", self.fullname, number)
        return await self._request(
            "POST", f"{self._issues_path}/{number}/comments", {"body": body}, callback
        )
