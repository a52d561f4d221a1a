"""Data models and constants for the GitHub wrapper."""

from dataclasses import dataclass, field
from typing import Any

import httpx

METHODS_WITH_NO_BODY = frozenset({"GET", "HEAD", "DELETE"})
METHODS = METHODS_WITH_NO_BODY | {"POST", "PUT", "PATCH"}

# Returned in place of a body when the API answers with no content (e.g. 204)
NO_CONTENT = True


@dataclass(frozen=True)
class Credentials:
    """Either an OAuth token or a username and password. Empty means anonymous."""

    token: str | None = None
    username: str | None = None
    password: str | None = None

    @classmethod
    def from_settings(cls, settings) -> "Credentials":
        return cls(
            token=settings.github_token,
            username=settings.github_username,
            password=settings.github_password,
        )


@dataclass(frozen=True)
class RequestDescriptor:
    """A single request, fully resolved and ready to dispatch."""

    method: str
    url: httpx.URL
    headers: dict[str, str]
    body: bytes | None = None
    raw: bool = False


@dataclass
class ApiResponse:
    """Successful result of one request.

    ``data`` is the parsed JSON body, the response text for raw requests or
    non-JSON bodies, or ``NO_CONTENT`` when the server sent nothing back.
    """

    data: Any
    response: httpx.Response

    @property
    def status(self) -> int:
        return self.response.status_code


@dataclass
class BranchHeadCache:
    """Last known head commit per branch.

    Best effort only: two overlapping writes to the same branch can leave a
    stale sha behind. Not safe for concurrent use.
    """

    _heads: dict[str, str] = field(default_factory=dict)

    def get(self, branch: str) -> str | None:
        return self._heads.get(branch)

    def set(self, branch: str, sha: str | None):
        if sha is None:
            self._heads.pop(branch, None)
        else:
            self._heads[branch] = sha

    def invalidate(self, branch: str | None = None):
        """Forget one branch, or every branch when none is given."""
        if branch is None:
            self._heads.clear()
        else:
            self._heads.pop(branch, None)
