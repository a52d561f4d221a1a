"""Exceptions raised by the GitHub wrapper."""

import httpx


class GitHubWrapperError(Exception):
    """Base class for errors raised by this package."""


class RequestError(GitHubWrapperError):
    """A request that failed at the transport layer or with a non-2xx status.

    ``response`` is None when the server was never reached (connection
    refused, transport timeout); the transport exception is then available
    as ``__cause__``.
    """

    def __init__(
        self,
        path: str,
        request: httpx.Request | None,
        response: httpx.Response | None,
    ):
        self.path = path
        self.request = request
        self.response = response
        self.status = response.status_code if response is not None else None
        if self.status is not None:
            message = f"GitHub API error {self.status} for {path}"
        else:
            message = f"GitHub API request failed for {path}"
        super().__init__(message)
