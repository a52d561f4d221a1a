"""Async client for the GitHub REST API.

A single RequestEngine handles auth headers, URL resolution, dispatch and
pagination; the repository, issue, search and user wrappers delegate to it.
"""

from .cli import main
from .client import GitHub
from .errors import GitHubWrapperError, RequestError
from .issue import Issue
from .models import NO_CONTENT, ApiResponse, Credentials
from .repository import Repository
from .request_engine import RequestEngine
from .search import Search
from .user import User

__all__ = [
    "main",
    "GitHub",
    "GitHubWrapperError",
    "RequestError",
    "Issue",
    "NO_CONTENT",
    "ApiResponse",
    "Credentials",
    "Repository",
    "RequestEngine",
    "Search",
    "User",
]

if __name__ == "__main__":
    main()
