"""Unit tests for search option handling."""

from unittest.mock import MagicMock

from .request_engine import RequestEngine
from .search import Search, options_with_defaults


def describe_options_with_defaults():
    def it_fills_in_list_defaults():
        assert options_with_defaults() == {"type": "all", "sort": "updated", "per_page": "100"}

    def it_keeps_caller_values():
        options = options_with_defaults({"sort": "stars", "q": "httpx"})
        assert options == {"type": "all", "sort": "stars", "per_page": "100", "q": "httpx"}

    def it_replaces_empty_caller_values():
        options = options_with_defaults({"sort": "", "per_page": 0, "q": "httpx"})
        assert options == {"type": "all", "sort": "updated", "per_page": "100", "q": "httpx"}

    def it_does_not_mutate_its_argument():
        options = {"q": "httpx"}
        options_with_defaults(options)
        assert options == {"q": "httpx"}


def describe_Search():
    def it_overlays_call_options_on_defaults():
        search = Search(RequestEngine(client=MagicMock()), {"sort": "stars"})
        merged = search._extend_defaults({"q": "language:python", "per_page": "10"})
        assert merged == {"type": "all", "sort": "stars", "per_page": "10", "q": "language:python"}

    def it_never_changes_its_defaults():
        search = Search(RequestEngine(client=MagicMock()))
        search._extend_defaults({"sort": "forks"})
        assert search.defaults["sort"] == "updated"
