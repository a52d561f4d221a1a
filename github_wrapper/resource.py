"""Common plumbing for the resource wrappers (repository, issue, search, user)."""

from collections.abc import Awaitable, Callable

from .errors import RequestError
from .models import ApiResponse
from .request_engine import Callback, RequestEngine


class Resource:
    """A wrapper around one area of the API.

    Holds a reference to the shared RequestEngine; it does not extend it.
    """

    def __init__(self, engine: RequestEngine):
        self._engine = engine

    @property
    def engine(self) -> RequestEngine:
        return self._engine

    async def _request(self, method, path, data=None, callback=None, raw=False):
        return await self._engine.request(method, path, data, callback, raw)

    async def _request_all_pages(self, path, callback=None):
        return await self._engine.request_all_pages(path, callback)

    async def _fetch(self, method, path, data=None, pick: Callable | None = None, raw=False):
        """Request and reduce the body with ``pick``. Errors propagate."""
        result = await self._engine.request(method, path, data, raw=raw)
        if pick is not None:
            return pick(result.data), result.response
        return result.data, result.response

    async def _deliver(self, operation: Awaitable, callback: Callback | None) -> ApiResponse | None:
        """Await an operation yielding ``(data, response)`` and report its outcome.

        Mirrors RequestEngine.request: the callback, when given, is called
        exactly once, and errors are raised only when there is no callback.
        """
        try:
            data, response = await operation
        except RequestError as error:
            if callback is None:
                raise
            callback(error)
            return None
        if callback is not None:
            callback(None, data, response)
        return ApiResponse(data=data, response=response)
