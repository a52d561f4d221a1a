"""Request engine shared by every GitHub API wrapper, built on httpx."""

import base64
import json
import logging
import time
from collections.abc import Callable, Mapping

import httpx

from .errors import RequestError
from .models import (
    METHODS,
    METHODS_WITH_NO_BODY,
    NO_CONTENT,
    ApiResponse,
    Credentials,
    RequestDescriptor,
)
from .settings import DEFAULT_API_BASE

log = logging.getLogger("github_wrapper.request")

ACCEPT_JSON = "application/vnd.github.v3+json"
ACCEPT_RAW = "application/vnd.github.v3.raw+json"
CONTENT_TYPE = "application/json;charset=UTF-8"
CACHE_BUSTER_PARAM = "timestamp"

Callback = Callable[..., object]


def authorization_header(credentials: Credentials | None) -> str | None:
    """Header value for the given credentials, or None for anonymous access."""
    if credentials is None:
        return None
    if credentials.token:
        return f"token {credentials.token}"
    if credentials.username and credentials.password:
        pair = f"{credentials.username}:{credentials.password}".encode()
        return f"Basic {base64.b64encode(pair).decode('ascii')}"
    return None


def get_next_page(response: httpx.Response) -> str | None:
    """URL of the rel="next" entry in the Link header, if there is one.

    A missing or unparseable header means there is no next page.
    """
    return response.links.get("next", {}).get("url") or None


class RequestEngine:
    """Thin async client for GitHub REST API endpoints.

    Owns the authorization header (computed once from the credentials) and the
    underlying ``httpx.AsyncClient``. Every wrapper delegates its network I/O
    to an instance of this class.
    """

    def __init__(
        self,
        credentials: Credentials | None = None,
        api_base: str | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.credentials = credentials or Credentials()
        self.api_base = (api_base or DEFAULT_API_BASE).rstrip("/")
        self._authorization = authorization_header(self.credentials)
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(follow_redirects=True)
        self._last_timestamp = 0

    @property
    def authorization(self) -> str | None:
        return self._authorization

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def aclose(self):
        if self._owns_client:
            await self._client.aclose()

    def _next_timestamp(self) -> int:
        # Strictly increasing so back-to-back requests never share a URL
        now = int(time.time() * 1000)
        self._last_timestamp = max(now, self._last_timestamp + 1)
        return self._last_timestamp

    def get_url(self, path: str) -> httpx.URL:
        """Resolve ``path`` against the API base and stamp the cache buster.

        Paths carrying a scheme are taken to be absolute URLs already (e.g. a
        pagination cursor). An existing ``timestamp`` parameter is replaced in
        place rather than repeated.
        """
        url = httpx.URL(path)
        if not url.is_absolute_url:
            ep = path if path.startswith("/") else f"/{path}"
            url = httpx.URL(f"{self.api_base}{ep}")
        return url.copy_set_param(CACHE_BUSTER_PARAM, self._next_timestamp())

    def get_request_headers(self, raw: bool = False) -> dict[str, str]:
        headers = {
            "Accept": ACCEPT_RAW if raw else ACCEPT_JSON,
            "Content-Type": CONTENT_TYPE,
        }
        if self._authorization:
            headers["Authorization"] = self._authorization
        return headers

    def build_request(self, method: str, path: str, data=None, raw: bool = False) -> RequestDescriptor:
        """Build the descriptor for one call.

        For GET, HEAD and DELETE a mapping payload becomes query parameters;
        for every other verb the payload is sent as the JSON body.
        """
        method = method.upper()
        if method not in METHODS:
            raise ValueError(f"Unsupported HTTP method: {method}")

        url = self.get_url(path)
        body = None
        if data is not None:
            if method in METHODS_WITH_NO_BODY and isinstance(data, Mapping):
                params = {k: v for k, v in data.items() if v is not None}
                url = url.copy_merge_params(params)
            else:
                body = json.dumps(data).encode("utf-8")

        return RequestDescriptor(
            method=method,
            url=url,
            headers=self.get_request_headers(raw),
            body=body,
            raw=raw,
        )

    async def request(
        self,
        method: str,
        path: str,
        data=None,
        callback: Callback | None = None,
        raw: bool = False,
    ) -> ApiResponse | None:
        """Make a request against the GitHub API.

        Args:
            method: HTTP verb (GET, HEAD, DELETE, POST, PUT, PATCH)
            path: API path relative to the API base, or an absolute URL
            data: Payload; query parameters for verbs without a body
            callback: Optional ``callback(error, data, response)``
            raw: Ask for the raw media type and return the body as text

        Returns:
            ApiResponse on success. On failure a RequestError is raised, unless
            a callback was given: the callback then receives the error as its
            only argument and None is returned.
        """
        descriptor = self.build_request(method, path, data, raw)
        log.debug("%s to %s", descriptor.method, descriptor.url)

        try:
            response = await self._client.request(
                descriptor.method,
                descriptor.url,
                headers=descriptor.headers,
                content=descriptor.body,
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            error = _build_error(path, exc)
            log.debug(
                "error making request %s %s %s",
                descriptor.method,
                descriptor.url,
                error.response.text if error.response is not None else exc,
            )
            if callback is None:
                raise error from exc
            callback(error)
            return None

        result = ApiResponse(data=_parse_body(response, raw), response=response)
        if callback is not None:
            callback(None, result.data, response)
        return result

    async def request_all_pages(self, path: str, callback: Callback | None = None) -> list | None:
        """GET ``path`` and every following page, in order.

        Pages are fetched one at a time by following the Link header's
        rel="next" cursor. A failing page aborts the walk and nothing collected
        so far is returned.
        """
        results: list = []
        next_url: str | None = path
        result = None

        try:
            while next_url:
                result = await self.request("GET", next_url)
                if isinstance(result.data, list):
                    results.extend(result.data)
                elif result.response.content:
                    results.append(result.data)

                next_url = get_next_page(result.response)
                if next_url:
                    log.debug("getting next page: %s", next_url)
        except RequestError as error:
            if callback is None:
                raise
            callback(error)
            return None

        if callback is not None:
            callback(None, results, result.response)
        return results


def _build_error(path: str, exc: httpx.HTTPError) -> RequestError:
    try:
        request = exc.request
    except RuntimeError:
        request = None
    response = getattr(exc, "response", None)
    return RequestError(path, request=request, response=response)


def _parse_body(response: httpx.Response, raw: bool):
    if response.status_code == 204 or not response.content:
        return NO_CONTENT
    if raw:
        return response.text
    try:
        return response.json()
    except ValueError:
        return response.text
