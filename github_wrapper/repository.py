"""Repository wrapper: refs, contents, git data, pulls, hooks and releases."""

import asyncio
import base64
import logging
from datetime import datetime
from urllib.parse import quote

from .errors import RequestError
from .models import BranchHeadCache
from .request_engine import RequestEngine
from .resource import Resource

log = logging.getLogger("github_wrapper.repository")

DEFAULT_BRANCH = "master"
CONTRIBUTORS_RETRY_DELAY = 1.0  # seconds between polls while GitHub computes stats


def _encode_content(content: str | bytes) -> str:
    if isinstance(content, str):
        content = content.encode("utf-8")
    return base64.b64encode(content).decode("ascii")


def _iso(value):
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def _sha(data):
    return data["sha"]


class Repository(Resource):
    """A single repository, addressed as ``user/name``.

    Every public method is a coroutine that accepts an optional ``callback``
    invoked as ``callback(error, data, response)``; see RequestEngine.request.
    """

    def __init__(
        self,
        engine: RequestEngine,
        user: str | None = None,
        name: str | None = None,
        fullname: str | None = None,
    ):
        super().__init__(engine)
        if user and name:
            fullname = f"{user}/{name}"
        elif not fullname:
            raise ValueError("Repository needs either user and name or fullname")
        self.fullname = fullname
        self.owner = fullname.split("/", 1)[0]
        self._repo_path = f"/repos/{fullname}"
        self.heads = BranchHeadCache()

    def _path(self, suffix: str = "") -> str:
        return f"{self._repo_path}{suffix}"

    async def _update_tree(self, branch: str) -> str:
        """Head commit of ``branch``, from the cache when known."""
        sha = self.heads.get(branch)
        if sha:
            return sha
        sha, _ = await self._fetch("GET", self._path(f"/git/refs/heads/{branch}"), pick=_ref_sha)
        self.heads.set(branch, sha)
        return sha

    # Refs

    async def get_ref(self, ref: str, callback=None):
        """Sha of the object ``ref`` points to (or the matching refs if ambiguous)."""
        return await self._deliver(
            self._fetch("GET", self._path(f"/git/refs/{ref}"), pick=_ref_sha), callback
        )

    async def create_ref(self, options: dict, callback=None):
        return await self._request("POST", self._path("/git/refs"), options, callback)

    async def delete_ref(self, ref: str, callback=None):
        return await self._request("DELETE", self._path(f"/git/refs/{ref}"), None, callback)

    async def list_branches(self, callback=None):
        def names(heads):
            return [head["ref"].removeprefix("refs/heads/") for head in heads]

        return await self._deliver(
            self._fetch("GET", self._path("/git/refs/heads"), pick=names), callback
        )

    async def branch(self, old_branch: str, new_branch: str | None = None, callback=None):
        """Create ``new_branch`` from ``old_branch``.

        Called with a single name, the branch is created from master.
        """
        if new_branch is None:
            old_branch, new_branch = DEFAULT_BRANCH, old_branch

        async def operation():
            sha, _ = await self._fetch("GET", self._path(f"/git/refs/heads/{old_branch}"), pick=_ref_sha)
            return await self._fetch(
                "POST",
                self._path("/git/refs"),
                {"ref": f"refs/heads/{new_branch}", "sha": sha},
            )

        return await self._deliver(operation(), callback)

    async def update_head(self, head: str, commit_sha: str, callback=None):
        """Point ``heads/<head>`` at ``commit_sha``."""

        async def operation():
            result = await self._fetch("PATCH", self._path(f"/git/refs/heads/{head}"), {"sha": commit_sha})
            self.heads.set(head, commit_sha)
            return result

        return await self._deliver(operation(), callback)

    # Repository

    async def show(self, callback=None):
        return await self._request("GET", self._path(), None, callback)

    async def delete_repo(self, callback=None):
        return await self._request("DELETE", self._path(), None, callback)

    async def list_tags(self, callback=None):
        return await self._request("GET", self._path("/tags"), None, callback)

    async def fork(self, callback=None):
        return await self._request("POST", self._path("/forks"), None, callback)

    async def list_forks(self, callback=None):
        return await self._request("GET", self._path("/forks"), None, callback)

    async def collaborators(self, callback=None):
        return await self._request("GET", self._path("/collaborators"), None, callback)

    async def is_collaborator(self, username: str, callback=None):
        return await self._deliver(self._check(self._path(f"/collaborators/{username}")), callback)

    async def contributors(
        self,
        callback=None,
        retry_delay: float = CONTRIBUTORS_RETRY_DELAY,
        max_attempts: int | None = None,
    ):
        """Contributor statistics.

        GitHub answers 202 while it computes them; the request is re-issued
        every ``retry_delay`` seconds until real data arrives. With
        ``max_attempts`` set, the last 202 response is returned once the
        attempts run out.
        """

        async def operation():
            attempt = 0
            while True:
                result = await self._engine.request("GET", self._path("/stats/contributors"))
                attempt += 1
                if result.status != 202:
                    return result.data, result.response
                if max_attempts is not None and attempt >= max_attempts:
                    return result.data, result.response
                log.debug("contributor stats for %s not ready, retrying in %ss", self.fullname, retry_delay)
                await asyncio.sleep(retry_delay)

        return await self._deliver(operation(), callback)

    # Pull requests

    async def list_pulls(self, options: dict | None = None, callback=None):
        return await self._request("GET", self._path("/pulls"), options or {}, callback)

    async def get_pull(self, number: int, callback=None):
        return await self._request("GET", self._path(f"/pulls/{number}"), None, callback)

    async def create_pull_request(self, options: dict, callback=None):
        return await self._request("POST", self._path("/pulls"), options, callback)

    async def compare(self, base: str, head: str, callback=None):
        return await self._request("GET", self._path(f"/compare/{base}...{head}"), None, callback)

    # Git data

    async def get_blob(self, sha: str, callback=None):
        return await self._request("GET", self._path(f"/git/blobs/{sha}"), None, callback, raw=True)

    async def get_commit(self, sha: str, callback=None):
        return await self._request("GET", self._path(f"/git/commits/{sha}"), None, callback)

    async def get_sha(self, branch: str | None, path: str | None, callback=None):
        """Sha of ``path`` on ``branch``: a blob for files, a tree for directories.

        Without a path, the sha of the branch head.
        """
        if not path:
            return await self.get_ref(f"heads/{branch}", callback)
        params = {"ref": branch} if branch else None
        return await self._deliver(
            self._fetch("GET", self._path(f"/contents/{quote(path)}"), params, pick=_sha), callback
        )

    async def get_statuses(self, sha: str, callback=None):
        return await self._request("GET", self._path(f"/statuses/{sha}"), None, callback)

    async def get_tree(self, tree: str, recursive: bool = False, callback=None):
        params = {"recursive": 1} if recursive else None
        return await self._deliver(
            self._fetch("GET", self._path(f"/git/trees/{tree}"), params, pick=lambda data: data["tree"]),
            callback,
        )

    async def post_blob(self, content: str | bytes | bytearray, callback=None):
        """Create a blob; the callback and result carry its sha.

        Text is sent as UTF-8, bytes as base64.
        """
        if isinstance(content, str):
            payload = {"content": content, "encoding": "utf-8"}
        elif isinstance(content, (bytes, bytearray)):
            payload = {"content": _encode_content(bytes(content)), "encoding": "base64"}
        else:
            raise TypeError(
                f"Unknown content passed to post_blob: {type(content).__name__}. Must be str or bytes"
            )
        return await self._deliver(self._fetch("POST", self._path("/git/blobs"), payload, pick=_sha), callback)

    async def update_tree(self, base_tree: str, path: str, blob_sha: str, callback=None):
        """Add ``blob_sha`` at ``path`` on top of ``base_tree``; yields the new tree sha."""
        data = {
            "base_tree": base_tree,
            "tree": [{"path": path, "mode": "100644", "type": "blob", "sha": blob_sha}],
        }
        return await self._deliver(self._fetch("POST", self._path("/git/trees"), data, pick=_sha), callback)

    async def post_tree(self, tree: list[dict], callback=None):
        return await self._deliver(
            self._fetch("POST", self._path("/git/trees"), {"tree": tree}, pick=_sha), callback
        )

    async def commit(self, parent: str, tree: str, message: str, callback=None):
        """Create a commit of ``tree`` on top of ``parent``; yields the commit sha.

        The author email is taken from the authenticated user.
        """

        async def operation():
            user, _ = await self._fetch("GET", "/user")
            data = {
                "message": message,
                "author": {"name": self.owner, "email": user.get("email")},
                "parents": [parent],
                "tree": tree,
            }
            return await self._fetch("POST", self._path("/git/commits"), data, pick=_sha)

        return await self._deliver(operation(), callback)

    # Contents

    async def contents(self, ref: str | None, path: str | None, callback=None):
        suffix = f"/contents/{quote(path)}" if path else "/contents"
        return await self._request("GET", self._path(suffix), {"ref": ref}, callback)

    async def read(self, branch: str | None, path: str, callback=None):
        """Raw content of the file at ``path``."""
        params = {"ref": branch} if branch else None
        return await self._request("GET", self._path(f"/contents/{quote(path)}"), params, callback, raw=True)

    async def file_sha(self, branch: str | None, path: str) -> str | None:
        """Sha of the file at ``path``, or None when it does not exist yet."""
        params = {"ref": branch} if branch else None
        try:
            sha, _ = await self._fetch("GET", self._path(f"/contents/{quote(path)}"), params, pick=_sha)
        except RequestError as e:
            if e.status == 404:
                return None
            raise
        return sha

    async def write(
        self,
        branch: str,
        path: str,
        content: str | bytes,
        message: str,
        encode: bool = True,
        committer: dict | None = None,
        author: dict | None = None,
        callback=None,
    ):
        """Create or update the file at ``path`` on ``branch``."""

        async def operation():
            sha = await self.file_sha(branch, path)
            data = {
                "message": message,
                "content": _encode_content(content) if encode else content,
                "branch": branch,
            }
            if committer:
                data["committer"] = committer
            if author:
                data["author"] = author
            if sha:
                data["sha"] = sha
            return await self._fetch("PUT", self._path(f"/contents/{quote(path)}"), data)

        return await self._deliver(operation(), callback)

    async def remove(self, branch: str, path: str, callback=None):
        async def operation():
            sha, _ = await self._fetch(
                "GET", self._path(f"/contents/{quote(path)}"), {"ref": branch}, pick=_sha
            )
            data = {"message": f"{path} is removed", "sha": sha, "branch": branch}
            return await self._fetch("DELETE", self._path(f"/contents/{quote(path)}"), data)

        return await self._deliver(operation(), callback)

    async def move(self, branch: str, path: str, new_path: str, callback=None):
        """Rename ``path`` to ``new_path`` in a single commit on ``branch``."""

        async def operation():
            try:
                return await self._move(branch, path, new_path)
            except RequestError:
                self.heads.invalidate(branch)
                raise

        return await self._deliver(operation(), callback)

    async def _move(self, branch: str, path: str, new_path: str):
        latest = await self._update_tree(branch)
        tree, _ = await self._fetch(
            "GET", self._path(f"/git/trees/{latest}"), {"recursive": 1}, pick=lambda data: data["tree"]
        )
        # Blob entries carry full paths, so subtrees are rebuilt from them
        entries = []
        for entry in tree:
            if entry["type"] == "tree":
                continue
            if entry["path"] == path:
                entry = {**entry, "path": new_path}
            entries.append(entry)

        root, _ = await self._fetch("POST", self._path("/git/trees"), {"tree": entries}, pick=_sha)
        log.debug("moving %s to %s on %s", path, new_path, branch)
        commit = await self.commit(latest, root, f"Moved {path} to {new_path}")
        result = await self._fetch("PATCH", self._path(f"/git/refs/heads/{branch}"), {"sha": commit.data})
        self.heads.set(branch, commit.data)
        return result

    async def get_commits(
        self,
        sha: str | None = None,
        path: str | None = None,
        author: str | None = None,
        since: datetime | str | None = None,
        until: datetime | str | None = None,
        page: int | None = None,
        per_page: int | None = None,
        callback=None,
    ):
        """List commits, optionally filtered by start sha, path, author and date range."""
        params = {
            "sha": sha,
            "path": path,
            "author": author,
            "since": _iso(since),
            "until": _iso(until),
            "page": page,
            "per_page": per_page,
        }
        return await self._request("GET", self._path("/commits"), params, callback)

    # Stars

    async def is_starred(self, owner: str, repository: str, callback=None):
        return await self._deliver(self._check(f"/user/starred/{owner}/{repository}"), callback)

    async def star(self, owner: str, repository: str, callback=None):
        return await self._request("PUT", f"/user/starred/{owner}/{repository}", None, callback)

    async def unstar(self, owner: str, repository: str, callback=None):
        return await self._request("DELETE", f"/user/starred/{owner}/{repository}", None, callback)

    # Hooks

    async def list_hooks(self, callback=None):
        return await self._request("GET", self._path("/hooks"), None, callback)

    async def get_hook(self, hook_id: int, callback=None):
        return await self._request("GET", self._path(f"/hooks/{hook_id}"), None, callback)

    async def create_hook(self, options: dict, callback=None):
        return await self._request("POST", self._path("/hooks"), options, callback)

    async def edit_hook(self, hook_id: int, options: dict, callback=None):
        return await self._request("PATCH", self._path(f"/hooks/{hook_id}"), options, callback)

    async def delete_hook(self, hook_id: int, callback=None):
        return await self._request("DELETE", self._path(f"/hooks/{hook_id}"), None, callback)

    # Releases

    async def create_release(self, options: dict, callback=None):
        return await self._request("POST", self._path("/releases"), options, callback)

    async def edit_release(self, release_id: int, options: dict, callback=None):
        return await self._request("PATCH", self._path(f"/releases/{release_id}"), options, callback)

    async def get_release(self, release_id: int, callback=None):
        return await self._request("GET", self._path(f"/releases/{release_id}"), None, callback)

    async def delete_release(self, release_id: int, callback=None):
        return await self._request("DELETE", self._path(f"/releases/{release_id}"), None, callback)

    async def _check(self, path: str):
        """(True, response) for a 2xx answer, (False, response) for a 404."""
        try:
            result = await self._engine.request("GET", path)
        except RequestError as e:
            if e.status == 404:
                return False, e.response
            raise
        return True, result.response


def _ref_sha(data):
    # A ref prefix matching several refs comes back as a list
    if isinstance(data, list):
        return [ref["object"]["sha"] for ref in data]
    return data["object"]["sha"]
