"""Integration tests for the Search, Issue and User wrappers and the GitHub facade."""

import json
from unittest.mock import MagicMock

import httpx
import respx

from github_wrapper.client import GitHub
from github_wrapper.issue import Issue
from github_wrapper.models import Credentials
from github_wrapper.repository import Repository
from github_wrapper.search import Search
from github_wrapper.settings import Settings
from github_wrapper.user import User


class TestSearch:
    async def test_searches_with_defaults(self, api, engine):
        route = api.get("/search/repositories").mock(return_value=httpx.Response(200, json={"total_count": 0, "items": []}))

        result = await Search(engine).repositories({"q": "httpx"})

        params = route.calls.last.request.url.params
        assert params["q"] == "httpx"
        assert params["type"] == "all"
        assert params["sort"] == "updated"
        assert params["per_page"] == "100"
        assert result.data["total_count"] == 0

    async def test_instance_defaults_apply_to_every_scope(self, api, engine):
        code = api.get("/search/code").mock(return_value=httpx.Response(200, json={}))
        users = api.get("/search/users").mock(return_value=httpx.Response(200, json={}))
        search = Search(engine, {"per_page": "10"})

        await search.code({"q": "addClass"})
        await search.users({"q": "octo", "sort": "followers"})

        assert code.calls.last.request.url.params["per_page"] == "10"
        assert users.calls.last.request.url.params["sort"] == "followers"
        assert users.calls.last.request.url.params["per_page"] == "10"

    async def test_issues_with_callback(self, api, engine):
        api.get("/search/issues").mock(return_value=httpx.Response(422, json={"message": "Validation Failed"}))
        callback = MagicMock()

        result = await Search(engine).issues({"q": ""}, callback)

        assert result is None
        assert callback.call_args.args[0].status == 422


class TestIssue:
    async def test_list_issues_follows_pages(self, api, engine):
        route = api.get("/repos/acme/widget/issues").mock(
            side_effect=[
                httpx.Response(
                    200,
                    json=[{"number": 2}],
                    headers={"link": '<https://api.github.com/repos/acme/widget/issues?state=open&page=2>; rel="next"'},
                ),
                httpx.Response(200, json=[{"number": 1}]),
            ]
        )

        issues = await Issue(engine, "acme", "widget").list_issues({"state": "open"})

        assert issues == [{"number": 2}, {"number": 1}]
        first, second = (call.request.url.params for call in route.calls)
        assert first["state"] == "open"
        assert second["page"] == "2"

    async def test_list_issues_sends_list_options_as_repeated_params(self, api, engine):
        route = api.get("/repos/acme/widget/issues").mock(return_value=httpx.Response(200, json=[]))

        await Issue(engine, "acme", "widget").list_issues({"labels": ["bug", "ui"], "state": "open"})

        params = route.calls.last.request.url.params
        assert params.get_list("labels") == ["bug", "ui"]
        assert params["state"] == "open"

    async def test_create_issue(self, api, engine):
        route = api.post("/repos/acme/widget/issues").mock(return_value=httpx.Response(201, json={"number": 9}))

        result = await Issue(engine, "acme", "widget").create_issue({"title": "Crash on start"})

        assert result.data == {"number": 9}
        assert json.loads(route.calls.last.request.content) == {"title": "Crash on start"}

    async def test_edit_issue(self, api, engine):
        route = api.patch("/repos/acme/widget/issues/9").mock(return_value=httpx.Response(200, json={"state": "closed"}))

        await Issue(engine, "acme", "widget").edit_issue(9, {"state": "closed"})

        assert json.loads(route.calls.last.request.content) == {"state": "closed"}

    async def test_comments(self, api, engine):
        api.get("/repos/acme/widget/issues/9/comments").mock(return_value=httpx.Response(200, json=[{"id": 1}]))
        post = api.post("/repos/acme/widget/issues/9/comments").mock(return_value=httpx.Response(201, json={"id": 2}))
        issues = Issue(engine, "acme", "widget")

        assert await issues.list_issue_comments(9) == [{"id": 1}]
        await issues.create_issue_comment(9, "Fixed in #10")

        assert json.loads(post.calls.last.request.content) == {"body": "Fixed in #10"}

    async def test_get_issue(self, api, engine):
        api.get("/repos/acme/widget/issues/9").mock(return_value=httpx.Response(200, json={"number": 9}))

        result = await Issue(engine, "acme", "widget").get_issue(9)

        assert result.data["number"] == 9


class TestUser:
    async def test_authenticated_user(self, api, engine):
        api.get("/user").mock(return_value=httpx.Response(200, json={"login": "octo"}))

        result = await User(engine).show()

        assert result.data["login"] == "octo"

    async def test_named_user(self, api, engine):
        api.get("/users/hubot").mock(return_value=httpx.Response(200, json={"login": "hubot"}))

        result = await User(engine, "hubot").show()

        assert result.data["login"] == "hubot"

    async def test_notifications_bad_credentials(self, api, engine):
        api.get("/notifications").mock(return_value=httpx.Response(401, json={"message": "Bad credentials"}))
        callback = MagicMock()

        await User(engine).notifications(callback=callback)

        (error,) = callback.call_args.args
        assert error.status == 401
        assert error.response.json()["message"] == "Bad credentials"

    async def test_list_repos_all_pages(self, api, engine):
        api.get("/users/hubot/repos").mock(
            side_effect=[
                httpx.Response(
                    200,
                    json=[{"id": 1}],
                    headers={"link": '<https://api.github.com/users/hubot/repos?type=owner&page=2>; rel="next"'},
                ),
                httpx.Response(200, json=[{"id": 2}]),
            ]
        )

        repos = await User(engine, "hubot").list_repos({"type": "owner"})

        assert repos == [{"id": 1}, {"id": 2}]

    async def test_list_repos_sends_list_options_as_repeated_params(self, api, engine):
        route = api.get("/users/hubot/repos").mock(return_value=httpx.Response(200, json=[]))

        await User(engine, "hubot").list_repos({"affiliation": ["owner", "collaborator"]})

        assert route.calls.last.request.url.params.get_list("affiliation") == ["owner", "collaborator"]


class TestGitHub:
    async def test_wrappers_share_one_engine(self):
        async with GitHub(Credentials(token="t")) as github:
            repo = github.get_repo("acme", "widget")
            issues = github.get_issues("acme", "widget")
            search = github.search()
            user = github.get_user()

            assert isinstance(repo, Repository)
            assert isinstance(issues, Issue)
            assert isinstance(search, Search)
            assert isinstance(user, User)
            assert repo.engine is issues.engine is search.engine is user.engine is github.engine
            assert github.engine.authorization == "token t"

    async def test_get_repo_by_fullname(self):
        async with GitHub() as github:
            assert github.get_repo("acme/widget").fullname == "acme/widget"

    async def test_from_settings_uses_api_base(self):
        settings = Settings(_env_file=None, github_token="ghe-token", github_api_base="https://ghe.example.com/api/v3")

        with respx.mock(base_url="https://ghe.example.com/api/v3") as router:
            route = router.get("/repos/acme/widget").mock(return_value=httpx.Response(200, json={"id": 7}))
            async with GitHub.from_settings(settings) as github:
                result = await github.get_repo("acme", "widget").show()

        assert result.data == {"id": 7}
        assert route.calls.last.request.headers["Authorization"] == "token ghe-token"
