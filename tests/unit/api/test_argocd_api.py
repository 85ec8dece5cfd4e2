import json

import httpx
import pytest

from argocd_gateway.api.argocd import (
    ArgoCDAPI,
    application_definition,
    handle_response,
    project_definition,
)
from argocd_gateway.errors import ArgoCDConnectionError, ArgoCDError


def _make_json_response(status_code: int, payload, method: str = "GET") -> httpx.Response:
    req = httpx.Request(method, "https://argocd.local/api/v1/test")
    return httpx.Response(
        status_code,
        request=req,
        content=json.dumps(payload).encode(),
        headers={"Content-Type": "application/json"},
    )


class RecordingBaseAPI:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    async def request(self, method, endpoint, **kwargs):
        self.requests.append((method, endpoint, kwargs))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def make_api(*responses, token="tok"):
    api = ArgoCDAPI("https://argocd.local/", token)
    api.api = RecordingBaseAPI(*responses)
    return api


def test_handle_response_success_returns_body():
    assert handle_response(_make_json_response(200, {"metadata": {"name": "web"}})) == {"metadata": {"name": "web"}}


def test_handle_response_raises_with_argocd_message():
    with pytest.raises(ArgoCDError) as ei:
        handle_response(_make_json_response(400, {"error": "x", "code": 3, "message": "invalid spec"}))
    assert ei.value.status_code == 400
    assert ei.value.detail == "invalid spec"


def test_handle_response_redirect_and_forbidden_messages():
    with pytest.raises(ArgoCDError) as redirect:
        handle_response(_make_json_response(307, {"message": "moved"}))
    with pytest.raises(ArgoCDError) as forbidden:
        handle_response(_make_json_response(403, {"message": "permission denied"}))

    assert "redirecting" in redirect.value.detail
    assert forbidden.value.status_code == 403
    assert "permission denied" in forbidden.value.detail


def test_handle_response_without_json_body():
    req = httpx.Request("GET", "https://argocd.local/api/v1/test")
    with pytest.raises(ArgoCDError) as ei:
        handle_response(httpx.Response(502, request=req, content=b"Bad Gateway"))
    assert ei.value.detail == "Bad Gateway"


def test_token_header_only_when_token_given():
    assert ArgoCDAPI("https://a", "tok").api.headers["Authorization"] == "Bearer tok"
    assert "Authorization" not in ArgoCDAPI("https://a").api.headers


@pytest.mark.asyncio
async def test_create_session_returns_token():
    api = make_api(_make_json_response(200, {"token": "tok1"}, "POST"), token=None)

    assert await api.create_session("admin", "secret") == "tok1"
    method, endpoint, kwargs = api.api.requests[0]
    assert (method, endpoint) == ("POST", "/api/v1/session")
    assert kwargs["json"] == {"username": "admin", "password": "secret"}


@pytest.mark.asyncio
async def test_create_session_rejects_missing_token():
    api = make_api(_make_json_response(200, {}, "POST"), token=None)

    with pytest.raises(ArgoCDError):
        await api.create_session("admin", "secret")


@pytest.mark.asyncio
async def test_get_app_returns_not_found_payload():
    payload = {"error": "applications.argoproj.io \"web\" not found", "code": 5, "message": "not found"}
    api = make_api(_make_json_response(404, payload))

    assert await api.get_app("web") == payload


@pytest.mark.asyncio
async def test_list_apps_sends_selector():
    api = make_api(_make_json_response(200, {"items": None}))

    assert await api.list_apps("team=web") == {"items": None}
    assert api.api.requests[0][2]["params"] == {"selector": "team=web"}


@pytest.mark.asyncio
async def test_delete_app_outcomes():
    api = make_api(
        _make_json_response(200, {}, "DELETE"),
        _make_json_response(500, {"message": "finalizer error"}, "DELETE"),
        _make_json_response(404, {"message": "app not found"}, "DELETE"),
    )

    assert await api.delete_app("web") is True
    assert await api.delete_app("web") is False
    with pytest.raises(ArgoCDError) as ei:
        await api.delete_app("web")

    assert ei.value.detail == "app not found"
    assert api.api.requests[0][2]["params"] == {"cascade": "true"}


@pytest.mark.asyncio
async def test_delete_project_raises_on_failure():
    api = make_api(_make_json_response(400, {"message": "project is referenced by 1 applications"}, "DELETE"))

    with pytest.raises(ArgoCDError) as ei:
        await api.delete_project("web")
    assert ei.value.detail == "project is referenced by 1 applications"


@pytest.mark.asyncio
async def test_transport_errors_become_connection_errors():
    req = httpx.Request("GET", "https://argocd.local/api/v1/applications/web")
    api = make_api(httpx.ConnectError("refused", request=req))

    with pytest.raises(ArgoCDConnectionError) as ei:
        await api.get_app("web")
    assert ei.value.status_code == 500


def test_definitions_reference_each_other():
    project = project_definition("web", "web-ns", "https://github.com/example/web.git")
    app = application_definition("web", "web-app", "web-ns", "https://github.com/example/web.git", "deploy", "web")

    assert project["project"]["metadata"]["name"] == "web"
    assert project["project"]["spec"]["sourceRepos"] == ["https://github.com/example/web.git"]
    assert app["spec"]["project"] == "web"
    assert app["metadata"]["labels"] == {"backstage-name": "web"}
    assert app["spec"]["destination"]["namespace"] == "web-ns"
    assert app["spec"]["source"] == {"path": "deploy", "repoURL": "https://github.com/example/web.git"}
