import json
from typing import Any, Dict, Optional

import httpx

from ..errors import ArgoCDConnectionError, ArgoCDError
from ..general.database import BaseAPI

IN_CLUSTER_SERVER = "https://kubernetes.default.svc"
APP_LABEL = "backstage-name"
RESOURCES_FINALIZER = "resources-finalizer.argocd.argoproj.io"


def _response_json(response: httpx.Response) -> Dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {"message": response.text} if response.text else {}
    return body if isinstance(body, dict) else {"items": body}


def _response_message(body: Dict[str, Any]) -> Optional[str]:
    message = body.get("message") or body.get("error")
    if isinstance(message, dict):
        return json.dumps(message)
    return message


def handle_response(response: httpx.Response) -> Dict[str, Any]:
    """Return the JSON body of ``response`` or raise :class:`ArgoCDError`."""

    body = _response_json(response)
    message = _response_message(body)

    if response.status_code == 307:
        raise ArgoCDError(status_code=response.status_code, detail="ArgoCD endpoint is redirecting. "
                                                    f"ArgoCD message: {message}")

    if response.status_code == 403:
        raise ArgoCDError(status_code=response.status_code, detail="Don't have permission to access this resource, or this resource doesn't exist. "
                                                    f"ArgoCD message: {message}")

    if not response.is_success:
        raise ArgoCDError(status_code=response.status_code, detail=message or f"ArgoCD status code: {response.status_code}.")

    return body


def project_definition(project_name: str, namespace: str, source_repo: str) -> Dict[str, Any]:
    return {
        "project": {
            "metadata": {"name": project_name},
            "spec": {
                "destinations": [{"namespace": namespace, "server": IN_CLUSTER_SERVER}],
                "sourceRepos": [source_repo],
            },
        },
        "upsert": True,
    }


def application_definition(
    project_name: str,
    app_name: str,
    namespace: str,
    source_repo: str,
    source_path: str,
    label_value: str,
) -> Dict[str, Any]:
    return {
        "metadata": {
            "name": app_name,
            "labels": {APP_LABEL: label_value},
            "finalizers": [RESOURCES_FINALIZER],
        },
        "spec": {
            "destination": {"namespace": namespace, "server": IN_CLUSTER_SERVER},
            "project": project_name,
            "revisionHistoryLimit": 10,
            "source": {"path": source_path, "repoURL": source_repo},
            "syncPolicy": {
                "automated": {"allowEmpty": True, "prune": True, "selfHeal": True},
                "retry": {
                    "backoff": {"duration": "5s", "factor": 2, "maxDuration": "5m"},
                    "limit": 10,
                },
                "syncOptions": ["CreateNamespace=false"],
            },
        },
    }


class ArgoCDAPI:
    """One method per ArgoCD REST endpoint, bound to a single instance.

    ``token`` may be ``None`` for the login call, which is the only endpoint
    reachable without a bearer token.
    """

    def __init__(self, base_url: str, token: Optional[str] = None, timeout: float = 10.0, verify: bool = False):
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self.api = BaseAPI(base_url.rstrip('/'), headers=headers, timeout=timeout, verify=verify)

    async def _send(self, method: str, uri: str, **kwargs) -> httpx.Response:
        try:
            return await self.api.request(method, uri, **kwargs)
        except httpx.RequestError as e:
            raise ArgoCDConnectionError(detail=f"Request error: {str(e)}")

    async def create_session(self, username: str, password: str) -> str:
        response = await self._send("POST", "/api/v1/session", json={"username": username, "password": password})
        body = handle_response(response)

        token = body.get("token")
        if not token:
            raise ArgoCDError(status_code=response.status_code, detail="ArgoCD session response did not contain a token")
        return token

    async def get_app(self, app_name: str) -> Dict[str, Any]:
        """Fetch one application.

        ArgoCD answers 404 with a ``{"error", "code", "message"}`` payload once
        an application is gone; that payload is returned instead of raised.
        """

        response = await self._send("GET", f"/api/v1/applications/{app_name}")
        if response.status_code == 404:
            return _response_json(response)
        return handle_response(response)

    async def list_apps(self, selector: str) -> Dict[str, Any]:
        response = await self._send("GET", "/api/v1/applications", params={"selector": selector})
        return handle_response(response)

    async def create_project(self, definition: Dict[str, Any]) -> Dict[str, Any]:
        response = await self._send("POST", "/api/v1/projects", json=definition)
        return handle_response(response)

    async def create_app(self, definition: Dict[str, Any]) -> Dict[str, Any]:
        response = await self._send("POST", "/api/v1/applications", json=definition)
        return handle_response(response)

    async def delete_app(self, app_name: str) -> bool:
        """Request a cascading delete.

        Returns ``False`` when ArgoCD refuses the deletion of an existing app
        and raises :class:`ArgoCDError` when the app does not exist.
        """

        response = await self._send("DELETE", f"/api/v1/applications/{app_name}", params={"cascade": "true"})
        if response.is_success:
            return True
        if response.status_code in (403, 404):
            body = _response_json(response)
            raise ArgoCDError(status_code=response.status_code,
                              detail=_response_message(body) or f"application {app_name} not found")
        return False

    async def delete_project(self, project_name: str) -> None:
        response = await self._send("DELETE", f"/api/v1/projects/{project_name}")
        handle_response(response)

    async def sync_app(self, app_name: str) -> Dict[str, Any]:
        response = await self._send("POST", f"/api/v1/applications/{app_name}/sync", json={"prune": True, "dryRun": False})
        return handle_response(response)
