import asyncio
from typing import Any, Dict, List, Optional

from loguru import logger

from ..api.argocd import ArgoCDAPI, application_definition, project_definition
from ..errors import ArgoCDConnectionError, ArgoCDError, ExternalServiceError, GatewayError
from ..models import ApplicationRef, FoundApp, SyncResponse
from . import retry
from .instances import Instance, InstanceDirectory
from .tokens import TokenResolver


def tag_instance(data: Dict[str, Any], instance_name: str) -> Dict[str, Any]:
    """Record on every returned application which instance it came from."""

    tag = {"name": instance_name}
    items = data.get("items")
    if isinstance(items, list):
        for item in items:
            item.setdefault("metadata", {})["instance"] = tag
    elif isinstance(data.get("metadata"), dict):
        data["metadata"]["instance"] = tag
    return data


class ArgoCD:
    """Talks to every configured ArgoCD instance on behalf of the gateway."""

    def __init__(
        self,
        directory: InstanceDirectory,
        username: str,
        password: str,
        timeout: float = 10.0,
        verify: bool = False,
    ):
        self.directory = directory
        self.username = username
        self.password = password
        self.timeout = timeout
        self.verify = verify
        self.tokens = TokenResolver(self)

    def _api(self, base_url: str, token: Optional[str] = None) -> ArgoCDAPI:
        return ArgoCDAPI(base_url, token, timeout=self.timeout, verify=self.verify)

    async def login(self, instance: Instance) -> str:
        logger.bind(instance=instance.name).info("Opening ArgoCD session")
        return await self._api(instance.base_url).create_session(
            instance.username or self.username,
            instance.password or self.password,
        )

    async def get_app_data(self, base_url: str, instance_name: str, ref: ApplicationRef, token: str) -> Dict[str, Any]:
        api = self._api(base_url, token)
        if ref.name is not None:
            data = await api.get_app(ref.name)
        else:
            data = await api.list_apps(ref.selector)
        return tag_instance(data, instance_name)

    async def find_app(self, ref: ApplicationRef) -> List[FoundApp]:
        found = await asyncio.gather(*(self._find_on(instance, ref) for instance in self.directory))
        return [entry for entry in found if entry is not None]

    async def _find_on(self, instance: Instance, ref: ApplicationRef) -> Optional[FoundApp]:
        log = logger.bind(instance=instance.name)
        try:
            token = await self.tokens.resolve_token(instance)
            data = await retry(
                lambda: self.get_app_data(instance.base_url, instance.name, ref, token),
                retry_on=(ArgoCDConnectionError,),
                base_delay=1.0,
            )
        except (GatewayError, ExternalServiceError) as e:
            log.error(f"Looking up {ref.describe()} failed: {e}")
            return None

        if ref.name is not None and data.get("metadata"):
            return FoundApp(name=instance.name, url=instance.base_url, appName=[ref.name])
        if ref.selector is not None and data.get("items"):
            names = [item["metadata"]["name"] for item in data["items"]]
            return FoundApp(name=instance.name, url=instance.base_url, appName=names)
        return None

    async def create_project(self, base_url: str, token: str, project_name: str, namespace: str, source_repo: str) -> Dict[str, Any]:
        definition = project_definition(project_name, namespace, source_repo)
        return await self._api(base_url, token).create_project(definition)

    async def create_application(
        self,
        base_url: str,
        token: str,
        project_name: str,
        app_name: str,
        namespace: str,
        source_repo: str,
        source_path: str,
        label_value: str,
    ) -> Dict[str, Any]:
        definition = application_definition(project_name, app_name, namespace, source_repo, source_path, label_value)
        return await self._api(base_url, token).create_app(definition)

    async def delete_app(self, base_url: str, app_name: str, token: str) -> bool:
        return await self._api(base_url, token).delete_app(app_name)

    async def delete_project(self, base_url: str, project_name: str, token: str) -> None:
        await self._api(base_url, token).delete_project(project_name)

    async def resync_app_on_all_instances(self, selector: str) -> List[List[SyncResponse]]:
        found = await self.find_app(ApplicationRef(selector=selector))
        return list(await asyncio.gather(*(self._resync_on(entry) for entry in found)))

    async def _resync_on(self, found: FoundApp) -> List[SyncResponse]:
        instance = self.directory.resolve(found.name)
        log = logger.bind(instance=instance.name)
        try:
            token = await self.tokens.resolve_token(instance)
        except GatewayError as e:
            log.error(f"Sync skipped, no token: {e}")
            return [
                SyncResponse(status="Failure", message=f"Failed to resync {app_name} on {instance.name}")
                for app_name in found.appName
            ]
        api = self._api(instance.base_url, token)

        results = []
        for app_name in found.appName:
            try:
                await retry(lambda: api.sync_app(app_name), retry_on=(ArgoCDConnectionError,), base_delay=1.0)
            except ArgoCDError as e:
                log.error(f"Sync of {app_name} failed: {e.detail}")
                results.append(SyncResponse(status="Failure", message=f"Failed to resync {app_name} on {instance.name}"))
                continue
            log.info(f"Triggered sync of {app_name}")
            results.append(SyncResponse(status="Success", message=f"Re-synced {app_name} on {instance.name}"))
        return results
