from typing import Any, Dict, List

from loguru import logger

from ..errors import ExternalServiceError, UpstreamClientError
from ..models import ApplicationRef, CreateArgoResponse, FoundApp
from .instances import Instance


class ApplicationOperations:
    def __init__(self, argocd):
        self.argocd = argocd

    async def find_by_name(self, name: str) -> List[FoundApp]:
        return await self.argocd.find_app(ApplicationRef(name=name))

    async def find_by_selector(self, selector: str) -> List[FoundApp]:
        return await self.argocd.find_app(ApplicationRef(selector=selector))

    async def get(self, instance: Instance, ref: ApplicationRef, token: str) -> Dict[str, Any]:
        logger.bind(instance=instance.name).info(f"Getting apps for {ref.describe()}")
        try:
            return await self.argocd.get_app_data(instance.base_url, instance.name, ref, token)
        except ExternalServiceError as e:
            raise UpstreamClientError.from_upstream(e) from e

    async def create(
        self,
        instance: Instance,
        token: str,
        project_name: str,
        app_name: str,
        namespace: str,
        source_repo: str,
        source_path: str,
        label_value: str,
    ) -> CreateArgoResponse:
        """Create the project, then the application that lives in it.

        A project created before a failing application is left in place.
        """
        log = logger.bind(instance=instance.name)

        try:
            await self.argocd.create_project(instance.base_url, token, project_name, namespace, source_repo)
        except ExternalServiceError as e:
            log.error(f"Creating project {project_name} failed: {e}")
            raise UpstreamClientError.from_upstream(e, "Failed to create argo project") from e

        try:
            await self.argocd.create_application(
                instance.base_url, token, project_name, app_name, namespace, source_repo, source_path, label_value,
            )
        except ExternalServiceError as e:
            log.error(f"Creating application {app_name} in project {project_name} failed: {e}")
            raise UpstreamClientError(e.detail or "Failed to create argo app", 500) from e

        log.info(f"Created project {project_name} and application {app_name} in namespace {namespace}")
        return CreateArgoResponse(argoProjectName=project_name, argoAppName=app_name, kubernetesNamespace=namespace)
