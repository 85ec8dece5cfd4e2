from typing import List

from fastapi import APIRouter
from loguru import logger

from ..models import (
    ApplicationRef,
    CreateArgoRequest,
    CreateArgoResponse,
    DeleteResponse,
    ErrorResponse,
    FoundApp,
    SyncRequest,
    SyncResponse,
)
from ..services.gateway import Gateway

ERROR_RESPONSES = {500: {"model": ErrorResponse}}


class ArgoRouter:
    def __init__(self, gateway: Gateway):
        self.gateway = gateway
        self.router = APIRouter()
        self._register_routes()

    def _register_routes(self):

        self.router.add_api_route(
            "/find/name/{appName}",
            self._make_find_handler("name"),
            methods=["GET"],
            response_model=List[FoundApp],
            name="find app by name",
            description="Given an application name, returns the instances it exists on.",
            tags=["find"],
        )

        self.router.add_api_route(
            "/find/selector/{selector}",
            self._make_find_handler("selector"),
            methods=["GET"],
            response_model=List[FoundApp],
            name="find apps by selector",
            description="Given a label selector, returns the matching apps of every instance.",
            tags=["find"],
        )

        self.router.add_api_route(
            "/argoInstance/{instanceName}/applications/name/{appName}",
            self._make_get_handler("name"),
            methods=["GET"],
            responses=ERROR_RESPONSES,
            name="get app by name",
            description="Returns the ArgoCD data of one application on one instance.",
            tags=["applications"],
        )

        self.router.add_api_route(
            "/argoInstance/{instanceName}/applications/selector/{selector}",
            self._make_get_handler("selector"),
            methods=["GET"],
            responses=ERROR_RESPONSES,
            name="get apps by selector",
            description="Returns the ArgoCD data of the applications matching a selector on one instance.",
            tags=["applications"],
        )

        self.router.add_api_route(
            "/createArgo",
            self._make_create_handler(),
            methods=["POST"],
            response_model=CreateArgoResponse,
            responses=ERROR_RESPONSES,
            name="create project and app",
            description="Creates an ArgoCD project and an application inside it.",
            tags=["applications"],
        )

        self.router.add_api_route(
            "/sync",
            self._make_sync_handler(),
            methods=["POST"],
            response_model=List[List[SyncResponse]],
            responses=ERROR_RESPONSES,
            name="resync apps",
            description="Resyncs every application matching a selector on every instance.",
            tags=["sync"],
        )

        self.router.add_api_route(
            "/argoInstance/{instanceName}/applications/{appName}",
            self._make_delete_handler(),
            methods=["DELETE"],
            response_model=DeleteResponse,
            responses=ERROR_RESPONSES,
            name="delete app and project",
            description="Deletes an application, waits for ArgoCD to remove it, then deletes its project.",
            tags=["applications"],
        )

    def _make_find_handler(self, kind: str):

        if kind == "name":
            async def handler(appName: str):
                return await self.gateway.applications.find_by_name(appName)
        else:
            async def handler(selector: str):
                return await self.gateway.applications.find_by_selector(selector)

        return handler

    def _make_get_handler(self, kind: str):

        async def fetch(instance_name: str, ref: ApplicationRef):
            conn = await self.gateway.tokens.connect(self.gateway.directory, instance_name)
            return await self.gateway.applications.get(conn.instance, ref, conn.token)

        if kind == "name":
            async def handler(instanceName: str, appName: str):
                logger.info(f"Getting app {appName} on {instanceName}")
                return await fetch(instanceName, ApplicationRef(name=appName))
        else:
            async def handler(instanceName: str, selector: str):
                logger.info(f"Getting apps for selector {selector} on {instanceName}")
                return await fetch(instanceName, ApplicationRef(selector=selector))

        return handler

    def _make_create_handler(self):

        async def handler(payload: CreateArgoRequest):
            conn = await self.gateway.tokens.connect(self.gateway.directory, payload.clusterName)
            return await self.gateway.applications.create(
                conn.instance,
                conn.token,
                project_name=payload.projectName,
                app_name=payload.appName,
                namespace=payload.namespace,
                source_repo=payload.sourceRepo,
                source_path=payload.sourcePath,
                label_value=payload.labelValue,
            )

        return handler

    def _make_sync_handler(self):

        async def handler(payload: SyncRequest):
            return await self.gateway.sync.sync_all(payload.appSelector)

        return handler

    def _make_delete_handler(self):

        async def handler(instanceName: str, appName: str):
            logger.info(f"Deleting {appName} on {instanceName}")
            return await self.gateway.deletion.delete(instanceName, appName)

        return handler
