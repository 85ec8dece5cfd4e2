from typing import List

from loguru import logger

from ..errors import ExternalServiceError, UpstreamClientError
from ..models import SyncResponse


class SyncDispatcher:
    def __init__(self, argocd):
        self.argocd = argocd

    async def sync_all(self, selector: str) -> List[List[SyncResponse]]:
        logger.info(f"Resyncing apps matching {selector} on all instances")
        try:
            return await self.argocd.resync_app_on_all_instances(selector)
        except ExternalServiceError as e:
            raise UpstreamClientError.from_upstream(e, f"Failed to sync your app, {selector}.") from e
