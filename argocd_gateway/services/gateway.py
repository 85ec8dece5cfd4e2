from dataclasses import dataclass

from ..utils.config import Config
from .applications import ApplicationOperations
from .argocd import ArgoCD
from .deletion import DeletionOrchestrator
from .instances import InstanceDirectory
from .sync import SyncDispatcher
from .tokens import TokenResolver


@dataclass
class Gateway:
    """Everything a request handler needs, built once per process."""

    directory: InstanceDirectory
    tokens: TokenResolver
    applications: ApplicationOperations
    deletion: DeletionOrchestrator
    sync: SyncDispatcher

    @classmethod
    def from_client(cls, directory: InstanceDirectory, argocd, wait_cycles: int = 5, poll_delay: float = 5.0) -> "Gateway":
        tokens = TokenResolver(argocd)
        return cls(
            directory=directory,
            tokens=tokens,
            applications=ApplicationOperations(argocd),
            deletion=DeletionOrchestrator(directory, tokens, argocd, wait_cycles=wait_cycles, poll_delay=poll_delay),
            sync=SyncDispatcher(argocd),
        )

    @classmethod
    def from_config(cls, config: Config) -> "Gateway":
        directory = InstanceDirectory.from_config(config)
        argocd = ArgoCD(
            directory,
            config.ARGOCD_USERNAME,
            config.ARGOCD_PASSWORD,
            timeout=config.ARGOCD_REQUEST_TIMEOUT,
            verify=config.ARGOCD_VERIFY_SSL,
        )
        return cls.from_client(directory, argocd, wait_cycles=config.ARGOCD_WAIT_CYCLES, poll_delay=config.ARGOCD_POLL_DELAY)
