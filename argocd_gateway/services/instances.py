"""Directory of the ArgoCD instances the gateway knows about."""

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, Optional, Tuple

from loguru import logger

from ..errors import InstanceNotFoundError
from ..utils.config import Config, InstanceConfig


@dataclass(frozen=True)
class Instance:
    name: str
    base_url: str
    token: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None

    @classmethod
    def from_config(cls, instance: InstanceConfig) -> "Instance":
        return cls(
            name=instance.name,
            base_url=instance.url.rstrip("/"),
            token=instance.token,
            username=instance.username,
            password=instance.password,
        )


class InstanceDirectory:
    """Ordered, read-only collection of instances addressed by exact name.

    Built once at startup; safe to share between concurrent requests.
    """

    def __init__(self, instances: Iterable[Instance]):
        ordered: Tuple[Instance, ...] = tuple(instances)
        by_name: Dict[str, Instance] = {}
        for instance in ordered:
            if instance.name in by_name:
                raise ValueError(f"Duplicate ArgoCD instance name: {instance.name!r}")
            by_name[instance.name] = instance

        self._instances = ordered
        self._by_name = by_name

    @classmethod
    def from_config(cls, config: Config) -> "InstanceDirectory":
        directory = cls(Instance.from_config(instance) for instance in config.instance_configs())
        logger.info(f"Loaded {len(directory)} ArgoCD instance(s): {', '.join(directory.names()) or '-'}")
        return directory

    def resolve(self, instance_name: str) -> Instance:
        instance = self._by_name.get(instance_name)
        if instance is None:
            logger.warning(f"No ArgoCD instance named {instance_name!r}")
            raise InstanceNotFoundError(instance_name)
        return instance

    def names(self) -> Tuple[str, ...]:
        return tuple(instance.name for instance in self._instances)

    def __iter__(self) -> Iterator[Instance]:
        return iter(self._instances)

    def __len__(self) -> int:
        return len(self._instances)
