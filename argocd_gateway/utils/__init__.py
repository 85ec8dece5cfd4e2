from dotenv import load_dotenv
from loguru import logger

from .config import AppLocatorMethod, Config, InstanceConfig

load_dotenv()

try:
    config = Config()
except (OSError, ValueError) as exc:  # pragma: no cover - configuration errors abort startup
    logger.error("Invalid ArgoCD gateway configuration: {}", exc)
    raise SystemExit(1) from exc

__all__ = ["AppLocatorMethod", "Config", "InstanceConfig", "config"]
