"""Runtime configuration for talking to a page's GTM globals."""
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

from .serialization import DEFAULT_REPLACERS, Replacer


DEFAULT_DATA_LAYER_NAME = "dataLayer"
DEFAULT_REGISTRY_NAME = "google_tag_manager"
DEFAULT_CONTAINER_PREFIX = "GTM-"
DEFAULT_WAIT_TIMEOUT_MS = 30000


@dataclass(frozen=True)
class DataLayerConfig:
    """Names of the in-page globals and defaults used by the client."""
    data_layer_name: str = DEFAULT_DATA_LAYER_NAME
    registry_name: str = DEFAULT_REGISTRY_NAME
    container_prefix: str = DEFAULT_CONTAINER_PREFIX
    wait_timeout_ms: int = DEFAULT_WAIT_TIMEOUT_MS
    replacers: Tuple[Replacer, ...] = field(default=DEFAULT_REPLACERS)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "DataLayerConfig":
        """Build a config, letting ``GTM_*`` environment variables override defaults."""
        env = os.environ if environ is None else environ
        timeout = env.get("GTM_WAIT_TIMEOUT_MS")
        try:
            wait_timeout_ms = int(timeout) if timeout else DEFAULT_WAIT_TIMEOUT_MS
        except ValueError:
            raise ValueError(f"GTM_WAIT_TIMEOUT_MS must be an integer, got {timeout!r}")
        return cls(
            data_layer_name=env.get("GTM_DATALAYER_NAME") or DEFAULT_DATA_LAYER_NAME,
            registry_name=env.get("GTM_REGISTRY_NAME") or DEFAULT_REGISTRY_NAME,
            container_prefix=env.get("GTM_CONTAINER_PREFIX") or DEFAULT_CONTAINER_PREFIX,
            wait_timeout_ms=wait_timeout_ms,
        )
