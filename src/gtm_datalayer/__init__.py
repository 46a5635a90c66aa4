"""gtm-datalayer - inspect and drive Google Tag Manager's dataLayer from browser automation."""

# Avoid importing engine backends at top-level; playwright and selenium load on demand
__all__ = ["DataLayerClient", "DataLayerConfig", "WaitOptions"]

__version__ = "0.1.0"


def __getattr__(name):
    if name == "DataLayerClient":
        from .client import DataLayerClient
        return DataLayerClient
    if name == "DataLayerConfig":
        from .config import DataLayerConfig
        return DataLayerConfig
    if name == "WaitOptions":
        from .types import WaitOptions
        return WaitOptions
    raise AttributeError(name)
