from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

DataLayerMessage = Dict[str, Any]
DataModel = Dict[str, Any]

# "raf" and "mutation" name polling strategies; an int is an interval in ms.
Polling = Union[str, int, None]


@dataclass(frozen=True)
class Session:
    """Binding of a page engine to the GTM container it talks to."""
    engine: Any
    container_id: str


@dataclass(frozen=True)
class WaitOptions:
    timeout_ms: Optional[int] = None
    polling: Polling = None

    @classmethod
    def coerce(cls, options: Union["WaitOptions", Dict[str, Any], None] = None, **overrides: Any) -> "WaitOptions":
        """Accept a WaitOptions, a plain dict, or keyword overrides."""
        if isinstance(options, WaitOptions):
            values = {"timeout_ms": options.timeout_ms, "polling": options.polling}
        else:
            values = dict(options or {})
        values.update({k: v for k, v in overrides.items() if v is not None})
        unknown = set(values) - {"timeout_ms", "polling"}
        if unknown:
            raise TypeError(f"Unknown wait option(s): {', '.join(sorted(unknown))}")
        return cls(**values)
