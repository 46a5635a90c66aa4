from typing import Protocol, Optional, Any

from ..types import Polling


class AutomationEngine(Protocol):
    def start(self, headless: bool = True, user_data_dir: Optional[str] = None) -> None:
        ...

    def stop(self) -> None:
        ...

    def goto(self, url: str, wait_until: str = "load") -> None:
        ...

    def evaluate(self, script: str, arg: Any = None) -> Any:
        ...

    def wait_for_function(
        self,
        script: str,
        arg: Any = None,
        timeout_ms: Optional[int] = None,
        polling: Polling = None,
    ) -> None:
        ...
