"""Query and drive a page's GTM dataLayer through an automation engine.

:class:`DataLayerClient` binds an engine (anything implementing
:class:`~gtm_datalayer.automation.engine.AutomationEngine`) to a GTM container id.
Every operation is one round trip: a function from :mod:`gtm_datalayer.scripts`
is evaluated in the page and its result handed back. Nothing is cached locally.
"""
import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from . import scripts
from .config import DataLayerConfig
from .errors import ContainerNotFoundError, GTMNotFoundError, HistorySerializationError, WaitTimeoutError
from .serialization import build_history_script, placeholders_for
from .types import DataLayerMessage, DataModel, Session, WaitOptions

logger = logging.getLogger(__name__)


class DataLayerClient:
    """Read, observe and push to the dataLayer of a single page."""

    def __init__(self, engine, container_id: str, config: Optional[DataLayerConfig] = None):
        """Bind the client to a page.

        Args:
            engine: Page driver implementing the AutomationEngine Protocol
            container_id: The GTM container to read variables from, e.g. ``GTM-XXXXXXX``
            config: Global names and defaults; ``DataLayerConfig()`` when omitted
        """
        self._session = Session(engine=engine, container_id=container_id)
        self._config = config or DataLayerConfig()
        self._history_script = build_history_script(self._config.replacers)
        self._placeholders = placeholders_for(self._config.replacers)

    @classmethod
    def from_page(cls, page, container_id: str, config: Optional[DataLayerConfig] = None) -> "DataLayerClient":
        """Bind directly to a Playwright ``Page`` the caller already manages."""
        from .automation.playwright_engine import PlaywrightEngine
        return cls(PlaywrightEngine.attach(page), container_id, config=config)

    @property
    def session(self) -> Session:
        return self._session

    @property
    def engine(self):
        return self._session.engine

    @property
    def container_id(self) -> str:
        return self._session.container_id

    @property
    def config(self) -> DataLayerConfig:
        return self._config

    def get(self, variable: str) -> Any:
        """Return the current value of a dataLayer variable.

        Args:
            variable: Variable name in GTM dot-notation, e.g. ``ecommerce.currency``

        Returns:
            The value from the bound container's data model, or None if unset

        Raises:
            ContainerNotFoundError: If the bound container is not on the page
        """
        if not variable:
            raise ValueError("variable must be a non-empty string")
        logger.debug(f"Reading {variable!r} from {self.container_id}")
        result = self.engine.evaluate(scripts.GET_VARIABLE, {
            "registryName": self._config.registry_name,
            "containerId": self.container_id,
            "variable": variable,
        })
        return self._unwrap_container_result(result, self.container_id)

    def get_container_ids(self) -> List[str]:
        """Return the ids of all GTM containers active on the page.

        Raises:
            GTMNotFoundError: If the page has no GTM runtime object at all
        """
        keys = self.engine.evaluate(scripts.LIST_REGISTRY_KEYS, {
            "registryName": self._config.registry_name,
        })
        if keys is None:
            raise GTMNotFoundError()
        prefix = self._config.container_prefix
        container_ids = [key for key in keys if key.startswith(prefix)]
        logger.debug(f"Found containers: {container_ids}")
        return container_ids

    def get_data_model(self, container_id: Optional[str] = None) -> DataModel:
        """Return the full data model, i.e. the current values of all variables.

        Args:
            container_id: Container to read from. Defaults to the bound container

        Raises:
            ContainerNotFoundError: If the container is not on the page
        """
        container_id = container_id or self.container_id
        logger.debug(f"Reading data model of {container_id}")
        result = self.engine.evaluate(scripts.GET_DATA_MODEL, {
            "registryName": self._config.registry_name,
            "containerId": container_id,
        })
        model = self._unwrap_container_result(result, container_id)
        return model if model is not None else {}

    def get_events(self, event: str) -> List[DataLayerMessage]:
        """Return all messages whose ``event`` equals the given name, in push order."""
        logger.debug(f"Fetching {event!r} events")
        events = self.engine.evaluate(scripts.GET_EVENTS, {
            "dataLayerName": self._config.data_layer_name,
            "event": event,
        })
        return events or []

    def get_latest_event(self, event: Optional[str] = None) -> Optional[DataLayerMessage]:
        """Return the most recent message with the given event name.

        Without an event name this is the most recent message overall. Returns
        None when nothing matches.
        """
        history = self.history
        if event is not None:
            history = [msg for msg in history if isinstance(msg, dict) and msg.get("event") == event]
        return history[-1] if history else None

    def get_latest_message(self) -> Optional[DataLayerMessage]:
        """Return the most recent dataLayer message, or None on an empty layer."""
        history = self.history
        return history[-1] if history else None

    @property
    def history(self) -> List[DataLayerMessage]:
        """Every message pushed to the dataLayer, oldest first.

        Host objects such as DOM nodes are replaced by their placeholder (by
        default ``"[HTMLObject]"``) so the result is plain JSON.

        Raises:
            HistorySerializationError: If the page cannot serialize the layer
        """
        result = self.engine.evaluate(self._history_script, {
            "dataLayerName": self._config.data_layer_name,
            "placeholders": self._placeholders,
        })
        if not result or not result.get("ok"):
            error = (result or {}).get("error") or "no result returned from page"
            raise HistorySerializationError(f"Could not serialize {self._config.data_layer_name}: {error}")
        messages = result.get("value") or []
        logger.debug(f"Read {len(messages)} dataLayer messages")
        return messages

    def push(self, message: Mapping[str, Any]) -> None:
        """Push a message (which can be an event) to the dataLayer."""
        if not isinstance(message, Mapping):
            raise TypeError(f"message must be a mapping, got {type(message).__name__}")
        logger.debug(f"Pushing {dict(message)!r}")
        self.engine.evaluate(scripts.PUSH_MESSAGE, {
            "dataLayerName": self._config.data_layer_name,
            "message": dict(message),
        })

    def has_event(self, event: str) -> bool:
        """Return whether at least one message with the given event name exists."""
        return bool(self.engine.evaluate(scripts.HAS_EVENT, self._event_arg(event)))

    def wait_for_event(
        self,
        event: str,
        options: Union[WaitOptions, Dict[str, Any], None] = None,
        **kwargs: Any,
    ) -> None:
        """Block until a message with the given event name has been pushed.

        Args:
            event: The event name to wait for
            options: ``WaitOptions`` or a dict with ``timeout_ms`` and ``polling``;
                keyword arguments of the same names override it

        Raises:
            WaitTimeoutError: If the timeout elapses first
        """
        opts = WaitOptions.coerce(options, **kwargs)
        timeout_ms = opts.timeout_ms if opts.timeout_ms is not None else self._config.wait_timeout_ms
        logger.debug(f"Waiting up to {timeout_ms}ms for {event!r}")
        try:
            self.engine.wait_for_function(
                scripts.HAS_EVENT,
                self._event_arg(event),
                timeout_ms=timeout_ms,
                polling=opts.polling,
            )
        except WaitTimeoutError as e:
            raise WaitTimeoutError(
                f"Timed out after {timeout_ms}ms waiting for dataLayer event {event!r}",
                event=event,
                timeout_ms=timeout_ms,
            ) from e

    def _event_arg(self, event: str) -> Dict[str, Any]:
        return {"dataLayerName": self._config.data_layer_name, "event": event}

    @staticmethod
    def _unwrap_container_result(result: Optional[Dict[str, Any]], container_id: str) -> Any:
        if not result or not result.get("found"):
            raise ContainerNotFoundError(container_id)
        return result.get("value")
