import logging
from typing import Optional, Any

from ..errors import WaitTimeoutError
from ..types import Polling

try:
    from selenium import webdriver
    from selenium.common.exceptions import TimeoutException
    from selenium.webdriver.chrome.options import Options as ChromeOptions
    from selenium.webdriver.support.ui import WebDriverWait
    SELENIUM_AVAILABLE = True
except Exception:  # pragma: no cover - optional dependency
    SELENIUM_AVAILABLE = False

logger = logging.getLogger(__name__)

# WebDriverWait's own default poll frequency, in seconds
DEFAULT_POLL_FREQUENCY = 0.5


def wrap_function(script: str) -> str:
    """Turn a one-argument function expression into an execute_script body."""
    return f"return ({script})(arguments[0]);"


class SeleniumEngine:
    def __init__(self, driver: Optional[Any] = None):
        if not SELENIUM_AVAILABLE:
            raise RuntimeError("Selenium is not installed. Install with: pip install gtm-datalayer[automation-selenium]")
        self._driver = driver
        self._owns_driver = driver is None

    @property
    def driver(self):
        return self._driver

    def start(self, headless: bool = True, user_data_dir: Optional[str] = None) -> None:
        options = ChromeOptions()
        if headless:
            options.add_argument("--headless=new")
        if user_data_dir:
            options.add_argument(f"--user-data-dir={user_data_dir}")
        self._driver = webdriver.Chrome(options=options)
        self._owns_driver = True

    def stop(self) -> None:
        if self._driver and self._owns_driver:
            self._driver.quit()
        self._driver = None

    def goto(self, url: str, wait_until: str = "load") -> None:
        assert self._driver is not None
        # Selenium's get() already blocks until the load event
        self._driver.get(url)

    def evaluate(self, script: str, arg: Any = None) -> Any:
        assert self._driver is not None
        return self._driver.execute_script(wrap_function(script), arg)

    def wait_for_function(
        self,
        script: str,
        arg: Any = None,
        timeout_ms: Optional[int] = None,
        polling: Polling = None,
    ) -> None:
        assert self._driver is not None
        if isinstance(polling, (int, float)) and not isinstance(polling, bool):
            poll_frequency = polling / 1000.0
        else:
            if polling is not None:
                logger.debug("Polling strategy %r is not supported by Selenium, using interval polling", polling)
            poll_frequency = DEFAULT_POLL_FREQUENCY
        timeout = (timeout_ms if timeout_ms is not None else 30000) / 1000.0
        body = wrap_function(script)
        wait = WebDriverWait(self._driver, timeout, poll_frequency=poll_frequency)
        try:
            wait.until(lambda driver: driver.execute_script(body, arg))
        except TimeoutException as e:
            raise WaitTimeoutError(f"Timeout after {timeout_ms}ms waiting for page function", timeout_ms=timeout_ms) from e
