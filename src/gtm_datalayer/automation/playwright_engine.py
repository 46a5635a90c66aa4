import logging
from typing import Optional, Any

from playwright.sync_api import sync_playwright, Page, Browser, BrowserContext
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from ..errors import WaitTimeoutError
from ..types import Polling

logger = logging.getLogger(__name__)


class PlaywrightEngine:
    def __init__(self):
        self._pw = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None

    @classmethod
    def attach(cls, page: Page) -> "PlaywrightEngine":
        """Wrap a page owned by the caller. ``stop()`` leaves it open."""
        engine = cls()
        engine._page = page
        return engine

    @property
    def page(self) -> Optional[Page]:
        return self._page

    def start(self, headless: bool = True, user_data_dir: Optional[str] = None) -> None:
        self._pw = sync_playwright().start()
        launch_args = {"headless": headless}
        try:
            if user_data_dir:
                self._context = self._pw.chromium.launch_persistent_context(user_data_dir, **launch_args)
                pages = self._context.pages
                self._page = pages[0] if pages else self._context.new_page()
            else:
                self._browser = self._pw.chromium.launch(**launch_args)
                self._context = self._browser.new_context()
                self._page = self._context.new_page()
        except Exception:
            # never leave the driver running after a failed launch
            self.stop()
            raise

    def stop(self) -> None:
        if self._context:
            self._context.close()
        if self._browser:
            self._browser.close()
        if self._pw:
            self._pw.stop()
        self._page = None
        self._context = None
        self._browser = None
        self._pw = None

    def goto(self, url: str, wait_until: str = "load") -> None:
        assert self._page is not None
        self._page.goto(url, wait_until=wait_until)

    def evaluate(self, script: str, arg: Any = None) -> Any:
        assert self._page is not None
        return self._page.evaluate(script, arg)

    def wait_for_function(
        self,
        script: str,
        arg: Any = None,
        timeout_ms: Optional[int] = None,
        polling: Polling = None,
    ) -> None:
        assert self._page is not None
        kwargs = {}
        if timeout_ms is not None:
            kwargs["timeout"] = timeout_ms
        if polling == "mutation":
            # Playwright only knows "raf" and fixed intervals
            logger.debug("Mutation polling is not supported by Playwright, using 'raf'")
            polling = "raf"
        if polling is not None:
            kwargs["polling"] = polling
        try:
            self._page.wait_for_function(script, arg=arg, **kwargs)
        except PlaywrightTimeoutError as e:
            raise WaitTimeoutError(str(e), timeout_ms=timeout_ms) from e
