"""Page drivers the dataLayer client can run its scripts through.

Any object implementing the AutomationEngine Protocol works; Playwright is the
default and Selenium is available as an optional extra.
"""

from .engine import AutomationEngine

__all__ = [
    'AutomationEngine',
    'create_engine',
]


def create_engine(name: str = "playwright"):
    """Instantiate an engine by name without importing the others."""
    if name == "playwright":
        from .playwright_engine import PlaywrightEngine
        return PlaywrightEngine()
    if name == "selenium":
        from .selenium_engine import SeleniumEngine
        return SeleniumEngine()
    raise ValueError(f"Unknown automation engine: {name}")
