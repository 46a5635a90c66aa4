"""
gtm-datalayer CLI - inspect a page's GTM dataLayer from the command line.
"""
import json
import logging
import sys
from typing import Any, Callable, Optional

import click
from playwright.sync_api import Error as PlaywrightError
from rich.console import Console
from rich.logging import RichHandler

from .automation import create_engine
from .client import DataLayerClient
from .config import DataLayerConfig, DEFAULT_CONTAINER_PREFIX
from .errors import DataLayerError
from .types import WaitOptions

logger = logging.getLogger("gtm_datalayer")

# Create console for rich output
console = Console()


class PageSession:
    """Options shared by every command: which page, container and engine."""

    def __init__(
        self,
        url: str,
        container: str,
        engine: str,
        headless: bool,
        debug: bool,
        user_data_dir: Optional[str] = None,
    ):
        self.url = url
        self.container = container
        self.engine_name = engine
        self.headless = headless
        self.debug = debug
        self.user_data_dir = user_data_dir

    def run(self, operation: Callable[[DataLayerClient], Any]) -> Any:
        """Open the page, run one client operation against it and close the browser."""
        try:
            engine = create_engine(self.engine_name)
        except RuntimeError as e:
            raise click.ClickException(str(e))

        try:
            engine.start(headless=self.headless, user_data_dir=self.user_data_dir)
            logger.debug(f"Opening {self.url}")
            engine.goto(self.url)
            client = DataLayerClient(engine, self.container, config=DataLayerConfig.from_env())
            return operation(client)
        except (DataLayerError, PlaywrightError) as e:
            if self.debug:
                logger.exception("dataLayer operation failed")
            raise click.ClickException(str(e))
        finally:
            engine.stop()


def print_json(value: Any) -> None:
    if value is None:
        console.print("[yellow]No result.[/]")
        return
    console.print_json(json.dumps(value, default=str))


@click.group()
@click.option("--url", required=True, help="Page to open")
@click.option(
    "--container",
    default=None,
    help=f"GTM container ID ({DEFAULT_CONTAINER_PREFIX}XXXXXXX); required for get and model",
)
@click.option("--engine", type=click.Choice(["playwright", "selenium"]), default="playwright", show_default=True)
@click.option("--headless/--no-headless", default=True, show_default=True)
@click.option(
    "--user-data-dir",
    type=click.Path(file_okay=False, dir_okay=True),
    default=None,
    help="Browser profile to reuse, e.g. one that already holds consent cookies",
)
@click.option("--debug/--no-debug", default=False, help="Enable debug output", show_default=True)
@click.pass_context
def cli(
    ctx: click.Context,
    url: str,
    container: Optional[str],
    engine: str,
    headless: bool,
    user_data_dir: Optional[str],
    debug: bool,
) -> None:
    """Query and push to the Google Tag Manager dataLayer of a web page."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, console=Console(stderr=True))],
    )
    if debug:
        logger.debug("Debug mode enabled")
    ctx.obj = PageSession(
        url=url,
        container=container or "",
        engine=engine,
        headless=headless,
        debug=debug,
        user_data_dir=user_data_dir,
    )


def _require_container(session: PageSession) -> None:
    if not session.container:
        raise click.UsageError("--container is required for this command")


@cli.command()
@click.pass_obj
def containers(session: PageSession) -> None:
    """List the GTM container IDs active on the page."""
    ids = session.run(lambda client: client.get_container_ids())
    if not ids:
        console.print("[yellow]No containers found.[/]")
        return
    for container_id in ids:
        console.print(container_id)


@cli.command()
@click.argument("variable")
@click.pass_obj
def get(session: PageSession, variable: str) -> None:
    """Print the current value of VARIABLE (GTM dot-notation)."""
    _require_container(session)
    print_json(session.run(lambda client: client.get(variable)))


@cli.command()
@click.option("--container-id", default=None, help="Read another container than --container")
@click.pass_obj
def model(session: PageSession, container_id: Optional[str]) -> None:
    """Print the container's full data model."""
    if not container_id:
        _require_container(session)
    print_json(session.run(lambda client: client.get_data_model(container_id)))


@cli.command()
@click.argument("name")
@click.pass_obj
def events(session: PageSession, name: str) -> None:
    """Print every message whose event is NAME."""
    print_json(session.run(lambda client: client.get_events(name)))


@cli.command()
@click.option("--event", default=None, help="Only consider messages with this event name")
@click.pass_obj
def latest(session: PageSession, event: Optional[str]) -> None:
    """Print the most recent message, optionally filtered by event name."""
    print_json(session.run(lambda client: client.get_latest_event(event)))


@cli.command()
@click.pass_obj
def history(session: PageSession) -> None:
    """Print every message pushed to the dataLayer."""
    print_json(session.run(lambda client: client.history))


@cli.command()
@click.argument("message")
@click.pass_obj
def push(session: PageSession, message: str) -> None:
    """Push MESSAGE (a JSON object) to the dataLayer."""
    try:
        payload = json.loads(message)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"not valid JSON: {e}", param_hint="MESSAGE")
    if not isinstance(payload, dict):
        raise click.BadParameter("must be a JSON object", param_hint="MESSAGE")

    session.run(lambda client: client.push(payload))
    console.print("[green]✓[/] Message pushed")


@cli.command()
@click.argument("name")
@click.option("--timeout", "timeout_ms", type=int, default=None, help="Timeout in milliseconds")
@click.option("--polling", default=None, help="'raf', 'mutation' or an interval in milliseconds")
@click.pass_obj
def wait(session: PageSession, name: str, timeout_ms: Optional[int], polling: Optional[str]) -> None:
    """Wait until an event called NAME is pushed."""
    options = WaitOptions(timeout_ms=timeout_ms, polling=int(polling) if polling and polling.isdigit() else polling)
    session.run(lambda client: client.wait_for_event(name, options))
    console.print(f"[green]✓[/] Event {name!r} observed")


def main() -> None:
    cli(prog_name="gtm-datalayer")


if __name__ == "__main__":
    sys.exit(main())
