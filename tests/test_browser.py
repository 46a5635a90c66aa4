"""End-to-end checks against a real Chromium page with a minimal GTM stand-in.

Skipped when Playwright's browsers are not installed.
"""
from __future__ import annotations

import pytest

from gtm_datalayer.automation.playwright_engine import PlaywrightEngine
from gtm_datalayer.client import DataLayerClient
from gtm_datalayer.errors import ContainerNotFoundError, GTMNotFoundError, WaitTimeoutError

pytestmark = pytest.mark.browser

CONTAINER_ID = "GTM-TEST123"

# Merges every pushed message into one model, the way a container would
GTM_PAGE = """
<!DOCTYPE html>
<html>
<body>
  <a id="nav" href="#">Home</a>
  <script>
    window.dataLayer = [];
    function model() {
      var merged = {};
      window.dataLayer.forEach(function (msg) {
        for (var key in msg) merged[key] = msg[key];
      });
      return merged;
    }
    window.google_tag_manager = {
      "GTM-TEST123": {
        dataLayer: {
          get: function (key) {
            if (typeof key === "object") {
              return model();
            }
            return key.split(".").reduce(function (value, part) {
              return value == null ? undefined : value[part];
            }, model());
          }
        }
      },
      "dataLayer": {gtmDom: true, gtmLoad: true}
    };
  </script>
</body>
</html>
"""


@pytest.fixture(scope="module")
def engine():
    engine = PlaywrightEngine()
    try:
        engine.start(headless=True)
    except Exception as e:
        pytest.skip(f"Chromium not available: {e}")
    yield engine
    engine.stop()


@pytest.fixture
def client(engine: PlaywrightEngine) -> DataLayerClient:
    engine.page.set_content(GTM_PAGE)
    return DataLayerClient(engine, CONTAINER_ID)


def test_scenario_round_trip(client: DataLayerClient) -> None:
    page_view = {"event": "page_view", "page_type": "home"}
    click = {"event": "click", "label": "nav"}
    client.push(page_view)
    client.push(click)

    assert client.history == [page_view, click]
    assert client.get_events("page_view") == [page_view]
    assert client.get_events("purchase") == []
    assert client.get_latest_message() == click
    assert client.get_latest_event("page_view") == page_view
    assert client.get_latest_event("purchase") is None
    assert client.get("page_type") == "home"
    assert client.get("missing") is None
    assert client.get_data_model()["label"] == "nav"


def test_history_replaces_dom_nodes(engine: PlaywrightEngine, client: DataLayerClient) -> None:
    engine.page.evaluate(
        "() => window.dataLayer.push({event: 'gtm.click', element: document.getElementById('nav'), depth: {n: 1}})"
    )

    assert client.history == [{"event": "gtm.click", "element": "[HTMLObject]", "depth": {"n": 1}}]


def test_container_ids(client: DataLayerClient) -> None:
    assert client.get_container_ids() == [CONTAINER_ID]


def test_container_ids_distinguishes_empty_and_missing_registry(engine: PlaywrightEngine) -> None:
    client = DataLayerClient(engine, CONTAINER_ID)

    engine.page.set_content("<script>window.google_tag_manager = {dataLayer: {}};</script>")
    assert client.get_container_ids() == []

    engine.page.evaluate("() => { delete window.google_tag_manager; }")
    with pytest.raises(GTMNotFoundError):
        client.get_container_ids()


def test_missing_container(engine: PlaywrightEngine, client: DataLayerClient) -> None:
    with pytest.raises(ContainerNotFoundError):
        client.get_data_model("GTM-NOPE")


def test_wait_for_event_resolves_after_push(engine: PlaywrightEngine, client: DataLayerClient) -> None:
    engine.page.evaluate("() => setTimeout(() => window.dataLayer.push({event: 'x'}), 20)")

    client.wait_for_event("x", timeout_ms=5000)
    assert client.has_event("x")


def test_wait_for_event_times_out(client: DataLayerClient) -> None:
    with pytest.raises(WaitTimeoutError):
        client.wait_for_event("x", timeout_ms=50)


def test_numeric_event_does_not_match_string_name(client: DataLayerClient) -> None:
    client.push({"event": 1})
    client.push({"event": "1", "source": "string"})

    assert client.get_events("1") == [{"event": "1", "source": "string"}]
    assert client.get_latest_event("1") == client.get_events("1")[-1]
