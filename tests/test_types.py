from __future__ import annotations

import pytest

from gtm_datalayer.types import WaitOptions


def test_coerce_merges_dict_and_keyword_overrides() -> None:
    options = WaitOptions.coerce({"timeout_ms": 100, "polling": "raf"}, timeout_ms=200)

    assert options == WaitOptions(timeout_ms=200, polling="raf")


def test_coerce_keeps_existing_options() -> None:
    original = WaitOptions(timeout_ms=50)

    assert WaitOptions.coerce(original) == original
    assert WaitOptions.coerce(original, polling=10) == WaitOptions(timeout_ms=50, polling=10)


def test_coerce_rejects_unknown_options() -> None:
    with pytest.raises(TypeError, match="visible"):
        WaitOptions.coerce({"visible": True})
