from __future__ import annotations

import copy
from typing import Any

import pytest

from flowbridge.repair.schema import LAYOUT_PROPERTY_KEYS

_EMPTY_RESPONSE: dict[str, Any] = {
    "summary": {"issues_detected": [], "confidence": "high"},
    "typography_fixes": [],
    "layout_fixes": [],
    "spacing_fixes": [],
    "parent_child_repairs": [],
    "phantom_elements": [],
    "requires_human_review": [],
}


@pytest.fixture
def make_response():
    """Build a schema-valid repair response, overriding top-level sections."""

    def _make(**sections: Any) -> dict[str, Any]:
        response = copy.deepcopy(_EMPTY_RESPONSE)
        response.update(sections)
        return response

    return _make


@pytest.fixture
def layout_properties():
    """A full layout ``properties`` object with every key null."""

    def _make(**values: str) -> dict[str, Any]:
        props: dict[str, Any] = {key: None for key in LAYOUT_PROPERTY_KEYS}
        props.update(values)
        return props

    return _make
