"""Shared pytest fixtures for medspec tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest


@pytest.fixture
def desktop_raw() -> dict[str, Any]:
    """Model output for a desktop admin screen, with typical model mistakes."""
    return {
        "viewportProfile": {"type": "Desktop", "widthPx": 1440, "confidence": 0.9},
        "foundations": {
            "color": [
                {"token": "background", "hex": "ffffff"},
                {"token": "Brand", "hex": "#2563eb"},
                {"token": "primary-text", "hex": "#0f172a"},
            ],
            "typography": {
                "familyCandidates": ["Inter", {"family": "Roboto", "confidence": 2}],
                "scalePx": [12, 14.4, 16, 20, 24],
                "weights": [400, 600, 900],
            },
            "spacing": {"basePx": 8, "scalePx": [4, 8, 16, 16, 24, 33]},
            "radius": [4, 8],
            "shadow": None,
        },
        "components": [
            {"id": "nav", "type": "Sidebar"},
            {"id": "header", "type": "AppBar"},
            {"id": "orders", "type": "Table"},
            {"id": "delete-order", "type": "Button"},
        ],
        "composition": {"density": "compact", "sectionGapPx": 20},
    }


@pytest.fixture
def mobile_raw() -> dict[str, Any]:
    """Model output for a mobile sign-up form; viewport type must be inferred."""
    return {
        "viewportProfile": {"widthPx": 390},
        "foundations": {
            "color": [{"token": "brand", "hex": "#7c3aed"}],
        },
        "components": [
            {"id": "email", "type": "TextField"},
            {"id": "password", "type": "TextField"},
            {"id": "name", "type": "TextField"},
            {"id": "submit", "type": "Button"},
        ],
    }


@pytest.fixture
def desktop_spec(desktop_raw):
    from medspec.core.normalize import normalize
    from medspec.core.validator import validate_and_fill

    result = validate_and_fill(normalize(desktop_raw))
    assert result.ok, result.errors
    return result.spec


@pytest.fixture
def mobile_spec(mobile_raw):
    from medspec.core.normalize import normalize
    from medspec.core.validator import validate_and_fill

    result = validate_and_fill(normalize(mobile_raw))
    assert result.ok, result.errors
    return result.spec


@pytest.fixture
def rulebook():
    """The packaged default rulebook."""
    from medspec.core.rulebook_loader import get_default_rulebook

    return get_default_rulebook()


@pytest.fixture
def rulebook_data() -> dict[str, Any]:
    """A minimal one-policy rulebook document."""
    return {
        "version": "test-1",
        "policies": [
            {
                "policyId": "desktop-test",
                "platform": "desktop",
                "rules": [
                    {
                        "id": "edit-open",
                        "family": "Edit",
                        "event": "click",
                        "action": "modal",
                        "guards": [{"when": {"formFields": ">5"}, "then": {"action": "route"}}],
                    }
                ],
            }
        ],
    }


@pytest.fixture
def write_json(tmp_path: Path):
    """Write a JSON document under tmp_path and return its path."""

    def _write(name: str, data: Any) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write
