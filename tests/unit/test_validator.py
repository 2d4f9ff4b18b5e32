"""Tests for MEDS validation and default injection."""

from __future__ import annotations

import pytest
from pydantic import ValidationError


def _paths(result) -> set[str]:
    return {v.path for v in result.errors}


class TestValidateAndFill:
    def test_valid_spec_passes(self, desktop_raw):
        from medspec.core.normalize import normalize
        from medspec.core.validator import validate_and_fill

        result = validate_and_fill(normalize(desktop_raw))
        assert result.ok
        assert result.errors == []
        assert result.spec.platform == "desktop"

    def test_defaults_injected(self):
        from medspec.core.normalize import normalize
        from medspec.core.validator import validate_and_fill

        spec = validate_and_fill(normalize({})).spec
        assert spec.composition.density == "comfortable"
        assert spec.foundations.grid.columns == 12
        assert spec.foundations.motion.durations_ms.fast == 150
        assert spec.foundations.a11y.focus_ring.color_token == "brand"
        assert spec.components == []

    def test_unknown_keys_dropped(self):
        from medspec.core.normalize import normalize
        from medspec.core.validator import validate_and_fill

        spec = validate_and_fill(normalize({"debugNotes": "x", "composition": {"gutter": 3}})).spec
        data = spec.to_json_dict()
        assert "debugNotes" not in data
        assert "gutter" not in data["composition"]

    def test_unknown_viewport_type_reported(self):
        from medspec.core.normalize import normalize
        from medspec.core.validator import validate_and_fill

        result = validate_and_fill(
            normalize({"viewportProfile": {"type": "watch", "widthPx": "unknown"}})
        )
        assert not result.ok
        assert result.spec is None
        assert "viewportProfile.type" in _paths(result)

    def test_color_violations_reported_with_index(self):
        from medspec.core.normalize import normalize
        from medspec.core.validator import validate_and_fill

        colors = [{"token": "bg", "hex": "#ffffff"}, {"token": "sparkle", "hex": "#zzzzzz"}]
        result = validate_and_fill(normalize({"foundations": {"color": colors}}))
        assert {"foundations.color[1].token", "foundations.color[1].hex"} <= _paths(result)

    def test_negative_radius_rejected(self):
        from medspec.core.normalize import normalize
        from medspec.core.validator import validate_and_fill

        result = validate_and_fill(normalize({"foundations": {"radius": [-8, 8]}}))
        assert "foundations.radius[0]" in _paths(result)

    def test_non_object_rejected(self):
        from medspec.core.validator import validate_and_fill

        result = validate_and_fill("spec")
        assert not result.ok
        assert result.errors[0].path == ""
        assert result.errors[0].format() == "<root>: must be a JSON object"


class TestSchemaClosure:
    def test_validated_values_in_closed_sets(self, desktop_spec, mobile_spec):
        from medspec.core.ir import ColorToken

        tokens = {t.value for t in ColorToken}
        for spec in (desktop_spec, mobile_spec):
            foundations = spec.foundations
            assert all(c.token in tokens for c in foundations.color)
            assert all(300 <= w <= 800 for w in foundations.typography.weights)
            for values in (foundations.radius, foundations.spacing.scale_px):
                assert all(v >= 0 and v % 8 == 0 for v in values)
                assert values == sorted(set(values))

    def test_desktop_values(self, desktop_spec):
        foundations = desktop_spec.foundations
        assert [c.token for c in foundations.color] == ["bg", "brand", "text-primary"]
        assert foundations.spacing.scale_px == [8, 16, 24, 32]
        assert foundations.radius == [8]
        assert foundations.typography.weights == [400, 600]
        assert foundations.shadow.none == "none"
        assert desktop_spec.composition.section_gap_px == 24

    def test_spec_is_frozen(self, desktop_spec):
        with pytest.raises(ValidationError):
            desktop_spec.version = "2.0"  # type: ignore[misc]


class TestFormatLocation:
    def test_indices_and_keys(self):
        from medspec.core.validator import format_location

        assert format_location(("foundations", "color", 2, "token")) == "foundations.color[2].token"

    def test_union_tags_skipped(self):
        from medspec.core.validator import format_location

        loc = ("composition", "sectionGapPx", "function-after[_grid_px_or_unknown(), union[int,str]]", "int")
        assert format_location(loc) == "composition.sectionGapPx"


class TestJsonSchema:
    def test_schema_uses_wire_names(self):
        from medspec.core.validator import medsspec_json_schema

        schema = medsspec_json_schema()
        assert "viewportProfile" in schema["properties"]
        assert {"viewportProfile", "foundations"} <= set(schema["required"])
