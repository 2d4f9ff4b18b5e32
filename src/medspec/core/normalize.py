"""
MEDS normalization.

Repairs raw model output into a shape :class:`~medspec.core.ir.MedsSpec` can
accept. Model output is untrusted, so normalization never raises: missing or
mistyped sections are replaced with the literal defaults below, known token
mistakes are remapped, and pixel measurements are snapped to the 8px grid.
Anything that cannot be repaired is passed through for the validator to
report.

``normalize(normalize(x)) == normalize(x)`` holds for every input.
"""

from __future__ import annotations

import copy
import logging
import math
import re
from typing import Any

from .ir.enums import ColorToken, Platform
from .ir.meds import EASING_PATTERN

logger = logging.getLogger(__name__)

# =============================================================================
# Literal defaults
# =============================================================================

DEFAULT_VIEWPORT: dict[str, Any] = {
    "type": "desktop",
    "widthPx": "unknown",
    "confidence": 0.5,
}

DEFAULT_COLORS: list[dict[str, Any]] = [
    {"token": "bg", "hex": "#ffffff", "usage": "Page background"},
    {"token": "surface", "hex": "#f8fafc", "usage": "Cards and elevated surfaces"},
    {"token": "border", "hex": "#e2e8f0", "usage": "Dividers and outlines"},
    {"token": "text-primary", "hex": "#0f172a", "usage": "Body text and headings"},
    {"token": "text-secondary", "hex": "#475569", "usage": "Supporting text"},
    {"token": "brand", "hex": "#2563eb", "usage": "Primary actions"},
]

DEFAULT_FONT_SCALE: list[int] = [14, 16, 18]
DEFAULT_WEIGHTS: list[int] = [400]
DEFAULT_FAMILY_CONFIDENCE = 0.8

DEFAULT_TYPOGRAPHY: dict[str, Any] = {
    "primaryFamily": "system-ui",
    "familyCandidates": [],
    "scalePx": DEFAULT_FONT_SCALE,
    "weights": DEFAULT_WEIGHTS,
}

DEFAULT_SPACING_SCALE: list[int] = [8, 16, 24, 32, 48, 64]

DEFAULT_SPACING: dict[str, Any] = {"basePx": 8, "scalePx": DEFAULT_SPACING_SCALE}

DEFAULT_RADIUS: list[int] = [0, 8, 16]

DEFAULT_SHADOW: dict[str, Any] = {"none": "none"}

DEFAULT_EASINGS: list[str] = ["ease-in-out"]

DEFAULT_MOTION: dict[str, Any] = {
    "durationsMs": {"fast": 150, "standard": 250, "slow": 400},
    "easings": DEFAULT_EASINGS,
}

DEFAULT_GRID: dict[str, Any] = {
    "columns": 12,
    "gapPx": 24,
    "containerMaxWidthPx": "unknown",
}

MIN_HIT_AREA_PX = 40

DEFAULT_A11Y: dict[str, Any] = {
    "hitAreaPx": 48,
    "focusRing": {"widthPx": 2, "colorToken": "brand"},
    "minContrast": "AA",
}

DEFAULT_COMPOSITION: dict[str, Any] = {
    "pagePaddingPx": 24,
    "sectionGapPx": 32,
    "cardInnerPaddingPx": 16,
    "density": "comfortable",
}

# Common token names emitted by models, mapped onto the semantic vocabulary
TOKEN_ALIASES: dict[str, str] = {
    "button-primary-text": "text-inverse",
    "primary-text": "text-primary",
    "secondary-text": "text-secondary",
    "background": "bg",
    "foreground": "text-primary",
    "muted": "text-secondary",
    "destructive": "error",
    "button-text": "text-inverse",
    "card-background": "surface",
    "card-foreground": "text-primary",
    "input-background": "surface",
    "input-border": "border",
    "popover-background": "surface",
    "popover-foreground": "text-primary",
}

# Viewport classes by width: mobile < 768 <= tablet < 1024 <= desktop
TABLET_MIN_WIDTH_PX = 768
DESKTOP_MIN_WIDTH_PX = 1024

_PASSTHROUGH_OBJECTS = ("source", "motionPatterns", "scene", "screenflow", "uxRulebook", "uxSignals")

_EASING_RE = re.compile(EASING_PATTERN)
_BARE_HEX_RE = re.compile(r"^(?:[0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_COLOR_TOKENS = frozenset(t.value for t in ColorToken)
_PLATFORMS = frozenset(p.value for p in Platform)


# =============================================================================
# Scalar helpers
# =============================================================================


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def quantize8(value: Any) -> Any:
    """Snap a positive number to the nearest multiple of 8 (halves round up).

    Non-numeric values, booleans and non-positive numbers are returned
    unchanged, so ``quantize8(quantize8(x)) == quantize8(x)``.
    """
    if _is_number(value) and value > 0:
        return int(math.floor(value / 8 + 0.5)) * 8
    return value


def _coerce_confidence(value: Any, default: float) -> float:
    """Coerce a confidence to a float in [0, 1]; non-numeric becomes ``default``."""
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return default
    if not _is_number(value):
        return default
    return min(1.0, max(0.0, float(value)))


def _platform_for_width(width: float) -> str:
    if width < TABLET_MIN_WIDTH_PX:
        return Platform.MOBILE.value
    if width < DESKTOP_MIN_WIDTH_PX:
        return Platform.TABLET.value
    return Platform.DESKTOP.value


def _quantized_list(values: Any, default: list[int]) -> list[Any]:
    """Quantize, deduplicate and sort a pixel list; non-numbers are dropped."""
    if not isinstance(values, list):
        return list(default)
    snapped = {quantize8(v) for v in values if _is_number(v)}
    if not snapped:
        return list(default)
    return sorted(snapped)


# =============================================================================
# Section normalizers
# =============================================================================


def _normalize_viewport(viewport: Any) -> dict[str, Any]:
    if not isinstance(viewport, dict):
        return copy.deepcopy(DEFAULT_VIEWPORT)

    platform = viewport.get("type")
    if isinstance(platform, str):
        platform = platform.strip().lower()
        viewport["type"] = platform
    if platform not in _PLATFORMS:
        width = viewport.get("widthPx")
        if _is_number(width) and width > 0:
            viewport["type"] = _platform_for_width(width)
            logger.debug(f"Inferred viewport type '{viewport['type']}' from width {width}")

    if "confidence" in viewport:
        viewport["confidence"] = _coerce_confidence(viewport["confidence"], 0.5)
    return viewport


def _map_token(token: Any) -> Any:
    if not isinstance(token, str):
        return token
    key = token.strip().lower()
    if key in _COLOR_TOKENS:
        return key
    return TOKEN_ALIASES.get(key, token)


def _normalize_colors(colors: Any) -> list[dict[str, Any]]:
    if not isinstance(colors, list):
        return copy.deepcopy(DEFAULT_COLORS)

    normalized = []
    for entry in colors:
        if not isinstance(entry, dict):
            continue
        token = _map_token(entry.get("token"))
        if token != entry.get("token"):
            logger.debug(f"Remapped color token '{entry.get('token')}' -> '{token}'")
        entry["token"] = token

        hex_value = entry.get("hex")
        if isinstance(hex_value, str):
            hex_value = hex_value.strip()
            if _BARE_HEX_RE.match(hex_value):
                hex_value = f"#{hex_value}"
            entry["hex"] = hex_value
        normalized.append(entry)

    return normalized or copy.deepcopy(DEFAULT_COLORS)


def _family_candidate(entry: Any) -> dict[str, Any] | None:
    if isinstance(entry, str):
        family = entry.strip()
        if not family:
            return None
        return {"family": family, "confidence": DEFAULT_FAMILY_CONFIDENCE}
    if isinstance(entry, dict):
        family = entry.get("family")
        if not isinstance(family, str) or not family.strip():
            return None
        return {
            **entry,
            "family": family.strip(),
            "confidence": _coerce_confidence(entry.get("confidence"), DEFAULT_FAMILY_CONFIDENCE),
        }
    return None


def _normalize_weights(weights: Any) -> list[int]:
    if not isinstance(weights, list):
        return list(DEFAULT_WEIGHTS)
    # Out-of-range weights are dropped, never clamped.
    kept = [
        int(w)
        for w in weights
        if _is_number(w) and float(w).is_integer() and 300 <= w <= 800
    ]
    return list(dict.fromkeys(kept)) or list(DEFAULT_WEIGHTS)


def _normalize_font_scale(scale: Any) -> list[int]:
    if not isinstance(scale, list):
        return list(DEFAULT_FONT_SCALE)
    quantized = (quantize8(s) for s in scale if _is_number(s))
    sizes = sorted({s for s in quantized if s >= 8})
    if len(sizes) < 3:
        return list(DEFAULT_FONT_SCALE)
    return sizes


def _normalize_typography(typography: Any) -> dict[str, Any]:
    if not isinstance(typography, dict):
        return copy.deepcopy(DEFAULT_TYPOGRAPHY)

    candidates = typography.get("familyCandidates")
    if isinstance(candidates, list):
        repaired = [c for c in (_family_candidate(e) for e in candidates) if c is not None]
    else:
        repaired = []
    typography["familyCandidates"] = repaired

    primary = typography.get("primaryFamily")
    if isinstance(primary, str) and primary.strip():
        typography["primaryFamily"] = primary.strip()
    elif repaired:
        typography["primaryFamily"] = repaired[0]["family"]
    else:
        typography["primaryFamily"] = DEFAULT_TYPOGRAPHY["primaryFamily"]

    typography["weights"] = _normalize_weights(typography.get("weights"))
    typography["scalePx"] = _normalize_font_scale(typography.get("scalePx"))
    return typography


def _normalize_spacing(spacing: Any) -> dict[str, Any]:
    if not isinstance(spacing, dict):
        return copy.deepcopy(DEFAULT_SPACING)
    if "basePx" in spacing:
        spacing["basePx"] = quantize8(spacing["basePx"])
    spacing["scalePx"] = _quantized_list(spacing.get("scalePx"), DEFAULT_SPACING_SCALE)
    return spacing


def _normalize_shadow(shadow: Any) -> dict[str, Any]:
    if not isinstance(shadow, dict):
        return dict(DEFAULT_SHADOW)
    return shadow


def _normalize_motion(motion: Any) -> dict[str, Any]:
    if not isinstance(motion, dict):
        return copy.deepcopy(DEFAULT_MOTION)

    if not isinstance(motion.get("durationsMs"), dict):
        motion["durationsMs"] = dict(DEFAULT_MOTION["durationsMs"])

    easings = motion.get("easings")
    if isinstance(easings, list):
        kept = [e for e in easings if isinstance(e, str) and _EASING_RE.match(e)]
    else:
        kept = []
    motion["easings"] = kept or list(DEFAULT_EASINGS)
    return motion


def _normalize_grid(grid: Any) -> dict[str, Any]:
    if not isinstance(grid, dict):
        return dict(DEFAULT_GRID)
    for key in ("gapPx", "containerMaxWidthPx"):
        if key in grid:
            grid[key] = quantize8(grid[key])
    return grid


def _normalize_a11y(a11y: Any) -> dict[str, Any]:
    if not isinstance(a11y, dict):
        return copy.deepcopy(DEFAULT_A11Y)

    hit_area = a11y.get("hitAreaPx")
    if _is_number(hit_area):
        a11y["hitAreaPx"] = max(MIN_HIT_AREA_PX, quantize8(hit_area))
    elif "hitAreaPx" in a11y:
        del a11y["hitAreaPx"]

    if "focusRing" in a11y and not isinstance(a11y["focusRing"], dict):
        del a11y["focusRing"]
    return a11y


def _normalize_foundations(foundations: Any) -> dict[str, Any]:
    if not isinstance(foundations, dict):
        foundations = {}
    foundations["color"] = _normalize_colors(foundations.get("color"))
    foundations["typography"] = _normalize_typography(foundations.get("typography"))
    foundations["spacing"] = _normalize_spacing(foundations.get("spacing"))
    foundations["radius"] = _quantized_list(foundations.get("radius"), DEFAULT_RADIUS)
    foundations["shadow"] = _normalize_shadow(foundations.get("shadow"))
    foundations["motion"] = _normalize_motion(foundations.get("motion"))
    foundations["grid"] = _normalize_grid(foundations.get("grid"))
    foundations["a11y"] = _normalize_a11y(foundations.get("a11y"))
    return foundations


def _normalize_components(components: Any) -> list[dict[str, Any]]:
    if not isinstance(components, list):
        return []

    normalized = []
    for component in components:
        if not isinstance(component, dict):
            continue
        component_id = component.get("id")
        if isinstance(component_id, int) and not isinstance(component_id, bool):
            component["id"] = str(component_id)
        elif "id" in component and not isinstance(component_id, str):
            del component["id"]
        if isinstance(component.get("type"), str):
            component["type"] = component["type"].strip()
        if "confidence" in component:
            component["confidence"] = _coerce_confidence(component["confidence"], 0.5)
        normalized.append(component)
    return normalized


def _normalize_composition(composition: Any) -> dict[str, Any]:
    if not isinstance(composition, dict):
        return dict(DEFAULT_COMPOSITION)
    for key in ("pagePaddingPx", "sectionGapPx", "cardInnerPaddingPx"):
        if key in composition:
            composition[key] = quantize8(composition[key])
    return composition


# =============================================================================
# Entry point
# =============================================================================


def normalize(raw: Any) -> dict[str, Any]:
    """Repair raw model output into a best-effort MEDS document.

    Args:
        raw: Parsed model output. Any value is accepted; non-objects are
            treated as an empty document.

    Returns:
        A new dictionary; ``raw`` is never mutated.
    """
    spec: dict[str, Any] = copy.deepcopy(raw) if isinstance(raw, dict) else {}

    spec["version"] = "1.1"
    spec["modality"] = "image"
    spec["viewportProfile"] = _normalize_viewport(spec.get("viewportProfile"))
    spec["foundations"] = _normalize_foundations(spec.get("foundations"))
    spec["components"] = _normalize_components(spec.get("components"))
    spec["composition"] = _normalize_composition(spec.get("composition"))

    for key in _PASSTHROUGH_OBJECTS:
        if key in spec and not isinstance(spec[key], dict):
            logger.debug(f"Dropping non-object '{key}' from model output")
            del spec[key]

    if "unclear" in spec:
        unclear = spec["unclear"]
        if isinstance(unclear, list):
            spec["unclear"] = [u for u in unclear if isinstance(u, str)]
        else:
            del spec["unclear"]

    return spec
