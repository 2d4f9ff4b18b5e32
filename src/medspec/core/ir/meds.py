"""
MEDS (machine-extracted design spec) IR types.

The MEDS document is produced by a vision model from a UI screenshot and
repaired by :mod:`medspec.core.normalize` before it reaches these models.
Validating a normalized document against :class:`MedsSpec` both rejects
irreparable structures and injects every remaining default.

Attributes are snake_case; the wire format is camelCase (``viewportProfile``,
``scalePx``). Unknown keys are dropped rather than rejected.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .enums import (
    ColorToken,
    ComponentType,
    ContrastLevel,
    Density,
    Platform,
    ShadowToken,
    UXAction,
)

UNKNOWN = "unknown"

# Easing grammar accepted in foundations.motion.easings
EASING_PATTERN = (
    r"^(linear|ease-in|ease-out|ease-in-out|"
    r"cubic-bezier\((?:-?\d*\.?\d+\s*,\s*){3}-?\d*\.?\d+\))$"
)

HEX_PATTERN = r"^#(?:[0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$"


# =============================================================================
# Pixel value types
# =============================================================================


def _multiple_of_8(value: int) -> int:
    if value < 0 or value % 8 != 0:
        raise ValueError(f"must be a non-negative multiple of 8, got {value}")
    return value


def _grid_px_or_unknown(value: int | str) -> int | str:
    if isinstance(value, str):
        if value != UNKNOWN:
            raise ValueError(f"must be a multiple of 8 or '{UNKNOWN}', got '{value}'")
        return value
    return _multiple_of_8(value)


def _positive_or_unknown(value: int | str) -> int | str:
    if isinstance(value, str):
        if value != UNKNOWN:
            raise ValueError(f"must be a positive integer or '{UNKNOWN}', got '{value}'")
        return value
    if value <= 0:
        raise ValueError(f"must be a positive integer, got {value}")
    return value


def _non_negative_or_unknown(value: int | float | str) -> int | float | str:
    if isinstance(value, str):
        if value != UNKNOWN:
            raise ValueError(f"must be a number or '{UNKNOWN}', got '{value}'")
        return value
    if value < 0:
        raise ValueError(f"must not be negative, got {value}")
    return value


def _sorted_unique(values: list[int]) -> list[int]:
    if values != sorted(set(values)):
        raise ValueError("must be sorted ascending without duplicates")
    return values


def _typographic_scale(values: list[int]) -> list[int]:
    _sorted_unique(values)
    if len(values) < 3:
        raise ValueError(f"must contain at least 3 distinct sizes, got {len(values)}")
    return values


GridPx = Annotated[int, AfterValidator(_multiple_of_8)]
GridPxOrUnknown = Annotated[int | str, AfterValidator(_grid_px_or_unknown)]
PixelsOrUnknown = Annotated[int | str, AfterValidator(_positive_or_unknown)]
MeasureOrUnknown = Annotated[int | float | str, AfterValidator(_non_negative_or_unknown)]
GridScale = Annotated[list[GridPx], AfterValidator(_sorted_unique)]
FontSize = Annotated[int, Field(ge=8)]
FontWeight = Annotated[int, Field(ge=300, le=800)]
Easing = Annotated[str, Field(pattern=EASING_PATTERN)]


class MedsModel(BaseModel):
    """Base for MEDS models: frozen, camelCase on the wire, extras dropped."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# =============================================================================
# Source and viewport
# =============================================================================


class SourceInfo(MedsModel):
    """Uploaded file the spec was extracted from."""

    file_name: str
    file_size: int | None = Field(default=None, ge=0)


class ViewportProfile(MedsModel):
    """Detected viewport of the screenshot."""

    type: Platform
    width_px: PixelsOrUnknown = UNKNOWN
    height_px: PixelsOrUnknown | None = None
    confidence: float = Field(default=0.5, ge=0.0, le=1.0)


# =============================================================================
# Foundations
# =============================================================================


class ColorSpec(MedsModel):
    """A semantic color token."""

    token: ColorToken
    hex: str = Field(pattern=HEX_PATTERN)
    usage: str | None = None


class FamilyCandidate(MedsModel):
    """A font family guess with its confidence."""

    family: str = Field(min_length=1)
    confidence: float = Field(default=0.8, ge=0.0, le=1.0)


class Typography(MedsModel):
    """Type families, size scale and weights."""

    primary_family: str = Field(default="system-ui", min_length=1)
    family_candidates: list[FamilyCandidate] = Field(default_factory=list)
    scale_px: Annotated[list[FontSize], AfterValidator(_typographic_scale)] = Field(
        default_factory=lambda: [14, 16, 18]
    )
    weights: list[FontWeight] = Field(default_factory=lambda: [400], min_length=1)
    line_heights: list[float] | None = None


class Spacing(MedsModel):
    """8px spacing system."""

    base_px: GridPx = 8
    scale_px: GridScale = Field(
        default_factory=lambda: [8, 16, 24, 32, 48, 64],
        min_length=1,
    )


class ShadowSet(MedsModel):
    """Named shadow presets. Always an object, possibly empty."""

    none: str | None = None
    sm: str | None = None
    md: str | None = None
    lg: str | None = None


class MotionDurations(MedsModel):
    """Duration buckets in milliseconds."""

    fast: MeasureOrUnknown = 150
    standard: MeasureOrUnknown = 250
    slow: MeasureOrUnknown = 400


class Motion(MedsModel):
    """Motion durations and easing curves."""

    durations_ms: MotionDurations = Field(default_factory=MotionDurations)
    easings: list[Easing] = Field(default_factory=lambda: ["ease-in-out"], min_length=1)


class Grid(MedsModel):
    """Layout grid."""

    columns: int = Field(default=12, ge=1)
    gap_px: GridPxOrUnknown = 24
    container_max_width_px: GridPxOrUnknown = UNKNOWN


class FocusRing(MedsModel):
    """Keyboard focus indicator."""

    width_px: int = Field(default=2, ge=0)
    color_token: str = "brand"


class A11y(MedsModel):
    """Accessibility foundations."""

    hit_area_px: Annotated[int, Field(ge=40), AfterValidator(_multiple_of_8)] = 48
    focus_ring: FocusRing = Field(default_factory=FocusRing)
    min_contrast: ContrastLevel = ContrastLevel.AA


class Foundations(MedsModel):
    """Design tokens."""

    color: list[ColorSpec] = Field(min_length=1)
    typography: Typography = Field(default_factory=Typography)
    spacing: Spacing = Field(default_factory=Spacing)
    radius: GridScale = Field(default_factory=lambda: [0, 8, 16])
    shadow: ShadowSet = Field(default_factory=lambda: ShadowSet(none="none"))
    motion: Motion = Field(default_factory=Motion)
    grid: Grid = Field(default_factory=Grid)
    a11y: A11y = Field(default_factory=A11y)

    def color_tokens(self) -> set[ColorToken]:
        return {c.token for c in self.color}


# =============================================================================
# Components
# =============================================================================


class StyleColors(MedsModel):
    bg: str | None = None
    text: str | None = None
    border: str | None = None
    accent: str | None = None


class StyleTypography(MedsModel):
    size_px: MeasureOrUnknown | None = None
    weight: int | None = None
    line_height: float | None = None


class StyleSpacing(MedsModel):
    padding_px: MeasureOrUnknown | None = None
    gap_px: MeasureOrUnknown | None = None


class StyleIcon(MedsModel):
    size_px: MeasureOrUnknown | None = None
    gap_px: MeasureOrUnknown | None = None


class StyleEffects(MedsModel):
    opacity: float | None = None
    scale: float | None = None
    translate_x: str | None = None
    translate_y: str | None = None


class ComponentStyle(MedsModel):
    """Visual style observed on a component."""

    colors: StyleColors | None = None
    typography: StyleTypography | None = None
    spacing: StyleSpacing | None = None
    radius_px: MeasureOrUnknown | None = None
    shadow_token: ShadowToken | None = None
    icon: StyleIcon | None = None
    effects: StyleEffects | None = None


class StyleVariant(MedsModel):
    """A named variant or interaction state of a component."""

    name: str
    style: ComponentStyle = Field(default_factory=ComponentStyle)


class Component(MedsModel):
    """A UI component detected on screen."""

    id: str | None = None
    type: ComponentType
    variants: list[StyleVariant] | None = None
    states: list[StyleVariant] | None = None
    style: ComponentStyle | None = None
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)


class Composition(MedsModel):
    """Page-level spacing and density."""

    page_padding_px: GridPxOrUnknown = 24
    section_gap_px: GridPxOrUnknown = 32
    card_inner_padding_px: GridPxOrUnknown = 16
    density: Density = Density.COMFORTABLE


class MotionPatterns(MedsModel):
    micro: list[str] | None = None
    macro: list[str] | None = None


# =============================================================================
# Integrated UX blocks
# =============================================================================


class NavigationPattern(MedsModel):
    type: Literal["hierarchical", "flat", "contextual"]
    depth: int = Field(ge=0)
    primary_actions: list[UXAction] = Field(default_factory=list)


class InteractionPattern(MedsModel):
    feedback: Literal["immediate", "delayed", "batch"]
    error_handling: Literal["inline", "toast", "modal"]
    progress_indicators: bool


class LayoutPattern(MedsModel):
    content_strategy: Literal["single-column", "multi-column", "grid"]
    responsive_breakpoints: list[int]
    density_mode: Literal["compact", "comfortable", "spacious"]


class UXPatterns(MedsModel):
    """Interaction patterns derived from UX decisions."""

    navigation: NavigationPattern
    interaction: InteractionPattern
    layout: LayoutPattern


class AccessibilityFeatures(MedsModel):
    keyboard_navigation: bool
    screen_reader_optimized: bool
    high_contrast_support: bool
    minimum_touch_targets: bool


class StatePatterns(MedsModel):
    loading: Literal["skeleton", "spinner", "progressive"]
    empty: Literal["illustration", "message", "cta"]
    error: Literal["inline", "page", "toast"]


# =============================================================================
# Root document
# =============================================================================


class MedsSpec(MedsModel):
    """
    A validated MEDS document.

    Once integrated, ``patterns``, ``accessibility`` and ``states`` are set.
    """

    version: Literal["1.1"] = "1.1"
    modality: Literal["image"] = "image"
    source: SourceInfo | None = None
    viewport_profile: ViewportProfile
    foundations: Foundations
    components: list[Component] = Field(default_factory=list)
    composition: Composition = Field(default_factory=Composition)
    motion_patterns: MotionPatterns | None = None
    scene: dict[str, Any] | None = None
    screenflow: dict[str, Any] | None = None
    ux_rulebook: dict[str, Any] | None = None
    ux_signals: dict[str, Any] | None = None
    unclear: list[str] | None = None
    patterns: UXPatterns | None = None
    accessibility: AccessibilityFeatures | None = None
    states: StatePatterns | None = None

    @property
    def platform(self) -> Platform:
        return self.viewport_profile.type

    def component_types(self) -> set[ComponentType]:
        return {c.type for c in self.components}

    def has_component(self, *types: ComponentType) -> bool:
        """Check whether any component has one of the given types."""
        present = self.component_types()
        return any(t in present for t in types)

    def to_json_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase wire format."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
