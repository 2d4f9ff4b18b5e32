"""
Intermediate representation for medspec.

- enums: closed vocabularies (color tokens, component types, UX actions)
- meds: the MEDS design specification
- ux: rulebook, context and decision types
"""

from .enums import (
    ColorToken,
    ComponentType,
    ContentType,
    ContrastLevel,
    Density,
    EmptyStateKind,
    Platform,
    PolicyPlatform,
    ShadowToken,
    UXAction,
    UXEvent,
    UXFamily,
    UXPriority,
)
from .meds import (
    EASING_PATTERN,
    HEX_PATTERN,
    UNKNOWN,
    A11y,
    AccessibilityFeatures,
    ColorSpec,
    Component,
    ComponentStyle,
    Composition,
    FamilyCandidate,
    FocusRing,
    Foundations,
    Grid,
    InteractionPattern,
    LayoutPattern,
    MedsSpec,
    Motion,
    MotionDurations,
    MotionPatterns,
    NavigationPattern,
    ShadowSet,
    SourceInfo,
    Spacing,
    StatePatterns,
    StyleVariant,
    Typography,
    UXPatterns,
    ViewportProfile,
)
from .ux import (
    Guard,
    GuardThen,
    PolicyMeta,
    RulebookEvaluation,
    UXContext,
    UXDecision,
    UXEvaluation,
    UXPolicy,
    UXRule,
    UXRulebook,
)

__all__ = [
    # enums
    "ColorToken",
    "ComponentType",
    "ContentType",
    "ContrastLevel",
    "Density",
    "EmptyStateKind",
    "Platform",
    "PolicyPlatform",
    "ShadowToken",
    "UXAction",
    "UXEvent",
    "UXFamily",
    "UXPriority",
    # meds
    "EASING_PATTERN",
    "HEX_PATTERN",
    "UNKNOWN",
    "A11y",
    "AccessibilityFeatures",
    "ColorSpec",
    "Component",
    "ComponentStyle",
    "Composition",
    "FamilyCandidate",
    "FocusRing",
    "Foundations",
    "Grid",
    "InteractionPattern",
    "LayoutPattern",
    "MedsSpec",
    "Motion",
    "MotionDurations",
    "MotionPatterns",
    "NavigationPattern",
    "ShadowSet",
    "SourceInfo",
    "Spacing",
    "StatePatterns",
    "StyleVariant",
    "Typography",
    "UXPatterns",
    "ViewportProfile",
    # ux
    "Guard",
    "GuardThen",
    "PolicyMeta",
    "RulebookEvaluation",
    "UXContext",
    "UXDecision",
    "UXEvaluation",
    "UXPolicy",
    "UXRule",
    "UXRulebook",
]
