"""
UX integration.

Folds UX decisions back into a validated spec: synthesizes components the
decisions call for, backfills semantic color tokens, adjusts composition
spacing, and attaches derived ``patterns``, ``accessibility`` and ``states``
blocks. Integration is additive; it never removes or overwrites existing
components or tokens, and re-integrating an integrated spec adds nothing.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from .ir.enums import (
    ColorToken,
    ComponentType,
    Density,
    Platform,
    PolicyPlatform,
    UXAction,
    UXFamily,
)
from .ir.meds import (
    UNKNOWN,
    AccessibilityFeatures,
    ColorSpec,
    Component,
    Composition,
    Foundations,
    InteractionPattern,
    LayoutPattern,
    MedsSpec,
    NavigationPattern,
    StatePatterns,
    UXPatterns,
)
from .ir.ux import UXDecision, UXEvaluation

logger = logging.getLogger(__name__)

SYNTHESIZED_ID_PREFIX = "ux-"

# Component type that realizes each action on screen
ACTION_COMPONENTS: Mapping[UXAction, ComponentType] = {
    UXAction.TOAST: ComponentType.ALERT,
    UXAction.MODAL: ComponentType.MODAL,
    UXAction.DRAWER: ComponentType.DRAWER,
    UXAction.SKELETON: ComponentType.CARD,
    UXAction.PROGRESS: ComponentType.BADGE,
    UXAction.PROGRESSBAR: ComponentType.BADGE,
    UXAction.MENU: ComponentType.LIST_ITEM,
}

# Higher sorts first; unlisted types rank 1
COMPONENT_PRIORITY: Mapping[ComponentType, int] = {
    ComponentType.APP_BAR: 10,
    ComponentType.TOP_NAV: 10,
    ComponentType.SIDEBAR: 9,
    ComponentType.MODAL: 8,
    ComponentType.DIALOG: 8,
    ComponentType.BUTTON: 7,
    ComponentType.TEXT_FIELD: 6,
    ComponentType.CARD: 5,
    ComponentType.LIST_ITEM: 4,
    ComponentType.TABLE: 4,
    ComponentType.ALERT: 3,
    ComponentType.BADGE: 2,
}
DEFAULT_COMPONENT_PRIORITY = 1

DESKTOP_COLOR_BACKFILL: tuple[ColorSpec, ...] = (
    ColorSpec(
        token=ColorToken.ACCENT,
        hex="#6366f1",
        usage="Interactive element hover and focus states",
    ),
    ColorSpec(
        token=ColorToken.SURFACE,
        hex="#f8fafc",
        usage="Card backgrounds and elevated surfaces",
    ),
)

STATE_COLORS: tuple[ColorSpec, ...] = (
    ColorSpec(
        token=ColorToken.WARNING,
        hex="#f59e0b",
        usage="Warning states and cautionary actions",
    ),
    ColorSpec(
        token=ColorToken.OVERLAY,
        hex="#00000080",
        usage="Modal and drawer overlays",
    ),
)

# Floors applied when a decision requires minimum target sizes
TARGET_SECTION_GAP_FLOOR_PX = 32
TARGET_PAGE_PADDING_FLOOR_PX = 24
_SECTION_GAP_FALLBACK_PX = 24
_PAGE_PADDING_FALLBACK_PX = 16

RESPONSIVE_BREAKPOINTS = [768, 1024, 1280]
SCREEN_READER_COMPONENT_THRESHOLD = 5

_COMPLEX_INTERACTION_FAMILIES = (UXFamily.EDIT, UXFamily.CONFIRM)


# =============================================================================
# Components
# =============================================================================


def component_for_decision(decision: UXDecision) -> Component | None:
    """Build the component a decision calls for, if its action has one."""
    component_type = ACTION_COMPONENTS.get(decision.action)
    if component_type is None:
        return None
    return Component(
        id=f"{SYNTHESIZED_ID_PREFIX}{decision.rule_id}",
        type=component_type,
        confidence=decision.confidence,
    )


def _priority(component: Component) -> int:
    return COMPONENT_PRIORITY.get(component.type, DEFAULT_COMPONENT_PRIORITY)


def _integrate_components(
    components: list[Component], decisions: list[UXDecision]
) -> list[Component]:
    merged = list(components)
    present = {c.type for c in merged}
    for decision in decisions:
        component = component_for_decision(decision)
        if component is not None and component.type not in present:
            merged.append(component)
            present.add(component.type)
            logger.debug(f"Synthesized {component.type} '{component.id}'")
    # sorted() is stable, so equal priorities keep input order
    return sorted(merged, key=_priority, reverse=True)


# =============================================================================
# Foundations and composition
# =============================================================================


def _integrate_colors(foundations: Foundations, evaluation: UXEvaluation) -> Foundations:
    colors = list(foundations.color)
    present = {c.token for c in colors}

    additions: list[ColorSpec] = []
    if evaluation.policy_meta.platform == PolicyPlatform.DESKTOP:
        additions.extend(DESKTOP_COLOR_BACKFILL)
    additions.extend(STATE_COLORS)

    for color in additions:
        if color.token not in present:
            colors.append(color)
            present.add(color.token)

    return foundations.model_copy(update={"color": colors})


def _raise_to_floor(value: int | str, fallback: int, floor: int) -> int:
    current = fallback if value == UNKNOWN else int(value)
    return max(current, floor)


def _integrate_composition(composition: Composition, decisions: list[UXDecision]) -> Composition:
    update: dict[str, object] = {}

    complex_interactions = any(d.family in _COMPLEX_INTERACTION_FAMILIES for d in decisions)
    if complex_interactions and composition.density == Density.COMPACT:
        update["density"] = Density.COMFORTABLE

    if any(d.action == UXAction.ENSURE_TARGET_SIZE for d in decisions):
        update["section_gap_px"] = _raise_to_floor(
            composition.section_gap_px, _SECTION_GAP_FALLBACK_PX, TARGET_SECTION_GAP_FLOOR_PX
        )
        update["page_padding_px"] = _raise_to_floor(
            composition.page_padding_px, _PAGE_PADDING_FALLBACK_PX, TARGET_PAGE_PADDING_FLOOR_PX
        )

    return composition.model_copy(update=update) if update else composition


# =============================================================================
# Derived blocks
# =============================================================================


def derive_patterns(
    decisions: list[UXDecision], spec: MedsSpec, composition: Composition
) -> UXPatterns:
    """Classify navigation, interaction and layout patterns."""
    navigation = [d for d in decisions if d.family == UXFamily.NAVIGATION]
    actions = {d.action for d in decisions}

    if any(d.action == UXAction.ROUTE for d in navigation):
        nav_type = "hierarchical"
    elif any(d.action == UXAction.MODAL for d in navigation):
        nav_type = "contextual"
    else:
        nav_type = "flat"

    return UXPatterns(
        navigation=NavigationPattern(
            type=nav_type,
            depth=len(navigation),
            primary_actions=[d.action for d in navigation],
        ),
        interaction=InteractionPattern(
            feedback="immediate" if UXAction.TOAST in actions else "delayed",
            error_handling="inline" if UXAction.INLINE_ERRORS in actions else "toast",
            progress_indicators=bool(actions & {UXAction.PROGRESS, UXAction.PROGRESSBAR}),
        ),
        layout=LayoutPattern(
            content_strategy="single-column" if spec.platform == Platform.MOBILE else "multi-column",
            responsive_breakpoints=list(RESPONSIVE_BREAKPOINTS),
            density_mode=composition.density.value,
        ),
    )


def derive_accessibility(decisions: list[UXDecision], spec: MedsSpec) -> AccessibilityFeatures:
    """Derive accessibility flags from Target-family decisions.

    Components these decisions synthesize are left out of the screen-reader
    count, so an integrated spec re-integrates to the same flags.
    """
    synthesized = {
        (c.id, c.type) for c in (component_for_decision(d) for d in decisions) if c is not None
    }
    detected = [c for c in spec.components if (c.id, c.type) not in synthesized]
    return AccessibilityFeatures(
        keyboard_navigation=True,
        screen_reader_optimized=len(detected) > SCREEN_READER_COMPONENT_THRESHOLD,
        high_contrast_support=True,
        minimum_touch_targets=any(
            d.family == UXFamily.TARGET and d.action == UXAction.ENSURE_TARGET_SIZE
            for d in decisions
        ),
    )


def derive_states(decisions: list[UXDecision]) -> StatePatterns:
    """Choose loading, empty and error presentations."""
    actions = {d.action for d in decisions}
    return StatePatterns(
        loading="skeleton" if UXAction.SKELETON in actions else "spinner",
        empty="illustration" if UXAction.EMPTY_STATE in actions else "message",
        error="inline" if UXAction.INLINE_ERRORS in actions else "toast",
    )


# =============================================================================
# Entry point
# =============================================================================


def integrate(spec: MedsSpec, evaluation: UXEvaluation) -> MedsSpec:
    """Fold UX decisions into a validated spec.

    Args:
        spec: Validated spec.
        evaluation: Output of :func:`medspec.core.evaluator.evaluate`.

    Returns:
        A new spec; ``spec`` is left untouched.
    """
    decisions = evaluation.decisions
    composition = _integrate_composition(spec.composition, decisions)

    return spec.model_copy(
        update={
            "components": _integrate_components(spec.components, decisions),
            "foundations": _integrate_colors(spec.foundations, evaluation),
            "composition": composition,
            "patterns": derive_patterns(decisions, spec, composition),
            "accessibility": derive_accessibility(decisions, spec),
            "states": derive_states(decisions),
        }
    )
