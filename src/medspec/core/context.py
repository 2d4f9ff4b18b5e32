"""
UX context derivation.

Projects a validated spec onto the small feature set that rulebook guards
test against. The projection is heuristic, total and read-only: it looks
only at component types, component ids, the platform and the density.

Some signals (``isDestructive``, ``blocking``, ``progressKnown``,
``hasFabOnScreen``, ``emptyState``) are fixed conservative values; a
screenshot alone does not reveal them. Callers that know better can pass
overrides.
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from .errors import ConfigError
from .ir.enums import ComponentType, ContentType, Platform
from .ir.meds import MedsSpec
from .ir.ux import UXContext

_SIDEBAR_TYPES = (ComponentType.SIDEBAR, ComponentType.DRAWER)
_TOP_NAV_TYPES = (ComponentType.APP_BAR, ComponentType.TOP_NAV)
_MODAL_TYPES = (ComponentType.MODAL, ComponentType.DIALOG)
_TEXT_INPUT_TYPES = (ComponentType.TEXT_FIELD, ComponentType.TEXT_AREA)
_BUTTON_TYPES = (ComponentType.BUTTON, ComponentType.ICON_BUTTON)
_LIST_TYPES = (ComponentType.LIST_ITEM, ComponentType.CARD)

FORM_FIELD_TYPES = frozenset(
    {
        ComponentType.TEXT_FIELD,
        ComponentType.TEXT_AREA,
        ComponentType.SELECT,
        ComponentType.CHECKBOX,
        ComponentType.RADIO_GROUP,
    }
)

DESTRUCTIVE_ID_MARKERS = ("delete", "remove")


def _ids(spec: MedsSpec) -> list[str]:
    return [c.id.lower() for c in spec.components if c.id]


def derive_context(spec: MedsSpec) -> UXContext:
    """Derive the UX context of a validated spec."""
    platform = spec.platform

    has_sidebar = spec.has_component(*_SIDEBAR_TYPES)
    has_top_nav = spec.has_component(*_TOP_NAV_TYPES)
    has_table = spec.has_component(ComponentType.TABLE)
    has_list = spec.has_component(*_LIST_TYPES)
    has_list_items = spec.has_component(ComponentType.LIST_ITEM)
    has_modal = spec.has_component(*_MODAL_TYPES)
    has_text_input = spec.has_component(*_TEXT_INPUT_TYPES)
    has_button = spec.has_component(*_BUTTON_TYPES)

    if has_table:
        content_type = ContentType.TABLE
    elif has_list:
        content_type = ContentType.LIST
    else:
        content_type = ContentType.SINGLE

    form_fields = sum(1 for c in spec.components if c.type in FORM_FIELD_TYPES)

    if has_modal:
        task_length = 1
    elif has_sidebar:
        task_length = 3
    else:
        task_length = 1

    reversible = not any(
        marker in component_id
        for component_id in _ids(spec)
        for marker in DESTRUCTIVE_ID_MARKERS
    )

    return UXContext(
        needs_sharable_url=not has_modal and (has_table or has_list_items),
        keep_context=has_sidebar or has_top_nav,
        task_length_screens=task_length,
        content_width_narrow=has_sidebar or platform == Platform.MOBILE,
        form_fields=form_fields,
        content_type=content_type,
        is_destructive=False,
        blocking=False,
        global_error=has_button and not has_text_input,
        reversible=reversible,
        progress_known=False,
        has_fab_on_screen=False,
        device_has_touch=platform == Platform.MOBILE,
        empty_state=None,
        field_errors=has_text_input and form_fields > 2,
        platform=platform,
    )


def derive_context_with_overrides(
    spec: MedsSpec,
    overrides: dict[str, Any] | None = None,
) -> UXContext:
    """Derive the context, then replace signals with caller-supplied values.

    Override keys use the camelCase guard names (``isDestructive``); unknown
    keys are kept as extra signals.

    Raises:
        ConfigError: If an override value does not fit its signal.
    """
    base = derive_context(spec)
    if not overrides:
        return base
    errors = override_errors(overrides)
    if errors:
        raise ConfigError(f"Invalid context overrides: {'; '.join(errors)}")
    return UXContext.model_validate({**base.as_signals(), **overrides})


def override_errors(overrides: dict[str, Any]) -> list[str]:
    """Describe override values that do not fit the type of their signal."""
    try:
        UXContext.model_validate(overrides)
    except ValidationError as e:
        return [
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in e.errors()
        ]
    return []


def analyze_component_patterns(spec: MedsSpec) -> dict[str, Any]:
    """Detect feature patterns from component types and ids."""
    ids = _ids(spec)

    def id_mentions(*words: str) -> bool:
        return any(word in component_id for component_id in ids for word in words)

    return {
        "hasDataVisualization": spec.has_component(ComponentType.TABLE) or id_mentions("chart"),
        "hasAuthentication": any(
            c.type == ComponentType.TEXT_FIELD
            and c.id is not None
            and ("password" in c.id.lower() or "email" in c.id.lower())
            for c in spec.components
        ),
        "hasSearch": id_mentions("search"),
        "hasFiltering": spec.has_component(ComponentType.SELECT, ComponentType.CHECKBOX)
        or id_mentions("filter"),
        "hasPagination": id_mentions("pagination"),
        "hasSort": id_mentions("sort"),
        "navigationDepth": sum(
            1
            for c in spec.components
            if c.type in (ComponentType.SIDEBAR, ComponentType.TOP_NAV, ComponentType.TABS)
        ),
    }


def infer_user_intent_categories(spec: MedsSpec) -> list[str]:
    """Infer what the user is trying to do on this screen."""
    patterns = analyze_component_patterns(spec)
    intents = []

    if patterns["hasAuthentication"]:
        intents.append("authentication")
    if patterns["hasDataVisualization"]:
        intents.append("data-analysis")
    if patterns["hasSearch"] or patterns["hasFiltering"]:
        intents.append("content-discovery")
    if patterns["navigationDepth"] > 1:
        intents.append("multi-section-navigation")
    if spec.has_component(ComponentType.TEXT_FIELD):
        intents.append("data-entry")

    return intents
