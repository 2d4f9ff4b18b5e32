"""
UX rulebook, context and decision types.

A rulebook is a static, versioned document holding one policy per platform.
Each policy lists rules; each rule carries a default action and an ordered
list of guards that may override it for a given :class:`UXContext`.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .enums import (
    ContentType,
    EmptyStateKind,
    Platform,
    PolicyPlatform,
    UXAction,
    UXEvent,
    UXFamily,
    UXPriority,
)


class UXModel(BaseModel):
    """Base for rulebook models: frozen, camelCase on the wire."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# =============================================================================
# Rulebook
# =============================================================================


class GuardThen(UXModel):
    """Overrides applied when a guard matches."""

    action: UXAction | None = None
    priority: UXPriority | None = None
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)
    meta: dict[str, Any] | None = None
    style: dict[str, Any] | None = None
    placement: dict[str, Any] | None = None


class Guard(UXModel):
    """
    A conditional override.

    ``when`` maps context keys to expected values. Expected values may be
    scalars (equality), lists (membership) or ``">N"`` / ``">=N"`` strings
    (numeric comparison).
    """

    when: dict[str, Any] = Field(default_factory=dict)
    then: GuardThen = Field(default_factory=GuardThen)


class UXRule(UXModel):
    """A single UX behavior rule."""

    id: str = Field(min_length=1)
    family: UXFamily
    event: UXEvent
    action: UXAction
    selector: dict[str, Any] | None = None
    alternatives: list[UXAction] = Field(default_factory=list)
    priority: UXPriority | None = None
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)
    origin: str | None = None
    rationale: list[str] = Field(default_factory=list)
    meta: dict[str, Any] = Field(default_factory=dict)
    guards: list[Guard] = Field(default_factory=list)


class UXPolicy(UXModel):
    """Rules scoped to one platform."""

    policy_id: str = Field(min_length=1)
    platform: PolicyPlatform
    rules: list[UXRule] = Field(default_factory=list)
    defaults: dict[str, Any] | None = None


class RulebookEvaluation(UXModel):
    """Declared evaluation semantics of a rulebook."""

    order: str = "first-match-wins"
    fallback: str = "rule-default"


class UXRulebook(UXModel):
    """Root of the rulebook document."""

    version: str
    evaluation: RulebookEvaluation = Field(default_factory=RulebookEvaluation)
    policies: list[UXPolicy] = Field(default_factory=list)

    def policy_for(self, platform: PolicyPlatform | str) -> UXPolicy | None:
        """Return the first policy scoped to ``platform``."""
        for policy in self.policies:
            if policy.platform == platform:
                return policy
        return None


# =============================================================================
# Context
# =============================================================================


class UXContext(UXModel):
    """
    Heuristic features of a spec consumed by rule guards.

    Guard keys refer to the camelCase names. Extra keys are kept so that
    configured overrides can introduce additional signals.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    # Content & task
    needs_sharable_url: bool = Field(default=False, alias="needsSharableURL")
    keep_context: bool = False
    task_length_screens: int = 1
    content_width_narrow: bool = False
    form_fields: int = 0
    content_type: ContentType = ContentType.SINGLE

    # Interaction
    is_destructive: bool = False
    blocking: bool = False
    global_error: bool = False
    reversible: bool = True
    progress_known: bool = False

    # UI
    has_fab_on_screen: bool = False
    device_has_touch: bool = False
    empty_state: EmptyStateKind | None = None
    field_errors: bool = False

    # Platform
    platform: Platform = Platform.DESKTOP

    def as_signals(self) -> dict[str, Any]:
        """Flatten to the camelCase mapping guards are matched against."""
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# Decisions
# =============================================================================


class UXDecision(UXModel):
    """Outcome of one rule for one evaluation."""

    rule_id: str
    family: UXFamily
    event: UXEvent
    action: UXAction
    priority: UXPriority
    confidence: float
    matched_guard_index: int = -1
    meta: dict[str, Any] = Field(default_factory=dict)


class PolicyMeta(UXModel):
    """Identifies the policy an evaluation used."""

    policy_id: str
    version: str
    platform: PolicyPlatform | None = None


class UXEvaluation(UXModel):
    """All decisions of one evaluation."""

    decisions: list[UXDecision] = Field(default_factory=list)
    policy_meta: PolicyMeta

    def decisions_for(self, family: UXFamily) -> list[UXDecision]:
        return [d for d in self.decisions if d.family == family]

    def has_action(self, *actions: UXAction) -> bool:
        return any(d.action in actions for d in self.decisions)
