"""
UX rule evaluation.

Evaluates a rulebook policy against a :class:`UXContext` with
first-match-wins guard semantics. Every rule yields exactly one decision;
rules are independent of each other, and identical inputs always produce
identical decisions.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any

from .ir.enums import PolicyPlatform, UXPriority
from .ir.ux import Guard, PolicyMeta, UXContext, UXDecision, UXEvaluation, UXRule, UXRulebook

logger = logging.getLogger(__name__)

NO_POLICY_ID = "none"
DEFAULT_PRIORITY = UXPriority.MEDIUM
DEFAULT_CONFIDENCE = 1.0

COMPARATOR_PATTERN = re.compile(r"^(>=?)(\d+)$")


def _as_number(value: Any) -> float | None:
    """Numeric view of a context value, or None when it is not a number."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return None if math.isnan(number) else number


def _equals(expected: Any, actual: Any) -> bool:
    # Booleans only ever equal booleans
    if isinstance(expected, bool) or isinstance(actual, bool):
        return isinstance(expected, bool) and isinstance(actual, bool) and expected is actual
    return expected == actual


def _matches(expected: Any, actual: Any) -> bool:
    if isinstance(expected, str):
        comparator = COMPARATOR_PATTERN.match(expected)
        if comparator:
            number = _as_number(actual)
            if number is None:
                return False
            threshold = int(comparator.group(2))
            if comparator.group(1) == ">=":
                return number >= threshold
            return number > threshold

    if isinstance(expected, list):
        return any(_equals(candidate, actual) for candidate in expected)

    return _equals(expected, actual)


def match_guard(when: dict[str, Any], context: UXContext | dict[str, Any]) -> bool:
    """Check whether every predicate in ``when`` holds for ``context``.

    Predicates are exact equality for scalars, membership for lists and
    numeric comparison for ``">N"`` / ``">=N"`` strings. A missing or
    non-numeric context value never satisfies a comparator.
    """
    signals = context.as_signals() if isinstance(context, UXContext) else context
    return all(_matches(expected, signals.get(key)) for key, expected in when.items())


def _first_matching_guard(
    guards: list[Guard], signals: dict[str, Any]
) -> tuple[int, Guard | None]:
    for index, guard in enumerate(guards):
        if match_guard(guard.when, signals):
            return index, guard
    return -1, None


def evaluate_rule(rule: UXRule, context: UXContext | dict[str, Any]) -> UXDecision:
    """Resolve one rule against the context."""
    signals = context.as_signals() if isinstance(context, UXContext) else context
    index, guard = _first_matching_guard(rule.guards, signals)
    then = guard.then if guard else None

    action = (then.action if then else None) or rule.action
    priority = (then.priority if then else None) or rule.priority or DEFAULT_PRIORITY

    if then is not None and then.confidence is not None:
        confidence = then.confidence
    elif rule.confidence is not None:
        confidence = rule.confidence
    else:
        confidence = DEFAULT_CONFIDENCE

    meta: dict[str, Any] = dict(rule.meta)
    if then is not None:
        meta.update(then.meta or {})
        if then.style is not None:
            meta["style"] = then.style
        if then.placement is not None:
            meta["placement"] = then.placement

    return UXDecision(
        rule_id=rule.id,
        family=rule.family,
        event=rule.event,
        action=action,
        priority=priority,
        confidence=confidence,
        matched_guard_index=index,
        meta=meta,
    )


def evaluate(
    rulebook: UXRulebook,
    context: UXContext,
    platform: PolicyPlatform | str,
) -> UXEvaluation:
    """Evaluate the rulebook policy for ``platform``.

    Args:
        rulebook: Loaded rulebook.
        context: Derived UX context.
        platform: ``desktop`` or ``mobile``.

    Returns:
        One decision per policy rule, in rule order. When the rulebook has no
        policy for the platform, no decisions and policy id ``"none"``.
    """
    policy = rulebook.policy_for(platform)
    if policy is None:
        logger.debug(f"No '{platform}' policy in rulebook {rulebook.version}")
        return UXEvaluation(
            decisions=[],
            policy_meta=PolicyMeta(policy_id=NO_POLICY_ID, version=rulebook.version),
        )

    signals = context.as_signals()
    decisions = [evaluate_rule(rule, signals) for rule in policy.rules]

    logger.debug(
        f"Policy {policy.policy_id}: {len(decisions)} decision(s), "
        f"{sum(1 for d in decisions if d.matched_guard_index >= 0)} guarded"
    )
    return UXEvaluation(
        decisions=decisions,
        policy_meta=PolicyMeta(
            policy_id=policy.policy_id,
            version=rulebook.version,
            platform=policy.platform,
        ),
    )
