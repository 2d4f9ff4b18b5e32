"""
The MEDS processing pipeline.

Stages run strictly in order:

1. normalize        repair raw model output
2. validate_and_fill  enforce the schema and inject defaults
3. derive_context   compute UX signals from the spec
4. evaluate         pick the platform policy and decide every rule
5. integrate        fold decisions back into the spec

A validation failure halts the pipeline after stage 2; no later stage
ever sees an invalid spec.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from .config import MedspecConfig
from .context import derive_context_with_overrides
from .errors import Violation
from .evaluator import evaluate
from .integrator import integrate
from .ir.enums import Platform, PolicyPlatform
from .ir.meds import MedsSpec, SourceInfo
from .ir.ux import UXContext, UXEvaluation, UXRulebook
from .normalize import normalize
from .rulebook_loader import get_default_rulebook, load_rulebook
from .validator import validate_and_fill

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Outcome of :func:`run_pipeline`.

    On success ``spec`` is the integrated spec and ``context``/``evaluation``
    hold the intermediate results. On failure only ``errors`` is set.
    """

    ok: bool
    spec: MedsSpec | None = None
    errors: list[Violation] = field(default_factory=list)
    context: UXContext | None = None
    evaluation: UXEvaluation | None = None

    def to_dict(self) -> dict[str, Any]:
        if not self.ok or self.spec is None:
            return {"ok": False, "errors": [e.to_dict() for e in self.errors]}
        result: dict[str, Any] = {"ok": True, "spec": self.spec.to_json_dict()}
        if self.evaluation is not None:
            result["policyMeta"] = self.evaluation.policy_meta.model_dump(
                mode="json", by_alias=True, exclude_none=True
            )
        return result


def policy_platform(
    viewport_type: Platform | str,
    config: MedspecConfig | None = None,
) -> PolicyPlatform:
    """Map a viewport type onto the policy platform that governs it.

    Tablets have no policy of their own; they use ``tablet_platform`` from
    the configuration, mobile unless configured otherwise.
    """
    if viewport_type == Platform.DESKTOP:
        return PolicyPlatform.DESKTOP
    if viewport_type == Platform.TABLET:
        tablet = config.pipeline.tablet_platform if config else PolicyPlatform.MOBILE
        return PolicyPlatform(tablet)
    return PolicyPlatform.MOBILE


def _resolve_rulebook(rulebook: UXRulebook | None, config: MedspecConfig) -> UXRulebook:
    if rulebook is not None:
        return rulebook
    if config.pipeline.rulebook is not None:
        return load_rulebook(config.pipeline.rulebook)
    return get_default_rulebook()


def run_pipeline(
    raw: Any,
    rulebook: UXRulebook | None = None,
    *,
    config: MedspecConfig | None = None,
    source: SourceInfo | None = None,
) -> PipelineResult:
    """Run raw model output through all five stages.

    Args:
        raw: Parsed model output (see :func:`medspec.core.model_output.parse_model_output`).
        rulebook: Rulebook to evaluate. Defaults to the configured rulebook,
            then the packaged one.
        config: Pipeline configuration; defaults apply when omitted.
        source: Upload metadata recorded on the spec when it carries none.

    Returns:
        PipelineResult with the integrated spec, or the validation errors.

    Raises:
        RulebookError: If a configured rulebook cannot be loaded.
    """
    config = config or MedspecConfig()
    book = _resolve_rulebook(rulebook, config)

    normalized = normalize(raw)
    logger.debug(f"Normalized spec: {len(normalized.get('components', []))} component(s)")

    validation = validate_and_fill(normalized)
    if not validation.ok or validation.spec is None:
        logger.debug(f"Pipeline halted with {len(validation.errors)} violation(s)")
        return PipelineResult(ok=False, errors=validation.errors)

    spec = validation.spec
    if source is not None and spec.source is None:
        spec = spec.model_copy(update={"source": source})

    context = derive_context_with_overrides(spec, config.context.overrides)
    logger.debug(f"Derived context: {context.as_signals()}")

    platform = policy_platform(spec.platform, config)
    evaluation = evaluate(book, context, platform)
    logger.debug(
        f"Evaluated policy {evaluation.policy_meta.policy_id} for {platform}: "
        f"{len(evaluation.decisions)} decision(s)"
    )

    integrated = integrate(spec, evaluation)
    logger.debug(f"Integrated spec: {len(integrated.components)} component(s)")

    return PipelineResult(ok=True, spec=integrated, context=context, evaluation=evaluation)
