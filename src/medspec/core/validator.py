"""
MEDS validation and default injection.

Validates a normalized document against :class:`~medspec.core.ir.MedsSpec`.
The model declares every closed vocabulary, numeric constraint and default,
so a single validation pass both rejects irreparable structures and fills
the remaining defaults. Unknown keys are dropped.

Failures are returned, not raised: callers get every violated constraint
with its path so they can log it or build a repair prompt from it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from .errors import Violation
from .ir.meds import MedsSpec

logger = logging.getLogger(__name__)

# Union member tags pydantic appends to error locations
_TYPE_TAGS = frozenset({"int", "float", "str", "bool"})


@dataclass
class SpecValidationResult:
    """Outcome of :func:`validate_and_fill`.

    Exactly one of ``spec`` and ``errors`` is populated.
    """

    spec: MedsSpec | None = None
    errors: list[Violation] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.spec is not None and not self.errors

    def __repr__(self) -> str:
        return f"SpecValidationResult(ok={self.ok}, errors={len(self.errors)})"


def format_location(loc: tuple[int | str, ...]) -> str:
    """Render a pydantic error location as a dotted path.

    ``("foundations", "color", 2, "token")`` becomes
    ``foundations.color[2].token``.
    """
    path = ""
    for segment in loc:
        if isinstance(segment, int):
            path += f"[{segment}]"
            continue
        if segment in _TYPE_TAGS or "[" in segment or "(" in segment:
            continue
        path += f".{segment}" if path else segment
    return path


def _violations(error: ValidationError) -> list[Violation]:
    seen: set[Violation] = set()
    violations = []
    for detail in error.errors(include_url=False):
        violation = Violation(path=format_location(detail["loc"]), message=detail["msg"])
        if violation not in seen:
            seen.add(violation)
            violations.append(violation)
    return violations


def validate_and_fill(normalized: Any) -> SpecValidationResult:
    """Validate a normalized MEDS document and inject defaults.

    Args:
        normalized: Output of :func:`medspec.core.normalize.normalize`.

    Returns:
        SpecValidationResult with the completed spec, or every violation.
    """
    if not isinstance(normalized, dict):
        return SpecValidationResult(errors=[Violation(path="", message="must be a JSON object")])

    try:
        spec = MedsSpec.model_validate(normalized)
    except ValidationError as e:
        violations = _violations(e)
        logger.debug(f"MEDS validation failed with {len(violations)} violation(s)")
        return SpecValidationResult(errors=violations)

    return SpecValidationResult(spec=spec)


def medsspec_json_schema() -> dict[str, Any]:
    """JSON schema of the MEDS wire format, suitable as a model response schema."""
    return MedsSpec.model_json_schema(by_alias=True)
