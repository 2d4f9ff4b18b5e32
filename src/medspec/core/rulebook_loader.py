"""
UX rulebook loading and linting.

The rulebook is a static JSON (or YAML) document. The packaged default
lives next to this module in ``data/ux_rule.json`` and is loaded once per
process. A missing or malformed rulebook is a configuration error and
raises :class:`~medspec.core.errors.RulebookError`.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .errors import RulebookError, make_rulebook_error
from .evaluator import COMPARATOR_PATTERN
from .ir.ux import UXContext, UXRulebook
from .validator import format_location

logger = logging.getLogger(__name__)

RULEBOOK_FILE = "ux_rule.json"


def get_default_rulebook_path() -> Path:
    """Path of the rulebook shipped with the package."""
    return Path(__file__).parent / "data" / RULEBOOK_FILE


# =============================================================================
# Loading
# =============================================================================


def _read_document(path: Path) -> Any:
    content = path.read_text(encoding="utf-8")
    if path.suffix.lower() in (".yaml", ".yml"):
        return yaml.safe_load(content)
    return json.loads(content)


def parse_rulebook(data: Any, source: Path | None = None) -> UXRulebook:
    """Build a rulebook from an already-parsed document.

    Raises:
        RulebookError: If the document does not match the rulebook schema.
    """
    if not isinstance(data, dict):
        raise make_rulebook_error("Rulebook must be a JSON object", source)
    try:
        return UXRulebook.model_validate(data)
    except ValidationError as e:
        first = e.errors(include_url=False)[0]
        raise make_rulebook_error(
            f"Invalid rulebook: {first['msg']} ({e.error_count()} error(s))",
            source,
            format_location(first["loc"]),
        ) from e


def load_rulebook(path: Path) -> UXRulebook:
    """Load a rulebook from a JSON or YAML file.

    Args:
        path: Rulebook document. ``.yaml``/``.yml`` files are read as YAML,
            everything else as JSON.

    Returns:
        UXRulebook instance.

    Raises:
        RulebookError: If the file is missing, unparsable or invalid.
    """
    if not path.exists():
        raise RulebookError(f"Rulebook not found: {path}")

    try:
        data = _read_document(path)
    except json.JSONDecodeError as e:
        raise make_rulebook_error(f"Invalid JSON: {e}", path) from e
    except yaml.YAMLError as e:
        raise make_rulebook_error(f"Invalid YAML: {e}", path) from e

    rulebook = parse_rulebook(data, path)
    logger.debug(
        f"Loaded rulebook {rulebook.version} from {path} "
        f"({len(rulebook.policies)} policies)"
    )
    return rulebook


@lru_cache(maxsize=1)
def get_default_rulebook() -> UXRulebook:
    """The packaged rulebook, loaded once per process."""
    return load_rulebook(get_default_rulebook_path())


# =============================================================================
# Validation
# =============================================================================


class RulebookValidationResult:
    """Result of rulebook linting."""

    def __init__(self) -> None:
        self.errors: list[str] = []
        self.warnings: list[str] = []

    def add_error(self, message: str) -> None:
        self.errors.append(message)

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def __repr__(self) -> str:
        return f"RulebookValidationResult(errors={len(self.errors)}, warnings={len(self.warnings)})"


def _context_keys() -> set[str]:
    return {field.alias or name for name, field in UXContext.model_fields.items()}


def validate_rulebook(rulebook: UXRulebook) -> RulebookValidationResult:
    """Lint a rulebook for semantic problems the schema cannot express.

    Args:
        rulebook: Rulebook to check.

    Returns:
        RulebookValidationResult with errors and warnings.
    """
    result = RulebookValidationResult()
    known_keys = _context_keys()

    seen_platforms: set[str] = set()
    for p, policy in enumerate(rulebook.policies):
        if policy.platform in seen_platforms:
            result.add_error(
                f"policies[{p}]: second '{policy.platform}' policy "
                f"'{policy.policy_id}' is never selected"
            )
        seen_platforms.add(policy.platform)

        if not policy.rules:
            result.add_warning(f"policies[{p}] '{policy.policy_id}' has no rules")

        seen_ids: set[str] = set()
        for r, rule in enumerate(policy.rules):
            where = f"policies[{p}].rules[{r}]"
            if rule.id in seen_ids:
                result.add_error(f"{where}: duplicate rule id '{rule.id}'")
            seen_ids.add(rule.id)

            for g, guard in enumerate(rule.guards):
                if not guard.when:
                    result.add_warning(
                        f"{where}.guards[{g}]: empty 'when' always matches; "
                        "later guards are unreachable"
                    )
                for key, expected in guard.when.items():
                    if key not in known_keys:
                        result.add_warning(
                            f"{where}.guards[{g}]: '{key}' is not a derived context signal"
                        )
                    if (
                        isinstance(expected, str)
                        and expected.startswith(">")
                        and not COMPARATOR_PATTERN.match(expected)
                    ):
                        result.add_error(
                            f"{where}.guards[{g}]: malformed comparator '{expected}' "
                            "(expected '>N' or '>=N')"
                        )

    for platform in ("desktop", "mobile"):
        if platform not in seen_platforms:
            result.add_warning(f"No '{platform}' policy; {platform} specs get no UX decisions")

    return result
