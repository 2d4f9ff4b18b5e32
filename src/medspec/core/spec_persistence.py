"""
Local persistence for integrated specs.

Each spec is stored as ``<storage dir>/<id>.json`` with its creation time
and source metadata. Ids are opaque uuid4 hex strings.
"""

from __future__ import annotations

import json
import logging
import re
import uuid
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from .config import DEFAULT_STORAGE_DIR
from .errors import ErrorContext, PersistenceError
from .ir.meds import MedsSpec

logger = logging.getLogger(__name__)

_SPEC_ID = re.compile(r"^[0-9a-f]{32}$")


def get_specs_dir(project_root: Path, directory: str = DEFAULT_STORAGE_DIR) -> Path:
    """Get the spec store directory.

    Args:
        project_root: Root the storage directory is relative to.
        directory: Storage directory, relative to ``project_root``.

    Returns:
        Path to the store.
    """
    return project_root / directory


def save_spec(
    project_root: Path,
    spec: MedsSpec,
    *,
    source_meta: dict[str, Any] | None = None,
    directory: str = DEFAULT_STORAGE_DIR,
) -> str:
    """Store an integrated spec and return its id."""
    specs_dir = get_specs_dir(project_root, directory)
    specs_dir.mkdir(parents=True, exist_ok=True)

    spec_id = uuid.uuid4().hex
    record = {
        "id": spec_id,
        "createdAt": datetime.now(UTC).isoformat(),
        "sourceMeta": source_meta or {},
        "spec": spec.to_json_dict(),
    }

    spec_file = specs_dir / f"{spec_id}.json"
    spec_file.write_text(json.dumps(record, indent=2, ensure_ascii=False), encoding="utf-8")

    logger.info(f"Saved spec {spec_id} to {spec_file}")
    return spec_id


def load_spec(
    project_root: Path,
    spec_id: str,
    *,
    directory: str = DEFAULT_STORAGE_DIR,
) -> MedsSpec:
    """Load a stored spec by id.

    Raises:
        PersistenceError: If the id is unknown or the file is corrupted.
    """
    if not _SPEC_ID.match(spec_id):
        raise PersistenceError(f"Invalid spec id: '{spec_id}'")

    spec_file = get_specs_dir(project_root, directory) / f"{spec_id}.json"
    if not spec_file.exists():
        raise PersistenceError(f"Spec not found: {spec_id}")

    try:
        record = json.loads(spec_file.read_text(encoding="utf-8"))
        return MedsSpec.model_validate(record["spec"])
    except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
        raise PersistenceError(f"Corrupted spec file: {e}", ErrorContext(file=spec_file)) from e


def list_spec_ids(project_root: Path, *, directory: str = DEFAULT_STORAGE_DIR) -> list[str]:
    """List stored spec ids, oldest first. Unreadable files are skipped."""
    specs_dir = get_specs_dir(project_root, directory)
    if not specs_dir.exists():
        return []

    entries: list[tuple[str, str]] = []
    for spec_file in specs_dir.glob("*.json"):
        try:
            record = json.loads(spec_file.read_text(encoding="utf-8"))
            entries.append((record["createdAt"], record["id"]))
        except (json.JSONDecodeError, KeyError, TypeError) as e:
            logger.warning(f"Skipping unreadable spec file {spec_file}: {e}")
    return [spec_id for _, spec_id in sorted(entries)]
