"""Tests for the local spec store."""

from __future__ import annotations

import json
from pathlib import Path

import pytest


class TestSpecPersistence:
    def test_save_and_load(self, tmp_path: Path, desktop_spec):
        from medspec.core.spec_persistence import load_spec, save_spec

        spec_id = save_spec(tmp_path, desktop_spec, source_meta={"input": "admin.json"})
        assert len(spec_id) == 32
        assert load_spec(tmp_path, spec_id) == desktop_spec

    def test_record_layout(self, tmp_path: Path, mobile_spec):
        from medspec.core.spec_persistence import save_spec

        spec_id = save_spec(tmp_path, mobile_spec, source_meta={"input": "signup.json"})
        record = json.loads((tmp_path / ".medspec" / "specs" / f"{spec_id}.json").read_text())
        assert record["id"] == spec_id
        assert record["sourceMeta"] == {"input": "signup.json"}
        assert "createdAt" in record
        assert record["spec"]["viewportProfile"]["type"] == "mobile"

    def test_custom_directory(self, tmp_path: Path, mobile_spec):
        from medspec.core.spec_persistence import list_spec_ids, save_spec

        spec_id = save_spec(tmp_path, mobile_spec, directory="out")
        assert (tmp_path / "out" / f"{spec_id}.json").exists()
        assert list_spec_ids(tmp_path, directory="out") == [spec_id]
        assert list_spec_ids(tmp_path) == []

    def test_list_oldest_first(self, tmp_path: Path, desktop_spec, mobile_spec):
        from medspec.core.spec_persistence import list_spec_ids, save_spec

        first = save_spec(tmp_path, desktop_spec)
        second = save_spec(tmp_path, mobile_spec)
        ids = list_spec_ids(tmp_path)
        assert set(ids) == {first, second}
        assert len(ids) == 2

    def test_list_skips_unreadable_files(self, tmp_path: Path, desktop_spec, caplog):
        from medspec.core.spec_persistence import get_specs_dir, list_spec_ids, save_spec

        spec_id = save_spec(tmp_path, desktop_spec)
        (get_specs_dir(tmp_path) / "broken.json").write_text("{oops", encoding="utf-8")
        with caplog.at_level("WARNING"):
            assert list_spec_ids(tmp_path) == [spec_id]
        assert "Skipping unreadable spec file" in caplog.text

    def test_list_without_store(self, tmp_path: Path):
        from medspec.core.spec_persistence import list_spec_ids

        assert list_spec_ids(tmp_path) == []

    def test_unknown_id(self, tmp_path: Path):
        from medspec.core.errors import PersistenceError
        from medspec.core.spec_persistence import load_spec

        with pytest.raises(PersistenceError, match="Spec not found"):
            load_spec(tmp_path, "0" * 32)

    def test_invalid_id_rejected(self, tmp_path: Path):
        from medspec.core.errors import PersistenceError
        from medspec.core.spec_persistence import load_spec

        with pytest.raises(PersistenceError, match="Invalid spec id"):
            load_spec(tmp_path, "../../etc/passwd")

    def test_corrupted_file(self, tmp_path: Path, desktop_spec):
        from medspec.core.errors import PersistenceError
        from medspec.core.spec_persistence import get_specs_dir, load_spec, save_spec

        spec_id = save_spec(tmp_path, desktop_spec)
        (get_specs_dir(tmp_path) / f"{spec_id}.json").write_text('{"id": "x"}', encoding="utf-8")
        with pytest.raises(PersistenceError, match="Corrupted spec file"):
            load_spec(tmp_path, spec_id)
