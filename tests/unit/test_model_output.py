"""Tests for recovering JSON from vision-model responses."""

from __future__ import annotations

import pytest


class TestParseModelOutput:
    def test_bare_json(self):
        from medspec.core.model_output import parse_model_output

        assert parse_model_output('{"version": "1.1"}') == {"version": "1.1"}

    def test_json_fence(self):
        from medspec.core.model_output import parse_model_output

        text = '```json\n{"components": []}\n```'
        assert parse_model_output(text) == {"components": []}

    def test_plain_fence(self):
        from medspec.core.model_output import parse_model_output

        assert parse_model_output('```\n{"a": 1}\n```') == {"a": 1}

    def test_prose_around_object(self):
        from medspec.core.model_output import parse_model_output

        text = 'Sure! Here is the spec: {"a": {"b": 2}} Let me know if you need more.'
        assert parse_model_output(text) == {"a": {"b": 2}}

    def test_backticks_inside_bare_json_kept(self):
        from medspec.core.model_output import parse_model_output

        text = '{"unclear": ["code ```x``` block"]}'
        assert parse_model_output(text) == {"unclear": ["code ```x``` block"]}

    def test_prose_before_fence(self):
        from medspec.core.model_output import parse_model_output

        text = 'Here you go:\n```json\n{"a": [1, 2]}\n```'
        assert parse_model_output(text) == {"a": [1, 2]}

    def test_no_json_raises(self):
        from medspec.core.errors import ModelOutputError
        from medspec.core.model_output import parse_model_output

        with pytest.raises(ModelOutputError, match="not valid JSON"):
            parse_model_output("I could not analyze this image.")

    def test_truncated_json_raises(self):
        from medspec.core.errors import ModelOutputError
        from medspec.core.model_output import parse_model_output

        with pytest.raises(ModelOutputError):
            parse_model_output('```json\n{"foundations": {"color": [\n```')

    def test_extract_keeps_bare_text(self):
        from medspec.core.model_output import extract_json_text

        assert extract_json_text('  {"a": 1}  ') == '{"a": 1}'

    def test_fenced_output_runs_through_pipeline(self):
        from medspec.core.model_output import parse_model_output
        from medspec.core.pipeline import run_pipeline

        text = (
            "Here is the spec:\n```json\n"
            '{"viewportProfile": {"type": "mobile", "widthPx": 390},'
            ' "foundations": {"color": [{"token": "brand", "hex": "#7c3aed"}]}}\n```'
        )
        result = run_pipeline(parse_model_output(text))
        assert result.ok
        assert result.spec.platform == "mobile"
