"""Tests for the canonical JSON normalization layer."""

import json
from pathlib import Path

from laravel_doctor.model import Category, Severity
from laravel_doctor.utils.json_norm import stable_json_dumps


def test_stable_json_dumps_sorts_keys_and_adds_newline():
    s = stable_json_dumps({"b": 1, "a": 2})
    assert s.endswith("\n")
    # Keys should be sorted in the serialized output
    assert s.index('"a"') < s.index('"b"')


def test_stable_json_dumps_normalizes_paths():
    s = stable_json_dumps({"p": Path("a") / "b"})
    obj = json.loads(s)
    assert obj["p"] == "a/b"


def test_stable_json_dumps_uses_enum_values():
    s = stable_json_dumps({Category.SECURITY: [Severity.ERROR, ("x", None)]})
    assert json.loads(s) == {"security": ["error", ["x", None]]}


def test_non_ascii_kept():
    assert "✗" in stable_json_dumps({"icon": "✗"})
