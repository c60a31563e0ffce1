"""Tests for privacy_check.data.loader: referrer policy table loading."""

from __future__ import annotations

import json
import pathlib

import pydantic
import pytest

from privacy_check.data import loader
from privacy_check.models import referrer


class TestLoadJson:
    def test_missing_file_raises(self, tmp_path: pathlib.Path) -> None:
        with pytest.raises(FileNotFoundError):
            loader._load_json(tmp_path / "nonexistent.json")

    def test_invalid_json_raises(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(json.JSONDecodeError):
            loader._load_json(path)


class TestGetReferrerPolicyTable:
    def test_bundled_table(self) -> None:
        table = loader.get_referrer_policy_table()
        assert isinstance(table, referrer.ReferrerPolicyTable)
        assert table.ratings["no-referrer"] == "success"
        assert table.ratings["no-referrer-when-downgrade"] == "warning"
        assert table.ratings["unsafe-url"] == "alert"
        assert table.unrecognized == "warning"

    def test_cached(self) -> None:
        assert loader.get_referrer_policy_table() is loader.get_referrer_policy_table()

    def test_override_file(self, tmp_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = tmp_path / "policies.json"
        path.write_text(json.dumps({"ratings": {"Unsafe-URL": "warning"}, "unrecognized": "alert"}), encoding="utf-8")
        monkeypatch.setenv("REFERRER_POLICY_FILE", str(path))

        table = loader.get_referrer_policy_table()

        assert table.ratings == {"unsafe-url": "warning"}
        assert table.unrecognized == "alert"

    def test_invalid_table_rejected(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "policies.json"
        path.write_text(json.dumps({"ratings": {"unsafe-url": "terrible"}}), encoding="utf-8")
        with pytest.raises(pydantic.ValidationError):
            loader.load_referrer_policy_table(path)
