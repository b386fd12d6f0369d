"""Tests for main — onboarding document check entry point."""

import json

from main import main


def test_bundled_config_passes():
    assert main([]) == 0


def test_valid_file_passes(tmp_path, valid_config):
    path = tmp_path / "onboarding.json"
    path.write_text(json.dumps(valid_config), encoding="utf-8")
    assert main([str(path)]) == 0


def test_invalid_file_fails(tmp_path, valid_config):
    del valid_config["version"]
    path = tmp_path / "onboarding.json"
    path.write_text(json.dumps(valid_config), encoding="utf-8")
    assert main([str(path)]) == 1


def test_missing_file_fails(tmp_path):
    assert main([str(tmp_path / "absent.json")]) == 1


def test_oversized_config_fails(tmp_path, valid_config, monkeypatch):
    from timeplan.config import settings

    monkeypatch.setattr(settings, "MAX_ONBOARDING_ITEMS", 3)
    path = tmp_path / "onboarding.json"
    path.write_text(json.dumps(valid_config), encoding="utf-8")
    assert main([str(path)]) == 1
