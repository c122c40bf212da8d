"""Tests for the bingfill CLI."""

from __future__ import annotations

import json

import pytest
import requests
import yaml

from bingfill.__main__ import main
from bingfill.provenance import SETTING_KEY
from conftest import ENDPOINT, FakeResponse, FakeSession, jpeg_bytes


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        f"api:\n  endpoint: {ENDPOINT}\n"
        f"cache:\n  folder: {tmp_path / 'cache'}\n"
    )
    return path


@pytest.fixture
def patched_session(monkeypatch, metadata_payload):
    session = FakeSession()
    session.route(f"{ENDPOINT}/HPImageArchive.aspx", FakeResponse(json_data=metadata_payload))
    session.route(f"{ENDPOINT}/th?id=", FakeResponse(content=jpeg_bytes(64, 48)))
    monkeypatch.setattr(requests, "Session", lambda: session)
    return session


class TestResolve:
    def test_plain(self, capsys):
        assert main(["resolve", "--width", "100", "--height", "100"]) == 0
        assert "240x320" in capsys.readouterr().out

    def test_json(self, capsys):
        assert main(["resolve", "--width", "2000", "--height", "2000", "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data == {"resolution": "1920x1200", "width": 1920, "height": 1200}


class TestFetch:
    def test_json_output(self, patched_session, config_path, tmp_path, capsys):
        settings = tmp_path / "settings.yaml"
        ret = main([
            "fetch", "--width", "1000", "--height", "700",
            "--config", str(config_path),
            "--settings", str(settings),
            "--item-id", "layer-9",
            "--json",
        ])
        assert ret == 0
        data = json.loads(capsys.readouterr().out)
        assert data["resolution"] == "1024x768"
        assert data["id"] == "abc"
        assert data["title"] == "Sample title"
        assert data["placeholder"] is False
        assert (data["width"], data["height"]) == (64, 48)
        assert data["url"] == f"{ENDPOINT}/th?id=OHR.Sample_EN-US123_1024x768.jpg"

        with open(settings) as f:
            assert yaml.safe_load(f) == {"layer-9": {SETTING_KEY: "abc"}}

    def test_rich_output(self, patched_session, config_path, tmp_path):
        ret = main([
            "fetch", "--width", "200", "--height", "200",
            "--config", str(config_path),
            "--settings", str(tmp_path / "s.yaml"),
        ])
        assert ret == 0

    def test_network_failure(self, monkeypatch, config_path, tmp_path, capsys):
        session = FakeSession()
        monkeypatch.setattr(requests, "Session", lambda: session)
        ret = main([
            "fetch", "--width", "10", "--height", "10",
            "--config", str(config_path),
            "--settings", str(tmp_path / "s.yaml"),
            "--json",
        ])
        assert ret == 1
        assert "error" in json.loads(capsys.readouterr().out)


class TestDetails:
    def test_recorded(self, tmp_path, capsys):
        settings = tmp_path / "s.yaml"
        settings.write_text(f"layer-1:\n  {SETTING_KEY}: abc\n")
        assert main(["details", "--item-id", "layer-1", "--settings", str(settings)]) == 0
        assert "https://unsplash.com/photos/abc" in capsys.readouterr().out

    def test_missing(self, tmp_path):
        assert main(["details", "--item-id", "nope", "--settings", str(tmp_path / "s.yaml")]) == 1


class TestClean:
    def test_removes_empty_folder(self, config_path, tmp_path):
        (tmp_path / "cache").mkdir()
        assert main(["clean", "--config", str(config_path)]) == 0
        assert not (tmp_path / "cache").exists()

    def test_non_empty_folder(self, config_path, tmp_path):
        (tmp_path / "cache").mkdir()
        (tmp_path / "cache" / "a.jpg").write_bytes(b"x")
        assert main(["clean", "--config", str(config_path)]) == 1

    def test_nothing_to_clean(self, config_path):
        assert main(["clean", "--config", str(config_path)]) == 0
