"""
Tests for application settings and the command line entry point.
"""

import argparse
import asyncio

import gpxpy
import pytest
from pydantic import ValidationError

from workout_map.cli import run
from workout_map.config import Settings, settings


class TestSettings:

    def test_defaults(self):
        s = Settings()
        assert s.cache_backend == "file"
        assert s.viewport_debounce_seconds == 0.4
        assert s.incremental_fetch is False
        assert s.fetch_timeout_seconds is None

    def test_choices_normalized(self):
        s = Settings(cache_backend=" SQL ", workout_source="Strava")
        assert s.cache_backend == "sql"
        assert s.workout_source == "strava"

    @pytest.mark.parametrize("field,value", [
        ("cache_backend", "redis"),
        ("workout_source", "garmin"),
    ])
    def test_unknown_choice(self, field, value):
        with pytest.raises(ValidationError):
            Settings(**{field: value})

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("WORKOUT_MAP_INCREMENTAL_FETCH", "true")
        monkeypatch.setenv("WORKOUT_MAP_STRAVA_PAGE_SIZE", "30")
        s = Settings()
        assert s.incremental_fetch is True
        assert s.strava_page_size == 30

    def test_cors_origins_string(self):
        s = Settings(cors_origins="http://a.test, http://b.test")
        assert s.cors_origins == ["http://a.test", "http://b.test"]


class TestCli:
    """One sync run against the demo source."""

    @pytest.fixture(autouse=True)
    def demo_settings(self, tmp_path, monkeypatch):
        monkeypatch.setattr(settings, "workout_source", "demo")
        monkeypatch.setattr(settings, "cache_backend", "file")
        monkeypatch.setattr(settings, "cache_dir", tmp_path / "cache")
        monkeypatch.setattr(settings, "viewport_debounce_seconds", 0.01)

    def test_sync_and_export(self, tmp_path, capsys):
        export = tmp_path / "routes.gpx"

        assert asyncio.run(run(argparse.Namespace(export=str(export)))) == 0

        out = capsys.readouterr().out
        assert "Sync loaded: 3 new, 3 total" in out
        assert "Hike" in out
        assert len(gpxpy.parse(export.read_text(encoding="utf-8")).tracks) == 3
        assert (tmp_path / "cache" / settings.cache_key).exists()

    def test_second_run_uses_cache(self, capsys):
        asyncio.run(run(argparse.Namespace(export=None)))
        capsys.readouterr()

        assert asyncio.run(run(argparse.Namespace(export=None))) == 0
        assert "Sync loaded: 0 new, 3 total" in capsys.readouterr().out
