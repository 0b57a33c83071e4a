"""Tests for render settings and logging setup."""

import logging

import pytest

from raytracer.config import QUALITY_LEVELS, RenderSettings
from raytracer.errors import RenderConfigError
from raytracer.logging_config import setup_logging


class TestRenderSettings:
    def test_defaults(self):
        settings = RenderSettings()
        assert settings.samples >= 1
        assert settings.aspect_ratio == settings.width / settings.height

    @pytest.mark.parametrize("kwargs", [
        {"width": 0},
        {"height": -4},
        {"samples": 0},
        {"max_depth": -1},
        {"workers": 0},
        {"tone_map": "filmic"},
        {"gamma": 0.0},
    ])
    def test_invalid(self, kwargs):
        with pytest.raises(RenderConfigError):
            RenderSettings(**kwargs)

    def test_quality_levels(self):
        for level, values in QUALITY_LEVELS.items():
            settings = RenderSettings().with_quality(level)
            assert settings.samples == values["samples"]
            assert settings.max_depth == values["bounces"]
        with pytest.raises(RenderConfigError):
            RenderSettings().with_quality("ultra")

    def test_updated_ignores_none(self):
        settings = RenderSettings(width=10, height=10).updated(width=20, height=None)
        assert (settings.width, settings.height) == (20, 10)

    def test_frozen(self):
        with pytest.raises(AttributeError):
            RenderSettings().width = 5


def test_setup_logging_does_not_stack_handlers(tmp_path):
    log_file = tmp_path / "logs" / "render.log"
    setup_logging("DEBUG", log_file)
    logger = setup_logging("WARNING", log_file)
    assert logger.level == logging.WARNING
    assert len(logger.handlers) == 2
    assert log_file.parent.is_dir()
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def test_env_int(monkeypatch):
    from raytracer.config import _env_int

    monkeypatch.setenv("RAYTRACER_TEST_VALUE", "12")
    assert _env_int("RAYTRACER_TEST_VALUE", 3) == 12
    monkeypatch.setenv("RAYTRACER_TEST_VALUE", "")
    assert _env_int("RAYTRACER_TEST_VALUE", 3) == 3
    monkeypatch.setenv("RAYTRACER_TEST_VALUE", "twelve")
    with pytest.raises(RenderConfigError):
        _env_int("RAYTRACER_TEST_VALUE", 3)
