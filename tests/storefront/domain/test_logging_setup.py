"""Tests for how the deployment environment shapes log output."""

import logging

import pytest
import structlog
from storefront.utils.logging import (
    build_handlers,
    build_processors,
    get_log_level,
    resolve_environment,
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("ENV", "ENVIRONMENT", "PROTEAN_ENV", "LOG_LEVEL", "LOG_DIR"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestResolveEnvironment:
    def test_defaults_to_development(self, clean_env):
        assert resolve_environment() == "development"

    def test_protean_env_is_honoured(self, clean_env):
        clean_env.setenv("PROTEAN_ENV", "Production")
        assert resolve_environment() == "production"

    def test_env_takes_precedence(self, clean_env):
        clean_env.setenv("PROTEAN_ENV", "test")
        clean_env.setenv("ENV", "staging")
        assert resolve_environment() == "staging"


class TestLogLevel:
    @pytest.mark.parametrize(
        "env, level",
        [("production", "INFO"), ("development", "DEBUG"), ("test", "WARNING"), ("qa", "INFO")],
    )
    def test_level_per_environment(self, clean_env, env, level):
        assert get_log_level(env) == level

    def test_log_level_override(self, clean_env):
        clean_env.setenv("LOG_LEVEL", "error")
        assert get_log_level("development") == "ERROR"


class TestRenderer:
    def test_production_from_protean_env_renders_json(self, clean_env):
        clean_env.setenv("PROTEAN_ENV", "production")
        processors = build_processors(resolve_environment())
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)
        assert not any(isinstance(p, structlog.dev.ConsoleRenderer) for p in processors)

    def test_staging_renders_json(self):
        assert isinstance(build_processors("staging")[-1], structlog.processors.JSONRenderer)

    def test_development_renders_to_console(self):
        assert isinstance(build_processors("development")[-1], structlog.dev.ConsoleRenderer)

    def test_test_environment_renders_to_console(self):
        assert isinstance(build_processors("test")[-1], structlog.dev.ConsoleRenderer)


class TestHandlers:
    def test_test_environment_writes_no_files(self, tmp_path):
        handlers = build_handlers("test", "WARNING", str(tmp_path))
        assert len(handlers) == 1
        assert list(tmp_path.iterdir()) == []

    def test_other_environments_rotate_files(self, tmp_path):
        handlers = build_handlers("production", "INFO", str(tmp_path / "logs"))
        try:
            files = sorted(h.baseFilename for h in handlers if isinstance(h, logging.FileHandler))
            assert [f.rsplit("/", 1)[-1] for f in files] == ["storefront.log", "storefront_error.log"]
            assert handlers[-1].level == logging.ERROR
        finally:
            for handler in handlers:
                handler.close()
