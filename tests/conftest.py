"""Shared pytest fixtures and configuration."""

from __future__ import annotations

from typing import Any, Callable

import pytest

from excerpt_extraction import settings
from excerpt_extraction.config import resolve_config
from excerpt_extraction.extract import apply_excerpt
from excerpt_extraction.types import Config


@pytest.fixture(autouse=True)
def _reset_settings_cache(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep memoized settings from leaking between tests."""
    monkeypatch.setattr(settings, "_CACHED_SETTINGS", None)
    for name in (
        "EXCERPT_CONFIG_PATH",
        "EXCERPT_DOTENV_PATH",
        "EXCERPT_ENABLED",
        "EXCERPT_WORKERS",
        "EXCERPT_FORMAT_FIELD",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def build_config() -> Callable[..., Config]:
    """Resolve an enabled config with the given section overrides."""

    def _build(**options: Any) -> Config:
        return resolve_config({"enabled": True, **options})

    return _build


@pytest.fixture
def excerpt_for(build_config: Callable[..., Config]) -> Callable[..., Any]:
    """Run a markdown document through the engine and return its excerpt."""

    def _excerpt(body: str, **options: Any) -> Any:
        document = apply_excerpt(
            {"body": body, "format": "md"}, build_config(**options)
        )
        assert "excerpt" in document, "Expected an excerpt to be produced"
        return document["excerpt"]

    return _excerpt
