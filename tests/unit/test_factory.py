"""Unit tests for settings validation and the component factory."""

import asyncio
import logging
from pathlib import Path

import pytest
import structlog
from pydantic import ValidationError

from slashfill.core.config import Settings
from slashfill.core.factory import ComponentFactory
from slashfill.core.logging_config import setup_logging
from slashfill.engine.document import DocumentBuffer
from slashfill.strategies.connectivity import OpenRouterConnectivity, ProxyConnectivity
from slashfill.strategies.fill import BatchFillStrategy, SequentialFillStrategy
from slashfill.strategies.transports import OpenRouterTransport, ProxyTransport
from tests.fakes import FakeConnectivity, FakeTransport


def _settings(**overrides) -> Settings:
    values = {"openrouter_api_key": "sk-test", "proxy_url": None}
    values.update(overrides)
    return Settings(_env_file=None, **values)


# =============================================================================
# Settings Tests
# =============================================================================


class TestSettings:
    """Test suite for Settings validation."""

    def test_defaults(self):
        """Test the documented defaults."""
        settings = _settings()
        assert settings.transport_type == "openrouter"
        assert settings.fill_strategy == "batch"
        assert settings.batch_context_limit == 6000
        assert settings.easter_egg_message == "Boing boing!"

    def test_transport_type_is_normalized(self):
        """Test case-insensitive transport names."""
        assert _settings(transport_type="PROXY").transport_type == "proxy"

    def test_unknown_transport_type(self):
        """Test that unknown transports are rejected."""
        with pytest.raises(ValidationError):
            _settings(transport_type="carrier-pigeon")

    def test_unknown_fill_strategy(self):
        """Test that unknown fill strategies are rejected."""
        with pytest.raises(ValidationError):
            _settings(fill_strategy="parallel")

    def test_log_level_is_uppercased(self):
        """Test log level normalization."""
        assert _settings(log_level="debug").log_level == "DEBUG"

    def test_negative_windows_rejected(self):
        """Test numeric constraints."""
        with pytest.raises(ValidationError):
            _settings(prefix_window=-1)
        with pytest.raises(ValidationError):
            _settings(chunk_size=0)

    def test_configure_logging(self):
        """Test that structlog is configured from settings."""
        _settings(log_level="warning").configure_logging()

        assert structlog.is_configured()
        assert logging.getLogger("slashfill.core.config").level == logging.WARNING


# =============================================================================
# Factory Tests
# =============================================================================


class TestComponentFactory:
    """Test suite for ComponentFactory."""

    def test_openrouter_components(self):
        """Test the default transport and connectivity."""
        factory = ComponentFactory(_settings())

        assert isinstance(factory.get_transport(), OpenRouterTransport)
        assert isinstance(factory.get_connectivity(), OpenRouterConnectivity)

    def test_openrouter_requires_key(self):
        """Test that a missing key is a configuration error."""
        factory = ComponentFactory(_settings(openrouter_api_key=""))

        with pytest.raises(ValueError, match="OPENROUTER_API_KEY"):
            factory.get_transport()

    def test_proxy_components(self):
        """Test the proxy transport and connectivity."""
        factory = ComponentFactory(
            _settings(transport_type="proxy", proxy_url="https://proxy.example.com")
        )

        assert isinstance(factory.get_transport(), ProxyTransport)
        assert isinstance(factory.get_connectivity(), ProxyConnectivity)

    def test_proxy_requires_url(self):
        """Test that the proxy transport needs a URL."""
        factory = ComponentFactory(_settings(transport_type="proxy"))

        with pytest.raises(ValueError, match="PROXY_URL"):
            factory.get_transport()
        with pytest.raises(ValueError, match="PROXY_URL"):
            factory.get_connectivity()

    def test_unknown_transport_override(self):
        """Test an explicit unknown transport name."""
        with pytest.raises(ValueError, match="Unknown transport type"):
            ComponentFactory(_settings()).get_transport("smtp")

    def test_fill_strategies(self):
        """Test strategy selection by name."""
        assert isinstance(ComponentFactory(_settings()).get_fill_strategy(), BatchFillStrategy)
        assert isinstance(
            ComponentFactory(_settings(fill_strategy="sequential")).get_fill_strategy(),
            SequentialFillStrategy,
        )
        with pytest.raises(ValueError, match="Unknown fill strategy"):
            ComponentFactory(_settings()).get_fill_strategy("parallel")

    def test_components_are_cached(self):
        """Test that repeated calls return the same instance."""
        factory = ComponentFactory(_settings())

        assert factory.get_transport() is factory.get_transport()
        assert factory.get_fill_strategy() is factory.get_fill_strategy()
        assert factory.get_title_generator() is factory.get_title_generator()

        transport = factory.get_transport()
        factory.clear_cache()
        assert factory.get_transport() is not transport

    def test_animator_settings(self):
        """Test animator construction and the tick override."""
        factory = ComponentFactory(_settings(tick_ms=25, erase_tick_ms=10, chunk_size=2))

        animator = factory.get_animator()
        assert (animator.tick_ms, animator.erase_tick_ms, animator.chunk_size) == (25, 10, 2)

        instant = factory.get_animator(tick_ms=0)
        assert (instant.tick_ms, instant.erase_tick_ms) == (0, 0)

    def test_fill_options_follow_settings(self):
        """Test that request parameters come from settings."""
        options = ComponentFactory(
            _settings(fill_model="openai/gpt-4o-mini", web_search=False, batch_context_limit=0)
        ).get_fill_options()

        assert options.model == "openai/gpt-4o-mini"
        assert options.web_search is False
        assert options.batch_context_limit == 0

    def test_create_orchestrator(self):
        """Test orchestrator wiring."""
        factory = ComponentFactory(_settings(fill_strategy="sequential", easter_egg_message="Hi!"))
        document = DocumentBuffer("text")

        first = factory.create_orchestrator(document)
        second = factory.create_orchestrator(document)

        assert first is not second
        assert first.document is document
        assert first.transport is factory.get_transport()
        assert isinstance(first.batch_strategy, SequentialFillStrategy)
        assert first.easter_egg_message == "Hi!"

    def test_aclose_closes_cached_components(self):
        """Test that network clients are released."""
        factory = ComponentFactory(_settings())
        transport = FakeTransport()
        factory._transport_cache = transport
        factory._connectivity_cache = FakeConnectivity()

        asyncio.run(factory.aclose())

        assert transport.closed is True
        assert factory._transport_cache is None


# =============================================================================
# Logging Setup Tests
# =============================================================================


class TestLoggingSetup:
    """Test suite for setup_logging."""

    @pytest.fixture
    def root_logger(self):
        root = logging.getLogger()
        handlers, level = list(root.handlers), root.level
        yield root
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_installs_file_and_console_handlers(self, root_logger, tmp_path):
        """Test the info, error and console handlers."""
        setup_logging(_settings(log_level="debug"), log_dir=tmp_path / "logs")

        assert root_logger.level == logging.DEBUG
        assert len(root_logger.handlers) == 3
        file_names = sorted(
            Path(handler.baseFilename).name
            for handler in root_logger.handlers
            if isinstance(handler, logging.FileHandler)
        )
        assert file_names == ["error.log", "info.log"]

        logging.getLogger("slashfill.test").error("Fill failed")
        for handler in root_logger.handlers:
            handler.flush()

        assert "Fill failed" in (tmp_path / "logs" / "error.log").read_text(encoding="utf-8")
