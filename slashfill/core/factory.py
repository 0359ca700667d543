"""Component Factory for strategy instantiation.

The Factory Pattern lets the application pick the transport, connectivity
check and fill strategy at runtime from configuration, and wires them into
fill orchestrators.
"""

import logging

from slashfill.core.config import Settings, get_settings
from slashfill.engine.animator import TextAnimator
from slashfill.engine.document import DocumentBuffer
from slashfill.engine.models import FillOptions
from slashfill.engine.orchestrator import FillOrchestrator, Notifier, StateListener
from slashfill.engine.title import TitleGenerator
from slashfill.interfaces.connectivity import BaseConnectivity
from slashfill.interfaces.fill_strategy import BaseFillStrategy
from slashfill.interfaces.transport import BaseTransport
from slashfill.strategies.connectivity import OpenRouterConnectivity, ProxyConnectivity
from slashfill.strategies.fill import BatchFillStrategy, SequentialFillStrategy
from slashfill.strategies.transports import OpenRouterTransport, ProxyTransport

logger = logging.getLogger(__name__)


class ComponentFactory:
    """Factory for creating component instances based on configuration.

    Example:
        ```python
        settings = get_settings()
        factory = ComponentFactory(settings)

        document = DocumentBuffer("Born in / and raised in /.")
        orchestrator = factory.create_orchestrator(document)
        await factory.get_connectivity().validate()
        await orchestrator.trigger(document.get() + "//")
        ```
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize the factory with optional settings.

        Args:
            settings: Application settings. If None, uses global settings.
        """
        self._settings = settings or get_settings()
        self._transport_cache: BaseTransport | None = None
        self._connectivity_cache: BaseConnectivity | None = None
        self._fill_strategy_cache: BaseFillStrategy | None = None
        self._title_generator_cache: TitleGenerator | None = None

    @property
    def settings(self) -> Settings:
        return self._settings

    def get_transport(self, transport_type: str | None = None) -> BaseTransport:
        """Get a transport instance based on the specified type.

        Args:
            transport_type: The transport type to instantiate. If None, uses settings.

        Returns:
            A BaseTransport implementation instance.

        Raises:
            ValueError: If the transport type is unknown or misconfigured.
        """
        if self._transport_cache is None or transport_type is not None:
            transport_type = transport_type or self._settings.transport_type

            logger.info(f"Instantiating transport: {transport_type}")

            match transport_type:
                case "openrouter":
                    if not self._settings.openrouter_api_key:
                        raise ValueError("OPENROUTER_API_KEY is required for the OpenRouter transport")
                    self._transport_cache = OpenRouterTransport(
                        api_key=self._settings.openrouter_api_key,
                        base_url=self._settings.openrouter_base_url,
                        referer=self._settings.app_referer,
                        title=self._settings.app_title,
                        timeout=self._settings.request_timeout,
                    )
                case "proxy":
                    if not self._settings.proxy_url:
                        raise ValueError("PROXY_URL is required for the proxy transport")
                    self._transport_cache = ProxyTransport(
                        proxy_url=self._settings.proxy_url,
                        timeout=self._settings.request_timeout,
                    )
                case _:
                    raise ValueError(
                        f"Unknown transport type: {transport_type}. "
                        f"Valid options: 'openrouter', 'proxy'"
                    )

        return self._transport_cache

    def get_connectivity(self, transport_type: str | None = None) -> BaseConnectivity:
        """Get the connectivity check matching the transport type.

        Raises:
            ValueError: If the transport type is unknown or misconfigured.
        """
        if self._connectivity_cache is None or transport_type is not None:
            transport_type = transport_type or self._settings.transport_type

            logger.info(f"Instantiating connectivity: {transport_type}")

            match transport_type:
                case "openrouter":
                    self._connectivity_cache = OpenRouterConnectivity(
                        api_key=self._settings.openrouter_api_key,
                        base_url=self._settings.openrouter_base_url,
                    )
                case "proxy":
                    if not self._settings.proxy_url:
                        raise ValueError("PROXY_URL is required for the proxy transport")
                    self._connectivity_cache = ProxyConnectivity(
                        proxy_url=self._settings.proxy_url,
                    )
                case _:
                    raise ValueError(
                        f"Unknown transport type: {transport_type}. "
                        f"Valid options: 'openrouter', 'proxy'"
                    )

        return self._connectivity_cache

    def get_fill_strategy(self, strategy: str | None = None) -> BaseFillStrategy:
        """Get the strategy used for batch triggers.

        Raises:
            ValueError: If the strategy name is unknown.
        """
        if self._fill_strategy_cache is None or strategy is not None:
            strategy = strategy or self._settings.fill_strategy

            logger.info(f"Instantiating fill strategy: {strategy}")

            match strategy:
                case "batch":
                    self._fill_strategy_cache = BatchFillStrategy()
                case "sequential":
                    self._fill_strategy_cache = SequentialFillStrategy()
                case _:
                    raise ValueError(
                        f"Unknown fill strategy: {strategy}. "
                        f"Valid options: 'batch', 'sequential'"
                    )

        return self._fill_strategy_cache

    def get_animator(self, tick_ms: float | None = None) -> TextAnimator:
        """Create a text animator.

        Args:
            tick_ms: Override for both reveal and erase ticks. ``0`` makes
                animations complete without delay.
        """
        if tick_ms is not None:
            return TextAnimator(
                tick_ms=tick_ms,
                chunk_size=self._settings.chunk_size,
                erase_tick_ms=tick_ms,
            )
        return TextAnimator(
            tick_ms=self._settings.tick_ms,
            chunk_size=self._settings.chunk_size,
            erase_tick_ms=self._settings.erase_tick_ms,
        )

    def get_fill_options(self) -> FillOptions:
        settings = self._settings
        return FillOptions(
            model=settings.fill_model,
            inline_temperature=settings.inline_temperature,
            inline_max_tokens=settings.inline_max_tokens,
            batch_temperature=settings.batch_temperature,
            batch_max_tokens=settings.batch_max_tokens,
            web_search=settings.web_search,
            web_search_max_results=settings.web_search_max_results,
            prefix_window=settings.prefix_window,
            suffix_window=settings.suffix_window,
            batch_context_limit=settings.batch_context_limit,
        )

    def create_orchestrator(
        self,
        document: DocumentBuffer,
        notifier: Notifier | None = None,
        on_state_change: StateListener | None = None,
        animator: TextAnimator | None = None,
    ) -> FillOrchestrator:
        """Wire a fill orchestrator for ``document``.

        Orchestrators are never cached; each document gets its own so their
        generation counters stay independent.
        """
        return FillOrchestrator(
            document=document,
            transport=self.get_transport(),
            connectivity=self.get_connectivity(),
            batch_strategy=self.get_fill_strategy(),
            animator=animator or self.get_animator(),
            options=self.get_fill_options(),
            notifier=notifier,
            on_state_change=on_state_change,
            easter_egg_message=self._settings.easter_egg_message,
            easter_egg_delay_ms=self._settings.easter_egg_delay_ms,
        )

    def get_title_generator(self) -> TitleGenerator:
        if self._title_generator_cache is None:
            logger.info("Instantiating title generator")

            self._title_generator_cache = TitleGenerator(
                transport=self.get_transport(),
                connectivity=self.get_connectivity(),
                model=self._settings.title_model,
            )

        return self._title_generator_cache

    async def aclose(self) -> None:
        """Close network clients held by cached components."""
        if self._transport_cache is not None:
            await self._transport_cache.aclose()
        if self._connectivity_cache is not None:
            await self._connectivity_cache.aclose()
        self.clear_cache()

    def clear_cache(self) -> None:
        """Clear all cached component instances.

        This forces new instances to be created on next access.
        Useful for testing or when settings change.
        """
        self._transport_cache = None
        self._connectivity_cache = None
        self._fill_strategy_cache = None
        self._title_generator_cache = None
        logger.debug("Component factory cache cleared")


# Global factory instance
_factory: ComponentFactory | None = None


def get_factory() -> ComponentFactory:
    """Get or create the global ComponentFactory instance.

    Returns:
        The singleton ComponentFactory instance.
    """
    global _factory
    if _factory is None:
        _factory = ComponentFactory()
    return _factory
