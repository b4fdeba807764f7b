"""Factory for creating and managing scraper adapter instances."""

from typing import Dict, Optional, Type

import httpx
import structlog

from marketintel.config import Settings
from marketintel.scrapers.base import BaseAdapter, BaseHTTPAdapter
from marketintel.scrapers.utils.rate_limiter import PolitenessThrottle


logger = structlog.get_logger(__name__)


class AdapterFactory:
    """Factory for creating and configuring adapter instances.

    All adapters built by one factory share a single politeness throttle,
    so requests stay serialized and spaced across sites.
    """

    def __init__(
        self,
        settings: Settings,
        throttle: Optional[PolitenessThrottle] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the adapter factory.

        Args:
            settings: Process settings passed to every adapter
            throttle: Shared throttle (built from REQUEST_DELAY_SECONDS if omitted)
            transport: Optional httpx transport injected into HTTP adapters
        """
        self.settings = settings
        self.throttle = throttle or PolitenessThrottle(settings.REQUEST_DELAY_SECONDS)
        self.transport = transport
        self._adapter_registry: Dict[str, Type[BaseAdapter]] = {}

    def register_adapter(self, source_slug: str, adapter_class: Type[BaseAdapter]) -> None:
        """Register an adapter class for a source.

        Args:
            source_slug: Source identifier (e.g., "etsy")
            adapter_class: Adapter class (must inherit from BaseAdapter)
        """
        if not issubclass(adapter_class, BaseAdapter):
            raise ValueError(f"Adapter class must inherit from BaseAdapter: {adapter_class}")

        self._adapter_registry[source_slug] = adapter_class
        logger.debug("adapter_registered", source=source_slug)

    def create_adapter(self, source_slug: str) -> Optional[BaseAdapter]:
        """Create an adapter instance with shared dependencies injected.

        Returns:
            Configured adapter instance, or None if not registered
        """
        adapter_class = self._adapter_registry.get(source_slug)
        if not adapter_class:
            logger.warning("adapter_not_found", source=source_slug)
            return None

        if issubclass(adapter_class, BaseHTTPAdapter):
            return adapter_class(self.settings, self.throttle, transport=self.transport)
        return adapter_class(self.settings, self.throttle)

    def get_registered_sources(self) -> list:
        return list(self._adapter_registry.keys())


def build_default_factory(
    settings: Settings,
    throttle: Optional[PolitenessThrottle] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> AdapterFactory:
    """Factory with the Pinterest and Etsy adapters registered."""
    from marketintel.scrapers.adapters import EtsyAdapter, PinterestAdapter

    factory = AdapterFactory(settings, throttle=throttle, transport=transport)
    factory.register_adapter(PinterestAdapter.source_slug, PinterestAdapter)
    factory.register_adapter(EtsyAdapter.source_slug, EtsyAdapter)
    return factory
