"""Adapter registry: pick the adapter for a page by URL or platform."""

from __future__ import annotations

from anchoring.adapters.base import DocumentAdapter
from anchoring.adapters.chatgpt import ChatGPTAdapter
from anchoring.adapters.html import HtmlAdapter
from anchoring.logging_config import logger


class AdapterRegistry:
    """Ordered collection of adapters; the first one that can handle a URL wins."""

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._adapters: list[DocumentAdapter] = []

    def register(self, adapter: DocumentAdapter) -> None:
        """Register an adapter after the existing ones.

        Args:
            adapter: Adapter to add
        """
        self._adapters.append(adapter)
        logger.debug(f"Registered adapter for platform: {adapter.platform}")

    def get_adapter(self, url: str | None) -> DocumentAdapter | None:
        """Return the first adapter that can handle the URL, or None."""
        for adapter in self._adapters:
            if adapter.can_handle(url):
                return adapter
        logger.warning(f"No compatible adapter found for {url}")
        return None

    def get_adapter_by_platform(self, platform: str) -> DocumentAdapter | None:
        """Return the adapter registered for a platform, or None."""
        for adapter in self._adapters:
            if adapter.platform == platform:
                return adapter
        return None

    def platforms(self) -> list[str]:
        return [adapter.platform for adapter in self._adapters]


def create_default_registry() -> AdapterRegistry:
    """Create registry with the site adapters and the generic HTML fallback.

    Returns:
        AdapterRegistry with ChatGPT first and HTML last
    """
    registry = AdapterRegistry()
    registry.register(ChatGPTAdapter())
    registry.register(HtmlAdapter())
    return registry
