"""Contracts (Protocol) implemented by adapters."""

from beam.core.interfaces.source import FeedSource

__all__ = ["FeedSource"]
