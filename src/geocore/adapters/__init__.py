"""I/O adapters: the httpx client factory and the Geocore request engine."""

from geocore.adapters.http_client import RequestEngine, build_async_client

__all__ = ["RequestEngine", "build_async_client"]
