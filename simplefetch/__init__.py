"""Raw-socket HTTP/HTTPS fetcher with redirects, caching and concurrent dispatch."""

__version__ = "1.0.0"
