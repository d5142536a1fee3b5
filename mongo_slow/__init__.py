"""Export long-running MongoDB operations as Prometheus metrics."""
from mongo_slow.version import __version__

__all__ = ["__version__"]
