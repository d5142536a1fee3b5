"""Background loop driving the tracker."""

from .poller import PollingLoop

__all__ = ["PollingLoop"]
