"""In-process analytics collection"""

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)


class Analytics:
    """
    Collects analytics events for a scan

    Events are kept in order and, when a sink is configured, forwarded to
    it immediately. Sink failures are logged and dropped; analytics never
    interrupts a scan.
    """

    def __init__(self, sink: Optional[Callable[[str, Any], None]] = None):
        self.sink = sink
        self.events: List[Tuple[str, Any]] = []

    def add(self, key: str, value: Any):
        """Record an event and forward it to the sink"""
        self.events.append((key, value))
        if self.sink is None:
            return
        try:
            self.sink(key, value)
        except Exception as e:
            logger.warning("analytics sink failed for %s: %s", key, e)

    def get(self, key: str) -> Optional[Any]:
        """Return the value of the last event recorded under key"""
        for event_key, value in reversed(self.events):
            if event_key == key:
                return value
        return None

    def as_dict(self) -> Dict[str, Any]:
        return {key: value for key, value in self.events}
