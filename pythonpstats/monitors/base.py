"""Base abstract class for all pstats line sources."""

import logging
from abc import ABC, abstractmethod
from typing import Optional, Union

from ..clients import StatsiteClient
from ..extractors import RecordParser

DEFAULT_POLL_INTERVAL = 5


class MonitorError(Exception):
    """Base exception for line source errors."""

    pass


class InputStreamError(MonitorError):
    """Exception raised when the input stream fails or reaches its end."""

    pass


class Monitor(ABC):
    """Base abstract class for all pstats line sources."""

    def __init__(
        self,
        client: StatsiteClient,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        parser: Optional[RecordParser] = None,
    ):
        self.client = client
        self.poll_interval = poll_interval
        self.parser = parser or RecordParser()
        self._running = False
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def poll_lines(self) -> None:
        """Read lines until stopped (implemented by subclasses)."""
        pass

    def start(self) -> None:
        """Start forwarding. Fatal input errors propagate to the caller."""
        self._running = True
        self.logger.info(f"Starting {self.__class__.__name__}")
        try:
            self.poll_lines()
        finally:
            self._running = False

    def stop(self) -> None:
        """Stop forwarding after the current line."""
        self._running = False

    def process_line(self, line: Union[bytes, str]) -> int:
        """Hand one raw line to the parser, returning the metrics written."""
        return self.parser.parse_msg(line, self.client)
