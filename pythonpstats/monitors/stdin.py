"""Standard input line source, fed by rsyslog's omprog action."""

import sys
from typing import BinaryIO, Optional

from ..clients import StatsiteClient
from ..extractors import RecordParser
from .base import InputStreamError, Monitor


class StdinMonitor(Monitor):
    """Reads newline delimited frames from a binary stream."""

    def __init__(
        self,
        client: StatsiteClient,
        stream: Optional[BinaryIO] = None,
        parser: Optional[RecordParser] = None,
    ):
        super().__init__(client, parser=parser)
        self.stream = stream if stream is not None else sys.stdin.buffer

    def read_frame(self) -> bytes:
        """Block until a full ``\\n`` terminated frame is available.

        Raises:
            InputStreamError: On a read failure or at end of stream. A final
                frame without a newline counts as end of stream.
        """
        try:
            frame = self.stream.readline()
        except OSError as e:
            raise InputStreamError(f"Failed to read line from input: {e}")

        if not frame.endswith(b"\n"):
            raise InputStreamError("Failed to read line from input: end of stream")
        return frame

    def poll_lines(self) -> None:
        while self._running:
            self.process_line(self.read_frame())
