"""File based line source for impstats ``log.file`` output."""

import os
import time
from typing import Iterator, Optional

from pygtail import Pygtail

from ..clients import StatsiteClient
from ..extractors import RecordParser
from ..utils import ensure_dir
from .base import DEFAULT_POLL_INTERVAL, Monitor

FILE_ENCODING = "latin-1"


class FileMonitor(Monitor):
    """Tails a pstats log file, remembering how far it has been read."""

    def __init__(
        self,
        client: StatsiteClient,
        path: str,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        offset_dir: Optional[str] = None,
        parser: Optional[RecordParser] = None,
    ):
        super().__init__(client, poll_interval, parser)
        self.path = path
        self.offset_path = self._setup_offset_path(offset_dir)

    def _setup_offset_path(self, offset_dir: Optional[str]) -> Optional[str]:
        """Place the offset file in offset_dir, or beside the log if unset."""
        if not offset_dir:
            return None

        ensure_dir(offset_dir)
        return os.path.join(offset_dir, f"{os.path.basename(self.path)}.offset")

    def read_new_lines(self) -> Iterator[str]:
        """Read complete lines appended since the last poll using Pygtail.

        Latin-1 maps every byte to one character, so reading never fails
        and the original bytes can be recovered for the parser.
        """
        return Pygtail(
            self.path,
            offset_file=self.offset_path,
            full_lines=True,
            encoding=FILE_ENCODING,
        )

    def poll_once(self) -> int:
        """Forward every new line once, returning the metrics written."""
        written = 0
        try:
            for line in self.read_new_lines():
                written += self.process_line(line.encode(FILE_ENCODING))
        except OSError as e:
            self.logger.error(f"Error reading file {os.path.basename(self.path)}: {e}")
        return written

    def poll_lines(self) -> None:
        """Poll the file until stopped."""
        while self._running:
            self.poll_once()
            time.sleep(self.poll_interval)
