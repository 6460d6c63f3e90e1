"""Extractors for turning rsyslog pstats records into gauge lines."""

import json
import logging
import math
from typing import Any, Dict, Optional, Protocol, Union

from .models import JsonKind, MetricLine, json_kind
from .utils import SanitizeError, sanitize_key

DYNSTATS_ORIGIN = "dynstats"
IMPSTATS_ORIGIN = "impstats"

DYNSTATS_PREFIX = "dynstats"
IMPSTATS_PREFIX = "resource_usage"


class MetricWriter(Protocol):
    def write(self, line: str) -> bool: ...


def _parse_finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"Number out of range: {text}")
    return value


def _parse_bounded_int(text: str) -> int:
    value = int(text)
    try:
        float(value)
    except OverflowError:
        raise ValueError(f"Number out of range: {text[:32]}...")
    return value


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid JSON constant: {name}")


def decode_record(text: str) -> Any:
    """Decode strict JSON, refusing NaN, Infinity and overflowing numbers."""
    return json.loads(
        text,
        parse_float=_parse_finite_float,
        parse_int=_parse_bounded_int,
        parse_constant=_reject_constant,
    )


class NumericExtractor:
    """Emits one gauge for every numeric field of a stat group."""

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    def find_nums(
        self,
        prefix: str,
        tag: Optional[str],
        values: Dict[str, Any],
        out: MetricWriter,
    ) -> int:
        """Write a gauge line for each numeric entry of ``values``.

        Non numeric values are skipped and nested objects are not descended
        into. Numbers are truncated towards zero.

        Args:
            prefix: Sanitized metric prefix
            tag: Sanitized record name, or None for the tagless form
            values: Decoded stat group
            out: Destination with a ``write(line)`` method

        Returns:
            int: Number of lines written successfully
        """
        written = 0
        for key, value in values.items():
            if json_kind(value) is not JsonKind.NUMBER:
                continue

            try:
                name = sanitize_key(key)
            except SanitizeError as e:
                self.logger.warning(f"Skipping field: {e}")
                continue
            if not name:
                self.logger.warning(f"Skipping field without usable characters: {key!r}")
                continue

            metric = MetricLine(prefix, name, int(value), tag)
            if out.write(metric.to_statsite_format()):
                written += 1

        return written


class RecordParser:
    """Classifies pstats records by origin and routes them to the extractor."""

    def __init__(self, extractor: Optional[NumericExtractor] = None):
        self.extractor = extractor or NumericExtractor()
        self.logger = logging.getLogger(self.__class__.__name__)

    def parse_msg(self, msg: Union[bytes, str], out: MetricWriter) -> int:
        """Format all the stats found in one input line.

        Lines without a ``{`` are ignored silently. Undecodable JSON and
        records missing the fields their origin needs are logged and
        dropped.

        Returns:
            int: Number of metric lines written
        """
        if isinstance(msg, bytes):
            msg = msg.decode("utf-8", errors="replace")

        json_start = msg.find("{")
        if json_start < 0:
            return 0

        try:
            values = decode_record(msg[json_start:])
        except (ValueError, RecursionError) as e:
            self.logger.error(f"Error while decoding json line: {e}: {msg.rstrip()}")
            return 0

        origin = values.get("origin")
        if json_kind(origin) is not JsonKind.STRING:
            self.logger.error(f"No origin key in the json blob: {msg.rstrip()}")
            return 0

        if origin == DYNSTATS_ORIGIN:
            stats = values.get("values")
            if json_kind(stats) is not JsonKind.OBJECT:
                return 0
            return self.extractor.find_nums(DYNSTATS_PREFIX, None, stats, out)

        if origin == IMPSTATS_ORIGIN:
            return self.extractor.find_nums(IMPSTATS_PREFIX, None, values, out)

        name = values.get("name")
        if json_kind(name) is not JsonKind.STRING:
            self.logger.error(f"No name key in the json blob: {msg.rstrip()}")
            return 0

        try:
            tag = sanitize_key(name)
            prefix = sanitize_key(origin)
        except SanitizeError as e:
            self.logger.error(f"Unusable origin or name: {e}")
            return 0

        if not tag or not prefix:
            self.logger.error(
                f"Origin {origin!r} or name {name!r} has no usable characters"
            )
            return 0

        return self.extractor.find_nums(prefix, tag, values, out)
