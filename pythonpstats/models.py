"""Data models for pstats processing."""

from enum import Enum
from typing import Any, Optional

METRIC_NAMESPACE = "rsyslog"


class JsonKind(Enum):
    """The kinds of value a decoded JSON document can hold."""

    NUMBER = "number"
    STRING = "string"
    BOOL = "bool"
    NULL = "null"
    OBJECT = "object"
    ARRAY = "array"


def json_kind(value: Any) -> JsonKind:
    """Narrow a value produced by json.loads to its JsonKind."""
    # bool is a subclass of int, so it must be checked first
    if isinstance(value, bool):
        return JsonKind.BOOL
    if isinstance(value, (int, float)):
        return JsonKind.NUMBER
    if isinstance(value, str):
        return JsonKind.STRING
    if value is None:
        return JsonKind.NULL
    if isinstance(value, dict):
        return JsonKind.OBJECT
    if isinstance(value, list):
        return JsonKind.ARRAY
    raise TypeError(f"Not a JSON value: {type(value).__name__}")


class MetricLine:
    """A single gauge reading ready to be sent to statsite."""

    def __init__(self, prefix: str, key: str, value: int, tag: Optional[str] = None):
        self.prefix = prefix
        self.key = key
        self.value = value
        self.tag = tag or None

    def to_statsite_format(self) -> str:
        """Render as a newline terminated statsite gauge line."""
        if self.tag is None:
            return f"{METRIC_NAMESPACE}.{self.prefix}.{self.key}:{self.value}|g\n"
        return (
            f"{METRIC_NAMESPACE}.{self.prefix},tag1={self.tag},"
            f"tag2={self.key}:{self.value}|g\n"
        )

    def __repr__(self) -> str:
        return f"MetricLine({self.to_statsite_format().rstrip()!r})"
