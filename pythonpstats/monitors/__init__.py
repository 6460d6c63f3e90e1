"""Line sources feeding pstats records to the parser."""

from .base import Monitor, MonitorError, InputStreamError
from .file import FileMonitor
from .stdin import StdinMonitor

__all__ = [
    "Monitor",
    "MonitorError",
    "InputStreamError",
    "FileMonitor",
    "StdinMonitor",
]
