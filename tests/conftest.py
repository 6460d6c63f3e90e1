"""Pytest bootstrap putting the repo root on sys.path, plus shared fakes."""

import logging
import os
import sys

import pytest

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)


class RecordingWriter:
    """Stands in for StatsiteClient, keeping every line it is given."""

    def __init__(self, fail_on=()):
        self.lines = []
        self.attempts = 0
        self.fail_on = set(fail_on)

    def write(self, line):
        self.attempts += 1
        if self.attempts in self.fail_on:
            return False
        self.lines.append(line)
        return True


@pytest.fixture
def writer():
    return RecordingWriter()


def error_records(caplog):
    return [r for r in caplog.records if r.levelno >= logging.ERROR]
