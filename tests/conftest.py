"""Shared fixtures for validator tests."""

import logging

import pytest


class ListLog:
    """AppDaemon style log callable that keeps every message."""

    def __init__(self):
        self.records = []

    def __call__(self, msg, level="INFO"):
        self.records.append((level, msg))

    @property
    def messages(self):
        return [msg for _, msg in self.records]


@pytest.fixture
def app_log():
    return ListLog()


@pytest.fixture
def messages(caplog):
    """Messages written to the objectpropvalidator logger."""
    caplog.set_level(logging.DEBUG, logger="objectpropvalidator")

    def get():
        return [
            r.getMessage()
            for r in caplog.records
            if r.name == "objectpropvalidator" and r.getMessage().startswith("[")
        ]

    return get
