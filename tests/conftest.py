"""Pytest configuration and fixtures."""

import logging

import pytest

from pestle.registry import ExtensionRegistry
from pestle.verbose import detach_logger


@pytest.fixture(autouse=True)
def cleanup_loggers():
    """Detach pestle log handlers after each test so run directories can be removed."""
    yield

    names = [
        name
        for name in logging.Logger.manager.loggerDict.keys()
        if name.startswith("pestle")
    ]

    for name in names:
        detach_logger(logging.getLogger(name))


@pytest.fixture
def registry():
    """Isolated extension registry so tests never touch the process-wide one."""
    return ExtensionRegistry()
