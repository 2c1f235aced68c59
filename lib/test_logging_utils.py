"""
Tests for logging setup, dood!
"""

import logging
import tempfile
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

import pytest

from lib.logging_utils import QUIET_LOGGERS, configureLogger, getLogLevelByStr, initLogging


@pytest.fixture
def scratchLogger():
    localLogger = logging.getLogger("caelus.test.scratch")
    yield localLogger
    for handler in localLogger.handlers[:]:
        localLogger.removeHandler(handler)
        handler.close()
    localLogger.setLevel(logging.NOTSET)


@pytest.fixture
def restoreRootLogger():
    rootLogger = logging.getLogger()
    handlers = rootLogger.handlers[:]
    level = rootLogger.level
    yield rootLogger
    for handler in rootLogger.handlers[:]:
        rootLogger.removeHandler(handler)
    for handler in handlers:
        rootLogger.addHandler(handler)
    rootLogger.setLevel(level)


def testLogLevelByStr():
    """Level names are case insensitive, unknown names give default"""
    assert getLogLevelByStr("debug") == logging.DEBUG
    assert getLogLevelByStr("WARNING") == logging.WARNING
    assert getLogLevelByStr("chatty") is None
    assert getLogLevelByStr("chatty", logging.INFO) == logging.INFO


def testConsoleHandler(scratchLogger):
    configureLogger(scratchLogger, {"level": "DEBUG", "console": True, "console-level": "ERROR"})

    assert scratchLogger.level == logging.DEBUG
    assert len(scratchLogger.handlers) == 1
    assert scratchLogger.handlers[0].level == logging.ERROR


def testReconfigureReplacesHandlers(scratchLogger):
    configureLogger(scratchLogger, {"console": True})
    configureLogger(scratchLogger, {"console": True})

    assert len(scratchLogger.handlers) == 1


def testRotatingFileHandler(scratchLogger):
    with tempfile.TemporaryDirectory() as tmpDir:
        logFile = Path(tmpDir) / "nested" / "caelus.log"

        configureLogger(scratchLogger, {"file": str(logFile), "rotate": True, "backup-count": 3})

        assert logFile.parent.is_dir()
        handler = scratchLogger.handlers[0]
        assert isinstance(handler, TimedRotatingFileHandler)
        assert handler.backupCount == 3
        scratchLogger.removeHandler(handler)
        handler.close()


def testInitLoggingQuietsHttpLoggers(restoreRootLogger):
    initLogging({"level": "DEBUG", "logger": {"caelus.test.named": {"level": "ERROR"}}})

    assert restoreRootLogger.level == logging.DEBUG
    for name in QUIET_LOGGERS:
        assert logging.getLogger(name).level == logging.WARNING
    assert logging.getLogger("caelus.test.named").level == logging.ERROR
