import logging
import os

import pytest


GITMAP_ENV_VARS = ("GITMAP_GIT", "GITMAP_CONTENT_INFO")


@pytest.fixture(scope="session", autouse=True)
def isolate_gitmap_env():
    """Temporarily remove gitmap environment overrides from the session.

    CLI tests expect the default Git executable and the derived content-info
    path. This fixture clears the variables for the duration of the test
    session and restores them afterwards.
    """
    saved = {name: os.environ.pop(name) for name in GITMAP_ENV_VARS if name in os.environ}
    try:
        yield
    finally:
        os.environ.update(saved)


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo the logging configuration that ``gitmap.cli.main`` installs.

    The CLI binds a root handler to the standard error stream of each
    CliRunner invocation; the stream is closed once the run ends.
    """
    root = logging.getLogger()
    package_logger = logging.getLogger("gitmap")
    saved_handlers = root.handlers[:]
    saved_root_level = root.level
    saved_package_level = package_logger.level
    try:
        yield
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_root_level)
        package_logger.setLevel(saved_package_level)
