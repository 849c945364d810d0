import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Select the environment and configure logging once for the whole session.
    """
    os.environ["ORDERFLOW_ENV"] = session.config.option.env

    from lifecycle.utils.logging import configure_logging

    configure_logging(session.config.option.env)


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(autouse=True)
def run_around_tests():
    """Fixture to automatically reset process-wide singletons after every test"""
    yield

    from lifecycle.carrier import reset_carrier
    from lifecycle.domain import reset_lifecycle
    from lifecycle.utils.logging import clear_context

    reset_carrier()
    reset_lifecycle()
    clear_context()
