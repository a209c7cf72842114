"""Module to setup fixtures and other required artifacts for tests

    isort:skip_file
"""

import pytest


def pytest_addoption(parser):
    """Additional options for running tests with pytest"""
    parser.addoption(
        "--slow", action="store_true", default=False, help="Run slow tests"
    )
    parser.addoption(
        "--pending", action="store_true", default=False, help="Show pending tests"
    )


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: slow running tests")
    config.addinivalue_line("markers", "pending: tests for pending features")


def pytest_collection_modifyitems(config, items):
    """Configure special markers on tests, so as to control execution"""
    run_slow = config.getoption("--slow")
    run_pending = config.getoption("--pending")

    skip_slow = pytest.mark.skip(reason="need --slow option to run")
    skip_pending = pytest.mark.skip(reason="need --pending option to run")

    for item in items:
        if "slow" in item.keywords and not run_slow:
            item.add_marker(skip_slow)
        if "pending" in item.keywords and not run_pending:
            item.add_marker(skip_pending)


@pytest.fixture(autouse=True)
def reset_config():
    """Every test starts, and ends, with the default configuration"""
    from modelmatch.config import set_config

    set_config(None)
    yield
    set_config(None)
