"""
pytest integration for hardware tests.

Tests marked ``hardware`` get their links from a ``board_links.yml`` file in
the test's own directory and are skipped when there is none, so the suite
still runs on machines with no boards attached.

    pytestmark = pytest.mark.hardware

    def test_something(links, upload_cache):
        board = Breadboard({"termination": "pullup"}, links, upload_cache)
        board.upload("bin/test-firmware.bin")
        assert board.events == [...]

Enable with ``pytest_plugins = ["hil_harness.pytest_plugin"]`` in a conftest.py.
"""

from pathlib import Path
from typing import Optional

import pytest

from .communication.links import LINK_FILE, LinkSet, load_links
from .controllers.upload_cache import UploadCache


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "hardware: test needs boards described by a board_links.yml file"
    )


def link_file_for(test_path: Path) -> Path:
    """Link definition file that applies to a test module."""
    return Path(test_path).parent / LINK_FILE


def links_for(test_path: Path) -> Optional[LinkSet]:
    """Load the links configured for a test module, or None."""
    return load_links(link_file_for(test_path))


@pytest.fixture(scope="session")
def upload_cache() -> UploadCache:
    """One upload cache for the whole run."""
    return UploadCache()


@pytest.fixture
def links(request):
    """Links configured next to the requesting test; closed after the test."""
    link_set = links_for(request.path)
    if link_set is None:
        pytest.skip("links not configured")
    yield link_set
    link_set.close()
