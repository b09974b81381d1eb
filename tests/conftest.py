import logging

import pytest

import xi_tts.core.logging as xi_logging


@pytest.fixture(autouse=True)
def reset_xi_logging():
    """Undo configure_logging() so each test starts with library defaults."""
    yield
    pkg = logging.getLogger(xi_logging.PACKAGE_LOGGER)
    for handler in list(xi_logging._installed):
        pkg.removeHandler(handler)
        handler.close()
    xi_logging._installed.clear()
    xi_logging._level = None
    pkg.propagate = True
    pkg.setLevel(logging.NOTSET)
    xi_logging.set_request_id("-")
