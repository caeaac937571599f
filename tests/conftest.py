import logging

import pytest

from resgen.reporting import SilentReporter, set_reporter, set_verbosity


@pytest.fixture(autouse=True)
def _quiet_reporter():
    """Keep reporter and logger state from leaking between tests."""
    set_reporter(SilentReporter())
    set_verbosity(0)
    yield
    logger = logging.getLogger("resgen")
    for h in list(logger.handlers):
        logger.removeHandler(h)
    logger.setLevel(logging.NOTSET)
    set_reporter(SilentReporter())
