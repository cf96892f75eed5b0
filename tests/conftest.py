from functools import partial
import logging
from pathlib import Path
from typing import Callable

import pytest
import trio
from trio.testing import MockClock

from qompleter import config
from qompleter.log import get_console_log


def pytest_addoption(parser):
    parser.addoption("--ll", action="store", dest='loglevel',
                     default=None, help="logging level to set when testing")


@pytest.fixture(scope='session')
def loglevel(request) -> str:
    return request.config.option.loglevel


@pytest.fixture()
def log(
    request: pytest.FixtureRequest,
    loglevel: str,
) -> logging.Logger:
    '''
    Deliver a per-test-named ``qompleter.log`` instance.

    '''
    return get_console_log(
        level=loglevel,
        name=request.node.name,
    )


@pytest.fixture
def run() -> Callable:
    '''
    ``trio.run()`` on a virtual clock which jumps ahead as soon as all
    tasks are blocked, so sleeps cost nothing and timings are exact.

    '''
    return partial(
        trio.run,
        clock=MockClock(autojump_threshold=0),
    )


@pytest.fixture
def tmpconfdir(
    tmp_path: Path,
) -> Path:
    '''
    Override the default (in the user dir) config dir with
    a per-test temp one.

    '''
    tmpconfdir: Path = tmp_path / '_testing'
    tmpconfdir.mkdir()

    orig: Path = config._config_dir
    config._override_config_dir(tmpconfdir)
    yield tmpconfdir

    config._override_config_dir(orig)
