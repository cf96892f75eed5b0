# qompleter: search-as-you-type pickers for hackers
# Copyright (C) 2018-present  Tyler Goodlet (in stewardship of pikers)

# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.

# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""
Log like a forester!
"""
import logging
import json

import colorlog
from pygments import (
    highlight,
    lexers,
    formatters,
)

# Makes it so we only see the full module name when using ``__name__``
# without the extra "qompleter." prefix.
_proj_name: str = 'qompleter'

LOG_FORMAT = (
    '{log_color}{asctime}{reset}'
    ' {bold_white}{thin_white}({reset}'
    '{thin_white}{threadName}: {reset}{cyan}{name}{reset}'
    '{bold_white}{thin_white}){reset}'
    ' {log_color}{levelname}{reset}'
    ' {bold_white}{thin_white}[{reset}'
    '{thin_white}{filename}{reset}:{thin_white}{lineno}{reset}'
    '{bold_white}{thin_white}]{reset}'
    ' {log_color}{message}{reset}'
)
DATE_FORMAT = '%b %d %H:%M:%S'

STD_PALETTE = {
    'DEBUG': 'white',
    'INFO': 'green',
    'WARNING': 'yellow',
    'ERROR': 'red',
    'CRITICAL': 'red,bg_white',
}


def get_logger(
    name: str | None = None,
    _root_name: str = _proj_name,

) -> logging.Logger:
    '''
    Return the package log or a sub-log for `name` if provided.

    '''
    log = logging.getLogger(_root_name)
    if (
        name
        and name != _root_name
    ):
        # drop any (duplicate) package prefix from a ``__name__``
        # passed in by a sub-module
        if name.startswith(f'{_root_name}.'):
            name = name[len(_root_name) + 1:]

        log = log.getChild(name)

    return log


def get_console_log(
    level: str | None = None,
    name: str | None = None,

) -> logging.Logger:
    '''
    Get the package logger and enable a handler which writes to stderr.

    Yeah yeah, i know we can use ``DictConfig``. You do it...

    '''
    log = get_logger(name)  # our root logger
    if not level:
        return log

    root = get_logger()
    root.setLevel(level.upper())
    log.setLevel(level.upper())

    if not any(
        getattr(handler, '_qompleter_console', False)
        for handler in root.handlers
    ):
        handler = colorlog.StreamHandler()
        handler.setFormatter(
            colorlog.ColoredFormatter(
                LOG_FORMAT,
                datefmt=DATE_FORMAT,
                log_colors=STD_PALETTE,
                style='{',
            )
        )
        handler._qompleter_console = True
        root.addHandler(handler)

    return log


def colorize_json(
    data: dict,
    style='algol_nu',
):
    '''
    Colorize json output using ``pygments``.

    '''
    formatted_json = json.dumps(
        data,
        sort_keys=True,
        indent=4,
    )
    return highlight(
        formatted_json,
        lexers.JsonLexer(),

        # likeable styles: algol_nu, tango, monokai
        formatters.TerminalTrueColorFormatter(style=style)
    )
