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
Picker configuration (files) mgmt.

"""
import platform
import sys
import os
from typing import (
    Callable,
    MutableMapping,
)
from pathlib import Path
import tomllib

import tomlkit

from .log import get_logger
from .picks import ProviderOptions

log = get_logger('config')


# XXX NOTE: taken from ``click`` since apparently they have some
# super weirdness with sigint and sudo..no clue
def get_app_dir(
    app_name: str,
    roaming: bool = True,
    force_posix: bool = False,

) -> str:
    r"""Returns the config folder for the application.  The default behavior
    is to return whatever is most appropriate for the operating system.

    To give you an idea, for an app called ``"Foo Bar"``, something like
    the following folders could be returned:

    Mac OS X:
      ``~/Library/Application Support/Foo Bar``
    Mac OS X (POSIX):
      ``~/.foo-bar``
    Unix:
      ``~/.config/foo-bar``
    Unix (POSIX):
      ``~/.foo-bar``
    Win 7 (roaming):
      ``C:\Users\<user>\AppData\Roaming\Foo Bar``
    Win 7 (not roaming):
      ``C:\Users\<user>\AppData\Local\Foo Bar``

    :param app_name: the application name.  This should be properly capitalized
                     and can contain whitespace.
    :param roaming: controls if the folder should be roaming or not on Windows.
                    Has no affect otherwise.
    :param force_posix: if this is set to `True` then on any POSIX system the
                        folder will be stored in the home folder with a leading
                        dot instead of the XDG config home or darwin's
                        application support folder.
    """

    def _posixify(name):
        return "-".join(name.split()).lower()

    if platform.system() == 'Windows':
        key = "APPDATA" if roaming else "LOCALAPPDATA"
        folder = os.environ.get(key)
        if folder is None:
            folder = os.path.expanduser("~")
        return os.path.join(folder, app_name)
    if force_posix:
        return os.path.join(
            os.path.expanduser("~/.{}".format(_posixify(app_name))))
    if sys.platform == "darwin":
        return os.path.join(
            os.path.expanduser("~/Library/Application Support"), app_name
        )
    return os.path.join(
        os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config")),
        _posixify(app_name),
    )


_config_dir: Path = Path(get_app_dir('qompleter'))

_conf_names: set[str] = {
    'conf',  # god config
}

# written by ``load(touch_if_dne=True)`` when there's no user config
_default_conf: dict = {
    'picker': {
        # query prefix stripped before handing the filter to providers
        'prefix': '',
        'can_accept_in_background': False,
    },
    'log': {
        'level': 'warning',
    },
}


class ConfigurationError(Exception):
    'Misconfigured settings, likely in a TOML file.'


def _override_config_dir(
    path: str | Path,
) -> None:
    global _config_dir
    _config_dir = Path(path)


def _conf_fn_w_ext(
    name: str,
) -> str:
    # change this if we ever change the config file format.
    return f'{name}.toml'


def get_conf_dir() -> Path:
    '''
    Return the user configuration directory ``Path``
    on the local filesystem.

    '''
    return _config_dir


def get_conf_path(
    conf_name: str = 'conf',

) -> Path:
    '''
    Return the top-level default config path normally under
    ``~/.config/qompleter`` on linux for a given ``conf_name``, the
    config name.

    '''
    assert str(conf_name) in _conf_names
    fn = _conf_fn_w_ext(conf_name)
    return _config_dir / Path(fn)


def load(
    # NOTE: always appended with .toml suffix
    conf_name: str = 'conf',
    path: Path | None = None,

    decode: Callable[
        [str | bytes,],
        MutableMapping,
    ] = tomllib.loads,

    touch_if_dne: bool = False,

    **tomlkws,

) -> tuple[dict, Path]:
    '''
    Load config file by name.

    If desired config is not in the top level user config path then
    pass the ``path: Path`` explicitly.

    '''
    # create the $HOME/.config/qompleter dir if dne
    if not _config_dir.is_dir():
        _config_dir.mkdir(
            parents=True,
            exist_ok=True,
        )

    path_provided: bool = path is not None
    path: Path = path or get_conf_path(conf_name)

    if (
        not path.is_file()
        and touch_if_dne
    ):
        # only do a template if no path provided,
        # just touch an empty file with same name.
        if path_provided:
            with path.open(mode='x'):
                pass

        else:
            write(
                _default_conf,
                path=path,
            )

        assert path.is_file(), f'Config file {path} not created!?'

    if not path.is_file():
        log.debug(f'No config file at {path}, using defaults')
        return {}, path

    with path.open(mode='r') as fp:
        config: dict = decode(
            fp.read(),
            **tomlkws,
        )

    log.debug(f"Read config file {path}")
    return config, path


def write(
    config: dict,  # toml config as dict

    name: str | None = None,
    path: Path | None = None,
    fail_empty: bool = True,

    **toml_kwargs,

) -> None:
    ''''
    Write config to disk.

    Create the config dir if one does not exist.

    '''
    if name:
        path: Path = path or get_conf_path(name)

    dirname: Path = path.parent
    if not dirname.is_dir():
        log.debug(f"Creating config dir {dirname}")
        dirname.mkdir(parents=True)

    if (
        not config
        and fail_empty
    ):
        raise ValueError(
            "Watch out you're trying to write a blank config!"
        )

    log.debug(
        f"Writing config `{name}` file to:\n"
        f"{path}"
    )
    with path.open(mode='w') as fp:
        return tomlkit.dump(  # preserve style on write B)
            config,
            fp,
            **toml_kwargs,
        )


def load_picker_settings(
    conf: dict,

) -> tuple[str, ProviderOptions]:
    '''
    Read the ``[picker]`` section delivering the query prefix and
    provider options, falling back to defaults for anything unset.

    '''
    section = conf.get('picker', {})
    if not isinstance(section, dict):
        raise ConfigurationError(
            f'`[picker]` must be a table, got {section!r}'
        )

    prefix = section.get('prefix', '')
    if not isinstance(prefix, str):
        raise ConfigurationError(
            f'`picker.prefix` must be a string, got {prefix!r}'
        )

    bg = section.get('can_accept_in_background', False)
    if not isinstance(bg, bool):
        raise ConfigurationError(
            '`picker.can_accept_in_background` must be a bool, '
            f'got {bg!r}'
        )

    return prefix, ProviderOptions(can_accept_in_background=bg)
