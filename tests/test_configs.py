'''
Config file creation, round tripping and picker settings.

'''
from pathlib import Path

import pytest

from qompleter import (
    ProviderOptions,
    config,
)


def test_conf_created_from_defaults_on_touch(tmpconfdir: Path):
    conf, path = config.load(
        conf_name='conf',
        touch_if_dne=True,
    )
    assert path == tmpconfdir / 'conf.toml'
    assert path.is_file()
    assert conf == config._default_conf


def test_missing_conf_loads_empty(tmpconfdir: Path):
    conf, path = config.load(conf_name='conf')
    assert conf == {}
    assert not path.exists()

    # all defaults then
    assert config.load_picker_settings(conf) == ('', ProviderOptions())


def test_write_then_load(tmpconfdir: Path):
    config.write(
        {'picker': {'prefix': '>', 'can_accept_in_background': True}},
        name='conf',
    )
    conf, _ = config.load(conf_name='conf')
    prefix, options = config.load_picker_settings(conf)

    assert prefix == '>'
    assert options.can_accept_in_background


def test_refuse_writing_blank_conf(tmpconfdir: Path):
    with pytest.raises(ValueError):
        config.write({}, name='conf')


@pytest.mark.parametrize(
    'conf',
    [
        {'picker': 'nope'},
        {'picker': {'prefix': 1}},
        {'picker': {'can_accept_in_background': 'yes'}},
    ],
)
def test_bad_picker_settings(conf: dict):
    with pytest.raises(config.ConfigurationError):
        config.load_picker_settings(conf)


def test_conf_dir_override(tmpconfdir: Path):
    assert config.get_conf_dir() == tmpconfdir
    assert config.get_conf_path('conf') == tmpconfdir / 'conf.toml'
