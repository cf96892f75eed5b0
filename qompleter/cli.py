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

'''
CLI commons.

'''
import os
from typing import Sequence

import click
import trio

from .log import (
    get_console_log,
    get_logger,
    colorize_json,
)
from .picker import MemoryPicker
from .picks import (
    Item,
    Separator,
)
from .provider import open_picker_session
from ._search import (
    SearchProvider,
    register_search,
    simple_dict_searcher,
)
from . import config


log = get_logger('cli')


def format_items(
    items: Sequence[Item],
) -> str:
    '''
    Render a paint on a single line, separators as ``[section]``.

    '''
    return ' '.join(
        f'[{item.label}]' if isinstance(item, Separator)
        else item.label
        for item in items
    )


@click.group()
@click.option('--loglevel', '-l', default=None, help='Logging level')
@click.option('--configdir', '-c', help='Configuration directory')
@click.pass_context
def cli(
    ctx: click.Context,
    loglevel: str | None,
    configdir: str | None,

) -> None:
    if configdir is not None:
        assert os.path.isdir(configdir), f"`{configdir}` is not a valid path"
        config._override_config_dir(configdir)

    ctx.ensure_object(dict)

    conf, path = config.load(conf_name='conf')
    loglevel = loglevel or conf.get('log', {}).get('level', 'warning')

    ctx.obj.update({
        'loglevel': loglevel,
        'log': get_console_log(loglevel),
        'conf': conf,
        'confpath': path,
    })


@cli.command()
@click.pass_obj
def conf(obj: dict) -> None:
    '''
    Dump the loaded config (and where it was read from).

    '''
    click.echo(
        colorize_json({
            'path': str(obj['confpath']),
            'conf': obj['conf'],
        })
    )


@cli.command()
@click.argument('words', nargs=-1, required=True)
@click.option(
    '--query',
    '-q',
    multiple=True,
    help='Text to "type" into the picker, in order',
)
@click.option(
    '--cache',
    multiple=True,
    help='Recently used entries (the fast picks)',
)
@click.option(
    '--latency',
    default=0.5,
    type=float,
    help='Seconds the (slow) word search takes to answer',
)
@click.option(
    '--pause',
    default=0.5,
    type=float,
    help='Seconds to wait between typed queries',
)
@click.pass_obj
def search(
    obj: dict,
    words: tuple[str],
    query: tuple[str],
    cache: tuple[str],
    latency: float,
    pause: float,
) -> None:
    '''
    Run a headless picker over WORDS and echo every paint it gets.

    '''
    prefix, options = config.load_picker_settings(obj['conf'])

    async def main():
        picker = MemoryPicker(value=prefix)
        provider = SearchProvider(
            cache=cache,
            prefix=prefix,
            options=options,
        )
        start: float = trio.current_time()

        async with (
            register_search(
                'words',
                simple_dict_searcher(words, latency=latency),
            ),
            open_picker_session(provider, picker),
        ):
            for text in query:
                picker.set_value(prefix + text)
                await trio.sleep(pause)

            # let any still slow results land
            await trio.sleep(latency + provider.fast_picks_race_delay)

        for ts, items in picker.paints:
            click.echo(f'{ts - start:.3f} {format_items(items)}')

    trio.run(main)
