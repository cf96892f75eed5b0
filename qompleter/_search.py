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
Fuzzy multi-backend search: a provider which shows recently used
("cached") entries instantly and fans out to registered async search
routines for everything else.

"""
from __future__ import annotations
from contextlib import asynccontextmanager
from functools import partial
from typing import (
    AsyncIterator,
    Awaitable,
    Callable,
    Iterable,
    Sequence,
)

from fuzzywuzzy import process as fuzzy
import trio

from .cancellation import (
    CancellationToken,
    open_linked_scope,
)
from .lifecycle import DisposableStore
from .log import get_logger
from .picks import (
    AcceptEvent,
    Button,
    Combined,
    Immediate,
    Item,
    KeyMods,
    Pick,
    PickResult,
    ProviderOptions,
    Separator,
    TriggerAction,
)
from .provider import PickerProvider


log = get_logger(__name__)

SearchRoutine = Callable[[str], Awaitable[Sequence[str]]]

# cache of search routine names to async search routines
_searcher_cache: dict[str, SearchRoutine] = {}

_forget_button = Button(
    icon='x',
    tooltip='Remove from recently used',
)


@asynccontextmanager
async def register_search(
    name: str,
    search_routine: SearchRoutine,

) -> AsyncIterator[SearchRoutine]:
    '''
    Make ``search_routine`` available to all ``SearchProvider``s
    (which weren't handed their own routines) for the lifetime of
    the block.

    '''
    global _searcher_cache

    # deliver search func to consumer
    try:
        _searcher_cache[name] = search_routine
        yield search_routine

    finally:
        _searcher_cache.pop(name)


def search_simple_dict(
    text: str,
    source: Iterable,
    score_cutoff: int = 90,

) -> list[str]:

    tokens = []
    for key in source:
        if not isinstance(key, str):
            tokens.extend(key)
        else:
            tokens.append(key)

    # search routine can be specified as a function such
    # as in the case of the current app's local symbol cache
    matches = fuzzy.extractBests(
        text,
        tokens,
        score_cutoff=score_cutoff,
    )

    return [item[0] for item in matches]


def simple_dict_searcher(
    source: Iterable,
    latency: float = 0,

) -> SearchRoutine:
    '''
    Build a search routine over a local ``source`` which takes (at
    least) ``latency`` seconds to answer, much like a remote backend
    would.

    '''
    tokens = list(source)

    async def search(text: str) -> list[str]:
        await trio.sleep(latency)
        return search_simple_dict(text, tokens)

    return search


class SearchProvider(PickerProvider):
    '''
    Recently used entries are the fast picks, results of the search
    routines (grouped under a separator per routine) are the slow
    picks.

    Cached picks carry a button which drops them from the cache and
    refreshes the picker.

    '''
    cache_section: str = 'cache'

    def __init__(
        self,
        cache: Iterable[str] = (),
        searchers: dict[str, SearchRoutine] | None = None,
        on_pick: Callable[[str, str], None] | None = None,
        prefix: str = '',
        options: ProviderOptions | None = None,
    ) -> None:
        super().__init__(prefix=prefix, options=options)
        self.cache: list[str] = list(cache)
        self._searchers = searchers
        self.on_pick = on_pick

    @property
    def searchers(self) -> dict[str, SearchRoutine]:
        if self._searchers is None:
            return _searcher_cache

        return self._searchers

    def _accept(
        self,
        section: str,
        value: str,
        key_mods: KeyMods,
        event: AcceptEvent,
    ) -> None:
        log.info(f'Picked {value} from {section}')

        # LIFO order for the recently used
        if value in self.cache:
            self.cache.remove(value)
        self.cache.insert(0, value)

        if self.on_pick:
            self.on_pick(section, value)

    def _forget(
        self,
        value: str,
        button_index: int,
        key_mods: KeyMods,
    ) -> TriggerAction:
        if value not in self.cache:
            return TriggerAction.NO_ACTION

        log.info(f'Forgetting {value}')
        self.cache.remove(value)
        return TriggerAction.REFRESH_PICKER

    def to_picks(
        self,
        section: str,
        values: Sequence[str],
    ) -> list[Item]:
        if not values:
            return []

        cached: bool = section == self.cache_section
        picks: list[Item] = [Separator(label=section)]
        for value in values:
            picks.append(
                Pick(
                    label=value,
                    description=section,
                    meta=(section, value),
                    buttons=(_forget_button,) if cached else None,
                    accept=partial(self._accept, section, value),
                    trigger=partial(self._forget, value) if cached else None,
                )
            )
        return picks

    async def search_all(
        self,
        text: str,
        searchers: dict[str, SearchRoutine],
        token: CancellationToken,

    ) -> list[Item]:
        '''
        Fan out a search request to all routines concurrently and
        pack up the results per routine in registration order.

        Delivers nothing if ``token`` is cancelled meanwhile.

        '''
        results: dict[str, Sequence[str]] = {}

        async def search_one(
            name: str,
            search: SearchRoutine,
        ) -> None:
            log.info(f'Searching {name} for "{text}"')
            results[name] = list(await search(text))

        with open_linked_scope(token) as cs:
            async with trio.open_nursery() as n:
                for name, search in searchers.items():
                    n.start_soon(search_one, name, search)

        if cs.cancelled_caught:
            log.debug(f'Search for "{text}" cancelled')
            return []

        picks: list[Item] = []
        for name in searchers:
            picks.extend(self.to_picks(name, results.get(name, ())))

        return picks

    def get_picks(
        self,
        filter: str,
        disposables: DisposableStore,
        token: CancellationToken,

    ) -> PickResult:
        if filter:
            cached = search_simple_dict(filter, self.cache)
        else:
            cached = list(self.cache)

        fast = self.to_picks(self.cache_section, cached)

        # snapshot such that (un)registering mid-search is harmless
        searchers = dict(self.searchers)
        if (
            not filter
            or not searchers
        ):
            return Immediate(picks=fast)

        return Combined(
            fast=fast,
            slow=partial(self.search_all, filter, searchers, token),
        )
