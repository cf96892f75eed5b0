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
Pick items and the (closed) set of shapes a provider may deliver them
in for a given query.

'''
from __future__ import annotations
from enum import Enum
import inspect
from typing import (
    Any,
    Awaitable,
    Callable,
    Sequence,
    Union,
)

from .types import Struct


class TriggerAction(Enum):
    '''
    What the picker should do after an item button was triggered.

    '''
    # do nothing after the button was clicked
    NO_ACTION = 0

    # close the picker
    CLOSE_PICKER = 1

    # update the results of the picker
    REFRESH_PICKER = 2


class KeyMods(Struct, frozen=True):
    '''
    State of the modifier keys at the time of an accept/trigger.

    '''
    ctrl_cmd: bool = False
    alt: bool = False


class Button(Struct, frozen=True):
    icon: str | None = None
    tooltip: str | None = None


class Separator(Struct, frozen=True):
    label: str | None = None


class AcceptEvent(Struct, frozen=True):
    # the provider opted into running the accept without closing
    # the picker first
    in_background: bool = False


class Pick(Struct, frozen=True):
    '''
    A selectable entry with optional ``accept`` and ``trigger``
    capabilities.

    - ``accept(key_mods, event)`` is run when the pick is accepted from
      the picker. The picker is hidden before running it unless the
      accept happened "in background". It may return an awaitable for
      long running work.

    - ``trigger(button_index, key_mods)`` is run when one of
      ``buttons`` was clicked and must deliver a ``TriggerAction``
      (or an awaitable which resolves to one) telling the picker what
      to do next.

    A capability which is ``None`` is simply not offered.

    '''
    label: str
    description: str | None = None
    detail: str | None = None

    # opaque provider data, never looked at by the controller
    meta: Any = None
    buttons: tuple[Button, ...] | None = None

    accept: Callable[
        [KeyMods, AcceptEvent],
        Awaitable[None] | None,
    ] | None = None

    trigger: Callable[
        [int, KeyMods],
        TriggerAction | Awaitable[TriggerAction],
    ] | None = None

    def button_index(
        self,
        button: Button,
    ) -> int:
        '''
        Return the position of ``button`` in our button set, by
        identity, or ``-1`` if it isn't one of ours.

        '''
        for i, btn in enumerate(self.buttons or ()):
            if btn is button:
                return i

        return -1


class ButtonTriggerEvent(Struct, frozen=True):
    button: Button
    item: Pick


Item = Union[Pick, Separator]

# either a ready-to-await object or (the more ``trio``-ish) async
# function taking no args.
PicksAwaitable = Union[
    Awaitable[Sequence[Item]],
    Callable[[], Awaitable[Sequence[Item]]],
]


class PickResult(Struct, frozen=True):
    '''
    Base of the provider result variants.

    '''


class NoPicks(PickResult, frozen=True):
    '''
    Nothing changed, leave the picker's items as they are.

    '''


class Immediate(PickResult, frozen=True):
    picks: Sequence[Item]


class Deferred(PickResult, frozen=True):
    picks: PicksAwaitable


class Combined(PickResult, frozen=True):
    '''
    Fast picks which are available right now plus slow picks which
    need to be awaited; both are raced for display.

    '''
    fast: Sequence[Item]
    slow: PicksAwaitable


class PickResultError(TypeError):
    'A provider delivered something which is not a ``PickResult``.'


async def resolve(
    picks: PicksAwaitable,
) -> Sequence[Item]:
    '''
    Await a (deferred) picks payload in either of its supported forms.

    '''
    if inspect.isawaitable(picks):
        return await picks

    return await picks()


class ProviderOptions(Struct, frozen=True):
    '''
    Per-provider picker settings.

    '''
    # whether accepting a pick may leave the picker open
    can_accept_in_background: bool = False
