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
The picker (UI) surface contract and a headless, in-memory
implementation of it.

Any real widget (Qt, tui, web..) only needs to look like
``QuickPick`` for a ``PickerSession`` to drive it.

'''
from __future__ import annotations
from typing import (
    Protocol,
    Sequence,
)

import trio

from ._event import Emitter
from .lifecycle import Disposable
from .log import get_logger
from .picks import (
    AcceptEvent,
    Button,
    ButtonTriggerEvent,
    Item,
    KeyMods,
    Pick,
)


log = get_logger(__name__)


class QuickPick(Protocol):

    items: Sequence[Item]
    busy: bool
    value: str
    selected_items: Sequence[Item]
    key_mods: KeyMods

    # option flags; the session turns all the built-in
    # filtering/sorting off since providers own the ranking.
    can_accept_in_background: bool
    match_on_label: bool
    match_on_description: bool
    match_on_detail: bool
    sort_by_label: bool

    def on_did_change_value(self, listener) -> Disposable:
        ...

    def on_did_accept(self, listener) -> Disposable:
        ...

    def on_did_trigger_item_button(self, listener) -> Disposable:
        ...

    def hide(self) -> None:
        ...


class MemoryPicker:
    '''
    A picker which "renders" into lists so that the sequence of
    paints and busy indicator flips can be inspected after the fact.

    Each history entry is a ``(trio.current_time(), value)`` pair.

    '''
    def __init__(
        self,
        value: str = '',
    ) -> None:
        self._items: list[Item] = []
        self._busy: bool = False
        self._value: str = value

        self.selected_items: list[Item] = []
        self.key_mods: KeyMods = KeyMods()

        self.can_accept_in_background: bool = False
        self.match_on_label: bool = True
        self.match_on_description: bool = True
        self.match_on_detail: bool = True
        self.sort_by_label: bool = True

        self.paints: list[tuple[float, list[Item]]] = []
        self.busy_history: list[tuple[float, bool]] = []

        self._value_changes: Emitter[str] = Emitter()
        self._accepts: Emitter[AcceptEvent] = Emitter()
        self._button_triggers: Emitter[ButtonTriggerEvent] = Emitter()

        self._hidden = trio.Event()

    def __repr__(self) -> str:
        return (
            f'{type(self).__name__}('
            f'value={self._value!r}, '
            f'items={len(self._items)}, '
            f'busy={self._busy})'
        )

    @property
    def items(self) -> list[Item]:
        return self._items

    @items.setter
    def items(self, items: Sequence[Item]) -> None:
        self._items = list(items)
        self.paints.append((trio.current_time(), self._items))
        log.debug(f'Painted {len(self._items)} items')

    @property
    def busy(self) -> bool:
        return self._busy

    @busy.setter
    def busy(self, busy: bool) -> None:
        if busy != self._busy:
            self.busy_history.append((trio.current_time(), busy))

        self._busy = busy

    @property
    def value(self) -> str:
        return self._value

    @property
    def hidden(self) -> bool:
        return self._hidden.is_set()

    def on_did_change_value(self, listener) -> Disposable:
        return self._value_changes.event(listener)

    def on_did_accept(self, listener) -> Disposable:
        return self._accepts.event(listener)

    def on_did_trigger_item_button(self, listener) -> Disposable:
        return self._button_triggers.event(listener)

    def hide(self) -> None:
        log.debug(f'Hiding {self!r}')
        self._hidden.set()

    async def wait_hidden(self) -> None:
        await self._hidden.wait()

    # "user input" drivers

    def set_value(
        self,
        value: str,
    ) -> None:
        '''
        Type some new text into the search box.

        '''
        self._value = value
        self._value_changes.fire(value)

    def select(
        self,
        *picks: Item,
    ) -> None:
        self.selected_items = list(picks)

    def accept(
        self,
        in_background: bool = False,
    ) -> None:
        self._accepts.fire(
            AcceptEvent(in_background=in_background)
        )

    def trigger_item_button(
        self,
        item: Pick,
        button: Button,
    ) -> None:
        self._button_triggers.fire(
            ButtonTriggerEvent(
                button=button,
                item=item,
            )
        )
