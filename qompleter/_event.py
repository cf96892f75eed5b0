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
Minimal (sync) event emission for picker surfaces.

"""
from typing import (
    Callable,
    Generic,
    TypeVar,
)

from .lifecycle import (
    Disposable,
    to_disposable,
)


T = TypeVar('T')


class Emitter(Generic[T]):
    '''
    Relay a value to every subscribed listener, in subscription
    order, synchronously from ``.fire()``.

    A failing listener never stops delivery to the rest; once every
    listener has run the error (or an ``ExceptionGroup`` of them)
    bubbles up to whoever fired the event.

    '''
    def __init__(self) -> None:
        self._listeners: list[Callable[[T], None]] = []

    def event(
        self,
        listener: Callable[[T], None],
    ) -> Disposable:
        '''
        Subscribe ``listener`` and deliver a handle which unsubscribes
        on ``.dispose()``.

        '''
        self._listeners.append(listener)

        def unsubscribe() -> None:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass

        return to_disposable(unsubscribe)

    def fire(
        self,
        value: T,
    ) -> None:
        # copy so listeners may (un)subscribe while being called
        errors: list[Exception] = []
        for listener in list(self._listeners):
            try:
                listener(value)
            except Exception as err:
                errors.append(err)

        if errors:
            if len(errors) == 1:
                raise errors[0]

            raise ExceptionGroup(
                f'{len(errors)} listeners failed',
                errors,
            )

    @property
    def has_listeners(self) -> bool:
        return bool(self._listeners)
