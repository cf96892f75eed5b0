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
Single-flight cooperative cancellation tokens.

A token is a flag which can be polled (``.is_cancellation_requested``),
listened to (``.on_cancellation_requested()``) or awaited
(``.wait()``). Tokens are minted by a ``CancellationTokenSource`` which
can be chained from a parent token such that cancelling the parent
immediately cancels every (transitive) child.

Unlike a ``trio.CancelScope`` a token never interrupts anything by
itself; holders check it after every suspension point. Use
``open_linked_scope()`` to bridge into a real ``trio`` cancel scope
when long running work should actually be torn down.

'''
from __future__ import annotations
from contextlib import contextmanager as cm
from typing import (
    Callable,
    ClassVar,
    Iterator,
)

import trio

from ._event import Emitter
from .lifecycle import (
    Disposable,
    to_disposable,
)


class CancellationToken:

    NONE: ClassVar[CancellationToken]
    CANCELLED: ClassVar[CancellationToken]

    def __init__(self) -> None:
        self._cancelled: bool = False
        self._emitter: Emitter[None] | None = Emitter()
        self._event: trio.Event | None = None

    def __repr__(self) -> str:
        return (
            f'{type(self).__name__}'
            f'(cancelled={self._cancelled})'
        )

    @property
    def is_cancellation_requested(self) -> bool:
        return self._cancelled

    def on_cancellation_requested(
        self,
        listener: Callable[[], None],
    ) -> Disposable:
        '''
        Call ``listener`` once when cancellation is requested; if it
        already was the listener is called right away.

        '''
        if self._cancelled:
            listener()
            return to_disposable(lambda: None)

        return self._emitter.event(lambda _: listener())

    async def wait(self) -> None:
        '''
        Block the calling task until cancellation is requested.

        '''
        if self._cancelled:
            return

        if self._event is None:
            self._event = trio.Event()

        await self._event.wait()

    def _cancel(self) -> None:
        if self._cancelled:
            return

        self._cancelled = True
        emitter, self._emitter = self._emitter, None
        try:
            emitter.fire(None)
        finally:
            if self._event is not None:
                self._event.set()


CancellationToken.NONE = CancellationToken()
CancellationToken.CANCELLED = CancellationToken()
CancellationToken.CANCELLED._cancel()


class CancellationTokenSource:
    '''
    Owner (and only canceller) of a single token, optionally chained
    from a parent token.

    '''
    def __init__(
        self,
        parent: CancellationToken | None = None,
    ) -> None:
        self._token = CancellationToken()
        self._parent_listener: Disposable | None = None
        if parent is not None:
            self._parent_listener = parent.on_cancellation_requested(
                self.cancel
            )

    @property
    def token(self) -> CancellationToken:
        return self._token

    def cancel(self) -> None:
        self._token._cancel()

    def dispose(
        self,
        cancel: bool = False,
    ) -> None:
        '''
        Unlink from any parent token and (optionally) cancel.

        '''
        if cancel:
            self.cancel()

        listener, self._parent_listener = self._parent_listener, None
        if listener is not None:
            listener.dispose()


@cm
def open_linked_scope(
    token: CancellationToken,

) -> Iterator[trio.CancelScope]:
    '''
    Open a ``trio.CancelScope`` which is cancelled as soon as
    ``token`` is.

    Any work inside the block is then torn down by ``trio`` and the
    block exits silently (check ``cs.cancelled_caught`` after if you
    care).

    '''
    with trio.CancelScope() as cs:
        sub = token.on_cancellation_requested(cs.cancel)
        try:
            yield cs
        finally:
            sub.dispose()
