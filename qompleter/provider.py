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
Picker providers and the session machinery which races their fast
and slow results into a picker as the user types.

Every change of the picker's value starts a new "update cycle" which
supersedes (cancels) the prior one. Nothing in flight is ever aborted
for this; instead each cycle owns a token which it checks after
*every* suspension point and simply walks away (without touching the
picker) if a newer cycle has taken over.

'''
from __future__ import annotations
from contextlib import (
    AbstractAsyncContextManager,
    asynccontextmanager as acm,
)
import inspect
from typing import (
    AsyncIterator,
    Awaitable,
)

import trio

from .cancellation import (
    CancellationToken,
    CancellationTokenSource,
)
from .lifecycle import DisposableStore
from .log import get_logger
from .picker import QuickPick
from .picks import (
    AcceptEvent,
    ButtonTriggerEvent,
    Combined,
    Deferred,
    Immediate,
    NoPicks,
    Pick,
    PickResult,
    PickResultError,
    ProviderOptions,
    TriggerAction,
    resolve,
)


log = get_logger(__name__)


class PickerProvider:
    '''
    Base for anything which can fill a picker with picks for a query.

    Subclasses implement ``.get_picks()`` and are responsible for all
    filtering and sorting of their results; the picker's built-in
    matching is disabled while a session runs.

    '''
    # timeout before we accept fast results before slow results are
    # present
    fast_picks_race_delay: float = 0.2

    def __init__(
        self,
        prefix: str = '',
        options: ProviderOptions | None = None,
    ) -> None:
        self.prefix = prefix
        self.options = options or ProviderOptions()

    def get_picks(
        self,
        filter: str,
        disposables: DisposableStore,
        token: CancellationToken,

    ) -> PickResult | None:
        '''
        Return the picks for ``filter`` either directly (``Immediate``),
        deferred (``Deferred``) or as combined fast and slow results
        (``Combined``). Return ``NoPicks()`` (or ``None``) to signal
        that no change in picks is needed.

        ``disposables`` can be used to register resources which should
        be released once this query's results are superseded (or the
        picker closes). For long running tasks implementors need to
        check ``token`` for cancellation.

        NOTE: a cycle's ``disposables`` are released as soon as the
        next cycle starts, even when that cycle returns ``NoPicks()``
        and the prior items stay on screen. Resources backing the
        shown picks must be re-registered with the new store.

        '''
        raise NotImplementedError

    def provide(
        self,
        picker: QuickPick,
        token: CancellationToken | None = None,
    ) -> AbstractAsyncContextManager[PickerSession]:
        '''
        Attach this provider to ``picker``, see
        ``open_picker_session()``.

        '''
        return open_picker_session(
            self,
            picker,
            token=token,
        )


class PickerSession:
    '''
    Drive a single picker "lifetime" for a provider: update cycles on
    every value change plus accept and item button dispatch.

    '''
    def __init__(
        self,
        provider: PickerProvider,
        picker: QuickPick,
        nursery: trio.Nursery,
        token: CancellationToken | None = None,
    ) -> None:
        self.provider = provider
        self.picker = picker
        self._n = nursery

        self._cts = CancellationTokenSource(token)
        self.disposables = DisposableStore()

        # the current (and only non-cancelled) cycle's token source and
        # scoped resources.
        self._picks_cts: CancellationTokenSource | None = None
        self._picks_disposables: DisposableStore | None = None

        self.cycles: int = 0

    @property
    def token(self) -> CancellationToken:
        return self._cts.token

    @property
    def filter(self) -> str:
        return self.picker.value[len(self.provider.prefix):].strip()

    def start(self) -> None:
        picker = self.picker
        log.debug(
            f'Opening {type(self.provider).__name__} session with\n'
            f'{self.provider.options.pformat()}'
        )

        # apply options if any
        picker.can_accept_in_background = bool(
            self.provider.options.can_accept_in_background
        )

        # disable filtering & sorting, we control the results
        picker.match_on_label = False
        picker.match_on_description = False
        picker.match_on_detail = False
        picker.sort_by_label = False

        # set initial picks and update on type
        self.disposables.add(
            picker.on_did_change_value(
                lambda _: self.update_picker_items()
            )
        )
        self.disposables.add(
            picker.on_did_accept(self._on_accept)
        )
        self.disposables.add(
            picker.on_did_trigger_item_button(
                self._on_trigger_item_button
            )
        )
        self.update_picker_items()

    def close(self) -> None:
        # cancels every cycle token chained from ours as well
        self._cts.dispose(cancel=True)
        self.disposables.dispose()

    def update_picker_items(self) -> None:
        '''
        Start a new update cycle, superseding any in flight.

        Everything up to (and including) an ``Immediate`` paint happens
        synchronously in the caller; only the awaiting of deferred
        picks is handed off to a session task.

        '''
        picker = self.picker

        # cancel any previous ask for picks and busy
        if self._picks_cts is not None:
            self._picks_cts.dispose(cancel=True)
        picker.busy = False

        if self._picks_disposables is not None:
            self.disposables.delete(self._picks_disposables)

        # create new cancellation source for this run
        self._picks_cts = cts = CancellationTokenSource(self.token)
        token = cts.token
        self._picks_disposables = store = self.disposables.add(
            DisposableStore()
        )

        self.cycles += 1
        filter: str = self.filter
        log.debug(f'Update cycle #{self.cycles} for {filter!r}')

        res = self.provider.get_picks(filter, store, token)
        match res:

            # provider says nothing changed
            case None | NoPicks():
                pass

            case Immediate(picks=picks):
                picker.items = picks

            case Deferred():
                picker.busy = True
                self._n.start_soon(
                    self._fill_deferred_picks,
                    res,
                    token,
                )

            case Combined():
                picker.busy = True
                self._n.start_soon(
                    self._race_fast_and_slow_picks,
                    res,
                    token,
                )

            case _:
                raise PickResultError(
                    f'{type(self.provider).__name__}.get_picks() '
                    f'delivered an unknown result: {res!r}'
                )

    async def _fill_deferred_picks(
        self,
        res: Deferred,
        token: CancellationToken,
    ) -> None:
        picker = self.picker
        try:
            items = await resolve(res.picks)
            if token.is_cancellation_requested:
                log.debug('Dropping stale deferred picks')
                return

            picker.items = items

        finally:
            # a newer cycle owns the busy indicator once we're
            # cancelled
            if not token.is_cancellation_requested:
                picker.busy = False

    async def _race_fast_and_slow_picks(
        self,
        res: Combined,
        token: CancellationToken,
    ) -> None:
        '''
        To reduce the amount of flicker we race the slow picks against
        a short delay and only then show the fast picks. If the slow
        picks win the items are only set once, fast and slow together.

        '''
        picker = self.picker
        fast_done: bool = False
        slow_done: bool = False

        async def fast_picks() -> None:
            nonlocal fast_done
            try:
                await trio.sleep(self.provider.fast_picks_race_delay)
                if token.is_cancellation_requested:
                    return

                if not slow_done:
                    picker.items = res.fast

            finally:
                fast_done = True

        async def slow_picks() -> None:
            nonlocal slow_done
            try:
                additional = await resolve(res.slow)
                if token.is_cancellation_requested:
                    log.debug('Dropping stale slow picks')
                    return

                # only repaint after the fast picks are up if there's
                # actually something more to show
                if (
                    len(additional) > 0
                    or not fast_done
                ):
                    picker.items = [*res.fast, *additional]

            finally:
                if not token.is_cancellation_requested:
                    picker.busy = False

                slow_done = True

        async with trio.open_nursery() as n:
            n.start_soon(fast_picks)
            n.start_soon(slow_picks)

    def _on_accept(
        self,
        event: AcceptEvent,
    ) -> None:
        picker = self.picker
        if not picker.selected_items:
            return

        item = picker.selected_items[0]
        if (
            not isinstance(item, Pick)
            or item.accept is None
        ):
            return

        accept = item.accept

        if not event.in_background:
            # hide picker unless we accept in background
            picker.hide()

        result = accept(picker.key_mods, event)
        if inspect.isawaitable(result):
            self._n.start_soon(_await, result)

    def _on_trigger_item_button(
        self,
        event: ButtonTriggerEvent,
    ) -> None:
        item = event.item
        if item.trigger is None:
            return

        button_index: int = item.button_index(event.button)
        if button_index < 0:
            log.warning(
                f'{event.button!r} is not a button of {item.label!r}?'
            )
            return

        result = item.trigger(button_index, self.picker.key_mods)
        if inspect.isawaitable(result):
            self._n.start_soon(self._await_trigger_action, result)
        else:
            self._handle_trigger_action(result)

    async def _await_trigger_action(
        self,
        result: Awaitable[TriggerAction],
    ) -> None:
        self._handle_trigger_action(await result)

    def _handle_trigger_action(
        self,
        action: TriggerAction,
    ) -> None:
        if self.token.is_cancellation_requested:
            log.debug(f'Session closed, dropping {action}')
            return

        match action:
            case TriggerAction.NO_ACTION:
                pass

            case TriggerAction.CLOSE_PICKER:
                log.info('Item trigger closed the picker')
                self.picker.hide()

            case TriggerAction.REFRESH_PICKER:
                log.info('Item trigger refreshed the picker')
                self.update_picker_items()

            case _:
                log.warning(f'Unknown trigger action {action!r}?')


async def _await(aw: Awaitable) -> None:
    await aw


@acm
async def open_picker_session(
    provider: PickerProvider,
    picker: QuickPick,
    token: CancellationToken | None = None,

) -> AsyncIterator[PickerSession]:
    '''
    Attach ``provider`` to ``picker`` for the lifetime of the block.

    The first update cycle is run eagerly on entry. On exit all
    cycles and trigger continuations are cancelled, any session
    tasks still in flight are torn down and all resources registered
    by the provider are released.

    '''
    async with trio.open_nursery() as n:
        session = PickerSession(
            provider,
            picker,
            n,
            token=token,
        )
        try:
            session.start()
            yield session

        finally:
            session.close()
            n.cancel_scope.cancel()
