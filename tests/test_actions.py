'''
Accept and item button dispatch.

'''
import logging

import pytest
import trio

from qompleter import (
    AcceptEvent,
    Button,
    CancellationTokenSource,
    Immediate,
    KeyMods,
    MemoryPicker,
    Pick,
    PickerProvider,
    Separator,
    TriggerAction,
    open_picker_session,
)


class StaticProvider(PickerProvider):
    '''
    Always the same picks, counting how often we were asked.

    '''
    def __init__(self, *picks, **kwargs) -> None:
        super().__init__(**kwargs)
        self.picks = list(picks)
        self.asked: int = 0

    def get_picks(self, filter, disposables, token):
        self.asked += 1
        return Immediate(picks=self.picks)


@pytest.mark.parametrize(
    'in_background,hidden_on_accept',
    [
        (False, True),
        (True, False),
    ],
)
def test_accept_hides_unless_in_background(
    run,
    in_background,
    hidden_on_accept,
):
    picker = MemoryPicker()
    calls = []

    def accept(key_mods, event):
        calls.append((key_mods, event, picker.hidden))

    pick = Pick(label='A', accept=accept)
    provider = StaticProvider(pick)

    async def main():
        async with open_picker_session(provider, picker):
            picker.key_mods = KeyMods(ctrl_cmd=True)
            picker.select(pick)
            picker.accept(in_background=in_background)

        assert calls == [(
            KeyMods(ctrl_cmd=True),
            AcceptEvent(in_background=in_background),
            hidden_on_accept,
        )]
        assert picker.hidden is hidden_on_accept

    run(main)


def test_accept_without_capability_is_noop(run):
    pick = Pick(label='inert')
    provider = StaticProvider(pick)
    picker = MemoryPicker()

    async def main():
        async with open_picker_session(provider, picker):
            # nothing selected
            picker.accept()
            assert not picker.hidden

            picker.select(pick)
            picker.accept()
            assert not picker.hidden

    run(main)


def test_only_first_selected_item_is_accepted(run):
    accepted = []
    first = Pick(label='first', accept=lambda *_: accepted.append('first'))
    second = Pick(label='second', accept=lambda *_: accepted.append('second'))
    provider = StaticProvider(first, second)
    picker = MemoryPicker()

    async def main():
        async with open_picker_session(provider, picker):
            picker.select(first, second)
            picker.accept()

        assert accepted == ['first']

    run(main)


def test_async_accept_runs_in_session(run):
    done = trio.Event()

    async def accept(key_mods, event):
        await trio.sleep(0.1)
        done.set()

    pick = Pick(label='A', accept=accept)
    provider = StaticProvider(pick)
    picker = MemoryPicker()

    async def main():
        async with open_picker_session(provider, picker):
            picker.select(pick)
            picker.accept(in_background=True)
            with trio.fail_after(1):
                await done.wait()

    run(main)


@pytest.mark.parametrize(
    'action,hidden,asked',
    [
        (TriggerAction.NO_ACTION, False, 1),
        (TriggerAction.CLOSE_PICKER, True, 1),
        (TriggerAction.REFRESH_PICKER, False, 2),
    ],
    ids=lambda param: getattr(param, 'name', str(param)),
)
def test_trigger_action_dispatch(run, action, hidden, asked):
    button = Button(icon='gear')
    triggered = []

    def trigger(button_index, key_mods):
        triggered.append((button_index, key_mods))
        return action

    pick = Pick(
        label='A',
        buttons=(Button(icon='x'), button),
        trigger=trigger,
    )
    provider = StaticProvider(pick)
    picker = MemoryPicker()

    async def main():
        async with open_picker_session(provider, picker):
            picker.trigger_item_button(pick, button)

        assert triggered == [(1, KeyMods())]
        assert picker.hidden is hidden
        assert provider.asked == asked

    run(main)


def test_async_trigger_refreshes_after_resolving(run):
    button = Button(icon='reload')

    async def trigger(button_index, key_mods):
        await trio.sleep(0.1)
        return TriggerAction.REFRESH_PICKER

    pick = Pick(label='A', buttons=(button,), trigger=trigger)
    provider = StaticProvider(pick)
    picker = MemoryPicker()

    async def main():
        start = trio.current_time()
        async with open_picker_session(provider, picker):
            picker.trigger_item_button(pick, button)
            assert provider.asked == 1
            await trio.sleep(1)

        assert provider.asked == 2
        assert [round(ts - start, 3) for ts, _ in picker.paints] == [0, 0.1]
        assert not picker.hidden

    run(main)


def test_trigger_result_dropped_once_session_cancelled(run):
    button = Button(icon='x')

    async def trigger(button_index, key_mods):
        await trio.sleep(0.1)
        return TriggerAction.CLOSE_PICKER

    pick = Pick(label='A', buttons=(button,), trigger=trigger)
    provider = StaticProvider(pick)
    picker = MemoryPicker()
    parent = CancellationTokenSource()

    async def main():
        async with open_picker_session(
            provider,
            picker,
            token=parent.token,
        ):
            picker.trigger_item_button(pick, button)
            await trio.sleep(0.05)
            parent.cancel()
            await trio.sleep(1)

        assert not picker.hidden

    run(main)


def test_unknown_button_is_ignored(run, caplog):
    triggered = []
    pick = Pick(
        label='A',
        buttons=(Button(icon='x'),),
        trigger=lambda *args: triggered.append(args),
    )
    provider = StaticProvider(pick)
    picker = MemoryPicker()

    async def main():
        async with open_picker_session(provider, picker):
            with caplog.at_level(logging.WARNING):
                # equal but not the same button
                picker.trigger_item_button(pick, Button(icon='x'))

    run(main)

    assert triggered == []
    assert not picker.hidden
    assert any(
        'is not a button of' in record.message
        for record in caplog.records
    )


def test_trigger_without_capability_is_noop(run):
    button = Button(icon='x')
    pick = Pick(label='A', buttons=(button,))
    provider = StaticProvider(pick)
    picker = MemoryPicker()

    async def main():
        async with open_picker_session(provider, picker):
            picker.trigger_item_button(pick, button)

        assert not picker.hidden
        assert provider.asked == 1

    run(main)


def test_accepting_separator_is_noop(run):
    sep = Separator(label='group')
    provider = StaticProvider(sep)
    picker = MemoryPicker()

    async def main():
        async with open_picker_session(provider, picker):
            picker.select(sep)
            picker.accept()

        assert not picker.hidden

    run(main)


def test_provide_and_close_on_trigger(run):
    button = Button(icon='x')

    async def trigger(button_index, key_mods):
        await trio.sleep(0.1)
        return TriggerAction.CLOSE_PICKER

    pick = Pick(label='A', buttons=(button,), trigger=trigger)
    provider = StaticProvider(pick)
    picker = MemoryPicker()

    async def main():
        start = trio.current_time()
        async with provider.provide(picker) as session:
            assert session.provider is provider
            assert picker.items == [pick]

            picker.trigger_item_button(pick, button)
            await picker.wait_hidden()

        assert round(trio.current_time() - start, 3) == 0.1
        assert picker.hidden

    run(main)
