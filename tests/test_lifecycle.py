'''
Disposables, their store and event emission.

'''
import logging

import pytest

from qompleter import (
    Disposable,
    DisposableStore,
    to_disposable,
)
from qompleter._event import Emitter


def test_callback_disposable_runs_once():
    calls = []
    d = to_disposable(lambda: calls.append(1))
    assert isinstance(d, Disposable)

    d.dispose()
    d.dispose()
    assert calls == [1]


def test_store_releases_each_entry_exactly_once():
    calls = []
    store = DisposableStore()
    for i in range(3):
        store.add(to_disposable(lambda i=i: calls.append(i)))

    assert len(store) == 3
    store.dispose()
    store.dispose()

    assert sorted(calls) == [0, 1, 2]
    assert store.is_disposed


def test_clear_keeps_store_usable():
    calls = []
    store = DisposableStore()
    store.add(to_disposable(lambda: calls.append('a')))
    store.clear()
    assert calls == ['a']
    assert not store.is_disposed

    store.add(to_disposable(lambda: calls.append('b')))
    store.dispose()
    assert calls == ['a', 'b']


def test_delete_releases_single_entry():
    calls = []
    store = DisposableStore()
    keep = store.add(to_disposable(lambda: calls.append('keep')))
    drop = store.add(to_disposable(lambda: calls.append('drop')))

    store.delete(drop)
    assert calls == ['drop']

    # unknown (or already deleted) entries are ignored
    store.delete(drop)
    assert calls == ['drop']

    store.dispose()
    assert calls == ['drop', 'keep']
    keep.dispose()
    assert calls == ['drop', 'keep']


def test_nested_stores():
    calls = []
    outer = DisposableStore()
    inner = outer.add(DisposableStore())
    inner.add(to_disposable(lambda: calls.append('inner')))

    outer.dispose()
    assert calls == ['inner']
    assert inner.is_disposed


def test_add_after_dispose_releases_immediately(caplog):
    calls = []
    store = DisposableStore()
    store.dispose()

    with caplog.at_level(logging.WARNING):
        store.add(to_disposable(lambda: calls.append(1)))

    assert calls == [1]
    assert len(store) == 0
    assert 'already disposed' in caplog.text


def test_store_refuses_itself():
    store = DisposableStore()
    with pytest.raises(ValueError):
        store.add(store)


def test_release_errors_are_raised_after_all_released():
    calls = []

    def boom():
        calls.append('boom')
        raise RuntimeError('boom')

    store = DisposableStore()
    store.add(to_disposable(boom))
    store.add(to_disposable(lambda: calls.append('ok')))

    with pytest.raises(RuntimeError):
        store.dispose()

    assert calls == ['boom', 'ok']


def test_multiple_release_errors_are_grouped():
    store = DisposableStore()
    for _ in range(2):
        store.add(to_disposable(lambda: 1 / 0))

    with pytest.raises(ExceptionGroup) as excinfo:
        store.clear()

    assert len(excinfo.value.exceptions) == 2


def test_emitter_delivers_in_order_and_unsubscribes():
    emitter = Emitter()
    got = []
    first = emitter.event(lambda v: got.append(('first', v)))
    emitter.event(lambda v: got.append(('second', v)))

    emitter.fire(1)
    first.dispose()
    first.dispose()
    emitter.fire(2)

    assert got == [
        ('first', 1),
        ('second', 1),
        ('second', 2),
    ]
    assert emitter.has_listeners


def test_emitter_listener_errors_bubble():
    emitter = Emitter()

    def broken(value):
        raise KeyError(value)

    emitter.event(broken)
    with pytest.raises(KeyError):
        emitter.fire('x')
