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
Disposables: explicit "release this later" handles and a store to
tear a bunch of them down together.

'''
from __future__ import annotations
from typing import (
    Callable,
    Protocol,
    TypeVar,
    runtime_checkable,
)

from .log import get_logger


log = get_logger(__name__)


@runtime_checkable
class Disposable(Protocol):
    '''
    Anything which can release its resources with a (sync) call.

    '''
    def dispose(self) -> None:
        ...


D = TypeVar('D', bound=Disposable)


class _CallbackDisposable:
    '''
    Wrap a plain release callback, only ever calling it once.

    '''
    def __init__(
        self,
        release: Callable[[], None],
    ) -> None:
        self._release = release

    def dispose(self) -> None:
        release, self._release = self._release, None
        if release is not None:
            release()


def to_disposable(
    release: Callable[[], None],
) -> Disposable:
    return _CallbackDisposable(release)


class DisposableStore:
    '''
    A registry of cleanup actions invoked together on teardown.

    Each registered disposable is released exactly once: either via
    ``.delete()``, ``.clear()`` or the final ``.dispose()``. Once
    disposed the store stays usable but anything added afterwards is
    released immediately since nothing would ever tear it down.

    '''
    def __init__(self) -> None:
        self._disposables: list[Disposable] = []
        self._disposed: bool = False

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def __len__(self) -> int:
        return len(self._disposables)

    def add(
        self,
        disposable: D,
    ) -> D:
        if disposable is self:
            raise ValueError('Can not register a store with itself!')

        if self._disposed:
            log.warning(
                f'Adding {disposable!r} to an already disposed store, '
                'releasing it immediately!'
            )
            disposable.dispose()
        else:
            self._disposables.append(disposable)

        return disposable

    def delete(
        self,
        disposable: Disposable,
    ) -> None:
        '''
        Release a single entry and forget about it.

        '''
        try:
            self._disposables.remove(disposable)
        except ValueError:
            # not ours (anymore), nothing to release
            return

        disposable.dispose()

    def clear(self) -> None:
        '''
        Release all entries but keep the store open for more.

        '''
        disposables, self._disposables = self._disposables, []
        errors: list[Exception] = []
        for disposable in disposables:
            try:
                disposable.dispose()
            except Exception as err:
                errors.append(err)

        if errors:
            if len(errors) == 1:
                raise errors[0]

            raise ExceptionGroup(
                f'Failed to release {len(errors)} disposables',
                errors,
            )

    def dispose(self) -> None:
        if self._disposed:
            return

        self._disposed = True
        self.clear()
