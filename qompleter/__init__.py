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
qompleter: search-as-you-type pickers with raced fast/slow results.

'''
from .cancellation import (
    CancellationToken,
    CancellationTokenSource,
    open_linked_scope,
)
from .lifecycle import (
    Disposable,
    DisposableStore,
    to_disposable,
)
from .picks import (
    AcceptEvent,
    Button,
    ButtonTriggerEvent,
    Combined,
    Deferred,
    Immediate,
    KeyMods,
    NoPicks,
    Pick,
    PickResultError,
    ProviderOptions,
    Separator,
    TriggerAction,
)
from .picker import (
    MemoryPicker,
    QuickPick,
)
from .provider import (
    PickerProvider,
    PickerSession,
    open_picker_session,
)

__all__ = [
    'AcceptEvent',
    'Button',
    'ButtonTriggerEvent',
    'CancellationToken',
    'CancellationTokenSource',
    'Combined',
    'Deferred',
    'Disposable',
    'DisposableStore',
    'Immediate',
    'KeyMods',
    'MemoryPicker',
    'NoPicks',
    'Pick',
    'PickResultError',
    'PickerProvider',
    'PickerSession',
    'ProviderOptions',
    'QuickPick',
    'Separator',
    'TriggerAction',
    'open_linked_scope',
    'open_picker_session',
    'to_disposable',
]
