#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2025 The fairmutex authors
# SPDX-License-Identifier: ISC

from __future__ import annotations

import sys

from inspect import iscoroutinefunction
from typing import TYPE_CHECKING, Any, TypeVar

from wrapt import decorator

if sys.version_info >= (3, 9):
    from collections.abc import Callable
else:
    from typing import Callable

if TYPE_CHECKING:
    from types import TracebackType

    from ._mutex import Mutex

    if sys.version_info >= (3, 11):
        from typing import Self
    else:
        from typing_extensions import Self

_CallableT = TypeVar("_CallableT", bound=Callable[..., Any])


class _MutexSynchronizer:
    __slots__ = (
        "_async_synchronized",
        "_mutex",
    )

    def __init__(self, /, mutex: Mutex) -> None:
        self._mutex = mutex

        @decorator
        async def _async_synchronized(wrapped, instance, args, kwargs, /):
            return await mutex.with_lock(wrapped, *args, **kwargs)

        self._async_synchronized = _async_synchronized

    async def __aenter__(self, /) -> Self:
        await self._mutex.acquire()

        return self

    async def __aexit__(
        self,
        /,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self._mutex.release()

    def __call__(self, wrapped: _CallableT, /) -> _CallableT:
        if not iscoroutinefunction(wrapped):
            msg = f"a coroutine function was expected, got {wrapped!r}"
            raise TypeError(msg)

        return self._async_synchronized(wrapped)


def synchronized(mutex: Mutex, /) -> _MutexSynchronizer:
    """
    Return a decorator that runs every call of a coroutine function under
    *mutex*, as if via :meth:`Mutex.with_lock`.

    The returned object can also be used as an async context manager for the
    same mutex.

    Raises:
      TypeError:
        if the decorated object is not a coroutine function.

    Example:
      >>> mutex = Mutex()
      >>> @synchronized(mutex)
      ... async def append_item(items, item):
      ...     items.append(item)
    """

    return _MutexSynchronizer(mutex)
