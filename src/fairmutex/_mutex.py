#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2025 The fairmutex authors
# SPDX-License-Identifier: ISC

from __future__ import annotations

import sys

from collections import deque
from contextlib import suppress
from inspect import isawaitable
from logging import Logger, getLogger
from typing import TYPE_CHECKING, Any, Final, TypeVar

from .lowlevel import create_async_event

if TYPE_CHECKING:
    from types import TracebackType

    if sys.version_info >= (3, 9):
        from collections.abc import Awaitable, Callable
    else:
        from typing import Awaitable, Callable

    if sys.version_info >= (3, 11):
        from typing import Self
    else:
        from typing_extensions import Self

LOGGER: Final[Logger] = getLogger(__name__)

_T = TypeVar("_T")


class Mutex:
    """
    A fair, non-reentrant mutex for async tasks.

    The mutex is granted to waiting tasks in strict first-come-first-served
    order, and ownership is passed directly from the releasing task to the
    next one, so the mutex is never observed as unlocked in between.

    There is no notion of an owner: any task can release the mutex, and a
    task that already holds it and acquires it again will wait for someone
    else to release it.

    Example:
      >>> mutex = Mutex()
      >>> async def add_item(items, item):
      ...     async with mutex:
      ...         items.append(await fetch(item))
    """

    __slots__ = (
        "__weakref__",
        "_held",
        "_waiters",
    )

    def __new__(cls, /) -> Self:
        """
        Create a new mutex in the unlocked state.
        """

        self = object.__new__(cls)

        self._held = False
        self._waiters = deque()

        return self

    def __getnewargs__(self, /) -> tuple[Any, ...]:
        """
        Returns arguments that can be used to create new instances with the
        same initial values.

        Used by:

        * The :mod:`pickle` module for pickling.
        * The :mod:`copy` module for copying.

        The current state does not affect the arguments.

        Example:
            >>> orig = Mutex()
            >>> copy = Mutex(*orig.__getnewargs__())
        """

        return ()

    def __getstate__(self, /) -> None:
        """
        Disables the use of internal state for pickling and copying.
        """

        return None

    def __copy__(self, /) -> Self:
        """..."""

        return self.__class__()

    def __repr__(self, /) -> str:
        """..."""

        cls = self.__class__
        cls_repr = f"{cls.__module__}.{cls.__qualname__}"

        object_repr = f"{cls_repr}()"

        if self._held:
            extra = f"locked, waiting={len(self._waiters)}"
        else:
            extra = "unlocked"

        return f"<{object_repr} at {id(self):#x} [{extra}]>"

    def __bool__(self, /) -> bool:
        """
        Returns :data:`True` if the mutex is held by any task.

        Used by the standard :ref:`truth testing procedure <truth>`.

        Example:
            >>> writing = Mutex()
            >>> bool(writing)
            False
            >>> async with writing:  # mutex is in use
            ...     bool(writing)
            True
            >>> bool(writing)
            False
        """

        return self._held

    async def __aenter__(self, /) -> Self:
        """..."""

        await self.acquire()

        return self

    async def __aexit__(
        self,
        /,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        """..."""

        self.release()

    def try_acquire(self, /) -> bool:
        """
        Acquire the mutex only if it is unlocked.

        Never suspends and never joins the waiting queue. Returns
        :data:`False` whenever the mutex is held, even if no one is waiting.
        """

        if self._held:
            return False

        self._held = True

        return True

    async def acquire(self, /) -> None:
        """
        Acquire the mutex, waiting in line if it is held.

        Returns without suspending if the mutex is unlocked. Otherwise, the
        current task is put at the end of the waiting queue and resumes once
        a :meth:`release` call hands the mutex over to it.

        If the task is cancelled while waiting, it leaves the queue. If it is
        cancelled after the mutex has already been handed over to it, the
        mutex is released on its behalf before the cancellation propagates.
        """

        if self.try_acquire():
            return

        self._waiters.append(event := create_async_event())

        success = False

        try:
            success = await event
        finally:
            if not success:
                if event.cancelled():
                    # release() may have popped it already
                    with suppress(ValueError):
                        self._waiters.remove(event)
                else:
                    self.release()

    def release(self, /) -> None:
        """
        Release the mutex.

        If there are waiting tasks, the mutex is handed over to the first of
        them and stays locked. Otherwise, it becomes unlocked.

        Releasing an unlocked mutex does nothing.
        """

        waiters = self._waiters

        while waiters:
            event = waiters.popleft()

            if event.set():
                return

            LOGGER.debug("skipped a cancelled waiter of %r", self)

        if not self._held:
            LOGGER.debug("released an unlocked %r", self)

        self._held = False

    async def with_lock(
        self,
        task: Callable[..., Awaitable[_T] | _T],
        /,
        *args: Any,
        **kwargs: Any,
    ) -> _T:
        """
        Call *task* while holding the mutex and return its result.

        *task* can be a regular function or a coroutine function. The mutex
        is released exactly once on every way out of the call, including
        exceptions and cancellation, and the exception (if any) propagates
        unchanged.

        Example:
            >>> mutex = Mutex()
            >>> await mutex.with_lock(lambda: 'ok')
            'ok'
        """

        if not self.try_acquire():
            await self.acquire()

        try:
            result = task(*args, **kwargs)

            if isawaitable(result):
                result = await result

            return result
        finally:
            self.release()

    def try_lock(self, /) -> bool:
        """
        Same as :meth:`try_acquire`.
        """

        return self.try_acquire()

    async def lock(self, /) -> None:
        """
        Same as :meth:`acquire`.
        """

        await self.acquire()

    def unlock(self, /) -> None:
        """
        Same as :meth:`release`.
        """

        self.release()

    def locked(self, /) -> bool:
        """
        Return :data:`True` if anyone holds the mutex.

        Example:
            >>> import asyncio
            >>> async def hold_the_mutex():
            ...     async with mutex:
            ...         await asyncio.sleep(3600)
            >>> mutex = Mutex()
            >>> mutex.locked()
            False
            >>> task = asyncio.create_task(hold_the_mutex())
            >>> await asyncio.sleep(0)
            >>> mutex.locked()
            True
        """

        return self._held

    @property
    def waiting(self, /) -> int:
        """
        The current number of tasks waiting to acquire.

        It represents the length of the waiting queue and thus changes
        immediately.
        """

        return len(self._waiters)
