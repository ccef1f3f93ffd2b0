#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2025 The fairmutex authors
# SPDX-License-Identifier: ISC

from __future__ import annotations

import sys

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, NoReturn

from ._libraries import current_async_library

if TYPE_CHECKING:
    if sys.version_info >= (3, 9):
        from collections.abc import Callable, Generator
    else:
        from typing import Callable, Generator


class AsyncEvent(ABC):
    """
    A one-shot event that resumes at most one waiting task.

    Awaiting returns :data:`True` once the event is set, and :data:`False`
    if an earlier wait on it was cancelled. A cancelled wait raises the
    cancellation exception as usual and marks the event as cancelled, after
    which it can no longer be set.
    """

    __slots__ = ()

    @abstractmethod
    def __await__(self, /) -> Generator[Any, Any, bool]:
        """..."""

        raise NotImplementedError

    @abstractmethod
    def __bool__(self, /) -> bool:
        """..."""

        return self.is_set()

    @abstractmethod
    def set(self, /) -> bool:
        """
        Set the event and wake up the waiting task, if any.

        Returns :data:`True` only for the call that actually set the event,
        and :data:`False` if it was already set or its waiter was cancelled,
        including a cancellation that the waiting task has not yet observed.
        """

        raise NotImplementedError

    @abstractmethod
    def is_set(self, /) -> bool:
        """..."""

        raise NotImplementedError

    @abstractmethod
    def cancelled(self, /) -> bool:
        """..."""

        raise NotImplementedError


class _AsyncEventImpl(AsyncEvent):
    __slots__ = (
        "_is_cancelled",
        "_is_set",
        "_is_used",
        "_wake",
    )

    def __init__(self, /) -> None:
        self._is_cancelled = False
        self._is_set = False
        self._is_used = False

        # returns False if the waiter turned out to be cancelled
        self._wake: Callable[[], bool] | None = None

    def __reduce__(self, /) -> NoReturn:
        msg = f"cannot reduce {self!r}"
        raise TypeError(msg)

    def __repr__(self, /) -> str:
        cls_repr = "fairmutex.lowlevel.AsyncEvent"

        if self._is_set:
            state = "set"
        elif self._is_cancelled:
            state = "cancelled"
        else:
            state = "unset"

        return f"<{cls_repr} object at {id(self):#x}: {state}>"

    def __bool__(self, /) -> bool:
        return self._is_set

    def __await__(self, /) -> Generator[Any, Any, bool]:
        if self._is_set:
            return True

        if self._is_cancelled:
            return False

        if self._is_used:
            msg = "this event is already in use"
            raise RuntimeError(msg)

        library = current_async_library()

        if library == "asyncio":
            waiting = self._wait_asyncio()
        elif library == "trio":
            waiting = self._wait_trio()
        else:
            msg = f"unsupported async library {library!r}"
            raise RuntimeError(msg)

        self._is_used = True

        try:
            yield from waiting
        finally:
            self._wake = None

            if not self._is_set:
                self._is_cancelled = True

        return True

    def _wait_asyncio(self, /) -> Generator[Any, Any, None]:
        from asyncio import get_running_loop

        future = get_running_loop().create_future()

        def wake():
            # Task.cancel() cancels the awaited future right away
            if future.cancelled():
                return False

            future.set_result(True)

            return True

        self._wake = wake

        yield from future.__await__()

    def _wait_trio(self, /) -> Generator[Any, Any, None]:
        from trio.lowlevel import (
            Abort,
            current_task,
            reschedule,
            wait_task_rescheduled,
        )

        task = current_task()

        def wake():
            reschedule(task)

            return True

        def abort(raise_cancel):
            # trio has already rescheduled the task with Cancelled, so it
            # must not be rescheduled once more
            self._wake = None
            self._is_cancelled = True

            return Abort.SUCCEEDED

        self._wake = wake

        yield from wait_task_rescheduled(abort).__await__()

    def set(self, /) -> bool:
        if self._is_set or self._is_cancelled:
            return False

        if (wake := self._wake) is not None and not wake():
            self._is_cancelled = True

            return False

        self._is_set = True

        return True

    def is_set(self, /) -> bool:
        return self._is_set

    def cancelled(self, /) -> bool:
        return self._is_cancelled


def create_async_event() -> AsyncEvent:
    """
    Create a new unset one-shot event.

    The event binds to the current async library on the first await, so it
    can be created outside of a running event loop. Setting it must happen
    in the thread that runs the waiting task.
    """

    return _AsyncEventImpl()
