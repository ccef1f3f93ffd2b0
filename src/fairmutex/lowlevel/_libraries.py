#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2025 The fairmutex authors
# SPDX-License-Identifier: ISC

from __future__ import annotations

import os
import sys

from typing import TYPE_CHECKING, Final, Literal

import sniffio

from sniffio import AsyncLibraryNotFoundError as AsyncLibraryNotFoundError

if sys.version_info >= (3, 11):
    from typing import overload
else:
    from typing_extensions import overload

if TYPE_CHECKING:
    from sniffio._impl import _ThreadLocal

# used when nothing else is detected, e.g. under a custom runner
ASYNC_LIBRARY_DEFAULT: Final[str | None] = (
    os.getenv("FAIRMUTEX_ASYNC_LIBRARY") or None
)

current_async_library_tlocal: _ThreadLocal = sniffio.thread_local


@overload
def current_async_library(*, failsafe: Literal[False] = False) -> str: ...
@overload
def current_async_library(*, failsafe: Literal[True]) -> str | None: ...
def current_async_library(*, failsafe=False):
    """
    Detect which async library is currently running.

    Detection is delegated to :func:`sniffio.current_async_library`, so
    setting :data:`current_async_library_tlocal` ``.name`` overrides it. If
    nothing is detected, the value of the ``FAIRMUTEX_ASYNC_LIBRARY``
    environment variable is used, if set.

    Args:
      failsafe:
        Unless set to :data:`True`, the function will raise an exception when
        there is no current async library. Otherwise the function returns
        :data:`None` in that case.

    Returns:
      A string like ``"trio"`` or :data:`None`.

    Raises:
      AsyncLibraryNotFoundError:
        if the current async library was not recognized.
    """

    try:
        return sniffio.current_async_library()
    except AsyncLibraryNotFoundError:
        if ASYNC_LIBRARY_DEFAULT is not None:
            return ASYNC_LIBRARY_DEFAULT

        if failsafe:
            return None

        raise
