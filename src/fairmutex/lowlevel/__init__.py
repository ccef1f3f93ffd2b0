#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2025 The fairmutex authors
# SPDX-License-Identifier: ISC

"""
Building blocks for the mutex: async library detection and the one-shot
event a queued task waits on.
"""

from ._events import (
    AsyncEvent as AsyncEvent,
    create_async_event as create_async_event,
)
from ._libraries import (
    ASYNC_LIBRARY_DEFAULT as ASYNC_LIBRARY_DEFAULT,
    AsyncLibraryNotFoundError as AsyncLibraryNotFoundError,
    current_async_library as current_async_library,
    current_async_library_tlocal as current_async_library_tlocal,
)
