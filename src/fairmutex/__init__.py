#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2025 The fairmutex authors
# SPDX-License-Identifier: ISC

"""
Fair async mutex for Python

This package provides a single primitive, :class:`Mutex`, for coordinating
access to a shared resource among async tasks of one event loop:

* tasks are admitted in strict first-come-first-served order
* ownership passes directly from the releasing task to the next one
* :meth:`Mutex.with_lock` releases the mutex on every way out of the task

Both asyncio and Trio are supported.
"""

__version__: str = "0.1.0"

from . import lowlevel  # noqa: F401
from ._decorator import (
    synchronized as synchronized,
)
from ._mutex import (
    Mutex as Mutex,
)

__all__ = (
    "Mutex",
    "synchronized",
)

# show public names as fairmutex.X in reprs and tracebacks
Mutex.__module__ = __name__
synchronized.__module__ = __name__
