#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2025 The fairmutex authors
# SPDX-License-Identifier: 0BSD

import inspect

from functools import partial, wraps

import pytest

ASYNC_BACKENDS = ("asyncio", "trio")


def _run_decorator(func):
    @wraps(func)
    def wrapper(*args, backend, **kwargs):
        import anyio

        return anyio.run(
            partial(func, *args, backend=backend, **kwargs),
            backend=backend,
        )

    return wrapper


@pytest.fixture(scope="session")
def backend(request):
    pytest.importorskip("anyio")
    pytest.importorskip(request.param)

    return request.param


def pytest_generate_tests(metafunc):
    if "backend" in metafunc.fixturenames:
        metafunc.parametrize("backend", ASYNC_BACKENDS, indirect=True)


def pytest_collection_modifyitems(config, items):
    for item in items:
        if "backend" in item.fixturenames and inspect.iscoroutinefunction(
            item.obj
        ):
            item.obj = _run_decorator(item.obj)
