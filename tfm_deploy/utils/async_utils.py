# tfm_deploy/utils/async_utils.py
"""Helpers for calling coroutines from synchronous code"""

import asyncio
import threading
from typing import Any, Coroutine, TypeVar

T = TypeVar('T')


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """
    Drive a coroutine to completion and return its result

    Uses ``asyncio.run`` directly unless an event loop is already running in
    this thread, in which case the coroutine gets its own loop on a worker
    thread.

    Args:
        coro: Coroutine to execute
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)

    outcome = {}

    def worker():
        try:
            outcome["value"] = asyncio.run(coro)
        except BaseException as e:
            outcome["error"] = e

    thread = threading.Thread(target=worker, name="tfm-deploy-run-async")
    thread.start()
    thread.join()

    if "error" in outcome:
        raise outcome["error"]
    return outcome["value"]
