"""Utilities to execute coroutines on the main asyncio loop from sync contexts.

Flask handlers run in WSGI worker threads while every service coroutine and
every per-location lock belongs to one loop; handlers hand their work to that
loop and block on the result.
"""

from __future__ import annotations

import asyncio
import threading
from typing import Awaitable, Optional, TypeVar


_loop: Optional[asyncio.AbstractEventLoop] = None
T = TypeVar("T")


def set_main_loop(loop: Optional[asyncio.AbstractEventLoop]) -> None:
    global _loop
    _loop = loop


def get_main_loop() -> asyncio.AbstractEventLoop:
    if _loop is None:
        raise RuntimeError("Asyncio loop is not initialized")
    return _loop


def run_coroutine_sync(coro: Awaitable[T], timeout: Optional[float] = None) -> T:
    future = asyncio.run_coroutine_threadsafe(coro, get_main_loop())
    return future.result(timeout)


class BackgroundLoop:
    """An event loop running forever in a daemon thread.

    Used when the WSGI server owns the main thread (``run_flask.py``) and by
    the HTTP tests.
    """

    def __init__(self) -> None:
        self.loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._run, name="promotion-loop", daemon=True)

    def _run(self) -> None:
        asyncio.set_event_loop(self.loop)
        self.loop.run_forever()

    def start(self) -> asyncio.AbstractEventLoop:
        self._thread.start()
        set_main_loop(self.loop)
        return self.loop

    def stop(self) -> None:
        self.loop.call_soon_threadsafe(self.loop.stop)
        self._thread.join()
        self.loop.close()
        if _loop is self.loop:
            set_main_loop(None)
