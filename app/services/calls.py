from __future__ import annotations
import asyncio
from typing import Any, Callable, TypeVar

from starlette.concurrency import run_in_threadpool

T = TypeVar("T")

async def call_bounded(fn: Callable[..., T], *args: Any, timeout_s: float, **kwargs: Any) -> T:
    """Blockierenden Aufruf im Threadpool ausführen, höchstens ``timeout_s`` warten.

    Wirft ``asyncio.TimeoutError``; der Aufrufer ordnet das seinem Fehlertyp zu.
    """
    return await asyncio.wait_for(run_in_threadpool(fn, *args, **kwargs), timeout=timeout_s)
