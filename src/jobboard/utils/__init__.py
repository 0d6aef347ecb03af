"""Shared helpers for the job board services."""

import asyncio
from concurrent.futures import ThreadPoolExecutor

# Thread pool for blocking I/O (outbound HTTP calls)
_executor = ThreadPoolExecutor(max_workers=10)


async def run_blocking(func, *args, **kw):
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(_executor, lambda: func(*args, **kw))
