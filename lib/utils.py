"""
Common utilities for Geotime.
"""

import asyncio
import json
import logging
import os
from typing import Any, Awaitable, Dict, Optional, Set, TypeVar

from lib.errors import GeotimeError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Strong references to operations which outlived their caller's timeout
_backgroundTasks: Set["asyncio.Future[Any]"] = set()


class OperationTimeoutError(GeotimeError, TimeoutError):
    """Operation did not finish within given timeout.

    The operation itself was not cancelled and keeps running in background.
    """

    def __init__(self, timeout: float, operation: str = "operation"):
        super().__init__(f"{operation} did not finish in {timeout} seconds")
        self.timeout = timeout
        self.operation = operation


def _onBackgroundDone(task: "asyncio.Future[Any]") -> None:
    _backgroundTasks.discard(task)
    if task.cancelled():
        return

    exc = task.exception()
    if exc is not None:
        logger.warning(f"Background operation failed after caller timed out: {type(exc).__name__}: {exc}")
    else:
        logger.debug("Background operation finished after caller timed out")


async def runWithTimeout(awaitable: Awaitable[T], timeout: Optional[float], operation: str = "operation") -> T:
    """
    Race awaitable against a timer, dood!

    On timeout the caller gets OperationTimeoutError right away, while the
    operation keeps running to completion. Its eventual result is discarded and
    its exception (if any) is only logged.

    Args:
        awaitable: Coroutine, task or future to run
        timeout: Timeout in seconds, None to wait forever
        operation: Operation name for messages and logs

    Returns:
        Result of the awaitable

    Raises:
        OperationTimeoutError: If the timeout elapsed first
        Exception: Whatever the awaitable raised before the timeout
    """
    task = asyncio.ensure_future(awaitable)
    if timeout is None:
        return await task

    try:
        return await asyncio.wait_for(asyncio.shield(task), timeout)
    except asyncio.TimeoutError:
        if task.done():
            # Finished right at the deadline
            return task.result()
        logger.warning(f"{operation} timed out after {timeout} seconds, leaving it in background")
        _backgroundTasks.add(task)
        task.add_done_callback(_onBackgroundDone)
        raise OperationTimeoutError(timeout, operation) from None


def jsonDumps(data: Any, compact: Optional[bool] = None, **kwargs) -> str:
    dumpKwargs = {
        "ensure_ascii": False,
        "default": str,
        "sort_keys": True,
    }

    if compact is None:
        # Pretty-printed output when indent is passed
        compact = "indent" not in kwargs

    if compact:
        dumpKwargs["separators"] = (",", ":")
    dumpKwargs.update(kwargs)
    return json.dumps(data, **dumpKwargs)


def load_dotenv(path: str = ".env", populateEnv: bool = True) -> Dict[str, str]:
    """
    Simple dotenv file loader.
    Read file line by line and put key-value pairs into dictionary.
    Missing file means empty environment.

    Args:
        path: Path to .env file (default ".env")
        populateEnv: Whether to populate environment variables (default True)

    Returns:
        Dictionary of key-value pairs from .env file
    """
    ret: Dict[str, str] = {}
    if not os.path.isfile(path):
        return ret

    with open(path, "rt") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            splitted_line = line.split("=", 1)
            if len(splitted_line) == 2:
                key, value = splitted_line
                ret[key.strip()] = value.strip().strip('"')

    if populateEnv:
        for k, v in ret.items():
            # Real environment wins over .env
            os.environ.setdefault(k, v)
    return ret
