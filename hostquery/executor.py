import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Optional

from .config import load_config

logger = logging.getLogger(__name__)

_DEFAULT_EXECUTOR: Optional[ThreadPoolExecutor] = None


def _default_executor() -> ThreadPoolExecutor:
    global _DEFAULT_EXECUTOR
    if _DEFAULT_EXECUTOR is None:
        workers = load_config().executor_workers or None
        _DEFAULT_EXECUTOR = ThreadPoolExecutor(
            max_workers=workers, thread_name_prefix="hostquery"
        )
    return _DEFAULT_EXECUTOR


def run_in_executor(
    loop,
    func: Callable[..., Any],
    *args: Any,
    callback: Callable[[Any, Optional[BaseException]], None],
    executor: Optional[ThreadPoolExecutor] = None,
) -> Future:
    """Execute *func* in a thread and hand ``(result, exc)`` to *callback* on *loop*.

    Raises ``RuntimeError`` if the executor has been shut down.
    """
    if executor is None:
        executor = _default_executor()

    def _work():
        try:
            res = func(*args)
        except Exception as exc:
            outcome = (None, exc)
        else:
            outcome = (res, None)
        try:
            loop.call_soon_threadsafe(callback, *outcome)
        except RuntimeError:
            # loop closed while the call was running
            logger.debug("dropping result of %r, loop is closed", func)

    return executor.submit(_work)


def shutdown_executor(wait: bool = True) -> None:
    """Shut the shared pool down; the next call creates a fresh one."""
    global _DEFAULT_EXECUTOR
    if _DEFAULT_EXECUTOR is not None:
        logger.debug("shutting down resolver executor")
        _DEFAULT_EXECUTOR.shutdown(wait=wait)
        _DEFAULT_EXECUTOR = None
