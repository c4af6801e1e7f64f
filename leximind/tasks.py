"""
Background work for the UI.

Service calls block, so each one runs on a daemon thread. Its outcome is
handed back through `dispatch`, which must run the callback on the UI
thread (in Tkinter: `lambda fn: root.after(0, fn)`). All application state
is therefore only ever mutated from one thread.
"""

import functools
import threading
import time
from typing import Any, Callable, Optional

from .logger import logger

Dispatch = Callable[[Callable[[], None]], None]


class ThreadedRunner:
    def __init__(self, dispatch: Dispatch) -> None:
        self._dispatch = dispatch

    def submit(
        self,
        name: str,
        work: Callable[[], Any],
        on_done: Callable[[Any], None],
        on_error: Optional[Callable[[Exception], None]] = None,
    ) -> threading.Thread:
        """Run `work()` in the background, then `on_done(result)` or `on_error(exc)` on the UI thread."""
        logger.task_start(name)

        def _run() -> None:
            start_time = time.perf_counter()
            try:
                result = work()
            except Exception as e:
                logger.task_error(name, str(e))
                if on_error is not None:
                    self._dispatch(functools.partial(on_error, e))
                return
            logger.task_complete(name, duration_ms=(time.perf_counter() - start_time) * 1000)
            self._dispatch(functools.partial(on_done, result))

        thread = threading.Thread(target=_run, name=f"leximind-{name}", daemon=True)
        thread.start()
        return thread
