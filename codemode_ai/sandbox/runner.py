"""Run one compiled script on its own event loop in a worker thread.

The host event loop keeps serving capability calls while the script runs, so a
script that never yields (``while True: pass``) cannot stall it. After
:meth:`ScriptRun.abort` a thread-local trace hook raises
:class:`~codemode_ai.errors.ScriptAbortedError` on the next line the script
executes, and the script's task is cancelled so pending capability awaits are
released too.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import logging
import sys
import threading
from types import FrameType
from typing import Any, Awaitable, Callable, Optional

from codemode_ai.errors import ScriptAbortedError, ScriptCancelledError, ScriptTimeoutError

from .compiler import SCRIPT_FILENAME

logger = logging.getLogger(__name__)


class ScriptRun:
    """One script execution bound to a dedicated daemon thread.

    ``future`` settles with the script's return value or the exception it
    raised. Aborted scripts settle with ``ScriptTimeoutError``.
    """

    def __init__(self, entrypoint: Callable[[], Awaitable[Any]], *, name: str = "codemode-script") -> None:
        self._entrypoint = entrypoint
        self._aborted = threading.Event()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._task: Optional[asyncio.Task] = None
        self._lock = threading.Lock()
        self.future: concurrent.futures.Future = concurrent.futures.Future()
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)

    @property
    def aborted(self) -> bool:
        return self._aborted.is_set()

    def start(self) -> concurrent.futures.Future:
        self._thread.start()
        return self.future

    def abort(self) -> None:
        """Stop the script as soon as it executes another line or awaits."""
        self._aborted.set()
        with self._lock:
            loop, task = self._loop, self._task
            if loop is None or task is None or loop.is_closed():
                return
            loop.call_soon_threadsafe(task.cancel)

    def _run(self) -> None:
        if not self.future.set_running_or_notify_cancel():
            return
        loop = asyncio.new_event_loop()
        sys.settrace(self._trace)
        try:
            with self._lock:
                self._loop = loop
                self._task = loop.create_task(self._entrypoint())
                if self._aborted.is_set():
                    self._task.cancel()
            result = loop.run_until_complete(self._task)
        except asyncio.CancelledError:
            if self._aborted.is_set():
                self.future.set_exception(ScriptTimeoutError("Script aborted after deadline"))
            else:
                self.future.set_exception(ScriptCancelledError("Script task was cancelled"))
        except ScriptAbortedError:
            self.future.set_exception(ScriptTimeoutError("Script aborted after deadline"))
        except BaseException as e:
            self.future.set_exception(e)
        else:
            self.future.set_result(result)
        finally:
            self._shutdown(loop)
            sys.settrace(None)

    def _shutdown(self, loop: asyncio.AbstractEventLoop) -> None:
        try:
            pending = [t for t in asyncio.all_tasks(loop) if not t.done()]
            for t in pending:
                t.cancel()
            if pending:
                loop.run_until_complete(asyncio.gather(*pending, return_exceptions=True))
            loop.run_until_complete(loop.shutdown_asyncgens())
        except BaseException as e:
            logger.debug("Error while shutting down script loop: %r", e)
        finally:
            with self._lock:
                loop.close()

    def _trace(self, frame: FrameType, event: str, arg: Any) -> Optional[Callable[..., Any]]:
        if frame.f_code.co_filename != SCRIPT_FILENAME:
            return None
        if self._aborted.is_set():
            raise ScriptAbortedError()
        return self._trace_lines

    def _trace_lines(self, frame: FrameType, event: str, arg: Any) -> Optional[Callable[..., Any]]:
        if event == "line" and self._aborted.is_set():
            raise ScriptAbortedError()
        return self._trace_lines
