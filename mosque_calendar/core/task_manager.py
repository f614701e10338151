"""
Background work: one-off threads (holiday refresh after the first render) and
repeating timers (periodic refresh while the API is serving).
"""
import logging
import threading
from datetime import datetime, timezone
from queue import Queue
from threading import Timer
from typing import Any, Callable, Dict, List, Optional

_NOT_FINISHED = object()


class TaskManager:
    def __init__(self):
        self.tasks: Dict[str, Timer] = {}
        self.threads: Dict[str, threading.Thread] = {}
        self.results: Dict[str, Any] = {}
        self.result_queue = Queue()
        self.logger = logging.getLogger("TaskManager")

    def run_in_background(self, name: str, callback: Callable[[], Any]) -> threading.Thread:
        """Run callback on a daemon thread; its result is queued as (name, result)."""
        existing = self.threads.get(name)
        if existing is not None and existing.is_alive():
            self.logger.info(f"Task {name} already running")
            return existing

        self.results.pop(name, None)
        thread = threading.Thread(target=self._run_once, args=(name, callback), name=f"task-{name}", daemon=True)
        self.threads[name] = thread
        self.logger.debug(f"Starting background task {name}")
        thread.start()
        return thread

    def _run_once(self, name: str, callback: Callable[[], Any]) -> None:
        result = None
        try:
            result = callback()
        except Exception as e:
            self.logger.exception(f"Error running task {name}: {e}")
        self.results[name] = result
        self.result_queue.put((name, result))

    def wait_for(self, name: str, timeout: Optional[float] = None) -> Any:
        """Wait for a background task and return its result (None if unknown, failed or timed out)."""
        thread = self.threads.get(name)
        if thread is None:
            self.logger.warning(f"No background task named {name}")
            return None
        thread.join(timeout)
        if thread.is_alive():
            self.logger.warning(f"Task {name} still running after {timeout} seconds")
            return None
        self.threads.pop(name, None)
        result = self.results.pop(name, _NOT_FINISHED)
        return None if result is _NOT_FINISHED else result

    def schedule_task(
        self,
        name: str,
        callback: Callable,
        delay: float,
        one_time: bool = True,
        initial_delay: Optional[float] = None,
    ) -> None:
        """Schedule a task to run after delay seconds (initial_delay for the first run, if given)."""
        first = delay if initial_delay is None else initial_delay
        try:
            self.logger.info(f"Scheduling task {name} with delay {first} seconds")
            if name in self.tasks:
                self.logger.info(f"Cancelling existing task {name}")
                self.tasks[name].cancel()

            scheduled_time = datetime.now().timestamp() + first
            timer = Timer(first, self._run_task, args=(name, callback, delay, one_time))
            timer.daemon = True
            timer.scheduled_time = scheduled_time

            self.tasks[name] = timer
            timer.start()
            self.logger.info(f"Timer started for {name}, scheduled for {datetime.fromtimestamp(scheduled_time)}")
        except Exception as e:
            self.logger.error(f"Error scheduling task {name}: {e}")

    def _run_task(self, name: str, callback: Callable, delay: float, one_time: bool) -> None:
        """Run the task and reschedule if needed."""
        try:
            self.result_queue.put((name, callback()))
            if name in self.tasks:
                self.tasks[name].last_run = datetime.now().timestamp()
        except Exception as e:
            self.logger.error(f"Error running task {name}: {e}")
        if not one_time and name in self.tasks:
            self.schedule_task(name, callback, delay, one_time)

    def get_active_timers(self) -> List[Dict[str, Any]]:
        """Return active timer names and their next run time."""
        result = []
        for name, timer in self.tasks.items():
            if getattr(timer, "scheduled_time", None) is not None:
                next_run = datetime.fromtimestamp(timer.scheduled_time, tz=timezone.utc)
                result.append({"name": name, "next_run_at": next_run})
        return result

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        """Cancel timers and join outstanding threads."""
        for task in self.tasks.values():
            task.cancel()
        self.tasks.clear()
        for name, thread in list(self.threads.items()):
            thread.join(timeout)
            if thread.is_alive():
                self.logger.warning(f"Task {name} did not finish before shutdown")
