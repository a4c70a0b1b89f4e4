import logging
import queue
import threading

from notifications import Notifier

log = logging.getLogger(__name__)


class BackgroundTasks:
    """
    Runs API calls off the Tk thread. Results come back through a queue that
    the Tk thread polls with after(), so widgets are only touched there.
    After cancel() (view destroyed) pending results are dropped.

    widget only needs after() and after_cancel().
    """
    POLL_MS = 100

    def __init__(self, widget):
        self.widget = widget
        self.queue = queue.Queue()
        self.cancelled = threading.Event()
        self._poll_id = widget.after(self.POLL_MS, self._poll)

    def submit(self, func, on_done=None, on_error=None):
        def worker():
            try:
                result = func()
            except Exception as e:
                log.exception("Background task failed")
                if on_error:
                    self.post(on_error, e)
            else:
                if on_done:
                    self.post(on_done, result)
        threading.Thread(target=worker, daemon=True).start()

    def post(self, func, *args):
        if not self.cancelled.is_set():
            self.queue.put((func, args))

    def call_in_ui(self, func, *args):
        """From a worker: run func on the Tk thread and wait for its return value."""
        done = threading.Event()
        box = {}

        def run(*a):
            try:
                box["value"] = func(*a)
            finally:
                done.set()

        self.post(run, *args)
        while not done.wait(0.1):
            if self.cancelled.is_set():
                return None
        return box.get("value")

    def _poll(self):
        while not self.cancelled.is_set():
            try:
                func, args = self.queue.get_nowait()
            except queue.Empty:
                break
            # One bad callback must not stop the loop; later results and
            # workers waiting in call_in_ui depend on it
            try:
                func(*args)
            except Exception:
                log.exception("UI callback %r failed", func)
        if not self.cancelled.is_set():
            self._poll_id = self.widget.after(self.POLL_MS, self._poll)

    def cancel(self):
        self.cancelled.set()
        self.widget.after_cancel(self._poll_id)


class UiThreadNotifier(Notifier):
    """Wraps a notifier so worker threads can use it; messages show on the Tk thread."""

    def __init__(self, tasks, inner):
        self.tasks = tasks
        self.inner = inner

    def success(self, message):
        self.tasks.post(self.inner.success, message)

    def error(self, message):
        self.tasks.post(self.inner.error, message)
