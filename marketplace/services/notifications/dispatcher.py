"""
Notification dispatcher

Runs notification jobs after the triggering transaction has committed,
on a small background thread pool. A failing job is logged and dropped;
it never reaches the request that queued it.
"""

import threading
from concurrent.futures import ThreadPoolExecutor, Future
from typing import Callable, Optional
from flask import Flask, current_app
from marketplace.logger import get_logger
from marketplace.services.notifications.mail_sender import SmtpMailSender

logger = get_logger("marketplace.services.notifications.dispatcher")


class _DispatcherState:
    """Per-application dispatcher state stored in ``app.extensions``"""

    def __init__(self, app: Flask):
        self.enabled = app.config.get('NOTIFICATIONS_ENABLED', True)
        self.mode = app.config.get('NOTIFICATION_MODE', 'thread')
        self.workers = app.config.get('NOTIFICATION_WORKERS', 2)
        self.sender = SmtpMailSender.from_config(app.config)
        self._executor: Optional[ThreadPoolExecutor] = None
        self._lock = threading.Lock()

    @property
    def executor(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self.workers,
                    thread_name_prefix='marketplace-notify',
                )
            return self._executor

    def shutdown(self, wait: bool = True) -> None:
        with self._lock:
            if self._executor is not None:
                self._executor.shutdown(wait=wait)
                self._executor = None


class NotificationDispatcher:
    """
    Flask extension that runs notification jobs in the background.

    Modes (``NOTIFICATION_MODE``):
    - ``thread``: jobs run on a ThreadPoolExecutor (default)
    - ``inline``: jobs run on the calling thread, still isolated from errors

    ``NOTIFICATIONS_ENABLED=False`` drops every job.
    """

    def __init__(self, app: Optional[Flask] = None):
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        app.extensions['notifier'] = _DispatcherState(app)
        logger.debug(
            f"Notification dispatcher initialized "
            f"(enabled={app.extensions['notifier'].enabled}, mode={app.extensions['notifier'].mode})"
        )

    @staticmethod
    def _state(app: Optional[Flask] = None) -> _DispatcherState:
        app = app or current_app
        return app.extensions['notifier']

    @property
    def sender(self) -> SmtpMailSender:
        """Mail sender of the current application"""
        return self._state().sender

    def submit(self, fn: Callable, *args) -> Optional[Future]:
        """
        Queue ``fn(*args)`` to run inside a fresh application context.

        Must be called after commit. Returns the Future in thread mode,
        None otherwise.
        """
        app = current_app._get_current_object()
        state = self._state(app)
        job_name = getattr(fn, '__qualname__', repr(fn))

        if not state.enabled:
            logger.debug(f"Notifications disabled, dropping {job_name}")
            return None

        def run():
            with app.app_context():
                try:
                    fn(*args)
                except Exception as e:
                    logger.error(f"Notification job {job_name} failed: {type(e).__name__}: {e}")

        if state.mode == 'inline':
            run()
            return None

        try:
            return state.executor.submit(run)
        except RuntimeError as e:
            # Executor already shut down (interpreter exit)
            logger.warning(f"Could not queue notification job {job_name}: {e}")
            return None

    def shutdown(self, app: Optional[Flask] = None, wait: bool = True) -> None:
        self._state(app).shutdown(wait=wait)
