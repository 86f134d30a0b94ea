"""Error and success messages shown by the views, with timed auto-clear."""

import itertools
import logging
from datetime import datetime, timedelta

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.triggers.date import DateTrigger

logger = logging.getLogger(__name__)

_job_numbers = itertools.count(1)


class FlashMessage:
    """
    One message slot.

    ``flash`` shows text that clears itself after ``timeout`` seconds; each
    flash replaces the pending clear of the previous one. ``show`` sets text
    that stays until cleared. Without a scheduler nothing clears on its own.
    """

    def __init__(self, name: str, scheduler: BaseScheduler | None = None, timeout: float = 3.0):
        self.name = name
        self.text: str | None = None
        self.transient = False
        self.timeout = timeout
        self._scheduler = scheduler
        self._job_id = f"clear-{name}-message-{next(_job_numbers)}"
        # Bumped on every change so a clear job only removes the text it was scheduled for
        self._shown = 0

    def __bool__(self) -> bool:
        return self.text is not None

    def flash(self, text: str) -> None:
        """Show text and schedule it to disappear."""
        self._shown += 1
        self.text = text
        self.transient = True
        if self._scheduler is None:
            return
        self._scheduler.add_job(
            self._expire,
            DateTrigger(run_date=datetime.now() + timedelta(seconds=self.timeout)),
            args=[self._shown],
            id=self._job_id,
            replace_existing=True,
        )

    def show(self, text: str) -> None:
        """Show text until it is explicitly cleared."""
        self._cancel()
        self._shown += 1
        self.text = text
        self.transient = False

    def clear(self) -> None:
        self._cancel()
        self._shown += 1
        self.text = None
        self.transient = False

    def _expire(self, shown: int) -> None:
        if shown != self._shown:
            logger.debug(f"Skipping clear of replaced {self.name} message")
            return
        logger.debug(f"Clearing {self.name} message")
        self.text = None
        self.transient = False

    def _cancel(self) -> None:
        if self._scheduler is None or not self.transient:
            return
        try:
            self._scheduler.remove_job(self._job_id)
        except JobLookupError:
            pass
