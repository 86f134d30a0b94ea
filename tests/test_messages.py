"""Tests for flash messages."""

from datetime import datetime, timedelta
from unittest.mock import MagicMock

from apscheduler.jobstores.base import JobLookupError
from apscheduler.triggers.date import DateTrigger

from caterfind.messages import FlashMessage


class TestFlashMessage:
    def test_flash_schedules_single_clear(self):
        scheduler = MagicMock()
        message = FlashMessage("error", scheduler, timeout=3)

        before = datetime.now()
        message.flash("Cannot add events to past dates")

        assert message.text == "Cannot add events to past dates"
        assert message.transient is True
        scheduler.add_job.assert_called_once()
        args, kwargs = scheduler.add_job.call_args
        assert kwargs["replace_existing"] is True
        trigger = args[1]
        assert isinstance(trigger, DateTrigger)
        run_at = trigger.run_date.replace(tzinfo=None)
        assert before + timedelta(seconds=2) < run_at <= datetime.now() + timedelta(seconds=3)

    def test_second_flash_replaces_pending_clear(self):
        scheduler = MagicMock()
        message = FlashMessage("error", scheduler)

        message.flash("first")
        message.flash("second")

        job_ids = [call.kwargs["id"] for call in scheduler.add_job.call_args_list]
        assert len(job_ids) == 2
        assert job_ids[0] == job_ids[1]
        assert message.text == "second"

    def test_scheduled_job_clears_text(self):
        scheduler = MagicMock()
        message = FlashMessage("success", scheduler)
        message.flash("Event added successfully")

        call = scheduler.add_job.call_args
        call.args[0](*call.kwargs["args"])

        assert message.text is None
        assert not message

    def test_late_clear_keeps_newer_flash(self):
        scheduler = MagicMock()
        message = FlashMessage("error", scheduler)
        message.flash("first")
        first = scheduler.add_job.call_args

        message.flash("second")
        # The first clear was already running when the second flash replaced it
        first.args[0](*first.kwargs["args"])

        assert message.text == "second"

    def test_late_clear_keeps_persistent_text(self):
        scheduler = MagicMock()
        message = FlashMessage("error", scheduler)
        message.flash("transient")
        pending = scheduler.add_job.call_args

        message.show("Event host name is required")
        pending.args[0](*pending.kwargs["args"])

        assert message.text == "Event host name is required"

    def test_show_is_persistent_and_cancels_pending_clear(self):
        scheduler = MagicMock()
        message = FlashMessage("error", scheduler)
        message.flash("transient")

        message.show("Event host name is required")

        scheduler.remove_job.assert_called_once()
        assert message.text == "Event host name is required"
        assert message.transient is False

    def test_clear_ignores_already_run_job(self):
        scheduler = MagicMock()
        scheduler.remove_job.side_effect = JobLookupError("clear-error")
        message = FlashMessage("error", scheduler)
        message.flash("transient")

        message.clear()

        assert message.text is None

    def test_messages_do_not_share_jobs(self):
        scheduler = MagicMock()
        FlashMessage("error", scheduler).flash("a")
        FlashMessage("error", scheduler).flash("b")

        first, second = scheduler.add_job.call_args_list
        assert first.kwargs["id"] != second.kwargs["id"]

    def test_without_scheduler_text_stays(self):
        message = FlashMessage("error")
        message.flash("stays")
        assert message.text == "stays"
        message.clear()
        assert message.text is None
