"""
Unit tests for the worker loop and its failure isolation.
"""
from unittest.mock import MagicMock, call

import pytest

from invoice_worker.core.exceptions import ChannelEmptyError, ChannelError
from invoice_worker.processing.ports import (
    ConfigurationSettings,
    ExceptionHandler,
    Message,
    MessagingFacility,
    Metadata,
)
from invoice_worker.processing.processor import InvoiceProcessor, ProcessingResult
from invoice_worker.processing.worker import Worker, WorkerState
from invoice_worker.utils.decorators import metrics


@pytest.fixture
def settings():
    settings = MagicMock(spec=ConfigurationSettings)
    settings.get_settings_by_key.side_effect = {
        "inputQueue": "in-q",
        "outputQueue": "out-q",
    }.__getitem__
    return settings


@pytest.fixture
def messaging():
    return MagicMock(spec=MessagingFacility)


@pytest.fixture
def exception_handler():
    return MagicMock(spec=ExceptionHandler)


@pytest.fixture
def processor():
    return MagicMock(spec=InvoiceProcessor)


@pytest.fixture
def worker(settings, messaging, exception_handler, processor):
    return Worker(settings, messaging, exception_handler, processor)


@pytest.fixture
def input_message(valid_invoice):
    return Message(data=valid_invoice, metadata=Metadata.from_string("meta"))


class TestLifecycle:

    def test_initial_state_is_stopped(self, worker):
        assert worker.state is WorkerState.STOPPED
        assert not worker.is_running

    def test_start_initializes_configured_channels_once(self, worker, messaging, settings):
        worker.start()

        messaging.initialize_input_channel.assert_called_once_with("in-q")
        messaging.initialize_output_channel.assert_called_once_with("out-q")
        settings.get_settings_by_key.assert_has_calls(
            [call("inputQueue"), call("outputQueue")]
        )
        assert worker.is_running

    def test_start_rejects_shared_channel(self, worker, messaging, settings):
        settings.get_settings_by_key.side_effect = lambda key: "same-q"

        with pytest.raises(ChannelError, match="same-q"):
            worker.start()

        messaging.initialize_input_channel.assert_not_called()
        messaging.initialize_output_channel.assert_not_called()
        assert not worker.is_running

    def test_stop_disposes_messaging(self, worker, messaging):
        worker.stop()

        messaging.dispose.assert_called_once_with()
        assert worker.state is WorkerState.STOPPED

    def test_stop_after_start(self, worker, messaging):
        worker.start()
        worker.stop()

        messaging.dispose.assert_called_once_with()
        assert not worker.is_running


class TestDoJob:

    @pytest.mark.parametrize("outcome", [ProcessingResult.SUCCEEDED, ProcessingResult.FAILED])
    def test_reads_processes_and_writes(self, worker, messaging, processor,
                                        exception_handler, input_message, outcome):
        messaging.read_message.return_value = input_message
        processor.process.return_value = outcome

        result = worker.do_job()

        assert result is outcome
        messaging.read_message.assert_called_once_with()
        processor.process.assert_called_once_with(input_message.data)
        messaging.write_message.assert_called_once()
        written = messaging.write_message.call_args.args[0]
        assert written.data == outcome
        assert written.metadata is input_message.metadata
        exception_handler.handle_exception.assert_not_called()

    @pytest.mark.parametrize("meta", [
        {"correlation_id": "abc"},
        "correlation-abc",
        None,
    ])
    def test_metadata_is_written_back_untouched(self, worker, messaging, processor,
                                                exception_handler, valid_invoice, meta):
        messaging.read_message.return_value = Message(data=valid_invoice, metadata=meta)
        processor.process.return_value = ProcessingResult.SUCCEEDED

        assert worker.do_job() is ProcessingResult.SUCCEEDED

        written = messaging.write_message.call_args.args[0]
        assert written.metadata is meta
        exception_handler.handle_exception.assert_not_called()

    def test_read_fault_goes_to_handler(self, worker, messaging, processor, exception_handler):
        error = RuntimeError("boom")
        messaging.read_message.side_effect = error

        result = worker.do_job()

        assert result is None
        exception_handler.handle_exception.assert_called_once_with(error)
        processor.process.assert_not_called()
        messaging.write_message.assert_not_called()

    def test_processor_fault_goes_to_handler(self, worker, messaging, processor,
                                             exception_handler, input_message):
        error = AttributeError("fail processing")
        messaging.read_message.return_value = input_message
        processor.process.side_effect = error

        worker.do_job()

        exception_handler.handle_exception.assert_called_once_with(error)
        messaging.write_message.assert_not_called()

    def test_write_fault_goes_to_handler(self, worker, messaging, processor,
                                         exception_handler, input_message):
        error = ConnectionError("channel closed")
        messaging.read_message.return_value = input_message
        processor.process.return_value = ProcessingResult.SUCCEEDED
        messaging.write_message.side_effect = error

        assert worker.do_job() is None
        exception_handler.handle_exception.assert_called_once_with(error)

    def test_poisoned_message_does_not_stop_next_job(self, worker, messaging, processor,
                                                     exception_handler, input_message):
        messaging.read_message.side_effect = [RuntimeError("bad"), input_message]
        processor.process.return_value = ProcessingResult.SUCCEEDED

        assert worker.do_job() is None
        assert worker.do_job() is ProcessingResult.SUCCEEDED
        assert exception_handler.handle_exception.call_count == 1
        messaging.write_message.assert_called_once()

    def test_job_time_is_recorded(self, worker, messaging):
        messaging.read_message.side_effect = RuntimeError("boom")

        worker.do_job()
        worker.do_job()

        assert metrics.get_stats('worker.job_time_ms')['count'] == 2

    def test_job_time_storage_stays_bounded(self, worker, messaging):
        messaging.read_message.side_effect = RuntimeError("boom")

        for _ in range(10000):
            worker.do_job()

        stats = metrics.get_stats('worker.job_time_ms')
        assert stats['count'] == 10000
        assert len(metrics.metrics['worker.job_time_ms']) == 4


class TestRun:

    def test_does_nothing_while_stopped(self, worker, messaging):
        assert worker.run(max_jobs=5) == 0
        messaging.read_message.assert_not_called()

    def test_runs_up_to_max_jobs(self, worker, messaging, processor, input_message):
        messaging.read_message.return_value = input_message
        processor.process.return_value = ProcessingResult.SUCCEEDED
        worker.start()

        assert worker.run(max_jobs=3) == 3
        assert messaging.write_message.call_count == 3

    def test_stops_when_facility_is_drained(self, settings, exception_handler,
                                            processor, input_message):
        messaging = MagicMock()
        messaging.has_pending.side_effect = [True, True, False]
        messaging.read_message.return_value = input_message
        processor.process.return_value = ProcessingResult.SUCCEEDED
        worker = Worker(settings, messaging, exception_handler, processor)
        worker.start()

        assert worker.run() == 2

    def test_faults_do_not_end_the_loop(self, worker, messaging, exception_handler):
        messaging.read_message.side_effect = ChannelEmptyError("empty")
        worker.start()

        assert worker.run(max_jobs=4) == 4
        assert exception_handler.handle_exception.call_count == 4
