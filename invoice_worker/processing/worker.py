"""
Worker loop: read an invoice message, process it, write the result.
Faults are isolated per message and handed to the exception handler.
"""
import logging
from enum import Enum
from typing import Optional

from invoice_worker.core.exceptions import ChannelError
from invoice_worker.processing.ports import (
    ConfigurationSettings,
    ExceptionHandler,
    Message,
    MessagingFacility,
)
from invoice_worker.processing.processor import InvoiceProcessor, ProcessingResult
from invoice_worker.utils.decorators import collect_metric


logger = logging.getLogger(__name__)

JOB_TIME_METRIC = 'worker.job_time_ms'


class WorkerState(Enum):
    STOPPED = 'stopped'
    RUNNING = 'running'


class Worker:
    """
    Single-threaded invoice worker bound to one input and one output channel.
    """

    INPUT_QUEUE_KEY = 'inputQueue'
    OUTPUT_QUEUE_KEY = 'outputQueue'

    def __init__(self,
                 settings: ConfigurationSettings,
                 messaging: MessagingFacility,
                 exception_handler: ExceptionHandler,
                 processor: InvoiceProcessor):
        self.settings = settings
        self.messaging = messaging
        self.exception_handler = exception_handler
        self.processor = processor
        self.state = WorkerState.STOPPED

    @property
    def is_running(self) -> bool:
        return self.state is WorkerState.RUNNING

    def start(self) -> None:
        """
        Initialize the configured input and output channels.

        Raises:
            ChannelError: Both keys name the same channel
        """
        input_queue = self.settings.get_settings_by_key(self.INPUT_QUEUE_KEY)
        output_queue = self.settings.get_settings_by_key(self.OUTPUT_QUEUE_KEY)
        if input_queue == output_queue:
            raise ChannelError(
                f"Input and output channels must differ, both are {input_queue!r}"
            )

        self.messaging.initialize_input_channel(input_queue)
        self.messaging.initialize_output_channel(output_queue)

        self.state = WorkerState.RUNNING
        logger.info(f"Worker started: {input_queue} -> {output_queue}")

    def stop(self) -> None:
        """Release messaging resources; safe without a prior start"""
        self.messaging.dispose()
        self.state = WorkerState.STOPPED
        logger.info("Worker stopped")

    @collect_metric(JOB_TIME_METRIC)
    def do_job(self) -> Optional[ProcessingResult]:
        """
        Handle exactly one message end to end.

        The result is written with the input message's own metadata
        instance. Any fault while reading, processing or writing goes to
        the exception handler once and nothing is written.

        Returns:
            The processing result, or None when a fault was handled
        """
        try:
            message = self.messaging.read_message()
            result = self.processor.process(message.data)
            self.messaging.write_message(
                Message(data=result, metadata=message.metadata)
            )
        except Exception as exc:
            logger.warning(f"Job failed: {type(exc).__name__}: {exc}")
            self.exception_handler.handle_exception(exc)
            return None

        return result

    def run(self, max_jobs: Optional[int] = None) -> int:
        """
        Process messages until stopped, ``max_jobs`` is reached, or the
        facility reports nothing pending (for facilities that can tell).

        Returns:
            Number of jobs executed
        """
        has_pending = getattr(self.messaging, 'has_pending', None)
        jobs = 0

        while self.is_running and (max_jobs is None or jobs < max_jobs):
            if has_pending is not None and not has_pending():
                break
            self.do_job()
            jobs += 1

        logger.info(f"Worker loop finished after {jobs} job(s)")
        return jobs
