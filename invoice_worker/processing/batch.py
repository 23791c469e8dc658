"""
Batch runner: feeds invoices through a worker over in-memory channels.
"""
import logging
import time
from pathlib import Path
from typing import Dict, Iterable, Optional

from pydantic import BaseModel, Field

from invoice_worker.core.models import Invoice
from invoice_worker.core.money import Money
from invoice_worker.core.parsers import invoice_generator
from invoice_worker.processing.messaging import InMemoryMessagingFacility, LoggingExceptionHandler
from invoice_worker.processing.ports import ConfigurationSettings, Metadata
from invoice_worker.processing.processor import AccumulatingInvoiceProcessor, ProcessingResult
from invoice_worker.processing.worker import JOB_TIME_METRIC, Worker
from invoice_worker.utils.decorators import measure_performance, metrics


logger = logging.getLogger(__name__)


class BatchResult(BaseModel):
    """Result of a batch run"""
    total: int = 0
    succeeded_count: int = 0
    failed_count: int = 0
    faulted_count: int = 0
    processing_time_seconds: float = 0.0
    products: Dict[str, Money] = Field(default_factory=dict)

    def add_result(self, result: ProcessingResult):
        self.total += 1
        if result.is_success:
            self.succeeded_count += 1
        else:
            self.failed_count += 1

    def add_fault(self):
        self.total += 1
        self.faulted_count += 1

    @property
    def all_succeeded(self) -> bool:
        return self.succeeded_count == self.total


class BatchRunner:
    """
    Sequential runner: one worker, one processor, in-memory channels.
    The processor outlives individual runs, so totals keep accumulating.
    """

    def __init__(self,
                 settings: ConfigurationSettings,
                 processor: Optional[AccumulatingInvoiceProcessor] = None):
        self.settings = settings
        self.processor = processor or AccumulatingInvoiceProcessor()

    @measure_performance
    def process_invoices(self, invoices: Iterable[Invoice]) -> BatchResult:
        """
        Run every invoice through the worker loop.

        Args:
            invoices: Invoices to process, in order

        Returns:
            BatchResult with per-outcome counts and product totals
        """
        start_time = time.time()

        messaging = InMemoryMessagingFacility()
        handler = LoggingExceptionHandler()
        worker = Worker(self.settings, messaging, handler, self.processor)

        worker.start()
        published = 0
        try:
            for invoice in invoices:
                messaging.publish(
                    invoice,
                    Metadata(correlation_id=invoice.invoice_number or f"message-{published}")
                )
                published += 1

            worker.run()

            batch_result = BatchResult()
            for message in messaging.drain_output():
                batch_result.add_result(message.data)
        finally:
            worker.stop()

        for _ in range(published - batch_result.total):
            batch_result.add_fault()

        batch_result.products = dict(self.processor.products)
        batch_result.processing_time_seconds = time.time() - start_time

        logger.info(
            f"Batch complete: {batch_result.total} invoices "
            f"({batch_result.succeeded_count} succeeded, "
            f"{batch_result.failed_count} failed, "
            f"{batch_result.faulted_count} faulted) in "
            f"{batch_result.processing_time_seconds:.2f}s"
        )
        job_stats = metrics.get_stats(JOB_TIME_METRIC)
        if job_stats:
            logger.info(
                f"Job time over {job_stats['count']} job(s): "
                f"avg {job_stats['avg']:.2f}ms, "
                f"min {job_stats['min']:.2f}ms, max {job_stats['max']:.2f}ms"
            )
        return batch_result

    def process_directory(self, directory: Path, pattern: str = "*") -> BatchResult:
        """
        Process every parsable invoice file in a directory.

        Args:
            directory: Directory containing invoices
            pattern: File pattern to match

        Returns:
            BatchResult
        """
        logger.info(f"Starting batch processing: {directory}")
        return self.process_invoices(invoice_generator(directory, pattern))
