"""Invoice Worker - Processing Package"""

from invoice_worker.processing.batch import BatchResult, BatchRunner
from invoice_worker.processing.messaging import InMemoryMessagingFacility, LoggingExceptionHandler
from invoice_worker.processing.ports import (
    ConfigurationSettings,
    ExceptionHandler,
    Message,
    MessagingFacility,
    Metadata,
)
from invoice_worker.processing.processor import (
    AccumulatingInvoiceProcessor,
    InvoiceProcessor,
    ProcessingResult,
)
from invoice_worker.processing.worker import Worker, WorkerState

__all__ = [
    'AccumulatingInvoiceProcessor',
    'BatchResult',
    'BatchRunner',
    'ConfigurationSettings',
    'ExceptionHandler',
    'InMemoryMessagingFacility',
    'InvoiceProcessor',
    'LoggingExceptionHandler',
    'Message',
    'MessagingFacility',
    'Metadata',
    'ProcessingResult',
    'Worker',
    'WorkerState',
]
