"""
In-process messaging facility and fault handler.
Used by the batch runner and the CLI; real transports plug in through
the same interfaces.
"""
import logging
from collections import deque
from typing import Any, Deque, Dict, List, Optional

from invoice_worker.core.exceptions import ChannelEmptyError, ChannelNotInitializedError
from invoice_worker.processing.ports import ExceptionHandler, Message, MessagingFacility, Metadata


logger = logging.getLogger(__name__)


class InMemoryMessagingFacility(MessagingFacility):
    """Named FIFO channels held in memory"""

    def __init__(self):
        self._channels: Dict[str, Deque[Message]] = {}
        self.input_channel: Optional[str] = None
        self.output_channel: Optional[str] = None

    def _channel(self, channel_id: Optional[str]) -> Deque[Message]:
        if channel_id is None or channel_id not in self._channels:
            raise ChannelNotInitializedError(f"Channel not initialized: {channel_id}")
        return self._channels[channel_id]

    def initialize_input_channel(self, channel_id: str) -> None:
        self._channels.setdefault(channel_id, deque())
        self.input_channel = channel_id

    def initialize_output_channel(self, channel_id: str) -> None:
        self._channels.setdefault(channel_id, deque())
        self.output_channel = channel_id

    def publish(self, data: Any, metadata: Optional[Metadata] = None) -> Message:
        """Enqueue a payload on the input channel"""
        message = Message(data=data, metadata=metadata or Metadata())
        self._channel(self.input_channel).append(message)
        return message

    def read_message(self) -> Message:
        channel = self._channel(self.input_channel)
        if not channel:
            raise ChannelEmptyError(f"No messages on {self.input_channel}")
        return channel.popleft()

    def write_message(self, message: Message) -> None:
        self._channel(self.output_channel).append(message)

    def has_pending(self) -> bool:
        if self.input_channel not in self._channels:
            return False
        return bool(self._channels[self.input_channel])

    def drain_output(self) -> List[Message]:
        """Remove and return everything written to the output channel"""
        channel = self._channel(self.output_channel)
        drained = list(channel)
        channel.clear()
        return drained

    def dispose(self) -> None:
        self._channels.clear()
        self.input_channel = None
        self.output_channel = None


class LoggingExceptionHandler(ExceptionHandler):
    """Logs each fault with its traceback and counts them"""

    def __init__(self, logger_name: str = 'invoice_worker.faults'):
        self.logger = logging.getLogger(logger_name)
        self.handled_count = 0

    def handle_exception(self, exc: BaseException) -> None:
        self.handled_count += 1
        self.logger.error(
            f"Fault #{self.handled_count}: {type(exc).__name__}: {exc}",
            exc_info=(type(exc), exc, exc.__traceback__),
        )
