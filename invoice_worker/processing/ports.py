"""
Collaborator interfaces consumed by the worker.
Transport, configuration and fault reporting live behind these seams.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, TypeVar
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


DataT = TypeVar('DataT')


class Metadata(BaseModel):
    """Opaque correlation data carried from a request to its response"""
    correlation_id: str = Field(default_factory=lambda: uuid4().hex)
    properties: Dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_string(cls, value: str) -> 'Metadata':
        return cls(correlation_id=value)


class Message(BaseModel, Generic[DataT]):
    """
    Payload plus metadata, as exchanged over a channel.

    Metadata is opaque to the worker: whatever object the transport
    supplies is carried as-is, never coerced into ``Metadata``.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    data: DataT
    metadata: Any = Field(default_factory=Metadata)


class MessagingFacility(ABC, Generic[DataT]):
    """Input/output channel pair"""

    @abstractmethod
    def initialize_input_channel(self, channel_id: str) -> None:
        """Bind the channel messages are read from"""

    @abstractmethod
    def initialize_output_channel(self, channel_id: str) -> None:
        """Bind the channel results are written to"""

    @abstractmethod
    def read_message(self) -> Message:
        """Take the next input message; may raise"""

    @abstractmethod
    def write_message(self, message: Message) -> None:
        """Publish a message on the output channel"""

    @abstractmethod
    def dispose(self) -> None:
        """Release channel resources"""


class ConfigurationSettings(ABC):
    """Key/value configuration source"""

    @abstractmethod
    def get_settings_by_key(self, key: str) -> str:
        """Return the value configured for ``key``"""


class ExceptionHandler(ABC):
    """Sink for faults the worker isolates"""

    @abstractmethod
    def handle_exception(self, exc: BaseException) -> None:
        """Report a fault; return value is ignored"""
