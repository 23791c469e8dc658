"""
Worker configuration loaded from environment variables.

Variables use the ``INVOICE_WORKER_`` prefix, e.g. ``INVOICE_WORKER_INPUT_QUEUE``.
A local ``.env`` file is read when present.
"""
import re
from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from invoice_worker.core.exceptions import SettingNotFoundError
from invoice_worker.processing.ports import ConfigurationSettings


_CAMEL_BOUNDARY = re.compile(r'(?<!^)(?=[A-Z])')


class WorkerSettings(BaseSettings, ConfigurationSettings):
    """Worker settings with validation"""

    model_config = SettingsConfigDict(
        env_prefix='INVOICE_WORKER_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    input_queue: str = Field(
        default='invoices.in',
        description='Channel invoices are read from'
    )
    output_queue: str = Field(
        default='invoices.out',
        description='Channel processing results are written to'
    )
    log_level: Literal['DEBUG', 'INFO', 'WARNING', 'ERROR'] = Field(
        default='INFO',
        description='Root log level'
    )
    log_file: Optional[str] = Field(
        default=None,
        description='Also write logs to this file when set'
    )

    def get_settings_by_key(self, key: str) -> str:
        """
        Look up a setting by key.

        Accepts camel-case keys (``inputQueue``) and field names
        (``input_queue``).

        Raises:
            SettingNotFoundError: Unknown key
        """
        field_name = _CAMEL_BOUNDARY.sub('_', key).lower()
        if field_name not in type(self).model_fields:
            raise SettingNotFoundError(key)

        value = getattr(self, field_name)
        return '' if value is None else str(value)


@lru_cache
def get_settings() -> WorkerSettings:
    """Cached settings instance"""
    return WorkerSettings()
