"""
Preference store interface.
"""

from abc import ABC, abstractmethod
from typing import Tuple

from ..descriptors import ValueType


class PreferenceStore(ABC):
    """Key-value access to the OS preference database."""

    @abstractmethod
    def read(self, domain: str, key: str) -> Tuple[bool, str]:
        """
        Read one key.

        Returns:
            (found, raw_value); raw_value is "" when not found

        Raises:
            PreferenceReadError: if the store cannot be queried at all
        """

    @abstractmethod
    def write(self, domain: str, key: str, value_type: ValueType, raw_value: str) -> None:
        """
        Write one key, coercing raw_value according to value_type.

        Raises:
            PreferenceWriteError: if the store rejects the write
        """
