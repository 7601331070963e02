"""Environment-backed configuration for the RAG vector bridge."""

import logging
import os
from typing import Any

TRUE_VALUES = ("true", "1", "yes", "on")


class HelperConfig:
    """Typed access to environment variables, shared by every client and service."""

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    ##########################################
    ############### INTERNAL #################
    ##########################################

    @staticmethod
    def _read_raw(key: str) -> str | None:
        """Return the stripped value of an environment variable, or None if unset or blank."""
        raw = os.getenv(key.upper())
        if raw is None or not raw.strip():
            return None
        return raw.strip()

    @staticmethod
    def _fallback(key: str, default: Any) -> Any:
        if default is None:
            raise ValueError(f"Environment variable '{key.upper()}' is not set.")
        return default

    ##########################################
    ################ GETTER ##################
    ##########################################

    def get_string_val(self, key: str, default: str | None = None) -> str:
        """Read a string environment variable.

        Args:
            key (str): Environment variable name (case-insensitive).
            default (str | None): Returned when the variable is unset or blank.

        Raises:
            ValueError: If the variable is not set and no default is provided.
        """
        raw = self._read_raw(key)
        return raw if raw is not None else self._fallback(key, default)

    def get_number_val(self, key: str, default: float | int | None = None) -> float | int:
        """Read a numeric environment variable. Values containing a dot are parsed as float.

        Raises:
            ValueError: If the variable is missing without default or is not a number.
        """
        raw = self._read_raw(key)
        if raw is None:
            return self._fallback(key, default)
        try:
            return float(raw) if "." in raw else int(raw)
        except ValueError as e:
            raise ValueError(f"Environment variable '{key.upper()}' is not a valid number: '{raw}'.") from e

    def get_bool_val(self, key: str, default: bool | None = None) -> bool:
        raw = self._read_raw(key)
        if raw is None:
            return self._fallback(key, default)
        return raw.lower() in TRUE_VALUES

    def get_list_val(self, key: str, default: list[str] | None = None, separator: str = ",") -> list[str]:
        """Read a list environment variable written as "[elem1,elem2,...]".

        Blank elements are dropped and the rest are whitespace stripped.

        Raises:
            ValueError: If the variable is missing without default or lacks the brackets.
        """
        raw = self._read_raw(key)
        if raw is None:
            return self._fallback(key, default)
        if not (raw.startswith("[") and raw.endswith("]")):
            raise ValueError(f"Environment variable '{key.upper()}' must be in the format '[elem1{separator}elem2{separator}...]'. Got: '{raw}'")
        elements = (elem.strip() for elem in raw[1:-1].split(separator))
        return [elem for elem in elements if elem]

    def get_logger(self) -> logging.Logger:
        """Return the application logger shared by all components."""
        return self._logger
