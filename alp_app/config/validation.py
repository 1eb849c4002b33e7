"""Configuration validation utilities."""

import re
from dataclasses import dataclass
from typing import Any

from .defaults import CatalogParams, LedgerParams, LoggingParams, TimeoutParams

ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{40}$")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
KNOWN_SECTIONS = {
    "ledger": LedgerParams,
    "timeouts": TimeoutParams,
    "catalog": CatalogParams,
    "logging": LoggingParams,
}


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_ledger_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate ledger parameters."""
        errors = []

        if "contract_address" in params:
            value = params["contract_address"]
            if not isinstance(value, str) or not ADDRESS_PATTERN.match(value):
                errors.append(ValidationError(
                    field="contract_address",
                    message="Must be a 0x-prefixed 20-byte hex address",
                    value=value
                ))

        if "currency_symbol" in params:
            value = params["currency_symbol"]
            if not isinstance(value, str) or not value:
                errors.append(ValidationError(
                    field="currency_symbol",
                    message="Must be a non-empty string",
                    value=value
                ))

        # 10**77 is the largest power of ten below 2**256
        if "currency_decimals" in params:
            value = params["currency_decimals"]
            if not isinstance(value, int) or isinstance(value, bool) or not 0 <= value <= 77:
                errors.append(ValidationError(
                    field="currency_decimals",
                    message="Must be an integer between 0 and 77",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_timeout_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate timeout parameters."""
        errors = []

        if "confirmation_timeout_seconds" in params:
            value = params["confirmation_timeout_seconds"]
            if value is not None and (not _is_number(value) or value <= 0):
                errors.append(ValidationError(
                    field="confirmation_timeout_seconds",
                    message="Must be a positive number or null",
                    value=value
                ))

        if "read_timeout_seconds" in params:
            value = params["read_timeout_seconds"]
            if not _is_number(value) or value <= 0:
                errors.append(ValidationError(
                    field="read_timeout_seconds",
                    message="Must be a positive number",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_catalog_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate catalog parameters."""
        errors = []

        if "max_concurrent_reads" in params:
            value = params["max_concurrent_reads"]
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                errors.append(ValidationError(
                    field="max_concurrent_reads",
                    message="Must be a positive integer",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_logging_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate logging parameters."""
        errors = []

        if "level" in params:
            value = params["level"]
            if not isinstance(value, str) or value.upper() not in LOG_LEVELS:
                errors.append(ValidationError(
                    field="level",
                    message=f"Must be one of {', '.join(LOG_LEVELS)}",
                    value=value
                ))

        if "format_json" in params:
            value = params["format_json"]
            if not isinstance(value, bool):
                errors.append(ValidationError(
                    field="format_json",
                    message="Must be a boolean",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        for section, params in config.items():
            if section not in KNOWN_SECTIONS:
                errors.append(ValidationError(
                    field=section,
                    message="Unknown configuration section",
                    value=params
                ))
                continue

            if not isinstance(params, dict):
                errors.append(ValidationError(
                    field=section,
                    message="Must be a mapping",
                    value=params
                ))
                continue

            allowed = KNOWN_SECTIONS[section].__dataclass_fields__
            for key in params:
                if key not in allowed:
                    errors.append(ValidationError(
                        field=f"{section}.{key}",
                        message="Unknown configuration key",
                        value=params[key]
                    ))

        if errors:
            return errors

        if "ledger" in config:
            errors.extend(ConfigValidator.validate_ledger_params(config["ledger"]))

        if "timeouts" in config:
            errors.extend(ConfigValidator.validate_timeout_params(config["timeouts"]))

        if "catalog" in config:
            errors.extend(ConfigValidator.validate_catalog_params(config["catalog"]))

        if "logging" in config:
            errors.extend(ConfigValidator.validate_logging_params(config["logging"]))

        return errors
