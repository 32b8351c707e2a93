"""Configuration validation and request parameter coercion."""

import math
from dataclasses import dataclass
from typing import Any, Optional

from ..data.models import ChartRange
from .defaults import ChartParams, ThresholdParams


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
    def validate_correction_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate split-correction parameters."""
        errors = []

        if "recent_window" in params:
            value = params["recent_window"]
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                errors.append(ValidationError(
                    field="recent_window",
                    message="Must be a positive integer",
                    value=value
                ))

        if "default_baseline_ratio" in params:
            value = params["default_baseline_ratio"]
            if not _is_number(value) or value < 1:
                errors.append(ValidationError(
                    field="default_baseline_ratio",
                    message="Must be a number >= 1",
                    value=value
                ))

        if "split_ratio_multiplier" in params:
            value = params["split_ratio_multiplier"]
            if not _is_number(value) or value <= 1:
                errors.append(ValidationError(
                    field="split_ratio_multiplier",
                    message="Must be a number greater than 1",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_batch_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate pacing and retry parameters."""
        errors = []

        for name in ("pause_ms", "backoff_ms"):
            if name in params:
                value = params[name]
                if not _is_number(value) or value < 0:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a non-negative number",
                        value=value
                    ))

        for name in ("max_attempts", "concurrency"):
            if name in params:
                value = params[name]
                if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a positive integer",
                        value=value
                    ))

        return errors

    @staticmethod
    def validate_threshold_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate near-peak threshold parameters."""
        errors = []

        for name in ("default", "minimum", "maximum"):
            if name in params:
                value = params[name]
                if not _is_number(value) or value < 0:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a non-negative number",
                        value=value
                    ))

        minimum = params.get("minimum")
        maximum = params.get("maximum")
        if _is_number(minimum) and _is_number(maximum) and minimum > maximum:
            errors.append(ValidationError(
                field="minimum",
                message="Must not exceed maximum",
                value=minimum
            ))

        return errors

    @staticmethod
    def validate_cache_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate peak cache parameters."""
        errors = []

        if "ttl_days" in params:
            value = params["ttl_days"]
            if not _is_number(value) or value < 0:
                errors.append(ValidationError(
                    field="ttl_days",
                    message="Must be a non-negative number",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        if "correction" in config:
            errors.extend(ConfigValidator.validate_correction_params(config["correction"]))

        if "batch" in config:
            errors.extend(ConfigValidator.validate_batch_params(config["batch"]))

        if "threshold" in config:
            errors.extend(ConfigValidator.validate_threshold_params(config["threshold"]))

        if "cache" in config:
            errors.extend(ConfigValidator.validate_cache_params(config["cache"]))

        return errors


def coerce_threshold(value: Any, params: Optional[ThresholdParams] = None) -> float:
    """
    Coerce a caller-supplied near-peak threshold to a usable float.

    Missing, non-numeric, non-finite or out-of-range values fall back to the
    configured default instead of being rejected.
    """
    params = params or ThresholdParams()

    if value is None or isinstance(value, bool):
        return params.default

    try:
        threshold = float(value)
    except (TypeError, ValueError):
        return params.default

    if not math.isfinite(threshold):
        return params.default

    if threshold < params.minimum or threshold > params.maximum:
        return params.default

    return threshold


def coerce_range(value: Any, params: Optional[ChartParams] = None) -> ChartRange:
    """Coerce a chart range parameter, falling back to the configured default."""
    params = params or ChartParams()

    if isinstance(value, ChartRange):
        return value

    if isinstance(value, str):
        try:
            return ChartRange(value.strip().upper())
        except ValueError:
            pass

    return ChartRange(params.default_range)
