"""
Validation engine for enhancement settings.

Structured validation rules reported as ValidationIssue lists. Out-of-range
settings are WARNINGs: the orchestrator clamps them instead of failing.
"""

import math
from typing import List

from .types import FilterSettings, ValidationIssue, ValidationSeverity


class SettingsValidator:
    """Validates FilterSettings records."""

    @staticmethod
    def validate(settings: FilterSettings) -> List[ValidationIssue]:
        """
        Validate a settings record.

        Returns list of ValidationIssue; ERROR means the value cannot be used
        at all (not a number), WARNING means it will be clamped.
        """
        issues = []
        issues.extend(SettingsValidator._validate_numbers(settings))
        issues.extend(SettingsValidator._validate_ranges(settings))
        return issues

    @staticmethod
    def _validate_numbers(settings: FilterSettings) -> List[ValidationIssue]:
        issues = []
        for name in FilterSettings.RANGES:
            value = getattr(settings, name)
            if not isinstance(value, (int, float)) or isinstance(value, bool):
                issues.append(
                    ValidationIssue(
                        severity=ValidationSeverity.ERROR,
                        code="NOT_A_NUMBER",
                        message=f"'{name}' must be a number, got {type(value).__name__}.",
                        context={"field": name},
                    )
                )
            elif not math.isfinite(value):
                issues.append(
                    ValidationIssue(
                        severity=ValidationSeverity.ERROR,
                        code="NON_FINITE",
                        message=f"'{name}' must be finite, got {value}.",
                        context={"field": name, "value": value},
                    )
                )
        return issues

    @staticmethod
    def _validate_ranges(settings: FilterSettings) -> List[ValidationIssue]:
        issues = []
        for name, (lo, hi) in FilterSettings.RANGES.items():
            value = getattr(settings, name)
            if not isinstance(value, (int, float)) or not math.isfinite(value):
                continue
            if value < lo or value > hi:
                issues.append(
                    ValidationIssue(
                        severity=ValidationSeverity.WARNING,
                        code="OUT_OF_RANGE",
                        message=f"'{name}' = {value} is outside [{lo:g}, {hi:g}] and will be clamped.",
                        context={"field": name, "value": value, "min": lo, "max": hi},
                    )
                )
        return issues

    @staticmethod
    def has_errors(issues: List[ValidationIssue]) -> bool:
        return any(i.severity == ValidationSeverity.ERROR for i in issues)
