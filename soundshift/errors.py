"""Type-safe exception hierarchy and error codes.

Provides structured error handling with:
- Domain-specific exception taxonomy
- Structured error details for callers and the CLI

The rule engine itself never lets these escape for ordinary input;
they are raised at the validation seam (rule records, config files).
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class ErrorCode(str, Enum):
    """Type-safe error codes."""

    # Validation errors
    INVALID_INPUT = "invalid_input"
    INVALID_RULE = "invalid_rule"
    INVALID_FEATURE_EXPRESSION = "invalid_feature_expression"

    # Resource errors
    FILE_NOT_FOUND = "file_not_found"

    # Processing errors
    MALFORMED_PATTERN = "malformed_pattern"
    TRANSFORMATION_FAILED = "transformation_failed"


class ErrorDetail(BaseModel):
    """Structured error information."""

    code: ErrorCode
    message: str
    field: Optional[str] = None
    context: dict = Field(default_factory=dict)


class SoundShiftError(Exception):
    """Base exception for all application errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        field: Optional[str] = None,
        **context
    ):
        self.code = code
        self.message = message
        self.field = field
        self.context = context
        super().__init__(message)

    def to_detail(self) -> ErrorDetail:
        """Convert to error detail."""
        return ErrorDetail(
            code=self.code,
            message=self.message,
            field=self.field,
            context=self.context
        )


# ═════════════════════════════════════════════════════════════════════════════
# Validation Errors
# ═════════════════════════════════════════════════════════════════════════════

class ValidationError(SoundShiftError):
    """Invalid input data."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INVALID_INPUT,
        field: Optional[str] = None,
        **context
    ):
        super().__init__(
            code=code,
            message=message,
            field=field,
            **context
        )


class InvalidRuleError(ValidationError):
    """Sound-change rule record cannot be interpreted."""

    def __init__(self, rule_id: str, reason: str):
        super().__init__(
            message=f"Invalid rule {rule_id!r}: {reason}",
            code=ErrorCode.INVALID_RULE,
            field="rule",
            rule_id=rule_id,
            reason=reason
        )


class InvalidFeatureExpressionError(ValidationError):
    """Feature expression text is malformed."""

    def __init__(self, expression: str, reason: Optional[str] = None):
        message = f"Invalid feature expression: {expression}"
        if reason:
            message += f" ({reason})"
        super().__init__(
            message=message,
            code=ErrorCode.INVALID_FEATURE_EXPRESSION,
            field="expression",
            expression=expression,
            reason=reason
        )


# ═════════════════════════════════════════════════════════════════════════════
# Resource Errors
# ═════════════════════════════════════════════════════════════════════════════

class ResourceNotFoundError(SoundShiftError):
    """Requested resource does not exist."""

    def __init__(
        self,
        resource_type: str,
        identifier: str,
        code: ErrorCode = ErrorCode.FILE_NOT_FOUND
    ):
        super().__init__(
            code=code,
            message=f"{resource_type} not found: {identifier}",
            resource_type=resource_type,
            identifier=identifier
        )


# ═════════════════════════════════════════════════════════════════════════════
# Processing Errors
# ═════════════════════════════════════════════════════════════════════════════

class ProcessingError(SoundShiftError):
    """Data processing or transformation failed."""

    def __init__(
        self,
        operation: str,
        reason: str,
        code: ErrorCode = ErrorCode.TRANSFORMATION_FAILED,
        **context
    ):
        super().__init__(
            code=code,
            message=f"{operation} failed: {reason}",
            operation=operation,
            reason=reason,
            **context
        )


class MalformedPatternError(ProcessingError):
    """Context expansion produced a pattern the regex engine rejects."""

    def __init__(self, pattern: str, rule_id: str, reason: str):
        super().__init__(
            operation=f"Pattern compilation for rule '{rule_id}'",
            reason=reason,
            code=ErrorCode.MALFORMED_PATTERN,
            pattern=pattern,
            rule_id=rule_id
        )
