from skycast.models.outcome.outcome import (
    ERROR_TYPES,
    ClassifiedOutcome,
    ErrorCategory,
    RecoverableError,
    Success,
    TerminalError,
)

__all__ = [
    "ERROR_TYPES",
    "ClassifiedOutcome",
    "ErrorCategory",
    "RecoverableError",
    "Success",
    "TerminalError",
]
