"""
Custom exception classes for algokit.

Every error raised by the containers, the search/sort library and the
performance tooling derives from :class:`AlgoKitError` and carries a
machine-readable code plus a context dictionary, so the CLI and callers can
log failures the same way.

Capacity exhaustion and "not found" are reported through return values
(``False`` / ``None``), never through these exceptions.
"""

from typing import Optional, Any, Dict, List, Sequence


def _context(**values: Any) -> Dict[str, Any]:
    # Empty and missing values are left out of the context
    return {key: value for key, value in values.items() if value not in (None, '', [], {})}


class AlgoKitError(Exception):
    """
    Base exception class for all algokit errors.

    Attributes:
        message (str): Human-readable error message
        error_code (str): Machine-readable code, ``code`` of the class unless overridden
        context (Dict[str, Any]): Values describing what was rejected
    """

    code = "ALGOKIT_ERROR"

    def __init__(self, message: str, error_code: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.code
        self.context = dict(context or {})

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form used for structured log entries."""
        return {
            'error_type': type(self).__name__,
            'error_code': self.error_code,
            'message': self.message,
            'context': self.context,
        }


class ConfigurationError(AlgoKitError):
    """
    Raised when a component is constructed with invalid settings.

    This covers container capacities and load factors, analyzer sampling
    parameters and values read from the environment. Every problem found
    is reported at once instead of failing on the first one.
    """

    code = "CONFIG_ERROR"

    def __init__(self, message: str,
                 invalid_values: Optional[Dict[str, Any]] = None,
                 validation_errors: Optional[List[str]] = None,
                 env_file_path: Optional[str] = None):
        self.invalid_values = dict(invalid_values or {})
        self.validation_errors = list(validation_errors or [])
        self.env_file_path = env_file_path
        super().__init__(message, context=_context(
            invalid_values=self.invalid_values,
            validation_errors=self.validation_errors,
            env_file_path=env_file_path,
        ))

    def get_troubleshooting_message(self) -> str:
        """
        Multi-line explanation for the terminal.

        Lists each rejected value and validation failure, the .env file that
        was read and where the supported variables are documented.
        """
        sections = [f"Configuration Error: {self.message}"]

        if self.invalid_values:
            rejected = "\n".join(f"  - {key}: {value}" for key, value in self.invalid_values.items())
            sections.append(f"Invalid values (check types and ranges):\n{rejected}")

        if self.validation_errors:
            failures = "\n".join(f"  - {failure}" for failure in self.validation_errors)
            sections.append(f"Validation errors:\n{failures}")

        if self.env_file_path:
            sections.append(f"Environment file path: {self.env_file_path}")

        sections.append("See config/.env.example for every supported ALGOKIT_* variable.")
        return "\n\n".join(sections)


class InsufficientDataError(ConfigurationError):
    """Raised when classification is requested with fewer than two points."""

    code = "INSUFFICIENT_DATA_ERROR"

    def __init__(self, message: str, points: int):
        super().__init__(message, invalid_values={'measurement_points': points})
        self.context['points'] = points
        self.points = points


class ValidationError(AlgoKitError):
    """
    Raised when a call argument is rejected.

    This includes ``None`` keys and items, negative limits and unknown
    algorithm or backend names.
    """

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, field_name: Optional[str] = None,
                 value: Optional[Any] = None, allowed: Optional[Sequence[str]] = None):
        self.field_name = field_name
        self.value = value
        self.allowed = list(allowed or [])
        super().__init__(message, context=_context(
            field_name=field_name,
            value=None if value is None else str(value),
            value_type=None if value is None else type(value).__name__,
            allowed=self.allowed,
        ))


class MeasurementError(AlgoKitError):
    """
    Raised when code under measurement fails.

    The analyzer raises this from the original error when the input
    generator or the algorithm raises, so the traceback of the failing
    callable is preserved as ``__cause__``.
    """

    code = "MEASUREMENT_ERROR"

    def __init__(self, message: str, input_size: Optional[int] = None,
                 phase: Optional[str] = None, original_error: Optional[Exception] = None):
        self.input_size = input_size
        self.phase = phase
        self.original_error = original_error
        super().__init__(message, context=_context(
            input_size=input_size,
            phase=phase,
            original_error=None if original_error is None else str(original_error),
            original_error_type=None if original_error is None else type(original_error).__name__,
        ))
