"""
Exception hierarchy for healthstats.

This module defines all custom exceptions used throughout the package,
providing clear error messages and proper inheritance structure.
"""

from typing import Optional, Any, Dict


class HealthStatsError(Exception):
    """Base exception for all healthstats errors.

    This is the root exception class that all other healthstats exceptions
    inherit from. It provides enhanced error reporting with optional
    context information.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None,
                 cause: Optional[Exception] = None):
        """Initialize healthstats error.

        Parameters
        ----------
        message : str
            Primary error message
        details : dict, optional
            Additional context information
        cause : Exception, optional
            Original exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        """String representation of the error."""
        base_msg = self.message

        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            base_msg += f" (Details: {details_str})"

        if self.cause:
            base_msg += f" (Caused by: {self.cause})"

        return base_msg

    def add_detail(self, key: str, value: Any) -> "HealthStatsError":
        """Add detail information to the error.

        Parameters
        ----------
        key : str
            Detail key
        value : Any
            Detail value

        Returns
        -------
        HealthStatsError
            Self for method chaining
        """
        self.details[key] = value
        return self

    def get_detail(self, key: str, default: Any = None) -> Any:
        """Get detail information from the error."""
        return self.details.get(key, default)


class InvalidInputError(HealthStatsError):
    """Raised when input sequences cannot support the requested computation.

    Covers mismatched lengths, insufficient sample size for the degrees of
    freedom, non-finite samples, non-positive scales or steps, and empty
    embedding ranges.
    """

    def __init__(self, message: str, field: Optional[str] = None,
                 value: Optional[Any] = None, **kwargs):
        """Initialize invalid input error.

        Parameters
        ----------
        message : str
            Error message
        field : str, optional
            Name of the argument that failed validation
        value : Any, optional
            Offending value (kept short: sizes or scalars, not whole arrays)
        **kwargs
            Additional arguments for base class
        """
        details = kwargs.pop('details', {})
        if field is not None:
            details['field'] = field
        if value is not None:
            details['value'] = value

        super().__init__(message, details=details, **kwargs)
        self.field = field
        self.value = value


class SingularMatrixError(HealthStatsError):
    """Raised when a pivot falls below tolerance during matrix inversion."""

    def __init__(self, message: str, column: Optional[int] = None,
                 pivot: Optional[float] = None, **kwargs):
        details = kwargs.pop('details', {})
        if column is not None:
            details['column'] = column
        if pivot is not None:
            details['pivot'] = pivot

        super().__init__(message, details=details, **kwargs)
        self.column = column
        self.pivot = pivot


class DomainError(HealthStatsError):
    """Raised when a special-function argument lies outside its domain.

    Used for log-gamma arguments <= 0, degrees of freedom <= 0 and
    incomplete-beta arguments outside [0, 1].
    """

    def __init__(self, message: str, function: Optional[str] = None,
                 argument: Optional[Any] = None, **kwargs):
        """Initialize domain error.

        Parameters
        ----------
        message : str
            Error message
        function : str, optional
            Name of the special function
        argument : Any, optional
            Argument value that is out of domain
        **kwargs
            Additional arguments for base class
        """
        details = kwargs.pop('details', {})
        if function is not None:
            details['function'] = function
        if argument is not None:
            details['argument'] = argument

        super().__init__(message, details=details, **kwargs)
        self.function = function
        self.argument = argument


class NumericalDivergenceError(HealthStatsError):
    """Raised when an iterative solver produces a non-finite state."""

    def __init__(self, message: str, step: Optional[int] = None,
                 time: Optional[float] = None, **kwargs):
        details = kwargs.pop('details', {})
        if step is not None:
            details['step'] = step
        if time is not None:
            details['time'] = time

        super().__init__(message, details=details, **kwargs)
        self.step = step
        self.time = time


class ComputationCancelled(HealthStatsError):
    """Raised when a batch computation is cancelled between tasks."""

    def __init__(self, message: str, completed: Optional[int] = None,
                 total: Optional[int] = None, **kwargs):
        details = kwargs.pop('details', {})
        if completed is not None:
            details['completed'] = completed
        if total is not None:
            details['total'] = total

        super().__init__(message, details=details, **kwargs)
        self.completed = completed
        self.total = total


class ConfigurationError(HealthStatsError):
    """Raised when configuration is invalid or missing.

    This exception is used for configuration-related errors such as
    invalid values or malformed config files.
    """

    def __init__(self, message: str, config_file: Optional[str] = None,
                 parameter: Optional[str] = None, **kwargs):
        """Initialize configuration error.

        Parameters
        ----------
        message : str
            Configuration error message
        config_file : str, optional
            Path to the configuration file with issues
        parameter : str, optional
            Name of the problematic parameter
        **kwargs
            Additional arguments for base class
        """
        details = kwargs.pop('details', {})
        if config_file is not None:
            details['config_file'] = config_file
        if parameter is not None:
            details['parameter'] = parameter

        super().__init__(message, details=details, **kwargs)
        self.config_file = config_file
        self.parameter = parameter


def reraise_with_context(exception: Exception, context: str,
                        additional_details: Optional[Dict[str, Any]] = None) -> None:
    """Re-raise an exception with additional context.

    Parameters
    ----------
    exception : Exception
        Original exception
    context : str
        Additional context message
    additional_details : dict, optional
        Additional details to include

    Raises
    ------
    HealthStatsError
        Enhanced exception with context
    """
    if isinstance(exception, HealthStatsError):
        exception.message = f"{context}: {exception.message}"
        if additional_details:
            exception.details.update(additional_details)
        raise exception
    else:
        message = f"{context}: {str(exception)}"
        details = additional_details or {}
        details['original_exception_type'] = type(exception).__name__
        raise HealthStatsError(message, details=details, cause=exception) from exception
