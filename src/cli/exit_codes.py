"""Exit code taxonomy for the spancache CLI."""

from __future__ import annotations

from enum import IntEnum

from span_cache.errors import InvalidSpanError, SpanStorageError


class ExitCode(IntEnum):
    """Standard exit codes for CLI commands.

    Exit codes follow Unix conventions with domain-specific extensions:
    - 0: Success
    - 1-9: General errors (parse, validation, config)
    - 20-29: Storage errors
    """

    SUCCESS = 0
    GENERAL_ERROR = 1
    PARSE_ERROR = 2
    VALIDATION_ERROR = 3
    CONFIG_ERROR = 4

    STORAGE_ERROR = 20

    @classmethod
    def from_exception(cls, exc: BaseException) -> ExitCode:
        """Map an exception to an appropriate exit code.

        Parameters
        ----------
        exc
            Exception to classify.

        Returns
        -------
        ExitCode
            Exit code appropriate for the exception type.
        """
        cyclopts_code = _exit_code_for_cyclopts(exc)
        if cyclopts_code is not None:
            return cyclopts_code
        if isinstance(exc, SpanStorageError):
            return cls.STORAGE_ERROR
        if isinstance(exc, (InvalidSpanError, ValueError, TypeError)):
            return cls.VALIDATION_ERROR
        if isinstance(exc, (FileNotFoundError, NotADirectoryError, PermissionError)):
            return cls.CONFIG_ERROR
        return cls.GENERAL_ERROR


def _exit_code_for_cyclopts(exc: BaseException) -> ExitCode | None:
    module = exc.__class__.__module__
    if not module.startswith("cyclopts"):
        return None
    if exc.__class__.__name__ == "ValidationError":
        return ExitCode.VALIDATION_ERROR
    return ExitCode.PARSE_ERROR


__all__ = ["ExitCode"]
