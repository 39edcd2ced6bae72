"""
Recreation Exceptions

Error taxonomy shared by the translators, the tree recreator and the file
workflow. Kept in its own module to avoid circular imports between the
translators and the translation package.
"""

from typing import Any, Optional


class RecreateError(Exception):
    """Base error with optional machine-readable code and details."""

    def __init__(self, message: str, code: str = None, details: dict = None):
        super().__init__(message)
        self.code = code
        self.details = details or {}


class ConfigError(RecreateError):
    """Translator or application configuration is missing or invalid."""


class InputReadFailure(RecreateError):
    """Source file is missing, unreadable, or not a valid resource tree."""

    def __init__(self, path, cause: Any = None, message: str = None):
        self.path = str(path)
        self.cause = cause
        super().__init__(
            message or f"Cannot read source file {self.path}: {cause}",
            code="input_read_failure",
            details={"path": self.path, "cause": str(cause) if cause else None},
        )


class TranslationFailure(RecreateError):
    """A single translator call failed."""

    def __init__(
        self,
        text: str,
        target_language: str,
        cause: Any = None,
        pointer: Optional[str] = None,
        retryable: bool = True,
    ):
        self.text = text
        self.target_language = target_language
        self.cause = cause
        self.pointer = pointer
        self.retryable = retryable
        super().__init__(
            self._format(),
            code="translation_failure",
            details={
                "text": text,
                "target_language": target_language,
                "pointer": pointer,
                "cause": str(cause) if cause else None,
            },
        )

    def _format(self) -> str:
        location = f" at {self.pointer}" if self.pointer is not None else ""
        preview = self.text if len(self.text) <= 60 else self.text[:57] + "..."
        return f"Translation to '{self.target_language}' failed{location} for {preview!r}: {self.cause}"

    def at(self, pointer: str) -> "TranslationFailure":
        """Attach the JSON pointer of the failing leaf."""
        self.pointer = pointer
        self.details["pointer"] = pointer
        self.args = (self._format(),)
        return self


class OutputWriteFailure(RecreateError):
    """Translation succeeded but the destination could not be written.

    The translated tree is kept on the exception so the write step alone can
    be retried without spending translator calls again.
    """

    def __init__(self, path, tree: Any, cause: Any = None):
        self.path = str(path)
        self.tree = tree
        self.cause = cause
        super().__init__(
            f"Translation succeeded but writing {self.path} failed: {cause}",
            code="output_write_failure",
            details={"path": self.path, "cause": str(cause) if cause else None},
        )


class RecreationCancelled(RecreateError):
    """Recreation was cancelled; partial output has been discarded."""

    def __init__(self, completed: int = 0, total: int = 0):
        self.completed = completed
        self.total = total
        super().__init__(
            f"Recreation cancelled after {completed}/{total} strings",
            code="cancelled",
            details={"completed": completed, "total": total},
        )


class UnsupportedValueError(RecreateError):
    """A value outside the resource tree value space was encountered."""

    def __init__(self, value: Any, pointer: str):
        super().__init__(
            f"Unsupported value of type {type(value).__name__} at {pointer or '/'}",
            code="unsupported_value",
            details={"pointer": pointer, "type": type(value).__name__},
        )
