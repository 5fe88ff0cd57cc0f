"""syncini-specific exceptions and warnings"""

from pathlib import Path

# ---------- #
# Exceptions
# ---------- #


class IniError(Exception):
    """Base class of every syncini exception."""


class ParseError(IniError):
    """Raised when a line of an ini could not be parsed."""

    def __init__(self, message: str, line_number: int = 0, line_position: int = 0):
        """
        Args:
            message (str): What went wrong.
            line_number (int, optional): 1-based line of the error. 0 if unknown.
                Defaults to 0.
            line_position (int, optional): 1-based column of the error. 0 if unknown.
                Defaults to 0.
        """
        self.message = message
        self.line_number = line_number
        self.line_position = line_position
        super().__init__(
            f"{message} - Line: {line_number}, Position: {line_position}."
            if line_number
            else message
        )


class DuplicateSectionError(IniError, KeyError):
    """Raised when a section is added that already exists."""

    def __init__(self, section: str) -> None:
        self.section = section
        super().__init__(f"Section '{section}' already exists.")

    def __str__(self) -> str:
        return self.args[0]


class SectionNotFoundError(IniError, KeyError):
    """Raised when a section was to be accessed but doesn't exist."""

    def __init__(self, path: str | Path | None, section: str) -> None:
        self.path = path
        self.section = section
        super().__init__(f"'{section}' does not exist in {path}.")

    def __str__(self) -> str:
        return self.args[0]


class KeyNotFoundError(IniError, KeyError):
    """Raised when a key was to be accessed but doesn't exist in its section."""

    def __init__(self, path: str | Path | None, section: str, key: str) -> None:
        self.path = path
        self.section = section
        self.key = key
        super().__init__(f"'{key}' does not exist under '{section}' in {path}.")

    def __str__(self) -> str:
        return self.args[0]


class InvalidWriterStateError(IniError, RuntimeError):
    """Raised when a write is attempted out of sequence or after closing."""


class TypeConversionError(IniError, ValueError):
    """Raised when a value could not be converted from or to its ini string."""

    def __init__(self, value: object, target: str) -> None:
        self.value = value
        self.target = target
        super().__init__(f"Failed to convert {value!r} to {target}.")


class InvalidArgumentError(IniError, ValueError):
    """Raised when an argument is not acceptable for the requested operation."""


# ---------- #
# Warnings
# ---------- #


class IniStructureWarning(Warning):
    """Raised when the ini violates the expected structure."""


class DuplicateKeyWarning(IniStructureWarning):
    """Raised when a key appears twice in one section body. The first one is kept."""
