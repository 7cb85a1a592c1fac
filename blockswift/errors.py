"""Error definitions for the BlockSwift pipeline."""

from __future__ import annotations

from enum import Enum, auto


class ErrorCategory(Enum):
    """Categorises failures so the CLI can pick an exit code."""

    ARGUMENT = auto()
    FILE_IO = auto()
    CONFIGURATION = auto()
    PROJECT = auto()
    ARCHIVE = auto()
    INTERRUPTED = auto()
    OTHER = auto()


class BlockSwiftError(Exception):
    """Base exception for all custom errors."""

    category = ErrorCategory.OTHER


class OverwriteRefusedError(BlockSwiftError):
    """Raised when attempting to overwrite an output without consent."""

    category = ErrorCategory.FILE_IO


class EmptyTranslationError(BlockSwiftError):
    """Raised when an export is requested but there is no Swift code."""

    category = ErrorCategory.ARGUMENT


class ConfigurationError(BlockSwiftError):
    """Raised when configuration sources are unreadable or invalid."""

    category = ErrorCategory.CONFIGURATION


class ProjectGraphError(BlockSwiftError):
    """Raised when the Xcode object graph has dangling or duplicate identifiers."""

    category = ErrorCategory.PROJECT


class ArchiveError(BlockSwiftError):
    """Raised when the project archive could not be produced."""

    category = ErrorCategory.ARCHIVE
