from __future__ import annotations

import errno
from enum import Enum


class StampError(Exception):
    """Base class for stamping errors."""


class ConfigurationError(StampError):
    pass


class ContractViolation(StampError):
    """Malformed input reaching the scanner or generator; aborts the flow."""


class MissingPlacementValueError(ContractViolation):
    def __init__(self, placement: object):
        super().__init__(f"Placement has no value to draw: {placement!r}")
        self.placement = placement


class MalformedRectangleError(ContractViolation):
    def __init__(self, operands: list[float]):
        super().__init__(
            f"Rectangle needs at least 2 numeric operands to anchor a placement, got {operands!r}"
        )
        self.operands = operands


class ContentScanError(ContractViolation):
    pass


class PageNotFoundError(ContractViolation):
    def __init__(self, page_index: int, page_count: int):
        super().__init__(f"Page {page_index} not found (document has {page_count} pages)")
        self.page_index = page_index
        self.page_count = page_count


class StorageErrorCode(str, Enum):
    ENOENT = "enoent"
    EACCES = "eacces"
    EPIPE = "epipe"
    EEXIST = "eexist"
    UNKNOWN = "unknown"


_ERRNO_CODES = {
    errno.ENOENT: StorageErrorCode.ENOENT,
    errno.EACCES: StorageErrorCode.EACCES,
    errno.EPERM: StorageErrorCode.EACCES,
    errno.EPIPE: StorageErrorCode.EPIPE,
    errno.EEXIST: StorageErrorCode.EEXIST,
}


def classify_storage_error(error: BaseException) -> StorageErrorCode:
    """Map a document-store failure onto the closed set reported to callers."""
    if isinstance(error, FileNotFoundError):
        return StorageErrorCode.ENOENT
    if isinstance(error, PermissionError):
        return StorageErrorCode.EACCES
    if isinstance(error, BrokenPipeError):
        return StorageErrorCode.EPIPE
    if isinstance(error, FileExistsError):
        return StorageErrorCode.EEXIST
    if isinstance(error, OSError) and error.errno in _ERRNO_CODES:
        return _ERRNO_CODES[error.errno]
    return StorageErrorCode.UNKNOWN
