"""Descriptor failure types. Every failure carries a stable error code."""
from __future__ import annotations


class DescriptorError(ValueError):
    code = "E_DESCRIPTOR"

    def __init__(self, message: str, offset: int | None = None):
        super().__init__(message)
        self.offset = offset


class MalformedDescriptor(DescriptorError):
    """Truncated or over-long field; the layout could not be walked."""

    code = "E_MALFORMED"


class ChecksumNotFound(DescriptorError):
    """No candidate checksum matched within the scan window."""

    code = "E_CHECKSUM_NOT_FOUND"
