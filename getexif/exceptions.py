# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Exception classes for GetExif

This module defines the exceptions raised while decoding EXIF data.
Structural problems abort a decode with a MetadataReadError subclass;
problems confined to a single IFD entry raise EntryDecodeError, which the
IFD decoder catches and records instead of propagating.

Copyright 2025 DNAi inc.
"""


class GetExifError(Exception):
    """
    Base exception for all GetExif errors.

    All GetExif exceptions inherit from this class, allowing
    catch-all error handling for any GetExif-related errors.
    """
    def __init__(self, message: str = ""):
        """
        Initialize the exception with an optional error message.

        Args:
            message: Descriptive error message explaining what went wrong
        """
        self.message = message
        super().__init__(message)


class MetadataReadError(GetExifError):
    """
    Raised when EXIF metadata cannot be decoded from a buffer.

    This is the parent of every structural failure. No partial
    document is returned when one of these is raised.
    """
    pass


class NotAJpegError(MetadataReadError):
    """Raised when the buffer does not start with the JPEG SOI marker."""
    pass


class NoExifSegmentError(MetadataReadError):
    """
    Raised when no APP1 segment carrying an Exif payload is found
    before the image data (SOS marker) or the end of the buffer.
    """
    pass


class InvalidTiffHeaderError(MetadataReadError):
    """
    Raised when the TIFF header inside the Exif payload is invalid.

    This exception is raised when:
    - The byte order marker is neither "II" nor "MM"
    - The magic number is not 42 in the detected byte order
    """
    pass


class TruncatedDataError(MetadataReadError):
    """
    Raised when a read would go past the end of the buffer.

    Covers JPEG segment lengths, the TIFF header, IFD tables and
    out-of-line tag values.
    """
    pass


class EntryDecodeError(GetExifError):
    """
    Raised when a single IFD entry cannot be decoded.

    The IFD decoder catches this, records it alongside the document
    and carries on with the remaining entries.
    """
    def __init__(self, message: str = "", tag_id=None):
        super().__init__(message)
        self.tag_id = tag_id
