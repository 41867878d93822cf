# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Reader options

Enums for the summary reader and the limits applied by the IFD decoder.

Copyright 2025 DNAi inc.
"""

from dataclasses import dataclass
from enum import Enum


class FieldSet(Enum):
    """Which fields GetExif.read returns."""
    ALL = "all"  # Exposure fields plus camera, lens and make
    EXPOSURE = "exposure"  # Exposure fields only


class FormatMode(Enum):
    """How exposure values are rendered."""
    RAW = "raw"  # Decoded values as-is
    HUMAN = "human"  # Plain numbers, e.g. "28", "1/125"
    HUMAN_WITH_UNITS = "human_unit"  # With units, e.g. "28 mm", "1/125 s"


@dataclass(frozen=True)
class DecoderOptions:
    """
    Limits and switches for IFD decoding.

    Attributes:
        max_entries: Entries read per IFD before the rest are ignored
        follow_interop: Decode the Interop IFD pointed to from the EXIF IFD
    """
    max_entries: int = 1000
    follow_interop: bool = False
