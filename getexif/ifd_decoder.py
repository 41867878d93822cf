# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
IFD (Image File Directory) decoder

Parses the IFD entries of an Exif payload and follows the EXIF and GPS
sub-IFD pointers found in IFD0.

Each IFD is a 2-byte entry count followed by 12-byte entries:

    tag_id (2) | type (2) | count (4) | value or offset (4)

Values of up to 4 bytes are stored inline in the last field; larger values
live elsewhere in the payload and the field holds their offset, relative to
the start of the TIFF header.

Recursion is limited to the sub-IFDs pointed to from IFD0 (plus, when
enabled, the Interop IFD pointed to from the EXIF IFD), and an offset is
never decoded twice, so crafted pointer cycles cannot loop.

Copyright 2025 DNAi inc.
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Set, Tuple, Union

from getexif.byte_cursor import ByteCursor
from getexif.exceptions import EntryDecodeError, TruncatedDataError
from getexif.exif_tags import (
    EXIF_IFD_POINTER,
    GPS_IFD_POINTER,
    GROUP_EXIF,
    GROUP_GPS,
    GROUP_IFD0,
    GROUP_INTEROP,
    INTEROP_IFD_POINTER,
    tag_name,
)
from getexif.options import DecoderOptions
from getexif.tag_codec import ExifTagType, RawTagValue, UnsignedInt, decode_tag_value, tag_size

logger = logging.getLogger(__name__)

IFD_ENTRY_SIZE = 12


@dataclass(frozen=True)
class IfdEntry:
    """One decoded directory entry."""
    tag_id: int
    value_type: Union[ExifTagType, int]
    count: int
    value: RawTagValue


@dataclass(frozen=True)
class EntryError:
    """
    A directory entry that could not be decoded.

    `tag_id` is None when the problem is with the IFD table itself
    rather than one entry.
    """
    group: str
    tag_id: Optional[int]
    message: str

    def __str__(self) -> str:
        if self.tag_id is None:
            return f"{self.group}: {self.message}"
        return f"{self.group}:{tag_name(self.group, self.tag_id)}: {self.message}"


@dataclass(frozen=True)
class IfdGroup:
    """
    Read-only collection of the entries of one IFD, keyed by tag id.

    Attributes:
        name: Group name (IFD0, EXIF, GPS or Interop)
        entries: Mapping of tag id to IfdEntry
        offset: Offset of the IFD in the Exif payload
    """
    name: str
    entries: Mapping[int, IfdEntry]
    offset: int = 0

    def get(self, tag_id: int) -> Optional[IfdEntry]:
        return self.entries.get(tag_id)

    def __contains__(self, tag_id: object) -> bool:
        return tag_id in self.entries

    def __iter__(self) -> Iterator[int]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def items(self):
        return self.entries.items()


class IfdDecoder:
    """
    Decoder for the IFD chain of an Exif payload.

    Example:
        >>> header = TiffHeaderParser(payload).parse()
        >>> decoder = IfdDecoder(payload.with_byte_order(header.byte_order))
        >>> groups, errors = decoder.decode(header.ifd0_offset)
        >>> sorted(groups)
        ['EXIF', 'GPS', 'IFD0']
    """

    def __init__(self, payload: ByteCursor, options: Optional[DecoderOptions] = None):
        """
        Initialize the decoder.

        Args:
            payload: Cursor over the TIFF structure, already set to its byte order
            options: Decoding limits (default: DecoderOptions())
        """
        self.payload = payload
        self.options = options or DecoderOptions()
        self.errors: List[EntryError] = []
        self._visited: Set[int] = set()

    def decode(self, ifd0_offset: int) -> Tuple[Dict[str, IfdGroup], List[EntryError]]:
        """
        Decode IFD0 and the EXIF and GPS sub-IFDs it points to.

        Args:
            ifd0_offset: Offset of IFD0 in the payload

        Returns:
            Tuple of (groups by name, entry errors)

        Raises:
            TruncatedDataError: If the IFD0 entry count cannot be read
        """
        self.errors = []
        self._visited = set()

        ifd0 = self.read_ifd(ifd0_offset, GROUP_IFD0)
        groups = {GROUP_IFD0: ifd0}

        for pointer, group_name in ((EXIF_IFD_POINTER, GROUP_EXIF), (GPS_IFD_POINTER, GROUP_GPS)):
            sub_ifd = self._follow_pointer(ifd0, pointer, group_name)
            if sub_ifd is not None:
                groups[group_name] = sub_ifd

        if self.options.follow_interop and GROUP_EXIF in groups:
            interop = self._follow_pointer(groups[GROUP_EXIF], INTEROP_IFD_POINTER, GROUP_INTEROP)
            if interop is not None:
                groups[GROUP_INTEROP] = interop

        return groups, list(self.errors)

    def read_ifd(self, offset: int, group_name: str) -> IfdGroup:
        """
        Decode a single IFD without following any pointers.

        Malformed entries are skipped and recorded in `self.errors`.

        Args:
            offset: Offset of the IFD in the payload
            group_name: Name of the resulting group

        Returns:
            IfdGroup with every entry that could be decoded

        Raises:
            TruncatedDataError: If the entry count cannot be read
        """
        self._visited.add(offset)
        declared = self.payload.read_u16(offset)
        logger.debug(f"{group_name} IFD at offset {offset}: {declared} entries")

        count = declared
        if count > self.options.max_entries:
            self._record(group_name, None,
                         f"IFD declares {declared} entries, reading the first {self.options.max_entries}")
            count = self.options.max_entries

        entries: Dict[int, IfdEntry] = {}
        entry_offset = offset + 2
        for index in range(count):
            if not self.payload.contains(entry_offset, IFD_ENTRY_SIZE):
                self._record(group_name, None,
                             f"IFD at offset {offset} declares {declared} entries "
                             f"but only {index} fit in the payload")
                break

            try:
                entry = self._read_entry(entry_offset)
            except EntryDecodeError as e:
                self._record(group_name, e.tag_id, e.message)
            else:
                if entry.tag_id in entries:
                    self._record(group_name, entry.tag_id, "Duplicate tag, keeping the first occurrence")
                else:
                    entries[entry.tag_id] = entry

            entry_offset += IFD_ENTRY_SIZE

        return IfdGroup(name=group_name, entries=MappingProxyType(entries), offset=offset)

    def _read_entry(self, entry_offset: int) -> IfdEntry:
        """
        Decode the 12-byte entry at `entry_offset`.

        Raises:
            EntryDecodeError: If the value lies outside the payload
        """
        tag_id = self.payload.read_u16(entry_offset)
        value_type = self.payload.read_u16(entry_offset + 2)
        count = self.payload.read_u32(entry_offset + 4)

        byte_length = tag_size(value_type) * count

        # If value fits in 4 bytes, it's stored inline
        if byte_length <= 4:
            raw = self.payload.read_bytes(entry_offset + 8, byte_length)
        else:
            value_offset = self.payload.read_u32(entry_offset + 8)
            if not self.payload.contains(value_offset, byte_length):
                raise EntryDecodeError(
                    f"Value of {byte_length} bytes at offset {value_offset} "
                    f"is outside the {len(self.payload)}-byte Exif payload",
                    tag_id=tag_id,
                )
            raw = self.payload.read_bytes(value_offset, byte_length)

        try:
            value = decode_tag_value(value_type, count, raw, self.payload.byte_order)
        except TruncatedDataError as e:
            raise EntryDecodeError(e.message, tag_id=tag_id) from e

        try:
            value_type = ExifTagType(value_type)
        except ValueError:
            logger.debug(f"Tag 0x{tag_id:04X} has unknown type {value_type}, kept as raw bytes")

        return IfdEntry(tag_id=tag_id, value_type=value_type, count=count, value=value)

    def _follow_pointer(self, parent: IfdGroup, pointer_tag: int, group_name: str) -> Optional[IfdGroup]:
        """Decode the sub-IFD referenced by `pointer_tag` in `parent`, if usable."""
        entry = parent.get(pointer_tag)
        if entry is None:
            return None

        if not isinstance(entry.value, UnsignedInt):
            self._record(parent.name, pointer_tag,
                         f"{group_name} IFD pointer is not a single unsigned integer")
            return None

        offset = entry.value.value
        if offset in self._visited:
            self._record(parent.name, pointer_tag,
                         f"{group_name} IFD pointer {offset} refers to an IFD already decoded")
            return None
        if not self.payload.contains(offset, 2):
            self._record(parent.name, pointer_tag,
                         f"{group_name} IFD offset {offset} is outside the Exif payload")
            return None

        return self.read_ifd(offset, group_name)

    def _record(self, group: str, tag_id: Optional[int], message: str) -> None:
        error = EntryError(group=group, tag_id=tag_id, message=message)
        logger.warning(f"Skipped EXIF entry {error}")
        self.errors.append(error)
