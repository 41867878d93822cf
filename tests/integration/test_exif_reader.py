# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Integration tests: decoding complete JPEG buffers with ExifReader.
"""

from datetime import datetime

import pytest

from getexif import ExifReader, decode
from getexif.byte_cursor import ByteOrder
from getexif.core import GetExif
from getexif.exceptions import (
    InvalidTiffHeaderError,
    MetadataReadError,
    NoExifSegmentError,
    NotAJpegError,
    TruncatedDataError,
)
from getexif.options import DecoderOptions
from getexif.tag_codec import Ascii, ExifTagType, Rational
from tests.fixtures.mock_jpeg_factory import (
    Entry,
    MockExifJpeg,
    camera_sample,
    entry,
    plain_jpeg,
    wrap_in_jpeg,
)


@pytest.mark.integration
class TestDecodeScenarios:
    """End-to-end decodes of typical and broken files."""

    def test_focal_length_in_ifd0(self, byte_order):
        mock = MockExifJpeg(byte_order, ifd0=[entry(0x920A, ExifTagType.RATIONAL, (280, 10))])
        data = mock.build()

        document = ExifReader().decode(data)
        assert document.get('IFD0', 'FocalLength') == Rational(280, 10)

        summary = GetExif().read_bytes(data)
        assert summary['exposure']['focal_length']['value'] == '28 mm'

    def test_exposure_time(self, byte_order):
        mock = MockExifJpeg(byte_order, exif=[entry(0x829A, ExifTagType.RATIONAL, (10, 1250))])
        summary = GetExif().read_bytes(mock.build())
        assert summary['exposure']['shutter_speed'] == {'raw': '10/1250', 'value': '1/125 s'}

    def test_gps_position(self, camera_jpeg):
        location = decode(camera_jpeg).geolocation()
        assert location.latitude == pytest.approx(40.446, abs=1e-3)
        assert location.longitude == pytest.approx(-79.982, abs=1e-3)

    def test_no_app1_segment(self):
        with pytest.raises(NoExifSegmentError):
            decode(plain_jpeg())

    def test_ifd0_offset_past_end(self, byte_order):
        mock = MockExifJpeg(byte_order, ifd0_offset=0x1000)
        with pytest.raises(TruncatedDataError):
            decode(mock.build())

    def test_created_at(self, camera_jpeg):
        assert decode(camera_jpeg).created_at() == datetime(2020, 5, 26, 14, 32, 18)


@pytest.mark.integration
class TestDecodedDocument:

    def test_byte_order_recorded(self, camera_mock):
        document = decode(camera_mock.build())
        assert document.byte_order is ByteOrder(camera_mock.byte_order)

    def test_both_byte_orders_agree(self):
        little = decode(camera_sample('<').build())
        big = decode(camera_sample('>').build())
        assert little.to_dict() == big.to_dict()
        assert little.groups == big.groups

    def test_to_dict(self, camera_jpeg):
        data = decode(camera_jpeg).to_dict()
        assert data['IFD0']['Make'] == 'Canon'
        assert data['EXIF']['ExposureTime'] == '10/1250'
        assert data['GPS']['GPSLatitude'] == ['40/1', '26/1', '46/1']

    def test_idempotent(self, camera_jpeg):
        reader = ExifReader()
        assert reader.decode(camera_jpeg) == reader.decode(camera_jpeg)

    def test_document_outlives_buffer(self, camera_jpeg):
        data = bytearray(camera_jpeg)
        document = decode(data)
        for index in range(len(data)):
            data[index] = 0
        assert document.get('IFD0', 'Make') == Ascii('Canon')

    def test_memoryview_input(self, camera_jpeg):
        assert decode(memoryview(camera_jpeg)).get('IFD0', 'Model') == Ascii('Canon EOS 5D')

    def test_entry_errors_do_not_fail_decode(self):
        mock = MockExifJpeg(ifd0=[
            Entry(0x010F, ExifTagType.ASCII, 40, value_field=b'\xff\xff\x00\x00'),
            entry(0x0110, ExifTagType.ASCII, 'X-T4'),
        ])
        document = decode(mock.build())
        assert document.get('IFD0', 'Model') == Ascii('X-T4')
        assert len(document.errors) == 1

    def test_interop_option(self):
        mock = MockExifJpeg(
            exif=[entry(0x9000, ExifTagType.UNDEFINED, b'0232')],
            interop=[entry(0x0001, ExifTagType.ASCII, 'R98')],
        )
        assert 'Interop' not in decode(mock.build())
        document = decode(mock.build(), DecoderOptions(follow_interop=True))
        assert document.get('Interop', 'InteroperabilityIndex') == Ascii('R98')


@pytest.mark.integration
class TestMalformedBuffers:
    """Broken input fails with a MetadataReadError, never anything else."""

    def test_not_a_jpeg(self):
        with pytest.raises(NotAJpegError):
            decode(b'GIF89a' + b'\x00' * 32)

    def test_bad_magic(self, byte_order):
        with pytest.raises(InvalidTiffHeaderError):
            decode(MockExifJpeg(byte_order, magic=43).build())

    def test_truncated_files(self, camera_jpeg):
        # Cut the file anywhere before the end of the Exif segment
        exif_end = camera_jpeg.index(b'\xff\xdb')
        for size in range(exif_end):
            with pytest.raises(MetadataReadError):
                decode(camera_jpeg[:size])

    def test_truncated_tiff_payloads(self, camera_mock):
        payload = camera_mock.tiff_payload()
        for size in range(len(payload)):
            try:
                document = decode(wrap_in_jpeg(payload[:size]))
            except MetadataReadError:
                continue
            # A decode that gets past the header always yields IFD0
            assert document.group('IFD0') is not None

    def test_corrupted_bytes(self, camera_mock):
        payload = bytearray(camera_mock.tiff_payload())
        for index in range(8, len(payload)):
            corrupted = bytearray(payload)
            corrupted[index] ^= 0xFF
            try:
                decode(wrap_in_jpeg(bytes(corrupted)))
            except MetadataReadError:
                pass
