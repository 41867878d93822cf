# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Pytest configuration and shared fixtures for the GetExif test suite.

Fixtures build synthetic JPEG files in memory with MockExifJpeg; the
file-based fixtures write them under pytest's tmp_path.

Example:
    >>> def test_using_fixture(camera_jpeg):
    ...     assert camera_jpeg.startswith(b'\\xff\\xd8')
"""

import pytest

# pythonpath is configured in pyproject.toml to include the project root
from tests.fixtures.mock_jpeg_factory import MockExifJpeg, camera_sample, plain_jpeg


# =============================================================================
# Mock JPEG Fixtures
# =============================================================================

@pytest.fixture(params=['<', '>'], ids=['II', 'MM'])
def byte_order(request) -> str:
    """Runs a test once per TIFF byte order."""
    return request.param


@pytest.fixture
def camera_mock(byte_order) -> MockExifJpeg:
    """Camera-like sample with IFD0, EXIF and GPS entries."""
    return camera_sample(byte_order)


@pytest.fixture
def camera_jpeg(camera_mock) -> bytes:
    """Camera-like sample as JPEG bytes."""
    return camera_mock.build()


# =============================================================================
# File Fixtures
# =============================================================================

@pytest.fixture
def camera_jpeg_path(tmp_path, camera_jpeg):
    """Camera-like sample written to a temporary file."""
    path = tmp_path / 'camera.jpg'
    path.write_bytes(camera_jpeg)
    return path


@pytest.fixture
def plain_jpeg_path(tmp_path):
    """A JPEG without any APP1 segment."""
    path = tmp_path / 'plain.jpg'
    path.write_bytes(plain_jpeg())
    return path
