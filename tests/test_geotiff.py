import struct
import zlib

import numpy as np
import pytest

from costidw.geotiff import DEFAULT_GEOTRANSFORM, GeoRaster, read_geotiff, write_geotiff


def _handmade_tiff(order, width, height, bits, sample_format, strips, rows_per_strip, compression=1):
    """Build a minimal TIFF with at most two strips, every tag as SHORT values."""
    tags = [
        (256, [width]),
        (257, [height]),
        (258, [bits]),
        (259, [compression]),
        (273, None),
        (278, [rows_per_strip]),
        (279, None),
        (339, [sample_format]),
    ]
    position = 8 + 2 + 12 * len(tags) + 4
    offsets = []
    for strip in strips:
        offsets.append(position)
        position += len(strip)
    counts = [len(strip) for strip in strips]
    out = bytearray(b"II" if order == "<" else b"MM")
    out += struct.pack(order + "HI", 42, 8)
    out += struct.pack(order + "H", len(tags))
    for tag, values in tags:
        if tag == 273:
            values = offsets
        elif tag == 279:
            values = counts
        field = struct.pack(f"{order}{len(values)}H", *values).ljust(4, b"\0")
        out += struct.pack(order + "HHI", tag, 3, len(values)) + field
    out += struct.pack(order + "I", 0)
    for strip in strips:
        out += strip
    return bytes(out)


def test_round_trip(tmp_path):
    data = (np.arange(12, dtype=np.float32).reshape(3, 4) * 0.5) - 1.0
    gt = (500000.0, 30.0, 0.0, 1000000.0, 0.0, -30.0)
    target = tmp_path / "out.tif"
    write_geotiff(target, data, gt, "EPSG:21037", -9999)
    raster = read_geotiff(target)
    assert np.array_equal(raster.data, data)
    assert raster.geotransform == gt
    assert raster.projection == "EPSG:21037"
    assert raster.nodata == -9999.0
    assert raster.null_value == -9999
    assert (raster.rows, raster.cols) == (3, 4)
    assert raster.scale == 30.0


def test_round_trip_without_nodata_or_projection(tmp_path):
    data = np.ones((2, 5), dtype=np.float32)
    target = tmp_path / "plain.tif"
    write_geotiff(target, data, (1.0, 2.0, 0.0, 3.0, 0.0, -2.0))
    raster = read_geotiff(target)
    assert raster.nodata is None
    assert raster.null_value == 0
    assert raster.projection == ""
    assert np.array_equal(raster.data, data)


def test_round_trip_rotated_geotransform(tmp_path):
    gt = (10.0, 2.0, 0.5, 20.0, 0.25, -2.0)
    target = tmp_path / "rotated.tif"
    write_geotiff(target, np.zeros((2, 2)), gt, nodata=1.5)
    raster = read_geotiff(target)
    assert raster.geotransform == gt
    assert raster.nodata == 1.5


def test_read_big_endian_deflate_strips(tmp_path):
    values = np.array([[1, 2, 3], [400, 500, 60000]], dtype=">u2")
    strips = [zlib.compress(row.tobytes()) for row in values]
    target = tmp_path / "be.tif"
    target.write_bytes(_handmade_tiff(">", 3, 2, 16, 1, strips, 1, compression=8))
    raster = read_geotiff(target)
    assert np.array_equal(raster.data, values.astype(np.float32))
    assert raster.geotransform == DEFAULT_GEOTRANSFORM
    assert raster.nodata is None


def test_read_signed_bytes(tmp_path):
    values = np.array([[-5, 0], [7, -128]], dtype="i1")
    target = tmp_path / "bytes.tif"
    target.write_bytes(_handmade_tiff("<", 2, 2, 8, 2, [values.tobytes()], 2))
    assert np.array_equal(read_geotiff(target).data, values.astype(np.float32))


def test_unsupported_compression(tmp_path):
    target = tmp_path / "lzw.tif"
    target.write_bytes(_handmade_tiff("<", 1, 1, 8, 1, [b"\x01"], 1, compression=5))
    with pytest.raises(ValueError):
        read_geotiff(target)


def test_not_a_tiff(tmp_path):
    target = tmp_path / "junk.tif"
    target.write_bytes(b"hello world")
    with pytest.raises(ValueError):
        read_geotiff(target)


def test_write_rejects_bad_shape(tmp_path):
    with pytest.raises(ValueError):
        write_geotiff(tmp_path / "x.tif", np.zeros((2, 2, 2)), DEFAULT_GEOTRANSFORM)
    with pytest.raises(ValueError):
        write_geotiff(tmp_path / "y.tif", np.zeros((2, 2)), (0.0, 1.0))


def test_georaster_scale_comes_from_geotransform():
    raster = GeoRaster(np.zeros((1, 1)), (0.0, 12.5, 0.0, 0.0, 0.0, -12.5))
    assert raster.scale == 12.5