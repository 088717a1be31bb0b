"""Reading and writing single-band GeoTIFF rasters."""

from __future__ import annotations

import math
import struct
import zlib
from dataclasses import dataclass
from os import PathLike
from pathlib import Path

import numpy as np

_TYPE_SIZES = {1: 1, 2: 1, 3: 2, 4: 4, 5: 8, 6: 1, 7: 1, 8: 2, 9: 4, 10: 8, 11: 4, 12: 8, 16: 8, 17: 8}
_TYPE_FORMATS = {1: "B", 3: "H", 4: "I", 6: "b", 7: "B", 8: "h", 9: "i", 11: "f", 12: "d", 16: "Q", 17: "q"}

_IMAGE_WIDTH = 256
_IMAGE_LENGTH = 257
_BITS_PER_SAMPLE = 258
_COMPRESSION = 259
_PHOTOMETRIC = 262
_STRIP_OFFSETS = 273
_SAMPLES_PER_PIXEL = 277
_ROWS_PER_STRIP = 278
_STRIP_BYTE_COUNTS = 279
_PLANAR_CONFIG = 284
_PREDICTOR = 317
_TILE_WIDTH = 322
_TILE_LENGTH = 323
_TILE_OFFSETS = 324
_TILE_BYTE_COUNTS = 325
_SAMPLE_FORMAT = 339
_MODEL_PIXEL_SCALE = 33550
_MODEL_TIEPOINT = 33922
_MODEL_TRANSFORMATION = 34264
_GEO_KEY_DIRECTORY = 34735
_GEO_ASCII_PARAMS = 34737
_GDAL_NODATA = 42113

DEFAULT_GEOTRANSFORM = (0.0, 1.0, 0.0, 0.0, 0.0, 1.0)


@dataclass
class GeoRaster:
    """The first band of a raster with its georeferencing."""

    data: np.ndarray
    geotransform: tuple = DEFAULT_GEOTRANSFORM
    projection: str = ""
    nodata: float | None = None

    @property
    def rows(self) -> int:
        return self.data.shape[0]

    @property
    def cols(self) -> int:
        return self.data.shape[1]

    @property
    def scale(self) -> float:
        """Pixel width in map units."""
        return self.geotransform[1]

    @property
    def null_value(self) -> int:
        """The no-data value as an integer, zero when none is set."""
        if self.nodata is None or not math.isfinite(self.nodata):
            return 0
        return int(self.nodata)


def _read_entry(buf, order, offset):
    tag, kind, count = struct.unpack_from(order + "HHI", buf, offset)
    size = _TYPE_SIZES.get(kind)
    if size is None:
        return tag, None
    total = size * count
    if total <= 4:
        position = offset + 8
    else:
        (position,) = struct.unpack_from(order + "I", buf, offset + 8)
    if position + total > len(buf):
        raise ValueError(f"TIFF tag {tag} points past the end of the file")
    raw = buf[position:position + total]
    if kind == 2:
        return tag, raw.split(b"\0", 1)[0].decode("latin-1")
    if kind in (5, 10):
        code = "I" if kind == 5 else "i"
        parts = struct.unpack(f"{order}{2 * count}{code}", raw)
        return tag, tuple(
            num / den if den else math.nan for num, den in zip(parts[::2], parts[1::2])
        )
    return tag, struct.unpack(f"{order}{count}{_TYPE_FORMATS[kind]}", raw)


def _scalar(tags, tag, default=None):
    values = tags.get(tag)
    if values is None:
        if default is None:
            raise ValueError(f"TIFF file lacks required tag {tag}")
        return default
    return values[0]


def _dtype(sample_format, bits, order):
    kinds = {1: "u", 2: "i", 3: "f"}
    kind = kinds.get(sample_format)
    if kind is None or bits % 8 or bits not in (8, 16, 32, 64) or (kind == "f" and bits == 8):
        raise ValueError(f"unsupported sample layout: format {sample_format}, {bits} bits")
    return np.dtype(f"{order}{kind}{bits // 8}")


def _decode(raw, compression):
    if compression == 1:
        return raw
    if compression in (8, 32946):
        return zlib.decompress(raw)
    raise ValueError(f"unsupported TIFF compression {compression}")


def _chunk_array(raw, dtype, rows, cols, samples, predictor):
    expected = rows * cols * samples
    if len(raw) < expected * dtype.itemsize:
        raise ValueError("TIFF data chunk is shorter than its declared size")
    chunk = np.frombuffer(raw, dtype=dtype, count=expected).reshape(rows, cols, samples)
    if predictor == 2:
        chunk = np.cumsum(chunk, axis=1, dtype=chunk.dtype)
    return chunk


def _geotransform(tags):
    matrix = tags.get(_MODEL_TRANSFORMATION)
    if matrix is not None and len(matrix) >= 16:
        return (matrix[3], matrix[0], matrix[1], matrix[7], matrix[4], matrix[5])
    scale = tags.get(_MODEL_PIXEL_SCALE)
    tiepoint = tags.get(_MODEL_TIEPOINT)
    if scale is not None and tiepoint is not None and len(scale) >= 2 and len(tiepoint) >= 6:
        size_x, size_y = scale[0], scale[1]
        i, j, _, x, y, _ = tiepoint[:6]
        return (x - i * size_x, size_x, 0.0, y + j * size_y, 0.0, -size_y)
    return DEFAULT_GEOTRANSFORM


def _nodata(tags):
    text = tags.get(_GDAL_NODATA)
    if text is None:
        return None
    try:
        return float(text.strip())
    except ValueError:
        return None


def read_geotiff(path: str | PathLike) -> GeoRaster:
    """Read the first band of a GeoTIFF file as float32 with its georeferencing."""
    buf = Path(path).read_bytes()
    order = {b"II": "<", b"MM": ">"}.get(buf[:2])
    if order is None or len(buf) < 8:
        raise ValueError(f"{path} is not a TIFF file")
    try:
        magic, ifd = struct.unpack_from(order + "HI", buf, 2)
        if magic == 43:
            raise ValueError("BigTIFF files are not supported")
        if magic != 42:
            raise ValueError(f"{path} is not a TIFF file")
        (count,) = struct.unpack_from(order + "H", buf, ifd)
        tags = {}
        for offset in range(ifd + 2, ifd + 2 + 12 * count, 12):
            tag, value = _read_entry(buf, order, offset)
            if value is not None:
                tags[tag] = value
    except struct.error as exc:
        raise ValueError(f"{path} is a truncated TIFF file") from exc

    width = _scalar(tags, _IMAGE_WIDTH)
    height = _scalar(tags, _IMAGE_LENGTH)
    bits = _scalar(tags, _BITS_PER_SAMPLE, 1)
    compression = _scalar(tags, _COMPRESSION, 1)
    samples = _scalar(tags, _SAMPLES_PER_PIXEL, 1)
    planar = _scalar(tags, _PLANAR_CONFIG, 1)
    predictor = _scalar(tags, _PREDICTOR, 1)
    dtype = _dtype(_scalar(tags, _SAMPLE_FORMAT, 1), bits, order)
    if predictor not in (1, 2) or (predictor == 2 and dtype.kind == "f"):
        raise ValueError(f"unsupported TIFF predictor {predictor}")
    band_samples = 1 if planar == 2 else samples

    image = np.empty((height, width, band_samples), dtype=dtype)
    if _TILE_OFFSETS in tags:
        tile_width = _scalar(tags, _TILE_WIDTH)
        tile_height = _scalar(tags, _TILE_LENGTH)
        across = -(-width // tile_width)
        down = -(-height // tile_height)
        offsets = tags[_TILE_OFFSETS][: across * down]
        counts = tags.get(_TILE_BYTE_COUNTS, ())[: across * down]
        if len(offsets) < across * down or len(counts) < across * down:
            raise ValueError("TIFF file lists too few tiles")
        for index, (start, length) in enumerate(zip(offsets, counts)):
            tile_row, tile_col = divmod(index, across)
            top, left = tile_row * tile_height, tile_col * tile_width
            tile = _chunk_array(
                _decode(buf[start:start + length], compression),
                dtype, tile_height, tile_width, band_samples, predictor,
            )
            h = min(tile_height, height - top)
            w = min(tile_width, width - left)
            image[top:top + h, left:left + w] = tile[:h, :w]
    elif _STRIP_OFFSETS in tags:
        rows_per_strip = min(_scalar(tags, _ROWS_PER_STRIP, height), height)
        if rows_per_strip <= 0:
            raise ValueError("TIFF file declares zero rows per strip")
        per_plane = -(-height // rows_per_strip)
        offsets = tags[_STRIP_OFFSETS][:per_plane]
        counts = tags.get(_STRIP_BYTE_COUNTS, ())[:per_plane]
        if len(offsets) < per_plane or len(counts) < per_plane:
            raise ValueError("TIFF file lists too few strips")
        for index, (start, length) in enumerate(zip(offsets, counts)):
            top = index * rows_per_strip
            strip_rows = min(rows_per_strip, height - top)
            image[top:top + strip_rows] = _chunk_array(
                _decode(buf[start:start + length], compression),
                dtype, strip_rows, width, band_samples, predictor,
            )
    else:
        raise ValueError("TIFF file has neither strips nor tiles")

    projection = tags.get(_GEO_ASCII_PARAMS, "").rstrip("|")
    return GeoRaster(
        data=image[:, :, 0].astype(np.float32),
        geotransform=tuple(float(v) for v in _geotransform(tags)),
        projection=projection,
        nodata=_nodata(tags),
    )


def _entry(tag, kind, values):
    if kind == 2:
        payload = values.encode("latin-1") + b"\0"
        return tag, kind, len(payload), payload
    payload = struct.pack(f"<{len(values)}{_TYPE_FORMATS[kind]}", *values)
    return tag, kind, len(values), payload


def _format_nodata(value):
    value = float(value)
    if math.isfinite(value) and value.is_integer():
        return str(int(value))
    return repr(value)


def write_geotiff(path, data, geotransform, projection="", nodata=None):
    """Write ``data`` as a single-band float32 GeoTIFF file."""
    pixels = np.ascontiguousarray(np.asarray(data, dtype="<f4"))
    if pixels.ndim != 2 or 0 in pixels.shape:
        raise ValueError("raster data must be a non-empty two-dimensional grid")
    gt = tuple(float(v) for v in geotransform)
    if len(gt) != 6:
        raise ValueError("a geotransform has six coefficients")
    rows, cols = pixels.shape
    body = pixels.tobytes()

    entries = [
        _entry(_IMAGE_WIDTH, 4, (cols,)),
        _entry(_IMAGE_LENGTH, 4, (rows,)),
        _entry(_BITS_PER_SAMPLE, 3, (32,)),
        _entry(_COMPRESSION, 3, (1,)),
        _entry(_PHOTOMETRIC, 3, (1,)),
        _entry(_STRIP_OFFSETS, 4, (0,)),
        _entry(_SAMPLES_PER_PIXEL, 3, (1,)),
        _entry(_ROWS_PER_STRIP, 4, (rows,)),
        _entry(_STRIP_BYTE_COUNTS, 4, (len(body),)),
        _entry(_PLANAR_CONFIG, 3, (1,)),
        _entry(_SAMPLE_FORMAT, 3, (3,)),
    ]
    if gt[2] == 0.0 and gt[4] == 0.0:
        entries.append(_entry(_MODEL_PIXEL_SCALE, 12, (gt[1], -gt[5], 0.0)))
        entries.append(_entry(_MODEL_TIEPOINT, 12, (0.0, 0.0, 0.0, gt[0], gt[3], 0.0)))
    else:
        matrix = (gt[1], gt[2], 0.0, gt[0], gt[4], gt[5], 0.0, gt[3],
                  0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 1.0)
        entries.append(_entry(_MODEL_TRANSFORMATION, 12, matrix))

    keys = [(1025, 0, 1, 1)]
    if projection:
        citation = projection + "|"
        keys.append((1026, _GEO_ASCII_PARAMS, len(citation), 0))
        entries.append(_entry(_GEO_ASCII_PARAMS, 2, citation))
    directory = [1, 1, 0, len(keys)] + [number for key in keys for number in key]
    entries.append(_entry(_GEO_KEY_DIRECTORY, 3, directory))
    if nodata is not None:
        entries.append(_entry(_GDAL_NODATA, 2, _format_nodata(nodata)))
    entries.sort(key=lambda item: item[0])

    position = 8 + 2 + 12 * len(entries) + 4
    offsets = {}
    for tag, _, _, payload in entries:
        if len(payload) > 4:
            offsets[tag] = position
            position += len(payload) + len(payload) % 2
    data_offset = position
    entries = [
        _entry(_STRIP_OFFSETS, 4, (data_offset,)) if tag == _STRIP_OFFSETS else (tag, kind, count, payload)
        for tag, kind, count, payload in entries
    ]

    out = bytearray(b"II" + struct.pack("<HI", 42, 8))
    out += struct.pack("<H", len(entries))
    for tag, kind, count, payload in entries:
        out += struct.pack("<HHI", tag, kind, count)
        out += payload.ljust(4, b"\0") if len(payload) <= 4 else struct.pack("<I", offsets[tag])
    out += struct.pack("<I", 0)
    for tag, _, _, payload in entries:
        if len(payload) > 4:
            out += payload + b"\0" * (len(payload) % 2)
    out += body
    Path(path).write_bytes(bytes(out))