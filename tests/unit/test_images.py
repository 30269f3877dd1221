"""Unit tests for image compression and batch preprocessing."""

import asyncio
import base64
import io
import random

import pytest
from PIL import Image

from smartlister.core.images import (
    ImageProcessingError,
    compress_image,
    decode_data_uri,
    encode_data_uri,
    split_data_uri,
)
from smartlister.ui.images import preprocess_images


def _noise_image_bytes(size: tuple[int, int], seed: int = 0) -> bytes:
    """PNG of random noise, which compresses poorly."""
    width, height = size
    noise = random.Random(seed).randbytes(width * height * 3)
    buffer = io.BytesIO()
    Image.frombytes("RGB", size, noise).save(buffer, format="PNG")
    return buffer.getvalue()


def _open(data_uri: str) -> tuple[str, Image.Image, int]:
    mime_type, data = decode_data_uri(data_uri)
    img = Image.open(io.BytesIO(data))
    img.load()
    return mime_type, img, len(data)


class TestDataUri:
    """Tests for encode/split/decode helpers."""

    def test_encode_and_split(self):
        uri = encode_data_uri(b"abc", "image/jpeg")
        assert uri == "data:image/jpeg;base64,YWJj"
        assert split_data_uri(uri) == ("image/jpeg", "YWJj")

    def test_bare_base64_is_png(self):
        """A raw base64 string is read as an implicit PNG."""
        assert split_data_uri("YWJj") == ("image/png", "YWJj")
        assert decode_data_uri("YWJj") == ("image/png", b"abc")

    def test_decode_invalid_base64(self):
        with pytest.raises(ValueError, match="not valid base64"):
            decode_data_uri("data:image/png;base64,@@not-base64@@")


class TestCompressImage:
    """Tests for compress_image."""

    def test_large_image_downscaled_preserving_aspect(self, image_factory):
        """The longest side is capped at 1024px and the ratio kept."""
        data = image_factory(size=(3000, 1500))

        mime_type, img, _ = _open(compress_image(data))

        assert mime_type == "image/jpeg"
        assert img.size == (1024, 512)

    def test_portrait_image(self, image_factory):
        _, img, _ = _open(compress_image(image_factory(size=(800, 2400))))
        assert max(img.size) == 1024
        assert img.size[1] == 1024

    def test_small_image_not_upscaled(self, image_factory):
        _, img, _ = _open(compress_image(image_factory(size=(200, 100))))
        assert img.size == (200, 100)

    def test_noisy_image_fits_size_limit(self):
        """Hard-to-compress input is brought under 0.5 MB."""
        data = _noise_image_bytes((1400, 1000))

        _, img, size = _open(compress_image(data))

        assert size <= 524288
        assert max(img.size) <= 1024

    def test_custom_bounds(self):
        data = _noise_image_bytes((600, 600), seed=1)

        _, img, size = _open(compress_image(data, max_dimension=256, max_bytes=20000))

        assert max(img.size) <= 256
        assert size <= 20000

    def test_transparent_image_stays_png(self, image_factory):
        data = image_factory(size=(100, 100), mode="RGBA", color=(0, 0, 255, 128))

        mime_type, img, _ = _open(compress_image(data))

        assert mime_type == "image/png"
        assert img.mode == "RGBA"

    def test_unreadable_bytes_raise(self):
        with pytest.raises(ImageProcessingError, match="Could not read image"):
            compress_image(b"definitely not an image")

    def test_pixel_limit_raises(self, image_factory, monkeypatch):
        """Pillow's decompression bomb guard is reported as a processing error."""
        data = image_factory(size=(300, 300))
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 5000)

        with pytest.raises(ImageProcessingError, match="Could not read image"):
            compress_image(data)

    def test_truncated_image_raises(self, image_factory):
        data = image_factory(size=(200, 200))
        with pytest.raises(ImageProcessingError):
            compress_image(data[: len(data) // 2])

    def test_unreachable_target_raises(self):
        """An impossible size target fails instead of returning an oversized payload."""
        data = _noise_image_bytes((400, 400), seed=2)
        with pytest.raises(ImageProcessingError, match="compression steps"):
            compress_image(data, max_bytes=1024, max_iterations=2)

    def test_output_is_valid_base64(self, image_factory):
        uri = compress_image(image_factory())
        _, body = split_data_uri(uri)
        base64.b64decode(body, validate=True)


class TestPreprocessImages:
    """Tests for the concurrent batch preprocessor."""

    def test_preserves_input_order(self, test_config, image_factory):
        files = [
            image_factory(size=(10, 10)),
            image_factory(size=(20, 10)),
            image_factory(size=(30, 10)),
        ]

        encoded = asyncio.run(preprocess_images(files, test_config))

        widths = [_open(uri)[1].size[0] for uri in encoded]
        assert widths == [10, 20, 30]

    def test_reads_file_paths(self, test_config, image_factory, temp_dir):
        path = temp_dir / "ring.png"
        path.write_bytes(image_factory(size=(40, 30)))

        encoded = asyncio.run(preprocess_images([str(path)], test_config))

        assert len(encoded) == 1
        assert encoded[0].startswith("data:image/jpeg;base64,")

    def test_one_failure_fails_batch(self, test_config, image_factory):
        """All-or-nothing: a single bad image fails the whole batch."""
        files = [image_factory(), b"broken", image_factory()]

        with pytest.raises(ImageProcessingError):
            asyncio.run(preprocess_images(files, test_config))

    def test_missing_file_fails_batch(self, test_config, temp_dir):
        with pytest.raises(ImageProcessingError, match="could not read file"):
            asyncio.run(preprocess_images([temp_dir / "missing.jpg"], test_config))

    def test_empty_batch(self, test_config):
        assert asyncio.run(preprocess_images([], test_config)) == []
