"""
Inkpress Backend - File Service Unit Tests
===========================================

What:  Tests for cover upload storage and cleanup.
How:   Real FileService instances writing into pytest's tmp_path.

What we test:
    ✅ Extension taken from the last dot segment of the original name
    ✅ Stored file is renamed to <hex>.<ext> and the public path returned
    ✅ Missing file / missing filename rejected
    ✅ Oversized upload rejected before anything is written
    ✅ Cleanup removes files and tolerates missing ones
"""

import io
import re

import pytest
from fastapi import UploadFile

from inkpress.exceptions import MissingFileError, ValidationError
from inkpress.services.file_service import FileService


def _upload(content: bytes, filename) -> UploadFile:
    return UploadFile(file=io.BytesIO(content), filename=filename)


class TestExtensionOf:

    @pytest.mark.parametrize(
        "filename,expected",
        [
            ("img.png", "png"),
            ("photo.JPG", "JPG"),
            ("archive.tar.gz", "gz"),
            ("README", ""),
            ("img.", ""),
            ("../../x.sh", "sh"),
            ("dir\\evil.p/h/p", ""),
            ("weird.p$n g", "png"),
        ],
    )
    def test_extension_of(self, filename, expected):
        assert FileService.extension_of(filename) == expected


class TestStore:

    @pytest.fixture
    def service(self, tmp_path):
        return FileService(str(tmp_path / "uploads"), max_upload_size=1024)

    @pytest.mark.asyncio
    async def test_store_keeps_extension(self, service, sample_png_bytes):
        public_path = await service.store(_upload(sample_png_bytes, "img.png"))

        assert re.fullmatch(r"uploads/[0-9a-f]{32}\.png", public_path)
        stored = service.resolve(public_path)
        assert stored.read_bytes() == sample_png_bytes
        # Only the renamed file remains
        assert [p.name for p in service.upload_dir.iterdir()] == [stored.name]

    @pytest.mark.asyncio
    async def test_store_without_extension(self, service):
        public_path = await service.store(_upload(b"data", "README"))

        assert re.fullmatch(r"uploads/[0-9a-f]{32}", public_path)
        assert service.resolve(public_path).exists()

    @pytest.mark.asyncio
    async def test_store_missing_upload(self, service):
        with pytest.raises(MissingFileError) as exc_info:
            await service.store(None)
        assert exc_info.value.message == "File or originalname is missing"

    @pytest.mark.asyncio
    async def test_store_missing_filename(self, service):
        with pytest.raises(MissingFileError):
            await service.store(_upload(b"data", None))

    @pytest.mark.asyncio
    async def test_store_oversized(self, service):
        with pytest.raises(ValidationError, match="exceeds maximum"):
            await service.store(_upload(b"x" * 2048, "big.png"))
        assert list(service.upload_dir.iterdir()) == []


class TestCleanup:

    @pytest.mark.asyncio
    async def test_cleanup_removes_file(self, tmp_path, sample_jpeg_bytes):
        service = FileService(str(tmp_path), max_upload_size=1024)
        public_path = await service.store(_upload(sample_jpeg_bytes, "cover.jpg"))

        await service.cleanup(public_path)

        assert not service.resolve(public_path).exists()

    @pytest.mark.asyncio
    async def test_cleanup_missing_file_is_ignored(self, tmp_path):
        service = FileService(str(tmp_path), max_upload_size=1024)
        await service.cleanup("uploads/does-not-exist.png")

    def test_resolve_stays_inside_upload_dir(self, tmp_path):
        service = FileService(str(tmp_path), max_upload_size=1024)
        assert service.resolve("uploads/../../etc/passwd").parent == service.upload_dir
