"""
Inkpress Backend - File Storage Service (Upload Handler)
=========================================================

What:  Persists one uploaded cover image per request and removes it again
       when the post write that references it does not happen.
How:   The upload is written under a random hex name inside UPLOAD_DIR, then
       renamed to carry the extension of the client's original filename.
Who:   Called by PostService for POST /post and PUT /post.

Stored path format:
    uploads/<32 hex chars>.<ext>

    The value is the URL path under the /uploads static mount, independent of
    where UPLOAD_DIR lives on disk. It is what gets stored in posts.cover.

What is NOT checked:
    Content type and image format. The only limit is MAX_UPLOAD_SIZE.
"""

import logging
import re
import uuid
from pathlib import Path, PurePosixPath
from typing import Optional

import aiofiles
import aiofiles.os
from fastapi import UploadFile

from inkpress.exceptions import FileStorageError, MissingFileError, ValidationError

logger = logging.getLogger(__name__)

# URL prefix of the static mount serving UPLOAD_DIR
PUBLIC_PREFIX = "uploads"

_UNSAFE_EXTENSION_CHARS = re.compile(r"[^A-Za-z0-9]")


class FileService:
    """
    Manages the cover image lifecycle.

    Lifecycle of an uploaded file:
        1. store(): size check, write to <upload_dir>/<hex>, rename to <hex>.<ext>
        2. The returned public path is saved on the post
        3. cleanup(): removes the file if the post write fails, or removes a
           cover that an edit replaced
    """

    def __init__(self, upload_dir: str, max_upload_size: int):
        self.upload_dir = Path(upload_dir).resolve()
        self.max_upload_size = max_upload_size
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        logger.info("FileService initialized with upload_dir=%s", self.upload_dir)

    @staticmethod
    def extension_of(filename: str) -> str:
        """
        Extension of a client-supplied filename: the text after its last dot.

        Directory components are dropped first and anything outside
        [A-Za-z0-9] is stripped, so the result can never alter the target
        directory. Returns "" for names without a dot.

            "img.png"         -> "png"
            "archive.tar.gz"  -> "gz"
            "README"          -> ""
            "../../x.sh"      -> "sh"
        """
        name = filename.replace("\\", "/").rsplit("/", 1)[-1]
        if "." not in name:
            return ""
        return _UNSAFE_EXTENSION_CHARS.sub("", name.rsplit(".", 1)[-1])

    def validate_size(self, actual_size: int) -> None:
        """Rejects uploads larger than MAX_UPLOAD_SIZE."""
        if actual_size > self.max_upload_size:
            max_mb = self.max_upload_size / (1024 * 1024)
            raise ValidationError(
                message=(
                    f"File size ({actual_size / (1024 * 1024):.1f}MB) "
                    f"exceeds maximum of {max_mb:.0f}MB."
                ),
                field="file",
                context={"max_size": self.max_upload_size, "actual_size": actual_size},
            )

    def resolve(self, public_path: str) -> Path:
        """Maps a stored public path back to its file inside upload_dir."""
        return self.upload_dir / PurePosixPath(public_path).name

    async def store(self, upload: Optional[UploadFile]) -> str:
        """
        Write the upload to disk and return its public path.

        Raises:
            MissingFileError: no file part, or a file part without a filename
            ValidationError:  file exceeds MAX_UPLOAD_SIZE
            FileStorageError: the write or rename failed
        """
        if upload is None or not upload.filename:
            raise MissingFileError()

        content = await upload.read()
        self.validate_size(len(content))

        temp_path = self.upload_dir / uuid.uuid4().hex
        extension = self.extension_of(upload.filename)
        final_path = temp_path.with_name(f"{temp_path.name}.{extension}") if extension else temp_path

        try:
            async with aiofiles.open(temp_path, "wb") as f:
                await f.write(content)
            if final_path != temp_path:
                await aiofiles.os.rename(temp_path, final_path)
        except OSError as e:
            logger.error("Failed to store upload %s at %s: %s", upload.filename, temp_path, str(e))
            await self.cleanup(f"{PUBLIC_PREFIX}/{temp_path.name}")
            raise FileStorageError(
                message="Failed to save uploaded file. Please try again.",
                context={"path": str(temp_path), "os_error": str(e)},
            )

        public_path = f"{PUBLIC_PREFIX}/{final_path.name}"
        logger.info("File stored: %s (%d bytes, original name %s)", public_path, len(content), upload.filename)
        return public_path

    async def cleanup(self, public_path: str) -> None:
        """
        Remove a stored upload, best-effort.

        Missing files are ignored and OS errors are logged, not raised: the
        caller is already on an error path or has committed its write.
        """
        path = self.resolve(public_path)
        try:
            if path.exists():
                await aiofiles.os.remove(path)
                logger.info("Cleaned up file: %s", path.name)
            else:
                logger.debug("Cleanup: file already gone: %s", path.name)
        except OSError as e:
            logger.warning("Failed to clean up file %s: %s", path, str(e))
