import logging
import os
import shutil
import uuid
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import BinaryIO, Iterable, List, Optional

from fastapi import UploadFile

from shared.core.config import settings
from shared.core.exceptions import StorageIOError

logger = logging.getLogger(__name__)


@dataclass
class CleanupResult:
    """Outcome of best-effort file removal, kept apart from the primary operation."""

    deleted: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.failed


class AssetStore:
    """
    Uploaded files on the local filesystem.

    Files are referenced from documents by a relative path such as
    ``uploads/logos/<name>.png``; the first component is the public prefix the
    files are served under, the rest is relative to ``root``.
    """

    def __init__(self, root, public_prefix: str = "uploads"):
        self.root = Path(root)
        self.public_prefix = public_prefix.strip("/")

    def _reference(self, folder: str, filename: str) -> str:
        parts = [self.public_prefix, folder, filename] if folder else [
            self.public_prefix, filename]
        return "/".join(parts)

    def resolve(self, reference: str) -> Optional[Path]:
        """Map a stored reference to a path inside root, None if it points elsewhere."""
        parts = PurePosixPath(reference.replace("\\", "/").lstrip("/")).parts
        if parts and parts[0] == self.public_prefix:
            parts = parts[1:]
        if not parts or ".." in parts:
            return None

        path = self.root.joinpath(*parts)
        try:
            path.resolve().relative_to(self.root.resolve())
        except ValueError:
            return None
        return path

    def save(self, stream: BinaryIO, original_name: Optional[str], folder: str = "") -> str:
        extension = os.path.splitext(os.path.basename(original_name or ""))[1]
        filename = uuid.uuid4().hex + extension
        directory = self.root / folder if folder else self.root
        destination = directory / filename

        try:
            directory.mkdir(parents=True, exist_ok=True)
            with open(destination, "wb") as buffer:
                shutil.copyfileobj(stream, buffer)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to store upload '{original_name}' at {destination}: {e}")
            try:
                destination.unlink(missing_ok=True)
            except OSError:
                pass
            raise StorageIOError(f"Failed to save file '{original_name}'")

        reference = self._reference(folder, filename)
        logger.info(f"Stored upload '{original_name}' as {reference}")
        return reference

    def save_upload(self, upload: UploadFile, folder: str = "") -> str:
        return self.save(upload.file, upload.filename, folder)

    def delete(self, reference: str) -> bool:
        path = self.resolve(reference) if reference else None
        if path is None:
            logger.warning(f"Refusing to delete file outside upload root: {reference!r}")
            return False

        try:
            path.unlink()
        except OSError as e:
            logger.warning(f"Failed to delete file {reference}: {e}")
            return False

        logger.info(f"Deleted file {reference}")
        return True

    def delete_many(self, references: Iterable[str]) -> CleanupResult:
        result = CleanupResult()
        for reference in references or []:
            if self.delete(reference):
                result.deleted.append(reference)
            else:
                result.failed.append(reference)

        if result.failed:
            logger.warning(f"Some files could not be deleted: {result.failed}")
        return result

    def resolve_public(self, filename: str, folder: str = "") -> Optional[Path]:
        # only the base component of the requested name is honoured
        name = os.path.basename(filename.replace("\\", "/"))
        if not name or name in (".", ".."):
            return None

        path = (self.root / folder / name) if folder else (self.root / name)
        return path if path.is_file() else None


def get_asset_store() -> AssetStore:
    return AssetStore(settings.UPLOAD_DIR)
