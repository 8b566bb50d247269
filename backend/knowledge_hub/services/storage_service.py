from functools import lru_cache
from pathlib import Path
import logging
import secrets
import time
from ..config import settings

logger = logging.getLogger(__name__)


class LocalFileStorage:
    """Keeps uploaded files in a single directory, addressed by generated name"""

    def __init__(self, base_dir: str):
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def generate_name(original_filename: str) -> str:
        """``<epoch-ms>-<random>.<ext>`` so stored names never collide or leak user input"""
        extension = Path(original_filename or "").suffix.lstrip(".").lower()
        name = f"{int(time.time() * 1000)}-{secrets.token_hex(6)}"
        return f"{name}.{extension}" if extension else name

    def _resolve(self, name: str) -> Path:
        path = (self.base_dir / name).resolve()
        if path.parent != self.base_dir.resolve():
            raise ValueError(f"Invalid storage name: {name}")
        return path

    def save(self, original_filename: str, data: bytes) -> str:
        """Write the bytes and return the storage name to keep on the document row"""
        name = self.generate_name(original_filename)
        self._resolve(name).write_bytes(data)
        logger.debug(f"Stored {len(data)} bytes as {name}")
        return name

    def exists(self, name: str) -> bool:
        return self._resolve(name).is_file()

    def read(self, name: str) -> bytes:
        return self._resolve(name).read_bytes()

    def delete(self, name: str) -> bool:
        """Remove a stored file; returns False when it was already gone"""
        path = self._resolve(name)
        if not path.is_file():
            logger.warning(f"Stored file already missing: {name}")
            return False
        path.unlink()
        logger.debug(f"Deleted stored file {name}")
        return True


@lru_cache(maxsize=1)
def get_file_storage() -> LocalFileStorage:
    return LocalFileStorage(settings.upload_dir)
