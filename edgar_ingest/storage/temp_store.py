"""
temp_store.py — Bucket/key file store for downloaded EDGAR artifacts.

Layout on disk:
    <root>/<bucket>/<name>

Buckets partition files per company (`CIK_<cik>`); names are either a derived
period key (`Y2020Q1FT10-K`) for extracted instance documents or a
time-prefixed archive name for downloaded XBRL zips. A file that exists with a
non-zero size counts as stored; that is what makes re-scraping a quarter
idempotent.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import BinaryIO, Iterable, Iterator, Optional

from edgar_ingest.core.logging import get_logger


logger = get_logger(__name__)

CHUNK_SIZE = 64 * 1024


def iter_chunks(fh: BinaryIO, chunk_size: int = CHUNK_SIZE) -> Iterator[bytes]:
    """Yield a binary file object's content in fixed-size chunks."""
    return iter(lambda: fh.read(chunk_size), b"")


class TempStore:
    def __init__(self, root: str) -> None:
        self.root = Path(root).expanduser()
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, bucket: str, name: str) -> Path:
        if not bucket or not name or "/" in bucket or "/" in name or name in {".", ".."}:
            raise ValueError(f"Invalid bucket/name: {bucket!r}/{name!r}")
        return self.root / bucket / name

    def get_file_path(self, bucket: str, key: str) -> Optional[str]:
        """
        Return the stored path for (bucket, key), or None when nothing
        non-empty is stored there.
        """
        path = self._path(bucket, key)
        try:
            if path.is_file() and path.stat().st_size > 0:
                return str(path)
        except OSError as exc:
            logger.warning("Could not stat %s: %s", path, exc)
        return None

    def store_file(self, bucket: str, name: str, chunks: Iterable[bytes]) -> Optional[str]:
        """
        Write `chunks` to (bucket, name), replacing any previous file.

        The data goes to a temporary file in the bucket first and is renamed
        into place, so a failed write never leaves a partial file that
        `get_file_path()` would report as stored.

        Returns:
            The stored path, or None when writing failed.
        """
        path = self._path(bucket, name)
        tmp_name = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile("wb", dir=path.parent, prefix=".tmp-", delete=False) as out:
                tmp_name = out.name
                for chunk in chunks:
                    if chunk:
                        out.write(chunk)
            os.replace(tmp_name, path)
            tmp_name = None
        except OSError as exc:
            logger.error("Failed to store %s/%s: %s", bucket, name, exc)
            return None
        finally:
            if tmp_name and os.path.exists(tmp_name):
                os.remove(tmp_name)

        logger.debug("Stored %s", path)
        return str(path)
