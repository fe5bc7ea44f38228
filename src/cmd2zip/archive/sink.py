"""Single shared writer for the output zip archive.

Every worker appends through the same ArchiveSink. One lock serializes each
entry's start, write and flush, and the final close, so entries never
interleave in the underlying file.
"""

import logging
import threading
import zipfile
from datetime import datetime
from pathlib import Path
from typing import Optional, List, Set, Union, BinaryIO

from cmd2zip.core.errors import ArchiveError

logger = logging.getLogger(__name__)


class ArchiveSink:
    """Mutually exclusive, append-only writer over one zip archive."""

    def __init__(
        self,
        archive_path: Union[str, Path],
        append: bool = False,
        compression: int = zipfile.ZIP_DEFLATED,
    ):
        """Open the archive for writing.

        Args:
            archive_path: Path of the zip archive to write
            append: Add entries to an existing archive instead of replacing it
            compression: zipfile compression method used for new entries

        Raises:
            ArchiveError: If the file cannot be created, or when appending, if
                it does not exist or is not a valid zip archive
        """
        self.archive_path = Path(archive_path)
        self.append_mode = append
        self.compression = compression
        self._lock = threading.Lock()
        self._names: List[str] = []
        self._seen: Set[str] = set()
        self._closed = False
        self._file: Optional[BinaryIO] = None
        self._zip: Optional[zipfile.ZipFile] = None

        if append:
            self._open_for_append()
        else:
            self._open_fresh()

    def _open_fresh(self) -> None:
        try:
            self._file = open(self.archive_path, "wb")
            self._zip = zipfile.ZipFile(self._file, mode="w", compression=self.compression)
        except OSError as e:
            self._close_file()
            raise ArchiveError(f"Failed to create archive '{self.archive_path}': {e}") from e
        logger.debug("Created archive %s", self.archive_path)

    def _open_for_append(self) -> None:
        if not self.archive_path.is_file():
            raise ArchiveError(f"Archive file '{self.archive_path}' not found, cannot append")
        if not zipfile.is_zipfile(self.archive_path):
            raise ArchiveError(f"'{self.archive_path}' is not a valid ZIP file, cannot append")
        try:
            self._file = open(self.archive_path, "r+b")
            self._zip = zipfile.ZipFile(self._file, mode="a", compression=self.compression)
        except (OSError, zipfile.BadZipFile) as e:
            self._close_file()
            raise ArchiveError(f"Failed to open archive '{self.archive_path}' for appending: {e}") from e
        logger.debug("Opened archive %s for appending (%d existing entries)",
                     self.archive_path, len(self._zip.namelist()))

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def entry_names(self) -> List[str]:
        """Names appended by this sink, in write order."""
        with self._lock:
            return list(self._names)

    def append(self, name: str, content: bytes) -> None:
        """Write one named entry and flush it to disk.

        Raises:
            ArchiveError: If the sink is already finalized or the write fails
        """
        info = zipfile.ZipInfo(name, date_time=datetime.now().timetuple()[:6])
        info.compress_type = self.compression
        info.external_attr = 0o644 << 16

        with self._lock:
            if self._closed:
                raise ArchiveError(f"Cannot append '{name}': archive '{self.archive_path}' is already finalized")
            if name in self._seen:
                logger.warning("Duplicate entry name in archive: %s", name)
            try:
                with self._zip.open(info, mode="w") as entry:
                    entry.write(content)
                self._file.flush()
            except (OSError, ValueError, RuntimeError) as e:
                raise ArchiveError(f"Failed to write entry '{name}' to '{self.archive_path}': {e}") from e
            self._names.append(name)
            self._seen.add(name)

    def finalize(self) -> None:
        """Write the central directory and close the archive.

        Raises:
            ArchiveError: If the archive was already finalized or closing fails
        """
        with self._lock:
            if self._closed:
                raise ArchiveError(f"Archive '{self.archive_path}' is already finalized")
            try:
                self._zip.close()
            except OSError as e:
                raise ArchiveError(f"Failed to finish writing archive '{self.archive_path}': {e}") from e
            finally:
                self._closed = True
                self._close_file()
        logger.debug("Finalized archive %s with %d new entries", self.archive_path, len(self._names))

    def abort(self) -> None:
        """Close the archive after a fatal error.

        A freshly created archive is removed. An appended archive keeps the
        entries written so far, since dropping them would destroy the entries
        it already held.
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True
            try:
                self._zip.close()
            except OSError as e:
                logger.error("Failed to close archive '%s' while aborting: %s", self.archive_path, e)
            finally:
                self._close_file()

        if not self.append_mode:
            try:
                self.archive_path.unlink()
            except FileNotFoundError:
                pass
            logger.info("Removed incomplete archive %s", self.archive_path)

    def _close_file(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> "ArchiveSink":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.abort()
        elif not self._closed:
            self.finalize()
