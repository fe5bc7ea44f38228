"""Read-only access to archives produced by cmd2zip.

Used to inspect a finished archive without extracting it.
"""

import os
import zipfile
from datetime import datetime
from typing import List, Dict, Any, Optional
from pathlib import Path

from cmd2zip.core.errors import ArchiveError


class ArchiveReader:
    """Class for listing and reading entries of a finished archive."""

    def __init__(self, archive_path: str):
        """Initialize with path to archive ZIP file.

        Args:
            archive_path: Path to the archive zip file

        Raises:
            ArchiveError: If the archive file doesn't exist or is not a valid ZIP file
        """
        self.archive_path = archive_path

        if not os.path.exists(archive_path):
            raise ArchiveError(f"Archive file '{archive_path}' not found")

        # Validate it's a zip file
        try:
            with zipfile.ZipFile(archive_path, 'r'):
                pass
        except zipfile.BadZipFile:
            raise ArchiveError(f"'{archive_path}' is not a valid ZIP file")

    def names(self) -> List[str]:
        """Entry names in archive order (duplicates included)."""
        with zipfile.ZipFile(self.archive_path, 'r') as zipf:
            return [info.filename for info in zipf.infolist()]

    def list_entries(self) -> List[Dict[str, Any]]:
        """Summaries of every entry.

        Returns:
            List of dicts with name, size, compressed_size and modified keys
        """
        with zipfile.ZipFile(self.archive_path, 'r') as zipf:
            return [
                {
                    'name': info.filename,
                    'size': info.file_size,
                    'compressed_size': info.compress_size,
                    'modified': datetime(*info.date_time),
                }
                for info in zipf.infolist()
            ]

    def read_entry(self, name: str) -> Optional[bytes]:
        """Return an entry's content, or None if the archive has no such entry.

        When names repeat, the last entry with that name wins.
        """
        with zipfile.ZipFile(self.archive_path, 'r') as zipf:
            try:
                return zipf.read(name)
            except KeyError:
                return None

    def read_all(self) -> Dict[str, bytes]:
        with zipfile.ZipFile(self.archive_path, 'r') as zipf:
            return {info.filename: zipf.read(info) for info in zipf.infolist()}

    def get_archive_stats(self) -> Dict[str, Any]:
        """Get statistics about the archive.

        Returns:
            Dictionary with entry, failure and size counts
        """
        entries = self.list_entries()
        return {
            'entries': len(entries),
            'failed_entries': sum(1 for e in entries if e['name'].endswith('.err')),
            'uncompressed_size': sum(e['size'] for e in entries),
            'archive_size': Path(self.archive_path).stat().st_size,
        }
