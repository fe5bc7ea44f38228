"""
Writing and reading the output zip archive.
"""

from cmd2zip.archive.sink import ArchiveSink
from cmd2zip.archive.reader import ArchiveReader

__all__ = [
    'ArchiveSink',
    'ArchiveReader'
]
