from .archive_reader import ArchiveReader, ArchiveReadError, read_archive_rows

__all__ = ["ArchiveReader", "ArchiveReadError", "read_archive_rows"]
