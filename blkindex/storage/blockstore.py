import os
from blkindex.core.errors import BlockFileError, FormatError

class BlockStore:
    """Raw access to records inside block container files.

    Every call opens the file, seeks, reads and closes it again; no handle
    outlives a single read.
    """

    def file_size(self, path):
        try:
            return os.path.getsize(path)
        except OSError as e:
            raise BlockFileError(path, e.strerror or str(e)) from e

    def read_block(self, path, offset, length):
        """Read a raw block record from disk given its location."""
        if not os.path.exists(path):
            raise BlockFileError(path, "file not found")

        try:
            with open(path, 'rb') as f:
                f.seek(offset)
                data = f.read(length)
        except OSError as e:
            raise BlockFileError(path, e.strerror or str(e)) from e

        if len(data) < length:
            raise FormatError(
                f"Unexpected end of block file: wanted {length} bytes, got {len(data)}",
                path, offset
            )
        return data

    def read_record(self, location):
        return self.read_block(location.path, location.offset, location.length)
