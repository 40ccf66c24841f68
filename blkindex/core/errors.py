class FormatError(Exception):
    """Malformed container data. Always fatal for the run."""

    def __init__(self, message, path=None, offset=None):
        super().__init__(message)
        self.path = path
        self.offset = offset

    def __str__(self):
        msg = super().__str__()
        if self.path is not None:
            return f"{msg} (file {self.path}, offset {self.offset})"
        return msg


class BlockFileError(OSError):
    """An input block file is missing or cannot be read."""

    def __init__(self, path, reason):
        super().__init__(f"Cannot read block file {path}: {reason}")
        self.path = path
        self.offset = 0


class ChainCycleError(Exception):
    """The parent links of the indexed blocks form a loop."""

    def __init__(self, block_hash, path=None, offset=None):
        super().__init__(f"Parent links form a cycle through block {block_hash}")
        self.block_hash = block_hash
        self.path = path
        self.offset = offset

    def __str__(self):
        msg = super().__str__()
        if self.path is not None:
            return f"{msg} (file {self.path}, offset {self.offset})"
        return msg
