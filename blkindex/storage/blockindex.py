import logging
from blkindex.core.hashing import hash_to_hex

logger = logging.getLogger("ChainIndex")

class ChainIndex:
    """
    In-memory block index for a single run: raw block hash -> BlockRecord.

    Keys keep the position of their first insertion; a record re-added under
    the same hash replaces the stored one (last write wins).
    """

    def __init__(self):
        self._records = {}

    def add_block(self, record):
        """Add or replace a block entry."""
        existing = self._records.get(record.hash)
        if existing is not None:
            logger.debug(
                f"Block {hash_to_hex(record.hash)} seen again at "
                f"{record.location.path}:{record.location.offset}, replacing "
                f"{existing.location.path}:{existing.location.offset}"
            )
        self._records[record.hash] = record

    def get_block_info(self, block_hash):
        return self._records.get(block_hash)

    def set_height(self, block_hash, height):
        record = self._records[block_hash]
        if record.height is not None:
            raise ValueError(f"Height of {hash_to_hex(block_hash)} already set to {record.height}")
        record.height = height

    def update_block_status(self, block_hash, status):
        self._records[block_hash].status = status

    def hashes(self):
        return list(self._records)

    def records(self):
        return list(self._records.values())

    def __contains__(self, block_hash):
        return block_hash in self._records

    def __len__(self):
        return len(self._records)
