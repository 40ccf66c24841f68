import csv
import logging
from blkindex.core.hashing import hash_to_hex

logger = logging.getLogger("IndexExporter")

COLUMNS = [
    'file', 'offset', 'length', 'version', 'hash', 'prev_hash', 'merkle_root',
    'timestamp', 'bits', 'nonce', 'height', 'chain',
]

class IndexExporter:
    def __init__(self, chain_index):
        self.chain_index = chain_index

    def row(self, block_hash):
        record = self.chain_index.get_block_info(block_hash)
        header = record.header
        return [
            record.location.path,
            record.location.offset,
            record.location.length,
            header.version,
            hash_to_hex(record.hash),
            hash_to_hex(header.prev_block),
            hash_to_hex(header.merkle_root),
            header.timestamp,
            header.bits,
            header.nonce,
            record.height,
            record.chain_label,
        ]

    def export(self, order, out):
        """Write the header row and one row per block to a text stream."""
        writer = csv.writer(out, lineterminator='\n')
        writer.writerow(COLUMNS)
        for block_hash in order:
            writer.writerow(self.row(block_hash))
        logger.info(f"Wrote {len(order)} index rows")
        return len(order)
