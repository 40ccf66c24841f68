import logging
from blkindex.core.errors import FormatError
from blkindex.storage.blockstore import BlockStore

logger = logging.getLogger("RawDumpExporter")

class RawDumpExporter:
    """Copies each record, prefix included, from its source file to a binary stream."""

    def __init__(self, chain_index, block_store=None):
        self.chain_index = chain_index
        self.block_store = block_store if block_store is not None else BlockStore()

    def check_sources(self, order):
        """
        Make sure every record can still be read in full before any byte is
        written. A file changing after this check is not caught here.
        """
        sizes = {}
        for block_hash in order:
            location = self.chain_index.get_block_info(block_hash).location
            if location.path not in sizes:
                sizes[location.path] = self.block_store.file_size(location.path)
            if location.offset + location.length > sizes[location.path]:
                raise FormatError(
                    f"Record of {location.length} bytes extends past end of file "
                    f"({sizes[location.path]} bytes)",
                    location.path, location.offset
                )

    def export(self, order, out):
        self.check_sources(order)

        written = 0
        for block_hash in order:
            location = self.chain_index.get_block_info(block_hash).location
            data = self.block_store.read_record(location)
            out.write(data)
            written += len(data)
        logger.info(f"Dumped {len(order)} blocks ({written} bytes)")
        return written
