import logging
from blkindex.core.errors import BlockFileError, FormatError
from blkindex.core.hashing import double_sha256, hash_to_hex
from blkindex.core.params import HEADER_SIZE, PREFIX_SIZE, network_for_magic
from blkindex.core.primitives import BlockHeader, BlockLocation, BlockRecord
from blkindex.core.serialization import decode_record_prefix
from blkindex.storage.blockindex import ChainIndex
from blkindex.storage.blockstore import BlockStore

logger = logging.getLogger("ContainerReader")

class ContainerReader:
    """
    Scans block container files and fills a ChainIndex with one record per
    block header found.

    Each record on disk is: magic (4, big-endian) | length L (4, little-endian)
    | 80-byte header | L - 80 bytes of payload. Only the header is parsed; the
    payload is skipped.
    """

    def __init__(self, chain_index=None, block_store=None):
        self.chain_index = chain_index if chain_index is not None else ChainIndex()
        self.block_store = block_store if block_store is not None else BlockStore()

    def read_files(self, paths):
        """Read every file in order and return the populated index."""
        for file_index, path in enumerate(paths):
            self.read_file(path, file_index)
        logger.info(f"Indexed {len(self.chain_index)} blocks from {len(paths)} file(s)")
        return self.chain_index

    def read_file(self, path, file_index=0):
        """Scan a single container file. Returns the number of block records read."""
        try:
            with open(path, 'rb') as f:
                blocks, padding = self._scan(f, path, file_index)
        except OSError as e:
            raise BlockFileError(path, e.strerror or str(e)) from e

        logger.info(f"{path}: {blocks} blocks, {padding} padding entries")
        return blocks

    def _scan(self, f, path, file_index):
        offset = 0
        blocks = 0
        padding = 0

        while True:
            f.seek(offset)
            prefix = f.read(PREFIX_SIZE)
            if not prefix:
                break
            if len(prefix) < PREFIX_SIZE:
                # Zero fill at the end of a preallocated file
                if not prefix.strip(b'\x00'):
                    padding += 1
                    break
                raise FormatError(f"Truncated record prefix ({len(prefix)} bytes)", path, offset)

            magic, length = decode_record_prefix(prefix)

            # 1. Padding
            if magic == 0:
                padding += 1
                offset += PREFIX_SIZE
                continue

            # 2. Network
            if network_for_magic(magic) is None:
                raise FormatError(f"Unrecognized magic value 0x{magic:08x}", path, offset)
            if length < HEADER_SIZE:
                raise FormatError(f"Record length {length} is too short to hold a block header", path, offset)

            # 3. Header
            raw_header = f.read(HEADER_SIZE)
            if len(raw_header) < HEADER_SIZE:
                raise FormatError(f"Truncated block header ({len(raw_header)} of {HEADER_SIZE} bytes)", path, offset)

            # Payload is skipped unread; a short one ends the scan at the next read
            end = offset + PREFIX_SIZE + length

            header = BlockHeader.parse(raw_header)
            block_hash = double_sha256(raw_header)
            location = BlockLocation(path, offset, PREFIX_SIZE + length, file_index)
            self.chain_index.add_block(BlockRecord(block_hash, header, location, magic))
            logger.debug(f"Block {hash_to_hex(block_hash)} at {path}:{offset} ({length} bytes)")

            blocks += 1
            offset = end

        return blocks, padding
