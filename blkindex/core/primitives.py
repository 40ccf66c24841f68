import io
from .serialization import encode_uint32, decode_uint32, decode_bytes
from .hashing import double_sha256, hash_to_hex
from .params import HEADER_SIZE

# Chain membership of an indexed block
STATUS_UNKNOWN = 0
STATUS_SIDE = 2
STATUS_MAIN = 3

STATUS_LABELS = {
    STATUS_UNKNOWN: 'unknown',
    STATUS_SIDE: 'side',
    STATUS_MAIN: 'main',
}

class BlockHeader:
    def __init__(self, version=1, prev_block=b'\x00'*32, merkle_root=b'\x00'*32, timestamp=0, bits=0x1d00ffff, nonce=0):
        self.version = version
        self.prev_block = prev_block
        self.merkle_root = merkle_root
        self.timestamp = timestamp
        self.bits = bits
        self.nonce = nonce

    def serialize(self):
        return (
            encode_uint32(self.version) +
            self.prev_block +
            self.merkle_root +
            encode_uint32(self.timestamp) +
            encode_uint32(self.bits) +
            encode_uint32(self.nonce)
        )

    @classmethod
    def deserialize(cls, f):
        version = decode_uint32(f)
        prev_block = decode_bytes(f, 32)
        merkle_root = decode_bytes(f, 32)
        timestamp = decode_uint32(f)
        bits = decode_uint32(f)
        nonce = decode_uint32(f)
        return cls(version, prev_block, merkle_root, timestamp, bits, nonce)

    @classmethod
    def parse(cls, raw):
        """Parse a header from exactly HEADER_SIZE raw bytes."""
        if len(raw) != HEADER_SIZE:
            raise ValueError(f"Block header must be {HEADER_SIZE} bytes, got {len(raw)}")
        return cls.deserialize(io.BytesIO(raw))

    def get_hash(self):
        return double_sha256(self.serialize())

    @property
    def hash(self):
        return hash_to_hex(self.get_hash())


class BlockLocation:
    """Where a record lives on disk: the file, its prefix offset and total size."""

    def __init__(self, path, offset, length, file_index=0):
        self.path = path
        self.offset = offset
        self.length = length
        # Position of the file in the input list; orders records across files
        self.file_index = file_index

    @property
    def position(self):
        return (self.file_index, self.offset)

    def __repr__(self):
        return f"BlockLocation({self.path}@{self.offset}+{self.length})"


class BlockRecord:
    """Header metadata for one indexed block."""

    def __init__(self, block_hash, header, location, magic=None):
        self.hash = block_hash
        self.header = header
        self.location = location
        self.magic = magic
        self.height = None
        self.status = STATUS_UNKNOWN

    @property
    def prev_hash(self):
        return self.header.prev_block

    @property
    def chain_label(self):
        return STATUS_LABELS[self.status]

    def __repr__(self):
        return f"BlockRecord({hash_to_hex(self.hash)}, height={self.height})"
