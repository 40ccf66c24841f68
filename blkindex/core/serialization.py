import struct

def encode_uint32(n):
    """Encode a 4-byte unsigned integer (little-endian)."""
    return struct.pack('<I', n)

def decode_uint32(f):
    """Decode a 4-byte unsigned integer (little-endian) from a file-like object."""
    data = f.read(4)
    if len(data) < 4:
        raise EOFError("Insufficient data for uint32")
    return struct.unpack('<I', data)[0]

def decode_bytes(f, length):
    """Read exactly `length` raw bytes from a file-like object."""
    data = f.read(length)
    if len(data) < length:
        raise EOFError(f"Insufficient data: wanted {length} bytes, got {len(data)}")
    return data

def encode_record_prefix(magic, length):
    """
    Encode the 8-byte prefix of a container record.
    Magic is stored big-endian, the body length little-endian.
    """
    return struct.pack('>I', magic) + struct.pack('<I', length)

def decode_record_prefix(data):
    """Split an 8-byte record prefix into (magic, length)."""
    magic = struct.unpack('>I', data[:4])[0]
    length = struct.unpack('<I', data[4:8])[0]
    return magic, length
