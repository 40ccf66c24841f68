import hashlib

def double_sha256(data):
    """Calculate double-SHA256 hash (hash(hash(data)))."""
    return hashlib.sha256(hashlib.sha256(data).digest()).digest()

def hash_to_hex(data):
    """Convert an internal (digest order) hash to its display hex string."""
    return data[::-1].hex()

def hex_to_hash(hex_str):
    """Convert a display hex string back to the internal digest order."""
    return bytes.fromhex(hex_str)[::-1]

def hash_sort_key(data):
    """Numeric value of a hash, as compared when ranking block hashes."""
    return int.from_bytes(data, 'little')
