# Network magic values, as they appear big-endian at the start of each record
NETWORKS = {
    'main': 0xF9BEB4D9,
    'testnet': 0x0B110907,
}

MAGIC_TO_NETWORK = {magic: name for name, magic in NETWORKS.items()}

PREFIX_SIZE = 8
HEADER_SIZE = 80

def network_for_magic(magic):
    """Return the network name for a magic value, or None if unknown."""
    return MAGIC_TO_NETWORK.get(magic)
