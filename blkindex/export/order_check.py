import logging
from blkindex.core.hashing import hash_to_hex
from blkindex.core.primitives import STATUS_SIDE

logger = logging.getLogger("OrderValidator")

class OrderingViolation:
    """A main chain block stored on disk before its predecessor in the chain."""

    def __init__(self, index, block_hash, previous, current):
        self.index = index
        self.block_hash = block_hash
        self.previous = previous
        self.current = current

    def __str__(self):
        return (
            f"Block #{self.index} {hash_to_hex(self.block_hash)} at "
            f"{self.current.path}:{self.current.offset} is stored before "
            f"its predecessor at {self.previous.path}:{self.previous.offset}"
        )


class OrderValidator:
    """
    Checks that main chain blocks appear on disk in chain order: the
    (input file position, offset) of consecutive blocks never decreases.
    """

    def __init__(self, chain_index):
        self.chain_index = chain_index
        self.violations = []

    def validate(self, order):
        self.violations = []
        previous = None
        checked = 0
        for index, block_hash in enumerate(order):
            record = self.chain_index.get_block_info(block_hash)
            if record.status == STATUS_SIDE:
                continue
            checked += 1
            if previous is not None and record.location.position < previous.position:
                violation = OrderingViolation(index, block_hash, previous, record.location)
                self.violations.append(violation)
                logger.warning(str(violation))
            previous = record.location

        if self.violations:
            logger.error(f"Order check failed: {len(self.violations)} violation(s) in {checked} blocks")
            return False
        logger.info(f"Order check passed for {checked} blocks")
        return True
