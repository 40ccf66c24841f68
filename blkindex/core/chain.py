import logging
from blkindex.core.errors import ChainCycleError
from blkindex.core.hashing import hash_to_hex, hash_sort_key
from blkindex.core.primitives import STATUS_MAIN, STATUS_SIDE

logger = logging.getLogger("HeightResolver")
selector_logger = logging.getLogger("ChainSelector")

class HeightResolver:
    """
    Computes each block's distance from genesis.

    A block whose parent is not in the index sits on a virtual genesis and
    gets height 0. Results are stored on the records, so every block is
    walked at most once per run no matter where resolution starts.
    """

    def __init__(self, chain_index):
        self.chain_index = chain_index
        # Records visited by parent walks; stays flat for cached lookups
        self.steps = 0

    def resolve(self, block_hash):
        record = self.chain_index.get_block_info(block_hash)
        if record is None:
            raise KeyError(f"Unknown block {hash_to_hex(block_hash)}")
        if record.height is not None:
            return record.height

        # 1. Walk back until a resolved block or a missing parent
        pending = []
        on_path = set()
        base_height = -1
        current = block_hash
        while True:
            record = self.chain_index.get_block_info(current)
            if record is None:
                break
            if record.height is not None:
                base_height = record.height
                break
            if current in on_path:
                raise ChainCycleError(hash_to_hex(current), record.location.path, record.location.offset)
            pending.append(current)
            on_path.add(current)
            self.steps += 1
            current = record.prev_hash

        # 2. Unwind oldest first
        height = base_height
        for h in reversed(pending):
            height += 1
            self.chain_index.set_height(h, height)

        logger.debug(f"Resolved {len(pending)} block(s) from {hash_to_hex(block_hash)}, height {height}")
        return height

    def resolve_all(self):
        for block_hash in self.chain_index.hashes():
            self.resolve(block_hash)


class ChainSelector:
    """Picks the longest chain and lays out the export order."""

    def __init__(self, chain_index, resolver=None):
        self.chain_index = chain_index
        self.resolver = resolver if resolver is not None else HeightResolver(chain_index)
        self.tip = None

    def find_tip(self):
        """
        The block with the greatest height. Equal heights are settled by the
        smallest hash value, so the result never depends on read order.
        """
        best = None
        for record in self.chain_index.records():
            if best is None or record.height > best.height:
                best = record
            elif record.height == best.height and hash_sort_key(record.hash) < hash_sort_key(best.hash):
                best = record
        return best

    def select_chain(self, include_side_chains=False):
        # 1. Heights for everything
        self.resolver.resolve_all()

        # 2. Tip
        self.tip = self.find_tip()
        if self.tip is None:
            selector_logger.warning("No blocks indexed, nothing to select")
            return []

        # 3. Main chain, tip back to the first known ancestor
        main_chain = []
        current = self.tip.hash
        while current in self.chain_index:
            self.chain_index.update_block_status(current, STATUS_MAIN)
            main_chain.append(current)
            current = self.chain_index.get_block_info(current).prev_hash
        main_chain.reverse()

        selector_logger.info(
            f"Tip {hash_to_hex(self.tip.hash)} at height {self.tip.height} "
            f"with a main chain of {len(main_chain)} blocks"
        )

        # 4. Side chains after the main chain, lowest first
        side_chain = []
        if include_side_chains:
            side = [
                (record.height, seen, record.hash)
                for seen, record in enumerate(self.chain_index.records())
                if record.status != STATUS_MAIN
            ]
            for _, _, block_hash in sorted(side):
                self.chain_index.update_block_status(block_hash, STATUS_SIDE)
                side_chain.append(block_hash)
            selector_logger.info(f"Including {len(side_chain)} side chain block(s)")
        else:
            skipped = len(self.chain_index) - len(main_chain)
            if skipped:
                selector_logger.info(f"Skipping {skipped} block(s) outside the main chain")

        return main_chain + side_chain
