import argparse
import contextlib
import logging
import os
import sys

from blkindex.core.chain import ChainSelector
from blkindex.core.errors import BlockFileError, ChainCycleError, FormatError
from blkindex.export.csv_index import IndexExporter
from blkindex.export.order_check import OrderValidator
from blkindex.export.raw_dump import RawDumpExporter
from blkindex.storage.container import ContainerReader

logger = logging.getLogger("blkindex")

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_ORDER_VIOLATION = 2

MODES = ('index', 'dump', 'test')

def build_parser():
    parser = argparse.ArgumentParser(
        prog="blkindex",
        description="Rebuild the block chain from node container files (blk*.dat)"
    )
    parser.add_argument("mode", choices=MODES,
                        help="index: CSV of block metadata, dump: raw blocks in chain order, "
                             "test: check blocks are stored in chain order")
    parser.add_argument("files", nargs="+", help="Block container files, in order")
    parser.add_argument("--sidechains", action="store_true",
                        help="Include blocks outside the main chain after it")
    parser.add_argument("-o", "--output", help="Write output to this file instead of stdout")
    parser.add_argument("--debug", action="store_true", help="Output extra debugging information")
    return parser

@contextlib.contextmanager
def open_output(path, binary):
    """
    Yield the stream to export into. A file target is written under a
    temporary name and only renamed into place once the export finished.
    """
    if path is None:
        yield sys.stdout.buffer if binary else sys.stdout
        return

    tmp_path = path + ".tmp"
    f = open(tmp_path, 'wb') if binary else open(tmp_path, 'w', newline='')
    try:
        with f:
            yield f
    except BaseException:
        os.remove(tmp_path)
        raise
    os.replace(tmp_path, path)

def run(mode, paths, include_side_chains=False, output=None):
    """Read, resolve, select, then run the exporter for `mode`. Returns an exit code."""
    chain_index = ContainerReader().read_files(paths)
    order = ChainSelector(chain_index).select_chain(include_side_chains)

    if mode == 'test':
        if OrderValidator(chain_index).validate(order):
            return EXIT_OK
        return EXIT_ORDER_VIOLATION

    if mode == 'index':
        with open_output(output, binary=False) as out:
            IndexExporter(chain_index).export(order, out)
    elif mode == 'dump':
        with open_output(output, binary=True) as out:
            RawDumpExporter(chain_index).export(order, out)
    else:
        raise ValueError(f"Unknown mode {mode}")
    return EXIT_OK

def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr
    )

    try:
        return run(args.mode, args.files, args.sidechains, args.output)
    except (FormatError, BlockFileError, ChainCycleError) as e:
        logger.error(f"Fatal: {e}")
        return EXIT_FATAL

if __name__ == "__main__":
    sys.exit(main())
