import unittest
import os
import shutil
import tempfile

from blkindex.core.errors import BlockFileError, FormatError
from blkindex.core.primitives import BlockHeader, STATUS_UNKNOWN
from blkindex.core.serialization import encode_record_prefix
from blkindex.storage.blockstore import BlockStore
from blkindex.storage.container import ContainerReader

from blockfiles import MAIN_MAGIC, TEST_MAGIC, encode_record, make_chain, write_blk

class TestContainerReader(unittest.TestCase):
    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        self.path = os.path.join(self.test_dir, 'blk00000.dat')

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def test_reads_records_and_locations(self):
        headers = make_chain(3)
        records = [encode_record(h) for h in headers]
        offsets = write_blk(self.path, records)

        index = ContainerReader().read_files([self.path])
        self.assertEqual(len(index), 3)

        for header, offset, raw in zip(headers, offsets, records):
            record = index.get_block_info(header.get_hash())
            self.assertIsNotNone(record)
            self.assertEqual(record.location.path, self.path)
            self.assertEqual(record.location.offset, offset)
            self.assertEqual(record.location.length, len(raw))
            self.assertEqual(record.header.prev_block, header.prev_block)
            self.assertEqual(record.header.nonce, header.nonce)
            self.assertEqual(record.magic, MAIN_MAGIC)
            self.assertIsNone(record.height)
            self.assertEqual(record.status, STATUS_UNKNOWN)

    def test_testnet_magic(self):
        header = make_chain(1)[0]
        write_blk(self.path, [encode_record(header, magic=TEST_MAGIC)])
        index = ContainerReader().read_files([self.path])
        self.assertIn(header.get_hash(), index)

    def test_padding_is_skipped(self):
        a, b = make_chain(2)
        offsets = write_blk(self.path, [
            b'\x00' * 8,
            encode_record(a),
            b'\x00' * 16,
            encode_record(b),
            b'\x00' * 5,
        ])
        reader = ContainerReader()
        self.assertEqual(reader.read_file(self.path), 2)
        self.assertEqual(reader.chain_index.get_block_info(a.get_hash()).location.offset, offsets[1])
        self.assertEqual(reader.chain_index.get_block_info(b.get_hash()).location.offset, offsets[3])

    def test_unknown_magic(self):
        good = encode_record(make_chain(1)[0])
        bad = encode_record(BlockHeader(nonce=7), magic=0xDEADBEEF)
        write_blk(self.path, [good, bad])

        with self.assertRaises(FormatError) as cm:
            ContainerReader().read_files([self.path])
        self.assertEqual(cm.exception.path, self.path)
        self.assertEqual(cm.exception.offset, len(good))
        self.assertIn('0xdeadbeef', str(cm.exception))

    def test_short_header(self):
        raw = BlockHeader().serialize()
        write_blk(self.path, [encode_record_prefix(MAIN_MAGIC, 80) + raw[:50]])
        with self.assertRaises(FormatError) as cm:
            ContainerReader().read_files([self.path])
        self.assertEqual(cm.exception.offset, 0)

    def test_short_prefix(self):
        write_blk(self.path, [encode_record(make_chain(1)[0]), b'\xf9\xbe\xb4'])
        with self.assertRaises(FormatError):
            ContainerReader().read_files([self.path])

    def test_length_too_small(self):
        raw = BlockHeader().serialize()
        write_blk(self.path, [encode_record_prefix(MAIN_MAGIC, 40) + raw])
        with self.assertRaises(FormatError):
            ContainerReader().read_files([self.path])

    def test_truncated_payload_is_indexed(self):
        a, b = make_chain(2)
        first = encode_record(a)
        second = encode_record(b, payload=b'\x01' * 100)
        write_blk(self.path, [first, second[:-10]])

        index = ContainerReader().read_files([self.path])
        self.assertEqual(len(index), 2)
        location = index.get_block_info(b.get_hash()).location
        self.assertEqual(location.offset, len(first))
        # Declared size is kept even though the file is shorter
        self.assertEqual(location.length, len(second))

    def test_missing_file(self):
        with self.assertRaises(BlockFileError) as cm:
            ContainerReader().read_files([os.path.join(self.test_dir, 'nope.dat')])
        self.assertIsInstance(cm.exception, OSError)

    def test_duplicate_last_write_wins(self):
        header = make_chain(1)[0]
        other = os.path.join(self.test_dir, 'blk00001.dat')
        write_blk(self.path, [encode_record(header)])
        write_blk(other, [b'\x00' * 8, encode_record(header, payload=b'\x00' * 40)])

        index = ContainerReader().read_files([self.path, other])
        self.assertEqual(len(index), 1)
        location = index.get_block_info(header.get_hash()).location
        self.assertEqual(location.path, other)
        self.assertEqual(location.offset, 8)
        self.assertEqual(location.file_index, 1)
        self.assertEqual(location.length, 8 + 80 + 40)

    def test_block_store_reads_record(self):
        header = make_chain(1)[0]
        record = encode_record(header)
        write_blk(self.path, [b'\x00' * 8, record])

        index = ContainerReader().read_files([self.path])
        location = index.get_block_info(header.get_hash()).location
        self.assertEqual(BlockStore().read_record(location), record)

        with self.assertRaises(FormatError):
            BlockStore().read_block(self.path, location.offset, location.length + 1)

if __name__ == '__main__':
    unittest.main()
