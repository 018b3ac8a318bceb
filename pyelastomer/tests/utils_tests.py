from unittest import TestCase

from pyelastomer import bulk_chunks
from pyelastomer.utils import Limiter, encoded_size


class BulkChunksTests(TestCase):
    """Tests for bulk_chunks()"""

    @staticmethod
    def str_range(top):
        return (str(x) for x in range(top))

    def test_under(self):
        """Make sure action iterators shorter than 1 chunk work."""
        actions = self.str_range(1)  # just 0
        chunks = bulk_chunks(actions, docs_per_chunk=2)
        self.assertEqual(list(chunks), [['0']])

    def test_over(self):
        """Make sure action iterators longer than 1 chunk work."""
        actions = self.str_range(7)
        chunks = bulk_chunks(actions, docs_per_chunk=3)
        self.assertEqual(list(chunks), [['0', '1', '2'], ['3', '4', '5'], ['6']])

    def test_on(self):
        """Make sure action iterators that end on a chunk boundary work."""
        actions = self.str_range(4)
        chunks = bulk_chunks(actions, docs_per_chunk=2)
        self.assertEqual(list(chunks), [['0', '1'], ['2', '3']])

    def test_none(self):
        """Make sure empty action iterators work."""
        actions = self.str_range(0)
        chunks = bulk_chunks(actions, docs_per_chunk=2)
        self.assertEqual(list(chunks), [])

    def test_bytes(self):
        """
        Make sure byte-based limits work.

        A chunk may fill the limit exactly but never pass it.
        """
        actions = ['o', 'hi', 'good', 'chimpanzees']
        chunks = bulk_chunks(actions, docs_per_chunk=None, bytes_per_chunk=5)
        self.assertEqual(list(chunks), [['o', 'hi'], ['good'], ['chimpanzees']])

    def test_bytes_first_too_big(self):
        """
        Don't yield an empty chunk if the first item is over the byte limit on
        its own.
        """
        actions = ['chimpanzees', 'hi', 'ho']
        chunks = bulk_chunks(actions, docs_per_chunk=None, bytes_per_chunk=6)
        self.assertEqual(list(chunks), [['chimpanzees'], ['hi', 'ho']])

    def test_both_limits(self):
        """Whichever limit is hit first cuts the chunk."""
        actions = ['a', 'b', 'c', 'dddddddd', 'e']
        chunks = bulk_chunks(actions, docs_per_chunk=2, bytes_per_chunk=8)
        self.assertEqual(list(chunks),
                         [['a', 'b'], ['c'], ['dddddddd'], ['e']])

    def test_no_limits(self):
        """With no limits at all, everything lands in one chunk."""
        actions = self.str_range(500)
        chunks = list(bulk_chunks(actions, docs_per_chunk=None))
        self.assertEqual(len(chunks), 1)
        self.assertEqual(len(chunks[0]), 500)


class LimiterTests(TestCase):
    """Tests for the batch-size bookkeeping shared by chunks and sessions"""

    def test_encoded_size(self):
        """Sizes are in utf-8 bytes, plus the trailing newline."""
        self.assertEqual(encoded_size('abc'), 4)
        self.assertEqual(encoded_size(u'sm\xf6\xf6'), 7)
        self.assertEqual(encoded_size(b'ab\ncd'), 6)

    def test_empty_batch_never_overflows(self):
        limiter = Limiter(max_bytes=5)
        self.assertFalse(limiter.would_overflow(100))
        limiter.add(100)
        self.assertTrue(limiter.would_overflow(1))

    def test_exact_fit(self):
        limiter = Limiter(max_bytes=10)
        limiter.add(4)
        self.assertFalse(limiter.would_overflow(6))
        self.assertTrue(limiter.would_overflow(7))

    def test_count(self):
        limiter = Limiter(max_operations=2)
        limiter.add(1)
        self.assertFalse(limiter.is_full())
        limiter.add(1)
        self.assertTrue(limiter.is_full())
        limiter.reset()
        self.assertFalse(limiter.is_full())
        self.assertEqual((limiter.op_count, limiter.byte_count), (0, 0))

    def test_unlimited(self):
        limiter = Limiter()
        for _ in range(1000):
            limiter.add(1000)
        self.assertFalse(limiter.is_full())
        self.assertFalse(limiter.would_overflow(1000))
