import concurrent.futures
import unittest

import numpy

import ParallelScan


class TestParallelScan(unittest.TestCase):

   def setUp(self):
      self.pool = concurrent.futures.ThreadPoolExecutor(max_workers=4)
      generator = numpy.random.default_rng(3)
      self.values = generator.integers(0, 16, size=1001).astype(numpy.int64)

   def tearDown(self):
      self.pool.shutdown(wait=True)

   def executors(self):
      return [None, ParallelScan.SerialExecutor(), self.pool]

   def test_chunk_ranges(self):
      self.assertEqual(ParallelScan.chunkRanges(10, 4), [[0, 4], [4, 8], [8, 10]])
      self.assertEqual(ParallelScan.chunkRanges(0, 4), [])
      with self.assertRaises(ValueError):
         ParallelScan.chunkRanges(10, 0)

   def test_parallel_for_keeps_chunk_order(self):
      for executor in self.executors():
         results = ParallelScan.parallelFor(executor, 10, lambda a, b: (a, b), 3)
         self.assertEqual(results, [(0, 3), (3, 6), (6, 9), (9, 10)])

   def test_inclusive_scan_matches_cumsum(self):
      expected = numpy.cumsum(self.values)
      for executor in self.executors():
         for chunkSize in [1, 7, 64, 5000]:
            result = ParallelScan.inclusiveScan(self.values, executor, chunkSize)
            numpy.testing.assert_array_equal(result, expected)

   def test_exclusive_scan_matches_cumsum(self):
      expected = numpy.concatenate([[0], numpy.cumsum(self.values)[:-1]])
      for executor in self.executors():
         for chunkSize in [1, 7, 64, 5000]:
            result = ParallelScan.exclusiveScan(self.values, executor, chunkSize)
            numpy.testing.assert_array_equal(result, expected)

   def test_scan_in_place(self):
      values = self.values.copy()
      result = ParallelScan.inclusiveScan(values, self.pool, 10, out=values)
      self.assertIs(result, values)
      numpy.testing.assert_array_equal(values, numpy.cumsum(self.values))

   def test_scan_of_booleans_counts(self):
      flags = self.values > 8
      result = ParallelScan.inclusiveScan(flags, self.pool, 13)
      self.assertEqual(result.dtype.kind, "i")
      self.assertEqual(result[-1], numpy.count_nonzero(flags))

   def test_empty_scan(self):
      result = ParallelScan.exclusiveScan(numpy.zeros(0, dtype=numpy.int32))
      self.assertEqual(len(result), 0)

   def test_upper_bound(self):
      steps = numpy.array([0, 1, 1, 2, 2, 2, 3, 4])
      targets = numpy.arange(4)
      for executor in self.executors():
         result = ParallelScan.upperBound(steps, targets, executor, 2)
         numpy.testing.assert_array_equal(result, [1, 3, 6, 7])

   def test_make_executor(self):
      self.assertIsInstance(ParallelScan.makeExecutor(1), ParallelScan.SerialExecutor)
      pool = ParallelScan.makeExecutor(2)
      try:
         self.assertIsInstance(pool, concurrent.futures.ThreadPoolExecutor)
      finally:
         pool.shutdown()
