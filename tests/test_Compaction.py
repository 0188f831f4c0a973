import concurrent.futures
import unittest

import numpy

import CaseTable
import Compaction


class TestCompaction(unittest.TestCase):

   def test_small_example(self):
      numVertices = numpy.array([0, 3, 0, 6, 0, 0, 9, 3], dtype=numpy.int32)
      result = Compaction.compactCells(numVertices)

      numpy.testing.assert_array_equal(result.validCellEnum, [0, 1, 1, 2, 2, 2, 3, 4])
      numpy.testing.assert_array_equal(result.validCellIndices, [1, 3, 6, 7])
      numpy.testing.assert_array_equal(result.outputVertexOffsets, [0, 3, 9, 18])
      self.assertEqual(result.numValidCells, 4)
      self.assertEqual(result.numTotalVertices, 21)

   def test_no_valid_cells(self):
      result = Compaction.compactCells(numpy.zeros(10, dtype=numpy.int32))
      self.assertEqual(result.numValidCells, 0)
      self.assertEqual(result.numTotalVertices, 0)
      self.assertEqual(len(result.validCellIndices), 0)
      self.assertEqual(len(result.outputVertexOffsets), 0)

   def test_no_cells(self):
      result = Compaction.compactCells(numpy.zeros(0, dtype=numpy.int32))
      self.assertEqual(result.numValidCells, 0)
      self.assertEqual(result.numTotalVertices, 0)

   def test_first_and_last_cells_valid(self):
      result = Compaction.compactCells([15, 0, 0, 3])
      numpy.testing.assert_array_equal(result.validCellIndices, [0, 3])
      numpy.testing.assert_array_equal(result.outputVertexOffsets, [0, 15])
      self.assertEqual(result.numTotalVertices, 18)

   def test_offsets_are_allocated_in_order(self):
      generator = numpy.random.default_rng(11)
      numVertices = CaseTable.VERTEX_COUNT_TABLE[generator.integers(0, 256, size=5000)]

      with concurrent.futures.ThreadPoolExecutor(max_workers=4) as pool:
         result = Compaction.compactCells(numVertices, pool, chunkSize=97)

      expectedCells = numpy.nonzero(numVertices)[0]
      numpy.testing.assert_array_equal(result.validCellIndices, expectedCells)

      counts = numVertices[result.validCellIndices]
      offsets = result.outputVertexOffsets
      self.assertTrue(numpy.all(numpy.diff(offsets) > 0))
      self.assertTrue(numpy.all(offsets % 3 == 0))
      self.assertEqual(offsets[-1] + counts[-1], result.numTotalVertices)
      self.assertEqual(result.numTotalVertices, int(numVertices.sum()))

   def test_executor_does_not_change_result(self):
      generator = numpy.random.default_rng(5)
      numVertices = numpy.where(generator.random(777) < 0.3, 6, 0)
      serial = Compaction.compactCells(numVertices, None, chunkSize=50)
      with concurrent.futures.ThreadPoolExecutor(max_workers=3) as pool:
         threaded = Compaction.compactCells(numVertices, pool, chunkSize=13)

      numpy.testing.assert_array_equal(serial.validCellIndices, threaded.validCellIndices)
      numpy.testing.assert_array_equal(serial.outputVertexOffsets,
         threaded.outputVertexOffsets)
      self.assertEqual(serial.numTotalVertices, threaded.numTotalVertices)
