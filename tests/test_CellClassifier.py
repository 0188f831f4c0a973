import concurrent.futures
import unittest

import numpy

import CellClassifier
import ScalarField
from cubeHelpers import randomField, singleCell


class TestCellGeometry(unittest.TestCase):

   def test_cell_coordinates(self):
      dims = (4, 3, 5)
      self.assertEqual(CellClassifier.cellCoordinates(0, dims), (0, 0, 0))
      self.assertEqual(CellClassifier.cellCoordinates(4, dims), (1, 1, 0))
      self.assertEqual(CellClassifier.cellCoordinates(6, dims), (0, 0, 1))
      self.assertEqual(CellClassifier.cellCoordinates(23, dims), (2, 1, 3))

   def test_single_cell_corners(self):
      corners = CellClassifier.cellCorners(0, (2, 2, 2))
      numpy.testing.assert_array_equal(corners, [0, 1, 3, 2, 4, 5, 7, 6])

   def test_corner_offsets(self):
      dims = (4, 3, 5)
      corners = CellClassifier.cellCorners(numpy.array([0, 23]), dims)
      self.assertEqual(corners.shape, (2, 8))
      # cell (2, 1, 3) has its lower corner at point 2 + 1*4 + 3*12
      numpy.testing.assert_array_equal(
         corners[1], [42, 43, 47, 46, 54, 55, 59, 58])


class TestClassifyCell(unittest.TestCase):

   def test_bottom_below_top_above(self):
      field = singleCell([0, 0, 0, 0, 1, 1, 1, 1])
      caseIndex, numVertices = CellClassifier.classifyCell(0, field, 0.5)
      self.assertEqual(caseIndex, 0b11110000)
      self.assertEqual(numVertices, 6)

   def test_uniform_field_is_empty(self):
      field = ScalarField.ArrayField(numpy.ones([3, 3, 3]))
      caseIndex, numVertices = CellClassifier.classifyAll(field, 0.5)
      self.assertTrue(numpy.all(caseIndex == 255))
      self.assertTrue(numpy.all(numVertices == 0))

   def test_single_corner_above(self):
      field = singleCell([1, 0, 0, 0, 0, 0, 0, 0])
      self.assertEqual(CellClassifier.classifyCell(0, field, 0.5), [1, 3])

   def test_single_corner_below(self):
      field = singleCell([0, 1, 1, 1, 1, 1, 1, 1])
      self.assertEqual(CellClassifier.classifyCell(0, field, 0.5), [254, 3])

   def test_equal_value_is_not_above(self):
      field = singleCell([0.5, 0, 0, 0, 0, 0, 0, 0])
      self.assertEqual(CellClassifier.classifyCell(0, field, 0.5), [0, 0])

   def test_discard_cells_below_minimum(self):
      field = singleCell([-999.0, 1, 1, 1, 0, 0, 0, 0])
      caseIndex, numVertices = CellClassifier.classifyCell(
         0, field, 0.5, discardMinVals=True, minValidValue=-500.0)
      self.assertEqual(caseIndex, 0b00001110)
      self.assertEqual(numVertices, 0)

      caseIndex, numVertices = CellClassifier.classifyCell(
         0, field, 0.5, discardMinVals=False, minValidValue=-500.0)
      self.assertGreater(numVertices, 0)

   def test_missing_data_discarded_by_default(self):
      field = singleCell([CellClassifier.MIN_VALID_VALUE, 1, 1, 1, 0, 0, 0, 0])
      caseIndex, numVertices = CellClassifier.classifyCell(0, field, 0.5)
      self.assertEqual(caseIndex, 0b00001110)
      self.assertEqual(numVertices, 0)

      caseIndex, numVertices = CellClassifier.classifyAll(field, 0.5)
      self.assertEqual(numVertices[0], 0)

   def test_no_minimum_keeps_every_cell(self):
      field = singleCell([-999.0, 1, 1, 1, 0, 0, 0, 0])
      caseIndex, numVertices = CellClassifier.classifyCell(0, field, 0.5,
         minValidValue=None)
      self.assertGreater(numVertices, 0)

   def test_nan_corner_is_discarded(self):
      field = singleCell([numpy.nan, 1, 1, 1, 0, 0, 0, 0])
      caseIndex, numVertices = CellClassifier.classifyCell(
         0, field, 0.5, minValidValue=-500.0)
      self.assertEqual(numVertices, 0)


class TestClassifyAll(unittest.TestCase):

   def test_matches_single_cell_classification(self):
      field = randomField((6, 5, 4))
      caseIndex, numVertices = CellClassifier.classifyAll(field, 0.5)
      self.assertEqual(len(caseIndex), field.cellCount())
      for cellId in range(field.cellCount()):
         self.assertEqual(CellClassifier.classifyCell(cellId, field, 0.5),
            [caseIndex[cellId], numVertices[cellId]])

   def test_executor_does_not_change_result(self):
      field = randomField((9, 8, 7))
      expected = CellClassifier.classifyAll(field, 0.4)
      with concurrent.futures.ThreadPoolExecutor(max_workers=3) as pool:
         result = CellClassifier.classifyAll(field, 0.4, pool, chunkSize=17)
      numpy.testing.assert_array_equal(result[0], expected[0])
      numpy.testing.assert_array_equal(result[1], expected[1])
