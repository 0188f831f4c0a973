import unittest

import numpy

import CaseTable
from cubeHelpers import CORNER_POSITIONS


class TestCaseTable(unittest.TestCase):

   def test_tables_are_consistent(self):
      self.assertEqual(CaseTable.checkTables(), [])

   def test_shapes(self):
      self.assertEqual(CaseTable.TRIANGLE_TABLE.shape, (256, 16))
      self.assertEqual(CaseTable.VERTEX_COUNT_TABLE.shape, (256,))
      self.assertEqual(CaseTable.EDGE_CORNERS.shape, (12, 2))

   def test_counts_match_rows(self):
      for caseIndex in range(256):
         row = CaseTable.TRIANGLE_TABLE[caseIndex]
         count = CaseTable.vertexCount(caseIndex)
         self.assertEqual(count % 3, 0)
         self.assertLessEqual(count, CaseTable.MAX_VERTICES)
         self.assertEqual(numpy.count_nonzero(row != CaseTable.NO_EDGE), count)
         self.assertTrue(numpy.all(row[count:] == CaseTable.NO_EDGE))

   def test_empty_and_full_cases(self):
      self.assertEqual(CaseTable.vertexCount(0), 0)
      self.assertEqual(CaseTable.vertexCount(255), 0)
      self.assertEqual(CaseTable.triangleEdges(0), [])
      self.assertEqual(CaseTable.triangleEdges(255), [])

   def test_single_corner_cases(self):
      for corner in range(8):
         self.assertEqual(CaseTable.vertexCount(1 << corner), 3)
         self.assertEqual(CaseTable.vertexCount(255 - (1 << corner)), 3)
      self.assertEqual(CaseTable.triangleEdges(1), [0, 8, 3])

   def test_horizontal_plane_cases(self):
      self.assertEqual(CaseTable.triangleEdges(15), [9, 8, 10, 10, 8, 11])
      self.assertEqual(CaseTable.triangleEdges(240), [9, 10, 8, 10, 11, 8])

   def test_edges_join_adjacent_corners(self):
      for edge in range(12):
         corner0, corner1 = CaseTable.edgeCorners(edge)
         delta = numpy.abs(numpy.subtract(CORNER_POSITIONS[corner0],
            CORNER_POSITIONS[corner1]))
         self.assertEqual(delta.sum(), 1)

   def test_listed_edges_are_crossed(self):
      # every listed edge joins a corner above the isovalue to one below
      for caseIndex in range(256):
         for edge in CaseTable.triangleEdges(caseIndex):
            corner0, corner1 = CaseTable.edgeCorners(edge)
            above0 = (caseIndex >> corner0) & 1
            above1 = (caseIndex >> corner1) & 1
            self.assertNotEqual(above0, above1, (caseIndex, edge))

   def test_tables_are_read_only(self):
      with self.assertRaises(ValueError):
         CaseTable.TRIANGLE_TABLE[0, 0] = 1
      with self.assertRaises(ValueError):
         CaseTable.VERTEX_COUNT_TABLE[0] = 3
