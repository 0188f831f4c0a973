# cubeHelpers.py
# Shared helpers for building small test fields, and a one-cell
# reference version of the geometry pass.



import math
import numpy

import CaseTable
import CellClassifier
import GeometryGenerator
import ScalarField



# grid position (x, y, z) of each cube corner
CORNER_POSITIONS = [
   (0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0),
   (0, 0, 1), (1, 0, 1), (1, 1, 1), (0, 1, 1)]



# Build a single-cell field from 8 corner values.
# cornerValues = values of corners 0-7
# return ArrayField with 2x2x2 points
def singleCell(cornerValues, xCoords=None, yCoords=None, zCoords=None):
   values = numpy.zeros([2, 2, 2])
   for corner, value in enumerate(cornerValues):
      x, y, z = CORNER_POSITIONS[corner]
      values[z, y, x] = value

   return(ScalarField.ArrayField(values, xCoords, yCoords, zCoords))



# return ArrayField of reproducible random values in [0, 1)
def randomField(dims, seed=7):
   generator = numpy.random.default_rng(seed)
   return(ScalarField.ArrayField(generator.random([dims[2], dims[1], dims[0]])))



# Generate the triangles of one cell one vertex at a time.
# Reference for the vectorized GeometryGenerator.generateCells().
# cellId, outputOffset, caseIndex, numVertices = one valid cell
# vertices, normals = output arrays [N, 4] and [N, 3]
def referenceCell(cellId, outputOffset, caseIndex, numVertices,
   field, isoValue, vertices, normals):
   corners = CellClassifier.cellCorners(cellId, field.dims())
   values = numpy.asarray(field.scalarAt(corners), dtype=numpy.float64)
   locations = numpy.asarray(field.physicalCoordAt(corners), dtype=numpy.float64)

   for v in range(numVertices):
      corner0, corner1 = CaseTable.edgeCorners(CaseTable.TRIANGLE_TABLE[caseIndex, v])
      value0 = values[corner0]
      value1 = values[corner1]
      t = GeometryGenerator.DEGENERATE_T
      if (value1 != value0):
         t = (isoValue - value0) / (value1 - value0)

      vertices[outputOffset + v, 0:3] = (locations[corner0]
         + t * (locations[corner1] - locations[corner0]))
      vertices[outputOffset + v, 3] = 1.0

   for v in range(0, numVertices, 3):
      first = outputOffset + v
      corner = vertices[first:first + 3, 0:3].astype(numpy.float64)
      aSide = corner[1] - corner[0]
      bSide = corner[2] - corner[0]
      normal = [aSide[1] * bSide[2] - aSide[2] * bSide[1],
         aSide[2] * bSide[0] - aSide[0] * bSide[2],
         aSide[0] * bSide[1] - aSide[1] * bSide[0]]
      vectorLength = math.hypot(math.hypot(normal[0], normal[1]), normal[2])
      if (vectorLength > 0.0):
         normal = [component / vectorLength for component in normal]
      normals[first:first + 3] = normal
