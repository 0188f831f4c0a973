#!/usr/bin/env python3

# GeometryGenerator.py
# Python module to generate the triangles of the isosurface
# inside each cell that the surface passes through.
#
# Every valid cell writes its vertices into its own slice of the
# packed output arrays, starting at the offset allocated for it.
# The slices never overlap, so cells can be processed concurrently.
# Vertices come in groups of three, one group per triangle, and
# all three vertices of a triangle share its flat normal vector.
#
# Author: Carl Drews, Atmospheric Chemistry Observations & Modeling
# Created: October 2026
# Copyright 2026 by the University Corporation for Atmospheric Research



import numpy

import CaseTable
import CellClassifier
import ParallelScan



# Interpolation factor used when both ends of an edge have equal values.
# The table never selects such an edge, since one corner must be
# above the isovalue and the other not; this keeps the result finite.
DEGENERATE_T = 0.5



# Calculate fraction of the way along each edge where the surface crosses.
# isoValue = isosurface value
# values0, values1 = arrays of scalar values at the two ends of the edges
# return fractions in [0, 1] measured from the first end
def interpolationFactors(isoValue, values0, values1):
   delta = values1 - values0
   degenerate = (delta == 0)
   safeDelta = numpy.where(degenerate, 1.0, delta)

   return(numpy.where(degenerate, DEGENERATE_T, (isoValue - values0) / safeDelta))



# Calculate the normal vectors of triangles.
# Method: Take cross product of the two adjacent sides.
# The order of the vertices used in the calculation
# will affect the direction of the normal direction
# (in or out of the face with respect to winding).
# triangles = array [N, 3, 3] of triangle corner positions
# return array [N, 3] of unit normals, zero for a degenerate triangle
def triangleNormals(triangles):
   aSide = triangles[:, 1, :] - triangles[:, 0, :]
   bSide = triangles[:, 2, :] - triangles[:, 0, :]
   normals = numpy.cross(aSide, bSide)

   lengths = numpy.linalg.norm(normals, axis=1)
   degenerate = (lengths == 0.0)
   lengths[degenerate] = 1.0

   return(normals / lengths[:, numpy.newaxis])



# Generate the triangles for valid cells [start, stop) of the compacted list.
# validCellIndices, outputVertexOffsets = from Compaction.compactCells()
# caseIndex, numVertices = classification of all cells
# The output written is the contiguous vertex range from the first
# offset of this group to the end of its last cell.
def generateCells(field, isoValue, validCellIndices, outputVertexOffsets,
   caseIndex, numVertices, start, stop, vertices, normals,
   source=None, scalars=None):
   if (start >= stop):
      return

   cells = validCellIndices[start:stop]
   offsets = outputVertexOffsets[start:stop]
   cases = caseIndex[cells]
   counts = numVertices[cells]

   corners = CellClassifier.cellCorners(cells, field.dims())
   values = numpy.asarray(field.scalarAt(corners), dtype=numpy.float64)
   locations = numpy.asarray(field.physicalCoordAt(corners), dtype=numpy.float64)

   # one row per output vertex, in output order
   slots = numpy.arange(CaseTable.MAX_VERTICES)
   rows, slots = numpy.nonzero(slots[numpy.newaxis, :] < counts[:, numpy.newaxis])
   edges = CaseTable.TRIANGLE_TABLE[cases[rows], slots]
   corner0 = CaseTable.EDGE_CORNERS[edges, 0]
   corner1 = CaseTable.EDGE_CORNERS[edges, 1]

   t = interpolationFactors(isoValue, values[rows, corner0], values[rows, corner1])
   location0 = locations[rows, corner0]
   location1 = locations[rows, corner1]

   outIndex = offsets[rows] + slots
   vertices[outIndex, 0:3] = location0 + t[:, numpy.newaxis] * (location1 - location0)
   vertices[outIndex, 3] = 1.0

   if (source is not None and scalars is not None):
      sourceValues = numpy.asarray(source.scalarAt(corners), dtype=numpy.float64)
      value0 = sourceValues[rows, corner0]
      value1 = sourceValues[rows, corner1]
      scalars[outIndex] = value0 + t * (value1 - value0)

   # flat normals from the positions just written
   first = int(offsets[0])
   last = int(offsets[-1] + counts[-1])
   triangles = vertices[first:last, 0:3].astype(numpy.float64).reshape(-1, 3, 3)
   faceNormals = triangleNormals(triangles)
   normals[first:last] = numpy.repeat(faceNormals, 3, axis=0)

   return



# Generate the triangles for all valid cells.
# compaction = CompactionResult listing the valid cells and their offsets
# vertices, normals, scalars = output arrays sized to numTotalVertices
def generateAll(field, isoValue, compaction, caseIndex, numVertices,
   vertices, normals, source=None, scalars=None,
   executor=None, chunkSize=ParallelScan.DEFAULT_CHUNK_SIZE):
   ParallelScan.parallelFor(executor, compaction.numValidCells,
      lambda start, stop: generateCells(field, isoValue,
         compaction.validCellIndices, compaction.outputVertexOffsets,
         caseIndex, numVertices, start, stop, vertices, normals,
         source, scalars),
      chunkSize)

   return
