#!/usr/bin/env python3

# CellClassifier.py
# Python module to classify grid cells for the Marching Cubes algorithm.
#
# Every cell is the cube between 8 adjacent grid points. A cell's
# configuration (case index) has bit k set when the scalar value at
# corner k is strictly greater than the isovalue. The case index
# selects the row of the triangle table and the number of vertices
# the cell will generate. Cells are independent of each other.
#
# Author: Carl Drews, Atmospheric Chemistry Observations & Modeling
# Created: October 2026
# Copyright 2026 by the University Corporation for Atmospheric Research



import numpy

import CaseTable
import ParallelScan



# Model output often marks missing data with large negative values.
# Cells touching such a value are discarded unless told otherwise.
MIN_VALID_VALUE = -500.0



# Find column, row, and level of the lower corner of cells.
# cellId = one cell index or numpy array of indices
# dims = number of grid points [dim0, dim1, dim2]
# return x, y, z
def cellCoordinates(cellId, dims):
   xCells = dims[0] - 1
   yCells = dims[1] - 1
   cellsPerLayer = xCells * yCells

   x = cellId % xCells
   y = (cellId // xCells) % yCells
   z = cellId // cellsPerLayer

   return(x, y, z)



# Find the point indexes of the 8 corners of cells.
# Corners 0-3 go around the bottom face, and corner i+4 is above corner i.
# return array [8] for one cell, or [N, 8] for an array of cells
def cellCorners(cellId, dims):
   cellId = numpy.asarray(cellId, dtype=numpy.int64)
   x, y, z = cellCoordinates(cellId, dims)
   pointsPerLayer = dims[0] * dims[1]

   i0 = x + y * dims[0] + z * pointsPerLayer
   i1 = i0 + 1
   i2 = i0 + 1 + dims[0]
   i3 = i0 + dims[0]

   return(numpy.stack([i0, i1, i2, i3,
      i0 + pointsPerLayer, i1 + pointsPerLayer,
      i2 + pointsPerLayer, i3 + pointsPerLayer], axis=-1))



# Build case indexes from corner values.
# cornerValues = array [..., 8] of scalars
# return integer array [...] of case indexes
def caseIndexes(cornerValues, isoValue):
   above = (cornerValues > isoValue).astype(numpy.int32)
   weights = numpy.left_shift(1, numpy.arange(8, dtype=numpy.int32))

   return(numpy.sum(above * weights, axis=-1, dtype=numpy.int32))



# Determine which cells contain only valid data.
# cornerValues = array [..., 8] of scalars
# return boolean array [...], True where every corner is usable
def validCorners(cornerValues, discardMinVals, minValidValue):
   if (not discardMinVals or minValidValue is None):
      return(numpy.ones(cornerValues.shape[:-1], dtype=bool))

   # NaN never compares greater, so it counts as invalid
   return(numpy.all(cornerValues > minValidValue, axis=-1))



# Classify one cell.
# cellId = index of the cell
# field = ScalarField sampled at the cell corners
# isoValue = looking for the isosurface at this value
# discardMinVals = skip cells with a corner at or below minValidValue
# minValidValue = values at or below this are missing data; None keeps every cell
# return [case index, vertex count]
def classifyCell(cellId, field, isoValue, discardMinVals=True,
   minValidValue=MIN_VALID_VALUE):
   corners = cellCorners(cellId, field.dims())
   cornerValues = numpy.asarray(field.scalarAt(corners))

   caseIndex = int(caseIndexes(cornerValues, isoValue))
   numVertices = CaseTable.vertexCount(caseIndex)
   if (not validCorners(cornerValues, discardMinVals, minValidValue)):
      numVertices = 0

   return([caseIndex, numVertices])



# Classify a contiguous range of cells [start, stop).
# caseIndex, numVertices = output arrays for all cells;
#	only the slice [start, stop) is written
def classifyCells(field, isoValue, start, stop, caseIndex, numVertices,
   discardMinVals=True, minValidValue=MIN_VALID_VALUE):
   corners = cellCorners(numpy.arange(start, stop, dtype=numpy.int64),
      field.dims())
   cornerValues = numpy.asarray(field.scalarAt(corners))

   cases = caseIndexes(cornerValues, isoValue)
   counts = CaseTable.VERTEX_COUNT_TABLE[cases]
   valid = validCorners(cornerValues, discardMinVals, minValidValue)

   caseIndex[start:stop] = cases
   numVertices[start:stop] = numpy.where(valid, counts, 0)

   return



# Classify every cell of the field.
# executor = runs chunks of cells, possibly concurrently
# return [caseIndex, numVertices] integer arrays, one entry per cell
def classifyAll(field, isoValue, executor=None,
   chunkSize=ParallelScan.DEFAULT_CHUNK_SIZE,
   discardMinVals=True, minValidValue=MIN_VALID_VALUE):
   numCells = field.cellCount()
   caseIndex = numpy.empty(numCells, dtype=numpy.int32)
   numVertices = numpy.empty(numCells, dtype=numpy.int32)

   ParallelScan.parallelFor(executor, numCells,
      lambda start, stop: classifyCells(field, isoValue, start, stop,
         caseIndex, numVertices, discardMinVals, minValidValue),
      chunkSize)

   return([caseIndex, numVertices])
