#!/usr/bin/env python3

# Compaction.py
# Python module to find the cells that contain the isosurface and
# to allocate room for their triangles in one packed output array.
#
# Two prefix sums do the work:
# 1. An inclusive scan of "cell generates vertices" numbers the valid
#    cells. Searching that step function for each rank 0..n-1 gives
#    the compacted list of valid cell indexes.
# 2. An exclusive scan of the valid cells' vertex counts gives the
#    position of each cell's first output vertex.
#
# Author: Carl Drews, Atmospheric Chemistry Observations & Modeling
# Created: October 2026
# Copyright 2026 by the University Corporation for Atmospheric Research



import numpy

import ParallelScan



# Results of compacting the valid cells.
class CompactionResult:

   def __init__(self, validCellEnum, validCellIndices, outputVertexOffsets,
      numTotalVertices):
      self.validCellEnum = validCellEnum		# running count of valid cells
      self.validCellIndices = validCellIndices	# cell index of each valid cell
      self.outputVertexOffsets = outputVertexOffsets	# first output vertex of each
      self.numValidCells = len(validCellIndices)
      self.numTotalVertices = int(numTotalVertices)
      return

   def toString(self):
      return("{} valid cells generate {} vertices"
         .format(self.numValidCells, self.numTotalVertices))



# Number the cells that generate at least one vertex.
# numVertices = vertex count of every cell
# return inclusive running count; last element is number of valid cells
def enumerateValidCells(numVertices, executor=None,
   chunkSize=ParallelScan.DEFAULT_CHUNK_SIZE):
   numVertices = numpy.asarray(numVertices)
   validCellEnum = numpy.empty(len(numVertices), dtype=numpy.int64)
   ParallelScan.parallelFor(executor, len(numVertices),
      lambda start, stop: numpy.not_equal(numVertices[start:stop], 0,
         out=validCellEnum[start:stop], casting="unsafe"),
      chunkSize)

   return(ParallelScan.inclusiveScan(validCellEnum, executor, chunkSize,
      out=validCellEnum))



# Invert the running count of valid cells.
# The valid cell of rank r is the first cell whose running count exceeds r.
# return array [numValid] of cell indexes, increasing
def findValidCells(validCellEnum, numValid, executor=None,
   chunkSize=ParallelScan.DEFAULT_CHUNK_SIZE):
   ranks = numpy.arange(numValid, dtype=validCellEnum.dtype)

   return(ParallelScan.upperBound(validCellEnum, ranks, executor, chunkSize))



# Find where each valid cell's vertices begin in the output.
# return array [numValid] of output vertex offsets
def outputOffsets(numVertices, validCellIndices, executor=None,
   chunkSize=ParallelScan.DEFAULT_CHUNK_SIZE):
   numVertices = numpy.asarray(numVertices)
   validCounts = numpy.empty(len(validCellIndices), dtype=numpy.int64)

   def gatherCounts(start, stop):
      validCounts[start:stop] = numVertices[validCellIndices[start:stop]]
      return

   ParallelScan.parallelFor(executor, len(validCellIndices), gatherCounts,
      chunkSize)

   return(ParallelScan.exclusiveScan(validCounts, executor, chunkSize,
      out=validCounts))



# Compact the valid cells and allocate their output vertices.
# numVertices = vertex count of every cell (0 for empty cells)
# return CompactionResult
def compactCells(numVertices, executor=None,
   chunkSize=ParallelScan.DEFAULT_CHUNK_SIZE):
   numVertices = numpy.asarray(numVertices)
   validCellEnum = enumerateValidCells(numVertices, executor, chunkSize)

   numValid = 0
   if (len(validCellEnum) > 0):
      numValid = int(validCellEnum[-1])
   if (numValid == 0):
      empty = numpy.zeros(0, dtype=numpy.int64)
      return(CompactionResult(validCellEnum, empty, empty.copy(), 0))

   validCellIndices = findValidCells(validCellEnum, numValid,
      executor, chunkSize)
   offsets = outputOffsets(numVertices, validCellIndices, executor, chunkSize)

   numTotalVertices = offsets[-1] + numVertices[validCellIndices[-1]]

   return(CompactionResult(validCellEnum, validCellIndices, offsets,
      numTotalVertices))
