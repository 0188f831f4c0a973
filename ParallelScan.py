#!/usr/bin/env python3

# ParallelScan.py
# Python module of data-parallel building blocks for the marching cubes:
# chunked parallel-for, prefix sums (scans), and binary searches.
#
# Work is split into contiguous chunks of elements. Each chunk is
# handed to an executor with the concurrent.futures map() interface.
# The numpy kernels release the GIL, so a thread pool gives real
# concurrency. A serial executor gives identical results.
#
# Author: Carl Drews, Atmospheric Chemistry Observations & Modeling
# Created: October 2026
# Copyright 2026 by the University Corporation for Atmospheric Research



import concurrent.futures
import numpy



DEFAULT_CHUNK_SIZE = 1 << 16	# elements handed to one task



# Executor that runs every task immediately in the calling thread.
class SerialExecutor:

   def map(self, function, *iterables):
      return(list(map(function, *iterables)))

   def shutdown(self, wait=True):
      return



# Create an executor for the requested number of worker threads.
# workers = 1 or fewer runs everything in the calling thread
def makeExecutor(workers=1):
   if (workers is None or workers <= 1):
      return(SerialExecutor())

   return(concurrent.futures.ThreadPoolExecutor(max_workers=workers,
      thread_name_prefix="marching"))



# Split the range [0, count) into contiguous [start, stop) pieces.
# return list of [start, stop] pairs, in increasing order
def chunkRanges(count, chunkSize=DEFAULT_CHUNK_SIZE):
   if (chunkSize < 1):
      raise ValueError("Chunk size must be positive, not {}.".format(chunkSize))

   return([[start, min(start + chunkSize, count)]
      for start in range(0, count, chunkSize)])



# Apply function(start, stop) to every chunk of [0, count).
# The chunks may run concurrently and in any order, so each call
# must write only into its own [start, stop) portion of any output.
# return list of function results in chunk order
def parallelFor(executor, count, function, chunkSize=DEFAULT_CHUNK_SIZE):
   if (executor is None):
      executor = SerialExecutor()
   ranges = chunkRanges(count, chunkSize)

   return(list(executor.map(lambda piece: function(piece[0], piece[1]), ranges)))



# Prefix sum of values, computed in two parallel passes.
# Pass 1 scans each chunk on its own. The chunk totals are then
# scanned left to right to find the carry into each chunk.
# Pass 2 adds that carry to every element of the chunk.
# values = 1D numpy array
# inclusive = True to include each element in its own sum
# out = optional output array of the same length
# return array of prefix sums
def scan(values, inclusive=True, executor=None, chunkSize=DEFAULT_CHUNK_SIZE,
   out=None):
   values = numpy.asarray(values)
   count = values.shape[0]
   if (out is None):
      outType = values.dtype if values.dtype.kind in "iuf" else numpy.int64
      out = numpy.empty(count, dtype=outType)
   if (count == 0):
      return(out)

   def scanChunk(start, stop):
      numpy.cumsum(values[start:stop], dtype=out.dtype, out=out[start:stop])
      return(out[stop - 1])

   chunkTotals = numpy.array(parallelFor(executor, count, scanChunk, chunkSize),
      dtype=out.dtype)

   # carry into each chunk = sum of all chunks to its left
   carries = numpy.zeros(len(chunkTotals), dtype=out.dtype)
   numpy.cumsum(chunkTotals[:-1], dtype=out.dtype, out=carries[1:])

   def addCarry(start, stop):
      chunkIndex = start // chunkSize
      if (not inclusive):
         # shift right by one element, staying inside this chunk
         out[start + 1:stop] = out[start:stop - 1]
         out[start] = 0
      out[start:stop] += carries[chunkIndex]
      return

   parallelFor(executor, count, addCarry, chunkSize)

   return(out)



# return inclusive prefix sum of values
def inclusiveScan(values, executor=None, chunkSize=DEFAULT_CHUNK_SIZE, out=None):
   return(scan(values, True, executor, chunkSize, out))



# return exclusive prefix sum of values, beginning with zero
def exclusiveScan(values, executor=None, chunkSize=DEFAULT_CHUNK_SIZE, out=None):
   return(scan(values, False, executor, chunkSize, out))



# For each target, find the first position in sortedValues whose
# value is greater than the target. One binary search per target.
# sortedValues = non-decreasing 1D array
# targets = 1D array of values to look for
# return array of positions, same length as targets
def upperBound(sortedValues, targets, executor=None, chunkSize=DEFAULT_CHUNK_SIZE):
   targets = numpy.asarray(targets)
   positions = numpy.empty(targets.shape[0], dtype=numpy.int64)

   def searchChunk(start, stop):
      positions[start:stop] = numpy.searchsorted(sortedValues,
         targets[start:stop], side="right")
      return

   parallelFor(executor, targets.shape[0], searchChunk, chunkSize)

   return(positions)
