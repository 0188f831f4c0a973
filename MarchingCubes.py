#!/usr/bin/env python3

# MarchingCubes.py
# Python module to implement Marching Cubes algorithm for 3D isosurface.
#
# The surface is built in data-parallel passes over the whole grid:
#	1. classify every cell against the isovalue (CellClassifier)
#	2. compact the valid cells and allocate output (Compaction)
#	3. interpolate triangles for each valid cell (GeometryGenerator)
# Each pass reads only the results of earlier passes.
#
# Author: Carl Drews, Atmospheric Chemistry Observations & Modeling
# Created: April 2021
# Copyright 2021 by the University Corporation for Atmospheric Research



import sys
import numpy

import CellClassifier
import Compaction
import GeometryGenerator
import ParallelScan



VERBOSE = True

# Display progress message on the console.
# endString = set this to '' for no return
def progress(message, endString='\n'):
   if (VERBOSE):   # disable here in production
      print(message, end=endString)
      sys.stdout.flush()



# states of the isosurface
UNINITIALIZED = "uninitialized"	# constructed, nothing extracted yet
EXTRACTED = "extracted"		# output arrays hold the surface
EMPTY = "empty"			# surface missed every cell
RELEASED = "released"		# memory freed on request
FAILED = "failed"		# could not allocate the output



# The output arrays could not be allocated.
class SurfaceAllocationError(MemoryError):
   pass



# Isosurface of a scalar field at one isovalue.
# inputField = ScalarField to build the surface from
# sourceField = optional ScalarField interpolated onto the surface vertices
# isoValue = build the surface along this value
# discardMinVals = skip cells having a corner at or below minValidValue
# minValidValue = missing-data threshold; None keeps every cell
# workers = number of threads; 1 runs in the calling thread
# executor = optional executor to use instead of creating one
# sink = optional object with receiveSurface(surface), called after each run
class MarchingCube:

   def __init__(self, inputField, sourceField=None, isoValue=0.0,
      discardMinVals=True, minValidValue=CellClassifier.MIN_VALID_VALUE,
      workers=1, executor=None, chunkSize=ParallelScan.DEFAULT_CHUNK_SIZE,
      sink=None):

      if (sourceField is not None and sourceField.dims() != inputField.dims()):
         raise ValueError("Source field dimensions {} do not match input {}."
            .format(sourceField.dims(), inputField.dims()))
      if (chunkSize < 1):
         raise ValueError("Chunk size must be positive, not {}.".format(chunkSize))

      self.input = inputField
      self.source = sourceField
      self.isoValue = isoValue
      self.discardMinVals = discardMinVals
      self.minValidValue = minValidValue
      self.chunkSize = chunkSize
      self.sink = sink

      self.ownExecutor = executor is None
      if (executor is None):
         executor = ParallelScan.makeExecutor(workers)
      self.executor = executor

      self.state = UNINITIALIZED
      self.stale = True
      self.clearIntermediate()
      self.clearOutput()
      return

   def __enter__(self):
      return(self)

   def __exit__(self, excType, excValue, traceback):
      self.close()
      return(False)

   # Free all memory and stop any worker threads we created.
   def close(self):
      self.freeMemory()
      if (self.ownExecutor):
         self.executor.shutdown(wait=True)
      return

   def toString(self):
      return("MarchingCube isoValue:{} state:{} cells:{} valid:{} vertices:{}"
         .format(self.isoValue, self.state, self.input.cellCount(),
         self.numValidCells, self.numTotalVertices))



   # accessors for the parameters that invalidate the surface
   def setIsoValue(self, isoValue):
      if (isoValue != self.isoValue):
         self.stale = True
      self.isoValue = isoValue
      return
   def getIsoValue(self):
      return(self.isoValue)

   def setDiscardMinVals(self, discardMinVals):
      if (discardMinVals != self.discardMinVals):
         self.stale = True
      self.discardMinVals = discardMinVals
      return

   def setMinValidValue(self, minValidValue):
      if (minValidValue != self.minValidValue):
         self.stale = True
      self.minValidValue = minValidValue
      return

   def setSink(self, sink):
      self.sink = sink
      return

   # return True if parameters changed since the last extraction
   def isStale(self):
      return(self.stale)



   # forget the per-cell classification and compaction arrays
   def clearIntermediate(self):
      self.caseIndex = None
      self.numVertices = None
      self.validCellEnum = None
      self.validCellIndices = None
      self.outputVertexOffsets = None
      return

   # forget the surface itself
   def clearOutput(self):
      self.vertices = numpy.zeros([0, 4], dtype=numpy.float32)
      self.normals = numpy.zeros([0, 3], dtype=numpy.float32)
      self.scalars = numpy.zeros(0, dtype=numpy.float32)
      self.numValidCells = 0
      self.numTotalVertices = 0
      return



   # Release the intermediate arrays but keep the finished surface.
   def freeIntermediate(self):
      self.clearIntermediate()
      return

   # Release memory held by this surface.
   # includeInput = also release the cell classification arrays
   def freeMemory(self, includeInput=True):
      if (includeInput):
         self.caseIndex = None
         self.numVertices = None
         self.validCellEnum = None
      self.validCellIndices = None
      self.outputVertexOffsets = None
      self.clearOutput()
      self.state = RELEASED
      self.stale = True
      return



   # Allocate output arrays for numTotal vertices.
   def allocateOutput(self, numTotal):
      try:
         self.vertices = numpy.empty([numTotal, 4], dtype=numpy.float32)
         self.normals = numpy.empty([numTotal, 3], dtype=numpy.float32)
         if (self.source is not None):
            self.scalars = numpy.empty(numTotal, dtype=numpy.float32)
         else:
            self.scalars = numpy.zeros(0, dtype=numpy.float32)
      except MemoryError as error:
         self.clearOutput()
         self.state = FAILED
         self.stale = True
         raise SurfaceAllocationError("Cannot allocate {} surface vertices."
            .format(numTotal)) from error

      return



   # Calculate the isosurface at the current isovalue.
   # return number of vertices generated (3 per triangle)
   def run(self):
      numCells = self.input.cellCount()
      progress("Creating isoSurface at {} over {} cells."
         .format(self.isoValue, numCells))

      # classify all cells
      self.caseIndex, self.numVertices = CellClassifier.classifyAll(
         self.input, self.isoValue, self.executor, self.chunkSize,
         self.discardMinVals, self.minValidValue)

      # enumerate valid cells and allocate their output vertices
      compaction = Compaction.compactCells(self.numVertices,
         self.executor, self.chunkSize)
      self.validCellEnum = compaction.validCellEnum
      self.validCellIndices = compaction.validCellIndices
      self.outputVertexOffsets = compaction.outputVertexOffsets
      self.numValidCells = compaction.numValidCells

      if (self.numValidCells == 0):
         # no valid cells at all, return with empty surface
         self.clearOutput()
         self.state = EMPTY
         self.stale = False
         progress("The isosurface passed through no grid cells.")
         self.deliver()
         return(0)

      self.numTotalVertices = 0
      self.allocateOutput(compaction.numTotalVertices)
      self.numTotalVertices = compaction.numTotalVertices

      # interpolate triangles in each valid cell
      GeometryGenerator.generateAll(self.input, self.isoValue, compaction,
         self.caseIndex, self.numVertices, self.vertices, self.normals,
         self.source, self.scalars if self.source is not None else None,
         self.executor, self.chunkSize)

      self.state = EXTRACTED
      self.stale = False
      progress("The isosurface passed through {} grid cells with {} triangles."
         .format(self.numValidCells, self.numTotalVertices // 3))
      self.deliver()

      return(self.numTotalVertices)

   def __call__(self):
      return(self.run())

   # hand the finished surface to the sink, if any
   def deliver(self):
      if (self.sink is not None):
         self.sink.receiveSurface(self)
      return



   # accessors for the surface
   def getVertices(self):
      return(self.vertices)
   def getNormals(self):
      return(self.normals)
   def getScalars(self):
      return(self.scalars)

   # Return array [triangles, 3, 3] of triangle corner positions.
   def getTriangles(self):
      return(self.vertices[:, 0:3].reshape(-1, 3, 3))
