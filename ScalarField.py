#!/usr/bin/env python3

# ScalarField.py
# Python base class and simple implementations of a scalar field
# sampled on a regular 3D grid of points.
#
# Grid points are numbered in row-major order with x fastest,
# then y, then z:  index = x + y * dim0 + z * dim0 * dim1
# Arrays of values are therefore stored as values[z, y, x].
#
# Author: Carl Drews, Atmospheric Chemistry Observations & Modeling
# Created: October 2026
# Copyright 2026 by the University Corporation for Atmospheric Research



import numpy



# index constants for accessing coordinate triples
CART_X = 0
CART_Y = 1
CART_Z = 2



# The grid is too small to contain even one cell.
class GridDimensionError(ValueError):
   pass



# Verify that the grid dimensions describe at least one cell.
# dims = [dim0, dim1, dim2] number of points along x, y, z
# return tuple of integer dimensions
def checkDimensions(dims):
   if (len(dims) != 3):
      raise GridDimensionError("Grid must have three dimensions, not {}."
         .format(len(dims)))

   intDims = tuple(int(dim) for dim in dims)
   for axis, dim in enumerate(intDims):
      if (dim < 2):
         raise GridDimensionError("Grid dimension {} is {}; need at least 2 points."
            .format(axis, dim))

   return(intDims)



# Base class for scalar fields.
# Subclasses must supply scalarAt() and may override physicalCoordAt().
# Every accessor takes one point index or a numpy array of indices.
class ScalarField:

   def __init__(self, dims):
      self.dim0, self.dim1, self.dim2 = checkDimensions(dims)
      return

   def dims(self):
      return((self.dim0, self.dim1, self.dim2))

   def pointCount(self):
      return(self.dim0 * self.dim1 * self.dim2)

   def cellCount(self):
      return((self.dim0 - 1) * (self.dim1 - 1) * (self.dim2 - 1))

   # return scalar value(s) at linear point index
   def scalarAt(self, index):
      raise NotImplementedError("{} does not provide scalar values."
         .format(type(self).__name__))

   # Return integer grid coordinates (column, row, level).
   # index = one point index or array of N indices
   # return array [3] or [N, 3]
   def gridCoordAt(self, index):
      index = numpy.asarray(index, dtype=numpy.int64)
      column = index % self.dim0
      row = (index // self.dim0) % self.dim1
      level = index // (self.dim0 * self.dim1)

      return(numpy.stack([column, row, level], axis=-1))

   # Return physical coordinates (x, y, z) in 3D space.
   # The default places the points on the unit-spaced grid.
   def physicalCoordAt(self, index):
      return(self.gridCoordAt(index).astype(numpy.float64))

   # return [min, max] of all scalar values in the field
   def valueRange(self):
      values = self.scalarAt(numpy.arange(self.pointCount()))
      return([float(numpy.nanmin(values)), float(numpy.nanmax(values))])



# Scalar field held in memory as a numpy array.
# values = array[dim2, dim1, dim0] of scalars, indexed [z, y, x]
# xCoords, yCoords, zCoords = optional 1D positions along each axis
#	The spacing along each axis need not be uniform.
# locations = optional array[dim2, dim1, dim0, 3] of point positions,
#	for grids that are not rectilinear (terrain-following levels).
class ArrayField(ScalarField):

   def __init__(self, values, xCoords=None, yCoords=None, zCoords=None,
      locations=None):
      values = numpy.asarray(values)
      if (values.ndim != 3):
         raise GridDimensionError("Scalar values must be a 3D array, not {}D."
            .format(values.ndim))
      super().__init__([values.shape[2], values.shape[1], values.shape[0]])

      self.values = values.reshape(-1)		# flat view in point index order
      self.locations = None

      if (locations is not None):
         locations = numpy.asarray(locations, dtype=numpy.float64)
         if (locations.shape != values.shape + (3,)):
            raise ValueError("Locations shape {} does not match values {}."
               .format(locations.shape, values.shape))
         self.locations = locations.reshape(-1, 3)
         return

      axisCoords = []
      for axisLength, coords in zip(self.dims(), [xCoords, yCoords, zCoords]):
         if (coords is None):
            coords = numpy.arange(axisLength, dtype=numpy.float64)
         coords = numpy.asarray(coords, dtype=numpy.float64)
         if (coords.shape != (axisLength,)):
            raise ValueError("Axis has {} points but {} coordinates."
               .format(axisLength, coords.shape))
         axisCoords.append(coords)
      self.axisCoords = axisCoords

      return

   def scalarAt(self, index):
      return(self.values[index])

   def physicalCoordAt(self, index):
      if (self.locations is not None):
         return(self.locations[index])

      grid = self.gridCoordAt(index)
      return(numpy.stack([self.axisCoords[CART_X][grid[..., CART_X]],
         self.axisCoords[CART_Y][grid[..., CART_Y]],
         self.axisCoords[CART_Z][grid[..., CART_Z]]], axis=-1))

   def valueRange(self):
      return([float(numpy.nanmin(self.values)), float(numpy.nanmax(self.values))])



# Scalar field calculated on the fly from a function of position.
# function = callable f(x, y, z) accepting numpy arrays
# dims = number of points along x, y, z
# lowerBound, upperBound = corners of the box covered by the grid
class ImplicitField(ScalarField):

   def __init__(self, function, dims,
      lowerBound=(-1.0, -1.0, -1.0), upperBound=(1.0, 1.0, 1.0)):
      super().__init__(dims)
      self.function = function
      self.lowerBound = numpy.asarray(lowerBound, dtype=numpy.float64)
      self.upperBound = numpy.asarray(upperBound, dtype=numpy.float64)
      self.spacing = ((self.upperBound - self.lowerBound)
         / (numpy.array(self.dims(), dtype=numpy.float64) - 1.0))
      return

   def physicalCoordAt(self, index):
      return(self.lowerBound + self.gridCoordAt(index) * self.spacing)

   def scalarAt(self, index):
      location = self.physicalCoordAt(index)
      return(self.function(location[..., CART_X], location[..., CART_Y],
         location[..., CART_Z]))



# Return function of distance from the center of a sphere.
# Values are negative inside the sphere and positive outside.
def sphereFunction(center=(0.0, 0.0, 0.0), radius=0.5):
   def distance(x, y, z):
      return(numpy.sqrt((x - center[CART_X]) ** 2 + (y - center[CART_Y]) ** 2
         + (z - center[CART_Z]) ** 2) - radius)

   return(distance)



# The "tangle cube" quartic surface, a standard isosurface test shape.
# Use with isovalue 0 over the box [-3, 3] on each axis.
def tangleFunction():
   def tangle(x, y, z):
      return(x ** 4 - 5.0 * x ** 2 + y ** 4 - 5.0 * y ** 2
         + z ** 4 - 5.0 * z ** 2 + 11.8)

   return(tangle)
