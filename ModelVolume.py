#!/usr/bin/env python3

# ModelVolume.py
# Python class to read one 3D variable from model output (NetCDF)
# as a scalar field for the Marching Cubes.
#
# Author: Carl Drews, Atmospheric Chemistry Observations & Modeling
# Created: March 2020
# Copyright 2020 by the University Corporation for Atmospheric Research



import sys
import netCDF4
import numpy

import CellClassifier
import ScalarField



VERBOSE = True

# Display progress message on the console.
# endString = set this to '' for no return
def progress(message, endString='\n'):
   if (VERBOSE):   # disable here in production
      print(message, end=endString)
      sys.stdout.flush()



# Convert model units for display.
# varValues = chemical concentrations, scaled on output
# varUnits = unit string read from model output file
# return newUnits for human display
def convertDataUnits(varValues, varUnits):
   newVarUnits = varUnits

   if (varUnits.lower() == "mol/mol"):
      varValues *= 1e+9
      newVarUnits = "ppbv"

   if (varUnits.lower() == "ppmv"):
      varValues *= 1e+3
      newVarUnits = "ppbv"

   return(newVarUnits)



# Find a coordinate variable under one of several common names.
# return the numpy values, or None if the file has none of them
def readCoordinate(fp, names, stride):
   for name in names:
      if (name in fp.variables):
         return(numpy.asarray(fp.variables[name][::stride], dtype=numpy.float64))

   return(None)



# Scalar field read from a NetCDF file.
# Physical coordinates are longitude, latitude, and vertical level
# when the file provides them; otherwise the unit-spaced grid.
class ModelVolume(ScalarField.ArrayField):

   # Read one species at one time step.
   # filename = path and name of model output (NetCDF)
   # species = name of the variable, dimensioned [time,] lev, lat, lon
   # timeIndex = which time step to retrieve
   # stride = [xStride, yStride, zStride] cell spacing to sample
   # fillValue = replaces missing data, so the classifier can discard it
   def __init__(self, filename, species, timeIndex=0, stride=(1, 1, 1),
      fillValue=CellClassifier.MIN_VALID_VALUE):
      self.filename = filename
      self.species = species

      values, xCoords, yCoords, zCoords, units = self.readVolume(
         filename, species, timeIndex, stride, fillValue)
      self.units = units

      super().__init__(values, xCoords, yCoords, zCoords)
      return

   def getModelName(self):
      return("{}:{}".format(self.filename, self.species))



   # Read the variable and its coordinates.
   # return tuple of [values, lons, lats, levels, units]
   def readVolume(self, filename, species, timeIndex, stride, fillValue):
      xStride, yStride, zStride = stride

      # open NetCDF file
      fp = netCDF4.Dataset(filename, 'r')
      try:
         if (species not in fp.variables):
            raise KeyError("Variable {} not found in {}.".format(species, filename))
         variable = fp.variables[species]

         if (variable.ndim == 4):
            values = variable[timeIndex, ::zStride, ::yStride, ::xStride]
         elif (variable.ndim == 3):
            values = variable[::zStride, ::yStride, ::xStride]
         else:
            raise ScalarField.GridDimensionError(
               "Variable {} has {} dimensions; need 3 or 4."
               .format(species, variable.ndim))

         lons = readCoordinate(fp, ["lon", "longitude", "x"], xStride)
         lats = readCoordinate(fp, ["lat", "latitude", "y"], yStride)
         levels = readCoordinate(fp, ["lev", "level", "z"], zStride)

         rawUnits = getattr(variable, "units", "")
         values = numpy.ma.asarray(values, dtype=numpy.float64)
      finally:
         # close NetCDF file
         fp.close()

      # order the levels so the vertical coordinate increases
      if (levels is not None and len(levels) > 1 and levels[0] > levels[-1]):
         values = values[::-1, :, :]
         levels = levels[::-1]

      units = convertDataUnits(values, rawUnits)
      values = numpy.ma.filled(values, fillValue)
      progress("Read {} {} {} from {}".format(species, values.shape, units, filename))

      return([values, lons, lats, levels, units])
