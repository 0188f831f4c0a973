#!/usr/bin/env python3

# isoSurface.py
# Python program to extract isosurfaces from a 3D scalar field
# and write them as Collada (DAE) models.
#
# Usage: python3 isoSurface.py field=sphere dims=40,40,40 isovalues=0.0
#	field = sphere | tangle | netcdf
#	file = NetCDF model output, when field=netcdf
#	species = variable to read from the NetCDF file
#	time = time index within the NetCDF file
#	stride = x,y,z spacing to sample the NetCDF grid
#	dims = grid points along x,y,z for the synthetic fields
#	isovalues = comma-separated list of surface values
#	source = species interpolated onto the surface (netcdf only)
#	minvalid = discard cells with a corner at or below this value (default -500)
#	discard = yes | no
#	workers = number of threads
#	chunk = cells handed to each thread task
#	output = file pattern with {isoValue}, such as stage/iso-{isoValue}.dae
#	color = r,g,b,a in 0.0-1.0
#	transparency = 0.0-1.0
#
# Author: Carl Drews, Atmospheric Chemistry Observations & Modeling
# Created: October 2026
# Copyright 2026 by the University Corporation for Atmospheric Research



import sys
import datetime

import utilsLite
import utilsCollada
import CellClassifier
import MarchingCubes
import ModelVolume
import ParallelScan
import ScalarField



# Display progress message on the console.
# endString = set this to '' for no return
def progress(message, endString='\n'):
   if (True):   # disable here in production
      print(message, end=endString)
      sys.stdout.flush()



# Return a safe list of comma-separated command-line arguments.
# csvParams = with no spaces: 123.4,abc,today
# numeric = convert params to floating-point
# integer = convert params to integer
# return [123.4, "abc", "today"]
def safeParams(csvParams, numeric=False, integer=False):
   allParams = csvParams.split(",")
   params = []
   for param in allParams:
      saniParam = utilsLite.sanitize(param)

      if (integer):
         params.append(utilsLite.safeInt(saniParam))
      elif (numeric):
         params.append(utilsLite.safeFloat(saniParam))
      else:
         params.append(saniParam)

   return(params)



# Build the scalar field(s) requested on the command line.
# return [inputField, sourceField] or None if the field cannot be built
def createFields(fieldName, dims, dataFile, species, sourceSpecies,
   timeIndex, stride):
   if (fieldName == "sphere"):
      return([ScalarField.ImplicitField(ScalarField.sphereFunction(), dims), None])

   if (fieldName == "tangle"):
      return([ScalarField.ImplicitField(ScalarField.tangleFunction(), dims,
         (-3.0, -3.0, -3.0), (3.0, 3.0, 3.0)), None])

   if (fieldName == "netcdf"):
      if (dataFile is None or species is None):
         progress("Error: field=netcdf needs file= and species= arguments.")
         return(None)

      inputField = ModelVolume.ModelVolume(dataFile, species, timeIndex, stride)
      sourceField = None
      if (sourceSpecies is not None):
         sourceField = ModelVolume.ModelVolume(dataFile, sourceSpecies,
            timeIndex, stride)
      return([inputField, sourceField])

   progress("Error: unknown field {}.".format(fieldName))
   return(None)



# Main program begins here.
# argv = list of arg=value pairs
# return 0 for success
def main(argv=None):
   if (argv is None):
      argv = sys.argv

   # set up the default field and isovalues
   fieldName = "sphere"
   dims = [40, 40, 40]
   isoValues = [0.0]
   dataFile = None
   species = None
   sourceSpecies = None
   timeIndex = 0
   stride = [1, 1, 1]
   minValidValue = CellClassifier.MIN_VALID_VALUE
   discardMinVals = True
   workers = 1
   chunkSize = ParallelScan.DEFAULT_CHUNK_SIZE
   outputPattern = "iso-{isoValue}.dae"
   colorRGBA = [1.0, 0.5, 0.0, 1.0]
   transparency = 0.0

   # retrieve the command-line arguments, if any
   for argPair in argv:
      # the arguments are: arg=value
      pairValue = argPair.split('=', 1)
      if (len(pairValue) < 2):
         continue
      argName = pairValue[0].lower()

      if (argName == "field"):
         fieldName = utilsLite.sanitize(pairValue[1]).lower()
      if (argName == "file"):
         dataFile = pairValue[1]
      if (argName == "species"):
         species = utilsLite.sanitize(pairValue[1])
      if (argName == "source"):
         sourceSpecies = utilsLite.sanitize(pairValue[1])
      if (argName == "time"):
         timeIndex = utilsLite.safeInt(pairValue[1])
      if (argName == "stride"):
         stride = safeParams(pairValue[1], integer=True)
      if (argName == "dims"):
         dims = safeParams(pairValue[1], integer=True)
      if (argName == "isovalues"):
         isoValues = safeParams(pairValue[1], numeric=True)
      if (argName == "minvalid"):
         minValidValue = utilsLite.safeFloat(pairValue[1])
      if (argName == "discard"):
         discardMinVals = (pairValue[1].lower() != "no")	# default is yes
      if (argName == "workers"):
         workers = utilsLite.safeInt(pairValue[1])
      if (argName == "chunk"):
         chunkSize = utilsLite.safeInt(pairValue[1])
      if (argName == "output"):
         outputPattern = pairValue[1]
      if (argName == "color"):
         colorRGBA = safeParams(pairValue[1], numeric=True)
      if (argName == "transparency"):
         transparency = utilsLite.safeFloat(pairValue[1])

   # Display the command-line arguments just received.
   progress("field = {}".format(fieldName))
   progress("dims = {}".format(dims))
   progress("isoValues = {}".format(isoValues))
   progress("dataFile = {}".format(dataFile))
   progress("species = {}".format(species))
   progress("workers = {}".format(workers))
   progress("outputPattern = {}".format(outputPattern))

   badNumbers = (None in dims or None in isoValues or None in stride
      or None in colorRGBA or timeIndex is None or workers is None
      or chunkSize is None or transparency is None or minValidValue is None)
   if (badNumbers or chunkSize < 1 or len(dims) != 3 or len(stride) != 3
      or len(colorRGBA) != 4):
      progress("Error: malformed numeric argument.")
      return(1)

   try:
      fields = createFields(fieldName, dims, dataFile, species, sourceSpecies,
         timeIndex, stride)
   except (OSError, KeyError, ValueError) as error:
      progress("Error: cannot create the scalar field: {}".format(error))
      return(1)
   if (fields is None):
      return(1)
   inputField, sourceField = fields

   valueRange = inputField.valueRange()
   progress("Field has {} cells with values {} to {}."
      .format(inputField.cellCount(), valueRange[0], valueRange[1]))

   sink = utilsCollada.ColladaSink(outputPattern, colorRGBA, transparency)
   with MarchingCubes.MarchingCube(inputField, sourceField,
      discardMinVals=discardMinVals, minValidValue=minValidValue,
      workers=workers, chunkSize=chunkSize, sink=sink) as surface:

      for isoValue in isoValues:
         surface.setIsoValue(isoValue)
         surface()
         progress(surface.toString())

   progress("Wrote {} files.".format(len(sink.filesWritten)))

   return(0)	# no error



if (__name__ == "__main__"):
   # call the main
   progress("{}".format(__file__))
   progress("Start time: {} Local".format(datetime.datetime.now()))
   retValue = main()
   progress("End time: {} Local".format(datetime.datetime.now()))

   sys.exit(retValue)
