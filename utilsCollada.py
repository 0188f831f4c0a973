#!/usr/bin/env python3

# utilsCollada.py
# Python module to provide Collada utilities with module PyCollada.
#
# Author: Carl Drews, Atmospheric Chemistry Observations & Modeling
# Created: April 2021
# Copyright 2021 by the University Corporation for Atmospheric Research



import sys
import collada
import numpy



VERBOSE = True

# Display progress message on the console.
# endString = set this to '' for no return
def progress(message, endString='\n'):
   if (VERBOSE):   # disable here in production
      print(message, end=endString)
      sys.stdout.flush()



# Write DAE file containing triangles.
# No texture, just a color and opacity.
# vertices = array [N, 4] or [N, 3] of triangle vertex positions,
#	three consecutive vertices per triangle
# normals = array [N, 3] of normal vectors
# colorRBGA = array of normalized rgba values[0.0-1.0]
# transparency = float 0.0-1.0, from 100% opaque to entirely clear
# filename = path and name.dae of file
def writeDAEfile(vertices, normals, colorRGBA, transparency, filename):
   numTriangles = len(vertices) // 3
   progress("Writing DAE Collada file {} with {} triangles."
      .format(filename, numTriangles))

   # set up the triangular mesh
   mesh = collada.Collada()

   # set up the asset section
   axis = collada.asset.UP_AXIS.Z_UP
   myContributor = collada.asset.Contributor(author="Carl Drews")
   assetSection = collada.asset.Asset(
      title="Isosurface with color and opacity.",
      contributors=[myContributor],
      upaxis=axis)
   mesh.assetInfo = assetSection

   # get positions and normal vectors of the triangle vertices
   # There are 3 vertices per triangle * 3 dimensions per vertex.
   mesh1Position = numpy.asarray(vertices, dtype=numpy.float64)[:, 0:3].reshape(-1)
   mesh1Normal = numpy.asarray(normals, dtype=numpy.float64).reshape(-1)

   # convert positions and normals into sources
   mesh1Position_src = collada.source.FloatSource("mesh1-geometry-position",
      mesh1Position, ('X', 'Y', 'Z'))
   mesh1Normal_src = collada.source.FloatSource("mesh1-geometry-normal",
      mesh1Normal, ('X', 'Y', 'Z'))

   # set up the geometry
   geom = collada.geometry.Geometry(mesh, "mesh1-geometry", "mesh1-geometry",
      [mesh1Position_src, mesh1Normal_src])

   # create input list of vertex positions and their normals
   input_list = collada.source.InputList()
   input_list.addInput(0, 'VERTEX', "#mesh1-geometry-position")
   input_list.addInput(0, 'NORMAL', "#mesh1-geometry-normal")

   # vertices are not shared, so the indexes just count up
   indexes1 = numpy.arange(numTriangles * 3)

   # collect triangles into the geometry
   triSet1 = geom.createTriangleSet(indexes1, input_list, "material_0_1")
   geom.primitives.append(triSet1)
   mesh.geometries.append(geom)

   # set up the surface material
   effect1 = (collada.material.Effect("material_0_1-effect",
      [], "phong",
      emission=(0.0, 0.0, 0.0, 1),
      ambient=(0.05, 0.05, 0.05, 1),
      diffuse=(colorRGBA[0], colorRGBA[1], colorRGBA[2], colorRGBA[3]),
      specular=(0.0, 0.0, 0.0, 1.0),
      shininess=16.0,
      reflective=(0.0, 0.0, 0.0, 0.0),
      transparent=None,
      transparency=transparency,
      double_sided=True))

   material1 = collada.material.Material("material_0_1ID", "material_0_1", effect1)

   mesh.effects.append(effect1)
   mesh.materials.append(material1)

   # create material and geometry node
   matNode1 = collada.scene.MaterialNode("material_0_1", material1, inputs=[])
   geomNode = collada.scene.GeometryNode(geom, [matNode1])

   # go ahead - make a scene
   node = collada.scene.Node("Model", children=[geomNode])
   myScene = collada.scene.Scene("Isosurface_Scene", [node])
   mesh.scenes.append(myScene)
   mesh.scene = myScene

   # write the Collada structure to DAE file
   mesh.write(filename)

   return



# Receives each finished isosurface and writes it to a DAE file.
# filePattern = file name with {isoValue} placeholder, such as "iso-{isoValue}.dae"
# colorRGBA = surface color, normalized [r, g, b, a]
# transparency = 0.0 opaque to 1.0 entirely clear
class ColladaSink:

   def __init__(self, filePattern, colorRGBA=(1.0, 0.5, 0.0, 1.0),
      transparency=0.0):
      self.filePattern = filePattern
      self.colorRGBA = colorRGBA
      self.transparency = transparency
      self.filesWritten = []
      return

   # surface = MarchingCube that has just been run
   def receiveSurface(self, surface):
      if (surface.numTotalVertices == 0):
         progress("No triangles at isoValue {}; nothing to write."
            .format(surface.getIsoValue()))
         return

      filename = self.filePattern.format(isoValue=surface.getIsoValue())
      writeDAEfile(surface.getVertices(), surface.getNormals(),
         self.colorRGBA, self.transparency, filename)
      self.filesWritten.append(filename)

      return
