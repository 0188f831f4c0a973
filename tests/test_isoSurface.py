import os
import shutil
import tempfile
import unittest

import isoSurface


class TestSafeParams(unittest.TestCase):

   def test_params(self):
      self.assertEqual(isoSurface.safeParams("1.5,abc"), ["1.5", "abc"])
      self.assertEqual(isoSurface.safeParams("1.5,-2", numeric=True), [1.5, -2.0])
      self.assertEqual(isoSurface.safeParams("3,4,x", integer=True), [3, 4, None])


class TestMain(unittest.TestCase):

   def setUp(self):
      self.tempDir = tempfile.mkdtemp()
      self.pattern = os.path.join(self.tempDir, "iso-{isoValue}.dae")

   def tearDown(self):
      shutil.rmtree(self.tempDir)

   def test_sphere(self):
      retValue = isoSurface.main(["isoSurface.py", "field=sphere", "dims=12,12,12",
         "isovalues=-0.1,0.0,2.0", "workers=2", "chunk=100",
         "output=" + self.pattern])
      self.assertEqual(retValue, 0)
      # the last isovalue lies outside the field
      self.assertEqual(sorted(os.listdir(self.tempDir)),
         ["iso--0.1.dae", "iso-0.0.dae"])

   def test_tangle(self):
      retValue = isoSurface.main(["isoSurface.py", "field=tangle", "dims=10,10,10",
         "output=" + self.pattern])
      self.assertEqual(retValue, 0)
      self.assertEqual(os.listdir(self.tempDir), ["iso-0.0.dae"])

   def test_bad_arguments(self):
      for badArg in ("dims=10,10", "dims=1,10,10", "isovalues=abc",
         "chunk=0", "field=cube", "field=netcdf", "minvalid=abc"):
         retValue = isoSurface.main(["isoSurface.py", badArg,
            "output=" + self.pattern])
         self.assertEqual(retValue, 1, badArg)

   def test_missing_netcdf_file(self):
      retValue = isoSurface.main(["isoSurface.py", "field=netcdf", "species=O3",
         "file=" + os.path.join(self.tempDir, "absent.nc")])
      self.assertEqual(retValue, 1)
