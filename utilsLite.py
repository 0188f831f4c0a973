#!/usr/bin/env python3

# utilsLite.py
# Python module of small helpers for reading command-line values.
#
# Author: Carl Drews, Atmospheric Chemistry Observations & Modeling
# Created: October 2026
# Copyright 2026 by the University Corporation for Atmospheric Research



import re



# Remove characters that do not belong in a parameter value.
# Allows letters, digits, . _ - + / : and the braces of file patterns.
def sanitize(rawValue):
   return(re.sub(r"[^A-Za-z0-9._\-+/:{}]", "", rawValue.strip()))



# return floating-point value, or None if it is not a number
def safeFloat(rawValue):
   try:
      return(float(sanitize(rawValue)))
   except ValueError:
      return(None)



# return integer value, or None if it is not an integer
def safeInt(rawValue):
   try:
      return(int(sanitize(rawValue)))
   except ValueError:
      return(None)
