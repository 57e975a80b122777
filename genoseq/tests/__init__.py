# This file is part of genoseq.
#
# This work is licensed under the Creative Commons Attribution-NonCommercial
# 4.0 International License. To view a copy of this license, visit
# http://creativecommons.org/licenses/by-nc/4.0/ or send a letter to Creative
# Commons, PO Box 1866, Mountain View, CA 94042, USA.


import unittest

from . import test_structures, test_formats, test_reference


test_suite = unittest.TestSuite()
for module in (test_structures, test_formats, test_reference):
    test_suite.addTests(unittest.defaultTestLoader.loadTestsFromModule(module))
