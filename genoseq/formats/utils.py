# Data provider abstract classes and interfaces.
#
# This file is part of genoseq.
#
# This work is licensed under the Creative Commons Attribution-NonCommercial
# 4.0 International License. To view a copy of this license, visit
# http://creativecommons.org/licenses/by-nc/4.0/ or send a letter to Creative
# Commons, PO Box 1866, Mountain View, CA 94042, USA.

__author__ = "Marc-Andre Legault"
__copyright__ = ("Copyright 2014 Marc-Andre Legault and Louis-Philippe "
                 "Lemieux Perreault. All rights reserved.")
__license__ = "Attribution-NonCommercial 4.0 International (CC BY-NC 4.0)"

"""
Interfaces and abstract classes for the readers of indexed sequence files.
"""

class AbstractRawReader(object):
    """Abstract data structure giving random access to named sequences.

    Contig names are the literal names from the file: implementations
    should not try to resolve aliases (*e.g.* ``1`` for ``chr1``).

    Implementations must be safe to use from multiple threads.

    """
    def __init__(self):
        raise NotImplementedError()

    def fetch_range(self, name, start, end):
        """Get the bases between ``start`` and ``end``.

        Positions are 1-based and both ends are included. Invalid regions
        (unknown contig, positions outside of the contig) raise an error.

        """
        raise NotImplementedError()

    def fetch_whole(self, name):
        """Get all the bases of a contig."""
        raise NotImplementedError()

    def keys(self):
        """Get a list of the sequence IDs in the file."""
        raise NotImplementedError()

    def close(self):
        raise NotImplementedError()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
