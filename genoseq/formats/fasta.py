# Indexed fasta file reader.
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

__all__ = ["IndexedFastaFile", "FetchError"]


import threading

import pyfaidx
from pyfaidx import FetchError

from ..exceptions import ConfigurationError
from .utils import AbstractRawReader


class IndexedFastaFile(AbstractRawReader):
    """Random access to the contigs of a ``samtools faidx`` indexed fasta.

    :param filename: The path to the fasta file.
    :type filename: str

    :param index_filename: The path to the fasta index (Default: the
                           ``.fai`` file next to the fasta file).
    :type index_filename: str

    The index is never created or rebuilt: it has to exist. Bases are
    returned as they are in the file (the case is not changed).

    """
    def __init__(self, filename, index_filename=None):
        if filename.endswith(".gz"):
            raise ConfigurationError("Support for compressed fasta files is "
                                     "not yet implemented.")

        self.filename = filename
        self._lock = threading.Lock()
        self.f = pyfaidx.Fasta(
            filename,
            indexname=index_filename,
            as_raw=True,
            strict_bounds=True,
            rebuild=False,
            build_index=False,
        )

    def _get_length(self, name):
        try:
            return len(self.f[name])
        except KeyError:
            raise FetchError("Requested contig '{}' does not exist in "
                             "'{}'.".format(name, self.filename))

    def fetch_range(self, name, start, end):
        length = self._get_length(name)

        if start < 1 or end < start - 1:
            raise FetchError("Requested coordinates start={} end={} are "
                             "invalid.".format(start, end))

        if end > length:
            raise FetchError("Requested end coordinate {:,d} outside of {} "
                             "(length {:,d}).".format(end, name, length))

        if end == start - 1:
            return ""

        with self._lock:
            seq = self.f.get_seq(name, start, end)

        return str(seq)

    def fetch_whole(self, name):
        length = self._get_length(name)
        if length == 0:
            return ""

        with self._lock:
            seq = self.f.get_seq(name, 1, length)

        return str(seq)

    def keys(self):
        return list(self.f.keys())

    def close(self):
        self.f.close()
