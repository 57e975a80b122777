# Interface to a reference genome fasta file. This is useful to quickly
# extract sequences on any strand, whatever the contig naming convention.

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

__all__ = ["AccessorType", "AccessorConfig", "GenomeSequenceAccessor",
           "open_accessor"]


import os
import logging
import threading
from collections import namedtuple

import pyfaidx

from . import settings
from .exceptions import ConfigurationError, InvalidFastaFileError
from .formats.dictionary import read_sequence_dictionary
from .formats.fasta import IndexedFastaFile, FetchError
from .structures.contigs import build_contig_dictionary
from .structures.region import Strand
from .structures.sequences import SequenceInterval, reverse_complement


logger = logging.getLogger(__name__)


FAI_SUFFIX = ".fai"
DICT_SUFFIX = ".dict"


class AccessorType(object):
    """The available fetching strategies.

    ``SINGLE_QUERY`` reads every query from the file. ``CACHING_SINGLE_CONTIG``
    keeps the last requested contig in memory, which is a lot faster for
    sequential queries on the same contig, but much slower when queries
    alternate between contigs.

    """
    SINGLE_QUERY = "SINGLE_QUERY"
    CACHING_SINGLE_CONTIG = "CACHING_SINGLE_CONTIG"

    types = set([SINGLE_QUERY, CACHING_SINGLE_CONTIG])


class AccessorConfig(namedtuple("AccessorConfig", [
        "fasta_path", "fasta_fai_path", "fasta_dict_path", "accessor_type",
        "require_mt", "strict_complement"],
        defaults=(None, None, AccessorType.SINGLE_QUERY, True, True))):
    """Options to build a :py:class:`GenomeSequenceAccessor`.

    :param fasta_path: The path to the fasta file (required).
    :param fasta_fai_path: The fasta index (Default: ``<fasta_path>.fai``).
    :param fasta_dict_path: The sequence dictionary (Default:
                            ``<fasta_path>.dict``).
    :param accessor_type: One of :py:class:`AccessorType`.
    :param require_mt: Fail if there is no mitochondrial contig.
    :param strict_complement: Fail on non IUPAC bases when reverse
                              complementing, instead of using ``N``.

    """
    __slots__ = ()

    @classmethod
    def from_settings(cls, **kwargs):
        """Create a configuration using the values from
        :py:mod:`genoseq.settings` as defaults."""
        values = dict(
            fasta_path=settings.REFERENCE_PATH,
            accessor_type=settings.ACCESSOR_TYPE,
            require_mt=settings.REQUIRE_MT,
        )
        values.update(kwargs)
        return cls(**values)


_CachedContig = namedtuple("_CachedContig", ["name", "bases"])


class _DirectFetcher(object):
    def __init__(self, reader):
        self.reader = reader

    def fetch(self, name, begin, end):
        return self.reader.fetch_range(name, begin, end)


class _SingleContigCache(object):
    """Keeps the bases of the last requested contig in memory.

    Loading a contig and slicing it are done while holding a single lock, so
    concurrent cache misses are serialized.

    """
    def __init__(self, reader):
        self.reader = reader
        self._lock = threading.Lock()
        self._cached = None

    def fetch(self, name, begin, end):
        with self._lock:
            if self._cached is None or self._cached.name != name:
                logger.debug("Loading contig '{}' in memory".format(name))
                self._cached = _CachedContig(
                    name, self.reader.fetch_whole(name)
                )

            bases = self._cached.bases
            if begin < 1 or end < begin - 1 or end > len(bases):
                raise FetchError(
                    "Requested coordinates start={} end={} are invalid for "
                    "{} (length {:,d}).".format(begin, end, name, len(bases))
                )

            return bases[begin - 1:end]


class GenomeSequenceAccessor(object):
    """Access to the sequences of a reference genome.

    Use :py:func:`open_accessor` to create instances.

    The accessor owns the underlying fasta file. It should be closed after
    use, either explicitly or using a ``with`` statement: ::

        config = AccessorConfig("hg19.fa")
        with open_accessor(config) as accessor:
            accessor.fetch_sequence("1", 61, 70)

    Once built, instances can be shared between threads.

    """
    def __init__(self, reader, contig_dictionary, fetcher,
                 accessor_type=AccessorType.SINGLE_QUERY,
                 strict_complement=True):
        self.reader = reader
        self.accessor_type = accessor_type
        self.strict_complement = strict_complement
        self._contig_dictionary = contig_dictionary
        self._fetcher = fetcher

    def get_contig_dictionary(self):
        """Get the :py:class:`genoseq.structures.contigs.ContigDictionary`."""
        return self._contig_dictionary

    def fetch_sequence(self, chrom, start, end):
        """Get the nucleotide sequence at the given genomic locus.

        :param chrom: The contig, with or without the ``chr`` prefix.
        :type chrom: str

        :param start: The start position (1-based).
        :type start: int

        :param end: The end position (1-based).
        :type end: int

        :returns: The bases, on the forward strand. The case is the same as
                  in the fasta file.
        :rtype: str

        The ranges are inclusive, this means that (start, end) positions will
        both be included in the sequence. Invalid regions raise a
        :py:class:`pyfaidx.FetchError`.

        """
        name = self._contig_dictionary.to_disk_name(chrom)
        return self._fetcher.fetch(name, start, end)

    def fetch(self, interval):
        """Get the sequence of a genomic interval, on the interval's strand.

        :param interval: The interval.
        :type interval: :py:class:`genoseq.structures.region.GenomeInterval`

        :returns: The sequence interval, or ``None`` if the interval's contig
                  is not in the contig dictionary.
        :rtype: :py:class:`genoseq.structures.sequences.SequenceInterval`

        """
        name = self._contig_dictionary.contig_name(interval.contig_id)
        if name is None:
            return None

        if interval.strand not in Strand.values:
            raise ValueError("Unknown strand '{}'.".format(interval.strand))

        seq = self.fetch_sequence(name, interval.begin + 1, interval.end)
        if interval.strand == Strand.REV:
            seq = reverse_complement(seq, strict=self.strict_complement)

        return SequenceInterval(interval, seq)

    def close(self):
        self.reader.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def __repr__(self):
        return "<GenomeSequenceAccessor {} ({})>".format(
            self.reader.filename, self.accessor_type
        )


def _resolve_sidecar(fasta_path, path, suffix, description):
    if path is not None:
        if not os.path.isfile(path):
            raise ConfigurationError("The {} '{}' does not exist.".format(
                description, path
            ))
        return path

    expected = fasta_path + suffix
    if not os.path.isfile(expected):
        raise ConfigurationError(
            "Path to {} unset and did not find it at '{}'.".format(
                description, expected
            )
        )

    logger.debug("Found {} at '{}'".format(description, expected))
    return expected


def _check_index(reader, contig_dictionary):
    indexed = set(reader.keys())
    missing = [r.name for r in contig_dictionary if r.name not in indexed]
    if missing:
        logger.warning(
            "{:,d} contig(s) from the sequence dictionary are not in the "
            "fasta index (e.g. '{}').".format(len(missing), missing[0])
        )


def open_accessor(config):
    """Build a :py:class:`GenomeSequenceAccessor`.

    :param config: The options.
    :type config: :py:class:`AccessorConfig`

    :returns: The accessor, ready to use.
    :rtype: :py:class:`GenomeSequenceAccessor`

    Everything is validated when the accessor is built: missing files,
    invalid sequence dictionaries or missing mitochondrial contig (if
    ``require_mt``) raise a :py:class:`genoseq.exceptions.ConfigurationError`.

    """
    if not config.fasta_path:
        raise ConfigurationError("A fasta file is required.")

    fasta_path = str(config.fasta_path)
    if not os.path.isfile(fasta_path):
        raise ConfigurationError("'{}' does not exist.".format(fasta_path))

    fai_path = _resolve_sidecar(
        fasta_path,
        None if config.fasta_fai_path is None else str(config.fasta_fai_path),
        FAI_SUFFIX, "fasta index"
    )
    dict_path = _resolve_sidecar(
        fasta_path,
        None if config.fasta_dict_path is None else str(
            config.fasta_dict_path
        ),
        DICT_SUFFIX, "sequence dictionary"
    )

    if config.accessor_type not in AccessorType.types:
        raise ConfigurationError(
            "Invalid accessor type '{}'. Allowed types are: {}".format(
                config.accessor_type, sorted(AccessorType.types)
            )
        )

    try:
        reader = IndexedFastaFile(fasta_path, fai_path)
    except pyfaidx.FastaIndexingError as e:
        raise InvalidFastaFileError("Could not read the fasta index '{}': "
                                    "{}".format(fai_path, e))

    try:
        records = read_sequence_dictionary(dict_path)
        contig_dictionary = build_contig_dictionary(
            records, require_mt=config.require_mt
        )
        _check_index(reader, contig_dictionary)
    except Exception:
        reader.close()
        raise

    if config.accessor_type == AccessorType.CACHING_SINGLE_CONTIG:
        fetcher = _SingleContigCache(reader)
    else:
        fetcher = _DirectFetcher(reader)

    return GenomeSequenceAccessor(
        reader, contig_dictionary, fetcher,
        accessor_type=config.accessor_type,
        strict_complement=config.strict_complement,
    )
