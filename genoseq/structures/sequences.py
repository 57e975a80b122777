# Structures to handle nucleotide sequences fetched from the reference.
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

__all__ = ["SequenceInterval", "reverse_complement",
           "is_valid_nucleotide_sequence"]

import re

from ..exceptions import InvalidNucleotideError, InvalidSequenceIntervalError
from .region import Strand


# Upper case IUPAC codes. U is complemented to A, but A is always
# complemented to T.
REVERSE_COMPLEMENT_DNA = dict(
    A="T", C="G", G="C", T="A", U="A", M="K", R="Y", W="W", S="S", Y="R",
    K="M", V="B", H="D", D="H", B="V", N="N",
)


def _build_translation_table():
    before, after = zip(*REVERSE_COMPLEMENT_DNA.items())
    before = "".join(before)
    after = "".join(after)
    return str.maketrans(before + before.lower(), after + after.lower())


_COMPLEMENT_TABLE = _build_translation_table()

_INVALID_NUCLEOTIDE = re.compile("[^{}]".format(
    "".join(REVERSE_COMPLEMENT_DNA.keys()) +
    "".join(REVERSE_COMPLEMENT_DNA.keys()).lower()
))


def is_valid_nucleotide_sequence(seq):
    """Check that every character of the sequence is an IUPAC code."""
    return _INVALID_NUCLEOTIDE.search(seq) is None


def reverse_complement(seq, strict=True):
    """Reverse complement a nucleotide sequence (compatible with IUPAC codes).

    :param seq: The nucleotide sequence. Lower case characters stay lower
                case.
    :type seq: str

    :param strict: If ``True`` (default), an unknown character raises an
                   :py:class:`genoseq.exceptions.InvalidNucleotideError`.
                   Otherwise, unknown characters are replaced by ``N``.
    :type strict: bool

    :returns: The reverse complement, which has the same length as ``seq``.
    :rtype: str

    """
    match = _INVALID_NUCLEOTIDE.search(seq)
    if match is not None:
        if strict:
            raise InvalidNucleotideError(match.group(), match.start(), seq)
        seq = _INVALID_NUCLEOTIDE.sub("N", seq)

    return seq.translate(_COMPLEMENT_TABLE)[::-1]


class SequenceInterval(object):
    """A nucleotide sequence bound to the genomic interval it comes from.

    :param interval: The interval.
    :type interval: :py:class:`genoseq.structures.region.GenomeInterval`

    :param sequence: The bases, read in the orientation of the interval's
                     strand.
    :type sequence: str

    The length of the sequence has to match the length of the interval.
    Instances are immutable, two sequence intervals are equal if both their
    interval and their sequence are equal.

    """

    __slots__ = ("_interval", "_sequence")

    def __init__(self, interval, sequence):
        if interval is None:
            raise InvalidSequenceIntervalError("Interval cannot be None.")
        if sequence is None:
            raise InvalidSequenceIntervalError("Sequence cannot be None.")

        if interval.length() != len(sequence):
            raise InvalidSequenceIntervalError(
                "Lengths do not match: interval {} != sequence {}".format(
                    interval.length(), len(sequence)
                )
            )

        self._interval = interval
        self._sequence = sequence

    @property
    def interval(self):
        return self._interval

    @property
    def sequence(self):
        return self._sequence

    def __len__(self):
        return len(self._sequence)

    def __eq__(self, other):
        if not isinstance(other, SequenceInterval):
            return NotImplemented
        return (self._interval == other._interval and
                self._sequence == other._sequence)

    def __ne__(self, other):
        eq = self.__eq__(other)
        if eq is NotImplemented:
            return eq
        return not eq

    def __hash__(self):
        return hash((self._interval, self._sequence))

    def __repr__(self):
        seq = self._sequence
        if len(seq) > 20:
            seq = seq[:17] + "..."
        return "<SequenceInterval {!r} '{}'>".format(self._interval, seq)

    def sub_extract(self, interval, strict=True):
        """Get the sequence of an interval contained in this one.

        :param interval: The query interval.
        :type interval: :py:class:`genoseq.structures.region.GenomeInterval`

        :returns: The sequence, read on the strand of the query, or ``None``
                  if the query is not fully contained in this interval.
        :rtype: str

        Strands do not have to match: if they differ, the reverse complement
        is returned.

        """
        if not self._interval.contains(interval):
            return None

        if self._interval.strand == Strand.FWD:
            start = interval.begin - self._interval.begin
        else:
            # The stored sequence is reversed relative to the coordinates.
            start = self._interval.end - interval.end

        seq = self._sequence[start:start + interval.length()]

        if interval.strand == self._interval.strand:
            return seq
        return reverse_complement(seq, strict=strict)
