
# Structure to handle genomic intervals.
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

__all__ = ["Strand", "GenomeInterval"]


class Strand(object):
    """Orientation of an interval relative to the reference."""
    FWD = "+"
    REV = "-"

    values = (FWD, REV)

    @staticmethod
    def opposite(strand):
        if strand == Strand.FWD:
            return Strand.REV
        elif strand == Strand.REV:
            return Strand.FWD
        raise ValueError("Unknown strand '{}'.".format(strand))


class GenomeInterval(object):
    """An interval on a contig of the reference genome.

    :param contig_id: The numerical identifier of the contig (see
                      :py:class:`genoseq.structures.contigs.ContigDictionary`).
    :type contig_id: int

    :param begin: The 0-based start position.
    :type begin: int

    :param end: The end position (exclusive).
    :type end: int

    :param strand: Either ``Strand.FWD`` or ``Strand.REV``.
    :type strand: str

    Coordinates are always expressed on the forward strand. The strand only
    gives the orientation in which the sequence should be read, so
    ``interval.with_strand(Strand.REV)`` covers the exact same bases.

    """

    __slots__ = ("_contig_id", "_begin", "_end", "_strand")

    def __init__(self, contig_id, begin, end, strand=Strand.FWD):
        begin = int(begin)
        end = int(end)
        if begin < 0:
            raise ValueError("Interval begin must be positive (got {}).".format(
                begin
            ))
        if end < begin:
            raise ValueError("Interval end ({}) is before its begin "
                             "({}).".format(end, begin))
        if strand not in Strand.values:
            raise ValueError("Unknown strand '{}'.".format(strand))

        self._contig_id = contig_id
        self._begin = begin
        self._end = end
        self._strand = strand

    @property
    def contig_id(self):
        return self._contig_id

    @property
    def begin(self):
        return self._begin

    @property
    def end(self):
        return self._end

    @property
    def strand(self):
        return self._strand

    def length(self):
        return self._end - self._begin

    def with_strand(self, strand):
        """Return the same interval on the given strand."""
        if strand == self._strand:
            return self
        return GenomeInterval(self._contig_id, self._begin, self._end, strand)

    def contains(self, interval):
        """Test if the interval is fully contained in this one.

        The strands are not compared.

        """
        return (interval.contig_id == self._contig_id and
                self._begin <= interval.begin <= interval.end <= self._end)

    def __contains__(self, interval):
        if not (hasattr(interval, "contig_id") and
                hasattr(interval, "begin") and hasattr(interval, "end")):
            raise TypeError("Object needs (contig_id, begin, end) attributes "
                            "to test if it is in a GenomeInterval.")
        return self.contains(interval)

    def __len__(self):
        return self.length()

    def _key(self):
        return (self._contig_id, self._begin, self._end, self._strand)

    def __eq__(self, other):
        if not isinstance(other, GenomeInterval):
            return NotImplemented
        return self._key() == other._key()

    def __ne__(self, other):
        eq = self.__eq__(other)
        if eq is NotImplemented:
            return eq
        return not eq

    def __hash__(self):
        return hash(self._key())

    def __repr__(self):
        return "<GenomeInterval {}:{}-{} ({})>".format(
            self._contig_id, self._begin, self._end, self._strand
        )
