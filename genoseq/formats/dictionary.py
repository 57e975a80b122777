# Sequence dictionary (.dict) parser.
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

__all__ = ["read_sequence_dictionary"]


import logging

from ..exceptions import InvalidFastaFileError
from ..structures.contigs import ContigRecord


logger = logging.getLogger(__name__)


SQ_FIELD_START = "@SQ"
SEQUENCE_NAME_TAG = "SN"
SEQUENCE_LENGTH_TAG = "LN"


def _parse_sq_line(line, line_no, filename):
    tags = {}
    for field in line.rstrip("\r\n").split("\t")[1:]:
        if ":" not in field:
            continue
        tag, value = field.split(":", 1)
        tags[tag] = value

    try:
        name = tags[SEQUENCE_NAME_TAG]
        length = int(tags[SEQUENCE_LENGTH_TAG])
    except KeyError as e:
        raise InvalidFastaFileError(
            "Missing '{}' tag on line {} of '{}'.".format(
                e.args[0], line_no, filename
            )
        )
    except ValueError:
        raise InvalidFastaFileError(
            "Invalid contig length '{}' on line {} of '{}'.".format(
                tags[SEQUENCE_LENGTH_TAG], line_no, filename
            )
        )

    if length < 0:
        raise InvalidFastaFileError(
            "Negative contig length on line {} of '{}'.".format(
                line_no, filename
            )
        )

    return ContigRecord(name, length)


def read_sequence_dictionary(filename):
    """Parse a sequence dictionary (SAM header) file.

    :param filename: The path to the ``.dict`` file (*e.g.* created using
                     ``samtools dict`` or Picard).
    :type filename: str

    :returns: The contigs, in the order of the file.
    :rtype: list of :py:class:`genoseq.structures.contigs.ContigRecord`

    Only the ``@SQ`` lines are considered, other header lines are ignored.

    """
    records = []
    with open(filename, "r") as f:
        for line_no, line in enumerate(f, 1):
            if not line.startswith(SQ_FIELD_START):
                continue
            records.append(_parse_sq_line(line, line_no, filename))

    if not records:
        raise InvalidFastaFileError(
            "No '@SQ' lines in the sequence dictionary '{}'.".format(filename)
        )

    logger.debug("Read {:,d} contigs from '{}'".format(len(records), filename))
    return records
