# Contig naming and the dictionary of contigs of a reference genome.
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

__all__ = ["ContigRecord", "ContigDictionary", "build_contig_dictionary",
           "with_chr_prefix", "without_chr_prefix"]


import re
import logging
import collections
from types import MappingProxyType

from ..exceptions import InvalidFastaFileError, MissingContigError


logger = logging.getLogger(__name__)


CHR_PREFIX = "chr"

PREFIXED = "PREFIXED"
BARE = "BARE"

MT_REGEX = re.compile(r"^(chr)?MT?$")


ContigRecord = collections.namedtuple("ContigRecord", ["name", "length"])


def with_chr_prefix(name):
    if name.startswith(CHR_PREFIX):
        return name
    return CHR_PREFIX + name


def without_chr_prefix(name):
    if name.startswith(CHR_PREFIX):
        return name[len(CHR_PREFIX):]
    return name


class ContigDictionary(object):
    """Read-only mapping between contig names, identifiers and lengths.

    Contig identifiers are the 0-based positions of the contigs in the
    sequence dictionary. Every contig can be looked up using both its
    ``chr`` prefixed and bare names (*e.g.* ``chr1`` and ``1``), but the
    canonical name (``id_to_name``) always follows the convention of the
    reference.

    Instances should be created using :py:func:`build_contig_dictionary`.

    """
    def __init__(self, id_to_name, name_to_id, id_to_length, convention):
        self._id_to_name = MappingProxyType(dict(id_to_name))
        self._name_to_id = MappingProxyType(dict(name_to_id))
        self._id_to_length = MappingProxyType(dict(id_to_length))
        self._convention = convention

    @property
    def id_to_name(self):
        return self._id_to_name

    @property
    def name_to_id(self):
        return self._name_to_id

    @property
    def id_to_length(self):
        return self._id_to_length

    @property
    def convention(self):
        return self._convention

    @property
    def uses_prefix(self):
        return self._convention == PREFIXED

    def contig_id(self, name):
        """Get the identifier for a contig name or alias (None if unknown)."""
        return self._name_to_id.get(str(name))

    def contig_name(self, contig_id):
        """Get the canonical name of a contig (None if unknown)."""
        try:
            return self._id_to_name.get(contig_id)
        except TypeError:
            # Unhashable identifiers can't be in the dictionary.
            return None

    def contig_length(self, contig_id):
        try:
            return self._id_to_length.get(contig_id)
        except TypeError:
            return None

    def to_disk_name(self, name):
        """Convert any alias to the contig name used in the fasta file.

        Unknown names are converted to the naming convention of the
        reference, so that the raw reader can report the error.

        """
        name = str(name)
        contig_id = self._name_to_id.get(name)
        if contig_id is not None:
            return self._id_to_name[contig_id]

        if self.uses_prefix:
            return with_chr_prefix(name)
        return without_chr_prefix(name)

    def aliases(self, contig_id):
        """Get all the names that refer to a given contig."""
        return sorted(
            name for name, i in self._name_to_id.items() if i == contig_id
        )

    def to_frame(self):
        """Summarize the contigs as a pandas DataFrame.

        The DataFrame is indexed by contig identifier and has the ``name``,
        ``length`` and ``aliases`` columns.

        """
        import pandas as pd

        ids = sorted(self._id_to_name)
        df = pd.DataFrame(
            {
                "name": [self._id_to_name[i] for i in ids],
                "length": [self._id_to_length[i] for i in ids],
                "aliases": [",".join(self.aliases(i)) for i in ids],
            },
            index=pd.Index(ids, name="contig_id"),
            columns=["name", "length", "aliases"],
        )
        return df

    def __contains__(self, name):
        return str(name) in self._name_to_id

    def __len__(self):
        return len(self._id_to_name)

    def __iter__(self):
        for i in sorted(self._id_to_name):
            yield ContigRecord(self._id_to_name[i], self._id_to_length[i])

    def __repr__(self):
        return "<ContigDictionary: {} contigs ({})>".format(
            len(self), self._convention
        )


def _detect_convention(records):
    prefixed = [r.name.startswith(CHR_PREFIX) for r in records]
    if all(prefixed):
        return PREFIXED
    elif not any(prefixed):
        return BARE

    mixed = [r.name for r, p in zip(records, prefixed) if p][:3]
    raise InvalidFastaFileError(
        "Contig names mix prefixed and bare conventions (e.g. {}). Fix the "
        "sequence dictionary.".format(", ".join(mixed))
    )


def build_contig_dictionary(records, require_mt=True):
    """Build the contig dictionary from sequence dictionary records.

    :param records: The contigs, in the order of the sequence dictionary.
    :type records: list of :py:class:`ContigRecord`

    :param require_mt: Raise a
                       :py:class:`genoseq.exceptions.MissingContigError` if
                       there is no mitochondrial contig (Default: True).
    :type require_mt: bool

    :returns: The contig dictionary.
    :rtype: :py:class:`ContigDictionary`

    The names must either all start with ``chr`` or none of them; a mix of
    both conventions raises an
    :py:class:`genoseq.exceptions.InvalidFastaFileError`.

    The mitochondrial contig is available as ``M``, ``chrM``, ``MT`` and
    ``chrMT``, whatever the name used in the reference.

    """
    records = [ContigRecord(str(name), int(length))
               for name, length in records]
    if not records:
        raise InvalidFastaFileError("The sequence dictionary has no contigs.")

    convention = _detect_convention(records)

    id_to_name = {}
    name_to_id = {}
    id_to_length = {}
    seen = set()
    for i, record in enumerate(records):
        if record.name in seen:
            raise InvalidFastaFileError(
                "Duplicate contig '{}' in the sequence dictionary.".format(
                    record.name
                )
            )
        name_to_id[record.name] = i
        id_to_name[i] = record.name
        id_to_length[i] = record.length
        seen.add(record.name)

    # Aliases never shadow a real contig name.
    for i, name in id_to_name.items():
        for alias in (with_chr_prefix(name), without_chr_prefix(name)):
            if alias:
                name_to_id.setdefault(alias, i)

    # Mitochondrial contig.
    prefix = CHR_PREFIX if convention == PREFIXED else ""
    mt_id = name_to_id.get(prefix + "MT")
    if mt_id is not None:
        # Real contigs named M or chrM keep their own names.
        name_to_id.setdefault("M", mt_id)
        name_to_id.setdefault("chrM", mt_id)
    else:
        mt_id = name_to_id.get(prefix + "M")
        if mt_id is not None:
            name_to_id.setdefault("MT", mt_id)
            name_to_id.setdefault("chrMT", mt_id)

    if mt_id is None:
        if require_mt:
            raise MissingContigError(
                "Mitochondrial contig not found (looked for '{0}MT' and "
                "'{0}M').".format(prefix)
            )
        logger.warning("No mitochondrial contig in the sequence dictionary.")

    elif not MT_REGEX.match(id_to_name[mt_id]):
        raise InvalidFastaFileError(
            "Invalid mitochondrial contig name '{}'.".format(
                id_to_name[mt_id]
            )
        )

    logger.debug("Built a contig dictionary with {:,d} contigs ({})".format(
        len(id_to_name), convention
    ))

    return ContigDictionary(id_to_name, name_to_id, id_to_length, convention)
