# Exceptions raised by genoseq.
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

__all__ = ["GenoseqError", "ConfigurationError", "InvalidFastaFileError",
           "MissingContigError", "ValidationError",
           "InvalidSequenceIntervalError", "InvalidNucleotideError"]


class GenoseqError(Exception):
    """Base class for the errors raised by this package."""
    def __init__(self, value):
        super(GenoseqError, self).__init__(value)
        self.value = value

    def __str__(self):
        return str(self.value)


class ConfigurationError(GenoseqError):
    """Exception raised when an accessor can't be built.

    This covers missing files, unresolvable sidecar index or dictionary
    files and invalid accessor options.

    """
    pass


class InvalidFastaFileError(ConfigurationError):
    """Exception representing an inconsistent reference genome.

    Typically, the sequence dictionary mixes ``chr`` prefixed and bare contig
    names, or it could not be parsed at all.

    """
    pass


class MissingContigError(ConfigurationError):
    """A contig that is required (e.g. the mitochondrial genome) is absent."""
    pass


class ValidationError(GenoseqError, ValueError):
    """Invalid value for a sequence structure."""
    pass


class InvalidSequenceIntervalError(ValidationError):
    pass


class InvalidNucleotideError(ValidationError):
    """A character that is not an IUPAC nucleotide code was found."""
    def __init__(self, nucleotide, position, sequence=None):
        self.nucleotide = nucleotide
        self.position = position
        message = "Illegal nucleotide '{}' at position {}".format(
            nucleotide, position
        )
        if sequence is not None and len(sequence) <= 80:
            message += " in sequence '{}'".format(sequence)
        super(InvalidNucleotideError, self).__init__(message)
