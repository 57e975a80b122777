#!/usr/bin/env python
# -*- coding: utf-8 -*-

# How to build source distribution
# python setup.py sdist --format bztar
# python setup.py sdist --format gztar
# python setup.py sdist --format zip

import os

from setuptools import setup, find_packages


MAJOR = 0
MINOR = 1
MICRO = 0
VERSION = "{}.{}.{}".format(MAJOR, MINOR, MICRO)


def write_version_file(fn=None):
    if fn is None:
        fn = os.path.join(
            os.path.dirname(os.path.abspath(__file__)),
            os.path.join("genoseq", "version.py")
        )
    content = ("# THIS FILE WAS GENERATED FROM GENOSEQ SETUP.PY\n"
               "genoseq_version = \"{version}\"\n")

    with open(fn, "w") as a:
        a.write(content.format(version=VERSION))


def setup_package():
    # Saving the version into a file
    write_version_file()

    setup(
        name="genoseq",
        version=VERSION,
        description=("Random access to the sequences of indexed reference "
                     "genomes, on both strands."),
        long_description=("This package provides fast access to arbitrary "
                          "regions of a reference genome stored as an "
                          "indexed fasta file. Contig names are normalized "
                          "('chr1' or '1', 'MT' or 'M'), sequences on the "
                          "reverse strand are reverse complemented (IUPAC "
                          "codes are supported) and a caching accessor "
                          "speeds up sequential queries on a single contig."),
        author="Marc-André Legault",
        author_email="legaultmarc@gmail.com",
        license="CC BY-NC 4.0",
        packages=find_packages(exclude=["docs", "demos", "tests"]),
        classifiers=["Development Status :: 4 - Beta",
                     "Intended Audience :: Developers",
                     "Intended Audience :: Science/Research",
                     "Operating System :: Unix",
                     "Operating System :: MacOS :: MacOS X",
                     "Operating System :: POSIX :: Linux",
                     "Programming Language :: Python",
                     "Programming Language :: Python :: 3",
                     "Topic :: Scientific/Engineering :: Bio-Informatics"],
        keywords="bioinformatics genomics reference fasta sequence",
        python_requires=">=3.7",
        install_requires=["pandas >= 0.15", "pyfaidx >= 0.7.1"],
    )

    return


if __name__ == "__main__":
    setup_package()
