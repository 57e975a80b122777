# Default settings.

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


import os
import configparser


REFERENCE_PATH = ""
ACCESSOR_TYPE = "SINGLE_QUERY"
REQUIRE_MT = True
GENOSEQ_ROOT = ""
DEBUG = False

SECTION = "genoseqConfiguration"


def get_config():
    """Return a path to the genoseq configuration file.

    The file is not required to exist, default values are used for
    everything that is not set.

    """
    return os.path.join(GENOSEQ_ROOT, "genoseqrc.ini")


def _init_reference(config):
    global REFERENCE_PATH
    global ACCESSOR_TYPE
    global REQUIRE_MT

    if config.has_option(SECTION, "REFERENCE_PATH"):
        REFERENCE_PATH = config.get(SECTION, "REFERENCE_PATH")

    if config.has_option(SECTION, "ACCESSOR_TYPE"):
        ACCESSOR_TYPE = config.get(SECTION, "ACCESSOR_TYPE").strip().upper()

    REQUIRE_MT = config.getboolean(SECTION, "REQUIRE_MT", fallback=True)

    # The REFERENCE_PATH can also be set as an environment variable.
    if REFERENCE_PATH == "" and os.environ.get("REFERENCE_PATH"):
        REFERENCE_PATH = os.environ.get("REFERENCE_PATH")


def _init_settings():
    global DEBUG
    global GENOSEQ_ROOT
    try:
        GENOSEQ_ROOT = os.path.expanduser(os.environ["GENOSEQ_ROOT"])
    except KeyError:
        GENOSEQ_ROOT = None

    if GENOSEQ_ROOT is None:
        GENOSEQ_ROOT = os.path.abspath(os.path.join(
            os.path.expanduser("~"),
            ".genoseq"
        ))

    # Read the configuration file (silently ignored if missing).
    config = configparser.RawConfigParser()
    config.read(get_config())

    # Load settings related to the reference genome.
    _init_reference(config)

    DEBUG = config.getboolean(SECTION, "DEBUG", fallback=False)


_init_settings()
