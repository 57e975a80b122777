# This file is part of genoseq.
#
# This work is licensed under the Creative Commons Attribution-NonCommercial
# 4.0 International License. To view a copy of this license, visit
# http://creativecommons.org/licenses/by-nc/4.0/ or send a letter to Creative
# Commons, PO Box 1866, Mountain View, CA 94042, USA.


__author__ = "Louis-Philippe Lemieux Perreault"
__copyright__ = ("Copyright 2014 Marc-Andre Legault and Louis-Philippe "
                 "Lemieux Perreault. All rights reserved.")
__license__ = "Attribution-NonCommercial 4.0 International (CC BY-NC 4.0)"


import os
import configparser
import shutil
import unittest
import tempfile
from collections import OrderedDict
from concurrent.futures import ThreadPoolExecutor
from unittest import mock

from .. import settings
from ..exceptions import (ConfigurationError, InvalidFastaFileError,
                          MissingContigError)
from ..formats.fasta import IndexedFastaFile, FetchError
from ..reference import (AccessorConfig, AccessorType, GenomeSequenceAccessor,
                         open_accessor)
from ..structures.region import GenomeInterval, Strand
from ..structures.sequences import reverse_complement
from . import fasta_utils


class _ReferenceTestCase(unittest.TestCase):
    accessor_type = AccessorType.SINGLE_QUERY

    @classmethod
    def setUpClass(cls):
        cls.tmp_dir = tempfile.mkdtemp(prefix="genoseq_test_")
        cls.contigs = fasta_utils.small_hg19()
        cls.fasta = fasta_utils.write_reference(cls.tmp_dir, cls.contigs)

    @classmethod
    def tearDownClass(cls):
        shutil.rmtree(cls.tmp_dir)

    def setUp(self):
        self.accessor = open_accessor(
            AccessorConfig(self.fasta, accessor_type=self.accessor_type)
        )

    def tearDown(self):
        self.accessor.close()


class TestOpenAccessor(unittest.TestCase):

    def setUp(self):
        self.tmp_dir = tempfile.mkdtemp(prefix="genoseq_test_")
        self.contigs = fasta_utils.small_hg19()

    def tearDown(self):
        shutil.rmtree(self.tmp_dir)

    def test_all_arguments(self):
        fasta = fasta_utils.write_reference(self.tmp_dir, self.contigs)
        config = AccessorConfig(
            fasta_path=fasta,
            fasta_fai_path=fasta + ".fai",
            fasta_dict_path=fasta + ".dict",
            accessor_type=AccessorType.SINGLE_QUERY,
            require_mt=True,
        )
        with open_accessor(config) as accessor:
            self.assertTrue(isinstance(accessor, GenomeSequenceAccessor))
            self.assertEqual(accessor.accessor_type,
                             AccessorType.SINGLE_QUERY)
            names = accessor.get_contig_dictionary().name_to_id.keys()
            for name in ("chr1", "1", "chr2", "2", "M", "chrM", "chrMT",
                         "MT"):
                self.assertIn(name, names)

    def test_caching_accessor(self):
        fasta = fasta_utils.write_reference(self.tmp_dir, self.contigs)
        config = AccessorConfig(
            fasta, accessor_type=AccessorType.CACHING_SINGLE_CONTIG
        )
        with open_accessor(config) as accessor:
            self.assertEqual(accessor.accessor_type,
                             AccessorType.CACHING_SINGLE_CONTIG)

    def test_default_arguments(self):
        fasta = fasta_utils.write_reference(self.tmp_dir, self.contigs)
        config = AccessorConfig(fasta)
        self.assertEqual(config.accessor_type, AccessorType.SINGLE_QUERY)
        self.assertTrue(config.require_mt)
        self.assertTrue(config.strict_complement)
        with open_accessor(config) as accessor:
            self.assertEqual(len(accessor.get_contig_dictionary()), 3)

    def test_sidecars_elsewhere(self):
        fasta = fasta_utils.write_reference(self.tmp_dir, self.contigs)
        other_dir = os.path.join(self.tmp_dir, "other")
        os.mkdir(other_dir)
        fai = os.path.join(other_dir, "index.fai")
        dict_fn = os.path.join(other_dir, "seqs.dict")
        os.rename(fasta + ".fai", fai)
        os.rename(fasta + ".dict", dict_fn)

        self.assertRaises(ConfigurationError, open_accessor,
                          AccessorConfig(fasta))

        config = AccessorConfig(fasta, fasta_fai_path=fai,
                                fasta_dict_path=dict_fn)
        with open_accessor(config) as accessor:
            self.assertEqual(accessor.fetch_sequence("M", 1, 10),
                             self.contigs["chrM"][:10])

    def test_missing_fasta(self):
        self.assertRaises(ConfigurationError, open_accessor,
                          AccessorConfig(self.tmp_dir))
        self.assertRaises(ConfigurationError, open_accessor,
                          AccessorConfig(os.path.join(self.tmp_dir, "a.fa")))
        self.assertRaises(ConfigurationError, open_accessor,
                          AccessorConfig(""))

    def test_missing_index(self):
        fasta = fasta_utils.write_reference(self.tmp_dir, self.contigs,
                                            write_index=False)
        self.assertRaises(ConfigurationError, open_accessor,
                          AccessorConfig(fasta, fasta_dict_path=fasta +
                                         ".dict"))

    def test_missing_dict(self):
        fasta = fasta_utils.write_reference(self.tmp_dir, self.contigs,
                                            dict_contigs=False)
        self.assertRaises(ConfigurationError, open_accessor,
                          AccessorConfig(fasta, fasta_fai_path=fasta +
                                         ".fai"))

    def test_missing_explicit_sidecar(self):
        fasta = fasta_utils.write_reference(self.tmp_dir, self.contigs)
        self.assertRaises(
            ConfigurationError, open_accessor,
            AccessorConfig(fasta, fasta_fai_path=fasta + ".missing.fai")
        )

    def test_invalid_type(self):
        fasta = fasta_utils.write_reference(self.tmp_dir, self.contigs)
        self.assertRaises(ConfigurationError, open_accessor,
                          AccessorConfig(fasta, accessor_type="MULTI_FASTA"))

    def test_missing_mt(self):
        contigs = OrderedDict(
            (k, v) for k, v in self.contigs.items() if k != "chrM"
        )
        fasta = fasta_utils.write_reference(self.tmp_dir, contigs)
        self.assertRaises(MissingContigError, open_accessor,
                          AccessorConfig(fasta))

        with open_accessor(AccessorConfig(fasta, require_mt=False)) as acc:
            rd = acc.get_contig_dictionary()
            self.assertEqual(len(rd), 2)
            self.assertNotIn("chrM", rd)

    def test_reader_closed_on_failure(self):
        # Mixed naming conventions in the dictionary.
        dict_contigs = OrderedDict([
            ("chr1", self.contigs["chr1"]),
            ("2", self.contigs["chr2"]),
            ("chrM", self.contigs["chrM"]),
        ])
        fasta = fasta_utils.write_reference(self.tmp_dir, self.contigs,
                                            dict_contigs=dict_contigs)

        with mock.patch.object(IndexedFastaFile, "close",
                               autospec=True) as close:
            self.assertRaises(InvalidFastaFileError, open_accessor,
                              AccessorConfig(fasta))
            self.assertEqual(close.call_count, 1)

    def test_from_settings(self):
        fasta = fasta_utils.write_reference(self.tmp_dir, self.contigs)
        with mock.patch.object(settings, "REFERENCE_PATH", fasta), \
                mock.patch.object(settings, "ACCESSOR_TYPE",
                                  AccessorType.CACHING_SINGLE_CONTIG), \
                mock.patch.object(settings, "REQUIRE_MT", False):
            config = AccessorConfig.from_settings()
            self.assertEqual(config.fasta_path, fasta)
            self.assertEqual(config.accessor_type,
                             AccessorType.CACHING_SINGLE_CONTIG)
            self.assertFalse(config.require_mt)

            config = AccessorConfig.from_settings(require_mt=True)
            self.assertTrue(config.require_mt)

        with open_accessor(config) as accessor:
            self.assertEqual(accessor.fetch_sequence("2", 61, 70),
                             self.contigs["chr2"][60:70])



class TestSettings(unittest.TestCase):

    def _read(self, content):
        config = configparser.RawConfigParser()
        config.read_string(content)
        return config

    def test_boolean_words(self):
        config = self._read("[genoseqConfiguration]\n"
                            "REQUIRE_MT = off\n"
                            "ACCESSOR_TYPE = caching_single_contig\n")
        with mock.patch.object(settings, "REFERENCE_PATH", "/ref.fa"), \
                mock.patch.object(settings, "ACCESSOR_TYPE", None), \
                mock.patch.object(settings, "REQUIRE_MT", True):
            settings._init_reference(config)
            self.assertIs(settings.REQUIRE_MT, False)
            self.assertEqual(settings.ACCESSOR_TYPE,
                             AccessorType.CACHING_SINGLE_CONTIG)

            settings._init_reference(
                self._read("[genoseqConfiguration]\nREQUIRE_MT = yes\n")
            )
            self.assertIs(settings.REQUIRE_MT, True)

    def test_require_mt_default(self):
        with mock.patch.object(settings, "REFERENCE_PATH", "/ref.fa"), \
                mock.patch.object(settings, "REQUIRE_MT", False):
            settings._init_reference(self._read("[genoseqConfiguration]\n"))
            self.assertIs(settings.REQUIRE_MT, True)

    def test_invalid_boolean(self):
        config = self._read("[genoseqConfiguration]\nREQUIRE_MT = maybe\n")
        with mock.patch.object(settings, "REFERENCE_PATH", "/ref.fa"), \
                mock.patch.object(settings, "REQUIRE_MT", True):
            self.assertRaises(ValueError, settings._init_reference, config)


class TestSingleQueryAccessor(_ReferenceTestCase):

    def test_fetch_sequence(self):
        seq = self.accessor.fetch_sequence("chr1", 61, 70)
        self.assertEqual(seq, self.contigs["chr1"][60:70])
        self.assertEqual(len(seq), 10)
        self.assertTrue(seq.islower())

        seq = self.accessor.fetch_sequence("chr2", 61, 70)
        self.assertEqual(seq, self.contigs["chr2"][60:70])

    def test_fetch_sequence_aliases(self):
        expected = self.contigs["chr1"][60:70]
        self.assertEqual(self.accessor.fetch_sequence("1", 61, 70), expected)
        self.assertEqual(self.accessor.fetch_sequence(1, 61, 70), expected)

        expected = self.contigs["chrM"][60:70]
        for name in ("chrM", "M", "MT", "chrMT"):
            self.assertEqual(self.accessor.fetch_sequence(name, 61, 70),
                             expected)

    def test_fetch_sequence_invalid(self):
        self.assertRaises(FetchError, self.accessor.fetch_sequence, "chr3",
                          1, 10)
        self.assertRaises(FetchError, self.accessor.fetch_sequence, "chrM",
                          995, 1001)
        self.assertRaises(FetchError, self.accessor.fetch_sequence, "chr1",
                          0, 10)

    def test_fetch_interval(self):
        query = GenomeInterval(0, 60, 70, Strand.FWD)
        si = self.accessor.fetch(query)
        self.assertEqual(si.interval, query)
        self.assertEqual(si.sequence, self.contigs["chr1"][60:70])

        si = self.accessor.fetch(query.with_strand(Strand.REV))
        self.assertEqual(si.interval, query.with_strand(Strand.REV))
        self.assertEqual(si.sequence,
                         reverse_complement(self.contigs["chr1"][60:70]))

    def test_strand_symmetry(self):
        for contig_id, name in enumerate(self.contigs):
            query = GenomeInterval(contig_id, 0, 1000)
            fwd = self.accessor.fetch(query)
            rev = self.accessor.fetch(query.with_strand(Strand.REV))
            self.assertEqual(len(fwd.sequence), query.length())
            self.assertEqual(rev.sequence, reverse_complement(fwd.sequence))
            self.assertEqual(fwd.sub_extract(GenomeInterval(contig_id, 10,
                                                            20, Strand.REV)),
                             rev.sub_extract(GenomeInterval(contig_id, 10,
                                                            20, Strand.REV)))

    def test_empty_interval(self):
        si = self.accessor.fetch(GenomeInterval(1, 60, 60))
        self.assertEqual(si.sequence, "")
        si = self.accessor.fetch(GenomeInterval(2, 1000, 1000, Strand.REV))
        self.assertEqual(si.sequence, "")

    def test_whole_contig(self):
        si = self.accessor.fetch(GenomeInterval(2, 0, 1000))
        self.assertEqual(si.sequence, self.contigs["chrM"])

    def test_unknown_contig(self):
        self.assertIsNone(self.accessor.fetch(GenomeInterval(3, 60, 70)))
        self.assertIsNone(self.accessor.fetch(GenomeInterval("chr1", 60,
                                                             70)))

    def test_unhashable_contig_id(self):
        self.assertIsNone(self.accessor.fetch(GenomeInterval([0], 60, 70)))

    def test_interval_out_of_range(self):
        self.assertRaises(FetchError, self.accessor.fetch,
                          GenomeInterval(2, 990, 1010))

    def test_contig_dictionary(self):
        rd = self.accessor.get_contig_dictionary()
        self.assertEqual(len(rd.name_to_id), 8)
        self.assertEqual(dict(rd.id_to_name),
                         {0: "chr1", 1: "chr2", 2: "chrM"})
        self.assertEqual(dict(rd.id_to_length),
                         {0: 10001, 1: 10001, 2: 1000})
        self.assertTrue(rd.uses_prefix)

    def test_concurrent_queries(self):
        queries = [("chr1", 61, 70), ("chr2", 61, 70), ("chrM", 61, 70)]

        def work(query):
            return [self.accessor.fetch_sequence(*query) for _ in range(200)]

        with ThreadPoolExecutor(max_workers=3) as executor:
            results = list(executor.map(work, queries))

        for (name, start, end), seqs in zip(queries, results):
            expected = self.contigs[name][start - 1:end]
            self.assertTrue(all(seq == expected for seq in seqs))


class TestCachingAccessor(_ReferenceTestCase):
    accessor_type = AccessorType.CACHING_SINGLE_CONTIG

    def test_fetch_sequence(self):
        seq = self.accessor.fetch_sequence("chr1", 61, 70)
        self.assertEqual(seq, self.contigs["chr1"][60:70])

        seq = self.accessor.fetch_sequence("chr2", 61, 70)
        self.assertEqual(seq, self.contigs["chr2"][60:70])

        seq = self.accessor.fetch_sequence("1", 9992, 10001)
        self.assertEqual(seq, self.contigs["chr1"][9991:])

    def test_fetch_interval(self):
        query = GenomeInterval(0, 60, 70, Strand.REV)
        si = self.accessor.fetch(query)
        self.assertEqual(si.sequence,
                         reverse_complement(self.contigs["chr1"][60:70]))
        self.assertIsNone(self.accessor.fetch(GenomeInterval(5, 60, 70)))

    def test_contig_loaded_once(self):
        reader = self.accessor.reader
        with mock.patch.object(reader, "fetch_whole",
                               wraps=reader.fetch_whole) as fetch_whole:
            for i in range(1, 100):
                self.accessor.fetch_sequence("chr1", i, i + 10)
            self.assertEqual(fetch_whole.call_count, 1)

            # Aliases of the cached contig don't trigger a reload.
            self.accessor.fetch_sequence("1", 1, 10)
            self.assertEqual(fetch_whole.call_count, 1)

            self.accessor.fetch_sequence("chrM", 1, 10)
            self.accessor.fetch_sequence("chr1", 1, 10)
            self.assertEqual(fetch_whole.call_count, 3)

    def test_invalid_regions(self):
        self.assertRaises(FetchError, self.accessor.fetch_sequence, "chrM",
                          995, 1001)
        self.assertRaises(FetchError, self.accessor.fetch_sequence, "chrM",
                          0, 10)
        self.assertRaises(FetchError, self.accessor.fetch_sequence, "chr3",
                          1, 10)

        # The cache is still usable.
        self.assertEqual(self.accessor.fetch_sequence("chrM", 991, 1000),
                         self.contigs["chrM"][990:])

    def test_concurrency(self):
        queries = [("chr1", 61, 70), ("chr2", 61, 70), ("chrM", 61, 70)]

        with open_accessor(AccessorConfig(self.fasta)) as single_query:
            expected = [single_query.fetch_sequence(*q) for q in queries]

        def work(query):
            return [self.accessor.fetch_sequence(*query)
                    for _ in range(1000)]

        with ThreadPoolExecutor(max_workers=3) as executor:
            results = list(executor.map(work, queries))

        for seqs, exp in zip(results, expected):
            self.assertEqual(len(seqs), 1000)
            self.assertTrue(all(seq == exp for seq in seqs))


class TestBareReference(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.tmp_dir = tempfile.mkdtemp(prefix="genoseq_test_")
        cls.contigs = OrderedDict([
            ("1", fasta_utils.random_contig(500, seed=10)),
            ("X", fasta_utils.random_contig(300, seed=11)),
            ("MT", fasta_utils.random_contig(100, seed=12)),
        ])
        cls.fasta = fasta_utils.write_reference(cls.tmp_dir, cls.contigs,
                                                basename="grch37.fa")

    @classmethod
    def tearDownClass(cls):
        shutil.rmtree(cls.tmp_dir)

    def test_prefixed_queries(self):
        for accessor_type in AccessorType.types:
            config = AccessorConfig(self.fasta, accessor_type=accessor_type)
            with open_accessor(config) as accessor:
                rd = accessor.get_contig_dictionary()
                self.assertFalse(rd.uses_prefix)
                self.assertEqual(rd.contig_name(2), "MT")

                self.assertEqual(accessor.fetch_sequence("chr1", 1, 10),
                                 self.contigs["1"][:10])
                self.assertEqual(accessor.fetch_sequence("chrM", 11, 20),
                                 self.contigs["MT"][10:20])
                self.assertEqual(
                    accessor.fetch(GenomeInterval(1, 5, 15)).sequence,
                    self.contigs["X"][5:15]
                )
