#!/usr/bin/env python3

import io
import os
import shutil
import tempfile
import unittest
import logging

from legfed.sources.Source import Source
from legfed.sources.MarkerQTLFile import MarkerQTLFile
from legfed.models.GenomicFeature import Chromosome, Supercontig

logging.basicConfig(level=logging.WARNING)
LOG = logging.getLogger(__name__)

RAWDIR = os.path.join(os.path.dirname(__file__), 'resources', 'markerqtlfile')


class SourceTestCase(unittest.TestCase):
    """
    generic source processing, through one concrete file source
    """

    def setUp(self):
        self.source = MarkerQTLFile(rawdir=RAWDIR)

    def tearDown(self):
        self.source = None

    def test_unknown_graph_type(self):
        with self.assertRaises(ValueError):
            MarkerQTLFile(graph_type='neo4j')

    def test_process_file_is_abstract(self):
        with self.assertRaises(NotImplementedError):
            Source(rawdir=RAWDIR).process_file('x')

    def test_registry_is_shared_by_name(self):
        self.assertIs(self.source.registry('genetic_marker', None), self.source.markers)

    def test_organism_per_variety(self):
        organism = self.source.getOrganism('3885', 'G19833')
        self.assertIs(self.source.getOrganism(3885, 'G19833'), organism)
        self.assertIsNot(self.source.getOrganism('3885'), organism)
        self.assertEqual(len(self.source.organisms), 2)

    def test_sequence_kind(self):
        organism = self.source.getOrganism('3885')
        self.assertIsInstance(self.source.getSequence('Chr01', organism), Chromosome)
        scaffold = self.source.getSequence('scaffold_98', organism)
        self.assertIsInstance(scaffold, Supercontig)
        self.assertIs(self.source.getSequence('scaffold_98', organism), scaffold)

    def test_sequence_per_taxon(self):
        bean_chr = self.source.getSequence('Chr01', self.source.getOrganism('3885'))
        soy_chr = self.source.getSequence('Chr01', self.source.getOrganism('3847'))
        self.assertIsNot(bean_chr, soy_chr)
        self.assertNotEqual(bean_chr.item_id, soy_chr.item_id)
        self.assertEqual(soy_chr.organism.taxon_id, '3847')
        self.assertIs(
            self.source.getSequence('Chr01', self.source.getOrganism('3885', 'G19833')),
            bean_chr)

    def test_fetch_reads_local_files(self):
        rawdir = tempfile.mkdtemp()
        try:
            source = MarkerQTLFile(rawdir=rawdir)
            source.fetch()
            self.assertEqual(os.listdir(rawdir), [])
            self.assertEqual(source.failures, [])
        finally:
            shutil.rmtree(rawdir)

    def test_emit_once(self):
        organism = self.source.getOrganism('3885')
        marker, created = self.source.markers.get_or_create('M1', organism=organism)
        marker.setLocation(self.source.getSequence('Chr01', organism), 1, 10)
        self.assertEqual(self.source.emit(), 4)
        triples = len(self.source.graph)
        self.assertEqual(self.source.emit(), 0)
        self.assertEqual(len(self.source.graph), triples)

    def test_invalid_entity_is_not_written(self):
        chromosome, created = self.source.registry(
            'chromosome', Chromosome).get_or_create('Chr01')
        with self.assertRaises(ValueError):
            self.source.emit()
        self.assertNotIn(chromosome.item_id, self.source.emitted)

    def test_data_files_skip_readme(self):
        rawdir = tempfile.mkdtemp()
        try:
            for fname in ('b.txt', 'a.txt', 'README.md'):
                open(os.path.join(rawdir, fname), 'w').close()
            os.mkdir(os.path.join(rawdir, 'subdir'))
            source = MarkerQTLFile(rawdir=rawdir)
            self.assertEqual(
                [os.path.basename(path) for path in source.data_files()],
                ['a.txt', 'b.txt'])
        finally:
            shutil.rmtree(rawdir)

    def test_data_lines(self):
        rawdir = tempfile.mkdtemp()
        try:
            path = os.path.join(rawdir, 'lines.txt')
            with open(path, 'w') as writer:
                writer.write('# comment\r\n\r\nM1\tQTL1\r\n   \nM2\tQTL2\n')
            self.assertEqual(
                list(Source.data_lines(path)), [(3, 'M1\tQTL1'), (5, 'M2\tQTL2')])
        finally:
            shutil.rmtree(rawdir)

    def test_limit(self):
        self.source.parse(limit=1)
        self.assertEqual(len(self.source.qtls), 1)

    def test_check_fileheader(self):
        self.assertTrue(Source.check_fileheader(['a', 'b'], ['a', 'b']))
        self.assertTrue(Source.check_fileheader(['a', 'b'], ['a', 'b', 'c']))
        with self.assertRaises(AssertionError):
            Source.check_fileheader(['a', 'b'], ['a'])

    def test_resolve(self):
        self.assertEqual(self.source.resolve('gene'), 'SO:0000704')
        self.assertEqual(self.source.resolve('nothing', mandatory=False), 'nothing')
        with self.assertRaises(KeyError):
            self.source.resolve('nothing')

    def test_local_translation_table(self):
        from legfed.sources.GFF3File import GFF3File
        gff = GFF3File(rawdir=RAWDIR)
        self.assertEqual(gff.localtt['SSR'], 'genetic_marker')
        self.assertEqual(gff.resolve('SNP'), 'SO:0001645')
        self.assertEqual(self.source.localtt, {})


class StreamedSourceTestCase(unittest.TestCase):

    def test_streamed_graph(self):
        stream = io.StringIO()
        source = MarkerQTLFile(
            graph_type='streamed_graph', rawdir=RAWDIR, file_handle=stream)
        source.parse()
        source.write()
        lines = stream.getvalue().splitlines()
        self.assertEqual(len(lines), len(source.graph))
        self.assertTrue(all(line.endswith(' .') for line in lines))
        self.assertIn('seed yield', stream.getvalue())


if __name__ == '__main__':
    unittest.main()
