#!/usr/bin/env python3

import os
import shutil
import tempfile
import unittest
import logging

from legfed.sources.GFF3File import GFF3File

logging.basicConfig(level=logging.WARNING)
LOG = logging.getLogger(__name__)

RAWDIR = os.path.join(os.path.dirname(__file__), 'resources', 'gff3file')


class GFF3FileTestCase(unittest.TestCase):

    def setUp(self):
        self.source = GFF3File(rawdir=RAWDIR)
        self.source.parse()

    def tearDown(self):
        self.source = None

    def test_taxon_from_filename(self):
        self.assertEqual(GFF3File.taxon_from_filename('/x/markers_3885.gff3'), '3885')
        self.assertEqual(GFF3File.taxon_from_filename('genes_3847.gff'), '3847')
        self.assertIsNone(GFF3File.taxon_from_filename('genes.gff3'))
        self.assertEqual(list(self.source.organisms.keys()), ['3885'])

    def test_gene(self):
        self.assertEqual(list(self.source.genes.keys()), [('3885', 'Phvul.001G000100')])
        gene = self.source.genes['Phvul.001G000100']
        self.assertEqual(gene.secondary_identifier, 'gene1')
        self.assertEqual(gene.length, 4001)
        location = gene.chromosome_location
        self.assertEqual(location.located_on.primary_identifier, 'Chr01')
        self.assertEqual((location.start, location.end, location.strand), (1000, 5000, 1))

    def test_markers(self):
        self.assertEqual(
            sorted(self.source.markers.keys()),
            [('3885', 'BARCPvSSR02'), ('3885', 'ss715639')])
        snp = self.source.markers['ss715639']
        self.assertEqual(snp.type, 'SNP')
        self.assertIsNone(snp.secondary_identifier)
        self.assertEqual(snp.supercontig.primary_identifier, 'scaffold_98')
        self.assertEqual(snp.supercontig_location.strand, 0)
        ssr = self.source.markers['BARCPvSSR02']
        self.assertEqual(ssr.description, 'dinucleotide repeat')
        self.assertEqual(ssr.chromosome_location.strand, -1)

    def test_sequences(self):
        self.assertEqual(
            sorted(self.source.registries['chromosome'].keys()),
            [('3885', 'Chr01'), ('3885', 'Chr02')])
        self.assertEqual(
            list(self.source.registries['supercontig'].keys()), [('3885', 'scaffold_98')])

    def test_duplicate_is_merged(self):
        self.assertEqual(len(self.source.genes), 1)
        gene = self.source.genes['Phvul.001G000100']
        self.assertEqual(gene.description, 'ribosomal protein')
        self.assertEqual(gene.chromosome_location.start, 1000)

    def test_transcripts(self):
        gene = self.source.genes['Phvul.001G000100']
        mrna = self.source.mrnas['mrna1']
        self.assertIs(mrna.gene, gene)
        self.assertEqual(list(gene.mrnas), [mrna])
        exon = self.source.exons['exon1']
        self.assertEqual(list(exon.mrnas), [mrna])
        self.assertIs(exon.geneOf(), gene)
        self.assertEqual(exon.chromosome_location.end, 2000)
        polypeptide = self.source.polypeptides['protein1']
        self.assertIs(polypeptide.mrna, mrna)
        self.assertIsNone(polypeptide.gene)
        self.assertNotIn('cds1', self.source.mrnas)
        for entity in (mrna, exon, polypeptide):
            self.assertIn(entity.item_id, self.source.emitted)


class GFF3FileHeaderTestCase(unittest.TestCase):

    def setUp(self):
        self.rawdir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.rawdir)

    def write(self, fname, lines):
        with open(os.path.join(self.rawdir, fname), 'w') as writer:
            writer.write('\n'.join(lines) + '\n')

    def test_header_overrides_filename(self):
        self.write('genes_3885.gff3', [
            '#TaxonID\t3847',
            '#Variety\tWilliams82',
            'Gm01\tx\tgene\t1\t100\t.\t+\t.\tID=Glyma.01G000100',
            '##FASTA',
            '>Gm01'])
        source = GFF3File(rawdir=self.rawdir)
        source.parse()
        gene = source.genes['Glyma.01G000100']
        self.assertEqual(gene.organism.key, '3847_Williams82')

    def test_taxon_required(self):
        self.write('genes.gff3', ['Gm01\tx\tgene\t1\t100\t.\t+\t.\tID=Glyma.01G000100'])
        with self.assertRaises(ValueError):
            GFF3File(rawdir=self.rawdir).parse()
        source = GFF3File(rawdir=self.rawdir, taxon_id='3847')
        source.parse()
        self.assertEqual(len(source.genes), 1)

    def test_conflicting_duplicate(self):
        self.write('markers_3885.gff3', [
            'Chr01\tx\tSNP\t300\t300\t.\t.\t.\tID=ss1',
            'Chr01\tx\tSNP\t900\t900\t.\t.\t.\tID=ss1;Note=moved'])
        source = GFF3File(rawdir=self.rawdir)
        with self.assertLogs('legfed.sources.GFF3File', level='WARNING') as logs:
            source.parse()
        marker = source.markers['ss1']
        self.assertEqual(marker.chromosome_location.start, 300)
        self.assertEqual(marker.description, 'moved')
        self.assertIn('ignoring Chr01:900-900', logs.output[0])

    def test_parent_in_any_order(self):
        self.write('genes_3847.gff3', [
            'Gm01\tx\texon\t1\t50\t.\t+\t.\tID=e1;Parent=t1,t2',
            'Gm01\tx\tmRNA\t1\t100\t.\t+\t.\tID=t1;Parent=g1',
            'Gm01\tx\tmRNA\t1\t90\t.\t+\t.\tID=t2;Parent=g1',
            'Gm01\tx\tgene\t1\t100\t.\t+\t.\tID=g1'])
        source = GFF3File(rawdir=self.rawdir)
        source.parse()
        gene = source.genes['g1']
        self.assertEqual(sorted(mrna.primary_identifier for mrna in gene.mrnas), ['t1', 't2'])
        self.assertEqual(len(source.exons['e1'].mrnas), 2)
        self.assertIs(source.exons['e1'].geneOf(), gene)


if __name__ == '__main__':
    unittest.main()
