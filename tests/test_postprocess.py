#!/usr/bin/env python3

import os
import unittest
import logging
from unittest import mock

from rdflib import URIRef

from legfed import config
from legfed.models.GenomicFeature import Gene, MRNA, Exon, Polypeptide
from legfed.models.Organism import Organism
from legfed.postprocess.LegfedPostProcess import LegfedPostProcess
from legfed.sources.MarkerQTLFile import MarkerQTLFile
from legfed.sources.MarkerChromosomeFile import MarkerChromosomeFile
from legfed.sources.GFF3File import GFF3File

logging.basicConfig(level=logging.WARNING)
LOG = logging.getLogger(__name__)

RESOURCES = os.path.join(os.path.dirname(__file__), 'resources')
LFV = 'https://legumefederation.org/vocab/'
NOWHERE = os.path.join(RESOURCES, 'nothing')


class LegfedPostProcessTestCase(unittest.TestCase):
    """
    QTL1 has markers M1 (Chr1:10-12) and M2 (Chr1:38-40), QTL2 only M3,
    associations and locations come from different passes.
    GeneA (Chr1:5-15) overlaps QTL1, GeneB (Chr1:50-60) and GeneC (Chr2:10-40) do not.
    """

    def setUp(self):
        associations = MarkerQTLFile(rawdir=NOWHERE)
        organism = associations.getOrganism('3885')
        for (marker_name, qtl_name) in (('M1', 'QTL1'), ('M2', 'QTL1'), ('M3', 'QTL2'),
                                        ('M4', 'QTL1')):
            marker, created = associations.markers.get_or_create(
                marker_name, organism=organism)
            qtl, created = associations.qtls.get_or_create(qtl_name, organism=organism)
            qtl.addAssociatedGeneticMarker(marker)

        locations = MarkerChromosomeFile(rawdir=NOWHERE)
        organism = locations.getOrganism('3885')
        for (marker_name, seqid, start, end) in (
                ('M1', 'Chr1', 10, 12), ('M2', 'Chr1', 40, 38), ('M3', 'Chr1', 5, 15)):
            marker, created = locations.markers.get_or_create(marker_name, organism=organism)
            marker.setLocation(locations.getSequence(seqid, organism), start, end, '+')

        genes = GFF3File(rawdir=NOWHERE)
        organism = genes.getOrganism('3885')
        for (gene_name, seqid, start, end) in (
                ('GeneA', 'Chr1', 5, 15), ('GeneB', 'Chr1', 50, 60),
                ('GeneC', 'Chr2', 10, 40)):
            gene, created = genes.genes.get_or_create(gene_name, organism=organism)
            gene.setLocation(genes.getSequence(seqid, organism), start, end, '+')
        genes.genes.get_or_create('GeneD', organism=organism)

        self.passes = [associations, locations, genes]

    def tearDown(self):
        self.passes = None

    def test_overlaps(self):
        postprocess = LegfedPostProcess(self.passes, min_markers=2, rawdir=NOWHERE)
        postprocess.parse()
        self.assertEqual(list(postprocess.genes.keys()), [('3885', 'GeneA')])
        self.assertEqual(list(postprocess.qtls.keys()), [('3885', 'QTL1')])
        gene = postprocess.genes['GeneA']
        qtl = postprocess.qtls['QTL1']
        self.assertIn(gene, qtl.overlapping_genes)
        self.assertIn(qtl, gene.spanning_qtls)

    def test_relation_written_both_ways(self):
        postprocess = LegfedPostProcess(self.passes, min_markers=2, rawdir=NOWHERE)
        postprocess.parse()
        gene = URIRef(postprocess.graph._getnode(postprocess.genes['GeneA'].item_id))
        qtl = URIRef(postprocess.graph._getnode(postprocess.qtls['QTL1'].item_id))
        self.assertIn((gene, URIRef(LFV + 'spanningQTLs'), qtl), postprocess.graph)
        self.assertIn((qtl, URIRef(LFV + 'overlappingGenes'), gene), postprocess.graph)
        # identity matches the gene written by its own pass
        self.assertEqual(
            postprocess.genes['GeneA'].item_id, Gene('GeneA', Organism('3885')).item_id)

    def test_report(self):
        postprocess = LegfedPostProcess(self.passes, min_markers=2, rawdir=NOWHERE)
        postprocess.parse()
        self.assertEqual(postprocess.report, {
            'spans': 1,
            'overlaps': 1,
            'markers_without_chromosome_location': 1,
            'genes_without_location': 1,
            'mrnas_without_gene': 0,
            'exons_without_gene': 0,
            'polypeptides_related_to_gene': 0,
        })

    def test_single_marker_spans(self):
        postprocess = LegfedPostProcess(self.passes, min_markers=1, rawdir=NOWHERE)
        postprocess.parse()
        self.assertEqual(
            sorted(postprocess.qtls.keys()), [('3885', 'QTL1'), ('3885', 'QTL2')])
        self.assertEqual(
            [q.primary_identifier for q in postprocess.genes['GeneA'].spanning_qtls],
            ['QTL1', 'QTL2'])

    def test_min_markers_from_config(self):
        with mock.patch.dict(config.conf, {'qtl_span': {'min_markers': 3}}):
            postprocess = LegfedPostProcess(self.passes, rawdir=NOWHERE)
        self.assertEqual(postprocess.min_markers, 3)
        postprocess.parse()
        self.assertEqual(len(postprocess.genes), 0)
        self.assertEqual(postprocess.report['spans'], 0)

    def test_fetch_does_nothing(self):
        postprocess = LegfedPostProcess(self.passes, rawdir=NOWHERE)
        postprocess.fetch()
        self.assertEqual(postprocess.failures, [])


class TwoTaxaTestCase(unittest.TestCase):
    """
    A bean QTL spans Chr01:10-40, a soybean gene sits on its own Chr01:20-30.
    Same chromosome name, different species, no overlap.
    """

    def setUp(self):
        qtls = MarkerQTLFile(rawdir=NOWHERE)
        bean = qtls.getOrganism('3885')
        qtl, created = qtls.qtls.get_or_create('SY1-1', organism=bean)
        for (marker_name, start, end) in (('M1', 10, 12), ('M2', 38, 40)):
            marker, created = qtls.markers.get_or_create(marker_name, organism=bean)
            marker.setLocation(qtls.getSequence('Chr01', bean), start, end)
            qtl.addAssociatedGeneticMarker(marker)

        genes = GFF3File(rawdir=NOWHERE)
        soy = genes.getOrganism('3847')
        gene, created = genes.genes.get_or_create('SoyGene', organism=soy)
        gene.setLocation(genes.getSequence('Chr01', soy), 20, 30)
        self.passes = [qtls, genes]

    def tearDown(self):
        self.passes = None

    def test_no_overlap_across_taxa(self):
        postprocess = LegfedPostProcess(self.passes, min_markers=2, rawdir=NOWHERE)
        postprocess.parse()
        self.assertEqual(postprocess.report['spans'], 1)
        self.assertEqual(postprocess.report['overlaps'], 0)
        self.assertEqual(len(postprocess.genes), 0)

    def test_same_taxon_overlaps(self):
        genes = GFF3File(rawdir=NOWHERE)
        bean = genes.getOrganism('3885', 'G19833')
        gene, created = genes.genes.get_or_create('BeanGene', organism=bean)
        gene.setLocation(genes.getSequence('Chr01', bean), 20, 30)
        postprocess = LegfedPostProcess(
            self.passes + [genes], min_markers=2, rawdir=NOWHERE)
        postprocess.parse()
        self.assertEqual(list(postprocess.genes.keys()), [('3885', 'BeanGene')])
        gene = postprocess.genes['BeanGene']
        self.assertEqual(
            [qtl.primary_identifier for qtl in gene.spanning_qtls], ['SY1-1'])

    def test_merged_by_taxon(self):
        postprocess = LegfedPostProcess(self.passes, rawdir=NOWHERE)
        self.assertEqual(
            sorted(postprocess.merged('chromosome')),
            [('3847', 'Chr01'), ('3885', 'Chr01')])


class TranscriptTestCase(unittest.TestCase):
    """
    mrna1 belongs to gene1, mrna2 to nothing; exon1 is on mrna1,
    exon2 on mrna2; polypeptide1 derives from mrna1.
    """

    def setUp(self):
        self.organism = Organism('3885')
        self.source = GFF3File(rawdir=NOWHERE)

        def get(kind, cls, name):
            entity, created = self.source.registry(kind, cls).get_or_create(
                name, organism=self.organism)
            return entity

        gene = get('gene', Gene, 'gene1')
        mrna1 = get('mrna', MRNA, 'mrna1')
        mrna1.setGene(gene)
        mrna2 = get('mrna', MRNA, 'mrna2')
        get('exon', Exon, 'exon1').addMRNA(mrna1)
        get('exon', Exon, 'exon2').addMRNA(mrna2)
        get('polypeptide', Polypeptide, 'polypeptide1').mrna = mrna1
        self.postprocess = LegfedPostProcess([self.source], rawdir=NOWHERE)

    def tearDown(self):
        self.postprocess = None

    def test_transcripts_without_gene(self):
        with self.assertLogs(
                'legfed.postprocess.LegfedPostProcess', level='ERROR') as logs:
            self.postprocess.parse()
        self.assertEqual(self.postprocess.report['mrnas_without_gene'], 1)
        self.assertEqual(self.postprocess.report['exons_without_gene'], 1)
        self.assertEqual(len(logs.output), 2)
        self.assertIn('mrna2', logs.output[0])

    def test_polypeptide_gene(self):
        self.postprocess.parse()
        self.assertEqual(self.postprocess.report['polypeptides_related_to_gene'], 1)
        polypeptide = self.postprocess.polypeptides['polypeptide1']
        self.assertEqual(polypeptide.gene.primary_identifier, 'gene1')
        self.assertEqual(
            polypeptide.item_id, Polypeptide('polypeptide1', self.organism).item_id)
        self.assertIn(polypeptide.item_id, self.postprocess.emitted)


if __name__ == '__main__':
    unittest.main()
