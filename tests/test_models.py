#!/usr/bin/env python3

import unittest
import logging

from legfed.models.Item import ItemSet
from legfed.models.Organism import Organism, Strain, organism_key
from legfed.models.GenomicFeature import (
    Chromosome, Gene, Supercontig, normalize_strand, sequence_class)
from legfed.models.Genetic import (
    LinkageGroup, GeneticMarker, QTL, MappingPopulation, GeneticMap)
from legfed.models.Homology import (
    GeneFamily, Homologue, homologue_type, ORTHOLOGUE, PARALOGUE, SAME_GENE_FAMILY)
from legfed.models.Reference import Publication, clean_value
from legfed.models.Synteny import SyntenicRegion, SyntenyBlock

logging.basicConfig(level=logging.WARNING)
LOG = logging.getLogger(__name__)


class OrganismTestCase(unittest.TestCase):

    def test_key(self):
        self.assertEqual(organism_key(3885, 'G19833'), '3885_G19833')
        self.assertEqual(organism_key('3885'), '3885')
        organism = Organism('3885', 'G19833', 'Phaseolus', 'vulgaris')
        self.assertEqual(organism.key, '3885_G19833')
        self.assertEqual(organism.taxon_curie, 'NCBITaxon:3885')
        self.assertEqual(organism.label(), 'Phaseolus vulgaris G19833')

    def test_same_key_same_id(self):
        self.assertEqual(Organism(3885).item_id, Organism('3885').item_id)
        self.assertNotEqual(
            Organism('3885').item_id, Organism('3885', 'G19833').item_id)

    def test_bad_taxon(self):
        with self.assertRaises(ValueError):
            Organism(None)
        with self.assertRaises(ValueError):
            Organism('Phaseolus')


class FeatureTestCase(unittest.TestCase):

    def setUp(self):
        self.organism = Organism('3885')
        self.chromosome = Chromosome('Chr01', self.organism)

    def test_location_swaps_reversed_coordinates(self):
        gene = Gene('Phvul.001G000100', self.organism)
        location = gene.setLocation(self.chromosome, 5000, 1000, '-')
        self.assertEqual((location.start, location.end), (1000, 5000))
        self.assertEqual(location.strand, -1)
        self.assertIs(gene.chromosome, self.chromosome)
        self.assertIs(gene.chromosome_location, location)
        self.assertIsNone(gene.supercontig_location)

    def test_supercontig_location(self):
        marker = GeneticMarker('ss715639', self.organism)
        scaffold = Supercontig('scaffold_98', self.organism)
        marker.setLocation(scaffold, 300, 300)
        self.assertIsNone(marker.chromosome_location)
        self.assertEqual(marker.supercontig_location.start, 300)
        self.assertIsNone(marker.supercontig_location.strand)

    def test_strand(self):
        self.assertEqual(normalize_strand('+'), 1)
        self.assertEqual(normalize_strand('-1'), -1)
        self.assertEqual(normalize_strand('.'), 0)
        self.assertEqual(normalize_strand('x'), 0)
        self.assertIsNone(normalize_strand(None))

    def test_sequence_class(self):
        self.assertIs(sequence_class('scaffold_98'), Supercontig)
        self.assertIs(sequence_class('Gm_Contig12'), Supercontig)
        self.assertIs(sequence_class('Phvul.002'), Chromosome)

    def test_chromosome_requires_organism(self):
        with self.assertRaises(ValueError):
            Chromosome('Chr01').validate()
        self.chromosome.validate()

    def test_primary_identifier_required(self):
        with self.assertRaises(ValueError):
            Gene('  ')


class GeneticTestCase(unittest.TestCase):

    def setUp(self):
        self.organism = Organism('3885')
        self.linkage_group = LinkageGroup('BAT93_x_JaloEEP558_1', self.organism)
        self.qtl = QTL('SY1-1', self.organism)

    def test_linkage_group_range(self):
        lgr = self.qtl.linkageGroupRange(self.linkage_group)
        for position in (30.5, 12.4, 20.0):
            lgr.include(position)
        self.assertEqual((lgr.begin, lgr.end), (12.4, 30.5))
        self.assertEqual(lgr.length, 18.1)
        self.assertIs(self.qtl.linkageGroupRange(self.linkage_group), lgr)
        self.assertIn(self.qtl, self.linkage_group.qtls)
        self.assertIn(lgr, self.qtl.dependents())

    def test_marker_position_extends_linkage_group(self):
        marker = GeneticMarker('D1861', self.organism)
        marker.setLinkageGroupPosition(self.linkage_group, 12.4)
        marker.setLinkageGroupPosition(self.linkage_group, 14.0)
        self.assertEqual(len(marker.linkage_group_positions), 1)
        self.assertEqual(self.linkage_group.length, 14.0)
        self.linkage_group.extendTo(10.0)
        self.assertEqual(self.linkage_group.length, 14.0)
        self.assertIn(marker, self.linkage_group.genetic_markers)

    def test_association_is_bidirectional(self):
        marker = GeneticMarker('D1861', self.organism)
        self.qtl.addAssociatedGeneticMarker(marker)
        self.qtl.addAssociatedGeneticMarker(marker)
        self.assertEqual(len(self.qtl.associated_genetic_markers), 1)
        self.assertIn(self.qtl, marker.qtls)

    def test_overlapping_gene_is_bidirectional(self):
        gene = Gene('Phvul.001G000100', self.organism)
        gene.addSpanningQTL(self.qtl)
        self.assertIn(gene, self.qtl.overlapping_genes)
        self.assertIn(self.qtl, gene.spanning_qtls)

    def test_genetic_map(self):
        genetic_map = GeneticMap('BAT93_x_JaloEEP558', self.organism)
        self.linkage_group.setGeneticMap(genetic_map)
        genetic_map.addQTL(self.qtl)
        self.assertIn(self.linkage_group, genetic_map.linkage_groups)
        self.assertIn(genetic_map, self.qtl.genetic_maps)
        self.assertEqual(genetic_map.unit, 'cM')

    def test_parent_names(self):
        self.assertEqual(
            MappingPopulation.parent_names('BAT93_x_JaloEEP558'), ['BAT93', 'JaloEEP558'])
        self.assertEqual(MappingPopulation.parent_names('RIL study'), [])

    def test_item_set(self):
        items = ItemSet([self.qtl, QTL('SY1-1', self.organism)])
        self.assertEqual(len(items), 1)
        self.assertFalse(items.add(self.qtl))
        self.assertTrue(items.add(QTL('PN2-1')))


class HomologyTestCase(unittest.TestCase):

    def setUp(self):
        self.phavu = Organism('3885', 'G19833')
        self.glyma = Organism('3847', 'Williams82')
        self.family = GeneFamily('phytozome_10_2.59028020', 'Kinase')
        self.gene = Gene('phavu.Phvul.001G000100', self.phavu)

    def test_homologue_type(self):
        self.assertEqual(homologue_type(self.phavu, self.glyma), ORTHOLOGUE)
        self.assertEqual(homologue_type(self.phavu, Organism('3885', 'G19833')), PARALOGUE)
        self.assertEqual(homologue_type(self.phavu, None), SAME_GENE_FAMILY)

    def test_homologue(self):
        other = Gene('glyma.Glyma.01G000100', self.glyma)
        homologue = Homologue(self.gene, other, self.family)
        self.assertEqual(homologue.type, ORTHOLOGUE)
        self.assertIn(homologue, self.gene.homologues)
        self.assertIn(homologue, self.gene.dependents())
        typed = Homologue(self.gene, other, self.family, SAME_GENE_FAMILY)
        self.assertEqual(typed.type, SAME_GENE_FAMILY)

    def test_gene_is_not_its_own_homologue(self):
        with self.assertRaises(ValueError):
            Homologue(self.gene, Gene('phavu.Phvul.001G000100', self.phavu))

    def test_gene_family(self):
        self.family.addGene(self.gene)
        self.assertIs(self.gene.gene_family, self.family)
        self.assertIn(self.gene, self.family.genes)


class PublicationTestCase(unittest.TestCase):

    def test_key_preference(self):
        self.assertEqual(Publication('15565285', '10.1007/x', 'A title').key, 'PMID:15565285')
        self.assertEqual(Publication(doi='10.1007/x', title='A title').key, 'DOI:10.1007/x')
        self.assertEqual(Publication(title='A title').key, 'A title')
        with self.assertRaises(ValueError):
            Publication(pubmed_id='NULL')

    def test_first_author(self):
        self.assertEqual(Publication.first_author_of('Blair, Iriarte et al. 2006'), 'Blair')
        self.assertIsNone(Publication.first_author_of('NULL'))

    def test_authors(self):
        publication = Publication(title='A title')
        author = publication.addAuthor('Blair')
        self.assertIsNone(publication.addAuthor('NULL'))
        publication.addAuthor('Iriarte')
        self.assertEqual(publication.first_author, 'Blair')
        self.assertEqual(len(publication.authors), 2)
        self.assertIn(author, publication.dependents())

    def test_clean_value(self):
        self.assertIsNone(clean_value('NULL'))
        self.assertIsNone(clean_value('0'))
        self.assertIsNone(clean_value(' '))
        self.assertEqual(clean_value(' 112 '), '112')

    def test_year(self):
        publication = Publication(title='A title')
        publication.setYear('2006')
        self.assertEqual(publication.year, 2006)
        publication.setYear('in press')
        self.assertEqual(publication.year, 2006)


class SyntenyTestCase(unittest.TestCase):

    def test_block_links_regions(self):
        source = SyntenicRegion('phavu.Chr01:125452-912158', Organism('3885'))
        target = SyntenicRegion('glyma.Chr14:48062215-48932270', Organism('3847'))
        block = SyntenyBlock(source, target, 0.3559)
        self.assertEqual(
            block.primary_identifier,
            'phavu.Chr01:125452-912158|glyma.Chr14:48062215-48932270')
        self.assertIs(source.synteny_block, block)
        self.assertIs(target.synteny_block, block)
        self.assertEqual(
            SyntenicRegion.region_name('glyma.Chr14', 1, 2), 'glyma.Chr14:1-2')

    def test_region_requires_location(self):
        with self.assertRaises(ValueError):
            SyntenicRegion('phavu.Chr01:1-2', Organism('3885')).validate()


class StrainTestCase(unittest.TestCase):

    def test_strain_requires_organism(self):
        with self.assertRaises(ValueError):
            Strain('BAT93').validate()
        Strain('BAT93', Organism('3885')).validate()


if __name__ == '__main__':
    unittest.main()
