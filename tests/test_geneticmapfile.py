#!/usr/bin/env python3

import os
import shutil
import tempfile
import unittest
import logging

from legfed.sources.GeneticMapFile import GeneticMapFile

logging.basicConfig(level=logging.WARNING)
LOG = logging.getLogger(__name__)

RAWDIR = os.path.join(os.path.dirname(__file__), 'resources', 'geneticmapfile')


class GeneticMapFileTestCase(unittest.TestCase):

    def setUp(self):
        self.source = GeneticMapFile('rdf_graph', True, rawdir=RAWDIR)
        self.source.parse()

    def tearDown(self):
        self.source = None

    def test_genetic_map(self):
        genetic_map = self.source.genetic_maps['BAT93_x_JaloEEP558']
        self.assertEqual(genetic_map.organism.taxon_id, '3885')
        self.assertEqual(len(genetic_map.linkage_groups), 2)
        self.assertEqual(len(genetic_map.genetic_markers), 4)
        self.assertEqual(
            [pub.pubmed_id for pub in genetic_map.publications], ['15565285'])
        (population,) = list(genetic_map.mapping_populations)
        self.assertEqual(population.primary_identifier, 'BAT93_x_JaloEEP558')
        self.assertEqual(
            sorted(parent.primary_identifier for parent in population.parents),
            ['BAT93', 'JaloEEP558'])

    def test_linkage_groups(self):
        lg1 = self.source.linkage_groups['BAT93_x_JaloEEP558_1']
        self.assertEqual(lg1.number, 1)
        self.assertEqual(lg1.length, 30.5)
        self.assertEqual(len(lg1.genetic_markers), 3)
        self.assertEqual(self.source.linkage_groups['BAT93_x_JaloEEP558_2'].length, 5.0)

    def test_bad_rows_are_skipped(self):
        self.assertNotIn('Bng999', self.source.markers)
        self.assertEqual(self.source.failures, [])

    def test_qtl(self):
        qtl = self.source.qtls['SY1-1']
        self.assertEqual(qtl.secondary_identifier, 'seed yield')
        self.assertEqual(
            sorted(marker.primary_identifier for marker in qtl.associated_genetic_markers),
            ['Bng171', 'D1861'])
        (lgr,) = list(qtl.linkage_group_ranges.values())
        self.assertEqual((lgr.begin, lgr.end, lgr.length), (12.4, 30.5, 18.1))
        self.assertIn(qtl, self.source.markers['D1861'].qtls)

    def test_marker_positions(self):
        marker = self.source.markers['D1861']
        self.assertEqual(marker.type, 'RAPD')
        (position,) = list(marker.linkage_group_positions.values())
        self.assertEqual(position.position, 12.4)

    def test_everything_emitted_once(self):
        self.assertIn(self.source.markers['D1861'].item_id, self.source.emitted)
        self.assertEqual(self.source.emit(), 0)
        self.assertGreater(len(self.source.graph), 0)

    def test_write(self):
        outdir = tempfile.mkdtemp()
        try:
            self.source.outdir = outdir
            self.source.write(fmt='turtle')
            self.assertTrue(os.path.exists(os.path.join(outdir, 'geneticmapfile.ttl')))
        finally:
            shutil.rmtree(outdir)


class GeneticMapFileHeaderTestCase(unittest.TestCase):

    def setUp(self):
        self.rawdir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.rawdir)

    def parse(self, lines):
        with open(os.path.join(self.rawdir, 'map.txt'), 'w') as writer:
            writer.write('\n'.join('\t'.join(line) for line in lines) + '\n')
        source = GeneticMapFile(rawdir=self.rawdir)
        source.parse()
        return source

    def test_row_before_taxon(self):
        with self.assertRaises(ValueError):
            self.parse([('GeneticMap', 'map'), ('Bng060', '1', 'RFLP', '0.0')])

    def test_row_before_genetic_map(self):
        with self.assertRaises(ValueError):
            self.parse([('TaxonID', '3885'), ('Bng060', '1', 'RFLP', '0.0')])

    def test_parents_with_taxon(self):
        source = self.parse([
            ('Parents', '3885', 'BAT93', 'JaloEEP558'),
            ('GeneticMap', 'map'),
            ('Bng060', '1', 'RFLP', '0.0')])
        self.assertIn('BAT93_x_JaloEEP558', source.mapping_populations)
        self.assertIn('3885', source.organisms)

    def test_strain(self):
        source = self.parse([
            ('TaxonID', '3885'),
            ('Strain', 'G19833'),
            ('GeneticMap', 'map'),
            ('Bng060', '1', 'RFLP', '0.0')])
        self.assertEqual(
            source.markers['Bng060'].strain.primary_identifier, 'G19833')
        self.assertIn('G19833', source.strains)

    def test_taxon_without_value(self):
        with self.assertRaises(ValueError) as context:
            self.parse([('TaxonID',), ('GeneticMap', 'map')])
        self.assertIn('TaxonID header needs a value', str(context.exception))

    def test_genetic_map_without_value(self):
        with self.assertRaises(ValueError) as context:
            self.parse([('TaxonID', '3885'), ('GeneticMap', '')])
        self.assertIn('line 2', str(context.exception))

    def test_strain_before_taxon(self):
        with self.assertRaises(ValueError):
            self.parse([('Strain', 'G19833'), ('TaxonID', '3885')])

    def test_missing_rawdir_is_a_failure(self):
        source = GeneticMapFile(rawdir=os.path.join(self.rawdir, 'nothing'))
        source.parse()
        self.assertEqual(len(source.failures), 1)


if __name__ == '__main__':
    unittest.main()
