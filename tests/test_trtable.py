#!/usr/bin/env python3

import os
import unittest
import yaml
from yaml.constructor import ConstructorError

from legfed.models import (
    Genetic, GenomicFeature, Homology, Ontology, Organism, Reference, Synteny)

TRANSLATIONTABLE = os.path.join(os.path.dirname(__file__), '../translationtable')


class UniqueKeyLoader(yaml.SafeLoader):
    pass


def no_duplicates_constructor(loader, node, deep=False):
    """Check for duplicate keys."""
    mapping = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise ConstructorError(
                "while constructing a mapping", node.start_mark,
                "found duplicate key (%s)" % key, key_node.start_mark)
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return loader.construct_mapping(node, deep)


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG, no_duplicates_constructor)


def load_table(name):
    with open(os.path.join(TRANSLATIONTABLE, name)) as tt_file:
        return yaml.load(tt_file, Loader=UniqueKeyLoader)


class TranslationTestCase(unittest.TestCase):

    def setUp(self):
        self.globaltt = load_table('GLOBAL_TERMS.yaml')

    def test_tables_are_maps(self):
        for fname in os.listdir(TRANSLATIONTABLE):
            if fname.endswith('.yaml'):
                self.assertIsInstance(load_table(fname), dict, fname)

    def test_global_table_is_bimap(self):
        seen = {}
        duplicates = []
        for key, value in self.globaltt.items():
            if value in seen:
                duplicates.append(value)
            seen[value] = key
        self.assertEqual(duplicates, [], "Duplicate values in GLOBAL_TERMS.yaml")

    def test_local_labels_are_global(self):
        for fname in os.listdir(TRANSLATIONTABLE):
            if fname == 'GLOBAL_TERMS.yaml' or not fname.endswith('.yaml'):
                continue
            for word, label in load_table(fname).items():
                self.assertIn(label, self.globaltt, "{}: {}".format(fname, word))

    def test_entity_types_are_global(self):
        for module in (
                Genetic, GenomicFeature, Homology, Ontology, Organism, Reference, Synteny):
            for value in vars(module).values():
                term = getattr(value, 'term', None)
                if isinstance(value, type) and term is not None:
                    self.assertIn(term, self.globaltt, value.__name__)
        for relation in Homology.HOMOLOGY_RELATION.values():
            self.assertIn(relation, self.globaltt)


if __name__ == '__main__':
    unittest.main()
