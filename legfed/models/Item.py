import logging

from legfed.models.Model import Model
from legfed.utils.GraphUtils import GraphUtils

LOG = logging.getLogger(__name__)

# namespace of the legfed data model properties
VOCAB = 'LFV'


def vocab(name):
    return ':'.join((VOCAB, name))


class ItemSet:
    """
    Insertion ordered set of entities, unique on item_id.
    Used for every to-many relation so merging the same row twice is harmless.
    """

    def __init__(self, items=()):
        self._items = {}
        for item in items:
            self.add(item)

    def add(self, item):
        """
        :return: True when the item was not already present
        """
        if item.item_id in self._items:
            return False
        self._items[item.item_id] = item
        return True

    def __contains__(self, item):
        return item.item_id in self._items

    def __iter__(self):
        return iter(list(self._items.values()))

    def __len__(self):
        return len(self._items)

    def __repr__(self):
        return 'ItemSet({})'.format(list(self._items.values()))


class Item:
    """
    Base of the typed entities.

    The identifier is a digest of the class name and the natural key, so two
    passes loading the same natural key describe the same node in the graph.
    Entities without a natural name of their own
    (locations, map positions, ...) are blank nodes.

    Subclasses list what they write through
    attributes(), references() and collections(),
    and anything they own but which is not registered elsewhere through dependents().
    """

    term = None         # GLOBAL_TERMS label of the rdf:type
    required = ()       # python attribute names which must be set before emission
    anonymous = False   # blank node

    # python reference name -> GLOBAL_TERMS label of the predicate
    predicates = {
        'organism': 'in taxon',
        'description': 'description',
    }

    def __init__(self, *key_parts):
        self.item_id = self.make_id(type(self).__name__, *key_parts, anonymous=self.anonymous)

    @staticmethod
    def make_id(kind, *key_parts, anonymous=False):
        wordage = '|'.join([kind] + [str(part) for part in key_parts])
        if anonymous:
            return '_:' + GraphUtils.digest_id(wordage)
        return 'LEGFED:' + GraphUtils.digest_id(wordage)

    def label(self):
        return None

    def attributes(self):
        """
        :return: list of (property name, literal value)
        """
        return []

    def references(self):
        """
        :return: list of (property name, Item or None)
        """
        return []

    def collections(self):
        """
        :return: list of (property name, iterable of Item)
        """
        return []

    def dependents(self):
        """
        :return: owned entities to be emitted along with this one
        """
        return []

    def validate(self):
        missing = [
            field for field in self.required if getattr(self, field, None) is None]
        if missing:
            raise ValueError("{} '{}' is missing required {}".format(
                type(self).__name__, self.label() or self.item_id, ', '.join(missing)))

    def predicate(self, graph, name):
        if name in self.predicates:
            return graph.globaltt[self.predicates[name]]
        return vocab(name)

    def addToGraph(self, graph):
        model = Model(graph)
        model.addIndividualToGraph(self.item_id, self.label(), graph.globaltt[self.term])
        for (name, value) in self.attributes():
            model.addLiteral(self.item_id, self.predicate(graph, name), value)
        for (name, item) in self.references():
            if item is not None:
                graph.addTriple(
                    self.item_id, self.predicate(graph, name), item.item_id,
                    object_is_literal=False)
        for (name, items) in self.collections():
            for item in items:
                graph.addTriple(
                    self.item_id, self.predicate(graph, name), item.item_id,
                    object_is_literal=False)

    def __repr__(self):
        return '<{} {}>'.format(type(self).__name__, self.label() or self.item_id)


class NamedItem(Item):
    """
    An entity known by a primary identifier.
    Where identifiers are only unique within a taxon (organism_scoped)
    the taxon is part of the identity, so Chr01 of two species are two nodes.
    """

    required = ('primary_identifier',)
    organism_scoped = False

    def __init__(self, primary_identifier, organism=None, description=None):
        if primary_identifier is None or str(primary_identifier).strip() == '':
            raise ValueError("{} needs a primary identifier".format(type(self).__name__))
        super().__init__(*self.identity(primary_identifier, organism))
        self.primary_identifier = primary_identifier
        self.organism = organism
        self.description = description

    @classmethod
    def identity(cls, primary_identifier, organism=None):
        """
        :return: the key parts the item id is made from
        """
        if cls.organism_scoped and organism is not None:
            return (organism.taxon_id, primary_identifier)
        return (primary_identifier,)

    def label(self):
        return str(self.primary_identifier)

    def attributes(self):
        return [
            ('primaryIdentifier', self.primary_identifier),
            ('description', self.description)]

    def references(self):
        return [('organism', self.organism)]
