import logging

from legfed.models.Item import Item, ItemSet, NamedItem
from legfed.models.Model import Model

LOG = logging.getLogger(__name__)


def organism_key(taxon_id, variety=None):
    """
    '3885', 'G19833' -> '3885_G19833'
    """
    if variety is None or variety == '':
        return str(taxon_id)
    return '_'.join((str(taxon_id), variety))


class Organism(Item):
    """
    An organism is a taxon, optionally narrowed to a variety (cultivar).
    Immutable once created.
    """

    term = 'organism'
    required = ('taxon_id',)

    def __init__(self, taxon_id, variety=None, genus=None, species=None):
        if taxon_id is None or str(taxon_id).strip() == '':
            raise ValueError("Organism needs a taxon id")
        taxon_id = str(taxon_id).strip()
        if not taxon_id.isdigit():
            raise ValueError("'{}' is not an NCBI taxon id".format(taxon_id))
        super().__init__(organism_key(taxon_id, variety))
        self.taxon_id = taxon_id
        self.variety = variety
        self.genus = genus
        self.species = species

    @property
    def key(self):
        return organism_key(self.taxon_id, self.variety)

    @property
    def taxon_curie(self):
        return 'NCBITaxon:' + self.taxon_id

    def label(self):
        words = [word for word in (self.genus, self.species, self.variety) if word]
        if self.genus is None:
            words.insert(0, self.taxon_curie)
        return ' '.join(words)

    def attributes(self):
        return [
            ('taxonId', self.taxon_id),
            ('variety', self.variety),
            ('genus', self.genus),
            ('species', self.species)]

    def addToGraph(self, graph):
        super().addToGraph(graph)
        Model(graph).addType(self.item_id, self.taxon_curie)


class Strain(NamedItem):
    """
    A germplasm line, e.g. a mapping population parent
    """

    term = 'strain'
    required = ('primary_identifier', 'organism')
    organism_scoped = True

    def __init__(self, primary_identifier, organism=None, description=None):
        super().__init__(primary_identifier, organism, description)
        self.alternate_name = None
        self.patent_number = None
        self.url = None
        self.country = None
        self.publications = ItemSet()

    def attributes(self):
        return super().attributes() + [
            ('alternateName', self.alternate_name),
            ('patentNumber', self.patent_number),
            ('url', self.url),
            ('country', self.country)]

    def collections(self):
        return super().collections() + [('publications', self.publications)]
