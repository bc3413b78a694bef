import logging

from legfed.models.Item import Item, ItemSet, NamedItem
from legfed.models.GenomicFeature import Feature

LOG = logging.getLogger(__name__)

ORTHOLOGUE = 'orthologue'
PARALOGUE = 'paralogue'
SAME_GENE_FAMILY = 'sameGeneFamily'

# homologue type -> GLOBAL_TERMS label of the gene to gene relation
HOMOLOGY_RELATION = {
    ORTHOLOGUE: 'in orthology relationship with',
    PARALOGUE: 'in paralogy relationship with',
    SAME_GENE_FAMILY: 'in homology relationship with',
}


def homologue_type(organism, other_organism):
    """
    Two genes of one gene family are paralogues within an organism
    and orthologues across organisms.
    Without both organisms nothing more than family membership is known.
    """
    if organism is None or other_organism is None:
        return SAME_GENE_FAMILY
    if organism.item_id == other_organism.item_id:
        return PARALOGUE
    return ORTHOLOGUE


class GeneFamily(NamedItem):

    term = 'gene family'

    def __init__(self, primary_identifier, description=None):
        super().__init__(primary_identifier, None, description)
        self.consensus_region = None
        self.genes = ItemSet()

    def addGene(self, gene):
        self.genes.add(gene)
        gene.gene_family = self

    def references(self):
        return super().references() + [('consensusRegion', self.consensus_region)]

    def collections(self):
        return super().collections() + [('genes', self.genes)]


class ConsensusRegion(Feature):
    """
    '<gene family>-consensus'
    """

    term = 'consensus_region'

    def __init__(self, primary_identifier, organism=None):
        super().__init__(primary_identifier, organism)
        self.gene_family = None
        self.residues = None

    @staticmethod
    def gene_family_name(primary_identifier):
        return primary_identifier.split('-')[0]

    def setGeneFamily(self, gene_family):
        self.gene_family = gene_family
        gene_family.consensus_region = self

    def attributes(self):
        return super().attributes() + [('residues', self.residues)]

    def references(self):
        return super().references() + [('geneFamily', self.gene_family)]


class Homologue(Item):
    """
    Gene -> homologous gene, registered in gene.homologues on creation.
    """

    term = 'homologue'
    required = ('gene', 'homologue', 'type')

    def __init__(self, gene, homologue, gene_family=None, type=None):
        if gene.item_id == homologue.item_id:
            raise ValueError("{} can not be its own homologue".format(gene.primary_identifier))
        super().__init__(gene.item_id, homologue.item_id)
        self.gene = gene
        self.homologue = homologue
        self.gene_family = gene_family
        if type is None:
            type = homologue_type(gene.organism, homologue.organism)
        self.type = type
        gene.homologues.add(self)

    def label(self):
        return '{} {} {}'.format(
            self.gene.primary_identifier, self.type, self.homologue.primary_identifier)

    def attributes(self):
        return [('type', self.type)]

    def references(self):
        return [
            ('gene', self.gene),
            ('homologue', self.homologue),
            ('geneFamily', self.gene_family)]

    def addToGraph(self, graph):
        super().addToGraph(graph)
        graph.addTriple(
            self.gene.item_id, graph.globaltt[HOMOLOGY_RELATION[self.type]],
            self.homologue.item_id, object_is_literal=False)
