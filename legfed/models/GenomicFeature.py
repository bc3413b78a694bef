import logging
import re

from legfed.models.Item import Item, ItemSet, NamedItem
from legfed.models.Model import Model

LOG = logging.getLogger(__name__)


class Feature(NamedItem):
    """
    Dealing with genomic features here.
    A feature may have a location on a chromosome and/or one on a supercontig,
    at most one of each. Locations are faldo:Regions.

    """

    organism_scoped = True

    def __init__(
            self, primary_identifier, organism=None, secondary_identifier=None,
            description=None):
        super().__init__(primary_identifier, organism, description)
        self.secondary_identifier = secondary_identifier
        self.strain = None
        self.chado_id = None
        self.length = None
        self.chromosome = None
        self.chromosome_location = None
        self.supercontig = None
        self.supercontig_location = None

    def setLocation(self, sequence, start, end, strand=None):
        """
        Locate this feature on a Chromosome or Supercontig,
        replacing any earlier location on the same kind of sequence.
        :return: the Location
        """
        location = Location(self, sequence, start, end, strand)
        if isinstance(sequence, Supercontig):
            self.supercontig = sequence
            self.supercontig_location = location
        else:
            self.chromosome = sequence
            self.chromosome_location = location
        return location

    def attributes(self):
        return super().attributes() + [
            ('secondaryIdentifier', self.secondary_identifier),
            ('chadoFeatureId', self.chado_id),
            ('length', self.length)]

    def references(self):
        return super().references() + [
            ('strain', self.strain),
            ('chromosome', self.chromosome),
            ('chromosomeLocation', self.chromosome_location),
            ('supercontig', self.supercontig),
            ('supercontigLocation', self.supercontig_location)]

    def dependents(self):
        return [
            location for location in (self.chromosome_location, self.supercontig_location)
            if location is not None]


class Chromosome(Feature):
    term = 'chromosome'
    required = ('primary_identifier', 'organism')


class Supercontig(Feature):
    term = 'supercontig'
    required = ('primary_identifier', 'organism')


def sequence_class(seqid):
    """
    Scaffolds and contigs are Supercontigs, everything else a Chromosome
    Phvul.002 -> Chromosome, scaffold_98 -> Supercontig
    """
    if re.search(r'scaffold|contig', seqid, re.IGNORECASE):
        return Supercontig
    return Chromosome


def normalize_strand(strand):
    """
    :return: 1, -1, 0 for both/unknown strand, None when not given
    """
    if strand is None:
        return None
    strand = str(strand).strip()
    if strand in ('+', '1', '+1'):
        return 1
    if strand in ('-', '-1'):
        return -1
    if strand in ('.', '', '0', '?'):
        return 0
    LOG.warning("strand type could not be mapped: %s", strand)
    return 0


class Location(Item):
    """
    (sequence, start, end, strand) of a feature, 1-based inclusive.
    start <= end always holds; reversed coordinates are swapped.
    The location triples follow faldo:
        feature faldo:location region
        region a faldo:Region
            faldo:begin start_position
            faldo:end end_position
        start_position a faldo:ExactPosition (and strand position type)
            faldo:position Integer(numeric position)
            faldo:reference sequence

    """

    term = 'Region'
    required = ('feature', 'located_on', 'start', 'end')
    anonymous = True

    def __init__(self, feature, located_on, start, end, strand=None):
        super().__init__(feature.item_id, located_on.item_id)
        start = int(start)
        end = int(end)
        if start > end:
            LOG.warning(
                "%s location %s..%s on %s is reversed, swapping",
                feature.primary_identifier, start, end, located_on.primary_identifier)
            start, end = end, start
        self.feature = feature
        self.located_on = located_on
        self.start = start
        self.end = end
        self.strand = normalize_strand(strand)

    def label(self):
        return '{}:{}-{}'.format(self.located_on.primary_identifier, self.start, self.end)

    def attributes(self):
        return [('strand', self.strand)]

    def references(self):
        return [('locatedOn', self.located_on), ('feature', self.feature)]

    def _strandType(self, globaltt):
        if self.strand == 1:
            return globaltt['plus_strand']
        if self.strand == -1:
            return globaltt['minus_strand']
        if self.strand == 0:
            return globaltt['both_strand']
        return None

    def addPositionToGraph(self, graph, which, coordinate):
        model = Model(graph)
        pos_id = self.make_id(
            'Position', self.located_on.item_id, coordinate, self.strand, anonymous=True)
        model.addType(pos_id, graph.globaltt['ExactPosition'])
        strand_type = self._strandType(graph.globaltt)
        if strand_type is not None:
            model.addType(pos_id, strand_type)
        graph.addTriple(
            pos_id, graph.globaltt['position'], coordinate, object_is_literal=True,
            literal_type='xsd:integer')
        graph.addTriple(
            pos_id, graph.globaltt['reference'], self.located_on.item_id,
            object_is_literal=False)
        graph.addTriple(
            self.item_id, graph.globaltt[which], pos_id, object_is_literal=False)

    def addToGraph(self, graph):
        super().addToGraph(graph)
        graph.addTriple(
            self.feature.item_id, graph.globaltt['location'], self.item_id,
            object_is_literal=False)
        self.addPositionToGraph(graph, 'begin', self.start)
        self.addPositionToGraph(graph, 'end', self.end)


class Gene(Feature):

    term = 'gene'

    def __init__(self, primary_identifier, organism=None, secondary_identifier=None,
                 description=None):
        super().__init__(primary_identifier, organism, secondary_identifier, description)
        self.gene_family = None
        self.spanning_qtls = ItemSet()
        self.homologues = ItemSet()
        self.mrnas = ItemSet()

    def addSpanningQTL(self, qtl):
        qtl.addOverlappingGene(self)

    def references(self):
        return super().references() + [('geneFamily', self.gene_family)]

    def collections(self):
        return super().collections() + [
            ('spanningQTLs', self.spanning_qtls),
            ('mRNAs', self.mrnas),
            ('homologues', self.homologues)]

    def dependents(self):
        return super().dependents() + list(self.homologues)


class MRNA(Feature):

    term = 'mRNA'

    def __init__(self, primary_identifier, organism=None, secondary_identifier=None,
                 description=None):
        super().__init__(primary_identifier, organism, secondary_identifier, description)
        self.gene = None
        self.exons = ItemSet()

    def setGene(self, gene):
        self.gene = gene
        gene.mrnas.add(self)

    def references(self):
        return super().references() + [('gene', self.gene)]

    def collections(self):
        return super().collections() + [('exons', self.exons)]


class Exon(Feature):
    """
    Part of one or more transcripts; its gene is the gene of those transcripts
    unless the exon names a gene parent itself.
    """

    term = 'exon'

    def __init__(self, primary_identifier, organism=None, secondary_identifier=None,
                 description=None):
        super().__init__(primary_identifier, organism, secondary_identifier, description)
        self.gene = None
        self.mrnas = ItemSet()

    def addMRNA(self, mrna):
        self.mrnas.add(mrna)
        mrna.exons.add(self)

    def geneOf(self):
        if self.gene is not None:
            return self.gene
        for mrna in self.mrnas:
            if mrna.gene is not None:
                return mrna.gene
        return None

    def references(self):
        return super().references() + [('gene', self.gene)]

    def collections(self):
        return super().collections() + [('mRNAs', self.mrnas)]


class Polypeptide(Feature):
    """
    Derives from an mRNA; the gene is known through that mRNA.
    """

    term = 'polypeptide'

    def __init__(self, primary_identifier, organism=None, secondary_identifier=None,
                 description=None):
        super().__init__(primary_identifier, organism, secondary_identifier, description)
        self.mrna = None
        self.gene = None

    def references(self):
        return super().references() + [('mRNA', self.mrna), ('gene', self.gene)]
