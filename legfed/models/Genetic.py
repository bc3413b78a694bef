import logging

from legfed.models.Item import Item, ItemSet, NamedItem
from legfed.models.GenomicFeature import Feature
from legfed.models.Ontology import Annotated
from legfed.utils.units import round_half_up

LOG = logging.getLogger(__name__)


class LinkageGroup(Feature):
    """
    A genetic map's analogue of a chromosome, positions in cM
    """

    term = 'linkage_group'

    def __init__(self, primary_identifier, organism=None, secondary_identifier=None):
        super().__init__(primary_identifier, organism, secondary_identifier)
        self.number = None
        self.genetic_map = None
        self.genetic_markers = ItemSet()
        self.qtls = ItemSet()

    def setGeneticMap(self, genetic_map):
        self.genetic_map = genetic_map
        genetic_map.linkage_groups.add(self)

    def addGeneticMarker(self, marker):
        self.genetic_markers.add(marker)
        marker.linkage_groups.add(self)

    def addQTL(self, qtl):
        self.qtls.add(qtl)
        qtl.linkage_groups.add(self)

    def extendTo(self, position):
        """
        a linkage group is at least as long as its farthest position
        """
        if position is not None and (self.length is None or position > self.length):
            self.length = position

    def attributes(self):
        return super().attributes() + [('number', self.number)]

    def references(self):
        return super().references() + [('geneticMap', self.genetic_map)]

    def collections(self):
        return super().collections() + [
            ('geneticMarkers', self.genetic_markers),
            ('QTLs', self.qtls)]


class LinkageGroupPosition(Item):
    """
    Where a marker sits on a linkage group
    """

    term = 'linkage group position'
    required = ('linkage_group', 'position')
    anonymous = True

    def __init__(self, marker, linkage_group, position):
        super().__init__(marker.item_id, linkage_group.item_id)
        self.marker = marker
        self.linkage_group = linkage_group
        self.position = float(position)

    def label(self):
        return '{}@{}:{}'.format(
            self.marker.primary_identifier, self.linkage_group.primary_identifier,
            self.position)

    def attributes(self):
        return [('position', self.position)]

    def references(self):
        return [('linkageGroup', self.linkage_group)]


class LinkageGroupRange(Item):
    """
    The span of a QTL on a linkage group.
    begin <= end holds however positions are folded in.
    """

    term = 'linkage group range'
    required = ('linkage_group', 'begin', 'end')
    anonymous = True

    def __init__(self, qtl, linkage_group, begin=None, end=None):
        super().__init__(qtl.item_id, linkage_group.item_id)
        self.qtl = qtl
        self.linkage_group = linkage_group
        self.begin = None
        self.end = None
        for position in (begin, end):
            if position is not None:
                self.include(position)

    def include(self, position):
        position = float(position)
        if self.begin is None or position < self.begin:
            self.begin = position
        if self.end is None or position > self.end:
            self.end = position

    @property
    def length(self):
        if self.begin is None:
            return None
        return round_half_up(self.end - self.begin, 2)

    def label(self):
        return '{}@{}:{}-{}'.format(
            self.qtl.primary_identifier, self.linkage_group.primary_identifier,
            self.begin, self.end)

    def attributes(self):
        return [('begin', self.begin), ('end', self.end), ('length', self.length)]

    def references(self):
        return [('linkageGroup', self.linkage_group)]


class GeneticMarker(Feature):

    term = 'genetic_marker'

    def __init__(self, primary_identifier, organism=None, secondary_identifier=None):
        super().__init__(primary_identifier, organism, secondary_identifier)
        self.type = None
        self.motif = None
        self.qtls = ItemSet()
        self.linkage_groups = ItemSet()
        self.linkage_group_positions = {}
        self.genetic_maps = ItemSet()

    def setLinkageGroupPosition(self, linkage_group, position):
        """
        One position per linkage group, a later one replaces it.
        :return: the LinkageGroupPosition
        """
        lgp = LinkageGroupPosition(self, linkage_group, position)
        self.linkage_group_positions[linkage_group.item_id] = lgp
        linkage_group.addGeneticMarker(self)
        linkage_group.extendTo(lgp.position)
        return lgp

    def attributes(self):
        return super().attributes() + [('type', self.type), ('motif', self.motif)]

    def collections(self):
        return super().collections() + [
            ('QTLs', self.qtls),
            ('linkageGroups', self.linkage_groups),
            ('linkageGroupPositions', self.linkage_group_positions.values()),
            ('geneticMaps', self.genetic_maps)]

    def dependents(self):
        return super().dependents() + list(self.linkage_group_positions.values())


class QTL(Annotated, Feature):

    term = 'QTL'

    def __init__(self, primary_identifier, organism=None, secondary_identifier=None):
        super().__init__(primary_identifier, organism, secondary_identifier)
        self.phenotype = None
        self.favorable_allele_source = None
        self.associated_genetic_markers = ItemSet()
        self.overlapping_genes = ItemSet()
        self.linkage_groups = ItemSet()
        self.linkage_group_ranges = {}
        self.publications = ItemSet()
        self.mapping_populations = ItemSet()
        self.genotyping_studies = ItemSet()
        self.genetic_maps = ItemSet()
        self.ontology_annotations = {}

    def addAssociatedGeneticMarker(self, marker):
        self.associated_genetic_markers.add(marker)
        marker.qtls.add(self)

    def addOverlappingGene(self, gene):
        self.overlapping_genes.add(gene)
        gene.spanning_qtls.add(self)

    def linkageGroupRange(self, linkage_group):
        """
        get or create the range of this QTL on a linkage group
        """
        lgr = self.linkage_group_ranges.get(linkage_group.item_id)
        if lgr is None:
            lgr = LinkageGroupRange(self, linkage_group)
            self.linkage_group_ranges[linkage_group.item_id] = lgr
            linkage_group.addQTL(self)
        return lgr

    def setPhenotype(self, phenotype):
        self.phenotype = phenotype
        phenotype.qtls.add(self)

    def references(self):
        return super().references() + [
            ('phenotype', self.phenotype),
            ('favorableAlleleSource', self.favorable_allele_source)]

    def collections(self):
        return super().collections() + [
            ('associatedGeneticMarkers', self.associated_genetic_markers),
            ('overlappingGenes', self.overlapping_genes),
            ('linkageGroups', self.linkage_groups),
            ('linkageGroupRanges', self.linkage_group_ranges.values()),
            ('publications', self.publications),
            ('mappingPopulations', self.mapping_populations),
            ('genotypingStudies', self.genotyping_studies),
            ('geneticMaps', self.genetic_maps),
            ('ontologyAnnotations', self.ontology_annotations.values())]

    def dependents(self):
        return super().dependents() + list(self.linkage_group_ranges.values()) + \
            list(self.ontology_annotations.values())


class GeneticMap(NamedItem):

    term = 'genetic map'
    organism_scoped = True

    def __init__(self, primary_identifier, organism=None, description=None):
        super().__init__(primary_identifier, organism, description)
        self.unit = 'cM'
        self.chado_id = None
        self.linkage_groups = ItemSet()
        self.genetic_markers = ItemSet()
        self.qtls = ItemSet()
        self.publications = ItemSet()
        self.mapping_populations = ItemSet()

    def addGeneticMarker(self, marker):
        self.genetic_markers.add(marker)
        marker.genetic_maps.add(self)

    def addQTL(self, qtl):
        self.qtls.add(qtl)
        qtl.genetic_maps.add(self)

    def attributes(self):
        return super().attributes() + [('unit', self.unit), ('chadoId', self.chado_id)]

    def collections(self):
        return super().collections() + [
            ('linkageGroups', self.linkage_groups),
            ('geneticMarkers', self.genetic_markers),
            ('QTLs', self.qtls),
            ('publications', self.publications),
            ('mappingPopulations', self.mapping_populations)]


class MappingPopulation(NamedItem):
    """
    Named after its parents, 'p1_x_p2'
    """

    term = 'mapping population'
    organism_scoped = True

    def __init__(self, primary_identifier, organism=None, description=None):
        super().__init__(primary_identifier, organism, description)
        self.parents = ItemSet()
        self.publications = ItemSet()

    @staticmethod
    def parent_names(name):
        """
        'BAT93_x_JaloEEP558' -> ['BAT93', 'JaloEEP558']
        """
        if '_x_' not in name:
            return []
        return [part for part in name.split('_x_') if part]

    def collections(self):
        return super().collections() + [
            ('parents', self.parents),
            ('publications', self.publications)]


class GenotypingStudy(NamedItem):

    term = 'genotyping study'
    organism_scoped = True

    def __init__(self, primary_identifier, organism=None, description=None):
        super().__init__(primary_identifier, organism, description)
        self.publications = ItemSet()

    def collections(self):
        return super().collections() + [('publications', self.publications)]


class Phenotype(Annotated, NamedItem):

    term = 'phenotype'

    def __init__(self, primary_identifier, description=None):
        super().__init__(primary_identifier, None, description)
        self.qtls = ItemSet()
        self.publications = ItemSet()
        self.ontology_annotations = {}

    def collections(self):
        return super().collections() + [
            ('QTLs', self.qtls),
            ('publications', self.publications),
            ('ontologyAnnotations', self.ontology_annotations.values())]

    def dependents(self):
        return list(self.ontology_annotations.values())


class GWAS(NamedItem):
    """
    A genome wide association study on one strain of an organism
    """

    term = 'GWAS'
    required = ('primary_identifier', 'organism')
    organism_scoped = True

    def __init__(self, primary_identifier, organism=None, description=None):
        super().__init__(primary_identifier, organism, description)
        self.strain = None
        self.platform_name = None
        self.platform_details = None
        self.number_loci_tested = None
        self.number_germplasm_tested = None
        self.publications = ItemSet()
        self.results = ItemSet()

    def attributes(self):
        return super().attributes() + [
            ('platformName', self.platform_name),
            ('platformDetails', self.platform_details),
            ('numberLociTested', self.number_loci_tested),
            ('numberGermplasmTested', self.number_germplasm_tested)]

    def references(self):
        return super().references() + [('strain', self.strain)]

    def collections(self):
        return super().collections() + [
            ('publications', self.publications),
            ('results', self.results)]

    def dependents(self):
        return list(self.results)


class GWASResult(Item):
    """
    A phenotype associated with a marker in a study, unique on all three
    """

    term = 'GWAS result'
    required = ('study', 'phenotype', 'marker')

    def __init__(self, study, phenotype, marker, p_value=None):
        super().__init__(study.item_id, phenotype.item_id, marker.item_id)
        self.study = study
        self.phenotype = phenotype
        self.marker = marker
        self.p_value = p_value
        study.results.add(self)

    def label(self):
        return '{} {}'.format(self.phenotype.label(), self.marker.label())

    def attributes(self):
        return [('pValue', self.p_value)]

    def references(self):
        return [
            ('study', self.study),
            ('phenotype', self.phenotype),
            ('marker', self.marker)]
