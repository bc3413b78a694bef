import logging

from legfed.sources.Source import Source
from legfed.models.Organism import Strain
from legfed.models.Genetic import (
    GeneticMap, GeneticMarker, LinkageGroup, MappingPopulation, QTL)
from legfed.models.Reference import Publication

LOG = logging.getLogger(__name__)


class GeneticMapFile(Source):
    """
    Genetic maps as tab delimited files, headers first:

        TaxonID     3885
        Strain      G19833
        GeneticMap  BAT93_x_JaloEEP558
        PMID        15565285
        Parents     BAT93   JaloEEP558
        Marker  LG  Type    Position    QTL     Traits
        Bng060  1   RFLP    0.0
        D1861   1   RAPD    12.4        SY1-1   seed yield

    `Parents` may carry the taxon ahead of the two parents.
    Linkage groups are named <map>_<lg>; a linkage group is as long as
    its farthest marker, a QTL spans the positions of its markers.

    """

    columns = ['Marker', 'LG', 'Type', 'Position', 'QTL', 'Traits']

    def __init__(self, graph_type='rdf_graph', are_bnodes_skolemized=False, **kwargs):
        super().__init__(graph_type, are_bnodes_skolemized, 'geneticmapfile', **kwargs)
        self.strains = self.registry('strain', Strain)
        self.genetic_maps = self.registry('genetic_map', GeneticMap)
        self.mapping_populations = self.registry('mapping_population', MappingPopulation)
        self.publications = self.registry(
            'publication', lambda key, **fields: Publication(pubmed_id=key))
        self.linkage_groups = self.registry('linkage_group', LinkageGroup)
        self.markers = self.registry('genetic_marker', GeneticMarker)
        self.qtls = self.registry('qtl', QTL)

    def process_file(self, path, limit=None):
        organism = None
        genetic_map = None
        mapping_population = None
        publication = None
        strain = None
        taxon_id = None
        row_count = 0

        for (line_num, line) in self.data_lines(path):
            parts = [part.strip() for part in line.split('\t')]
            key = parts[0].lower()
            if key == 'taxonid':
                taxon_id = self.header_value(parts, path, line_num)
                organism = self.getOrganism(taxon_id)
            elif key == 'strain':
                if organism is None:
                    raise ValueError(
                        "{} line {}: Strain given before TaxonID".format(path, line_num))
                strain, created = self.strains.get_or_create(
                    self.header_value(parts, path, line_num), organism=organism)
            elif key == 'geneticmap':
                genetic_map, created = self.genetic_maps.get_or_create(
                    self.header_value(parts, path, line_num), organism=organism)
            elif key == 'pmid':
                publication, created = self.publications.get_or_create(
                    self.header_value(parts, path, line_num))
            elif key == 'parents':
                parents = parts[1:]
                if len(parents) == 3 and parents[0].isdigit():
                    taxon_id = parents.pop(0)
                    if organism is None:
                        organism = self.getOrganism(taxon_id)
                if len(parents) != 2:
                    raise ValueError(
                        "{} line {}: Parents needs two parents: {}".format(
                            path, line_num, line))
                mapping_population = self.getMappingPopulation(parents, organism, path)
            elif key == 'marker':
                self.check_fileheader(self.columns[:4], parts[:4])
            else:
                if limit is not None and row_count >= limit:
                    break
                row_count += 1
                if organism is None:
                    raise ValueError(
                        "{} line {}: data row before TaxonID".format(path, line_num))
                if genetic_map is None:
                    raise ValueError(
                        "{} line {}: data row before GeneticMap".format(path, line_num))
                if publication is not None:
                    genetic_map.publications.add(publication)
                if mapping_population is not None:
                    genetic_map.mapping_populations.add(mapping_population)
                    if publication is not None:
                        mapping_population.publications.add(publication)
                self._process_row(parts, organism, strain, genetic_map, path, line_num)

        LOG.info("%s: %i marker rows", path, row_count)

    def getMappingPopulation(self, parents, organism, path):
        if organism is None:
            raise ValueError("{}: Parents given before TaxonID".format(path))
        mapping_population, created = self.mapping_populations.get_or_create(
            '_x_'.join(parents), organism=organism)
        if created:
            for name in parents:
                parent, _ = self.strains.get_or_create(name, organism=organism)
                mapping_population.parents.add(parent)
        return mapping_population

    def _process_row(self, parts, organism, strain, genetic_map, path, line_num):
        if len(parts) < 4:
            LOG.warning("%s line %i: too few columns, skipping: %s", path, line_num, parts)
            return
        (marker_name, lg_number, marker_type, position) = parts[:4]
        try:
            lg_number = int(lg_number)
            position = float(position)
        except ValueError:
            LOG.warning(
                "%s line %i: bad LG or Position, skipping: %s", path, line_num, parts)
            return
        qtl_name = parts[4] if len(parts) > 4 and parts[4] != '' else None
        traits = parts[5] if len(parts) > 5 and parts[5] != '' else None

        linkage_group, created = self.linkage_groups.get_or_create(
            '_'.join((genetic_map.primary_identifier, str(lg_number))),
            organism=organism)
        if created:
            linkage_group.number = lg_number
            linkage_group.setGeneticMap(genetic_map)

        marker, created = self.markers.get_or_create(marker_name, organism=organism)
        if created:
            marker.type = marker_type
            marker.strain = strain
        marker.setLinkageGroupPosition(linkage_group, position)
        genetic_map.addGeneticMarker(marker)

        if qtl_name is not None:
            qtl, created = self.qtls.get_or_create(qtl_name, organism=organism)
            if created:
                qtl.secondary_identifier = traits
                genetic_map.addQTL(qtl)
            qtl.linkageGroupRange(linkage_group).include(position)
            qtl.addAssociatedGeneticMarker(marker)
