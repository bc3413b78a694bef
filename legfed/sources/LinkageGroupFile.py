import logging

from legfed.sources.Source import Source
from legfed.models.Genetic import GeneticMap, LinkageGroup

LOG = logging.getLogger(__name__)


class LinkageGroupFile(Source):
    """
    Linkage groups of genetic maps, one per row, with an optional length in cM:

        TaxonID     3885
        Variety     G19833
        PMID        15565285
        BAT93_x_JaloEEP558_1    1   BAT93_x_JaloEEP558  102.0
        BAT93_x_JaloEEP558_2    2   BAT93_x_JaloEEP558

    The publication (PMID or DOI) goes to every genetic map of the file.

    """

    def __init__(self, graph_type='rdf_graph', are_bnodes_skolemized=False, **kwargs):
        super().__init__(graph_type, are_bnodes_skolemized, 'linkagegroupfile', **kwargs)
        self.genetic_maps = self.registry('genetic_map', GeneticMap)
        self.linkage_groups = self.registry('linkage_group', LinkageGroup)

    def process_file(self, path, limit=None):
        taxon_id = None
        variety = None
        organism = None
        publication = None
        row_count = 0

        for (line_num, line) in self.data_lines(path):
            parts = [part.strip() for part in line.split('\t')]
            key = parts[0].lower()
            if key == 'taxonid':
                taxon_id = self.header_value(parts, path, line_num)
            elif key == 'variety':
                variety = self.header_value(parts, path, line_num)
            elif key == 'pmid':
                publication = self.getPublication(
                    pubmed_id=self.header_value(parts, path, line_num))
            elif key == 'doi':
                publication = self.getPublication(doi=self.header_value(parts, path, line_num))
            else:
                if limit is not None and row_count >= limit:
                    break
                row_count += 1
                if organism is None:
                    if taxon_id is None:
                        raise ValueError(
                            "{} line {}: organism not set, supply TaxonID in header".format(
                                path, line_num))
                    organism = self.getOrganism(taxon_id, variety)
                if len(parts) < 3:
                    LOG.warning(
                        "%s line %i: expected at least three columns, skipping: %s",
                        path, line_num, line)
                    continue
                self._process_row(parts, organism, publication, path, line_num)

        LOG.info("%s: %i linkage groups", path, row_count)

    def _process_row(self, parts, organism, publication, path, line_num):
        (lg_name, number, map_name) = parts[:3]
        try:
            number = int(number)
            length = float(parts[3]) if len(parts) > 3 and parts[3] != '' else None
        except ValueError:
            LOG.warning("%s line %i: bad number or length, skipping", path, line_num)
            return

        genetic_map, created = self.genetic_maps.get_or_create(map_name, organism=organism)
        if publication is not None:
            genetic_map.publications.add(publication)

        linkage_group, created = self.linkage_groups.get_or_create(lg_name, organism=organism)
        linkage_group.number = number
        if length is not None and length > 0:
            linkage_group.length = length
        linkage_group.setGeneticMap(genetic_map)
