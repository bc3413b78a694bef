import logging

from legfed.sources.Source import Source
from legfed.models.Genetic import GeneticMarker, LinkageGroup

LOG = logging.getLogger(__name__)


class MarkerLinkageGroupFile(Source):
    """
    Marker positions (cM) on linkage groups:

        TaxonID     3885
        Bng060      BAT93_x_JaloEEP558_1    0.0

    """

    def __init__(self, graph_type='rdf_graph', are_bnodes_skolemized=False, **kwargs):
        super().__init__(graph_type, are_bnodes_skolemized, 'markerlinkagegroupfile', **kwargs)
        self.markers = self.registry('genetic_marker', GeneticMarker)
        self.linkage_groups = self.registry('linkage_group', LinkageGroup)

    def process_file(self, path, limit=None):
        taxon_id = None
        variety = None
        organism = None
        row_count = 0

        for (line_num, line) in self.data_lines(path):
            parts = [part.strip() for part in line.split('\t')]
            key = parts[0].lower()
            if key == 'taxonid':
                taxon_id = self.header_value(parts, path, line_num)
            elif key == 'variety':
                variety = self.header_value(parts, path, line_num)
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
                if len(parts) != 3:
                    LOG.warning(
                        "%s line %i: expected three columns, skipping: %s",
                        path, line_num, line)
                    continue
                (marker_name, lg_name, position) = parts
                try:
                    position = float(position)
                except ValueError:
                    LOG.warning(
                        "%s line %i: bad position '%s', skipping", path, line_num, position)
                    continue
                marker, created = self.markers.get_or_create(marker_name, organism=organism)
                linkage_group, created = self.linkage_groups.get_or_create(
                    lg_name, organism=organism)
                marker.setLinkageGroupPosition(linkage_group, position)

        LOG.info("%s: %i marker positions", path, row_count)
