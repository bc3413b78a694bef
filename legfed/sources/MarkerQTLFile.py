import logging

from legfed.sources.Source import Source
from legfed.models.Genetic import GeneticMarker, QTL, Phenotype

LOG = logging.getLogger(__name__)


class MarkerQTLFile(Source):
    """
    Marker to QTL associations, one pair per row,
    optionally followed by the QTL's phenotype:

        TaxonID     3885
        Bng060      SY1-1   seed yield

    """

    def __init__(self, graph_type='rdf_graph', are_bnodes_skolemized=False, **kwargs):
        super().__init__(graph_type, are_bnodes_skolemized, 'markerqtlfile', **kwargs)
        self.markers = self.registry('genetic_marker', GeneticMarker)
        self.qtls = self.registry('qtl', QTL)
        self.phenotypes = self.registry('phenotype', Phenotype)

    def process_file(self, path, limit=None):
        organism = None
        row_count = 0
        for (line_num, line) in self.data_lines(path):
            parts = [part.strip() for part in line.split('\t')]
            if parts[0].lower() == 'taxonid':
                organism = self.getOrganism(self.header_value(parts, path, line_num))
                continue
            if limit is not None and row_count >= limit:
                break
            row_count += 1
            if organism is None:
                raise ValueError(
                    "{} line {}: organism not set, supply TaxonID in header".format(
                        path, line_num))
            if len(parts) < 2 or '' in parts[:2]:
                LOG.warning("%s line %i: expected marker and QTL: %s", path, line_num, line)
                continue

            marker, created = self.markers.get_or_create(parts[0], organism=organism)
            qtl, created = self.qtls.get_or_create(parts[1], organism=organism)
            if len(parts) > 2 and parts[2] != '' and qtl.phenotype is None:
                phenotype, created = self.phenotypes.get_or_create(parts[2])
                qtl.setPhenotype(phenotype)
            qtl.addAssociatedGeneticMarker(marker)

        LOG.info("%s: %i marker/QTL rows", path, row_count)
