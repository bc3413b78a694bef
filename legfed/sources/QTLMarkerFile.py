import logging

from legfed.sources.Source import Source
from legfed.models.Genetic import GeneticMarker, MappingPopulation, QTL
from legfed.models.Reference import Publication

LOG = logging.getLogger(__name__)

# stands in for "no marker" in the curated files
PLACEHOLDER_MARKER = 'ZZ'


class QTLMarkerFile(Source):
    """
    QTL to marker associations curated per publication:

        TaxonID             3885
        PMID                15565285
        MappingPopulation   BAT93_x_JaloEEP558
        QTLID   QTLName     Marker
        1       SY1-1       Bng060

    A file describes exactly one organism.

    """

    def __init__(self, graph_type='rdf_graph', are_bnodes_skolemized=False, **kwargs):
        super().__init__(graph_type, are_bnodes_skolemized, 'qtlmarkerfile', **kwargs)
        self.markers = self.registry('genetic_marker', GeneticMarker)
        self.qtls = self.registry('qtl', QTL)
        self.publications = self.registry(
            'publication', lambda key, **fields: Publication(pubmed_id=key))
        self.mapping_populations = self.registry('mapping_population', MappingPopulation)

    def process_file(self, path, limit=None):
        organism = None
        publications = []
        mapping_populations = []
        row_count = 0
        for (line_num, line) in self.data_lines(path):
            parts = [part.strip() for part in line.split('\t')]
            key = parts[0].lower()
            if key == 'taxonid':
                taxon_id = self.header_value(parts, path, line_num)
                if organism is not None and organism.taxon_id != taxon_id:
                    raise ValueError(
                        "{} line {}: more than one organism in one file ({}, {})".format(
                            path, line_num, organism.taxon_id, taxon_id))
                organism = self.getOrganism(taxon_id)
            elif key == 'pmid':
                publication, created = self.publications.get_or_create(
                    self.header_value(parts, path, line_num))
                publications.append(publication)
            elif key == 'mappingpopulation':
                mapping_population, created = self.mapping_populations.get_or_create(
                    self.header_value(parts, path, line_num), organism=organism)
                mapping_populations.append(mapping_population)
            elif key == 'qtlid':
                continue
            else:
                if limit is not None and row_count >= limit:
                    break
                row_count += 1
                if organism is None:
                    raise ValueError(
                        "{} line {}: data row before TaxonID".format(path, line_num))
                if len(parts) < 3:
                    LOG.warning("%s line %i: too few columns: %s", path, line_num, line)
                    continue
                (qtl_name, marker_name) = parts[1:3]
                if marker_name == PLACEHOLDER_MARKER or marker_name == '':
                    continue
                qtl, created = self.qtls.get_or_create(qtl_name, organism=organism)
                for publication in publications:
                    qtl.publications.add(publication)
                for mapping_population in mapping_populations:
                    qtl.mapping_populations.add(mapping_population)
                marker, created = self.markers.get_or_create(marker_name, organism=organism)
                qtl.addAssociatedGeneticMarker(marker)

        LOG.info("%s: %i QTL/marker rows", path, row_count)
