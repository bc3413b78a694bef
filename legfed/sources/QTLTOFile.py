import logging

from legfed.sources.Source import Source
from legfed.models.Genetic import QTL
from legfed.models.Ontology import OntologyTerm

LOG = logging.getLogger(__name__)


class QTLTOFile(Source):
    """
    Trait Ontology annotations of QTLs, comma separated terms per QTL:

        TaxonID     3885
        SY1-1       TO:0000396,TO:0000445

    Columns past the second are ignored.

    """

    def __init__(self, graph_type='rdf_graph', are_bnodes_skolemized=False, **kwargs):
        super().__init__(graph_type, are_bnodes_skolemized, 'qtltofile', **kwargs)
        self.qtls = self.registry('qtl', QTL)
        self.ontology_terms = self.registry('ontology_term', OntologyTerm)

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
            if len(parts) < 2:
                LOG.warning("%s line %i: no terms for %s", path, line_num, parts[0])
                continue

            qtl, created = self.qtls.get_or_create(parts[0], organism=organism)
            for identifier in parts[1].split(','):
                identifier = identifier.strip()
                if identifier == '':
                    continue
                ontology_term, created = self.ontology_terms.get_or_create(identifier)
                qtl.annotate(ontology_term)

        LOG.info("%s: %i annotated QTLs", path, row_count)
