import logging

from legfed.sources.Source import Source
from legfed.models.Organism import Strain

LOG = logging.getLogger(__name__)


class GermplasmFile(Source):
    """
    One strain per file, as key value lines:

        TaxonID             3885
        Strain              G19833
        AlternateStrainName Chaucha Chuga
        Description         Andean landrace
        Country             Peru
        PMID                15565285

    PMID may be repeated. A file lacking TaxonID or Strain loads nothing.

    """

    # key -> Strain attribute
    fields = {
        'alternatestrainname': 'alternate_name',
        'description': 'description',
        'patentnumber': 'patent_number',
        'url': 'url',
        'country': 'country',
    }

    def __init__(self, graph_type='rdf_graph', are_bnodes_skolemized=False, **kwargs):
        super().__init__(graph_type, are_bnodes_skolemized, 'germplasmfile', **kwargs)
        self.strains = self.registry('strain', Strain)

    def process_file(self, path, limit=None):
        taxon_id = None
        strain_name = None
        values = {}
        pubmed_ids = []

        for (line_num, line) in self.data_lines(path):
            parts = [part.strip() for part in line.split('\t')]
            key = parts[0].lower()
            if key == 'taxonid':
                taxon_id = self.header_value(parts, path, line_num)
            elif key == 'strain':
                strain_name = self.header_value(parts, path, line_num)
            elif key == 'pmid':
                pubmed_ids.append(self.header_value(parts, path, line_num))
            elif key in self.fields:
                values[self.fields[key]] = self.header_value(parts, path, line_num)
            else:
                LOG.warning("%s line %i: unknown key '%s', skipping", path, line_num, parts[0])

        if taxon_id is None or strain_name is None:
            LOG.warning("%s: TaxonID and Strain are both needed, nothing loaded", path)
            return

        strain, created = self.strains.get_or_create(
            strain_name, organism=self.getOrganism(taxon_id))
        for (attribute, value) in values.items():
            setattr(strain, attribute, value)
        for pubmed_id in pubmed_ids:
            strain.publications.add(self.getPublication(pubmed_id=pubmed_id))
        LOG.info("%s: strain %s", path, strain_name)
