import logging

from legfed.config import get_config
from legfed.sources.Source import Source
from legfed.models.Organism import Strain
from legfed.models.Genetic import GenotypingStudy, MappingPopulation, Phenotype, QTL
from legfed.models.Reference import Publication
from legfed.utils.PubMedUtil import PubMedUtil

LOG = logging.getLogger(__name__)


class QTLFile(Source):
    """
    QTLs and their phenotypes from curated, per publication files.
    Key value header lines come first, then one QTL per line:

        TaxonID             3885
        PMID                15565285
        MappingPopulation   BAT93_x_JaloEEP558
        Description         F7 RILs
        SY1-1               seed yield

    A publication given only by Title (Journal, Year, Volume, Pages) is
    looked up in PubMed when `pubmed_lookup` is configured.

    """

    headers = (
        'taxonid', 'pmid', 'doi', 'title', 'journal', 'year', 'volume', 'pages',
        'mappingpopulation', 'genotypingstudy', 'description')

    def __init__(
            self, graph_type='rdf_graph', are_bnodes_skolemized=False,
            pubmed_lookup=None, pubmed=None, **kwargs):
        super().__init__(graph_type, are_bnodes_skolemized, 'qtlfile', **kwargs)
        if pubmed_lookup is None:
            pubmed_lookup = get_config()['pubmed_lookup']
        self.pubmed = None
        if pubmed_lookup:
            self.pubmed = pubmed if pubmed is not None else PubMedUtil()

        self.strains = self.registry('strain', Strain)
        self.mapping_populations = self.registry('mapping_population', MappingPopulation)
        self.genotyping_studies = self.registry('genotyping_study', GenotypingStudy)
        self.publications = self.registry(
            'publication', lambda key, **fields: Publication(**fields))
        self.qtls = self.registry('qtl', QTL)
        self.phenotypes = self.registry('phenotype', Phenotype)

    def process_file(self, path, limit=None):
        header = {}
        organism = None
        publication = None
        mapping_populations = []
        genotyping_study = None
        row_count = 0

        for (line_num, line) in self.data_lines(path):
            parts = [part.strip() for part in line.split('\t')]
            if len(parts) == 1:
                # a QTL without a trait
                parts.append('')
            if len(parts) != 2:
                LOG.warning(
                    "%s line %i: expected two columns, skipping: %s", path, line_num, line)
                continue
            (key, value) = parts
            lkey = key.lower()

            if lkey == 'taxonid':
                organism = self.getOrganism(self.header_value(parts, path, line_num))
            elif lkey in ('pmid', 'doi'):
                publication = self.getPublication(**{
                    ('pubmed_id' if lkey == 'pmid' else 'doi'): value})
            elif lkey == 'mappingpopulation':
                mapping_populations.append(self.getMappingPopulation(value, organism, path))
            elif lkey == 'genotypingstudy':
                genotyping_study, created = self.genotyping_studies.get_or_create(
                    value, organism=organism)
            elif lkey == 'description':
                for mapping_population in mapping_populations:
                    mapping_population.description = value
            elif lkey in self.headers:
                header[lkey] = value
            else:
                if limit is not None and row_count >= limit:
                    break
                row_count += 1
                if organism is None:
                    raise ValueError(
                        "{} line {}: data row before TaxonID".format(path, line_num))
                if publication is None and header.get('title'):
                    publication = self.publicationFromHeader(header)
                if publication is not None:
                    for mapping_population in mapping_populations:
                        mapping_population.publications.add(publication)
                    if genotyping_study is not None:
                        genotyping_study.publications.add(publication)

                qtl, created = self.qtls.get_or_create(key, organism=organism)
                if value != '':
                    phenotype, created = self.phenotypes.get_or_create(value)
                    qtl.setPhenotype(phenotype)
                if publication is not None:
                    qtl.publications.add(publication)
                for mapping_population in mapping_populations:
                    qtl.mapping_populations.add(mapping_population)
                if genotyping_study is not None:
                    qtl.genotyping_studies.add(genotyping_study)

        LOG.info("%s: %i QTL rows", path, row_count)

    def publicationFromHeader(self, header):
        pmid = None
        if self.pubmed is not None:
            pmid = self.pubmed.search(header.get('journal'), header.get('year'))
            if pmid is None:
                LOG.info("No single PubMed hit for '%s'", header['title'])
        publication = self.getPublication(pubmed_id=pmid, title=header['title'])
        if publication.title is None:
            publication.title = header['title']
        publication.journal = header.get('journal')
        publication.setYear(header.get('year'))
        publication.volume = header.get('volume')
        publication.pages = header.get('pages')
        return publication

    def getMappingPopulation(self, name, organism, path):
        if organism is None:
            raise ValueError("{}: MappingPopulation given before TaxonID".format(path))
        mapping_population, created = self.mapping_populations.get_or_create(
            name, organism=organism)
        if created:
            for parent_name in MappingPopulation.parent_names(name):
                parent, _ = self.strains.get_or_create(parent_name, organism=organism)
                mapping_population.parents.add(parent)
        return mapping_population
