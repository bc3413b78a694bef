import logging

from legfed.sources.Source import Source
from legfed.models.Organism import Strain
from legfed.models.Genetic import GeneticMarker, GWAS, GWASResult, Phenotype
from legfed.models.GenomicFeature import Supercontig
from legfed.models.Ontology import OntologyTerm

LOG = logging.getLogger(__name__)


class GWASFile(Source):
    """
    One genome wide association study per file, headers first:

        TaxonID                 3885
        Strain                  G19833
        Name                    Seed_weight_GWAS
        PlatformName            BARCBean6K_3
        PlatformDetails         Illumina BeadChip
        NumberLociTested        5398
        NumberGermplasmTested   237
        Assembly                G19833.gnm1
        PMID                    26041436
        Phenotype   OntologyTerm    Marker  pValue  Chromosome  Start   End
        seed weight TO:0000181      ss715639    1.2e-08 Chr02   102930  102930

    Markers are SNPs when start equals end, SSRs otherwise. The coordinates
    may be on another assembly, so markers only reference their sequence.

    """

    columns = ['Phenotype', 'OntologyTerm', 'Marker', 'pValue', 'Chromosome', 'Start', 'End']

    # header key -> GWAS attribute
    fields = {
        'platformname': 'platform_name',
        'platformdetails': 'platform_details',
        'numberlocitested': 'number_loci_tested',
        'numbergermplasmtested': 'number_germplasm_tested',
    }

    def __init__(self, graph_type='rdf_graph', are_bnodes_skolemized=False, **kwargs):
        super().__init__(graph_type, are_bnodes_skolemized, 'gwasfile', **kwargs)
        self.strains = self.registry('strain', Strain)
        self.studies = self.registry('gwas', GWAS)
        self.markers = self.registry('genetic_marker', GeneticMarker)
        self.phenotypes = self.registry('phenotype', Phenotype)
        self.ontology_terms = self.registry('ontology_term', OntologyTerm)

    def process_file(self, path, limit=None):
        organism = None
        strain_name = None
        gwas_name = None
        header = {}
        publications = []
        strain = None
        gwas = None
        row_count = 0

        for (line_num, line) in self.data_lines(path):
            parts = [part.strip() for part in line.split('\t')]
            key = parts[0].lower()
            if key == 'taxonid':
                organism = self.getOrganism(self.header_value(parts, path, line_num))
            elif key == 'strain':
                strain_name = self.header_value(parts, path, line_num)
            elif key == 'name':
                gwas_name = self.header_value(parts, path, line_num)
            elif key in self.fields:
                header[self.fields[key]] = self.header_value(parts, path, line_num)
            elif key == 'assembly':
                pass
            elif key == 'pmid':
                publications.append(self.getPublication(
                    pubmed_id=self.header_value(parts, path, line_num)))
            elif key == 'doi':
                publications.append(self.getPublication(
                    doi=self.header_value(parts, path, line_num)))
            elif key == 'phenotype':
                self.check_fileheader(self.columns, parts)
            else:
                if limit is not None and row_count >= limit:
                    break
                row_count += 1
                if gwas is None:
                    (strain, gwas) = self.getStudy(
                        organism, strain_name, gwas_name, header, publications, path, line_num)
                if len(parts) != len(self.columns):
                    LOG.warning(
                        "%s line %i: expected %i columns, skipping: %s",
                        path, line_num, len(self.columns), line)
                    continue
                self._process_row(parts, gwas, strain, publications, path, line_num)

        LOG.info("%s: %i GWAS results", path, row_count)

    def getStudy(self, organism, strain_name, gwas_name, header, publications, path, line_num):
        """
        the study of a file, made once its headers are all read
        :return: (strain, gwas)
        """
        for (value, what) in (
                (organism, 'TaxonID'), (strain_name, 'Strain'), (gwas_name, 'Name')):
            if value is None:
                raise ValueError(
                    "{} line {}: {} must be given before the results".format(
                        path, line_num, what))
        strain, created = self.strains.get_or_create(strain_name, organism=organism)
        gwas, created = self.studies.get_or_create(gwas_name, organism=organism)
        gwas.strain = strain
        for (attribute, value) in header.items():
            setattr(gwas, attribute, value)
        for publication in publications:
            gwas.publications.add(publication)
        return strain, gwas

    def _process_row(self, parts, gwas, strain, publications, path, line_num):
        (phenotype_name, term_id, marker_name, p_value, seqid, start, end) = parts
        try:
            p_value = float(p_value) if p_value != '' else None
            start = int(start)
            end = int(end)
        except ValueError:
            LOG.warning("%s line %i: bad p-value or position, skipping", path, line_num)
            return

        marker, created = self.markers.get_or_create(marker_name, organism=gwas.organism)
        if created:
            marker.strain = strain
            marker.type = 'SNP' if start == end else 'SSR'
            sequence = self.getSequence(seqid, gwas.organism, strain)
            if isinstance(sequence, Supercontig):
                marker.supercontig = sequence
            else:
                marker.chromosome = sequence

        phenotype, created = self.phenotypes.get_or_create(phenotype_name)
        for publication in publications:
            phenotype.publications.add(publication)
        if term_id != '':
            ontology_term, created = self.ontology_terms.get_or_create(term_id)
            phenotype.annotate(ontology_term)

        if p_value is not None and p_value <= 0:
            p_value = None
        GWASResult(gwas, phenotype, marker, p_value)
