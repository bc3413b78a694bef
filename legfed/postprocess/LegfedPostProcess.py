import logging

from legfed.config import get_config
from legfed.sources.Source import Source
from legfed.models.GenomicFeature import Gene, Polypeptide
from legfed.models.Genetic import QTL
from legfed.utils.SpanAccumulator import SpanAccumulator
from legfed.utils.IntervalJoin import find_overlaps

LOG = logging.getLogger(__name__)


def scoped_id(entity):
    """
    (taxon, primary identifier), the identity of a feature across passes
    """
    if entity.organism is None:
        return ('', entity.primary_identifier)
    return (entity.organism.taxon_id, entity.primary_identifier)


class LegfedPostProcess(Source):
    """
    Relate genes to the QTLs whose genomic span they overlap.

    Runs over the passes loaded in the same run. Markers, QTLs, genes and
    chromosomes are merged across passes on (taxon, primary identifier),
    so a QTL's markers may come from one file and their chromosome locations
    from another, while Chr01 of one species never meets Chr01 of another.

    A QTL's span on a chromosome runs from the lowest start to the highest
    end of its markers located there; QTLs with fewer markers than
    `min_markers` (qtl_span in conf.yaml) have no span.
    Every overlapping gene and QTL are related both ways, and only
    that relation (with the identity of each end) is written.

    Transcripts are checked too: an mRNA or exon without a gene is an error,
    and a polypeptide gets the gene of the mRNA it derives from.

    """

    def __init__(
            self, sources, graph_type='rdf_graph', are_bnodes_skolemized=False,
            min_markers=None, **kwargs):
        super().__init__(graph_type, are_bnodes_skolemized, 'legfedpostprocess', **kwargs)
        self.sources = list(sources)
        if min_markers is None:
            min_markers = get_config()['qtl_span']['min_markers']
        self.min_markers = min_markers
        self.genes = self.registry('gene', Gene)
        self.qtls = self.registry('qtl', QTL)
        self.polypeptides = self.registry('polypeptide', Polypeptide)
        self.report = {}

    def fetch(self):
        LOG.info("%s works on the loaded passes, nothing to fetch", self.name)

    def merged(self, kind):
        """
        every entity of one kind across the passes
        :return: dict (taxon, primary identifier) -> list of entities
        """
        merged = {}
        for source in self.sources:
            registry = source.registries.get(kind)
            if registry is None:
                continue
            for entity in registry:
                merged.setdefault(scoped_id(entity), []).append(entity)
        return merged

    @staticmethod
    def chromosome_interval(entities):
        """
        the first chromosome location among merged entities
        :return: ((taxon, chromosome primary identifier), start, end) or None
        """
        for entity in entities:
            location = entity.chromosome_location
            if location is not None:
                return (scoped_id(location.located_on), location.start, location.end)
        return None

    def parse(self, limit=None):
        qtls = self.merged('qtl')
        markers = self.merged('genetic_marker')
        genes = self.merged('gene')
        LOG.info(
            "Merged %i QTLs, %i markers, %i genes from %i passes",
            len(qtls), len(markers), len(genes), len(self.sources))

        accumulator = SpanAccumulator(self.min_markers)
        unlocated_markers = set()
        for qtl_key in sorted(qtls):
            marker_keys = set()
            for qtl in qtls[qtl_key]:
                marker_keys.update(
                    scoped_id(marker) for marker in qtl.associated_genetic_markers)
            for marker_key in sorted(marker_keys):
                interval = self.chromosome_interval(markers.get(marker_key, ()))
                if interval is None:
                    unlocated_markers.add(marker_key)
                    continue
                (chromosome, start, end) = interval
                accumulator.accumulate(qtl_key, chromosome, start, end, marker_key[1])
        spans = accumulator.finalize()

        gene_intervals = []
        unlocated_genes = 0
        for gene_key in sorted(genes):
            interval = self.chromosome_interval(genes[gene_key])
            if interval is None:
                unlocated_genes += 1
                continue
            gene_intervals.append((gene_key,) + interval)

        pairs = find_overlaps(spans, gene_intervals)
        for (gene_key, qtl_key) in sorted(pairs):
            if limit is not None and len(self.genes) >= limit:
                break
            gene, created = self.genes.get_or_create(
                gene_key[1], organism=genes[gene_key][0].organism)
            qtl, created = self.qtls.get_or_create(
                qtl_key[1], organism=qtls[qtl_key][0].organism)
            qtl.addOverlappingGene(gene)

        self.report = {
            'spans': len(spans),
            'overlaps': len(pairs),
            'markers_without_chromosome_location': len(unlocated_markers),
            'genes_without_location': unlocated_genes,
        }
        if unlocated_markers:
            LOG.warning(
                "%i markers associated with QTLs have no chromosome location",
                len(unlocated_markers))
        if unlocated_genes:
            LOG.warning("%i genes have no chromosome location", unlocated_genes)
        LOG.info(
            "%i QTL spans, %i gene/QTL overlaps", self.report['spans'],
            self.report['overlaps'])

        self.checkTranscripts()
        self.relatePolypeptides()
        self.emit()

    def checkTranscripts(self):
        """
        every mRNA and exon must belong to a gene, in one pass or another
        """
        mrnas_without_gene = []
        for (key, mrnas) in sorted(self.merged('mrna').items()):
            if all(mrna.gene is None for mrna in mrnas):
                LOG.error("mRNA %s (taxon %s) has no gene", key[1], key[0])
                mrnas_without_gene.append(key)
        exons_without_gene = []
        for (key, exons) in sorted(self.merged('exon').items()):
            if all(exon.geneOf() is None for exon in exons):
                LOG.error("exon %s (taxon %s) has no gene", key[1], key[0])
                exons_without_gene.append(key)
        self.report['mrnas_without_gene'] = len(mrnas_without_gene)
        self.report['exons_without_gene'] = len(exons_without_gene)

    def relatePolypeptides(self):
        """
        polypeptide.gene = polypeptide.mRNA.gene, where no pass says otherwise
        """
        related = 0
        for (key, polypeptides) in sorted(self.merged('polypeptide').items()):
            if any(polypeptide.gene is not None for polypeptide in polypeptides):
                continue
            genes = [
                polypeptide.mrna.gene for polypeptide in polypeptides
                if polypeptide.mrna is not None and polypeptide.mrna.gene is not None]
            if not genes:
                LOG.warning("polypeptide %s (taxon %s) has no gene", key[1], key[0])
                continue
            polypeptide, created = self.polypeptides.get_or_create(
                key[1], organism=polypeptides[0].organism)
            polypeptide.gene, created = self.genes.get_or_create(
                genes[0].primary_identifier, organism=genes[0].organism)
            related += 1
        self.report['polypeptides_related_to_gene'] = related
        LOG.info("%i polypeptides related to their gene", related)

    def process_file(self, path, limit=None):
        raise NotImplementedError("{} does not read files".format(self.name))
