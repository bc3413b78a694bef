import logging

from legfed.sources.Source import Source
from legfed.models.GenomicFeature import Chromosome
from legfed.models.Synteny import SyntenicRegion, SyntenyBlock
from legfed.utils.GFF3Record import GFF3Record

LOG = logging.getLogger(__name__)


class SyntenyGFF(Source):
    """
    DAGchainer synteny blocks as GFF3, between a source and a target genome:

        #SourceTaxonID  3885
        #SourceVariety  G19833
        #TargetTaxonID  3847
        #TargetVariety  Williams82
        phavu.Chr01  DAGchainer  syntenic_region  125452  912158  2665.5  -  .
            Name=Pv01.Gm14.2.-;ID=20;Target=glyma.Chr14:48062215..48932270;median_Ks=0.3559

    The seqid is the source chromosome and Target the target chromosome,
    the target strand is the last character of the Name unless Target carries one.
    A block seen before with source and target swapped is skipped.

    """

    def __init__(self, graph_type='rdf_graph', are_bnodes_skolemized=False, **kwargs):
        super().__init__(graph_type, are_bnodes_skolemized, 'syntenygff', **kwargs)
        self.chromosomes = self.registry('chromosome', Chromosome)
        self.regions = self.registry('syntenic_region', SyntenicRegion)
        self.blocks = self.registry(
            'synteny_block',
            lambda key, source_region, target_region, median_ks=None: SyntenyBlock(
                source_region, target_region, median_ks))

    @staticmethod
    def target_strand(name):
        """
        'Pv01.Gm14.2.-' -> '-', 'Pv01.Gm14.2. ' and 'Pv01.Gm14.2.+' -> '+'
        """
        if name is None or name == '':
            return None
        if name[-1] in ('+', ' '):
            return '+'
        if name[-1] == '-':
            return '-'
        return None

    def process_file(self, path, limit=None):
        header = {}
        source_organism = None
        target_organism = None
        row_count = 0

        with open(path, 'r', encoding='utf-8') as reader:
            for line_num, line in enumerate(reader, 1):
                line = line.rstrip('\r\n')
                if line.startswith('#'):
                    parts = line.split('\t')
                    if parts[0] in (
                            '#SourceTaxonID', '#SourceVariety',
                            '#TargetTaxonID', '#TargetVariety'):
                        if len(parts) < 2:
                            raise ValueError(
                                "{} line {}: no value for {}".format(path, line_num, parts[0]))
                        header[parts[0][1:]] = parts[1].strip()
                    continue
                if line.strip() == '':
                    continue
                if limit is not None and row_count >= limit:
                    break
                row_count += 1

                if source_organism is None or target_organism is None:
                    if len(header) < 4:
                        raise ValueError(
                            "{} line {}: source and target organism not established: {}".format(
                                path, line_num, header))
                    source_organism = self.getOrganism(
                        header['SourceTaxonID'], header['SourceVariety'])
                    target_organism = self.getOrganism(
                        header['TargetTaxonID'], header['TargetVariety'])

                gff = GFF3Record(line)
                if gff.type != 'syntenic_region':
                    continue
                target = gff.target
                if target is None:
                    raise ValueError(
                        "{} line {}: syntenic_region without Target".format(path, line_num))
                self._process_record(gff, target, source_organism, target_organism)

        LOG.info("%s: %i rows, %i synteny blocks", path, row_count, len(self.blocks))

    def _process_record(self, gff, target, source_organism, target_organism):
        (target_seqid, target_start, target_end, target_strand) = target
        if target_start > target_end:
            target_start, target_end = target_end, target_start
        source_name = SyntenicRegion.region_name(gff.seqid, gff.start, gff.end)
        target_name = SyntenicRegion.region_name(target_seqid, target_start, target_end)

        block_name = '|'.join((source_name, target_name))
        swapped_name = '|'.join((target_name, source_name))
        if block_name in self.blocks or swapped_name in self.blocks:
            LOG.debug("Skipping duplicate synteny block %s", block_name)
            return
        if target_strand is None:
            target_strand = self.target_strand(gff.name)

        source_region = self._region(
            source_name, source_organism, gff.seqid, gff.start, gff.end, gff.strand,
            gff.score_value)
        target_region = self._region(
            target_name, target_organism, target_seqid, target_start, target_end,
            target_strand, gff.score_value)
        self.blocks.get_or_create(
            block_name, source_region=source_region, target_region=target_region,
            median_ks=gff.median_ks)

    def _region(self, name, organism, seqid, start, end, strand, score):
        chromosome, created = self.chromosomes.get_or_create(seqid, organism=organism)
        region, created = self.regions.get_or_create(name, organism=organism)
        region.setLocation(chromosome, start, end, strand)
        region.length = end - start + 1
        region.score = score
        return region
