import logging

from legfed.sources.Source import Source
from legfed.models.Organism import Strain
from legfed.models.Genetic import GeneticMarker

LOG = logging.getLogger(__name__)


class MarkerChromosomeFile(Source):
    """
    Genomic positions of genetic markers:

        TaxonID     3885
        Strain      G19833
        Marker      Secondary   Type    Chromosome  Start   End     Motif
        BARCPvSSR01 PvM01       SSR     Chr01       102930  103087  (AG)12

    Sequences named like a scaffold or contig are Supercontigs.

    """

    columns = ['Marker', 'Secondary', 'Type', 'Chromosome', 'Start', 'End', 'Motif']

    def __init__(self, graph_type='rdf_graph', are_bnodes_skolemized=False, **kwargs):
        super().__init__(graph_type, are_bnodes_skolemized, 'markerchromosomefile', **kwargs)
        self.strains = self.registry('strain', Strain)
        self.markers = self.registry('genetic_marker', GeneticMarker)

    def process_file(self, path, limit=None):
        organism = None
        strain = None
        strain_name = None
        row_count = 0

        for (line_num, line) in self.data_lines(path):
            parts = [part.strip() for part in line.split('\t')]
            key = parts[0].lower()
            if key == 'taxonid':
                organism = self.getOrganism(self.header_value(parts, path, line_num))
            elif key == 'strain':
                strain_name = self.header_value(parts, path, line_num)
            elif key == 'marker':
                self.check_fileheader(self.columns[:6], parts[:6])
            else:
                if limit is not None and row_count >= limit:
                    break
                row_count += 1
                if organism is None:
                    raise ValueError(
                        "{} line {}: organism not set, supply TaxonID in header".format(
                            path, line_num))
                if strain is None:
                    if strain_name is None:
                        raise ValueError(
                            "{} line {}: strain not set, supply Strain in header".format(
                                path, line_num))
                    strain, created = self.strains.get_or_create(
                        strain_name, organism=organism)
                self._process_row(parts, organism, strain, path, line_num)

        LOG.info("%s: %i marker rows", path, row_count)

    def _process_row(self, parts, organism, strain, path, line_num):
        if len(parts) < 6:
            LOG.warning("%s line %i: too few columns, skipping: %s", path, line_num, parts)
            return
        parts = parts + [''] * (len(self.columns) - len(parts))
        (name, secondary, marker_type, seqid, start, end, motif) = parts[:7]
        try:
            start = int(start)
            end = int(end)
        except ValueError:
            LOG.warning("%s line %i: bad Start or End, skipping: %s", path, line_num, parts)
            return

        marker, created = self.markers.get_or_create(name, organism=organism)
        marker.strain = strain
        if secondary != '':
            marker.secondary_identifier = secondary
        if marker_type != '':
            marker.type = marker_type
        if motif != '':
            marker.motif = motif
        sequence = self.getSequence(seqid, organism, strain)
        marker.setLocation(sequence, start, end, '+')
