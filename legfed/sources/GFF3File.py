import os
import re
import logging

from legfed.sources.Source import Source
from legfed.models.GenomicFeature import Exon, Gene, MRNA, Polypeptide, Supercontig
from legfed.models.Genetic import GeneticMarker
from legfed.utils.GFF3Record import GFF3Record

LOG = logging.getLogger(__name__)


class GFF3File(Source):
    """
    Genes, their transcripts and genetic markers from GFF3 files.
    The organism is, in order of preference, a '#TaxonID' ('#Variety') header,
    the taxon given to the constructor, or the file name suffix:
        phavu.G19833.gnm1.markers_3885.gff3
    GFF types are mapped onto gene, mRNA, exon, polypeptide or genetic_marker
    by the local translation table, anything else is skipped.

    Parent (mRNA -> gene, exon -> mRNA or gene) and Derives_from
    (polypeptide -> mRNA) are resolved on the GFF IDs of the same file.
    A feature given on more than one row is merged: the first value of
    each attribute and the first location on each kind of sequence stand.

    """

    def __init__(
            self, graph_type='rdf_graph', are_bnodes_skolemized=False, taxon_id=None,
            variety=None, **kwargs):
        super().__init__(graph_type, are_bnodes_skolemized, 'gff3file', **kwargs)
        self.taxon_id = taxon_id
        self.variety = variety
        self.genes = self.registry('gene', Gene)
        self.mrnas = self.registry('mrna', MRNA)
        self.exons = self.registry('exon', Exon)
        self.polypeptides = self.registry('polypeptide', Polypeptide)
        self.markers = self.registry('genetic_marker', GeneticMarker)
        # local translation label -> registry
        self.feature_registries = {
            'gene': self.genes,
            'mRNA': self.mrnas,
            'exon': self.exons,
            'polypeptide': self.polypeptides,
            'genetic_marker': self.markers,
        }

    @staticmethod
    def taxon_from_filename(path):
        """
        'markers_3885.gff3' -> '3885'
        """
        match = re.search(r'_(\d+)\.gff3?$', os.path.basename(path))
        if match is None:
            return None
        return match.group(1)

    def process_file(self, path, limit=None):
        taxon_id = self.taxon_id
        if taxon_id is None:
            taxon_id = self.taxon_from_filename(path)
        variety = self.variety
        organism = None
        row_count = 0
        # GFF ID -> feature, for this file only
        features = {}
        gff_rows = []

        with open(path, 'r', encoding='utf-8') as reader:
            for line_num, line in enumerate(reader, 1):
                line = line.rstrip('\r\n')
                if line.strip() == '':
                    continue
                if line.startswith('#'):
                    parts = line.split('\t')
                    if parts[0].lower() == '#taxonid':
                        taxon_id = self.header_value(parts, path, line_num).strip()
                    elif parts[0].lower() == '#variety':
                        variety = self.header_value(parts, path, line_num).strip()
                    elif line.startswith('##FASTA'):
                        break
                    continue
                if limit is not None and row_count >= limit:
                    break
                row_count += 1
                if organism is None:
                    if taxon_id is None:
                        raise ValueError(
                            "{} line {}: taxon id not set, not reading GFF data".format(
                                path, line_num))
                    organism = self.getOrganism(taxon_id, variety)
                try:
                    gff = GFF3Record(line)
                except ValueError as err:
                    LOG.warning("%s line %i: %s", path, line_num, err)
                    continue
                self._process_record(gff, organism, features)
                gff_rows.append(gff)

        self._linkParts(gff_rows, features, path)
        LOG.info(
            "%s: %i GFF rows, %i genes, %i mRNAs, %i markers",
            path, row_count, len(self.genes), len(self.mrnas), len(self.markers))

    def _process_record(self, gff, organism, features):
        label = self.localtt.get(gff.type)
        registry = self.feature_registries.get(label)
        if registry is None:
            LOG.debug("Skipping GFF type %s", gff.type)
            return
        if gff.name is None:
            LOG.warning("Skipping %s without ID or Name", gff)
            return

        feature, created = registry.get_or_create(gff.name, organism=organism)
        if not created:
            LOG.info("Merging duplicate %s %s", gff.type, gff.name)
        if label == 'genetic_marker' and feature.type is None:
            feature.type = gff.type
        if gff.id != gff.name and feature.secondary_identifier is None:
            feature.secondary_identifier = gff.id
        note = gff.attribute('Note')
        if note is not None and feature.description is None:
            feature.description = note
        self._mergeLocation(feature, gff, organism)
        if gff.id is not None:
            features[gff.id] = feature

    def _mergeLocation(self, feature, gff, organism):
        """
        the first location on a kind of sequence stands,
        a conflicting one from a duplicate row is reported
        """
        sequence = self.getSequence(gff.seqid, organism)
        if isinstance(sequence, Supercontig):
            location = feature.supercontig_location
        else:
            location = feature.chromosome_location
        if location is None:
            feature.length = gff.length
            feature.setLocation(sequence, gff.start, gff.end, gff.strand)
        elif (location.located_on, location.start, location.end) != \
                (sequence, min(gff.start, gff.end), max(gff.start, gff.end)):
            LOG.warning(
                "%s %s is at %s, ignoring %s:%i-%i", gff.type, feature.primary_identifier,
                location.label(), gff.seqid, gff.start, gff.end)

    def _linkParts(self, gff_rows, features, path):
        """
        Parent and Derives_from name features of the same file,
        in any order
        """
        for gff in gff_rows:
            feature = features.get(gff.id)
            if feature is None:
                continue
            for parent_id in gff.parents + gff.attributes.get('derives_from', []):
                parent = features.get(parent_id)
                if parent is None:
                    LOG.warning("%s: %s parent %s not found", path, gff.id, parent_id)
                    continue
                self._link(feature, parent)

    @staticmethod
    def _link(feature, parent):
        if isinstance(feature, MRNA) and isinstance(parent, Gene):
            feature.setGene(parent)
        elif isinstance(feature, Exon) and isinstance(parent, MRNA):
            feature.addMRNA(parent)
        elif isinstance(feature, Exon) and isinstance(parent, Gene):
            feature.gene = parent
        elif isinstance(feature, Polypeptide) and isinstance(parent, MRNA):
            feature.mrna = parent
        else:
            LOG.warning("%s can not be part of %s", feature, parent)
