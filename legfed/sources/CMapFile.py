import os
import logging

import pandas as pd

from legfed.config import get_config
from legfed.sources.Source import Source
from legfed.models.Genetic import GeneticMap, GeneticMarker, LinkageGroup, QTL

LOG = logging.getLogger(__name__)

COLUMNS = [
    'map_acc', 'map_name', 'map_start', 'map_stop', 'feature_acc', 'feature_name',
    'feature_aliases', 'feature_start', 'feature_stop', 'feature_type_acc', 'is_landmark']

class CMapFile(Source):
    """
    CMap exports of genetic maps, one file per map named <map>_<anything>.cmap.
    Rows with a feature_type_acc starting with 'QTL' are QTLs,
    all others genetic markers.
    Linkage groups are keyed by map_acc, QTLs and markers by feature_acc.

    A CMap file does not say which organism it describes,
    so exactly one organism must be given or configured.

    """

    def __init__(
            self, graph_type='rdf_graph', are_bnodes_skolemized=False, taxon_id=None,
            **kwargs):
        super().__init__(graph_type, are_bnodes_skolemized, 'cmapfile', **kwargs)
        if taxon_id is None:
            organisms = get_config()['organisms']
            if len(organisms) != 1:
                raise ValueError(
                    "cmapfile needs exactly one organism, {} configured".format(
                        len(organisms)))
            taxon_id = organisms[0]['taxon_id']
        self.taxon_id = str(taxon_id)
        # some maps pad single marker QTLs out to a fixed length, cM
        padded = get_config().get('cmap', {}).get('padded_qtl_length') or {}
        self.padded_qtl_length = {
            str(taxon): float(length) for (taxon, length) in padded.items()}.get(self.taxon_id)

        self.genetic_maps = self.registry('genetic_map', GeneticMap)
        self.linkage_groups = self.registry('linkage_group', LinkageGroup)
        self.markers = self.registry('genetic_marker', GeneticMarker)
        self.qtls = self.registry('qtl', QTL)
        # feature_acc -> QTL or GeneticMarker
        self.features = {}

    @staticmethod
    def genetic_map_name(path):
        """
        'GeneticMapFoo_3917_24659904.cmap' -> 'GeneticMapFoo'
        """
        return os.path.basename(path).split('_')[0].split('.')[0]

    def process_file(self, path, limit=None):
        organism = self.getOrganism(self.taxon_id)
        genetic_map, created = self.genetic_maps.get_or_create(
            self.genetic_map_name(path), organism=organism)

        cmap_df = pd.read_csv(
            path, sep='\t', header=0, names=COLUMNS, comment='#',
            dtype={'map_acc': str, 'map_name': str, 'feature_acc': str,
                   'feature_name': str, 'feature_aliases': str, 'feature_type_acc': str},
            nrows=limit)
        records = cmap_df.to_dict(orient='records')
        for record in records:
            self._process_record(record, organism, genetic_map)

        LOG.info(
            "%s: %i rows, %i linkage groups, %i QTLs, %i markers", path, len(records),
            len(self.linkage_groups), len(self.qtls), len(self.markers))

    @staticmethod
    def is_qtl(record):
        return isinstance(record['feature_type_acc'], str) and \
            record['feature_type_acc'].startswith('QTL')

    def _process_record(self, record, organism, genetic_map):
        linkage_group, created = self.linkage_groups.get_or_create(
            record['map_acc'], organism=organism, secondary_identifier=record['map_name'])
        if created:
            linkage_group.setGeneticMap(genetic_map)
        linkage_group.extendTo(float(record['map_stop']))

        feature_acc = record['feature_acc'].replace('"', '')
        feature_name = record['feature_name'].replace('"', '')
        if feature_acc in self.features:
            return

        if self.is_qtl(record):
            # 'SY1-1:seed yield' -> 'SY1-1', 'cmap:1234' -> '1234'
            qtl, created = self.qtls.get_or_create(
                feature_name.split(':')[0], organism=organism,
                secondary_identifier=feature_acc.split(':')[-1])
            lgr = qtl.linkageGroupRange(linkage_group)
            lgr.include(record['feature_start'])
            lgr.include(record['feature_stop'])
            genetic_map.addQTL(qtl)
            if self.padded_qtl_length is not None and lgr.length == self.padded_qtl_length:
                qtl.description = "Length on linkage group arbitrarily set to {} cM.".format(
                    self.padded_qtl_length)
            self.features[feature_acc] = qtl
        else:
            marker, created = self.markers.get_or_create(
                feature_name, organism=organism, secondary_identifier=feature_acc)
            if created:
                marker.type = record['feature_type_acc']
            marker.setLinkageGroupPosition(linkage_group, record['feature_start'])
            genetic_map.addGeneticMarker(marker)
            self.features[feature_acc] = marker
