import logging

from legfed.config import get_config
from legfed.sources.PostgreSQLSource import PostgreSQLSource
from legfed.models.Organism import Strain
from legfed.models.Genetic import GeneticMap, GeneticMarker, LinkageGroup, QTL
from legfed.models.Reference import Publication, clean_value
from legfed.utils.units import centimorgans_from_stored

LOG = logging.getLogger(__name__)


class ChadoGenetic(PostgreSQLSource):
    """
    Genetic maps, linkage groups, genetic markers and QTLs of the
    configured organisms from chado.

    Linkage groups, markers and QTLs are features typed by cvterm;
    genetic maps are featuremaps reached through the featurepos of their
    linkage groups. featurepos places markers on linkage groups, and
    a linkage group's own featurepos (mappos > 0) gives its length.
    A QTL's featureloc on a linkage group holds begin and end in cM
    multiplied by the configured storage scale.

    """

    queries = dict(PostgreSQLSource.queries, **{
        'features': """
            SELECT feature_id, uniquename, name FROM feature
            WHERE organism_id = %s AND type_id = %s ORDER BY feature_id""",
        'featuremaps': """
            SELECT DISTINCT fm.featuremap_id, fm.name, fm.description
            FROM featuremap fm
            JOIN featurepos fp ON fp.featuremap_id = fm.featuremap_id
            JOIN feature f ON f.feature_id = fp.map_feature_id
            WHERE f.organism_id = %s AND f.type_id = %s""",
        'featuremap_pubs': """
            SELECT fmp.featuremap_id, p.pub_id, p.uniquename, p.title, p.volume,
                p.series_name, p.issue, p.pyear, p.pages
            FROM featuremap_pub fmp JOIN pub p ON p.pub_id = fmp.pub_id
            WHERE fmp.featuremap_id = ANY(%s)""",
        'qtl_pubs': """
            SELECT fc.feature_id, p.pub_id, p.uniquename, p.title, p.volume,
                p.series_name, p.issue, p.pyear, p.pages
            FROM feature_cvterm fc JOIN pub p ON p.pub_id = fc.pub_id
            WHERE fc.feature_id = ANY(%s)""",
        'favorable_allele_sources': """
            SELECT fs.feature_id, s.uniquename
            FROM feature_stock fs JOIN stock s ON s.stock_id = fs.stock_id
            WHERE fs.type_id = %s AND fs.feature_id = ANY(%s)""",
        'marker_positions': """
            SELECT feature_id, map_feature_id, mappos FROM featurepos
            WHERE featuremap_id = %s AND feature_id <> map_feature_id""",
        'linkage_group_lengths': """
            SELECT feature_id, mappos FROM featurepos
            WHERE featuremap_id = %s AND feature_id = map_feature_id AND mappos > 0""",
        'qtl_ranges': """
            SELECT feature_id, srcfeature_id, fmin, fmax FROM featureloc
            WHERE feature_id = ANY(%s)""",
        'qtl_markers': """
            SELECT subject_id, object_id FROM feature_relationship
            WHERE subject_id = ANY(%s)""",
    })

    def __init__(self, graph_type='rdf_graph', are_bnodes_skolemized=False, **kwargs):
        super().__init__(graph_type, are_bnodes_skolemized, 'chadogenetic', **kwargs)
        self.scale = get_config()['centimorgan_storage_scale']

        # chado ids are the natural keys here
        self.linkage_groups = self.registry('linkage_group', self.featureFactory(LinkageGroup))
        self.markers = self.registry('genetic_marker', self.featureFactory(GeneticMarker))
        self.qtls = self.registry('qtl', self.featureFactory(QTL))
        self.genetic_maps = self.registry('genetic_map', self.geneticMapFactory)
        self.publications = self.registry('publication', self.publicationFactory)
        self.strains = self.registry('strain', Strain)

    @staticmethod
    def featureFactory(cls):
        def factory(feature_id, uniquename, organism, name=None):
            feature = cls(uniquename, organism)
            feature.chado_id = feature_id
            if name is not None and name != uniquename:
                feature.secondary_identifier = name
            return feature
        return factory

    @staticmethod
    def geneticMapFactory(featuremap_id, name, organism, description=None):
        genetic_map = GeneticMap(name, organism, clean_value(description))
        genetic_map.chado_id = featuremap_id
        return genetic_map

    @staticmethod
    def publicationFactory(pub_id, **row):
        """
        a chado pub row without PMID or DOI, known by its title
        """
        title = clean_value(row.get('title'))
        if title is None:
            title = clean_value(row.get('uniquename'))
        publication = Publication(title=title)
        publication.chado_id = pub_id
        publication.journal = clean_value(row.get('series_name'))
        publication.volume = clean_value(row.get('volume'))
        publication.issue = clean_value(row.get('issue'))
        publication.pages = clean_value(row.get('pages'))
        publication.setYear(row.get('pyear'))
        publication.addAuthor(Publication.first_author_of(row.get('uniquename')))
        return publication

    def process_database(self, limit=None):
        linkage_group_type = self.cvterm('linkage_group')
        marker_type = self.cvterm('genetic_marker')
        qtl_type = self.cvterm('QTL')
        if linkage_group_type is None:
            LOG.error("No linkage group cvterm, no genetic maps can be loaded")
            return

        organisms = self.getChadoOrganisms(get_config()['organisms'])
        for organism_id, organism in organisms.items():
            self.loadFeatures(self.linkage_groups, organism_id, organism, linkage_group_type, limit)
            if marker_type is not None:
                self.loadFeatures(self.markers, organism_id, organism, marker_type, limit)
            if qtl_type is not None:
                self.loadFeatures(self.qtls, organism_id, organism, qtl_type, limit)
            for row in self.query(
                    self.queries['featuremaps'], (organism_id, linkage_group_type)):
                self.genetic_maps.get_or_create(
                    row['featuremap_id'], name=row['name'], organism=organism,
                    description=row['description'])

        LOG.info(
            "%i genetic maps, %i linkage groups, %i markers, %i QTLs",
            len(self.genetic_maps), len(self.linkage_groups), len(self.markers),
            len(self.qtls))

        self.loadPublications()
        self.loadFavorableAlleleSources()
        for featuremap_id, genetic_map in self.genetic_maps.items():
            self.loadMapPositions(featuremap_id, genetic_map)
        self.loadQTLRanges()
        self.loadQTLMarkers()

    def loadFeatures(self, registry, organism_id, organism, type_id, limit=None):
        rows = self.query(self.queries['features'], (organism_id, type_id))
        if limit is not None:
            rows = rows[:limit]
        for row in rows:
            registry.get_or_create(
                row['feature_id'], uniquename=row['uniquename'], organism=organism,
                name=row['name'])

    def _publication(self, row):
        row = dict(row)
        pub_id = row.pop('pub_id')
        if clean_value(row.get('title')) is None and clean_value(row.get('uniquename')) is None:
            LOG.warning("pub %s has neither title nor uniquename, skipping", pub_id)
            return None
        row.pop('featuremap_id', None)
        row.pop('feature_id', None)
        publication, created = self.publications.get_or_create(pub_id, **row)
        return publication

    def loadPublications(self):
        if len(self.genetic_maps) > 0:
            for row in self.query(
                    self.queries['featuremap_pubs'], (list(self.genetic_maps.keys()),)):
                publication = self._publication(row)
                if publication is not None:
                    self.genetic_maps[row['featuremap_id']].publications.add(publication)
        if len(self.qtls) > 0:
            for row in self.query(self.queries['qtl_pubs'], (list(self.qtls.keys()),)):
                publication = self._publication(row)
                if publication is not None:
                    self.qtls[row['feature_id']].publications.add(publication)
        LOG.info("%i publications", len(self.publications))

    def loadFavorableAlleleSources(self):
        source_type = self.cvterm('favorable_allele_source')
        if source_type is None or len(self.qtls) == 0:
            return
        for row in self.query(
                self.queries['favorable_allele_sources'],
                (source_type, list(self.qtls.keys()))):
            qtl = self.qtls[row['feature_id']]
            strain, created = self.strains.get_or_create(
                row['uniquename'], organism=qtl.organism)
            qtl.favorable_allele_source = strain

    def loadMapPositions(self, featuremap_id, genetic_map):
        for row in self.query(self.queries['marker_positions'], (featuremap_id,)):
            marker = self.markers.get(row['feature_id'])
            if marker is None:
                LOG.debug("featurepos of unknown marker %s", row['feature_id'])
                continue
            genetic_map.addGeneticMarker(marker)
            linkage_group = self.linkage_groups.get(row['map_feature_id'])
            if linkage_group is not None:
                marker.setLinkageGroupPosition(linkage_group, row['mappos'])

        for row in self.query(self.queries['linkage_group_lengths'], (featuremap_id,)):
            linkage_group = self.linkage_groups.get(row['feature_id'])
            if linkage_group is None:
                continue
            linkage_group.length = float(row['mappos'])
            linkage_group.setGeneticMap(genetic_map)

    def loadQTLRanges(self):
        if len(self.qtls) == 0:
            return
        for row in self.query(self.queries['qtl_ranges'], (list(self.qtls.keys()),)):
            linkage_group = self.linkage_groups.get(row['srcfeature_id'])
            if linkage_group is None:
                continue
            qtl = self.qtls[row['feature_id']]
            lgr = qtl.linkageGroupRange(linkage_group)
            lgr.include(centimorgans_from_stored(row['fmin'], self.scale))
            lgr.include(centimorgans_from_stored(row['fmax'], self.scale))

    def loadQTLMarkers(self):
        """
        nearest and flanking markers, the relationship type is not kept
        """
        if len(self.qtls) == 0:
            return
        count = 0
        for row in self.query(self.queries['qtl_markers'], (list(self.qtls.keys()),)):
            marker = self.markers.get(row['object_id'])
            if marker is not None:
                self.qtls[row['subject_id']].addAssociatedGeneticMarker(marker)
                count += 1
        LOG.info("%i QTL/marker associations", count)
