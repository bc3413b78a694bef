import logging

from legfed.models.Item import NamedItem
from legfed.models.GenomicFeature import Feature

LOG = logging.getLogger(__name__)


class SyntenicRegion(Feature):
    """
    One side of a synteny block, named 'chr:start-end'
    """

    term = 'syntenic_region'
    required = ('primary_identifier', 'organism', 'chromosome_location')

    def __init__(self, primary_identifier, organism=None):
        super().__init__(primary_identifier, organism)
        self.synteny_block = None
        self.score = None

    @staticmethod
    def region_name(chromosome, start, end):
        return '{}:{}-{}'.format(chromosome, start, end)

    def references(self):
        return super().references() + [('syntenyBlock', self.synteny_block)]

    def attributes(self):
        return super().attributes() + [('score', self.score)]


class SyntenyBlock(NamedItem):
    """
    A pair of syntenic regions, source and target, named 'source|target'
    """

    term = 'synteny block'
    required = ('primary_identifier', 'source_region', 'target_region')

    def __init__(self, source_region, target_region, median_ks=None):
        super().__init__(self.block_name(source_region, target_region))
        self.source_region = source_region
        self.target_region = target_region
        self.median_ks = median_ks
        source_region.synteny_block = self
        target_region.synteny_block = self

    @staticmethod
    def block_name(source_region, target_region):
        return '|'.join((source_region.primary_identifier, target_region.primary_identifier))

    def attributes(self):
        return super().attributes() + [('medianKs', self.median_ks)]

    def references(self):
        return super().references() + [
            ('sourceRegion', self.source_region),
            ('targetRegion', self.target_region)]
