import logging
from collections import namedtuple

LOG = logging.getLogger(__name__)

QTLSpan = namedtuple(
    'QTLSpan', ('qtl', 'chromosome', 'start', 'end', 'marker_count'))


class SpanAccumulator:
    """
    Genomic span of each QTL from the chromosome locations
    of its associated markers.

    Rows are hash-grouped on (qtl, chromosome), so they may arrive in any order;
    a QTL whose markers sit on two chromosomes gets a span on each.
    Coordinates are 1-based and inclusive.

    """

    def __init__(self, min_markers=2):
        """
        :param min_markers: groups with fewer markers than this
            produce no span
        """
        if min_markers < 1:
            raise ValueError("min_markers must be at least 1")
        self.min_markers = min_markers
        # (qtl, chromosome) -> [min start, max end, count, start marker, end marker]
        self._groups = {}

    def accumulate(self, qtl_id, chromosome_id, marker_start, marker_end, marker_id=None):
        if marker_start > marker_end:
            marker_start, marker_end = marker_end, marker_start
        key = (qtl_id, chromosome_id)
        group = self._groups.get(key)
        if group is None:
            self._groups[key] = [marker_start, marker_end, 1, marker_id, marker_id]
            return
        if marker_start < group[0]:
            group[0] = marker_start
            group[3] = marker_id
        if marker_end > group[1]:
            group[1] = marker_end
            group[4] = marker_id
        group[2] += 1

    def finalize(self):
        """
        :return: list of QTLSpan, ordered by qtl then chromosome
        """
        spans = []
        for (qtl_id, chromosome_id), group in sorted(
                self._groups.items(), key=lambda kv: (str(kv[0][0]), str(kv[0][1]))):
            (start, end, count, start_marker, end_marker) = group
            if count < self.min_markers:
                LOG.debug(
                    "%s on %s has %i marker(s), no span", qtl_id, chromosome_id, count)
                continue
            LOG.debug(
                "%s spans %s:%s-%s (%s to %s, %i markers)",
                qtl_id, chromosome_id, start, end, start_marker, end_marker, count)
            spans.append(QTLSpan(qtl_id, chromosome_id, start, end, count))
        return spans

    def __len__(self):
        return len(self._groups)
