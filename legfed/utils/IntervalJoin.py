"""
Gene / QTL span overlap join.

Intervals are closed: a gene ending on the first base of a span overlaps it.
Spans are bucketed by chromosome first, then every gene is tested against
the spans of its own chromosome only, O(genes x spans per chromosome).
At legume scale (tens of thousands of genes, hundreds of QTL) nothing
smarter has been needed.
"""
import logging
from collections import defaultdict

LOG = logging.getLogger(__name__)


def overlaps(start_a, end_a, start_b, end_b):
    return start_a <= end_b and end_a >= start_b


def index_by_chromosome(intervals):
    """
    :param intervals: iterable of (name, chromosome, start, end, ...)
    :return: dict chromosome -> list of (name, start, end)
    """
    index = defaultdict(list)
    for interval in intervals:
        (name, chromosome, start, end) = interval[:4]
        index[chromosome].append((name, start, end))
    return index


def find_overlaps(spans, genes):
    """
    :param spans: iterable of (qtl, chromosome, start, end[, ...])
        QTLSpan tuples fit
    :param genes: iterable of (gene, chromosome, start, end)
    :return: set of (gene, qtl) pairs; a gene within two spans appears twice
    """
    span_index = index_by_chromosome(spans)
    pairs = set()
    for (gene, chromosome, start, end) in genes:
        for (qtl, span_start, span_end) in span_index.get(chromosome, ()):
            if overlaps(start, end, span_start, span_end):
                pairs.add((gene, qtl))
    LOG.info(
        "%i gene/QTL overlaps across %i chromosome(s)", len(pairs), len(span_index))
    return pairs
