"""
GFF3 lines, just enough of them for the legfed loaders.

    phavu.Chr01  DAGchainer  syntenic_region  125452  912158  2665.5  -  .
        Name=Pv01.Gm14.2.-;Parent=19;ID=20;Target=glyma.Chr14:48062215..48932270;median_Ks=0.3559
"""
import re
import logging
from urllib.parse import unquote

LOG = logging.getLogger(__name__)

COLUMNS = ('seqid', 'source', 'type', 'start', 'end', 'score', 'strand', 'phase', 'attributes')


def parse_attributes(column):
    """
    'ID=a;Name=b%2Cc;Parent=x,y' -> {'id': ['a'], 'name': ['b,c'], 'parent': ['x', 'y']}
    keys are lower cased, values percent-decoded except Target
    """
    attributes = {}
    for chunk in column.strip().split(';'):
        if '=' not in chunk:
            continue
        (key, value) = chunk.split('=', 1)
        key = key.strip().lower()
        if key == 'target':
            attributes[key] = [value]
        else:
            attributes[key] = [unquote(val) for val in value.split(',')]
    return attributes


def parse_target(target):
    """
    'glyma.Chr14:48062215..48932270' -> ('glyma.Chr14', 48062215, 48932270, None)
    'glyma.Chr14%2048062215%2048932270%20+' -> ('glyma.Chr14', 48062215, 48932270, '+')
    """
    target = unquote(target).strip()
    match = re.match(r'^(\S+):(\d+)\.\.(\d+)$', target)
    if match is not None:
        return (match.group(1), int(match.group(2)), int(match.group(3)), None)
    parts = target.split()
    if len(parts) in (3, 4):
        strand = parts[3] if len(parts) == 4 else None
        return (parts[0], int(parts[1]), int(parts[2]), strand)
    raise ValueError("Can not parse Target '{}'".format(target))


class GFF3Record:

    def __init__(self, line):
        chunks = line.rstrip('\r\n').split('\t')
        if len(chunks) != len(COLUMNS):
            raise ValueError(
                "GFF3 line has {} columns, expected {}: {}".format(
                    len(chunks), len(COLUMNS), line))
        (self.seqid, self.source, self.type, start, end,
         self.score, self.strand, self.phase, column) = chunks
        self.start = int(start)
        self.end = int(end)
        self.attributes = parse_attributes(column)
        # Name defaults to ID and ID to Name
        if 'name' not in self.attributes and 'id' in self.attributes:
            self.attributes['name'] = self.attributes['id']
        if 'id' not in self.attributes and 'name' in self.attributes:
            self.attributes['id'] = self.attributes['name']

    def attribute(self, key):
        values = self.attributes.get(key.lower())
        if values:
            return values[0]
        return None

    @property
    def id(self):
        return self.attribute('ID')

    @property
    def name(self):
        return self.attribute('Name')

    @property
    def parents(self):
        return self.attributes.get('parent', [])

    @property
    def target(self):
        value = self.attribute('Target')
        if value is None:
            return None
        return parse_target(value)

    @property
    def median_ks(self):
        value = self.attribute('median_Ks')
        if value is None:
            return None
        return float(value)

    @property
    def length(self):
        return self.end - self.start + 1

    @property
    def score_value(self):
        if self.score in ('', '.'):
            return None
        return float(self.score)

    def __repr__(self):
        return '<GFF3Record {} {}:{}-{}>'.format(self.type, self.seqid, self.start, self.end)
