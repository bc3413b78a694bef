import os
import logging
from datetime import datetime

import yaml

from legfed.graph.RDFGraph import RDFGraph
from legfed.graph.StreamedGraph import StreamedGraph
from legfed.utils.EntityRegistry import EntityRegistry
from legfed.utils.GraphUtils import GraphUtils
from legfed.models.Organism import Organism, organism_key
from legfed.models.GenomicFeature import sequence_class
from legfed.models.Reference import Publication

LOG = logging.getLogger(__name__)
TRANSLATIONTABLE = os.path.join(os.path.dirname(__file__), '../../translationtable')


class Source:
    """
    Abstract class for any data sources that we'll import and process.
    Each of the subclasses will fetch() the data,
    then parse() it into a graph.  The graph will then be written out to
    a single self.name().<dest_fmt>  file.

    One instance is one processing pass. parse() fills the pass's own
    EntityRegistry objects, deduplicating on natural keys, then emit() writes
    every registered entity to the graph exactly once.

    Houses the global translation table (from ontology label to ontology term)
    so it may as well be used everywhere.

    """

    def __init__(
            self,
            graph_type='rdf_graph',     # or streamed_graph
            are_bnodes_skized=False,
            name=None,
            rawdir=None,
            outdir=None,
            file_handle=None            # for streamed graphs, default stdout
    ):
        self.graph_type = graph_type
        self.are_bnodes_skized = are_bnodes_skized
        if name is not None:
            self.name = name.lower()
        else:
            self.name = type(self).__name__.lower()
        LOG.info("Processing Source \"%s\"", self.name)

        self.localtt = self.load_local_translationtable(self.name)
        self.outdir = outdir if outdir is not None else 'out'
        self.rawdir = rawdir if rawdir is not None else '/'.join(('raw', self.name))

        if graph_type == 'rdf_graph':
            graph_id = ':LEGFED_' + str(self.name) + "_" + \
                datetime.now().isoformat(' ').split()[0]
            LOG.info("Creating graph  %s", graph_id)
            self.graph = RDFGraph(are_bnodes_skized, graph_id)
        elif graph_type == 'streamed_graph':
            self.graph = StreamedGraph(are_bnodes_skized, self.name, file_handle)
        else:
            raise ValueError(
                "{} graph type not supported, "
                "valid types: rdf_graph, streamed_graph".format(graph_type))

        # pull in global ontology mapping datastructures
        self.globaltt = self.graph.globaltt
        self.globaltcid = self.graph.globaltcid
        self.curie_map = self.graph.curie_map

        self.registries = {}
        self.emitted = set()
        self.failures = []
        self.organisms = self.registry(
            'organism', lambda key, **fields: Organism(**fields))

    def fetch(self):
        """
        Data files are staged into the raw directory by hand,
        there is nothing to download.
        :return: None

        """
        LOG.info("%s reads local files from %s", self.name, self.rawdir)

    def parse(self, limit=None):
        """
        Run process_file() over every data file, then emit().
        A file which can not be read is logged and recorded in self.failures,
        the remaining files are still processed.
        :param limit: maximum number of data rows to process per file
        :return: None

        """
        for path in self.data_files():
            LOG.info("Processing file %s", path)
            try:
                self.process_file(path, limit)
            except OSError as err:
                self.record_failure(path, err)
        self.emit()

    def process_file(self, path, limit=None):
        """
        abstract method to turn one data file into entities
        this should be overridden by file based subclasses
        :return: None

        """
        raise NotImplementedError

    def record_failure(self, what, err):
        LOG.error("%s: could not process %s: %s", self.name, what, err)
        self.failures.append((what, str(err)))

    def registry(self, name, factory, scoped=None):
        """
        get or create this pass's registry for one kind of entity
        :param name: str kind of entity
        :param factory: callable(key, **fields) -> entity
        :param scoped: key on (taxon, key); by default when the factory
            is an organism scoped entity class
        :return: EntityRegistry
        """
        if name not in self.registries:
            if scoped is None:
                scoped = getattr(factory, 'organism_scoped', False)
            self.registries[name] = EntityRegistry(factory, name, scoped)
        return self.registries[name]

    def getOrganism(self, taxon_id, variety=None, genus=None, species=None):
        organism, created = self.organisms.get_or_create(
            organism_key(taxon_id, variety), taxon_id=taxon_id, variety=variety,
            genus=genus, species=species)
        if created:
            LOG.info("Created organism %s", organism.key)
        return organism

    def getSequence(self, seqid, organism, strain=None):
        """
        get or create the Chromosome or Supercontig a feature is located on
        """
        cls = sequence_class(seqid)
        sequence, created = self.registry(cls.__name__.lower(), cls).get_or_create(
            seqid, organism=organism)
        if created:
            sequence.strain = strain
            LOG.debug("Created %s %s", cls.__name__, seqid)
        return sequence

    def getPublication(self, pubmed_id=None, doi=None, title=None):
        """
        get or create a publication by PMID, DOI or title, in that order
        """
        fields = {'pubmed_id': pubmed_id, 'doi': doi, 'title': title}
        key = Publication(**fields).key
        publication, created = self.registry(
            'publication', lambda key, **fields: Publication(**fields)).get_or_create(
                key, **fields)
        return publication

    def entities(self):
        """
        every registered entity, registry by registry
        """
        for registry in self.registries.values():
            yield from registry

    def emit(self):
        """
        Write every registered entity (and what it owns) to the graph, once.
        Entities are validated first; a missing required field
        is a ValueError and nothing partial is written for that entity.
        :return: number of entities written
        """
        count = 0
        for entity in self.entities():
            count += self._emit(entity)
        LOG.info("%s emitted %i entities", self.name, count)
        return count

    def _emit(self, entity):
        if entity.item_id in self.emitted:
            return 0
        entity.validate()
        self.emitted.add(entity.item_id)
        entity.addToGraph(self.graph)
        count = 1
        for dependent in entity.dependents():
            count += self._emit(dependent)
        return count

    def data_files(self):
        """
        The files in the raw directory, skipping README files
        :return: list of paths, sorted by name
        """
        if not os.path.isdir(self.rawdir):
            self.record_failure(self.rawdir, "raw directory does not exist")
            return []
        paths = []
        for fname in sorted(os.listdir(self.rawdir)):
            path = os.path.join(self.rawdir, fname)
            if not os.path.isfile(path):
                continue
            if 'README' in fname:
                LOG.info("Skipping %s", fname)
                continue
            paths.append(path)
        return paths

    @staticmethod
    def data_lines(path):
        """
        yield (line number, line) for the non-blank lines of a file
        which are not '#' comments, without the line ending
        """
        with open(path, 'r', encoding='utf-8') as reader:
            for line_num, line in enumerate(reader, 1):
                line = line.rstrip('\r\n')
                if line.strip() == '' or line.startswith('#'):
                    continue
                yield line_num, line

    @staticmethod
    def header_value(parts, path, line_num):
        """
        the value of a 'Key<TAB>value' header line
        :raises ValueError: when there is no value
        """
        if len(parts) < 2 or parts[1] == '':
            raise ValueError("{} line {}: {} header needs a value".format(
                path, line_num, parts[0]))
        return parts[1]

    def write(self, fmt='turtle', stream=None):
        """
        This convenience method will write out the graph
        of the source. If you do not supply stream='stdout'
        it will default write it to out/<name>.<ext>
        Streamed graphs have been written as they were built.
        :return: None

        """
        fmt_ext = {
            'rdfxml': 'xml',
            'xml': 'xml',
            'turtle': 'ttl',
            'nt': 'nt',         # ntriples
            'nquads': 'nq',
            'n3': 'n3'          # notation3
        }
        if self.graph_type == 'streamed_graph':
            LOG.info("%s triples were streamed", len(self.graph))
            return

        if stream is None:
            if not os.path.exists(self.outdir):
                os.makedirs(self.outdir)
                LOG.info("created output directory %s", os.path.abspath(self.outdir))
            outfile = '.'.join((
                '/'.join((self.outdir, self.name)), fmt_ext.get(fmt, fmt)))
            LOG.info("Setting outfile to %s", outfile)
        elif stream.lower().strip() == 'stdout':
            outfile = None
        else:
            raise ValueError("I don't understand our stream: {}".format(stream))

        GraphUtils.write(self.graph, fmt, filename=outfile)

    @staticmethod
    def check_fileheader(expected, received):
        '''
        Compare file headers received versus file headers expected
        if the expected headers are a subset (proper or not)
        of received headers report success (warn if proper subset)

            param:  expected  list
            param:  received  list

            return: truthyness
        '''
        exp = set(expected)
        got = set(received)
        if expected != received:
            LOG.error('\nExpected header: %s\nReceived header: %s', expected, received)

            # pass reordering and adding new columns (after protesting)
            # hard fail on missing expected columns
            if exp - got != set():
                LOG.error('Missing: %s', exp - got)
                raise AssertionError('Incoming headers are missing expected column.')

            if got - exp != set():
                LOG.warning('Additional new columns: %s', got - exp)
            else:
                LOG.warning('Check columns order')

        return (exp ^ got) & exp == set()

    def load_local_translationtable(self, name):
        '''
        Load "source specific" translation from whatever they called something
        to the ontology label we need to map it to.
        A reverse mapping from ontology labels to external strings is also
        available as the dict localtcid
        '''
        localtt_file = os.path.join(TRANSLATIONTABLE, name + '.yaml')
        localtt = {}
        if os.path.exists(localtt_file):
            with open(localtt_file, 'r') as read_yaml:
                localtt = yaml.safe_load(read_yaml) or {}
        else:
            LOG.debug("No local translation table for %s", name)

        self.localtcid = {v: k for k, v in localtt.items()}
        return localtt

    def resolve(self, word, mandatory=True, default=None):
        '''
        composite mapping
        given f(x) and g(x)
        here: localtt & globaltt respectively
        return g(f(x))|g(x)||f(x)|x in order of preference
        returns x on fall through if finding a mapping
        is not mandatory (by default finding is mandatory).

        :param word:  the string to find as a key in translation tables
        :param mandatory: boolean to cause failure when no key exists
        :param default: string to return if nothing is found (& not mandatory)
        :return
            value from global translation table,
            or value from local translation table,
            or the query key if finding a value is not mandatory (in this order)

        '''
        assert word is not None

        if word in self.localtt:
            label = self.localtt[word]
            if label in self.globaltt:
                term_id = self.globaltt[label]
            else:
                LOG.info(
                    "Translated to '%s' but no global term_id for: '%s'", label, word)
                term_id = label
        elif word in self.globaltt:
            term_id = self.globaltt[word]
        else:
            if mandatory:
                raise KeyError("Mapping required for: ", word)
            LOG.warning("We have no translation for: '%s'", word)
            term_id = default if default is not None else word
        return term_id
