import re
import logging

from rdflib import ConjunctiveGraph, Literal, URIRef, BNode, Namespace

from legfed.graph.Graph import Graph as LegfedGraph

LOG = logging.getLogger(__name__)


class RDFGraph(LegfedGraph, ConjunctiveGraph):
    """
    Extends RDFLibs ConjunctiveGraph
    The goal of this class is wrap the creation
    of triples and manage creation of URIRef,
    Bnodes, and literals from an input curie
    """

    def __init__(self, are_bnodes_skized=True, identifier=None):
        super().__init__('Memory', identifier)
        self.are_bnodes_skized = are_bnodes_skized
        self.prefixes = set()

    def addTriple(
            self,
            subject_id,
            predicate_id,
            obj,
            object_is_literal=None,
            literal_type=None
    ):
        if object_is_literal is None:
            object_is_literal = self._is_literal(obj)

        if object_is_literal is True:
            if obj is None:
                LOG.warning(
                    "None as literal object for subj: %s and pred: %s",
                    subject_id, predicate_id)
                return
            if isinstance(obj, str):
                obj = re.sub(r'[\t\n\r\f\v]+', ' ', obj)  # reduce any ws to a space
            if literal_type is not None and obj not in ("", " "):
                self.add((
                    self._getnode(subject_id), self._getnode(predicate_id),
                    Literal(obj, datatype=self._getnode(literal_type))))
            else:
                self.add((
                    self._getnode(subject_id), self._getnode(predicate_id),
                    Literal(obj)))

        elif obj is not None and obj != '':  # object is a resource
            self.add((
                self._getnode(subject_id),
                self._getnode(predicate_id),
                self._getnode(obj)))
        else:
            LOG.warning(
                "None/empty object IRI for subj: %s and pred: %s",
                subject_id, predicate_id)

    def skolemizeBlankNode(self, curie):
        stripped_id = re.sub(r'^_:|^_', '', curie, 1)
        return URIRef(self.curie_map['BNODE'] + stripped_id)

    def _getnode(self, curie):
        """
        This is a wrapper for creating a URIRef or Bnode object
        with a given a curie or iri as a string.

        If an id starts with an underscore, it assigns it to a BNode, otherwise
        it creates it with a standard URIRef.
        When self.are_bnodes_skized is True the blank node is skolemized.

        :param curie: str identifier formatted as curie or iri
        :return: node: RDFLib URIRef or BNode object
        """
        node = None
        if curie[0] == '_':
            if self.are_bnodes_skized:
                node = self.skolemizeBlankNode(curie)
            else:  # delete the leading underscore to make it cleaner
                node = BNode(re.sub(r'^_:|^_', '', curie, 1))

        # Check if curie string is actually an IRI
        elif curie[:4] == 'http' or curie[:3] == 'ftp':
            node = URIRef(curie)
        else:
            iri = self.curie_util.get_uri(curie)
            if iri is not None:
                node = URIRef(iri)
                self.prefixes.add(curie.split(':')[0])
            else:
                LOG.error("couldn't make URI for %s", curie)
        return node

    def bind_all_namespaces(self):
        """
            Results in the @prefix directives for every curie prefix
            being added to the serialization.
        """
        for prefix, iri in self.curie_map.items():
            self.bind(prefix, Namespace(iri))

    # serialize() conflicts between rdflib & Graph.serialize abstractmethod
    # GraphUtils expects the former.
    def serialize(
            self, destination=None, format='turtle', base=None, encoding=None
    ):
        for prefix in self.prefixes:
            self.bind(prefix, Namespace(self.curie_map[prefix]))
        return ConjunctiveGraph.serialize(
            self, destination=destination, format=format, encoding=encoding)
