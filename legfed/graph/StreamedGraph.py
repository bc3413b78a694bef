import logging
import re

from legfed.graph.Graph import Graph as LegfedGraph

LOG = logging.getLogger(__name__)


class StreamedGraph(LegfedGraph):
    """
    Stream rdf triples to file or stdout
    Assumes a downstream process will sort then uniquify triples

    Only n-triples are written.
    """

    def __init__(
            self, are_bnodes_skized=True, identifier=None, file_handle=None, fmt='nt'):
        self.are_bnodes_skized = are_bnodes_skized
        self.fmt = fmt
        self.file_handle = file_handle
        self.identifier = identifier
        self.triple_count = 0

    def __len__(self):
        return self.triple_count

    def addTriple(
            self, subject_id, predicate_id, obj, object_is_literal=None,
            literal_type=None):
        if object_is_literal is None:
            object_is_literal = self._is_literal(obj)

        if obj is None or obj == '':
            LOG.warning(
                "Null value passed as object for subj: %s and pred: %s",
                subject_id, predicate_id)
            return

        subject_iri = self._getnode(subject_id)
        predicate_iri = self._getnode(predicate_id)
        if not object_is_literal:
            obj = self._getnode(obj)
        if literal_type is not None:
            literal_type = self._getnode(literal_type)

        self.serialize(
            subject_iri, predicate_iri, obj, object_is_literal, literal_type)

    def skolemizeBlankNode(self, curie):
        return self.curie_map['BNODE'] + re.sub(r'^_:|^_', '', curie, 1)

    def serialize(self, subject_iri, predicate_iri, obj,
                  object_is_literal=False, literal_type=None):
        if not object_is_literal:
            triple = "{} <{}> {} .".format(
                self._term(subject_iri), predicate_iri, self._term(obj))
        elif literal_type is not None:
            triple = '{} <{}> {}^^<{}> .'.format(
                self._term(subject_iri), predicate_iri,
                self._quote_encode(str(obj)), literal_type)
        elif isinstance(obj, str):
            triple = '{} <{}> {} .'.format(
                self._term(subject_iri), predicate_iri, self._quote_encode(obj))
        else:
            lit_type = self._getLiteralXSDType(obj)
            if lit_type is None:
                raise TypeError("Cannot determine type of {}".format(obj))
            triple = '{} <{}> "{}"^^<{}> .'.format(
                self._term(subject_iri), predicate_iri, obj, lit_type)

        self.triple_count += 1
        if self.file_handle is None:
            print(triple)
        else:
            self.file_handle.write("{}\n".format(triple))

    @staticmethod
    def _term(node):
        if node.startswith('_:'):
            return node
        return '<{}>'.format(node)

    def _getnode(self, curie):
        """
        Returns IRI, or blank node curie/iri depending on
        self.are_bnodes_skized setting

        :param curie: str id as curie or iri
        :return:
        """
        if re.match(r'^_:', curie):
            if self.are_bnodes_skized is True:
                node = self.skolemizeBlankNode(curie)
            else:
                node = curie
        elif re.match(r'^http|^ftp', curie):
            node = curie
        elif len(curie.split(':')) == 2:
            node = self.curie_util.get_uri(curie)
        else:
            raise TypeError("Cannot process curie {}".format(curie))
        return node

    def _getLiteralXSDType(self, literal):
        """
        if a literal is not a str, determine if it's
        a xsd boolean, int or double
        :param literal:
        :return: str - xsd full iri
        """
        if isinstance(literal, bool):
            return self._getnode("xsd:boolean")
        if isinstance(literal, int):
            return self._getnode("xsd:integer")
        if isinstance(literal, float):
            return self._getnode("xsd:double")
        return None

    @staticmethod
    def _quote_encode(literal):
        """
        Copy of code in rdflib here:
        https://github.com/RDFLib/rdflib/blob/776b90be/
        rdflib/plugins/serializers/nt.py#L76
        :param literal:
        :return:
        """
        return '"%s"' % literal.replace('\\', '\\\\')\
            .replace('\n', '\\n')\
            .replace('"', '\\"')\
            .replace('\r', '\\r')
