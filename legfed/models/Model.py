import logging
from legfed.graph.Graph import Graph

LOG = logging.getLogger(__name__)


class Model():
    """
    Utility class to add common triples to a graph
    (type, label, description, literal properties)
    """

    def __init__(self, graph):
        if isinstance(graph, Graph):
            self.graph = graph
            self.globaltt = self.graph.globaltt
            self.globaltcid = self.graph.globaltcid
            self.curie_map = self.graph.curie_map
        else:
            raise ValueError("{} is not a graph".format(graph))

    def addTriple(
            self, subject_id, predicate_id, obj, object_is_literal=False,
            literal_type=None
    ):
        self.graph.addTriple(
            subject_id, predicate_id, obj, object_is_literal, literal_type)

    def addType(self, subject_id, subject_type):
        self.graph.addTriple(
            subject_id, self.globaltt['type'], subject_type, object_is_literal=False)

    def addLabel(self, subject_id, label):
        self.graph.addTriple(
            subject_id, self.globaltt['label'], label, object_is_literal=True)

    def addDescription(self, subject_id, description):
        self.graph.addTriple(
            subject_id, self.globaltt['description'], description,
            object_is_literal=True)

    def addIndividualToGraph(self, ind_id, label, ind_type=None, description=None):
        if label is not None:
            self.addLabel(ind_id, label)
        if ind_type is not None:
            self.graph.addTriple(
                ind_id, self.globaltt['type'], ind_type, object_is_literal=False)
        else:
            self.graph.addTriple(
                ind_id, self.globaltt['type'], self.globaltt['named_individual'])
        if description is not None:
            self.addDescription(ind_id, description)

    def addLiteral(self, subject_id, predicate_id, value):
        """
        None and '' are not facts, they are skipped quietly
        """
        if value is None or value == '':
            return
        self.graph.addTriple(subject_id, predicate_id, value, object_is_literal=True)

    def addSameIndividual(self, sub, obj):
        self.graph.addTriple(
            sub, self.globaltt['same_as'], obj, object_is_literal=False)
