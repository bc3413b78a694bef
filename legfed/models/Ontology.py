import logging

from legfed.models.Item import Item, NamedItem

LOG = logging.getLogger(__name__)


class OntologyTerm(NamedItem):
    """
    A trait or phenotype ontology term, known by its curie ('TO:0000396')
    """

    term = 'ontology term'

    def __init__(self, primary_identifier, name=None, description=None):
        super().__init__(primary_identifier.strip(), None, description)
        self.name = name

    @property
    def ontology(self):
        """
        'TO:0000396' -> 'TO'
        """
        if ':' not in self.primary_identifier:
            return None
        return self.primary_identifier.split(':')[0]

    def attributes(self):
        return super().attributes() + [('name', self.name)]


class OntologyAnnotation(Item):
    """
    One subject annotated with one term, whatever the number of rows saying so
    """

    term = 'ontology annotation'
    required = ('subject', 'ontology_term')

    def __init__(self, subject, ontology_term):
        super().__init__(subject.item_id, ontology_term.item_id)
        self.subject = subject
        self.ontology_term = ontology_term

    def label(self):
        return '{} {}'.format(self.subject.label(), self.ontology_term.label())

    def references(self):
        return [('subject', self.subject), ('ontologyTerm', self.ontology_term)]


class Annotated:
    """
    Mixin for entities carrying ontology annotations,
    which are kept in self.ontology_annotations by term item_id
    """

    def annotate(self, ontology_term):
        annotation = self.ontology_annotations.get(ontology_term.item_id)
        if annotation is None:
            annotation = OntologyAnnotation(self, ontology_term)
            self.ontology_annotations[ontology_term.item_id] = annotation
        return annotation
