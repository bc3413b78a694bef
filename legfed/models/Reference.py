import logging

from legfed.models.Item import Item, ItemSet, NamedItem
from legfed.models.Model import Model

LOG = logging.getLogger(__name__)


def clean_value(value):
    """
    chado pub columns hold 'NULL' and '0' where they mean nothing
    """
    if value is None:
        return None
    value = str(value).strip()
    if value in ('', 'NULL', '0'):
        return None
    return value


class Author(NamedItem):

    term = 'person'


class Publication(Item):
    """
    Known by PubMed id, DOI, or failing those its title.
    """

    term = 'journal article'

    def __init__(self, pubmed_id=None, doi=None, title=None):
        pubmed_id = clean_value(pubmed_id)
        doi = clean_value(doi)
        title = clean_value(title)
        if pubmed_id is not None:
            key = 'PMID:' + pubmed_id
        elif doi is not None:
            key = 'DOI:' + doi
        elif title is not None:
            key = title
        else:
            raise ValueError("Publication needs a PMID, DOI or title")
        super().__init__(key)
        self.key = key
        self.pubmed_id = pubmed_id
        self.doi = doi
        self.title = title
        self.journal = None
        self.year = None
        self.volume = None
        self.issue = None
        self.pages = None
        self.first_author = None
        self.chado_id = None
        self.authors = ItemSet()

    @staticmethod
    def first_author_of(uniquename):
        """
        chado pub.uniquename leads with the first author
        'Blair, Iriarte et al. 2006' -> 'Blair'
        """
        uniquename = clean_value(uniquename)
        if uniquename is None:
            return None
        return uniquename.split(',')[0].strip()

    def addAuthor(self, name):
        name = clean_value(name)
        if name is None:
            return None
        author = Author(name)
        self.authors.add(author)
        if self.first_author is None:
            self.first_author = name
        return author

    def setYear(self, year):
        year = clean_value(year)
        if year is None:
            return
        try:
            self.year = int(year)
        except ValueError:
            LOG.warning("Publication %s has a non-numeric year '%s'", self.key, year)

    def label(self):
        return self.title if self.title is not None else self.key

    def attributes(self):
        return [
            ('pubMedId', self.pubmed_id),
            ('doi', self.doi),
            ('title', self.title),
            ('journal', self.journal),
            ('year', self.year),
            ('volume', self.volume),
            ('issue', self.issue),
            ('pages', self.pages),
            ('firstAuthor', self.first_author)]

    def collections(self):
        return [('authors', self.authors)]

    def dependents(self):
        return list(self.authors)

    def addToGraph(self, graph):
        super().addToGraph(graph)
        model = Model(graph)
        if self.pubmed_id is not None:
            model.addSameIndividual(self.item_id, 'PMID:' + self.pubmed_id)
        if self.doi is not None:
            model.addSameIndividual(self.item_id, 'DOI:' + self.doi)
