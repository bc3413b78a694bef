import logging
import requests

LOG = logging.getLogger(__name__)

session = requests.Session()
adapter = requests.adapters.HTTPAdapter(max_retries=3)
session.mount('https://', adapter)
session.mount('http://', adapter)

EUTIL = 'https://eutils.ncbi.nlm.nih.gov/entrez/eutils'
ESEARCH = EUTIL + '/esearch.fcgi'
EREQ = {'email': 'legfed@ncgr.org', 'tool': 'legfed'}


class PubMedUtil:
    """
    PubMed id lookup for publications known only by journal, year and authors.

    Per: https://www.ncbi.nlm.nih.gov/books/NBK25497/
    NCBI asks for no more than three requests per second,
    so only call this for the handful of publications in a load.

    """

    def __init__(self, http=None):
        self.session = http if http is not None else session

    @staticmethod
    def make_term(journal, year, authors=()):
        terms = []
        if journal:
            terms.append('{}[journal]'.format(journal))
        if year:
            terms.append('{}[pdat]'.format(year))
        for author in authors:
            if author:
                terms.append('{}[author]'.format(author))
        return ' AND '.join(terms)

    def search(self, journal, year, authors=()):
        """
        :return: the PMID as str when the search has exactly one hit, else None
        """
        term = self.make_term(journal, year, authors)
        if term == '':
            return None
        req = {'db': 'pubmed', 'retmode': 'json', 'term': term}
        req.update(EREQ)

        try:
            request = self.session.get(ESEARCH, params=req, timeout=30)
            LOG.info('fetching: %s', request.url)
            request.raise_for_status()
            result = request.json()['esearchresult']
        except (requests.exceptions.RequestException, ValueError, KeyError) as err:
            LOG.error('ESEARCH for "%s" failed: %s', term, err)
            return None

        if 'count' in result and str(result['count']) == '1':
            return result['idlist'][0]
        LOG.warning(
            'ESEARCH for "%s" returns %s hits', term, result.get('count'))
        return None
