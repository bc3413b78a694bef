import logging

LOG = logging.getLogger(__name__)


class CurieUtil(object):
    '''
    Create compact URI
    '''
    def __init__(self, curie_map):
        '''
        curie_map format is: curie_prefix -> URI_prefix:
        ie: 'SO': 'http://purl.obolibrary.org/obo/SO_'

        '''
        self.curie_map = curie_map
        self.uri_map = {}
        if curie_map is not None:  # inverse the map
            if len(set(curie_map.keys())) != len(set(curie_map.values())):
                LOG.warning("Curie map is NOT one to one!")
            for key, value in curie_map.items():
                self.uri_map[value] = key

    def get_curie(self, uri):
        '''Get a CURIE from a URI '''
        prefix = self.get_curie_prefix(uri)
        if prefix is not None:
            key = self.curie_map[prefix]
            return f'{prefix}:{uri[len(key):]}'
        return None

    def get_curie_prefix(self, uri):
        ''' Return the CURIE prefix with the longest matching base IRI'''
        matches = [base for base in self.uri_map if uri.startswith(base)]
        if not matches:
            return None
        return self.uri_map[max(matches, key=len)]

    def get_uri(self, curie):
        ''' Get a URI from a CURIE '''
        if curie is None:
            return None
        parts = curie.split(':')
        if len(parts) == 1:
            if curie != '':
                LOG.error("Not a properly formed curie: \"%s\"", curie)
            return None
        prefix = parts[0]
        if prefix in self.curie_map:
            return '%s%s' % (self.curie_map.get(prefix),
                             curie[(curie.index(':') + 1):])
        LOG.error("Curie prefix not defined for %s", curie)
        return None

    def prefix_exists(self, pfx):
        return pfx in self.curie_map
