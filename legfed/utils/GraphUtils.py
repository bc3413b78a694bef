import logging
import hashlib

LOG = logging.getLogger(__name__)


class GraphUtils:

    @staticmethod
    def write(graph, fileformat=None, filename=None):
        """
        A basic graph writer (to stdout) for any of the sources.
        this will write turtle, unless another rdflib format is specified.
        an optional file can be supplied instead of stdout
        :return: None

        """
        if fileformat is None:
            fileformat = 'turtle'
        if filename is not None:
            with open(filename, 'wb') as filewriter:
                LOG.info("Writing triples in %s to %s", fileformat, filename)
                graph.serialize(filewriter, format=fileformat)
        else:
            print(graph.serialize(format=fileformat))

    @staticmethod
    def digest_id(wordage):
        '''
        Form a deterministic digest of input
        Leading 'b' forces the first char to be non numeric but valid hex

        : param str wordage arbitrary string
        : return str
        '''
        return 'b' + hashlib.sha1(wordage.encode('utf-8')).hexdigest()[1:20]
