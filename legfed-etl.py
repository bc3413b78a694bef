#!/usr/bin/env python3

import sys
import argparse
import logging
import importlib

from legfed.postprocess.LegfedPostProcess import LegfedPostProcess

LOG = logging.getLogger(__name__)

SOURCE_TO_CLASS_MAP = {
    'geneticmapfile': 'GeneticMapFile',
    'markerqtlfile': 'MarkerQTLFile',
    'qtlmarkerfile': 'QTLMarkerFile',
    'qtlfile': 'QTLFile',
    'markerchromosomefile': 'MarkerChromosomeFile',
    'cmapfile': 'CMapFile',
    'linkagegroupfile': 'LinkageGroupFile',
    'markerlinkagegroupfile': 'MarkerLinkageGroupFile',
    'germplasmfile': 'GermplasmFile',
    'qtltofile': 'QTLTOFile',
    'gwasfile': 'GWASFile',
    'gff3file': 'GFF3File',
    'syntenygff': 'SyntenyGFF',
    'chadogenetic': 'ChadoGenetic',
    'chadogenefamily': 'ChadoGeneFamily',
    'chadohomology': 'ChadoHomology',
}

FORMATS_SUPPORTED = ['xml', 'n3', 'turtle', 'nt', 'ttl']


def get_source_class(source):
    src = SOURCE_TO_CLASS_MAP[source]
    module = "legfed.sources.{0}".format(src)
    imported_module = importlib.import_module(module)
    return getattr(imported_module, src)


def main():
    parser = argparse.ArgumentParser(
        description='LegFed: legume genetic and genomic data to RDF',
        formatter_class=argparse.RawTextHelpFormatter)
    parser.add_argument(
        '-s', '--sources', type=str, required=True,
        help='comma separated list of sources:\n' + ', '.join(SOURCE_TO_CLASS_MAP))
    parser.add_argument('-l', '--limit', type=int, help='limit number of rows')
    parser.add_argument(
        '--postprocess', action='store_true',
        help='relate genes to the QTLs they overlap, across the sources loaded')
    parser.add_argument(
        '-q', '--quiet', help='turn off info logging', action="store_true")
    parser.add_argument(
        '--debug', help='turn on debug logging', action="store_true")
    # BNodes can't be visualized in Protege,
    # so you can materialize them for testing purposes with this flag
    parser.add_argument(
        '-nb', '--no_bnodes', help="convert blank nodes into identified nodes",
        action="store_true")
    parser.add_argument(
        '--graph_type', help='rdf_graph (default) or streamed_graph', type=str,
        default='rdf_graph')
    parser.add_argument(
        '--format', help='serialization format: turtle (default), xml, n3, nt',
        type=str)

    args = parser.parse_args()

    if args.quiet:
        logging.basicConfig(level=logging.ERROR)
    elif args.debug:
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(level=logging.INFO)

    if args.no_bnodes:
        LOG.info("Will materialize all BNodes into BASE space")

    # set serializer
    if args.format is not None:
        if args.format not in FORMATS_SUPPORTED:
            LOG.error("You have specified an invalid serializer: %s", args.format)
            sys.exit(1)
        if args.format == 'ttl':
            args.format = 'turtle'
    else:
        args.format = 'turtle'

    sources = [source.strip().lower() for source in args.sources.split(',')]
    unknown = [source for source in sources if source not in SOURCE_TO_CLASS_MAP]
    if unknown:
        LOG.error("Unknown source(s): %s", ', '.join(unknown))
        sys.exit(1)

    parsed = []
    failures = []
    for source in sources:
        LOG.info("\n******* %s *******", source)
        source_class = get_source_class(source)
        mysource = source_class(
            graph_type=args.graph_type, are_bnodes_skolemized=args.no_bnodes)
        mysource.fetch()
        mysource.parse(args.limit)
        mysource.write(fmt=args.format)
        parsed.append(mysource)
        failures.extend((source, what, why) for (what, why) in mysource.failures)
        LOG.info('***** Finished with %s *****', source)

    if args.postprocess and parsed:
        LOG.info("\n******* postprocess *******")
        postprocess = LegfedPostProcess(
            parsed, graph_type=args.graph_type, are_bnodes_skolemized=args.no_bnodes)
        postprocess.parse(args.limit)
        postprocess.write(fmt=args.format)
        failures.extend(
            ('legfedpostprocess', what, why) for (what, why) in postprocess.failures)

    if failures:
        for (source, what, why) in failures:
            LOG.error("%s failed on %s: %s", source, what, why)
        sys.exit(1)

    LOG.info("All done.")


if __name__ == "__main__":
    main()
