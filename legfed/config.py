import os.path
import logging
import yaml

LOG = logging.getLogger(__name__)

# default configuration, overlaid by 'conf.yaml'
conf = {
    'dbauth': {},
    'organisms': [],
    'homologue_organisms': [],
    'phytozome_version': None,
    'cvterms': {
        'gene': 'gene',
        'mRNA': 'mRNA',
        'polypeptide': 'polypeptide',
        'gene_family': 'gene family',
        'consensus_region': 'consensus_region',
        'linkage_group': 'linkage_group',
        'genetic_marker': 'genetic_marker',
        'QTL': 'QTL',
        'favorable_allele_source': 'Favorable Allele Source',
    },
    'centimorgan_storage_scale': 100,
    'qtl_span': {
        'min_markers': 2
    },
    'cmap': {
        'padded_qtl_length': {}
    },
    'pubmed_lookup': False,
}

'''
    Load the configuration file 'conf.yaml', if it exists.
    The chado sources can not run without it.
    conf.yaml may contain database credentials and should not live in a public repo
'''

if os.path.exists(os.path.join(os.path.dirname(__file__), 'conf.yaml')):
    with open(os.path.join(os.path.dirname(__file__), 'conf.yaml')) as yaml_file:
        conf.update(yaml.safe_load(yaml_file) or {})
        LOG.debug("Finished loading legfed/conf.yaml")
else:
    LOG.warning("'legfed/conf.yaml' not found in '%s'", os.path.dirname(__file__))
    LOG.warning("Sources that depend on 'conf.yaml' will fail")


def get_config():
    return conf
