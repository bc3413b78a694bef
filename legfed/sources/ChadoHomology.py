import logging

from legfed.config import get_config
from legfed.sources.PostgreSQLSource import PostgreSQLSource
from legfed.models.GenomicFeature import Gene
from legfed.models.Homology import ConsensusRegion, GeneFamily, Homologue

LOG = logging.getLogger(__name__)


class ChadoHomology(PostgreSQLSource):
    """
    Homologues from the phylotrees of one Phytozome release.

    Trees named '<phytozome_version>.<family>' are gene families,
    their phylonodes are polypeptides. A polypeptide's gene is two
    feature_relationships away (polypeptide -> mRNA -> gene); genes not
    in chado (Arabidopsis) are named after the polypeptide less its
    final '.' part.

    Genes of the configured organisms are paired with genes of the
    homologue organisms: paralogues within an organism, orthologues across.

    """

    queries = dict(PostgreSQLSource.queries, **{
        'phylotrees': """
            SELECT phylotree_id, name, comment FROM phylotree
            WHERE name LIKE %s ORDER BY name""",
        'members': """
            SELECT f.feature_id, f.organism_id, f.uniquename
            FROM phylonode pn JOIN feature f ON f.feature_id = pn.feature_id
            WHERE pn.phylotree_id = %s AND f.organism_id = ANY(%s)""",
        'polypeptide_genes': """
            SELECT pep.subject_id AS polypeptide_id, g.feature_id, g.uniquename, g.name
            FROM feature_relationship pep
            JOIN feature_relationship mrna ON mrna.subject_id = pep.object_id
            JOIN feature g ON g.feature_id = mrna.object_id
            WHERE pep.subject_id = ANY(%s)""",
    })

    def __init__(self, graph_type='rdf_graph', are_bnodes_skolemized=False, **kwargs):
        super().__init__(graph_type, are_bnodes_skolemized, 'chadohomology', **kwargs)
        self.gene_families = self.registry('gene_family', GeneFamily)
        self.consensus_regions = self.registry('consensus_region', ConsensusRegion)
        self.genes = self.registry('gene', Gene)

    @staticmethod
    def gene_name_of(polypeptide):
        """
        'AT1G01010.1' -> 'AT1G01010'
        """
        return polypeptide.rsplit('.', 1)[0]

    def process_database(self, limit=None):
        config = get_config()
        version = config.get('phytozome_version')
        if not version:
            raise ValueError("phytozome_version must be set in conf.yaml")
        source_organisms = self.getChadoOrganisms(config['organisms'])
        target_organisms = self.getChadoOrganisms(
            config['homologue_organisms'], 'homologue_organisms')
        organism_ids = sorted(set(source_organisms) | set(target_organisms))

        trees = self.query(self.queries['phylotrees'], (version + '.%',))
        if limit is not None:
            trees = trees[:limit]
        count = 0
        for tree in trees:
            gene_family, created = self.gene_families.get_or_create(
                tree['name'], description=tree['comment'])
            region, created = self.consensus_regions.get_or_create(
                tree['name'] + '-consensus')
            region.setGeneFamily(gene_family)

            (sources, targets) = self.loadMembers(
                tree['phylotree_id'], gene_family, organism_ids,
                source_organisms, target_organisms)
            for gene in sources:
                for other in targets:
                    if gene.item_id == other.item_id:
                        continue
                    Homologue(gene, other, gene_family)
                    count += 1

        LOG.info(
            "%i gene families, %i genes, %i homologues",
            len(self.gene_families), len(self.genes), count)

    def loadMembers(
            self, phylotree_id, gene_family, organism_ids, source_organisms,
            target_organisms):
        """
        :return: (genes of source organisms, genes of target organisms)
        """
        members = self.query(self.queries['members'], (phylotree_id, organism_ids))
        if not members:
            return ([], [])
        genes_of = {
            row['polypeptide_id']: row for row in self.query(
                self.queries['polypeptide_genes'],
                ([row['feature_id'] for row in members],))}

        sources = []
        targets = []
        for member in members:
            organism_id = member['organism_id']
            organism = source_organisms.get(organism_id, target_organisms.get(organism_id))
            gene_row = genes_of.get(member['feature_id'])
            if gene_row is not None:
                gene, created = self.genes.get_or_create(
                    gene_row['uniquename'], organism=organism)
                if created:
                    gene.chado_id = gene_row['feature_id']
            else:
                name = self.gene_name_of(member['uniquename'])
                LOG.debug("Assuming gene name %s for %s", name, member['uniquename'])
                gene, created = self.genes.get_or_create(name, organism=organism)
            if gene.gene_family is None:
                gene_family.addGene(gene)
            if organism_id in source_organisms:
                sources.append(gene)
            if organism_id in target_organisms:
                targets.append(gene)
        return (sources, targets)
