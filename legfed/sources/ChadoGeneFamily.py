import logging

from legfed.config import get_config
from legfed.sources.PostgreSQLSource import PostgreSQLSource
from legfed.models.GenomicFeature import Gene
from legfed.models.Homology import (
    ConsensusRegion, GeneFamily, Homologue, SAME_GENE_FAMILY)

LOG = logging.getLogger(__name__)


class ChadoGeneFamily(PostgreSQLSource):
    """
    Gene families, their consensus regions and member genes from chado.

    A gene family is nothing more than a 'gene family' featureprop value
    on its genes; its description is the comment of the phylotree of the
    same name. Consensus regions are named '<family>-consensus'.

    Every gene of a configured organism is paired with every gene of a
    homologue organism in the same family. Which kind of homologue they
    are is not computed, so these Homologues are 'sameGeneFamily'.

    """

    queries = dict(PostgreSQLSource.queries, **{
        'gene_families': "SELECT DISTINCT value FROM featureprop WHERE type_id = %s",
        'phylotrees': "SELECT DISTINCT name, comment FROM phylotree",
        'consensus_regions': """
            SELECT feature_id, uniquename, name, residues FROM feature
            WHERE type_id = %s""",
        'family_genes': """
            SELECT f.feature_id, f.organism_id, f.uniquename, f.name, fp.value
            FROM feature f JOIN featureprop fp ON fp.feature_id = f.feature_id
            WHERE f.type_id = %s AND fp.type_id = %s AND f.organism_id = ANY(%s)
            ORDER BY fp.value, f.uniquename""",
    })

    def __init__(self, graph_type='rdf_graph', are_bnodes_skolemized=False, **kwargs):
        super().__init__(graph_type, are_bnodes_skolemized, 'chadogenefamily', **kwargs)
        self.gene_families = self.registry('gene_family', GeneFamily)
        self.consensus_regions = self.registry('consensus_region', ConsensusRegion)
        self.genes = self.registry('gene', Gene)

    def process_database(self, limit=None):
        family_type = self.cvterm('gene_family')
        gene_type = self.cvterm('gene')
        if family_type is None or gene_type is None:
            LOG.error("gene family and gene cvterms are both needed, nothing loaded")
            return

        config = get_config()
        source_organisms = self.getChadoOrganisms(config['organisms'])
        target_organisms = self.getChadoOrganisms(
            config['homologue_organisms'], 'homologue_organisms')

        rows = self.query(self.queries['gene_families'], (family_type,))
        if limit is not None:
            rows = rows[:limit]
        for row in rows:
            self.gene_families.get_or_create(row['value'])
        LOG.info("%i gene families", len(self.gene_families))

        for row in self.query(self.queries['phylotrees']):
            gene_family = self.gene_families.get(row['name'])
            if gene_family is not None and row['comment']:
                gene_family.description = row['comment']

        self.loadConsensusRegions()
        self.loadGenes(family_type, gene_type, source_organisms, target_organisms)

    def loadConsensusRegions(self):
        region_type = self.cvterm('consensus_region')
        if region_type is None:
            return
        for row in self.query(self.queries['consensus_regions'], (region_type,)):
            gene_family = self.gene_families.get(
                ConsensusRegion.gene_family_name(row['uniquename']))
            if gene_family is None:
                continue
            region, created = self.consensus_regions.get_or_create(row['uniquename'])
            region.chado_id = row['feature_id']
            region.secondary_identifier = row['name']
            region.residues = row['residues']
            region.setGeneFamily(gene_family)
        LOG.info("%i consensus regions", len(self.consensus_regions))

    def loadGenes(self, family_type, gene_type, source_organisms, target_organisms):
        organism_ids = sorted(set(source_organisms) | set(target_organisms))
        # family name -> ([source genes], [target genes])
        members = {}
        for row in self.query(
                self.queries['family_genes'], (gene_type, family_type, organism_ids)):
            gene_family = self.gene_families.get(row['value'])
            if gene_family is None:
                continue
            organism = source_organisms.get(row['organism_id'])
            if organism is None:
                organism = target_organisms.get(row['organism_id'])
            gene, created = self.genes.get_or_create(row['uniquename'], organism=organism)
            if created:
                gene.chado_id = row['feature_id']
                if row['name'] and row['name'] != row['uniquename']:
                    gene.secondary_identifier = row['name']
            gene_family.addGene(gene)
            (sources, targets) = members.setdefault(gene_family.primary_identifier, ([], []))
            if row['organism_id'] in source_organisms:
                sources.append(gene)
            if row['organism_id'] in target_organisms:
                targets.append(gene)

        count = 0
        for name, (sources, targets) in members.items():
            gene_family = self.gene_families[name]
            for gene in sources:
                for other in targets:
                    if gene.item_id == other.item_id:
                        continue
                    Homologue(gene, other, gene_family, SAME_GENE_FAMILY)
                    count += 1
        LOG.info("%i genes, %i homologues", len(self.genes), count)
