import logging

import psycopg2
import psycopg2.extras

from legfed.config import get_config
from legfed.sources.Source import Source

LOG = logging.getLogger(__name__)


class PostgreSQLSource(Source):
    """
    Class for interfacing with a chado Postgres database.
    Connection details come from the 'dbauth' section of conf.yaml:

        dbauth:
          chado:
            host: localhost
            port: 5432
            database: chado
            user: chado
            password: secret

    Subclasses keep their SQL in the `queries` dict and run it with query();
    values are always passed as parameters.

    """

    queries = {
        'cvterm': "SELECT cvterm_id FROM cvterm WHERE name = %s",
        'organism': "SELECT organism_id FROM organism WHERE genus = %s AND species = %s",
    }

    def __init__(
            self, graph_type='rdf_graph', are_bnodes_skolemized=False, name=None,
            dbauth='chado', connection=None, **kwargs):
        super().__init__(graph_type, are_bnodes_skolemized, name, **kwargs)
        self.dbauth = dbauth
        self.connection = connection
        self.cvterm_ids = {}

    def fetch(self):
        LOG.info("%s reads the database directly, nothing to fetch", self.name)

    def connect(self):
        if self.connection is None:
            cxn = get_config()['dbauth'].get(self.dbauth)
            if cxn is None:
                raise ValueError(
                    "no '{}' database in the dbauth section of conf.yaml".format(self.dbauth))
            LOG.info("Connecting to %s on %s", cxn.get('database'), cxn.get('host'))
            self.connection = psycopg2.connect(
                host=cxn.get('host'), port=cxn.get('port'), dbname=cxn.get('database'),
                user=cxn.get('user'), password=cxn.get('password'))
        return self.connection

    def close(self):
        if self.connection is not None:
            self.connection.close()
            self.connection = None

    def query(self, sql, params=None):
        """
        :param sql: str with %s placeholders
        :param params: tuple of values; lists are passed as arrays for ANY(%s)
        :return: list of rows as dicts keyed on column name
        """
        LOG.debug("COMMAND: %s %s", sql, params)
        with self.connect().cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cur:
            cur.execute(sql, params)
            return cur.fetchall()

    def get_cvterm_id(self, name):
        """
        :return: cvterm_id, or None (logged) when chado has no such term
        """
        if name not in self.cvterm_ids:
            rows = self.query(self.queries['cvterm'], (name,))
            if not rows:
                LOG.error("Could not determine CV term id for '%s'", name)
                self.cvterm_ids[name] = None
            else:
                self.cvterm_ids[name] = rows[0]['cvterm_id']
        return self.cvterm_ids[name]

    def cvterm(self, key):
        """
        cvterm_id of one of the cvterms named in conf.yaml
        """
        return self.get_cvterm_id(get_config()['cvterms'][key])

    def getChadoOrganisms(self, configured, setting='organisms'):
        """
        Match configured organisms to chado organism rows by genus and species.
        :param configured: list of dicts with taxon_id, variety, genus, species
        :return: dict chado organism_id -> Organism
        """
        if not configured:
            raise ValueError(
                "{} needs at least one organism in '{}' of conf.yaml".format(
                    self.name, setting))
        organisms = {}
        for org in configured:
            rows = self.query(self.queries['organism'], (org['genus'], org['species']))
            if not rows:
                LOG.error(
                    "%s %s (%s) is not in chado", org['genus'], org['species'],
                    org['taxon_id'])
                continue
            organisms[rows[0]['organism_id']] = self.getOrganism(
                org['taxon_id'], org.get('variety'), org['genus'], org['species'])
        LOG.info("%i of %i configured organisms found in chado", len(organisms), len(configured))
        return organisms

    def parse(self, limit=None):
        """
        Run process_database() then emit().
        A database which can not be reached is logged and
        recorded in self.failures.
        """
        try:
            self.process_database(limit)
        except psycopg2.OperationalError as err:
            self.record_failure(self.dbauth, err)
            return
        finally:
            self.close()
        self.emit()

    def process_database(self, limit=None):
        raise NotImplementedError

    def process_file(self, path, limit=None):
        raise NotImplementedError("{} does not read files".format(self.name))
