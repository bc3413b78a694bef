import logging

LOG = logging.getLogger(__name__)


class EntityRegistry:
    """
    Natural key -> entity map used to deduplicate entities
    referenced many times while a pass scans its input.

    The first get_or_create() for a key builds the entity with the factory;
    later calls hand back that same instance so rows can keep merging
    attributes and collections onto it. Nothing is ever removed.

    A scoped registry holds entities whose names are only unique within
    a taxon (features, strains, maps, ...): it keys on (taxon id, key),
    the taxon taken from the `organism` given to get_or_create().
    Looking one up by its bare key works as long as only one taxon has it.

    A registry belongs to exactly one processing pass;
    Source.emit() writes the registered entities once the pass is done.
    """

    def __init__(self, factory, name=None, scoped=False):
        """
        :param factory: callable(key, **fields) -> entity,
            typically an entity class
        :param name: for log messages, defaults to the factory's name
        :param scoped: key on (taxon id, key)
        """
        self.factory = factory
        self.name = name if name is not None else getattr(
            factory, '__name__', str(factory))
        self.scoped = scoped
        self._entities = {}
        # bare key -> scoped keys
        self._scopes = {}

    def scoped_key(self, key, organism=None):
        if not self.scoped:
            return key
        taxon_id = organism.taxon_id if organism is not None else None
        return (taxon_id, key)

    def get_or_create(self, key, **fields):
        """
        :param key: natural key; str for names, int for chado row ids
        :param fields: passed to the factory on creation only,
            so defaults never clobber what earlier rows set
        :return: (entity, was_created)
        """
        if key is None:
            raise ValueError("{} registry can not key on None".format(self.name))
        full_key = self.scoped_key(key, fields.get('organism'))
        entity = self._entities.get(full_key)
        if entity is not None:
            return entity, False
        entity = self.factory(key, **fields)
        self._entities[full_key] = entity
        if self.scoped:
            self._scopes.setdefault(key, []).append(full_key)
        LOG.debug("%s registry created %s", self.name, full_key)
        return entity, True

    def _find(self, key):
        if key in self._entities:
            return self._entities[key]
        full_keys = self._scopes.get(key, [])
        if len(full_keys) == 1:
            return self._entities[full_keys[0]]
        if len(full_keys) > 1:
            raise KeyError("{} '{}' is in more than one taxon, use one of {}".format(
                self.name, key, full_keys))
        raise KeyError(key)

    def get(self, key, default=None):
        try:
            return self._find(key)
        except KeyError:
            return default

    def keys(self):
        return self._entities.keys()

    def items(self):
        return self._entities.items()

    def __getitem__(self, key):
        return self._find(key)

    def __contains__(self, key):
        return key in self._entities or key in self._scopes

    def __iter__(self):
        return iter(self._entities.values())

    def __len__(self):
        return len(self._entities)

    def __repr__(self):
        return '<EntityRegistry {} ({})>'.format(self.name, len(self))
