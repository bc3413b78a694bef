from abc import ABCMeta, abstractmethod
import os
import re

import yaml

from legfed import curie_map as curie_map_module
from legfed.utils.CurieUtil import CurieUtil

GLOBAL_TERMS = os.path.join(
    os.path.dirname(__file__), '../../translationtable/GLOBAL_TERMS.yaml')


def load_global_terms():
    with open(GLOBAL_TERMS) as fhandle:
        return yaml.safe_load(fhandle)


class Graph(metaclass=ABCMeta):
    """
    Anything the loaders emit entities into.
    Subjects and predicates are given as CURIEs (or blank node ids
    starting with '_:'), objects as CURIEs or literals.
    """

    # strings which could be well formed curies
    # https://www.w3.org/TR/curie/
    # hyphens are allowed inside the local part, chado names are full of them
    curie_regexp = re.compile(
        r'^[a-zA-Z_]*[a-zA-Z_0-9-]*:[A-Za-z0-9_][A-Za-z0-9_.-]*[A-Za-z0-9_]*$')

    curie_map = curie_map_module.get()
    curie_util = CurieUtil(curie_map)

    # global translation table, ontology label -> curie
    globaltt = load_global_terms()
    globaltcid = {v: k for k, v in globaltt.items()}

    @abstractmethod
    def addTriple(
            self,
            subject_id,
            predicate_id,
            obj,
            object_is_literal=None,
            literal_type=None):
        pass

    @abstractmethod
    def skolemizeBlankNode(self, curie):
        pass

    @abstractmethod
    def serialize(self, **kwargs):
        pass

    def _is_literal(self, thing):
        """
        make inference on type (literal or CURIE)

        return: logical
        """
        if not isinstance(thing, str):
            return True
        if self.curie_regexp.match(thing) is not None or \
                thing.split(':')[0].lower() in ('http', 'https', 'ftp'):
            return False
        return True
