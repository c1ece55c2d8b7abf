"""Decompose topics into trie keys."""

from enum import Enum
from typing import List, NamedTuple, Union

from .topic import SEPARATOR


class Root(Enum):
    """Parent marker for the shallowest level of a topic."""
    ROOT = "root"

    def __repr__(self):
        return "ROOT"


ROOT = Root.ROOT


class Triple(NamedTuple):
    """One level of a topic.

    parent is the path above this level (ROOT at depth 0), remainder the
    level itself and full the path up to and including it.
    """
    parent: Union[Root, str]
    remainder: str
    full: str


def triples(topic: str) -> List[Triple]:
    """Return one Triple per level, ordered from the root to the full topic.

    >>> [t.full for t in triples("a/b/c")]
    ['a', 'a/b', 'a/b/c']
    """
    result = []
    prefix = topic
    while True:
        cut = prefix.rfind(SEPARATOR)
        if cut < 0:
            result.append(Triple(ROOT, prefix, prefix))
            break
        parent = prefix[:cut]
        result.append(Triple(parent, prefix[cut + 1:], prefix))
        prefix = parent
    result.reverse()
    return result
