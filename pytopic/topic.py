"""Topic values, tokenizing and classification.

A topic is split into levels on "/". Levels may be empty: "a//b" has an empty
middle level, "/a" an empty first level and "a/" an empty last level. Splitting
never drops a level, so words() and unword() are exact inverses.
"""

from enum import Enum
from typing import List, Sequence, Union


SEPARATOR = "/"
SINGLE_LEVEL = "+"
MULTI_LEVEL = "#"
WILDCARDS = (SINGLE_LEVEL, MULTI_LEVEL)

# 64 KiB, measured in UTF-8 bytes
MAX_LEN = 64 * 1024


class TopicUsage(str, Enum):
    """Which rule set a topic is validated against."""
    PUBLISH = "publish"
    SUBSCRIBE = "subscribe"


class TopicType(str, Enum):
    DIRECT = "direct"
    WILDCARD = "wildcard"


class Topic:
    """A raw topic string tagged with its usage.

    No validation happens here; see wildcard.validate().
    """

    __slots__ = ("name", "usage")

    def __init__(self, name: str, usage: Union[TopicUsage, str] = TopicUsage.PUBLISH):
        if not isinstance(name, str):
            raise TypeError(f"Topic name must be str, got {type(name).__name__}")
        self.name = name
        self.usage = TopicUsage(usage)

    def words(self) -> List[str]:
        """Levels of this topic."""
        return words(self.name)

    def type(self) -> TopicType:
        """Direct or wildcard."""
        return classify(self)

    def __eq__(self, other):
        if not isinstance(other, Topic):
            return NotImplemented
        return self.name == other.name and self.usage == other.usage

    def __hash__(self):
        return hash((self.name, self.usage))

    def __repr__(self):
        return f"Topic({self.name!r}, {self.usage.value})"


def new_topic(name: str, usage: Union[TopicUsage, str] = TopicUsage.PUBLISH) -> Topic:
    """Wrap a raw string as a Topic."""
    return Topic(name, usage)


def words(topic: str) -> List[str]:
    """Split a topic into its levels, keeping empty ones.

    words("") is [""]: an empty string is one empty level. Rejecting empty
    topics is left to the validator.
    """
    levels = []
    start = 0
    while True:
        end = topic.find(SEPARATOR, start)
        if end < 0:
            levels.append(topic[start:])
            return levels
        levels.append(topic[start:end])
        start = end + 1


def unword(levels: Sequence[str]) -> str:
    """Join levels back into a topic string.

    unword([]) is "": words() never returns an empty list, so this case has
    no topic to restore.
    """
    return SEPARATOR.join(levels)


def classify(topic: Union[Topic, Sequence[str]]) -> TopicType:
    """Return WILDCARD if any level is exactly "+" or "#", else DIRECT.

    Wildcard characters embedded in a longer level are not wildcards here;
    the validator rejects those.
    """
    levels = topic.words() if isinstance(topic, Topic) else topic
    for level in levels:
        if level in WILDCARDS:
            return TopicType.WILDCARD
    return TopicType.DIRECT
