"""Topic filter matching and topic validation."""

from typing import Optional, Sequence, Union

from .topic import (
    MAX_LEN,
    MULTI_LEVEL,
    SINGLE_LEVEL,
    WILDCARDS,
    Topic,
    TopicUsage,
    words,
)


class WildcardMatcher:
    """Matches topics against filters with + and # wildcards."""

    @staticmethod
    def match(published: Sequence[str], topic_filter: Sequence[str]) -> bool:
        """Match published levels against filter levels.

        + matches exactly one level, including an empty one (sport/+ matches
        sport/tennis but not sport/tennis/player1).
        # matches every remaining level, including none, when it is the last
        filter level (sport/# matches sport, sport/tennis and sport/tennis/x).

        The filter is assumed valid; a # that is not last is compared as
        plain text.
        """
        n_published = len(published)
        n_filter = len(topic_filter)
        i = 0
        while True:
            if i == n_published and i == n_filter:
                return True
            if i == n_filter:
                return False

            level = topic_filter[i]
            if i < n_published and published[i] == level:
                i += 1
            elif i < n_published and level == SINGLE_LEVEL:
                i += 1
            elif level == MULTI_LEVEL and i == n_filter - 1:
                return True
            else:
                return False

    @staticmethod
    def matches(topic: str, topic_filter: str) -> bool:
        """Match raw topic strings."""
        return WildcardMatcher.match(words(topic), words(topic_filter))

    @staticmethod
    def validate(topic: Topic, usage: Optional[Union[TopicUsage, str]] = None) -> bool:
        """Validate a publish topic or subscribe filter.

        Publish topics may not contain wildcards. Subscribe filters may use +
        as any level and # as the last level only. Neither may embed a
        wildcard character inside other text ("test#topic"). Empty levels are
        allowed anywhere, and a leading or trailing "/" is ignored.
        """
        if not isinstance(topic, Topic):
            raise TypeError(f"Expected Topic, got {type(topic).__name__}")
        usage = topic.usage if usage is None else TopicUsage(usage)
        name = topic.name

        if not name:
            return False

        if len(name.encode("utf-8", "surrogatepass")) > MAX_LEN:
            return False

        levels = words(name)
        if levels[0] == "":
            levels = levels[1:]

        last = len(levels) - 1
        for i, level in enumerate(levels):
            # trailing "/"
            if i == last and level == "":
                return True

            if usage is TopicUsage.SUBSCRIBE:
                if level == MULTI_LEVEL:
                    return i == last
                if level == SINGLE_LEVEL:
                    continue
            elif level in WILDCARDS:
                return False

            if _include_wildcard_char(level):
                return False

        return True


def _include_wildcard_char(level: str) -> bool:
    return MULTI_LEVEL in level or SINGLE_LEVEL in level


match = WildcardMatcher.match
matches = WildcardMatcher.matches
validate = WildcardMatcher.validate
