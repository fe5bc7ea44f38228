"""
Entry name generation.

A name generator is a base strategy (numeric counter, regex match or regex
replacement) followed by zero or more fixed decorations. Decorations are
applied in order, and the builder always adds the prefix before the postfix,
so a fully decorated name reads ``prefix + base + postfix``.

Generators are shared by every worker thread. The regex strategies only read
their compiled pattern; the numeric strategy claims values from a locked
counter so no two calls ever see the same number.
"""

import re
import logging
import threading
from enum import Enum
from typing import Optional, Tuple, List

from cmd2zip.core.config import RunConfig
from cmd2zip.core.errors import ConfigurationError, NamingError

logger = logging.getLogger(__name__)

# $$, ${name} or $name where name is the longest run of word characters
_TEMPLATE_REFERENCE = re.compile(r"\$(?:(\$)|\{([^}]+)\}|([0-9A-Za-z_]+))")


class NameStrategy(str, Enum):
    """Base strategies for deriving a name from a command."""
    NUMERIC = "numeric"              # next value of a shared counter
    REGEX_MATCH = "regex_match"      # entire text matched by the pattern
    REGEX_REPLACE = "regex_replace"  # replacement template expanded over the captures


class DecorationKind(str, Enum):
    PREFIX = "prefix"
    POSTFIX = "postfix"


class NameDecoration:
    """A fixed piece of text wrapped around the inner name."""

    def __init__(self, kind: DecorationKind, text: str):
        self.kind = kind
        self.text = text

    def apply(self, name: str) -> str:
        if self.kind == DecorationKind.PREFIX:
            return self.text + name
        return name + self.text

    def __repr__(self) -> str:
        return f"NameDecoration({self.kind.value}, {self.text!r})"


class NumericCounter:
    """Thread-safe monotonically increasing counter."""

    def __init__(self, start: int = 0):
        self._next = start
        self._lock = threading.Lock()

    def claim(self) -> int:
        """Atomically return the current value and advance the counter."""
        with self._lock:
            value = self._next
            self._next += 1
            return value


def expand_template(match: re.Match, template: str) -> str:
    """
    Expand a replacement template against a regex match.

    Supported references:
        ``$N`` / ``${N}``: positional capture group N
        ``$name`` / ``${name}``: named capture group
        ``$$``: a literal dollar sign

    An unbraced reference takes the longest run of letters, digits and
    underscores, so ``$name.png`` refers to group ``name``. References to
    groups that do not exist or did not participate expand to nothing. A
    ``$`` that starts no valid reference is kept as-is.
    """
    pattern = match.re

    def _lookup(reference: re.Match) -> str:
        if reference.group(1):
            return "$"
        name = reference.group(2) or reference.group(3)
        if name.isdigit():
            index = int(name)
            if index > pattern.groups:
                return ""
            return match.group(index) or ""
        if name not in pattern.groupindex:
            return ""
        return match.group(name) or ""

    return _TEMPLATE_REFERENCE.sub(_lookup, template)


class NameGenerator:
    """
    Derives an archive entry name from a raw command.

    Instances are callable and safe to share across worker threads.
    """

    def __init__(
        self,
        strategy: NameStrategy = NameStrategy.NUMERIC,
        pattern: Optional[str] = None,
        replacement: Optional[str] = None,
        decorations: Tuple[NameDecoration, ...] = (),
    ):
        if strategy == NameStrategy.NUMERIC:
            if pattern is not None or replacement is not None:
                raise ConfigurationError("the numeric name strategy takes no pattern or replacement")
        elif pattern is None:
            raise ConfigurationError(f"the {strategy.value} name strategy requires a pattern")
        elif strategy == NameStrategy.REGEX_REPLACE and replacement is None:
            raise ConfigurationError("the regex_replace name strategy requires a replacement")

        self.strategy = strategy
        self.replacement = replacement
        self.decorations = tuple(decorations)
        self._pattern: Optional[re.Pattern] = None
        if pattern is not None:
            try:
                self._pattern = re.compile(pattern)
            except re.error as e:
                raise ConfigurationError(f"invalid regex {pattern!r}: {e}") from e
        self._counter = NumericCounter() if strategy == NameStrategy.NUMERIC else None

    @property
    def pattern(self) -> Optional[str]:
        return self._pattern.pattern if self._pattern is not None else None

    def base_name(self, command: str) -> str:
        if self.strategy == NameStrategy.NUMERIC:
            return str(self._counter.claim())

        match = self._pattern.search(command)
        if match is None:
            raise NamingError(self._pattern.pattern, command)
        if self.strategy == NameStrategy.REGEX_MATCH:
            return match.group(0)
        return expand_template(match, self.replacement)

    def generate(self, command: str) -> str:
        """Return the entry name for a raw (not yet prefixed) command."""
        name = self.base_name(command)
        for decoration in self.decorations:
            name = decoration.apply(name)
        return name

    __call__ = generate

    def describe(self) -> str:
        if self.strategy == NameStrategy.NUMERIC:
            text = "numeric name generator"
        elif self.strategy == NameStrategy.REGEX_MATCH:
            text = f"regex-based name generator without replacement: {self.pattern}"
        else:
            text = f"regex-based name generator with replacement expansion: {self.pattern} / {self.replacement}"
        if self.decorations:
            text += " (" + ", ".join(f"{d.kind.value} {d.text!r}" for d in self.decorations) + ")"
        return text


def build_name_generator(config: RunConfig) -> NameGenerator:
    """
    Build the name generator for a run.

    Base strategy selection follows the configured pattern and replacement;
    the name prefix is applied first and the name postfix last.

    Raises:
        ConfigurationError: If a replacement is given without a pattern
    """
    if config.name_replace is not None and config.name_pattern is None:
        raise ConfigurationError("cannot specify a name replacement without a name pattern")

    # Prefix first, postfix second
    decorations: List[NameDecoration] = []
    if config.name_prefix:
        decorations.append(NameDecoration(DecorationKind.PREFIX, config.name_prefix))
    if config.name_postfix:
        decorations.append(NameDecoration(DecorationKind.POSTFIX, config.name_postfix))

    if config.name_pattern is not None and config.name_replace is not None:
        generator = NameGenerator(
            NameStrategy.REGEX_REPLACE, config.name_pattern, config.name_replace, tuple(decorations)
        )
    elif config.name_pattern is not None:
        generator = NameGenerator(NameStrategy.REGEX_MATCH, config.name_pattern, decorations=tuple(decorations))
    else:
        generator = NameGenerator(NameStrategy.NUMERIC, decorations=tuple(decorations))

    logger.info("Using %s", generator.describe())
    return generator
