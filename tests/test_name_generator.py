"""Tests for entry name generation."""

import re
import threading

import pytest

from cmd2zip.core.config import RunConfig
from cmd2zip.core.errors import ConfigurationError, NamingError
from cmd2zip.naming.generator import (
    DecorationKind,
    NameDecoration,
    NameGenerator,
    NameStrategy,
    NumericCounter,
    build_name_generator,
    expand_template,
)


def test_numeric_names_start_at_zero():
    generator = build_name_generator(RunConfig())

    assert generator.strategy == NameStrategy.NUMERIC
    assert [generator("echo a"), generator("echo b"), generator("echo c")] == ["0", "1", "2"]


def test_numeric_counter_never_repeats_under_concurrency():
    generator = NameGenerator(NameStrategy.NUMERIC)
    names = []
    lock = threading.Lock()

    def worker():
        local = [generator("cmd") for _ in range(250)]
        with lock:
            names.extend(local)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(names) == 2000
    assert set(names) == {str(i) for i in range(2000)}


def test_numeric_counter_claims_sequential_values():
    counter = NumericCounter(start=5)
    assert [counter.claim() for _ in range(3)] == [5, 6, 7]


def test_pattern_with_named_replacement():
    config = RunConfig(name_pattern=r"(?P<n>\w+)\.svg$", name_replace="$n.png")
    generator = build_name_generator(config)

    assert generator.strategy == NameStrategy.REGEX_REPLACE
    assert generator("resvg a/icon.svg") == "icon.png"


def test_pattern_with_positional_replacement():
    config = RunConfig(name_pattern=r"([\w-]+)\.svg$", name_replace="$1.png")
    generator = build_name_generator(config)

    assert generator("resvg -w 128 ./icons/arrow-left.svg") == "arrow-left.png"


def test_pattern_without_replacement_uses_whole_match():
    config = RunConfig(name_pattern=r"([\w-]+)\.svg")
    generator = build_name_generator(config)

    assert generator.strategy == NameStrategy.REGEX_MATCH
    # Entire match, not just group 1
    assert generator("resvg icons/home.svg -c") == "home.svg"


def test_pattern_without_match_raises_naming_error():
    generator = build_name_generator(RunConfig(name_pattern=r"\.svg$", name_replace="x"))

    with pytest.raises(NamingError) as excinfo:
        generator("resvg icon.png")

    assert excinfo.value.command == "resvg icon.png"
    assert excinfo.value.pattern == r"\.svg$"


def test_replacement_without_pattern_is_rejected():
    config = RunConfig.model_construct(name_replace="$1.png")

    with pytest.raises(ConfigurationError):
        build_name_generator(config)


def test_prefix_is_applied_before_postfix():
    config = RunConfig(name_prefix="out/", name_postfix=".log")
    generator = build_name_generator(config)

    assert [d.kind for d in generator.decorations] == [DecorationKind.PREFIX, DecorationKind.POSTFIX]
    assert generator("echo hi") == "out/0.log"


def test_decorations_wrap_regex_names():
    config = RunConfig(
        name_pattern=r"(?P<stem>\w+)\.svg$",
        name_replace="${stem}_128.png",
        name_prefix="icons-",
        name_postfix=".bin",
    )
    assert build_name_generator(config)("resvg a/b.svg") == "icons-b_128.png.bin"


def test_decoration_apply():
    assert NameDecoration(DecorationKind.PREFIX, "a-").apply("x") == "a-x"
    assert NameDecoration(DecorationKind.POSTFIX, "-z").apply("x") == "x-z"


def test_strategy_arguments_are_validated():
    with pytest.raises(ConfigurationError):
        NameGenerator(NameStrategy.REGEX_MATCH)
    with pytest.raises(ConfigurationError):
        NameGenerator(NameStrategy.REGEX_REPLACE, pattern="a")
    with pytest.raises(ConfigurationError):
        NameGenerator(NameStrategy.NUMERIC, pattern="a")
    with pytest.raises(ConfigurationError):
        NameGenerator(NameStrategy.REGEX_MATCH, pattern="(")


class TestExpandTemplate:
    """Replacement template expansion."""

    def _match(self, pattern, text):
        match = re.search(pattern, text)
        assert match is not None
        return match

    def test_named_and_positional_references(self):
        match = self._match(r"(?P<dir>\w+)/(?P<file>\w+)\.(\w+)", "src/main.rs")
        assert expand_template(match, "$file-$dir.$3") == "main-src.rs"

    def test_braced_reference_ends_at_brace(self):
        match = self._match(r"(?P<n>\w+)\.svg", "icon.svg")
        assert expand_template(match, "${n}_large") == "icon_large"

    def test_unbraced_reference_is_greedy(self):
        match = self._match(r"(?P<n>\w+)\.svg", "icon.svg")
        # Refers to a group called "n_large", which does not exist
        assert expand_template(match, "$n_large") == ""

    def test_zero_is_the_whole_match(self):
        match = self._match(r"\w+\.svg", "resvg icon.svg")
        assert expand_template(match, "$0") == "icon.svg"

    def test_missing_groups_expand_to_nothing(self):
        match = self._match(r"(a)(b)?", "a")
        assert expand_template(match, "[$2][$9][$nope]") == "[][][]"

    def test_dollar_escapes(self):
        match = self._match(r"(\w+)", "cost")
        assert expand_template(match, "$$$1") == "$cost"
        assert expand_template(match, "$-$") == "$-$"
