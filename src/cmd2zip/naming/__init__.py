"""
Name generation strategies for archive entries.
"""

from cmd2zip.naming.generator import (
    NameGenerator,
    NameStrategy,
    NameDecoration,
    DecorationKind,
    NumericCounter,
    build_name_generator,
    expand_template,
)

__all__ = [
    'NameGenerator',
    'NameStrategy',
    'NameDecoration',
    'DecorationKind',
    'NumericCounter',
    'build_name_generator',
    'expand_template'
]
