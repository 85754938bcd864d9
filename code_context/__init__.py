"""
Code Context Module

Recognizes the code construct declared on a single line of source, such as
a function, class, method, property, prototype assignment or variable, so
documentation tools can label the code that follows a comment block.

Quick Start:
    from code_context import parse_context, ContextParser

    ctx = parse_context('function app(a, b, c) {')
    ctx.name    # 'app'
    ctx.params  # ['a', 'b', 'c']

    # Reuse one parser for many lines, with a parent namespace
    parser = ContextParser()
    parser.parse('static create(options) {', 'Foo').string  # 'Foo.create()'

    # Extra rules run after the defaults
    parser.register(r'^@(\\w+)', lambda m, parent: {'decorator': m.group(1)})
"""

# Records and rules
from .base import (
    ContextType,
    FunctionSubtype,
    CodeContext,
    FunctionContext,
    MethodContext,
    ConstructorContext,
    ClassContext,
    PrototypeMethodContext,
    PrototypePropertyContext,
    PrototypeContext,
    PropertyContext,
    DeclarationContext,
    Rule,
    split_params,
)

from .exceptions import (
    CodeContextError,
    InvalidPatternError,
    InvalidRuleError,
    RuleFileError,
)

from .rules import DEFAULT_RULES
from .loader import load_rules, load_configured_rules, rule_from_dict

# Parser and high-level interface
from .parser import ContextParser, parse_context, iter_contexts

__all__ = [
    # Records
    "ContextType",
    "FunctionSubtype",
    "CodeContext",
    "FunctionContext",
    "MethodContext",
    "ConstructorContext",
    "ClassContext",
    "PrototypeMethodContext",
    "PrototypePropertyContext",
    "PrototypeContext",
    "PropertyContext",
    "DeclarationContext",

    # Rules
    "Rule",
    "DEFAULT_RULES",
    "split_params",
    "load_rules",
    "load_configured_rules",
    "rule_from_dict",

    # Errors
    "CodeContextError",
    "InvalidPatternError",
    "InvalidRuleError",
    "RuleFileError",

    # Parser
    "ContextParser",
    "parse_context",
    "iter_contexts",
]
