"""
Default rules for recognizing the code construct on a single line.

Order matters: the parser returns the record of the first rule that
produces one, so earlier rules shadow later ones.
"""
import re
from typing import Optional, Tuple

from .base import (
    Rule,
    FunctionSubtype,
    FunctionContext,
    MethodContext,
    ConstructorContext,
    ClassContext,
    PrototypeMethodContext,
    PrototypePropertyContext,
    PrototypeContext,
    PropertyContext,
    DeclarationContext,
    split_params,
    trim,
    qualify,
)


def _module_exports_method(m: re.Match, parent: Optional[str]) -> MethodContext:
    # string is built from the raw parameter text
    return MethodContext(
        receiver=m.group(1),
        name='',
        params=split_params(m.group(2)),
        string=m.group(1) + '.' + m.group(2) + '()',
        original=m.string
    )


def _module_exports_function(m: re.Match, parent: Optional[str]) -> FunctionContext:
    return FunctionContext(
        subtype=FunctionSubtype.EXPRESSION,
        receiver=m.group(1),
        name=m.group(2),
        params=split_params(m.group(3)),
        string=m.group(2) + '()',
        original=m.string
    )


def _class_declaration(m: re.Match, parent: Optional[str]) -> ClassContext:
    return ClassContext(
        ctor=m.group(3),
        name=m.group(3),
        extends=m.group(5),
        string='new ' + m.group(3) + '()'
    )


def _class_constructor(m: re.Match, parent: Optional[str]) -> ConstructorContext:
    # The captured parameters are not used; params is always ['']
    return ConstructorContext(
        ctor=parent,
        params=split_params(None),
        string=qualify(parent, '.prototype.') + 'constructor()'
    )


def _class_method(m: re.Match, parent: Optional[str]) -> MethodContext:
    name = (m.group(2) or '') + m.group(3)
    return MethodContext(
        ctor=parent,
        name=name,
        params=split_params(m.group(4)),
        string=qualify(parent, '.' if m.group(1) else '.prototype.') + name + '()'
    )


def _function_statement(m: re.Match, parent: Optional[str]) -> FunctionContext:
    return FunctionContext(
        subtype=FunctionSubtype.STATEMENT,
        name=m.group(3),
        params=split_params(m.group(4)),
        string=m.group(3) + '()'
    )


def _export_default_function(m: re.Match, parent: Optional[str]) -> FunctionContext:
    # Anonymous: no name and no parameters are recorded
    return FunctionContext(
        name=None,
        params=split_params(None),
        string='()'
    )


def _returned_function(m: re.Match, parent: Optional[str]) -> FunctionContext:
    return FunctionContext(
        subtype=FunctionSubtype.EXPRESSION,
        name=m.group(1),
        params=split_params(None),
        string=(m.group(1) or '') + '()'
    )


def _function_expression(m: re.Match, parent: Optional[str]) -> FunctionContext:
    return FunctionContext(
        subtype=FunctionSubtype.EXPRESSION,
        name=m.group(1),
        params=split_params(m.group(2)),
        string=(m.group(1) or '') + '()'
    )


def _prototype_method(m: re.Match, parent: Optional[str]) -> PrototypeMethodContext:
    return PrototypeMethodContext(
        ctor=m.group(1),
        name=m.group(2),
        params=split_params(m.group(3)),
        string=m.group(1) + '.prototype.' + m.group(2) + '()'
    )


def _prototype_property(m: re.Match, parent: Optional[str]) -> PrototypePropertyContext:
    return PrototypePropertyContext(
        ctor=m.group(1),
        name=m.group(2),
        value=trim(m.group(3)),
        string=m.group(1) + '.prototype.' + m.group(2)
    )


def _prototype_member(m: re.Match, parent: Optional[str]) -> PrototypePropertyContext:
    return PrototypePropertyContext(
        ctor=m.group(1),
        name=m.group(2),
        string=m.group(1) + '.prototype.' + m.group(2)
    )


def _inline_prototype(m: re.Match, parent: Optional[str]) -> PrototypeContext:
    return PrototypeContext(
        ctor=m.group(1),
        name=m.group(1),
        string=m.group(1) + '.prototype'
    )


def _arrow_function(m: re.Match, parent: Optional[str]) -> FunctionContext:
    return FunctionContext(
        ctor=parent,
        name=m.group(1),
        string=qualify(parent, '.prototype.') + m.group(1) + '()'
    )


def _inline_method(m: re.Match, parent: Optional[str]) -> MethodContext:
    return MethodContext(
        ctor=parent,
        name=m.group(1),
        string=qualify(parent, '.prototype.') + m.group(1) + '()'
    )


def _inline_property(m: re.Match, parent: Optional[str]) -> PropertyContext:
    return PropertyContext(
        ctor=parent,
        name=m.group(1),
        value=trim(m.group(2)),
        string=qualify(parent, '.') + m.group(1)
    )


def _accessor(m: re.Match, parent: Optional[str]) -> PropertyContext:
    return PropertyContext(
        ctor=parent,
        name=m.group(2),
        string=qualify(parent, '.prototype.') + m.group(2)
    )


def _receiver_method(m: re.Match, parent: Optional[str]) -> MethodContext:
    return MethodContext(
        receiver=m.group(1),
        name=m.group(2),
        params=split_params(m.group(3)),
        string=m.group(1) + '.' + m.group(2) + '()'
    )


def _receiver_property(m: re.Match, parent: Optional[str]) -> PropertyContext:
    return PropertyContext(
        receiver=m.group(1),
        name=m.group(2),
        value=trim(m.group(3)),
        string=m.group(1) + '.' + m.group(2)
    )


def _declaration(m: re.Match, parent: Optional[str]) -> DeclarationContext:
    return DeclarationContext(
        name=m.group(1),
        value=trim(m.group(2)),
        string=m.group(1)
    )


DEFAULT_RULES: Tuple[Rule, ...] = (
    Rule(
        re.compile(r'^(module\.exports)\s*=\s*function\s*\(([^)]+)', re.ASCII),
        _module_exports_method,
        description="module.exports = function(params)"
    ),
    Rule(
        re.compile(r'^(module\.exports)\s*=\s*function\s([\w$]+)\s*\(([^)]+)', re.ASCII),
        _module_exports_function,
        description="module.exports = function name(params)"
    ),
    Rule(
        re.compile(r'^\s*(export(\s+default)?\s+)?class\s+([\w$]+)(\s+extends\s+([\w$.]+(?:\(.*\))?))?\s*\{', re.ASCII),
        _class_declaration,
        description="[export [default]] class Name [extends Super] {"
    ),
    Rule(
        re.compile(r'^\s*constructor\s*\(([^)]+)', re.ASCII),
        _class_constructor,
        description="constructor(params)"
    ),
    Rule(
        re.compile(r'^\s*(static)?\s*(\*)?\s*([\w$]+|\[.*\])\s*\(([^)]+)', re.ASCII),
        _class_method,
        description="[static] [*] name(params)"
    ),
    Rule(
        re.compile(r'^\s*(export(\s+default)?\s+)?function\s+([\w$]+)\s*\(([^)]+)', re.ASCII),
        _function_statement,
        description="[export [default]] function name(params)"
    ),
    Rule(
        re.compile(r'^\s*export\s+default\s+function\s*\(([^)]+)', re.ASCII),
        _export_default_function,
        description="export default function(params)"
    ),
    Rule(
        re.compile(r'^return\s+function(?:\s+([\w$]+))?\s*\(([^)]+)', re.ASCII),
        _returned_function,
        description="return function [name](params)"
    ),
    Rule(
        re.compile(r'^\s*(?:const|let|var)\s+([\w$]+)\s*=\s*function\s*\(([^)]+)', re.ASCII),
        _function_expression,
        description="var name = function(params)"
    ),
    Rule(
        re.compile(r'^\s*([\w$.]+)\s*\.\s*prototype\s*\.\s*([\w$]+)\s*=\s*function\s*\(([^)]+)', re.ASCII),
        _prototype_method,
        description="Ctor.prototype.name = function(params)"
    ),
    Rule(
        re.compile(r'^\s*([\w$.]+)\s*\.\s*prototype\s*\.\s*([\w$]+)\s*=\s*([^\n;]+)', re.ASCII),
        _prototype_property,
        description="Ctor.prototype.name = value"
    ),
    Rule(
        re.compile(r'^\s*([\w$]+)\s*\.\s*prototype\s*\.\s*([\w$]+)\s*', re.ASCII),
        _prototype_member,
        description="Ctor.prototype.name"
    ),
    Rule(
        re.compile(r'^\s*([\w$.]+)\s*\.\s*prototype\s*=\s*\{', re.ASCII),
        _inline_prototype,
        description="Ctor.prototype = {"
    ),
    Rule(
        re.compile(r'^\s*\(*\s*([\w$.]+)\s*\)*\s*=>', re.ASCII),
        _arrow_function,
        description="(name) =>"
    ),
    Rule(
        re.compile(r'^\s*([\w$.]+)\s*:\s*function\s*\(([^)]+)', re.ASCII),
        _inline_method,
        description="name: function(params)"
    ),
    Rule(
        re.compile(r'^\s*([\w$.]+)\s*:\s*([^\n;]+)', re.ASCII),
        _inline_property,
        description="name: value"
    ),
    Rule(
        re.compile(r'^\s*(get|set)\s*([\w$.]+)\s*\(([^)]+)', re.ASCII),
        _accessor,
        description="get|set name(params)"
    ),
    Rule(
        re.compile(r'^\s*([\w$.]+)\s*\.\s*([\w$]+)\s*=\s*function\s*\(([^)]+)', re.ASCII),
        _receiver_method,
        description="receiver.name = function(params)"
    ),
    Rule(
        re.compile(r'^\s*([\w$.]+)\s*\.\s*([\w$]+)\s*=\s*([^\n;]+)', re.ASCII),
        _receiver_property,
        description="receiver.name = value"
    ),
    Rule(
        re.compile(r'^\s*(?:const|let|var)\s+([\w$]+)\s*=\s*([^\n;]+)', re.ASCII),
        _declaration,
        description="var name = value"
    ),
)
