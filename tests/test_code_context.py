"""
Tests for the context parser: matching order, custom rules and record shape
"""
import re
from pathlib import Path

import pytest

from code_context import (
    ContextParser,
    ContextType,
    FunctionSubtype,
    FunctionContext,
    PropertyContext,
    InvalidPatternError,
    InvalidRuleError,
    DEFAULT_RULES,
    parse_context,
    iter_contexts,
)
from config import settings

FIXTURES = Path(__file__).parent / "fixtures"


# ==================== Parse Context Tests ====================

class TestParseContext:
    """Tests for parse_context"""

    def test_returns_none_when_nothing_matches(self):
        assert parse_context('foo') is None

    def test_function_statement(self):
        ctx = parse_context('function app(a, b, c) {\n\n}')

        assert ctx.type is ContextType.FUNCTION
        assert ctx.subtype is FunctionSubtype.STATEMENT
        assert ctx.name == 'app'
        assert ctx.params == ['a', 'b', 'c']

    def test_function_expression(self):
        ctx = parse_context('var app = function(a, b, c) {\n\n}')

        assert ctx.type is ContextType.FUNCTION
        assert ctx.subtype is FunctionSubtype.EXPRESSION
        assert ctx.name == 'app'
        assert ctx.params == ['a', 'b', 'c']

    def test_module_exports_function_expression(self):
        ctx = parse_context('module.exports = function foo(a, b, c) {\n\n}')

        assert ctx.type is ContextType.FUNCTION
        assert ctx.subtype is FunctionSubtype.EXPRESSION
        assert ctx.name == 'foo'
        assert ctx.params == ['a', 'b', 'c']

    def test_exported_default_class_with_superclass(self):
        ctx = parse_context('export default class FooBar extends Foo.Baz {')

        assert ctx.type is ContextType.CLASS
        assert ctx.name == 'FooBar'
        assert ctx.ctor == 'FooBar'
        assert ctx.extends == 'Foo.Baz'
        assert ctx.string == 'new FooBar()'

    def test_inline_prototype(self):
        ctx = parse_context('App.prototype = {')

        assert ctx.type is ContextType.PROTOTYPE
        assert ctx.ctor == 'App'
        assert ctx.name == 'App'
        assert ctx.string == 'App.prototype'

    def test_prototype_method(self):
        ctx = parse_context('App.prototype.get = function(a, b, c) {}')

        assert ctx.type is ContextType.PROTOTYPE_METHOD
        assert ctx.ctor == 'App'
        assert ctx.name == 'get'
        assert ctx.params == ['a', 'b', 'c']

    def test_parent_is_threaded_into_property(self):
        ctx = parse_context('enabled: true;\nasdf', 'Foo')

        assert ctx.type is ContextType.PROPERTY
        assert ctx.ctor == 'Foo'
        assert ctx.name == 'enabled'
        assert ctx.string == 'Foo.enabled'

    def test_prototype_property(self):
        ctx = parse_context('App.prototype.enabled = true;\nasdf')

        assert ctx.type is ContextType.PROTOTYPE_PROPERTY
        assert ctx.ctor == 'App'
        assert ctx.name == 'enabled'
        assert ctx.value == 'true'

    def test_method(self):
        ctx = parse_context('option.get = function(a, b, c) {}')

        assert ctx.type is ContextType.METHOD
        assert ctx.receiver == 'option'
        assert ctx.name == 'get'
        assert ctx.params == ['a', 'b', 'c']

    def test_property(self):
        ctx = parse_context('option.name = "delims";\nasdf')

        assert ctx.type is ContextType.PROPERTY
        assert ctx.receiver == 'option'
        assert ctx.name == 'name'
        assert ctx.value == '"delims"'

    def test_declaration(self):
        ctx = parse_context('var name = "delims";\nasdf')

        assert ctx.type is ContextType.DECLARATION
        assert ctx.name == 'name'
        assert ctx.value == '"delims"'


class TestParams:
    """Tests for parameter list splitting"""

    def test_function_statement_params(self):
        assert parse_context('function app(a, b) {\n\n}').params == ['a', 'b']

    def test_params_without_spaces(self):
        ctx = parse_context('var app=function(foo,bar) {\n\n}')

        assert ctx.subtype is FunctionSubtype.EXPRESSION
        assert ctx.params == ['foo', 'bar']

    def test_params_across_newlines(self):
        assert parse_context('function app(\n a,\n b)').params == ['a', 'b']

    def test_prototype_method_params(self):
        ctx = parse_context('App.prototype.get = function(key, value, options) {}')
        assert ctx.params == ['key', 'value', 'options']

    def test_constructor_params_are_empty_string(self):
        # constructor records never carry the captured parameters
        assert parse_context('constructor(options) {').params == ['']


# ==================== Parser Tests ====================

class TestContextParser:
    """Tests for ContextParser registration and matching"""

    def test_default_rules_registered(self):
        parser = ContextParser()

        assert len(parser.rules) == len(DEFAULT_RULES) == 20
        assert parser.rules == DEFAULT_RULES

    def test_register_custom_rule(self):
        parser = ContextParser()
        parser.register(r'^@(\w+)\(([^)]*)\)', lambda m, parent: {
            'decorator': m.group(1),
            'params': m.group(2).split(', ')
        })

        ctx = parser.parse('@Component(a, b)')
        assert ctx == {'decorator': 'Component', 'params': ['a', 'b']}

    def test_register_is_chainable(self):
        parser = ContextParser()
        result = parser.register(r'^@a', lambda m, p: 'a').register(r'^@b', lambda m, p: 'b')

        assert result is parser
        assert len(parser.rules) == len(DEFAULT_RULES) + 2
        assert parser.parse('@b') == 'b'

    def test_register_compiled_pattern(self):
        parser = ContextParser()
        parser.register(re.compile(r'^#(\w+)'), lambda m, parent: {'tag': m.group(1)})

        assert parser.parse('#region') == {'tag': 'region'}

    def test_custom_rules_run_after_defaults(self):
        parser = ContextParser()
        parser.register(r'^function', lambda m, parent: 'custom')

        ctx = parser.parse('function app(a) {')
        assert isinstance(ctx, FunctionContext)

    def test_first_record_wins(self):
        parser = ContextParser()
        parser.register(r'^@x', lambda m, parent: 'first')
        parser.register(r'^@x', lambda m, parent: 'second')

        assert parser.parse('@x') == 'first'

    def test_declining_rule_falls_through(self):
        calls = []

        def decline(m, parent):
            calls.append(m.group(0))
            return None

        parser = ContextParser()
        parser.register(r'^@x', decline)
        parser.register(r'^@x', lambda m, parent: 'second')

        assert parser.parse('@x') == 'second'
        assert calls == ['@x']

    def test_earlier_rule_shadows_later_overlapping_rule(self):
        # also matches the receiver method and property rules
        ctx = parse_context('App.prototype.get = function(a) {}')
        assert ctx.type is ContextType.PROTOTYPE_METHOD

    def test_extractor_receives_parent(self):
        parser = ContextParser()
        parser.register(r'^@(\w+)', lambda m, parent: {'owner': parent})

        assert parser.parse('@inject', 'Service') == {'owner': 'Service'}

    def test_extractor_errors_propagate(self):
        def broken(m, parent):
            raise RuntimeError("boom")

        parser = ContextParser()
        parser.register(r'^@', broken)

        with pytest.raises(RuntimeError, match="boom"):
            parser.parse('@Component()')

    def test_invalid_pattern(self):
        parser = ContextParser()

        with pytest.raises(InvalidPatternError) as exc_info:
            parser.register(r'^(unclosed', lambda m, parent: {})

        assert isinstance(exc_info.value, ValueError)
        assert isinstance(exc_info.value.__cause__, re.error)
        assert len(parser.rules) == len(DEFAULT_RULES)

    def test_non_callable_extractor(self):
        parser = ContextParser()

        with pytest.raises(InvalidRuleError) as exc_info:
            parser.register(r'^@', 'not a function')

        assert isinstance(exc_info.value, TypeError)

    def test_parse_is_repeatable(self):
        line = 'static * gen(a, b) {'

        first = ContextParser().parse(line, 'Foo')
        second = ContextParser().parse(line, 'Foo')

        assert first == second
        assert first is not second

    def test_reuse_across_lines(self):
        parser = ContextParser()

        assert parser.parse('function a(x) {').name == 'a'
        assert parser.parse('foo') is None
        assert parser.parse('function b(y) {').name == 'b'

    def test_seeded_text_and_parent(self):
        ctx = ContextParser('enabled: true;\nasdf', 'Foo').parse()

        assert isinstance(ctx, PropertyContext)
        assert ctx.ctor == 'Foo'
        assert ctx.string == 'Foo.enabled'

    def test_call_arguments_override_seed(self):
        parser = ContextParser('enabled: true', 'Foo')
        ctx = parser.parse('visible: false', 'Bar')

        assert ctx.name == 'visible'
        assert ctx.string == 'Bar.visible'

    def test_parse_without_text(self):
        assert ContextParser().parse() is None

    def test_rule_info(self):
        info = ContextParser().get_rule_info()

        assert [entry['position'] for entry in info] == list(range(1, 21))
        assert info[2]['name'] == 'class_declaration'
        assert info[19]['name'] == 'declaration'
        assert info[9]['description'] == "Ctor.prototype.name = function(params)"

    def test_rule_info_keeps_rules_sharing_a_name(self):
        parser = ContextParser()
        parser.register(r'^@(\w+)', lambda m, parent: {'decorator': m.group(1)})
        parser.register(r'^#(\w+)', lambda m, parent: {'directive': m.group(1)})

        info = parser.get_rule_info()

        assert len(info) == len(parser.rules) == len(DEFAULT_RULES) + 2
        assert [entry['name'] for entry in info[-2:]] == ['<lambda>', '<lambda>']
        assert info[-1]['pattern'] == r'^#(\w+)'


# ==================== Record Tests ====================

class TestContextRecords:
    """Tests for context record dicts"""

    def test_class_to_dict(self):
        ctx = parse_context('export default class FooBar extends Foo.Baz {')

        assert ctx.to_dict() == {
            'type': 'class',
            'name': 'FooBar',
            'ctor': 'FooBar',
            'extends': 'Foo.Baz',
            'string': 'new FooBar()'
        }

    def test_function_to_dict(self):
        ctx = parse_context('function app(a, b, c) { }')

        assert ctx.to_dict() == {
            'type': 'function',
            'subtype': 'statement',
            'name': 'app',
            'params': ['a', 'b', 'c'],
            'string': 'app()'
        }

    def test_unset_fields_omitted(self):
        data = parse_context('Foo.prototype.bar').to_dict()

        assert data['type'] == 'prototype property'
        assert 'value' not in data

    def test_type_always_present(self):
        lines = [
            'function a(x) {',
            'class A {',
            'A.prototype.b = 1;',
            'const c = 2;',
        ]
        for line in lines:
            assert 'type' in parse_context(line).to_dict()


# ==================== Line Scanning Tests ====================

class TestIterContexts:
    """Tests for iter_contexts"""

    def test_fixture_classes(self):
        source = (FIXTURES / "classes.js").read_text()
        matches = list(iter_contexts(source))

        assert [line for line, _ in matches] == [1, 2, 3, 5, 8, 9, 13]

        contexts = [ctx for _, ctx in matches]
        assert [ctx.type for ctx in contexts] == [
            ContextType.CLASS,
            ContextType.CONSTRUCTOR,
            ContextType.PROPERTY,
            ContextType.METHOD,
            ContextType.PROPERTY,
            ContextType.PROPERTY,
            ContextType.CLASS,
        ]

        assert contexts[0].extends == 'Foo.Baz'
        assert contexts[1].ctor is None
        assert contexts[1].string == 'constructor()'
        assert contexts[2].receiver == 'this'
        assert contexts[2].string == 'this.options'
        assert contexts[3].string == 'create()'
        assert contexts[4].name == 'label'
        assert contexts[5].name == '_label'
        assert contexts[5].value == 'value'
        assert contexts[6].name == 'Ipsum'
        assert contexts[6].extends == 'mixin(Foo.Bar, Baz)'

    def test_fixture_with_parent(self):
        source = (FIXTURES / "classes.js").read_text()
        strings = [ctx.string for _, ctx in iter_contexts(source, parent='FooBar')]

        assert strings == [
            'new FooBar()',
            'FooBar.prototype.constructor()',
            'this.options',
            'FooBar.create()',
            'FooBar.prototype.label',
            'this._label',
            'new Ipsum()',
        ]

    def test_uses_given_parser(self):
        parser = ContextParser()
        parser.register(r'^@(\w+)', lambda m, parent: {'decorator': m.group(1)})

        matches = list(iter_contexts("  @Injectable\n  plain text\n", parser=parser))
        assert matches == [(1, {'decorator': 'Injectable'})]

    def test_skips_lines_over_limit(self, monkeypatch):
        monkeypatch.setattr(settings.raw, "max_input_length", 20)

        source = "function a(x) {\nfunction withAVeryLongName(x, y, z) {"
        matches = list(iter_contexts(source))

        assert [line for line, _ in matches] == [1]
