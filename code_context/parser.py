"""
Context Parser

Walks an ordered list of rules against one line of source and returns
the record of the first rule whose extractor produces one.
"""
import re
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, Union

from .base import Rule, Extractor
from .rules import DEFAULT_RULES
from .loader import load_rules, load_configured_rules
from config import settings
from logger import get_logger

logger = get_logger(__name__)


class ContextParser:
    """
    Ordered rule registry and matching engine

    Example:
        parser = ContextParser()
        parser.register(r'^@(\\w+)', lambda m, parent: {'decorator': m.group(1)})

        ctx = parser.parse('App.prototype.get = function(key) {}')
        ctx.string  # 'App.prototype.get()'

        ctx = parser.parse('enabled: true', 'Foo')
        ctx.string  # 'Foo.enabled'

    A parser may also be seeded with a line and parent, in which case
    parse() called without arguments uses them.
    """

    def __init__(
        self,
        text: Optional[str] = None,
        parent: Optional[str] = None,
        rules_file: Optional[str] = None
    ):
        self.text = text
        self.parent = parent
        self._rules: List[Rule] = list(DEFAULT_RULES)

        if rules_file:
            self.register_rules(load_rules(rules_file))
        elif settings.rules_file:
            # read and logged once per process, see load_configured_rules
            self._rules.extend(load_configured_rules(str(settings.rules_file)))

    @property
    def rules(self) -> Tuple[Rule, ...]:
        """Registered rules in evaluation order"""
        return tuple(self._rules)

    def register(
        self,
        pattern: Union[str, re.Pattern],
        extractor: Extractor,
        name: Optional[str] = None,
        description: str = ""
    ) -> "ContextParser":
        """
        Append a rule after those already registered

        Args:
            pattern: Regex string or compiled pattern, searched against the input
            extractor: Callable taking (match, parent) and returning a record,
                or a falsy value to let later rules try
            name: Rule name for logs and introspection
            description: Short human-readable description

        Returns:
            The parser, for chaining
        """
        return self.add_rule(Rule(pattern, extractor, name=name, description=description))

    def add_rule(self, rule: Rule) -> "ContextParser":
        """Append an already constructed rule"""
        self._rules.append(rule)
        logger.info(f"Registered context rule '{rule.name}' at position {len(self._rules)}")
        return self

    def register_rules(self, rules: Iterable[Rule]) -> "ContextParser":
        for rule in rules:
            self.add_rule(rule)
        return self

    def parse(self, text: Optional[str] = None, parent: Optional[str] = None) -> Optional[Any]:
        """
        Parse a line of code with all registered rules

        Args:
            text: Line to parse (defaults to the text given at construction)
            parent: Enclosing class or object name (defaults to the parent
                given at construction)

        Returns:
            The first truthy extractor result, or None when no rule matches
        """
        if text is None:
            text = self.text
        if parent is None:
            parent = self.parent
        if text is None:
            return None

        for rule in self._rules:
            match = rule.compiled_regex.search(text)
            if not match:
                continue

            ctx = rule.extractor(match, parent)
            if ctx:
                logger.debug(f"Rule '{rule.name}' matched: {text[:80]!r}")
                return ctx

            logger.debug(f"Rule '{rule.name}' matched but declined: {text[:80]!r}")

        logger.debug(f"No context rule matched: {text[:80]!r}")
        return None

    def get_rule_info(self) -> List[Dict[str, Any]]:
        """
        Get information about all registered rules, in evaluation order

        Rule names need not be unique (every lambda is '<lambda>'), so the
        result is a list rather than a mapping keyed by name.
        """
        return [
            {
                "position": position,
                "name": rule.name,
                "pattern": rule.compiled_regex.pattern,
                "description": rule.description
            }
            for position, rule in enumerate(self._rules, 1)
        ]


def parse_context(text: str, parent: Optional[str] = None) -> Optional[Any]:
    """Parse one line with a default-configured parser"""
    return ContextParser().parse(text, parent)


def iter_contexts(
    text: str,
    parent: Optional[str] = None,
    parser: Optional[ContextParser] = None
) -> Iterator[Tuple[int, Any]]:
    """
    Parse each line of a block of source independently

    Leading whitespace is stripped from every line before parsing.

    Args:
        text: Source text
        parent: Parent namespace passed to every line
        parser: Parser to use (defaults to a default-configured one)

    Yields:
        (line_number, context) for lines that matched, 1-based
    """
    parser = parser or ContextParser()
    max_length = settings.max_input_length

    for line_number, line in enumerate(text.splitlines(), 1):
        if max_length and len(line) > max_length:
            logger.warning(f"Skipping line {line_number}: {len(line)} chars exceeds limit of {max_length}")
            continue

        ctx = parser.parse(line.lstrip(), parent)
        if ctx:
            yield line_number, ctx
