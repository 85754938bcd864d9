"""
Rule file loader.

Loads declarative context rules from YAML so projects can teach the parser
extra code shapes without writing Python. A rule file looks like:

    rules:
      - name: decorator_factory
        pattern: '^@([\\w$.]+)\\(([^)]*)\\)'
        type: function
        subtype: expression
        description: "@name(params)"
        fields:
          name: 1
          params: 2
          ctor: parent
        string: "@{name}()"

`fields` maps a record field to a capture group (index or group name), or to
the word `parent` for the parent namespace. `params` fields are split the way
the built-in rules split parameter lists; other fields are trimmed. `string`
is a str.format template over the extracted fields plus `parent`.
"""
import re
from dataclasses import fields as dataclass_fields
from functools import lru_cache
from pathlib import Path
from string import Formatter
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml

from .base import (
    Rule,
    ContextType,
    FunctionSubtype,
    CONTEXT_CLASSES,
    split_params,
    trim,
)
from .exceptions import InvalidRuleError, RuleFileError
from logger import get_logger

logger = get_logger(__name__)

PARENT_REFERENCE = "parent"
CONVERSIONS = (None, "r", "s", "a")


class TemplateExtractor:
    """Builds a context record from a match using a field-to-group mapping"""

    def __init__(
        self,
        context_type: ContextType,
        field_groups: Dict[str, Union[int, str]],
        string_template: Optional[str] = None,
        subtype: Optional[FunctionSubtype] = None
    ):
        self.context_class = CONTEXT_CLASSES[context_type]
        self.field_groups = field_groups
        self.string_template = string_template
        self.subtype = subtype

    def __call__(self, match: re.Match, parent: Optional[str]):
        values: Dict[str, Any] = {}
        for field_name, group in self.field_groups.items():
            if group == PARENT_REFERENCE:
                values[field_name] = parent
            elif field_name == "params":
                values[field_name] = split_params(match.group(group))
            else:
                values[field_name] = trim(match.group(group))

        if self.string_template is not None:
            values["string"] = self.string_template.format(parent=parent or "", **values)
        if self.subtype is not None:
            values["subtype"] = self.subtype

        return self.context_class(**values)


def load_rules(path: Union[str, Path]) -> List[Rule]:
    """
    Load rules from a YAML rule file

    Args:
        path: Path to the rule file

    Returns:
        Rules in file order
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise RuleFileError(f"Cannot read rule file {path}: {e}", original_error=e) from e
    except yaml.YAMLError as e:
        raise RuleFileError(f"Invalid YAML in rule file {path}: {e}", original_error=e) from e

    if not data:
        logger.warning(f"Rule file {path} is empty")
        return []

    entries = data.get("rules") if isinstance(data, dict) else None
    if not isinstance(entries, list):
        raise RuleFileError(f"Rule file {path} must contain a 'rules' list")

    rules = [rule_from_dict(entry) for entry in entries]
    logger.info(f"Loaded {len(rules)} context rules from {path}")
    return rules


@lru_cache(maxsize=None)
def load_configured_rules(path: str) -> Tuple[Rule, ...]:
    """
    Load the rule file named in settings, once per path

    Later calls for the same path reuse the first result and do not touch
    the file again. Call load_configured_rules.cache_clear() to reload.
    """
    return tuple(load_rules(path))


def rule_from_dict(entry: Dict[str, Any]) -> Rule:
    """Build a rule from one rule file entry"""
    if not isinstance(entry, dict):
        raise InvalidRuleError(f"Rule entry must be a mapping, got {type(entry).__name__}")

    name = entry.get("name")
    if not entry.get("pattern"):
        raise InvalidRuleError("Rule entry requires a pattern", rule_name=name)

    try:
        context_type = ContextType(entry.get("type"))
    except ValueError:
        raise InvalidRuleError(f"Unknown context type: {entry.get('type')!r}", rule_name=name)

    subtype = None
    if entry.get("subtype"):
        if context_type is not ContextType.FUNCTION:
            raise InvalidRuleError("Only function rules take a subtype", rule_name=name)
        try:
            subtype = FunctionSubtype(entry["subtype"])
        except ValueError:
            raise InvalidRuleError(f"Unknown function subtype: {entry['subtype']!r}", rule_name=name)

    field_groups = entry.get("fields") or {}
    allowed = {f.name for f in dataclass_fields(CONTEXT_CLASSES[context_type]) if f.init}
    allowed.discard("subtype")
    unknown = set(field_groups) - allowed
    if unknown:
        raise InvalidRuleError(
            f"Fields {sorted(unknown)} are not valid for '{context_type.value}' records",
            rule_name=name
        )

    string_template = entry.get("string")
    if string_template is not None:
        _check_template(string_template, field_groups, name)

    extractor = TemplateExtractor(
        context_type,
        field_groups,
        string_template=string_template,
        subtype=subtype
    )
    rule = Rule(entry["pattern"], extractor, name=name, description=entry.get("description", ""))
    _check_groups(rule, field_groups)
    return rule


def _check_template(template: Any, field_groups: Dict[str, Union[int, str]], name: Optional[str]) -> None:
    """Reject string templates that cannot be filled from the rule's fields"""
    if not isinstance(template, str):
        raise InvalidRuleError(f"String template must be a str, got {type(template).__name__}", rule_name=name)

    try:
        parsed = list(Formatter().parse(template))
    except ValueError as e:
        raise InvalidRuleError(f"Invalid string template {template!r}: {e}", rule_name=name, original_error=e) from e

    available = set(field_groups) | {PARENT_REFERENCE}
    for _, field_name, _, conversion in parsed:
        if field_name is None:
            continue
        # "name.attr" and "name[0]" both look up "name"
        base = re.split(r"[.\[]", field_name, maxsplit=1)[0]
        if base not in available:
            raise InvalidRuleError(
                f"String template {template!r} refers to unknown field {field_name!r}; "
                f"available: {sorted(available)}",
                rule_name=name
            )
        if conversion not in CONVERSIONS:
            raise InvalidRuleError(
                f"String template {template!r} uses unknown conversion !{conversion}",
                rule_name=name
            )


def _check_groups(rule: Rule, field_groups: Dict[str, Union[int, str]]) -> None:
    """Reject group references the compiled pattern cannot satisfy"""
    regex = rule.compiled_regex
    for field_name, group in field_groups.items():
        if group == PARENT_REFERENCE:
            continue
        if isinstance(group, int) and 0 <= group <= regex.groups:
            continue
        if isinstance(group, str) and group in regex.groupindex:
            continue
        raise InvalidRuleError(
            f"Field '{field_name}' refers to missing group {group!r}",
            rule_name=rule.name
        )
