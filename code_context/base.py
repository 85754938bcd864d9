"""
Base classes for code context rules and the records they produce
"""
from dataclasses import dataclass, field, fields
from typing import List, Dict, Any, Optional, Callable, Union
from enum import Enum
import re

from .exceptions import InvalidPatternError, InvalidRuleError


class ContextType(Enum):
    """Kinds of code construct a rule can recognize"""
    FUNCTION = "function"
    METHOD = "method"
    CONSTRUCTOR = "constructor"
    CLASS = "class"
    PROTOTYPE_METHOD = "prototype method"
    PROTOTYPE_PROPERTY = "prototype property"
    PROTOTYPE = "prototype"
    PROPERTY = "property"
    DECLARATION = "declaration"


class FunctionSubtype(Enum):
    STATEMENT = "statement"
    EXPRESSION = "expression"


@dataclass
class CodeContext:
    """Common shape of every context record"""
    type: Optional[ContextType] = field(default=None, init=False)
    name: Optional[str] = None
    string: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Plain dict view; fields the producing rule left unset are omitted"""
        data: Dict[str, Any] = {'type': self.type.value}
        for f in fields(self):
            if f.name == 'type':
                continue
            value = getattr(self, f.name)
            if value is None:
                continue
            if isinstance(value, Enum):
                value = value.value
            elif isinstance(value, list):
                value = list(value)
            data[f.name] = value
        return data


@dataclass
class FunctionContext(CodeContext):
    type: ContextType = field(default=ContextType.FUNCTION, init=False)
    subtype: Optional[FunctionSubtype] = None
    params: Optional[List[str]] = None
    ctor: Optional[str] = None
    receiver: Optional[str] = None
    original: Optional[str] = None


@dataclass
class MethodContext(CodeContext):
    type: ContextType = field(default=ContextType.METHOD, init=False)
    params: Optional[List[str]] = None
    ctor: Optional[str] = None
    receiver: Optional[str] = None
    original: Optional[str] = None


@dataclass
class ConstructorContext(CodeContext):
    type: ContextType = field(default=ContextType.CONSTRUCTOR, init=False)
    name: Optional[str] = "constructor"
    params: Optional[List[str]] = None
    ctor: Optional[str] = None


@dataclass
class ClassContext(CodeContext):
    type: ContextType = field(default=ContextType.CLASS, init=False)
    ctor: Optional[str] = None
    extends: Optional[str] = None


@dataclass
class PrototypeMethodContext(CodeContext):
    type: ContextType = field(default=ContextType.PROTOTYPE_METHOD, init=False)
    category: str = "method"
    params: Optional[List[str]] = None
    ctor: Optional[str] = None


@dataclass
class PrototypePropertyContext(CodeContext):
    type: ContextType = field(default=ContextType.PROTOTYPE_PROPERTY, init=False)
    ctor: Optional[str] = None
    value: Optional[str] = None


@dataclass
class PrototypeContext(CodeContext):
    type: ContextType = field(default=ContextType.PROTOTYPE, init=False)
    ctor: Optional[str] = None


@dataclass
class PropertyContext(CodeContext):
    type: ContextType = field(default=ContextType.PROPERTY, init=False)
    ctor: Optional[str] = None
    receiver: Optional[str] = None
    value: Optional[str] = None


@dataclass
class DeclarationContext(CodeContext):
    type: ContextType = field(default=ContextType.DECLARATION, init=False)
    value: Optional[str] = None


CONTEXT_CLASSES: Dict[ContextType, type] = {
    ContextType.FUNCTION: FunctionContext,
    ContextType.METHOD: MethodContext,
    ContextType.CONSTRUCTOR: ConstructorContext,
    ContextType.CLASS: ClassContext,
    ContextType.PROTOTYPE_METHOD: PrototypeMethodContext,
    ContextType.PROTOTYPE_PROPERTY: PrototypePropertyContext,
    ContextType.PROTOTYPE: PrototypeContext,
    ContextType.PROPERTY: PropertyContext,
    ContextType.DECLARATION: DeclarationContext,
}


Extractor = Callable[[re.Match, Optional[str]], Any]


@dataclass
class Rule:
    """A pattern and the extractor that turns its match into a context record"""
    pattern: Union[str, re.Pattern]
    extractor: Extractor
    name: Optional[str] = None
    description: str = ""

    def __post_init__(self):
        """Compile regex pattern"""
        if not callable(self.extractor):
            raise InvalidRuleError(
                f"Extractor must be callable, got {type(self.extractor).__name__}",
                rule_name=self.name
            )

        if self.name is None:
            self.name = getattr(self.extractor, '__name__', 'rule').lstrip('_')

        if isinstance(self.pattern, str):
            try:
                self.compiled_regex = re.compile(self.pattern)
            except re.error as e:
                raise InvalidPatternError(
                    f"Invalid regex pattern '{self.pattern}': {e}",
                    rule_name=self.name,
                    original_error=e
                ) from e
        elif isinstance(self.pattern, re.Pattern):
            self.compiled_regex = self.pattern
        else:
            raise InvalidRuleError(
                f"Pattern must be a string or compiled regex, got {type(self.pattern).__name__}",
                rule_name=self.name
            )


PARAM_SEPARATOR = re.compile(r'[,\s]+')


def split_params(raw: Optional[str]) -> List[str]:
    """Split a raw parameter list; an empty list yields ['']"""
    return PARAM_SEPARATOR.split(trim(raw))


def trim(value: Optional[str]) -> str:
    return (value or '').strip()


def qualify(parent: Optional[str], separator: str) -> str:
    """Prefix for member strings: 'Parent' + separator, or '' without a parent"""
    return parent + separator if parent else ''
