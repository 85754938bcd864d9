"""
Code Context Exception Hierarchy

No-match is not an error: parsing a line that no rule recognizes returns None.
These exceptions cover broken rules and rule files only.
"""
from typing import Optional


class CodeContextError(Exception):
    """
    Base class for code context errors

    Attributes:
        message: Human-readable error message
        rule_name: Name of the rule involved, if known
        original_error: Original exception if wrapped
    """

    def __init__(
        self,
        message: str,
        rule_name: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.rule_name = rule_name
        self.original_error = original_error

    def __str__(self):
        if self.rule_name:
            return f"{self.message} (rule: {self.rule_name})"
        return self.message


class InvalidPatternError(CodeContextError, ValueError):
    """
    Rule pattern failed to compile

    Examples: unbalanced parentheses, bad escape, unknown group reference
    """


class InvalidRuleError(CodeContextError, TypeError):
    """
    Rule definition is unusable

    Examples: extractor is not callable, rule file entry without a pattern,
    unknown context type
    """


class RuleFileError(CodeContextError):
    """Rule file could not be read or is not valid YAML"""
