"""
Validation rule objects that generate refinement code.

Each rule represents a constraint on a field value and knows how to
render itself for the targets that carry constraints: a Zod refinement
chained onto a validator expression, and JSON Schema keywords.
"""

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List

# Case-insensitive 24 hex digits identifier
OBJECT_ID_PATTERN = "^[a-f0-9]{24}$"
OBJECT_ID_JSON_PATTERN = "^[a-fA-F0-9]{24}$"
OBJECT_ID_MESSAGE = "Invalid ObjectId"


class ValidationRule(ABC):
    """Base class for all validation rules"""

    # Class-level cache for loaded string templates
    _string_templates: Dict[str, Dict[str, Any]] = {}

    # Target language of the templates
    LANGUAGE = "zod"

    @classmethod
    def _load_string_templates(cls, language: str) -> Dict[str, Any]:
        """
        Load string templates from JSON file for the given language.
        Results are cached to avoid repeated file I/O.

        Args:
            language: Target language ('zod')

        Returns:
            Dictionary of string templates for all validation rules
        """
        if language not in cls._string_templates:
            template_file = Path(__file__).parent / f"validation_rules_{language}.json"
            with open(template_file, "r", encoding="utf-8") as f:
                cls._string_templates[language] = json.load(f)
        return cls._string_templates[language]

    def get_string(self, key: str, **format_params) -> str:
        """
        Get a string template for this validation rule and format it.

        Args:
            key: The string key to retrieve (e.g., 'refinement')
            **format_params: Parameters to format into the string template

        Returns:
            Formatted string
        """
        templates = self._load_string_templates(self.LANGUAGE)
        class_name = self.__class__.__name__

        if class_name not in templates:
            raise KeyError(f"No string templates found for {class_name} in {self.LANGUAGE}")

        rule_templates = templates[class_name]

        if key not in rule_templates:
            raise KeyError(f"Key '{key}' not found in templates for {class_name}")

        return rule_templates[key].format(**format_params)

    @abstractmethod
    def get_template_params(self) -> Dict[str, Any]:
        """
        Get rule-specific parameters for template formatting.

        Returns:
            Dictionary with parameters specific to this validation rule
        """
        pass

    def zod_refinement(self) -> str:
        """
        Generate the Zod refinement chained after the base validator.

        Returns:
            Refinement text starting with '.'
        """
        return self.get_string("refinement", **self.get_template_params())

    def json_keywords(self) -> Dict[str, Any]:
        """
        Generate the JSON Schema keywords for this rule.

        Returns:
            Keywords merged into the field's schema; empty when the
            constraint is already carried by the schema type
        """
        return {}


class IntegerRule(ValidationRule):
    """Validates that a number is an integer"""

    def get_template_params(self) -> Dict[str, Any]:
        return {}


class MinLengthRule(ValidationRule):
    """Validates minimum string length"""

    def __init__(self, min_length: int):
        self.min_length = min_length

    def get_template_params(self) -> Dict[str, Any]:
        return {"min_length": self.min_length}

    def json_keywords(self) -> Dict[str, Any]:
        return {"minLength": self.min_length}


class PatternRule(ValidationRule):
    """Validates that a string matches a regex pattern"""

    def __init__(self, pattern: str, flags: str = "", message: str = "", json_pattern: str = ""):
        """
        Initialize a pattern rule.

        Args:
            pattern: Regex source, rendered as a JavaScript regex literal
            flags: JavaScript regex flags (e.g. 'i')
            message: Error message reported by the validator
            json_pattern: Pattern used in JSON Schema, which has no flags;
                defaults to `pattern`
        """
        self.pattern = pattern
        self.flags = flags
        self.message = message
        self.json_pattern = json_pattern or pattern

    def get_template_params(self) -> Dict[str, Any]:
        return {
            "pattern": self.pattern.replace("/", "\\/"),
            "flags": self.flags,
            "message": json.dumps(self.message or f"Must match {self.pattern}"),
        }

    def json_keywords(self) -> Dict[str, Any]:
        return {"pattern": self.json_pattern}


def object_id_rule() -> PatternRule:
    """The pattern rule of the 24 hex digits external identifier."""
    return PatternRule(OBJECT_ID_PATTERN, flags="i", message=OBJECT_ID_MESSAGE, json_pattern=OBJECT_ID_JSON_PATTERN)


def apply_zod_rules(expression: str, rules: List[ValidationRule]) -> str:
    """Chain the refinements of `rules` onto a Zod expression."""
    return expression + "".join(rule.zod_refinement() for rule in rules)


def apply_json_rules(schema: Dict[str, Any], rules: List[ValidationRule]) -> Dict[str, Any]:
    """Merge the JSON Schema keywords of `rules` into `schema`."""
    for rule in rules:
        schema.update(rule.json_keywords())
    return schema
