"""Template-based code generation from spoken descriptions.

A description is matched against ordered keyword rules to pick a template
category, then against a second keyword table to pick the variant. Names and
messages are lifted from the original-case description with forgiving regular
expressions and fall back to fixed defaults, so synthesis never fails.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from string import Template
from typing import Dict, Optional, Tuple

from varz.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_FUNCTION_NAME = "myFunction"
DEFAULT_VARIABLE_NAME = "myVariable"
DEFAULT_MESSAGE = "Hello, World!"

FUNCTION_NAME = re.compile(r"(?:function|create)\s+(\w+)", re.IGNORECASE)
VARIABLE_NAME = re.compile(r"(?:variable|let|const)\s+(\w+)", re.IGNORECASE)
OUTPUT_MESSAGE = re.compile(r"(?:print|log|say)\s+(.+)", re.IGNORECASE)


@dataclass(frozen=True)
class CodeTemplate:
    """A snippet skeleton with optional ``${name}`` and ``${message}`` slots."""

    category: str
    variant: str
    body: str

    @property
    def template_id(self) -> str:
        return f"{self.category}.{self.variant}"

    def render(self, *, name: str = "", message: str = "") -> str:
        return Template(self.body).substitute(name=name, message=message)


@dataclass(frozen=True)
class GeneratedSnippet:
    """Generated code plus the template it came from."""

    code: str
    template_id: str
    category: str
    name: str = ""
    message: str = ""


def _templates(*items: CodeTemplate) -> Dict[Tuple[str, str], CodeTemplate]:
    return {(item.category, item.variant): item for item in items}


TEMPLATES: Dict[Tuple[str, str], CodeTemplate] = _templates(
    CodeTemplate("function", "sum", "function ${name}(a, b) {\n    return a + b;\n}"),
    CodeTemplate("function", "product", "function ${name}(a, b) {\n    return a * b;\n}"),
    CodeTemplate(
        "function", "greeting", 'function ${name}(name) {\n    return "Hello, " + name + "!";\n}'
    ),
    CodeTemplate("function", "stub", "function ${name}() {\n    // Your code here\n    return null;\n}"),
    CodeTemplate("variable", "number", "let ${name} = 0;"),
    CodeTemplate("variable", "string", 'let ${name} = "";'),
    CodeTemplate("variable", "list", "let ${name} = [];"),
    CodeTemplate("variable", "null", "let ${name} = null;"),
    CodeTemplate("loop", "for_each", "for (let item of array) {\n    console.log(item);\n}"),
    CodeTemplate("loop", "while", "while (condition) {\n    // Your code here\n}"),
    CodeTemplate("loop", "counting", "for (let i = 0; i < 10; i++) {\n    console.log(i);\n}"),
    CodeTemplate(
        "conditional",
        "if_else",
        "if (condition) {\n    // Your code here\n} else {\n    // Alternative code\n}",
    ),
    CodeTemplate("output", "print", 'console.log("${message}");'),
    CodeTemplate(
        "fallback",
        "comment",
        '// Generated code for: ${message}\n// Please modify as needed\nconsole.log("Hello, World!");',
    ),
)

# Category triggers, checked in order.
CATEGORY_RULES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("function", ("function", "create a function")),
    ("variable", ("variable", "let", "const")),
    ("loop", ("loop", "for", "while")),
    ("conditional", ("if", "condition")),
    ("output", ("print", "console", "log")),
)

# Variant triggers per category; the last entry of each is the default.
VARIANT_RULES: Dict[str, Tuple[Tuple[str, Tuple[str, ...]], ...]] = {
    "function": (
        ("sum", ("add", "sum")),
        ("product", ("multiply", "times")),
        ("greeting", ("hello", "greet")),
        ("stub", ()),
    ),
    "variable": (
        ("number", ("number", "integer")),
        ("string", ("string", "text")),
        ("list", ("array", "list")),
        ("null", ()),
    ),
    "conditional": (("if_else", ()),),
    "output": (("print", ()),),
}


def extract_first(pattern: re.Pattern[str], text: str, default: str) -> str:
    """Return the first capturing group of ``pattern`` or ``default``."""

    match = pattern.search(text)
    if match and match.group(1).strip():
        return match.group(1).strip()
    return default


def escape_string_literal(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


def select_category(lowered: str) -> str:
    for category, keywords in CATEGORY_RULES:
        if any(keyword in lowered for keyword in keywords):
            return category
    return "fallback"


def select_variant(category: str, lowered: str) -> str:
    if category == "loop":
        if "for" in lowered and "each" in lowered:
            return "for_each"
        if "while" in lowered:
            return "while"
        return "counting"
    if category == "fallback":
        return "comment"
    for variant, keywords in VARIANT_RULES[category]:
        if not keywords or any(keyword in lowered for keyword in keywords):
            return variant
    raise AssertionError(f"no default variant for {category}")  # pragma: no cover


class CodeSynthesizer:
    """Generate a code snippet from a natural-language description."""

    def __init__(self, templates: Optional[Dict[Tuple[str, str], CodeTemplate]] = None) -> None:
        self._templates = templates or TEMPLATES

    def synthesize(self, description: str) -> GeneratedSnippet:
        lowered = description.lower()
        category = select_category(lowered)
        variant = select_variant(category, lowered)
        template = self._templates[(category, variant)]

        name = ""
        message = ""
        if category == "function":
            name = extract_first(FUNCTION_NAME, description, DEFAULT_FUNCTION_NAME)
        elif category == "variable":
            name = extract_first(VARIABLE_NAME, description, DEFAULT_VARIABLE_NAME)
        elif category == "output":
            message = extract_first(OUTPUT_MESSAGE, description, DEFAULT_MESSAGE)
        elif category == "fallback":
            message = " ".join(description.split())

        literal = escape_string_literal(message) if category == "output" else message
        code = template.render(name=name, message=literal)
        logger.debug("synthesized snippet", extra={"template_id": template.template_id})
        return GeneratedSnippet(
            code=code,
            template_id=template.template_id,
            category=category,
            name=name,
            message=message,
        )


def generate_code(description: str) -> str:
    return CodeSynthesizer().synthesize(description).code


__all__ = [
    "CATEGORY_RULES",
    "CodeSynthesizer",
    "CodeTemplate",
    "GeneratedSnippet",
    "TEMPLATES",
    "VARIANT_RULES",
    "extract_first",
    "generate_code",
]
