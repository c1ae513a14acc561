"""Single-line structural classification.

All lexical rules used to recognise code structure live here: the comment
prefixes, the keyword tables per category and the function signature
patterns. The matching is plain substring containment, so ``informal `` counts
as a loop because it contains ``for ``. Swapping this module for a real
tokenizer is the only change needed to tighten that behaviour.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Optional, Tuple


class LineCategory(str, Enum):
    """Structural categories a line can belong to."""

    FUNCTION = "function"
    LOOP = "loop"
    OUTPUT = "output"
    VARIABLE = "variable"
    CONDITIONAL = "conditional"
    IMPORT = "import"
    RETURN = "return"


COMMENT_PREFIXES: Tuple[str, ...] = ("//", "#", "/*", "<!--", "*", "--")

LOOP_KEYWORDS: Tuple[str, ...] = ("for ", "while ", "do ")
OUTPUT_KEYWORDS: Tuple[str, ...] = (
    "console.log",
    "print(",
    "System.out.println",
    "printf",
    "cout",
    "echo",
)
COMPARISON_OPERATORS: Tuple[str, ...] = ("==", "!=", ">=", "<=", "=>")
CONDITIONAL_KEYWORDS: Tuple[str, ...] = ("if ", "else if", "else")
IMPORT_KEYWORDS: Tuple[str, ...] = ("import ", "require(", "#include", "using ")
RETURN_KEYWORD = "return"

FUNCTION_PATTERNS: Tuple[re.Pattern[str], ...] = (
    re.compile(r"function\s+\w+"),
    re.compile(r"def\s+\w+"),
    re.compile(r"const\s+\w+\s*=.*=>"),
    re.compile(r"(public|private|protected|static)\s+\w+\s+\w+\s*\("),
    re.compile(r"(void|int|string|bool|float)\s+\w+\s*\("),
    re.compile(r"\w+\s*\([^)]*\)\s*{"),
)

# One alternative per declaration shape; the first group that participated
# in the match holds the function name.
SIGNATURE_PATTERN = re.compile(
    r"function\s+(\w+)"
    r"|def\s+(\w+)"
    r"|const\s+(\w+)\s*=.*=>"
    r"|(?:public|private|protected|static)?\s*(?:void|int|string|bool|\w+)\s+(\w+)\s*\("
    r"|(\w+)\s*\([^)]*\)\s*{"
)
PARAMETERS_PATTERN = re.compile(r"\(([^)]*)\)")
RETURN_TYPE_PATTERN = re.compile(r"(void|int|string|bool|float|double|char)\s+\w+\s*\(")


@dataclass(frozen=True)
class FunctionSignature:
    """Name, parameters and declared return type of a function definition."""

    name: str
    parameters: Tuple[str, ...] = field(default_factory=tuple)
    return_type: Optional[str] = None


def is_comment(line: str) -> bool:
    """Return ``True`` when the trimmed line starts with a comment marker."""

    return line.strip().startswith(COMMENT_PREFIXES)


def _contains_any(line: str, keywords: Tuple[str, ...]) -> bool:
    return any(keyword in line for keyword in keywords)


def is_function_definition(line: str) -> bool:
    return any(pattern.search(line) for pattern in FUNCTION_PATTERNS)


def is_loop(line: str) -> bool:
    return _contains_any(line, LOOP_KEYWORDS)


def is_output(line: str) -> bool:
    return _contains_any(line, OUTPUT_KEYWORDS)


def is_variable_assignment(line: str) -> bool:
    return "=" in line and not _contains_any(line, COMPARISON_OPERATORS)


def is_conditional(line: str) -> bool:
    return _contains_any(line, CONDITIONAL_KEYWORDS)


def is_import(line: str) -> bool:
    return _contains_any(line, IMPORT_KEYWORDS)


def has_return(line: str) -> bool:
    return RETURN_KEYWORD in line


_RULES = (
    (LineCategory.FUNCTION, is_function_definition),
    (LineCategory.LOOP, is_loop),
    (LineCategory.OUTPUT, is_output),
    (LineCategory.VARIABLE, is_variable_assignment),
    (LineCategory.CONDITIONAL, is_conditional),
    (LineCategory.IMPORT, is_import),
    (LineCategory.RETURN, has_return),
)


def classify(line: str) -> FrozenSet[LineCategory]:
    """Return every category the line matches.

    The line is expected to be trimmed and already known not to be blank or a
    comment. Rules are independent, so a line such as ``x = print("a")`` is
    both an output statement and an assignment.
    """

    return frozenset(category for category, rule in _RULES if rule(line))


def extract_parameters(line: str) -> Tuple[str, ...]:
    """Split the contents of the first parenthesis pair on commas."""

    match = PARAMETERS_PATTERN.search(line)
    if match and match.group(1).strip():
        return tuple(part.strip() for part in match.group(1).split(","))
    return ()


def extract_return_type(line: str) -> Optional[str]:
    match = RETURN_TYPE_PATTERN.search(line)
    return match.group(1) if match else None


def extract_signature(line: str) -> Optional[FunctionSignature]:
    """Pull the function name and parameter list out of a definition line.

    Returns ``None`` when no declaration shape matches.
    """

    match = SIGNATURE_PATTERN.search(line)
    if not match:
        return None
    name = next((group for group in match.groups() if group), None)
    if not name:
        return None
    return FunctionSignature(
        name=name,
        parameters=extract_parameters(line),
        return_type=extract_return_type(line),
    )


__all__ = [
    "COMMENT_PREFIXES",
    "FunctionSignature",
    "LineCategory",
    "classify",
    "extract_parameters",
    "extract_return_type",
    "extract_signature",
    "is_comment",
]
