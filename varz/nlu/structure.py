"""Accumulate structural facts over a whole code sample."""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple, Union

from varz.nlu.lines import LineCategory, classify, extract_signature, is_comment

UNKNOWN_LANGUAGE = "unknown"
DEFAULT_LOOP_COUNT = "multiple"
DEFAULT_OUTPUT_MESSAGE = "something"

RANGE_CALL = re.compile(r"range\s*\(\s*(\d+)\s*\)")
COUNTING_FOR = re.compile(
    r"for\s*\(\s*(?:\w+\s+)?\w+\s*=\s*0\s*;\s*\w+\s*<\s*(\d+)\s*;\s*\w+\+\+\s*\)"
)
INTEGER_LITERAL = re.compile(r"(\d+)")

PRINT_CALLS: Tuple[re.Pattern[str], ...] = (
    re.compile(r"print\s*\(\s*['\"]([^'\"]+)['\"]\s*\)"),
    re.compile(r"console\.log\s*\(\s*['\"]([^'\"]+)['\"]\s*\)"),
    re.compile(r"System\.out\.println\s*\(\s*['\"]([^'\"]+)['\"]\s*\)"),
)
QUOTED_STRING = re.compile(r"['\"]([^'\"]+)['\"]")


@dataclass(frozen=True)
class CodeSample:
    """Source lines together with the declared language identifier."""

    lines: Tuple[str, ...]
    language: str = UNKNOWN_LANGUAGE

    @classmethod
    def from_text(cls, text: str, language: Optional[str] = None) -> "CodeSample":
        return cls(lines=tuple(text.split("\n")), language=language or UNKNOWN_LANGUAGE)


@dataclass(frozen=True)
class EmptySample:
    """Marker for samples holding nothing but blank or comment lines."""

    def __repr__(self) -> str:
        return "EMPTY_SAMPLE"


EMPTY_SAMPLE = EmptySample()


@dataclass(frozen=True)
class StructuralFacts:
    """What a code sample contains, as flags plus first-match extractions."""

    has_function: bool = False
    has_loop: bool = False
    has_output: bool = False
    has_variable: bool = False
    has_conditional: bool = False
    has_return: bool = False
    has_import: bool = False
    function_name: str = ""
    function_parameters: Tuple[str, ...] = field(default_factory=tuple)
    function_return_type: str = ""
    loop_kind: str = ""
    loop_count: str = ""
    output_messages: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def output_message(self) -> str:
        return self.output_messages[0] if self.output_messages else ""


AnalysisResult = Union[StructuralFacts, EmptySample]


def extract_loop_count(line: str) -> str:
    """Guess how many times a loop header iterates.

    Tries a ``range(N)`` call, then a counting ``for (i = 0; i < N; i++)``
    header, then any integer literal on the line.
    """

    for pattern in (RANGE_CALL, COUNTING_FOR, INTEGER_LITERAL):
        match = pattern.search(line)
        if match:
            return match.group(1)
    return DEFAULT_LOOP_COUNT


def extract_output_message(line: str) -> str:
    """Return the string literal an output statement prints."""

    for pattern in PRINT_CALLS:
        match = pattern.search(line)
        if match:
            return match.group(1)
    match = QUOTED_STRING.search(line)
    if match:
        return match.group(1)
    return DEFAULT_OUTPUT_MESSAGE


def loop_kind(line: str) -> str:
    if "for " in line:
        return "for"
    if "while " in line:
        return "while"
    return ""


def code_lines(lines: Iterable[str]) -> List[str]:
    """Trimmed lines that are neither blank nor comments."""

    return [line.strip() for line in lines if line.strip() and not is_comment(line)]


class StructureAnalyzer:
    """Scan a code sample line by line and collect :class:`StructuralFacts`.

    Flags only ever switch on. Name, loop and message extraction happen on the
    first line of each category; later lines of the same category are counted
    but never replace what was already extracted. The analyzer holds no state
    between calls.
    """

    def analyze(self, sample: CodeSample) -> AnalysisResult:
        lines = code_lines(sample.lines)
        if not lines:
            return EMPTY_SAMPLE

        flags = {category: False for category in LineCategory}
        function_name = ""
        parameters: Tuple[str, ...] = ()
        return_type = ""
        kind: Optional[str] = None
        count = ""
        messages: List[str] = []

        for line in lines:
            categories = classify(line)
            for category in categories:
                flags[category] = True

            if LineCategory.FUNCTION in categories and not function_name:
                signature = extract_signature(line)
                if signature is not None:
                    function_name = signature.name
                    parameters = signature.parameters
                    return_type = signature.return_type or ""

            if LineCategory.LOOP in categories and kind is None:
                kind = loop_kind(line)
                count = extract_loop_count(line)

            if LineCategory.OUTPUT in categories:
                messages.append(extract_output_message(line))

        return StructuralFacts(
            has_function=flags[LineCategory.FUNCTION],
            has_loop=flags[LineCategory.LOOP],
            has_output=flags[LineCategory.OUTPUT],
            has_variable=flags[LineCategory.VARIABLE],
            has_conditional=flags[LineCategory.CONDITIONAL],
            has_return=flags[LineCategory.RETURN],
            has_import=flags[LineCategory.IMPORT],
            function_name=function_name,
            function_parameters=parameters,
            function_return_type=return_type,
            loop_kind=kind or "",
            loop_count=count,
            output_messages=tuple(messages),
        )


def analyze(sample: CodeSample) -> AnalysisResult:
    return StructureAnalyzer().analyze(sample)


__all__ = [
    "AnalysisResult",
    "CodeSample",
    "EMPTY_SAMPLE",
    "EmptySample",
    "StructuralFacts",
    "StructureAnalyzer",
    "analyze",
    "code_lines",
    "extract_loop_count",
    "extract_output_message",
]
