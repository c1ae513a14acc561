"""Turn structural facts into a single spoken sentence."""
from __future__ import annotations

from typing import Callable, List, Optional, Tuple

from varz.nlu.structure import (
    DEFAULT_LOOP_COUNT,
    DEFAULT_OUTPUT_MESSAGE,
    EMPTY_SAMPLE,
    UNKNOWN_LANGUAGE,
    AnalysisResult,
    CodeSample,
    StructuralFacts,
    StructureAnalyzer,
)

EMPTY_EXPLANATION = "This code appears to be empty or contains only comments."


def _prints_repeatedly(facts: StructuralFacts) -> str:
    message = facts.output_message or DEFAULT_OUTPUT_MESSAGE
    count = facts.loop_count or DEFAULT_LOOP_COUNT
    return f'prints "{message}" {count} times'


def _defines_function(facts: StructuralFacts) -> str:
    clause = f"defines a function called {facts.function_name}"
    if facts.has_return:
        clause += " that returns a value"
    return clause


def _prints_once(facts: StructuralFacts) -> str:
    return f'prints "{facts.output_message or DEFAULT_OUTPUT_MESSAGE}"'


# Most informative fact first; the first predicate that holds picks the clause.
MAIN_CLAUSES: Tuple[Tuple[str, Callable[[StructuralFacts], bool], Callable[[StructuralFacts], str]], ...] = (
    ("loop_output", lambda f: f.has_loop and f.has_output, _prints_repeatedly),
    ("function", lambda f: f.has_function, _defines_function),
    ("output", lambda f: f.has_output, _prints_once),
    ("variable", lambda f: f.has_variable, lambda f: "creates and uses variables"),
    ("conditional", lambda f: f.has_conditional, lambda f: "contains conditional logic"),
    ("import", lambda f: f.has_import, lambda f: "imports external modules"),
    ("fallback", lambda f: True, lambda f: "performs various operations"),
)


class ExplanationComposer:
    """Compose one sentence describing a code sample.

    The opening names the language when one is known, the body is the single
    highest-priority clause from :data:`MAIN_CLAUSES`, and qualifiers add the
    loop, conditional and variable context the body did not already cover.
    """

    def compose(self, facts: AnalysisResult, language: Optional[str] = None) -> str:
        if facts is EMPTY_SAMPLE or not isinstance(facts, StructuralFacts):
            return EMPTY_EXPLANATION

        if language and language.lower() != UNKNOWN_LANGUAGE:
            sentence = f"This {language} code "
        else:
            sentence = "This code "

        selected, clause = self.main_clause(facts)
        sentence += clause
        sentence += "".join(self.qualifiers(facts, selected))
        return sentence + "."

    @staticmethod
    def main_clause(facts: StructuralFacts) -> Tuple[str, str]:
        for name, applies, render in MAIN_CLAUSES:
            if applies(facts):
                return name, render(facts)
        raise AssertionError("fallback clause always applies")  # pragma: no cover

    @staticmethod
    def qualifiers(facts: StructuralFacts, selected: str) -> List[str]:
        extra: List[str] = []
        if facts.has_loop and selected != "loop_output":
            extra.append(" using a loop")
        if facts.has_conditional and not facts.has_loop:
            extra.append(" with conditional statements")
        if facts.has_variable and not facts.has_function:
            extra.append(" with variable assignments")
        return extra


def explain_code(text: str, language: Optional[str] = None) -> str:
    """Analyse raw source text and describe it in one sentence."""

    sample = CodeSample.from_text(text, language)
    facts = StructureAnalyzer().analyze(sample)
    return ExplanationComposer().compose(facts, language)


__all__ = ["EMPTY_EXPLANATION", "ExplanationComposer", "MAIN_CLAUSES", "explain_code"]
