"""Rule-based language understanding: code structure, intents and synthesis."""
from __future__ import annotations

from varz.nlu.explainer import EMPTY_EXPLANATION, ExplanationComposer, explain_code
from varz.nlu.intents import CommandIntent, CommandIntentClassifier, classify_intent
from varz.nlu.lines import FunctionSignature, LineCategory, classify, extract_signature, is_comment
from varz.nlu.structure import (
    EMPTY_SAMPLE,
    CodeSample,
    StructuralFacts,
    StructureAnalyzer,
    analyze,
)
from varz.nlu.synthesizer import CodeSynthesizer, CodeTemplate, GeneratedSnippet, generate_code

__all__ = [
    "CodeSample",
    "CodeSynthesizer",
    "CodeTemplate",
    "CommandIntent",
    "CommandIntentClassifier",
    "EMPTY_EXPLANATION",
    "EMPTY_SAMPLE",
    "ExplanationComposer",
    "FunctionSignature",
    "GeneratedSnippet",
    "LineCategory",
    "StructuralFacts",
    "StructureAnalyzer",
    "analyze",
    "classify",
    "classify_intent",
    "explain_code",
    "extract_signature",
    "generate_code",
    "is_comment",
]
