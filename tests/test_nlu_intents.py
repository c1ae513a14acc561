import pytest

from varz.nlu.intents import CommandIntent, CommandIntentClassifier, classify_intent


@pytest.mark.parametrize(
    ("transcript", "intent"),
    [
        ("please run and then save", CommandIntent.RUN),
        ("Execute", CommandIntent.RUN),
        ("Save the file", CommandIntent.SAVE),
        ("clear and save", CommandIntent.SAVE),
        ("delete everything", CommandIntent.CLEAR),
        ("explain this code", CommandIntent.READ),
        ("what does this do?", CommandIntent.READ),
        ("write a loop", CommandIntent.GENERATE),
        ("generate a function", CommandIntent.GENERATE),
        ("hello there", CommandIntent.UNKNOWN),
        ("", CommandIntent.UNKNOWN),
        ("   ", CommandIntent.UNKNOWN),
    ],
)
def test_classify(transcript: str, intent: CommandIntent) -> None:
    assert CommandIntentClassifier().classify(transcript) is intent


def test_earliest_rule_wins_over_meaning() -> None:
    # "thread" contains "read", which is checked before "create".
    assert classify_intent("create a thread") is CommandIntent.READ


def test_intent_values_are_strings() -> None:
    assert CommandIntent.GENERATE.value == "generate"
    assert CommandIntent("unknown") is CommandIntent.UNKNOWN
