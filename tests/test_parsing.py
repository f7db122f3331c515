import pytest

from coach.errors import ParseError
from coach.parsing import (
    exercises_from_text, parse_exercises, parse_practice_sentence, parse_practice_sentences,
    strip_fence_lines, strip_fences,
)


def test_fenced_array() -> None:
    text = '```json\n[{"type":"fill","prompt":"Complete: Me ____ Elena.","answer":"llamo"}]\n```'
    assert parse_exercises(text) == [{"type": "fill", "prompt": "Complete: Me ____ Elena.", "answer": "llamo"}]


def test_uppercase_fence_marker() -> None:
    assert parse_exercises('```JSON\n[{"prompt":"x"}]\n```') == [{"prompt": "x"}]


def test_array_surrounded_by_prose() -> None:
    text = 'Here are your exercises:\n[{"prompt":"a"},{"prompt":"b"}]\nGood luck!'
    assert [item["prompt"] for item in parse_exercises(text)] == ["a", "b"]


def test_object_with_exercises_key() -> None:
    assert parse_exercises('{"exercises": [{"prompt": "a"}]}') == [{"prompt": "a"}]


def test_fence_with_language_tag_is_dropped_by_line() -> None:
    text = "```jsonc\n[1]\n```"
    assert strip_fence_lines(text) == "[1]"
    assert parse_exercises(text) == [1]


def test_empty_array_is_returned() -> None:
    assert parse_exercises("[]") == []


def test_no_json_raises() -> None:
    with pytest.raises(ParseError, match="not valid JSON exercises"):
        parse_exercises("I could not come up with anything, sorry.")


def test_object_without_exercises_raises() -> None:
    with pytest.raises(ParseError):
        parse_exercises('{"items": "none"}')


def test_strip_fences() -> None:
    assert strip_fences("  ```json\n{}\n```  ") == "{}"


def test_exercises_from_text_numbers_missing_prompts() -> None:
    exercises = exercises_from_text('[{"type":"order","answer":"Yo como."},{"prompt":"Given"}]')
    assert exercises[0].type == "order"
    assert exercises[0].prompt == "Practice item 1"
    assert exercises[1].prompt == "Given"
    assert exercises[1].type == "cards"


def test_practice_sentences() -> None:
    text = 'Sure!\n[{"target":"¿Dónde está?","translation":"Where is it?","phonetic":"don-deh"}, {"target":"Sí"}]'
    sentences = parse_practice_sentences(text)
    assert [s.target for s in sentences] == ["¿Dónde está?", "Sí"]
    assert sentences[0].phonetic == "don-deh"
    assert sentences[1].translation == ""
    assert sentences[1].phonetic is None
    assert sentences[0].id != sentences[1].id


def test_practice_sentences_requires_array() -> None:
    with pytest.raises(ParseError, match="not an array"):
        parse_practice_sentences('{"target": "Hola"}')


def test_practice_sentences_without_json() -> None:
    with pytest.raises(ParseError, match="Could not parse AI response as JSON"):
        parse_practice_sentences("nothing here")


def test_single_sentence_falls_back_to_entered_text() -> None:
    sentence = parse_practice_sentence('```json\n{"translation":"Good morning"}\n```', "Buenos días")
    assert sentence.target == "Buenos días"
    assert sentence.translation == "Good morning"


def test_single_sentence_must_be_object() -> None:
    with pytest.raises(ParseError, match="Could not parse AI response."):
        parse_practice_sentence("[1, 2]", "Hola")


def test_deeply_nested_reply_is_a_parse_error() -> None:
    nested = "[" * 100000 + "]" * 100000
    with pytest.raises(ParseError, match="not valid JSON exercises"):
        parse_exercises(nested)
    with pytest.raises(ParseError, match="not valid JSON exercises"):
        parse_exercises("[" * 100000)


def test_deeply_nested_practice_reply_is_a_parse_error() -> None:
    with pytest.raises(ParseError):
        parse_practice_sentences("[" * 100000 + "]" * 100000)
    with pytest.raises(ParseError):
        parse_practice_sentence("{" * 100000, "Hola")
