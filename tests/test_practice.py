import pytest

from coach.errors import EmptyResultError
from coach.models import Exercise, PracticeSentence, StudyPlan
from coach.practice import answer_in_options, check_answer, download_name, sentences_from_plan


def test_check_answer_ignores_case_and_spacing() -> None:
    exercise = Exercise(type="fill", prompt="Me ____ Elena.", answer="llamo")
    assert check_answer(exercise, "  Llamo ") is True
    assert check_answer(exercise, "llama") is False


def test_check_answer_without_answer() -> None:
    assert check_answer(Exercise(type="match", prompt="Agua -> Water."), "water") is None


def test_answer_in_options() -> None:
    assert answer_in_options(Exercise(options=["Hasta luego", "Por favor"], answer="hasta luego"))
    assert not answer_in_options(Exercise(options=["Por favor"], answer="Gracias"))
    assert answer_in_options(Exercise(answer="Gracias"))


def test_sentences_from_plan(demo_plan) -> None:
    imported = sentences_from_plan(demo_plan)
    assert len(imported) == 9
    assert imported[0].target == demo_plan.lessons[0].sentences[0].target
    assert len({s.id for s in imported}) == 9


def test_sentences_from_empty_plan() -> None:
    with pytest.raises(EmptyResultError):
        sentences_from_plan(StudyPlan(title="Empty"))


@pytest.mark.parametrize(
    "target, expected",
    [
        ("¿Cómo estás?", "Cómo estás.mp3"),
        ("La cuenta, por favor.", "La cuenta por favor.mp3"),
        ("???", "sentence.mp3"),
        ("a" * 60, "a" * 40 + ".mp3"),
    ],
)
def test_download_name(target, expected) -> None:
    assert download_name(PracticeSentence(target=target, translation="")) == expected
