import dataclasses

import httpx
import pytest

from conftest import CHAT_URL, chat_reply
from coach import api
from coach.config import CHAT_TEMPERATURE, DEFAULT_BASE_URL
from coach.errors import (
    CoachError, EmptyResponseError, EmptyResultError, MissingCredentialError, ParseError, RequestFailedError,
)
from coach.models import Settings, StudyPlan

MESSAGES = [{"role": "user", "content": "Hola"}]


def _with(settings: Settings, **changes) -> Settings:
    return dataclasses.replace(settings, **changes)


def test_empty_key_sends_nothing(settings, endpoint) -> None:
    fake = endpoint()
    for key in ["", "   "]:
        with pytest.raises(MissingCredentialError):
            api.call_tutor(MESSAGES, _with(settings, api_key=key), http_client=fake.client)
    assert fake.calls == 0


def test_request_shape(settings, endpoint) -> None:
    fake = endpoint(chat_reply("¡Hola!"))
    assert api.call_tutor(MESSAGES, settings, http_client=fake.client) == "¡Hola!"

    assert fake.calls == 1
    request = fake.requests[0]
    assert request.method == "POST"
    assert str(request.url) == CHAT_URL
    assert request.headers["authorization"] == "Bearer sk-test-0123456789"
    assert fake.last_json() == {"model": "gpt-4o-mini", "temperature": CHAT_TEMPERATURE, "messages": MESSAGES}


def test_base_url_is_used_as_given(settings, endpoint) -> None:
    fake = endpoint(chat_reply("ok"))
    api.call_tutor(MESSAGES, _with(settings, base_url="http://localhost:8080/v1/chat"), http_client=fake.client)
    assert str(fake.requests[0].url) == "http://localhost:8080/v1/chat"


def test_empty_base_url_uses_default(settings, endpoint) -> None:
    fake = endpoint(chat_reply("ok"))
    api.call_tutor(MESSAGES, _with(settings, base_url=""), http_client=fake.client)
    assert str(fake.requests[0].url) == DEFAULT_BASE_URL


def test_error_message_from_json_body(settings, endpoint) -> None:
    fake = endpoint(lambda request: httpx.Response(401, json={"error": {"message": "Invalid key"}}))
    with pytest.raises(RequestFailedError) as excinfo:
        api.call_tutor(MESSAGES, settings, http_client=fake.client)
    assert str(excinfo.value) == "Model request failed: 401 - Invalid key"
    assert excinfo.value.status_code == 401
    assert fake.calls == 1


def test_error_message_falls_back_to_raw_body(settings, endpoint) -> None:
    fake = endpoint(lambda request: httpx.Response(502, text="upstream down"))
    with pytest.raises(RequestFailedError) as excinfo:
        api.call_tutor(MESSAGES, settings, http_client=fake.client)
    assert str(excinfo.value) == "Model request failed: 502 upstream down"
    assert fake.calls == 1


def test_transport_failure(settings, endpoint) -> None:
    def _refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    fake = endpoint(_refuse)
    with pytest.raises(RequestFailedError, match="Model request failed"):
        api.call_tutor(MESSAGES, settings, http_client=fake.client)
    assert fake.calls == 1


def test_content_parts_are_joined(settings, endpoint) -> None:
    parts = [{"type": "text", "text": "Hola"}, {"type": "image_url"}, " mundo"]
    fake = endpoint(chat_reply(parts))
    assert api.call_tutor(MESSAGES, settings, http_client=fake.client) == "Hola mundo"


@pytest.mark.parametrize("content", ["", None, [{"type": "image_url"}]])
def test_empty_reply(settings, endpoint, content) -> None:
    fake = endpoint(chat_reply(content))
    with pytest.raises(EmptyResponseError):
        api.call_tutor(MESSAGES, settings, http_client=fake.client)


def test_no_choices(settings, endpoint) -> None:
    fake = endpoint(lambda request: httpx.Response(200, json={"choices": []}))
    with pytest.raises(EmptyResponseError):
        api.call_tutor(MESSAGES, settings, http_client=fake.client)


def test_api_root() -> None:
    assert api.api_root("https://api.openai.com/v1/chat/completions") == "https://api.openai.com/v1"
    assert api.api_root("http://localhost:11434/v1/") == "http://localhost:11434/v1"


def test_generate_plan(settings, endpoint, demo_plan) -> None:
    reply = '{"title":"Dutch sprint","steps":["week 1"],"lessons":[{"id":"a","title":"Hallo"}]}'
    fake = endpoint(chat_reply(reply))
    plan = api.generate_plan("Order coffee", settings, demo_plan, http_client=fake.client)
    assert plan.title == "Dutch sprint"
    assert plan.lessons[0].title == "Hallo"
    assert "Order coffee" in fake.last_json()["messages"][1]["content"]


def test_generate_plan_keeps_fallback_on_prose(settings, endpoint, demo_plan) -> None:
    fake = endpoint(chat_reply("Sorry, I can't help with that."))
    assert api.generate_plan("goal", settings, demo_plan, http_client=fake.client) is demo_plan


def test_add_exercises_appends(settings, endpoint, demo_plan) -> None:
    reply = 'Here you go:\n[{"type":"fill","prompt":"Buenos ____","answer":"días"},{"type":"cards","prompt":"Hola?"}]'
    fake = endpoint(chat_reply(reply))
    before = len(demo_plan.lessons[1].exercises)

    added = api.add_exercises(demo_plan, 1, settings, http_client=fake.client)

    assert [e.prompt for e in added] == ["Buenos ____", "Hola?"]
    assert len(demo_plan.lessons[1].exercises) == before + 2
    assert demo_plan.lessons[1].exercises[-2:] == added


def test_add_exercises_out_of_range_targets_first_lesson(settings, endpoint, demo_plan) -> None:
    fake = endpoint(chat_reply('[{"prompt":"x"}]'))
    before = len(demo_plan.lessons[0].exercises)
    api.add_exercises(demo_plan, 99, settings, http_client=fake.client)
    assert len(demo_plan.lessons[0].exercises) == before + 1


def test_add_exercises_empty_array(settings, endpoint, demo_plan) -> None:
    fake = endpoint(chat_reply("[]"))
    before = [e.to_dict() for e in demo_plan.lessons[0].exercises]
    with pytest.raises(EmptyResultError):
        api.add_exercises(demo_plan, 0, settings, http_client=fake.client)
    assert [e.to_dict() for e in demo_plan.lessons[0].exercises] == before


def test_add_exercises_unparseable(settings, endpoint, demo_plan) -> None:
    fake = endpoint(chat_reply("No JSON today."))
    with pytest.raises(ParseError):
        api.add_exercises(demo_plan, 0, settings, http_client=fake.client)


def test_add_exercises_without_lessons(settings, endpoint) -> None:
    fake = endpoint()
    with pytest.raises(CoachError, match="No lesson found"):
        api.add_exercises(StudyPlan(title="Empty"), 0, settings, http_client=fake.client)
    assert fake.calls == 0


def test_explain_lesson(settings, endpoint, demo_plan) -> None:
    fake = endpoint(chat_reply("  Vowels are short.\n"))
    assert api.explain_lesson(demo_plan.lessons[0], settings, http_client=fake.client) == "Vowels are short."
    assert demo_plan.lessons[0].title in fake.last_json()["messages"][1]["content"]


def test_practice_sentences(settings, endpoint) -> None:
    fake = endpoint(chat_reply('[{"target":"Gracias","translation":"Thanks"}]'))
    sentences = api.generate_practice_sentences(settings, http_client=fake.client)
    assert [(s.target, s.translation) for s in sentences] == [("Gracias", "Thanks")]


def test_create_practice_sentence(settings, endpoint) -> None:
    fake = endpoint(chat_reply('{"target":"Tengo hambre","translation":"I am hungry"}'))
    sentence = api.create_practice_sentence(" I am hungry ", settings, http_client=fake.client)
    assert sentence.target == "Tengo hambre"
    assert "I am hungry" in fake.last_json()["messages"][-1]["content"]


def test_create_practice_sentence_requires_text(settings, endpoint) -> None:
    fake = endpoint()
    with pytest.raises(CoachError, match="Enter a sentence first."):
        api.create_practice_sentence("   ", settings, http_client=fake.client)
    assert fake.calls == 0


def test_request_exercises_leaves_plan_untouched(settings, endpoint, demo_plan) -> None:
    fake = endpoint(chat_reply('[{"type":"fill","prompt":"Buenas ____","answer":"noches"}]'))
    before = demo_plan.to_dict()

    index, new = api.request_exercises(demo_plan, 2, settings, http_client=fake.client)

    assert index == 2
    assert [e.answer for e in new] == ["noches"]
    assert demo_plan.to_dict() == before


def test_request_exercises_out_of_range_reports_first_lesson(settings, endpoint, demo_plan) -> None:
    fake = endpoint(chat_reply('[{"prompt":"x"}]'))
    index, _ = api.request_exercises(demo_plan, -1, settings, http_client=fake.client)
    assert index == 0
