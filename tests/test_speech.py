from coach.speech import Voice, language_code, resolve_voice

DUTCH_BE = Voice(id="nl-BE-ArnaudNeural", name="Microsoft Arnaud", lang="nl-BE")
DUTCH_NL = Voice(id="nl-NL-ColetteNeural", name="Microsoft Colette", lang="nl-NL")
ENGLISH = Voice(id="en-US-AriaNeural", name="Microsoft Aria", lang="en-US")
SPANISH = Voice(id="es-ES-ElviraNeural", name="Microsoft Elvira - Spanish (Spain)", lang="es-ES")


def test_language_code() -> None:
    assert language_code("Dutch (nl-NL)") == "nl-nl"
    assert language_code("Japanese (JA-jp)") == "ja-jp"
    assert language_code("Spanish") is None


def test_exact_code_wins_regardless_of_order() -> None:
    assert resolve_voice("Dutch (nl-NL)", [ENGLISH, DUTCH_BE, DUTCH_NL]) is DUTCH_NL
    assert resolve_voice("Dutch (nl-NL)", [DUTCH_NL, DUTCH_BE, ENGLISH]) is DUTCH_NL


def test_prefix_match_takes_first_in_list() -> None:
    voices = [ENGLISH, DUTCH_BE, DUTCH_NL]
    assert resolve_voice("Dutch (nl-XX)", voices) is DUTCH_BE
    assert resolve_voice("Dutch (nl-XX)", list(reversed(voices))) is DUTCH_NL


def test_name_match_for_labels_without_code() -> None:
    assert resolve_voice("Spanish", [ENGLISH, SPANISH]) is SPANISH


def test_first_voice_as_last_resort() -> None:
    assert resolve_voice("Klingon (tlh)", [ENGLISH, SPANISH]) is ENGLISH


def test_no_voices() -> None:
    assert resolve_voice("Dutch (nl-NL)", []) is None
