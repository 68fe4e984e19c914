"""Tests for prompt assembly."""

from netero.prompt import (
    build_chat_prompt,
    build_oneshot_prompt,
    build_save_prompt,
    build_translation_prompt,
    cover,
)

BASE = dict(user="Ana", datetime="2026-10-17 14:03:22", lang="es_AR.UTF-8")


def test_cover():
    assert cover("user message", "hi") == ":: USER MESSAGE ::\n\nhi\n\n:: END USER MESSAGE ::"


def test_minimal_chat_prompt_omits_empty_sections():
    prompt = build_chat_prompt(history="", message="hola", **BASE)
    assert prompt.startswith("LLM NAME: Netero\n")
    assert "USERNAME: Ana" in prompt
    assert "DATETIME: 2026-10-17 14:03:22" in prompt
    assert "USER LANG: es_AR.UTF-8" in prompt
    assert ":: INSTRUCTION (SYSTEM) ::" in prompt
    assert ":: CHAT HISTORY (SYSTEM) ::" not in prompt
    assert ":: COMMAND OUTPUT (SYSTEM) ::" not in prompt
    assert ":: STDIN ATTACHMENT (SYSTEM) ::" not in prompt
    assert prompt.endswith(":: USER MESSAGE ::\n\nhola\n\n:: END USER MESSAGE ::\n")


def test_sections_in_order():
    prompt = build_chat_prompt(
        history="Ana: hi\nAssistant: hello\n",
        message="and now?",
        command_output="[section]\n[end section]",
        attachment="-- FILE: x --",
        **BASE,
    )
    order = [
        ":: INSTRUCTION (SYSTEM) ::",
        ":: CHAT HISTORY (SYSTEM) ::",
        ":: COMMAND OUTPUT (SYSTEM) ::",
        ":: STDIN ATTACHMENT (SYSTEM) ::",
        ":: USER MESSAGE ::",
    ]
    positions = [prompt.index(marker) for marker in order]
    assert positions == sorted(positions)


def test_blank_message_section_dropped():
    prompt = build_chat_prompt(
        history="", message="", command_output="[section]", **BASE
    )
    assert "USER MESSAGE" not in prompt
    assert ":: COMMAND OUTPUT (SYSTEM) ::" in prompt


def test_custom_assistant_name():
    prompt = build_chat_prompt(
        history="", message="x", assistant_name="Bisky", **BASE
    )
    assert prompt.startswith("LLM NAME: Bisky\n")


def test_translation_prompt_locks_languages():
    prompt = build_translation_prompt("auto-detect", "en", "English", "hola")
    assert "LANG: auto-detect:en." in prompt
    assert "Target language name (locked): English." in prompt
    assert prompt.endswith("TEXT:\nhola")


def test_save_prompt_default():
    prompt = build_save_prompt("Ana: hi\n", "es")
    assert "User language: es" in prompt
    assert prompt.endswith("Chat history:\nAna: hi\n\n")


def test_save_prompt_with_hint():
    prompt = build_save_prompt("Ana: hi\n", "es", "only the commands")
    assert prompt.startswith("Hint (required): only the commands\n")
    assert "User language" not in prompt


def test_oneshot_prompt_with_attachment():
    prompt = build_oneshot_prompt(
        request="  explain  ", attached=":: ATTACHED FILES ::", **BASE
    )
    assert ":: USER REQUEST ::\n\nexplain\n\n:: END USER REQUEST ::" in prompt
    assert prompt.endswith(":: ATTACHED FILES ::\n")


def test_oneshot_prompt_without_attachment():
    prompt = build_oneshot_prompt(request="hi", attached=None, **BASE)
    assert "ATTACHED" not in prompt
