"""Prompt templates sent to the completion service.

Every structural part is wrapped in ``:: TITLE ::`` / ``:: END TITLE ::``
markers so the model can tell instructions, context and the user's words
apart. Parts without content are left out entirely.
"""

DEFAULT_ASSISTANT_NAME = "Netero"

INSTRUCTIONS = """\
- Keep responses concise: 5-20 lines maximum.
- Do not use emojis or decorations.
- Always prioritize the latest user message over the CHAT HISTORY.
- The latest message may be completely unrelated to previous messages.
- Do not assume continuity or context from the history unless the user
  explicitly refers to it."""


def cover(title: str, content: str) -> str:
    t = title.upper()
    return f":: {t} ::\n\n{content}\n\n:: END {t} ::"


def _section(title: str, content: str | None) -> str | None:
    if content is None or not content.strip():
        return None
    return cover(title, content)


def build_chat_prompt(
    *,
    user: str,
    datetime: str,
    lang: str,
    history: str,
    message: str,
    command_output: str | None = None,
    attachment: str | None = None,
    assistant_name: str = DEFAULT_ASSISTANT_NAME,
) -> str:
    """Assemble the request for one chat turn."""
    preamble = "\n".join(
        [
            f"LLM NAME: {assistant_name}",
            "LLM ROLE: Conversational terminal assistant",
            f"USERNAME: {user}",
            f"DATETIME: {datetime}",
            f"USER LANG: {lang}",
        ]
    )
    parts = [
        preamble,
        cover("instruction (system)", INSTRUCTIONS),
        _section("chat history (system)", history),
        _section("command output (system)", command_output),
        _section("stdin attachment (system)", attachment),
        _section("user message", message),
    ]
    return "\n\n".join(p for p in parts if p) + "\n"


def build_translation_prompt(
    source_lang: str, target_lang: str, target_name: str, text: str
) -> str:
    return (
        "Task: Translate the following text faithfully, preserving its meaning "
        "and context.\n"
        "Return only the translation. Do not explain or add anything.\n"
        "You must translate. Do not choose any other task or language.\n"
        f"LANG: {source_lang}:{target_lang}.\n"
        f"Source language (locked): {source_lang}.\n"
        f"Target language (locked): {target_lang}.\n"
        f"Target language name (locked): {target_name}.\n"
        "\n"
        f"TEXT:\n{text}"
    )


def build_save_prompt(history: str, lang: str, hint: str | None = None) -> str:
    """Summary request over the whole transcript for ``/save``."""
    if hint:
        return f"Hint (required): {hint}\nChat history:\n{history}\n"
    return (
        "Write a report of this conversation for the user.\n"
        "Use the same language as the user.\n"
        f"User language: {lang}\n"
        "Do not add footers, notes, or meta commentary.\n"
        f"Chat history:\n{history}\n"
    )


def build_oneshot_prompt(
    *, user: str, datetime: str, lang: str, request: str, attached: str | None
) -> str:
    """Single-question prompt for non-interactive use."""
    preamble = "\n".join(
        [
            f"LLM NAME: {DEFAULT_ASSISTANT_NAME}",
            f"USERNAME: {user}",
            f"DATETIME: {datetime}",
            f"USER LANG: {lang}",
        ]
    )
    parts = [preamble, cover("user request", request.strip())]
    if attached:
        parts.append(attached)
    return "\n\n".join(parts) + "\n"
