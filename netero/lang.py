"""Language tag helpers."""

_DISPLAY_NAMES = {
    "en": "English",
    "zh": "Chinese",
    "hi": "Hindi",
    "es": "Spanish",
    "fr": "French",
    "ar": "Arabic",
    "bn": "Bengali",
    "pt": "Portuguese",
    "ru": "Russian",
    "ur": "Urdu",
    "id": "Indonesian",
    "de": "German",
    "ja": "Japanese",
    "sw": "Swahili",
    "mr": "Marathi",
    "te": "Telugu",
    "tr": "Turkish",
    "ta": "Tamil",
    "vi": "Vietnamese",
    "it": "Italian",
    "eo": "Esperanto",
    "io": "Ido",
    "ia": "Interlingua",
    "ie": "Interlingue",
    "vo": "Volapuk",
    "jbo": "Lojban",
    "tlh": "Klingon",
    "tok": "Toki Pona",
    "lfn": "Lingua Franca Nova",
    "nov": "Novial",
}


def normalize_lang_tag(tag: str) -> str:
    """Reduce a locale tag to its lowercase language part.

    ``en_US.UTF-8`` -> ``en``, ``sr@latin`` -> ``sr``. Blank input gives
    ``unknown``.
    """
    tag = tag.strip()
    if not tag:
        return "unknown"
    base = tag.split(".", 1)[0].split("@", 1)[0].replace("_", "-")
    lang = base.split("-", 1)[0].lower()
    return lang or "unknown"


def lang_display_name(tag: str) -> str:
    """English name for a short language tag; unknown tags come back as-is."""
    return _DISPLAY_NAMES.get(tag.lower(), tag)
