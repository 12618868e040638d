"""Prompt text shared by the GenAI backends."""

DEFAULT_INSTRUCTIONS = """You are a strict literary translator. Translate the given texts from {source_lang} into {target_lang}.
Do not modify the story, characters, or intent.
Preserve all names of people, but translate techniques, props, places, and organizations when readability benefits.
Prioritize natural {target_lang} flow while keeping the original's tone (humor, sarcasm, etc.).
For idioms or culturally specific terms, translate literally if possible; otherwise adapt them.
Dialogue must match the original's bluntness or subtlety, including punctuation.
Return only the translations. Do not add explanations, notes, or markdown."""

BATCH_PROMPT_TEMPLATE = """Translate every string in the JSON array below.
Respond with a JSON object with a single key "translations" holding a list of exactly {count} translated strings, in the same order as the input.

{texts_json_array}"""

_LANGUAGE_NAMES = {
    "auto": "the source language",
    "en": "English",
    "zh": "Chinese",
    "zh-cn": "Simplified Chinese",
    "zh-tw": "Traditional Chinese",
    "ja": "Japanese",
    "ko": "Korean",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
}


def describe_language(code: str | None) -> str:
    """Return a readable language name for a code, falling back to the code itself."""
    if not code:
        return _LANGUAGE_NAMES["auto"]
    return _LANGUAGE_NAMES.get(code.lower(), code)


def build_instructions(target_lang: str, source_lang: str | None = None, template: str | None = None) -> str:
    """
    Fill the system instruction template with readable language names.

    Only the `{source_lang}` and `{target_lang}` placeholders are substituted,
    so user-supplied templates may contain other braces.
    """
    text = template or DEFAULT_INSTRUCTIONS
    return text.replace("{source_lang}", describe_language(source_lang)).replace("{target_lang}", describe_language(target_lang))
