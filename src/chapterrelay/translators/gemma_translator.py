"""A translator that uses Google's 'gemma-3-27b-it' model."""

import json
import logging

from chapterrelay.models import TranslationRequest

from .base_genai import BaseGenAITranslator

logger = logging.getLogger(__name__)


GEMMA_PROMPT_TEMPLATE = """<start_of_turn>user
{instructions}

You MUST return a JSON object with a single key "translations" that contains a list of the translated strings.
The list of translated strings must have exactly {count} items, in the same order as the input list.
If a translation is not possible, return the original text for that item. Do not add explanations.

Translate the following texts:
{texts_json_array}<end_of_turn>
<start_of_turn>model
"""


class GemmaTranslator(BaseGenAITranslator):
    """
    A translator for the Gemma family of models.

    Gemma models on the Gemini API accept neither system instructions nor a
    JSON response type, so the rules are inlined into a chat-formatted prompt
    and the answer goes through the shared tolerant parser.
    """

    def _default_model_name(self) -> str:
        """Return the default model name to use if not specified in settings."""
        return "gemma-3-27b-it"

    def _build_contents(self, texts: list[str], request: TranslationRequest) -> str:
        """Return the Gemma chat prompt with the instructions inlined."""
        return GEMMA_PROMPT_TEMPLATE.format(
            instructions=request.instructions,
            count=len(texts),
            texts_json_array=json.dumps(texts, ensure_ascii=False, indent=2),
        )
