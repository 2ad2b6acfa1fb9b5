import logging

import groq

from lecture_notes.clients import GroqClient
from lecture_notes.config import settings
from lecture_notes.errors import GenerationFailure

logger = logging.getLogger(__name__)


def build_messages(system: str, user: str) -> list[dict]:
    return [
        {"role": "system", "content": system},
        {"role": "user", "content": user},
    ]


async def complete(
    groq_client: GroqClient,
    messages: list[dict],
    *,
    max_tokens: int,
    failure_message: str,
) -> str:
    """Run one completion, mapping any upstream error to ``GenerationFailure``."""
    try:
        return await groq_client.chat(
            messages,
            temperature=settings.temperature,
            max_tokens=max_tokens,
        )
    except groq.APIStatusError as e:
        logger.error("Groq API error %s (%s): %s", e.status_code, failure_message, e.message)
        raise GenerationFailure(failure_message, detail=e.message, status=e.status_code) from e
    except groq.APIError as e:
        logger.error("Groq API unreachable (%s): %s", failure_message, e.message)
        raise GenerationFailure(failure_message, detail=e.message) from e
