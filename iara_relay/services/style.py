import logging

from openai import OpenAI

from iara_relay.core.config import Settings

logger = logging.getLogger("iara_relay.style")

IARA_SYSTEM_PROMPT = (
    "Você escreve respostas curtas e calorosas em PT-BR, incentivando conexão com a Natureza. "
    "Use tom acolhedor, observação do iNaturalist, convide a pessoa a acompanhar. "
    "Evite prometer certezas absolutas."
)

FALLBACK_MARKER = "🌿"
EMPTY_REPLY_MARKER = "🌱"


def literal_reply(prompt: str, marker: str = FALLBACK_MARKER) -> str:
    return f"{marker} {prompt}"


class StyleGenerator:
    """
    Rewrites templated text in the Iara persona tone.
    Never raises: without a key, or on any failure, the literal text is returned with a marker.
    """

    def __init__(self, settings: Settings, client: OpenAI | None = None):
        self.settings = settings
        self.client = client
        if self.client is None and settings.openai_api_key:
            self.client = OpenAI(
                api_key=settings.openai_api_key,
                timeout=settings.style_timeout,
                max_retries=0,
            )

    @property
    def enabled(self) -> bool:
        return self.client is not None

    def rewrite(self, prompt: str) -> str:
        if not self.enabled:
            return literal_reply(prompt)

        try:
            resp = self.client.chat.completions.create(
                model=self.settings.openai_model,
                max_tokens=160,
                messages=[
                    {"role": "system", "content": IARA_SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
            )
            content = (resp.choices[0].message.content or "").strip()
        except Exception:
            # any failure in the optional pass falls back to the literal text
            logger.exception("Iara error")
            return literal_reply(prompt)

        if not content:
            return literal_reply(prompt, EMPTY_REPLY_MARKER)
        return content
