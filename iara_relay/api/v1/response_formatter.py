import math
from typing import Sequence

from iara_relay.schemas.identify import Candidate, Registered, RegistrationOutcome

NO_IDENTIFICATION_MESSAGE = (
    "Não consegui identificar com segurança a partir da imagem. "
    "Sugira tentar outra foto, ângulo ou enviar localização."
)
UNSUPPORTED_ATTACHMENT_MESSAGE = "Recebi um anexo, mas por enquanto só aceito imagens 🙏"
GENERIC_APOLOGY_MESSAGE = "Ops! Tive um probleminha aqui. Pode tentar de novo? 🌱"


def text_invitation_prompt(text: str) -> str:
    return (
        f'Mensagem do usuário: "{text}". '
        "Responda acolhedor e convide a pessoa a enviar foto de planta/animal e localização."
    )


def percent(score: float) -> int:
    """Score as a whole percentage, halves rounded up."""
    return math.floor(score * 100 + 0.5)


def format_identification_message(
    candidates: Sequence[Candidate],
    registration: RegistrationOutcome | None = None,
) -> str:
    if not candidates:
        return NO_IDENTIFICATION_MESSAGE

    top = candidates[0]
    message = f"Minha sugestão é: {top.label}. (confiança ~{percent(top.score)}%)"

    if len(candidates) > 1:
        second = candidates[1]
        message += f"\nOutra possibilidade: {second.label} (~{percent(second.score)}%)."

    if isinstance(registration, Registered):
        message += f"\n\nRegistrei como observação no iNaturalist: {registration.url}"
    else:
        message += "\n\nSe quiser, posso registrar como observação no iNaturalist quando você desejar."

    return message
