from unittest.mock import MagicMock

from iara_relay.services.style import IARA_SYSTEM_PROMPT, StyleGenerator


def completion(content):
    resp = MagicMock()
    resp.choices = [MagicMock()]
    resp.choices[0].message.content = content
    return resp


def test_without_key_returns_literal_with_marker(settings):
    styler = StyleGenerator(settings)
    assert not styler.enabled
    assert styler.rewrite("Olá") == "🌿 Olá"


def test_rewrites_with_persona(settings):
    client = MagicMock()
    client.chat.completions.create.return_value = completion("  Que lindo tucano! 🌿  ")

    reply = StyleGenerator(settings, client=client).rewrite("Minha sugestão é: Tucano")

    assert reply == "Que lindo tucano! 🌿"
    kwargs = client.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "gpt-4o-mini"
    assert kwargs["max_tokens"] == 160
    assert kwargs["messages"][0] == {"role": "system", "content": IARA_SYSTEM_PROMPT}
    assert kwargs["messages"][1] == {"role": "user", "content": "Minha sugestão é: Tucano"}


def test_empty_completion_uses_seedling_marker(settings):
    client = MagicMock()
    client.chat.completions.create.return_value = completion(None)
    assert StyleGenerator(settings, client=client).rewrite("Olá") == "🌱 Olá"


def test_failure_falls_back_to_literal(settings):
    client = MagicMock()
    client.chat.completions.create.side_effect = RuntimeError("quota exceeded")
    assert StyleGenerator(settings, client=client).rewrite("Olá") == "🌿 Olá"


def test_malformed_response_falls_back_to_literal(settings):
    client = MagicMock()
    client.chat.completions.create.return_value = MagicMock(choices=[])
    assert StyleGenerator(settings, client=client).rewrite("Olá") == "🌿 Olá"
