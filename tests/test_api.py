from types import SimpleNamespace

import httpx
import openai
import pytest

from aima.api import NO_RESPONSE, CompletionClient, build_messages
from aima.config import Settings
from aima.errors import ErrorKind, NetworkFailure, ServiceError, ValidationError

URL = "https://api.openai.com/v1/chat/completions"


def _reply(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


class FakeCompletions:
    def __init__(self, result):
        self.result = result
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if isinstance(self.result, BaseException):
            raise self.result
        return self.result


def _client(result, timeout=30.0):
    completions = FakeCompletions(result)
    sdk = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return CompletionClient(api_key=None, model="gpt-3.5-turbo", timeout=timeout, client=sdk), completions


def test_build_messages_has_system_and_user_entries():
    assert build_messages("role", "hi") == [
        {"role": "system", "content": "role"},
        {"role": "user", "content": "hi"},
    ]


@pytest.mark.asyncio
async def test_complete_returns_first_choice_text():
    client, completions = _client(_reply("Hi there"))
    completion = await client.complete("You teach English.", "Hello", max_tokens=1000)

    assert completion.text == "Hi there"
    assert not completion.empty
    assert len(completions.calls) == 1
    call = completions.calls[0]
    assert call["model"] == "gpt-3.5-turbo"
    assert call["messages"] == build_messages("You teach English.", "Hello")
    assert call["max_tokens"] == 1000
    assert call["timeout"] == 30.0


@pytest.mark.asyncio
async def test_max_tokens_omitted_when_not_given():
    client, completions = _client(_reply("ok"))
    await client.complete("role", "Hello", timeout=5)
    assert "max_tokens" not in completions.calls[0]
    assert completions.calls[0]["timeout"] == 5


@pytest.mark.asyncio
@pytest.mark.parametrize("reply", [_reply(None), _reply(""), _reply("  \n "), SimpleNamespace(choices=[])])
async def test_missing_content_is_sentinel_success(reply):
    client, _ = _client(reply)
    completion = await client.complete("role", "Hello")
    assert completion.empty
    assert completion.text == NO_RESPONSE


@pytest.mark.asyncio
async def test_blank_text_never_reaches_network():
    client, completions = _client(_reply("ok"))
    with pytest.raises(ValidationError):
        await client.complete("role", "   ")
    assert completions.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("exc_type", [openai.APIConnectionError, openai.APITimeoutError])
async def test_transport_errors_are_network_failures(exc_type):
    client, _ = _client(exc_type(request=httpx.Request("POST", URL)))
    with pytest.raises(NetworkFailure) as info:
        await client.complete("role", "Hello")
    assert info.value.kind is ErrorKind.NETWORK_FAILURE


@pytest.mark.asyncio
async def test_status_error_carries_upstream_message():
    request = httpx.Request("POST", URL)
    error = openai.APIStatusError(
        "Error code: 429",
        response=httpx.Response(429, request=request),
        body={"message": "Rate limit reached", "type": "requests"},
    )
    client, _ = _client(error)
    with pytest.raises(ServiceError) as info:
        await client.complete("role", "Hello")
    assert info.value.kind is ErrorKind.SERVICE_ERROR
    assert info.value.message == "Rate limit reached"
    assert info.value.status_code == 429


@pytest.mark.asyncio
async def test_status_error_without_envelope_uses_sdk_message():
    request = httpx.Request("POST", URL)
    error = openai.APIStatusError("Error code: 502", response=httpx.Response(502, request=request), body=None)
    client, _ = _client(error)
    with pytest.raises(ServiceError) as info:
        await client.complete("role", "Hello")
    assert info.value.message == "Error code: 502"


@pytest.mark.asyncio
async def test_unconfigured_client_fails_without_network():
    client = CompletionClient(api_key=None, model="gpt-3.5-turbo")
    assert not client.is_available
    with pytest.raises(ServiceError):
        await client.complete("role", "Hello")


def test_from_settings_picks_credential_and_disables_retries():
    settings = Settings(api_key="sk-chat-000000000000", lesson_api_key="sk-lesson-0000000000")
    chat = CompletionClient.from_settings(settings)
    lesson = CompletionClient.from_settings(settings, lesson=True)

    assert chat.is_available and lesson.is_available
    assert chat._client.api_key == "sk-chat-000000000000"
    assert lesson._client.api_key == "sk-lesson-0000000000"
    assert chat._client.max_retries == 0
    assert chat.model == settings.chat_model
