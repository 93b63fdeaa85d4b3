import pytest
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

from compressed_shell.llm.anthropic import AnthropicModel


@pytest.fixture
def mock_anthropic_client():
    client = AsyncMock()
    return client


def _make_model(client, **kwargs) -> AnthropicModel:
    return AnthropicModel(
        id="claude-3-5-haiku-latest",
        name="claude-3-5-haiku-latest",
        api_key="test-key",
        client=client,
        **kwargs,
    )


def _response(*blocks):
    return SimpleNamespace(content=list(blocks))


@pytest.mark.asyncio
@patch("compressed_shell.llm.anthropic.settings")
async def test_anthropic_model_acomplete_basic(mock_settings, mock_anthropic_client):
    mock_settings.anthropic_api_key = None
    model = _make_model(mock_anthropic_client, max_tokens=100)
    mock_anthropic_client.messages.create = AsyncMock(
        return_value=_response(SimpleNamespace(type="text", text="SUCCESS - built"))
    )

    text = await model.acomplete([{"role": "user", "content": "Hello"}])

    assert text == "SUCCESS - built"
    call = mock_anthropic_client.messages.create
    call.assert_called_once()
    assert call.call_args.kwargs["model"] == "claude-3-5-haiku-latest"
    assert call.call_args.kwargs["max_tokens"] == 100
    assert call.call_args.kwargs["messages"] == [{"role": "user", "content": "Hello"}]
    assert "system" not in call.call_args.kwargs


@pytest.mark.asyncio
@patch("compressed_shell.llm.anthropic.settings")
async def test_anthropic_model_acomplete_with_system_prompt(
    mock_settings, mock_anthropic_client
):
    mock_settings.anthropic_api_key = None
    model = _make_model(mock_anthropic_client)
    mock_anthropic_client.messages.create = AsyncMock(
        return_value=_response(SimpleNamespace(type="text", text="ok"))
    )

    messages = [
        {"role": "system", "content": "You are a compressor"},
        {"role": "user", "content": "Hello"},
    ]
    await model.acomplete(messages)

    kwargs = mock_anthropic_client.messages.create.call_args.kwargs
    assert kwargs["system"] == "You are a compressor"
    assert kwargs["messages"] == [{"role": "user", "content": "Hello"}]


@pytest.mark.asyncio
@patch("compressed_shell.llm.anthropic.settings")
async def test_anthropic_model_acomplete_joins_text_blocks(
    mock_settings, mock_anthropic_client
):
    mock_settings.anthropic_api_key = None
    model = _make_model(mock_anthropic_client)
    mock_anthropic_client.messages.create = AsyncMock(
        return_value=_response(
            SimpleNamespace(type="text", text="SUCCESS\n"),
            SimpleNamespace(type="tool_use", id="tool_1"),
            SimpleNamespace(type="text", text="- 3 files"),
        )
    )

    text = await model.acomplete([{"role": "user", "content": "Hello"}])

    assert text == "SUCCESS\n- 3 files"


@pytest.mark.asyncio
@patch("compressed_shell.llm.anthropic.settings")
async def test_anthropic_model_acomplete_error_propagates(
    mock_settings, mock_anthropic_client
):
    mock_settings.anthropic_api_key = None
    model = _make_model(mock_anthropic_client)
    mock_anthropic_client.messages.create = AsyncMock(side_effect=ValueError("bad request"))

    with pytest.raises(ValueError, match="bad request"):
        await model.acomplete([{"role": "user", "content": "Hello"}])

    # Non-retryable errors are not retried.
    assert mock_anthropic_client.messages.create.call_count == 1


@patch("compressed_shell.llm.anthropic.settings")
def test_anthropic_model_invalid_temperature(mock_settings):
    mock_settings.anthropic_api_key = None
    with pytest.raises(ValueError, match="temperature"):
        AnthropicModel(id="m", name="m", api_key="k", temperature=3.0)
