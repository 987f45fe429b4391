"""Tests for access token providers and prompt suppression."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from fabriclink._client.auth import (
    AccessToken,
    PromptTokenProvider,
    StaticTokenProvider,
)
from fabriclink._client.context import CallContext, Interaction, call_scope
from fabriclink._client.wrapper import ApiWrapper
from fabriclink.exceptions import InteractiveModeRequiredError


def test_static_provider_returns_token() -> None:
    """The configured token is returned for every call."""
    provider = StaticTokenProvider("abc", token_type="Bearer")
    with call_scope("x") as ctx:
        token = provider.get_token(ctx)
    assert token.header_value() == "Bearer abc"


def test_static_provider_rejects_empty_token() -> None:
    """An empty token is a configuration error."""
    with pytest.raises(ValueError, match="non-empty"):
        StaticTokenProvider("")


def test_access_token_repr_hides_secret() -> None:
    """The token never shows up in repr (and therefore in logs)."""
    assert "s3cr3t" not in repr(AccessToken("s3cr3t"))


def test_prompt_provider_refuses_in_non_interactive_call() -> None:
    """Without a known token, a non-interactive call raises instead of prompting."""
    provider = PromptTokenProvider()
    with (
        patch("fabriclink._client.auth.getpass.getpass") as mock_getpass,
        call_scope("workspaces.list") as ctx,
        pytest.raises(InteractiveModeRequiredError, match="workspaces.list"),
    ):
        provider.get_token(ctx)
    mock_getpass.assert_not_called()


def test_prompt_provider_refuses_through_wrapper() -> None:
    """Calls made through ApiWrapper.invoke never reach the prompt."""
    provider = PromptTokenProvider()
    wrapper = ApiWrapper(provider, "auth")
    with (
        patch("fabriclink._client.auth.getpass.getpass") as mock_getpass,
        pytest.raises(InteractiveModeRequiredError),
    ):
        wrapper.invoke(lambda ctx: wrapper.api.get_token(ctx))
    mock_getpass.assert_not_called()


def test_prompt_provider_prompts_once_when_interactive() -> None:
    """An interactive call prompts; later non-interactive calls reuse the token."""
    provider = PromptTokenProvider()
    with patch(
        "fabriclink._client.auth.getpass.getpass", return_value=" typed-token "
    ) as mock_getpass:
        with call_scope("authenticate", interaction=Interaction.INTERACTIVE) as ctx:
            first = provider.get_token(ctx)
        with call_scope("workspaces.list") as ctx:
            second = provider.get_token(ctx)

    assert first.token == "typed-token"
    assert second is first
    mock_getpass.assert_called_once()


def test_prompt_provider_honours_no_interactive_env(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """FABRICLINK_NO_INTERACTIVE wins even for interactive calls."""
    monkeypatch.setenv("FABRICLINK_NO_INTERACTIVE", "true")
    provider = PromptTokenProvider()
    with (
        patch("fabriclink._client.auth.getpass.getpass") as mock_getpass,
        call_scope("authenticate", interaction=Interaction.INTERACTIVE) as ctx,
        pytest.raises(InteractiveModeRequiredError, match="FABRICLINK_NO_INTERACTIVE"),
    ):
        provider.get_token(ctx)
    mock_getpass.assert_not_called()


def test_inactive_interactive_context_does_not_prompt() -> None:
    """A context that was never activated (or already released) is not interactive."""
    provider = PromptTokenProvider()
    ctx = CallContext(operation="stale", interaction=Interaction.INTERACTIVE)
    with pytest.raises(InteractiveModeRequiredError):
        provider.get_token(ctx)


def test_prompt_provider_with_seed_token() -> None:
    """A seeded provider never prompts."""
    provider = PromptTokenProvider(token="seeded")
    with call_scope("x") as ctx:
        assert provider.get_token(ctx).token == "seeded"
