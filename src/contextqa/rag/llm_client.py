"""LiteLLM client wrapper with timeouts and API key validation.

All embedding + completion calls route through this module. Any LiteLLM
failure (HTTP error, connection error, timeout) is re-raised as
ProviderUnavailable so callers deal with a single error type.
"""

from __future__ import annotations

import logging
import os

import litellm

from contextqa.errors import ProviderUnavailable

# Disable LiteLLM verbose logging unless explicitly enabled
litellm.suppress_debug_info = True
litellm.set_verbose = False  # type: ignore[assignment]

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Provider → env var mapping for API key validation
# ------------------------------------------------------------------

_PROVIDER_ENV: dict[str, str | None] = {
    "openai": "OPENAI_API_KEY",
    "gemini": "GEMINI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "azure": "AZURE_API_KEY",
    "cohere": "COHERE_API_KEY",
    "mistral": "MISTRAL_API_KEY",
    "ollama": None,  # Local, no key required
    "ollama_chat": None,
}


def provider_of(model: str) -> str:
    """Return the provider prefix of a 'provider/model' string (default 'openai')."""
    return model.split("/")[0].lower() if "/" in model else "openai"


def validate_api_key(model: str) -> None:
    """Check that the required API key env var is set for *model*.

    Args:
        model: LiteLLM model string in 'provider/model' format.

    Raises:
        ProviderUnavailable: If the required key is missing from environment.
    """
    provider = provider_of(model)
    env_var = _PROVIDER_ENV.get(provider, f"{provider.upper()}_API_KEY")

    if env_var is None:
        return

    if not os.getenv(env_var):
        raise ProviderUnavailable(
            f"API key not found for provider '{provider}'. "
            f"Set the {env_var} environment variable."
        )


def complete(
    model: str,
    messages: list[dict],
    max_tokens: int = 1024,
    temperature: float = 0.0,
    timeout: float = 60.0,
    num_retries: int = 0,
) -> str:
    """Call litellm.completion() once. Returns the content string.

    Args:
        model: LiteLLM model string (provider/model format).
        messages: OpenAI-style message list.
        max_tokens: Maximum output tokens.
        temperature: Sampling temperature (0 = deterministic).
        timeout: Request timeout in seconds.
        num_retries: Retries on transient errors (0 = single attempt).

    Returns:
        The text content of the first choice ("" if the model returned none).

    Raises:
        ProviderUnavailable: On any upstream failure.
    """
    try:
        response = litellm.completion(
            model=model,
            messages=messages,
            max_tokens=max_tokens,
            temperature=temperature,
            timeout=timeout,
            num_retries=num_retries,
        )
    except Exception as exc:
        raise ProviderUnavailable(_describe(exc)) from exc

    try:
        return response.choices[0].message.content or ""
    except (IndexError, AttributeError, KeyError, TypeError) as exc:
        raise ProviderUnavailable(f"Malformed response from '{model}'.") from exc


def embed(model: str, text: str, timeout: float = 30.0, num_retries: int = 0) -> list[float]:
    """Call litellm.embedding() for a single text. Returns the embedding vector.

    Raises:
        ProviderUnavailable: On any upstream failure or an empty response.
    """
    try:
        response = litellm.embedding(
            model=model,
            input=[text],
            timeout=timeout,
            num_retries=num_retries,
        )
    except Exception as exc:
        raise ProviderUnavailable(_describe(exc)) from exc

    try:
        vector = response.data[0]["embedding"] if response.data else None
    except (IndexError, AttributeError, KeyError, TypeError) as exc:
        raise ProviderUnavailable(f"Malformed response from '{model}'.") from exc
    if not vector:
        raise ProviderUnavailable(f"No embedding returned from '{model}'.")
    return [float(x) for x in vector]


def _describe(exc: Exception) -> str:
    """Short human-readable description of a LiteLLM exception."""
    status = getattr(exc, "status_code", None)
    if status is not None:
        return f"{status} {type(exc).__name__}"
    return f"{type(exc).__name__}: {exc}"
