"""
Shared LLM invocation utilities for text generation.

Calls are synchronous; async callers run them in a worker thread.
"""

from __future__ import annotations

from typing import Optional

from statussheet.core.config import get_settings
from statussheet.core.logger import logger
from statussheet.interfaces.llm_provider import ILLMProvider


def _is_litellm_provider(llm_provider: ILLMProvider) -> bool:
    from statussheet.infrastructure.local.litellm_provider import LiteLLMProvider

    return isinstance(llm_provider, LiteLLMProvider)


def generate_text_with_status(
    llm_provider: ILLMProvider,
    prompt: str,
    temperature: float = 0.7,
    max_output_tokens: int = 500,
    system_instruction: Optional[str] = None,
    timeout: Optional[float] = None,
) -> tuple[Optional[str], Optional[str], Optional[str]]:
    """
    Generate text with error status.

    Returns (text, error_code, error_detail). error_detail is only
    populated in DEBUG mode.
    """
    if not prompt:
        return None, "empty_prompt", None

    if _is_litellm_provider(llm_provider):
        return _generate_text_litellm_with_status(
            llm_provider=llm_provider,
            prompt=prompt,
            temperature=temperature,
            max_output_tokens=max_output_tokens,
            system_instruction=system_instruction,
            timeout=timeout,
        )

    api_key = llm_provider.get_api_key()
    if not api_key:
        return None, "missing_google_api_key", None

    try:
        from google import genai
        from google.genai.types import Content, GenerateContentConfig, HttpOptions, Part
    except ImportError as exc:
        logger.warning(f"GenAI import failed: {exc}")
        return None, "genai_import_failed", _maybe_detail(exc)

    config_kwargs: dict = {
        "temperature": temperature,
        "max_output_tokens": max_output_tokens,
    }
    if system_instruction:
        config_kwargs["system_instruction"] = system_instruction

    client_kwargs: dict = {"api_key": api_key}
    if timeout:
        client_kwargs["http_options"] = HttpOptions(timeout=int(timeout * 1000))

    try:
        client = genai.Client(**client_kwargs)
        response = client.models.generate_content(
            model=llm_provider.get_model(),
            contents=[Content(role="user", parts=[Part(text=prompt)])],
            config=GenerateContentConfig(**config_kwargs),
        )
        text = (response.text or "").strip()
        if not text:
            return None, "genai_empty_response", None
        return text, None, None
    except Exception as exc:
        logger.warning(f"GenAI request failed: {exc}")
        return None, "genai_request_failed", _maybe_detail(exc)


def _generate_text_litellm_with_status(
    llm_provider: ILLMProvider,
    prompt: str,
    temperature: float,
    max_output_tokens: int,
    system_instruction: Optional[str],
    timeout: Optional[float],
) -> tuple[Optional[str], Optional[str], Optional[str]]:
    try:
        import litellm
    except ImportError as exc:
        logger.warning(f"LiteLLM import failed: {exc}")
        return None, "litellm_import_failed", _maybe_detail(exc)

    messages = []
    if system_instruction:
        messages.append({"role": "system", "content": system_instruction})
    messages.append({"role": "user", "content": prompt})

    kwargs: dict = {
        "model": llm_provider.get_model(),
        "messages": messages,
        "temperature": temperature,
        "max_tokens": max_output_tokens,
    }
    if llm_provider.get_api_base():
        kwargs["api_base"] = llm_provider.get_api_base()
    if llm_provider.get_api_key():
        kwargs["api_key"] = llm_provider.get_api_key()
    if timeout:
        kwargs["timeout"] = timeout

    try:
        response = litellm.completion(**kwargs)
        content = response.choices[0].message.content if response.choices else ""
        text = (content or "").strip()
        if not text:
            return None, "litellm_empty_response", None
        return text, None, None
    except Exception as exc:
        logger.warning(f"LiteLLM request failed: {exc}")
        return None, "litellm_request_failed", _maybe_detail(exc)


def _maybe_detail(exc: Exception) -> Optional[str]:
    settings = get_settings()
    if not settings.DEBUG:
        return None
    return f"{type(exc).__name__}: {exc}"
