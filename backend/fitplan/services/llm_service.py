import logging
from typing import Optional

# LangChain Imports
from langchain_ollama import ChatOllama
from langchain_openai import ChatOpenAI
from langchain_core.messages import HumanMessage

from fitplan.config import LLM_PROVIDER, LLM_API_KEY, LLM_MODEL as OVERRIDE_MODEL, OLLAMA_URL, LLM_TIMEOUT_SECONDS
from fitplan.exceptions import GenerationError

logger = logging.getLogger(__name__)

# Determine Model Name based on Provider
# If LLM_MODEL is set in env, it overrides everything.
DEFAULT_MODELS = {
    "ollama": "gpt-oss:120b-cloud",
    "openrouter": "google/gemini-2.0-flash-001",  # Cost effective default
    "openai": "gpt-4o",
}

MODEL_NAME = OVERRIDE_MODEL if OVERRIDE_MODEL else DEFAULT_MODELS.get(LLM_PROVIDER, "gpt-3.5-turbo")

# Base URLs for paid providers
PROVIDER_URLS = {
    "openrouter": "https://openrouter.ai/api/v1",
    "openai": None,  # Uses default OpenAI URL
}


def get_llm(
    temperature: float = 0.7,
    max_tokens: int = 2000,
    timeout: float = LLM_TIMEOUT_SECONDS,
    provider: str = LLM_PROVIDER,
    model: str = MODEL_NAME,
):
    """
    Factory function to get a configured LangChain Chat Model instance.
    Supports: Ollama (Local), OpenRouter, OpenAI
    """
    if provider in ("openrouter", "openai"):
        if not LLM_API_KEY:
            logger.warning(f"Missing API key for provider {provider}; calls will fail")
        return ChatOpenAI(
            model=model,
            api_key=LLM_API_KEY,
            base_url=PROVIDER_URLS.get(provider),
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
            max_retries=0,
        )

    if provider != "ollama":
        logger.warning(f"Unknown provider '{provider}'. Defaulting to Ollama.")
    return ChatOllama(
        base_url=OLLAMA_URL,
        model=model,
        temperature=temperature,
        num_predict=max_tokens,
        client_kwargs={"timeout": timeout},
    )


def call_llm(llm, prompt: str) -> str:
    """
    Sends a single user prompt and returns the text of the reply.
    Raises GenerationError when the model answers with nothing.
    """
    response = llm.invoke([HumanMessage(content=prompt)])
    content: Optional[str] = response.content if isinstance(response.content, str) else None
    if not content or not content.strip():
        raise GenerationError("Empty content received from model")

    if response.response_metadata:
        metadata = response.response_metadata
        # Ollama reports prompt_eval_count/eval_count, OpenAI-compatible providers a nested 'usage'
        input_tokens = metadata.get("prompt_eval_count") or 0
        output_tokens = metadata.get("eval_count") or 0
        if input_tokens == 0 and output_tokens == 0:
            usage = metadata.get("token_usage") or metadata.get("usage") or {}
            input_tokens = usage.get("prompt_tokens") or usage.get("input_tokens") or 0
            output_tokens = usage.get("completion_tokens") or usage.get("output_tokens") or 0
        logger.info(f"[LLM Stats] Input: {input_tokens}, Output: {output_tokens}, Total: {input_tokens + output_tokens}")

    return content
