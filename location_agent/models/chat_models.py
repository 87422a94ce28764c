from typing import Optional

from langchain_core.language_models import BaseChatModel
from langchain_huggingface import ChatHuggingFace, HuggingFaceEndpoint
from langchain_openai import ChatOpenAI

from location_agent.config import Settings


def get_hf_model(model_name: str, api_key: Optional[str] = None, **kwargs) -> ChatHuggingFace:
    """A wrapper around the HuggingFace LLM endpoint for consistent usage across agents."""

    llm = ChatHuggingFace(
        llm=HuggingFaceEndpoint(
            model=model_name,
            huggingfacehub_api_token=api_key,
        ),
        **kwargs
    )
    return llm


def get_chat_model(settings: Settings, model_name: Optional[str] = None) -> BaseChatModel:
    """Build the chat model for the configured provider."""
    model_name = model_name or settings.model_name

    if settings.llm_provider == "huggingface":
        return get_hf_model(model_name, api_key=settings.huggingface_api_key)

    return ChatOpenAI(
        model=model_name,
        temperature=settings.temperature,
        api_key=settings.openai_api_key,
        timeout=settings.http_timeout,
    )
