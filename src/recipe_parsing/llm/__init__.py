"""LLM request building and chat clients for recipe parsing."""

from .client import ChatCompletionsClient, FakeLLMClient, LLMClient, LLMError, get_llm_client
from .messages import (
    ChatMessage,
    ImagePart,
    LabeledImage,
    TextPart,
    build_image_messages,
    build_shopping_list_messages,
    build_web_recipe_messages,
    mime_type_for,
)

__all__ = [
    # Clients
    "LLMClient",
    "ChatCompletionsClient",
    "FakeLLMClient",
    "LLMError",
    "get_llm_client",
    # Messages
    "ChatMessage",
    "TextPart",
    "ImagePart",
    "LabeledImage",
    "build_image_messages",
    "build_shopping_list_messages",
    "build_web_recipe_messages",
    "mime_type_for",
]
