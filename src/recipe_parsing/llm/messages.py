"""Chat message models and request builders.

Messages serialize to the OpenAI-compatible chat completions format.
"""

import base64
from typing import Literal, Union

from pydantic import BaseModel, Field

IMAGE_INSTRUCTION = "Extract information from all images. Return a combined response."
SHOPPING_TEMPLATE_HEADER = "Meal plan shopping list template:"
SHOPPING_RECIPES_HEADER = "Recipes (omit any images already removed):"
HTML_TRUNCATION_NOTE = "(HTML truncated for size)"

_MIME_TYPES = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "webp": "image/webp",
    "gif": "image/gif",
    "bmp": "image/bmp",
}


class TextPart(BaseModel):
    """Plain text content part."""

    kind: Literal["text"] = "text"
    text: str

    def to_payload(self) -> dict:
        return {"type": "text", "text": self.text}


class ImagePart(BaseModel):
    """Inline image content part carried as base64 data."""

    kind: Literal["image"] = "image"
    mime_type: str
    base64_data: str

    @property
    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.base64_data}"

    def to_payload(self) -> dict:
        return {"type": "image_url", "image_url": {"url": self.data_url}}


ContentPart = Union[TextPart, ImagePart]


class ChatMessage(BaseModel):
    """One role-tagged message in a chat completion request."""

    role: Literal["system", "user"]
    content: Union[str, list[ContentPart]] = Field(
        ..., description="Plain text or ordered content parts"
    )

    def to_payload(self) -> dict:
        if isinstance(self.content, str):
            return {"role": self.role, "content": self.content}
        return {"role": self.role, "content": [part.to_payload() for part in self.content]}


class LabeledImage(BaseModel):
    """Raw image bytes with the label shown to the model."""

    label: str
    extension: str
    data: bytes


def mime_type_for(extension: str) -> str:
    return _MIME_TYPES.get(extension.lower(), "application/octet-stream")


def encode_base64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def image_part(data: bytes, extension: str) -> ImagePart:
    return ImagePart(mime_type=mime_type_for(extension), base64_data=encode_base64(data))


def build_image_messages(prompt: str, images: list[LabeledImage]) -> list[ChatMessage]:
    """Build one combined request for all images of a note.

    The user message comes first: a shared instruction, then a numbered
    label and image part per image. The system prompt follows.

    Raises:
        ValueError: If the prompt is blank
    """
    prompt = prompt.strip()
    if not prompt:
        raise ValueError("Ingredients prompt is empty")

    parts: list[ContentPart] = [TextPart(text=IMAGE_INSTRUCTION)]
    for index, image in enumerate(images, start=1):
        parts.append(TextPart(text=f"Image {index}: {image.label}"))
        parts.append(image_part(image.data, image.extension))

    return [
        ChatMessage(role="user", content=parts),
        ChatMessage(role="system", content=prompt),
    ]


def format_recipe_block(path: str, text: str) -> str:
    return f"---\nFile: {path}\n{text}"


def build_shopping_list_messages(prompt: str, template_section: str, recipe_blocks: list[str]) -> list[ChatMessage]:
    user_content = (
        f"{SHOPPING_TEMPLATE_HEADER}\n{template_section}\n\n"
        f"{SHOPPING_RECIPES_HEADER}\n" + "\n\n".join(recipe_blocks)
    )
    return [
        ChatMessage(role="system", content=prompt),
        ChatMessage(role="user", content=user_content),
    ]


def build_web_recipe_messages(prompt: str, url: str, html: str, truncated: bool) -> list[ChatMessage]:
    truncation_note = f"{HTML_TRUNCATION_NOTE}\n" if truncated else ""
    return [
        ChatMessage(role="system", content=prompt),
        ChatMessage(role="user", content=f"URL: {url}\n{truncation_note}\nHTML:\n{html}"),
    ]
