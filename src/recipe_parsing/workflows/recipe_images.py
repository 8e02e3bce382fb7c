"""Extract recipe information from the images embedded in a note.

All images of the note go to the LLM in one combined request. The reply is
inserted once, right before the first image in the note.
"""

import logging
from typing import Optional

from ..config import RecipeParsingConfig
from ..links import find_image_links
from ..llm.client import LLMClient
from ..llm.messages import LabeledImage, build_image_messages
from ..models.workflow import Notify, WorkflowResult, WorkflowStatus
from ..resolver import resolve_link_target
from ..sections import insert_at
from ..vault import Vault, VaultFile
from .common import error_message, finish, is_markdown

logger = logging.getLogger(__name__)

NOTICE_NOT_MARKDOWN = "Open a markdown file to extract ingredients."
NOTICE_NO_IMAGES = "No image attachments found in this file."
NOTICE_EMPTY_PROMPT = "Ingredients prompt is empty"
NOTICE_EMPTY_RESPONSE = "LLM returned an empty response for the recipe images."
NOTICE_DONE = "Recipe information extracted and inserted detected images."


def extract_recipe_information(
    note: Optional[VaultFile],
    vault: Vault,
    client: LLMClient,
    config: RecipeParsingConfig,
    notify: Notify,
) -> WorkflowResult:
    """Annotate a note with information extracted from its images.

    Any unresolved image aborts the run before the LLM is called. The note
    is only written when the run succeeds and the content changed.

    Args:
        note: The active note, or None if there is none
        vault: Vault used for reads, writes and link lookup
        client: LLM client
        config: Configuration carrying the prompt and image model
        notify: Receives exactly one notice per run

    Returns:
        WorkflowResult describing the outcome
    """
    if not is_markdown(note):
        return finish(notify, WorkflowStatus.FAILED, NOTICE_NOT_MARKDOWN, note)

    logger.info(f"Extracting recipe information from images in {note.path}")

    try:
        content = vault.read(note)
        matches = sorted(find_image_links(content), key=lambda m: m.start)
        if not matches:
            return finish(notify, WorkflowStatus.FAILED, NOTICE_NO_IMAGES, note)

        if not config.book_extraction_prompt.strip():
            return finish(notify, WorkflowStatus.FAILED, NOTICE_EMPTY_PROMPT, note)

        images: list[LabeledImage] = []
        for match in matches:
            image_file = resolve_link_target(match.target_path, note.path, vault)
            if image_file is None:
                logger.warning(f"Attachment not found: {match.target_path}")
                message = f"{match.target_path}: Attachment not found: {match.target_path}"
                return finish(notify, WorkflowStatus.FAILED, message, note)
            logger.debug(f"Resolved {match.target_path} -> {image_file.path}")
            images.append(
                LabeledImage(
                    label=image_file.path,
                    extension=image_file.extension,
                    data=vault.read_binary(image_file),
                )
            )

        messages = build_image_messages(config.book_extraction_prompt, images)
        result = client.call_chat(messages, config.image_model).strip()
        if not result:
            return finish(notify, WorkflowStatus.FAILED, NOTICE_EMPTY_RESPONSE, note)

        updated = insert_at(content, matches[0].start, f"{result}\n\n")
        if updated == content:
            return finish(notify, WorkflowStatus.UNCHANGED, NOTICE_DONE, note)
        vault.write(note, updated)
    except Exception as e:
        logger.error(f"Image extraction failed for {note.path}: {e}")
        return finish(notify, WorkflowStatus.FAILED, error_message(e), note)

    logger.info(f"Inserted extraction for {len(images)} image(s) into {note.path}")
    return finish(notify, WorkflowStatus.UPDATED, NOTICE_DONE, note)
