"""Rebuild the shopping list section of a meal plan from its linked recipes."""

import logging
import re
from typing import Optional

from ..config import RecipeParsingConfig
from ..llm.client import LLMClient
from ..llm.messages import build_shopping_list_messages, format_recipe_block
from ..models.workflow import Notify, WorkflowResult, WorkflowStatus
from ..resolver import resolve_linked_notes
from ..sanitize import strip_image_embeds
from ..sections import locate_section, replace_section, section_text
from ..vault import Vault, VaultFile
from .common import error_message, finish, is_markdown

logger = logging.getLogger(__name__)

SHOPPING_SECTION_HEADING = "Need to buy"

NOTICE_NOT_MARKDOWN = "Open a meal plan markdown file to build a shopping list."
NOTICE_NO_SECTION = "No '# Need to buy' section found in the active file."
NOTICE_NO_RECIPES = "No linked recipe files found in the meal plan."
NOTICE_EMPTY_PROMPT = "Shopping list prompt is empty."
NOTICE_MISSING_HEADING = "LLM response did not include a '# Need to buy' section."
NOTICE_DONE = "Shopping list updated from linked recipes."

_RESPONSE_HEADING_RE = re.compile(
    rf"^#{{1,6}}(?!#)[^\n]*{re.escape(SHOPPING_SECTION_HEADING)}", re.IGNORECASE
)


def has_shopping_heading(response: str) -> bool:
    """True when the trimmed response opens with a '# Need to buy' heading line."""
    return bool(_RESPONSE_HEADING_RE.match(response.strip()))


def build_shopping_list(
    note: Optional[VaultFile],
    vault: Vault,
    client: LLMClient,
    config: RecipeParsingConfig,
    notify: Notify,
) -> WorkflowResult:
    """Regenerate the '# Need to buy' section of a meal plan note.

    Recipes are the markdown notes linked from the plan. Links that do not
    resolve are skipped; the run only fails when none resolve. Only the
    located section is replaced; everything around it is kept as-is.

    Args:
        note: The active meal plan note, or None if there is none
        vault: Vault used for reads, writes and link lookup
        client: LLM client
        config: Configuration carrying the prompt and text model
        notify: Receives exactly one notice per run

    Returns:
        WorkflowResult describing the outcome
    """
    if not is_markdown(note):
        return finish(notify, WorkflowStatus.FAILED, NOTICE_NOT_MARKDOWN, note)

    logger.info(f"Building shopping list for {note.path}")

    try:
        plan = vault.read(note)
        span = locate_section(plan, SHOPPING_SECTION_HEADING)
        if span is None:
            return finish(notify, WorkflowStatus.FAILED, NOTICE_NO_SECTION, note)

        recipe_files = resolve_linked_notes(plan, note.path, vault)
        if not recipe_files:
            return finish(notify, WorkflowStatus.FAILED, NOTICE_NO_RECIPES, note)

        recipe_blocks: list[str] = []
        for recipe_file in recipe_files:
            cleaned = strip_image_embeds(vault.read(recipe_file))
            recipe_blocks.append(format_recipe_block(recipe_file.path, cleaned))
        logger.debug(f"Collected {len(recipe_blocks)} recipe(s) for {note.path}")

        prompt = config.shopping_list_prompt.strip()
        if not prompt:
            return finish(notify, WorkflowStatus.FAILED, NOTICE_EMPTY_PROMPT, note)

        template = section_text(plan, span).strip()
        messages = build_shopping_list_messages(prompt, template, recipe_blocks)
        response = client.call_chat(messages, config.text_model)

        updated_section = response.strip()
        if not has_shopping_heading(updated_section):
            logger.warning(f"Rejected LLM response without shopping list heading for {note.path}")
            return finish(notify, WorkflowStatus.FAILED, NOTICE_MISSING_HEADING, note)

        vault.write(note, replace_section(plan, span, updated_section))
    except Exception as e:
        logger.error(f"Shopping list build failed for {note.path}: {e}")
        return finish(notify, WorkflowStatus.FAILED, error_message(e), note)

    logger.info(f"Shopping list updated from {len(recipe_files)} recipe(s) in {note.path}")
    return finish(notify, WorkflowStatus.UPDATED, NOTICE_DONE, note)
