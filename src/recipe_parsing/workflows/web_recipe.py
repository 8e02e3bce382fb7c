"""Extract a recipe from a web page linked in a note."""

import logging
from typing import Optional

import requests

from ..config import RecipeParsingConfig
from ..links import extract_url_from_selection, find_http_link, find_line_end_index
from ..llm.client import LLMClient
from ..llm.messages import build_web_recipe_messages
from ..models.workflow import Notify, WorkflowResult, WorkflowStatus
from ..sanitize import sanitize_html_for_llm, truncate_for_llm
from ..sections import insert_at
from ..vault import Vault, VaultFile
from .common import error_message, finish, is_markdown

logger = logging.getLogger(__name__)

NOTICE_NOT_MARKDOWN = "Open a markdown file with a recipe link to extract."
NOTICE_NO_LINK = "No recipe link found in the active file."
NOTICE_EMPTY_PROMPT = "Web recipe prompt is empty."
NOTICE_EMPTY_PAGE = "Fetched webpage content was empty."
NOTICE_EMPTY_RECIPE = "LLM returned an empty recipe."
NOTICE_DONE = "Recipe extracted and inserted below the link."


class FetchError(RuntimeError):
    """Raised when a web page cannot be fetched."""


def fetch_webpage(url: str, timeout_seconds: int = 60) -> str:
    """GET a page and return its text.

    Raises:
        FetchError: If the status is not 2xx
        requests.RequestException: On transport failure
    """
    response = requests.get(url, timeout=timeout_seconds)
    if response.status_code < 200 or response.status_code >= 300:
        raise FetchError(f"Fetch failed ({response.status_code})")
    return response.text


def extract_recipe_from_webpage(
    note: Optional[VaultFile],
    vault: Vault,
    client: LLMClient,
    config: RecipeParsingConfig,
    notify: Notify,
    selection: Optional[str] = None,
) -> WorkflowResult:
    """Fetch the recipe page linked from a note and insert the extracted recipe.

    The recipe goes on its own lines right after the line holding the link.

    Args:
        note: The active note, or None if there is none
        vault: Vault used for reads and writes
        client: LLM client
        config: Configuration carrying the prompt and text model
        notify: Receives exactly one notice per run
        selection: Selected text; a URL in it picks which link to use

    Returns:
        WorkflowResult describing the outcome
    """
    if not is_markdown(note):
        return finish(notify, WorkflowStatus.FAILED, NOTICE_NOT_MARKDOWN, note)

    try:
        content = vault.read(note)
        preferred_url = extract_url_from_selection((selection or "").strip())
        url_match = find_http_link(content, preferred_url)
        if url_match is None:
            return finish(notify, WorkflowStatus.FAILED, NOTICE_NO_LINK, note)

        prompt = config.web_recipe_prompt.strip()
        if not prompt:
            return finish(notify, WorkflowStatus.FAILED, NOTICE_EMPTY_PROMPT, note)

        logger.info(f"Fetching recipe page {url_match.url}")
        try:
            page = fetch_webpage(url_match.url, config.timeout_seconds)
        except (FetchError, requests.RequestException) as e:
            return finish(notify, WorkflowStatus.FAILED, f"Failed to fetch webpage: {error_message(e)}", note)

        if not page.strip():
            return finish(notify, WorkflowStatus.FAILED, NOTICE_EMPTY_PAGE, note)

        html, truncated = truncate_for_llm(sanitize_html_for_llm(page))
        if truncated:
            logger.debug(f"Truncated HTML from {url_match.url}")

        try:
            messages = build_web_recipe_messages(prompt, url_match.url, html, truncated)
            recipe = client.call_chat(messages, config.text_model).strip()
        except Exception as e:
            return finish(notify, WorkflowStatus.FAILED, f"LLM request failed: {error_message(e)}", note)

        if not recipe:
            return finish(notify, WorkflowStatus.FAILED, NOTICE_EMPTY_RECIPE, note)

        insert_index = find_line_end_index(content, url_match.end)
        vault.write(note, insert_at(content, insert_index, f"\n{recipe}\n"))
    except Exception as e:
        logger.error(f"Web recipe extraction failed for {note.path}: {e}")
        return finish(notify, WorkflowStatus.FAILED, error_message(e), note)

    return finish(notify, WorkflowStatus.UPDATED, NOTICE_DONE, note)
