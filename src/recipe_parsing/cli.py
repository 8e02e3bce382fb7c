"""Typer-based CLI for recipe parsing."""

import logging
from typing import Callable, Optional

import typer
from rich.console import Console
from rich.markup import escape

from .config import RecipeParsingConfig
from .llm import get_llm_client
from .models.workflow import WorkflowResult, WorkflowStatus
from .vault import Vault
from .workflows import (
    build_shopping_list,
    extract_recipe_from_webpage,
    extract_recipe_information,
)

app = typer.Typer(
    name="recipe-parsing",
    help="Extract recipes from note images and build shopping lists from meal plans",
    add_completion=False,
)

console = Console()

VAULT_HELP = "Path to vault directory (default: RECIPE_PARSING_VAULT env or current directory)"
ENDPOINT_HELP = "Chat completions URL (overrides config and RECIPE_PARSING_ENDPOINT)"
IMAGE_MODEL_HELP = "Model for image extraction (overrides config and RECIPE_PARSING_IMAGE_MODEL)"
TEXT_MODEL_HELP = "Model for text requests (overrides config and RECIPE_PARSING_TEXT_MODEL)"


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load_config(
    vault_path: Optional[str],
    endpoint: Optional[str] = None,
    image_model: Optional[str] = None,
    text_model: Optional[str] = None,
) -> RecipeParsingConfig:
    """Load config from file and environment, then apply CLI flag overrides."""
    try:
        config = RecipeParsingConfig.from_env(cli_vault_path=vault_path)
    except FileNotFoundError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    if endpoint:
        config.llm_endpoint = endpoint
    if image_model:
        config.image_model = image_model
    if text_model:
        config.text_model = text_model
    return config


def _print_notice(message: str) -> None:
    console.print(message, markup=False)


def _run(
    workflow: Callable[..., WorkflowResult],
    note_path: str,
    vault_path: Optional[str],
    debug: bool,
    overrides: dict,
    **kwargs,
) -> None:
    """Run a workflow against one note and map the result to an exit code."""
    _configure_logging(debug)
    config = _load_config(vault_path, **overrides)
    vault = Vault(config.vault_path)
    note = vault.get_file(note_path)
    if note is None:
        console.print(f"[red]Error: Note not found in vault: {note_path}[/red]")
        raise typer.Exit(code=1)

    client = get_llm_client(config)
    result = workflow(note, vault, client, config, _print_notice, **kwargs)

    if result.status == WorkflowStatus.FAILED:
        raise typer.Exit(code=1)
    if result.status == WorkflowStatus.UPDATED:
        console.print(f"[green]+[/green] Updated {escape(result.note_path or '')}")


@app.command("parse-images")
def parse_images(
    note: str = typer.Argument(..., help="Vault-relative path of the note to annotate"),
    vault_path: str = typer.Option(None, "--vault", "-v", help=VAULT_HELP),
    endpoint: str = typer.Option(None, "--endpoint", help=ENDPOINT_HELP),
    image_model: str = typer.Option(None, "--image-model", help=IMAGE_MODEL_HELP),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    """Extract recipe information from the images embedded in a note.

    The LLM reply is inserted once, above the first image.
    """
    overrides = {"endpoint": endpoint, "image_model": image_model}
    _run(extract_recipe_information, note, vault_path, debug, overrides)


@app.command("shopping-list")
def shopping_list(
    note: str = typer.Argument(..., help="Vault-relative path of the meal plan note"),
    vault_path: str = typer.Option(None, "--vault", "-v", help=VAULT_HELP),
    endpoint: str = typer.Option(None, "--endpoint", help=ENDPOINT_HELP),
    text_model: str = typer.Option(None, "--text-model", help=TEXT_MODEL_HELP),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    """Rebuild the '# Need to buy' section of a meal plan from its linked recipes."""
    overrides = {"endpoint": endpoint, "text_model": text_model}
    _run(build_shopping_list, note, vault_path, debug, overrides)


@app.command("web-recipe")
def web_recipe(
    note: str = typer.Argument(..., help="Vault-relative path of the note holding the recipe link"),
    selection: str = typer.Option(
        "",
        "--selection",
        "-s",
        help="Text containing the URL to use when the note has several links",
    ),
    vault_path: str = typer.Option(None, "--vault", "-v", help=VAULT_HELP),
    endpoint: str = typer.Option(None, "--endpoint", help=ENDPOINT_HELP),
    text_model: str = typer.Option(None, "--text-model", help=TEXT_MODEL_HELP),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    """Extract a recipe from a linked web page and insert it below the link."""
    overrides = {"endpoint": endpoint, "text_model": text_model}
    _run(extract_recipe_from_webpage, note, vault_path, debug, overrides, selection=selection)


@app.command("init-config")
def init_config(
    vault_path: str = typer.Option(None, "--vault", "-v", help=VAULT_HELP),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite an existing config file",
    ),
):
    """Write a config file with the current settings into the vault.

    The API key is never written; set RECIPE_PARSING_API_KEY instead.
    """
    config = _load_config(vault_path)
    config_file = config.config_file

    if config_file.exists() and not force:
        console.print(f"[dim]Config already exists: {config_file}[/dim]")
        return

    config_file.parent.mkdir(parents=True, exist_ok=True)
    config_file.write_text(config.to_toml_str(), encoding="utf-8")
    console.print(f"[green]+[/green] Created config: {config_file}")


@app.command()
def version():
    """Show recipe-parsing version."""
    from . import __version__
    console.print(f"recipe-parsing v{__version__}")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
