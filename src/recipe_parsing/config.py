"""Configuration management for recipe parsing."""

import json
import os
import tomllib
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

CONFIG_DIR_NAME = ".recipe-parsing"
CONFIG_FILE_NAME = "config.toml"

DEFAULT_ENDPOINT = "https://api.openai.com/v1/chat/completions"
DEFAULT_MODEL = "gpt-5.2"

DEFAULT_BOOK_EXTRACTION_PROMPT = (
    "Extract all the ingredients from these recipe images. Return markdown content "
    "(do not surround it with backticks, only return the raw text), in the format:\n"
    "# Ingredients\n"
    "Serves x (if given)\n"
    "- ingredient\n"
    "- ingredient\n"
    "- ingredient"
)

DEFAULT_SHOPPING_LIST_PROMPT = (
    "You build a consolidated shopping list from recipes. Combine duplicate "
    "ingredients and add up quantities where possible. Keep the structure of the "
    "template section you are given, fill it in with checkbox items, and return only "
    "the updated section as raw markdown starting with the '# Need to buy' heading."
)

DEFAULT_WEB_RECIPE_PROMPT = (
    "Extract the recipe from this web page HTML. Return raw markdown (no backticks) "
    "with a '# Ingredients' section listing each ingredient as a bullet and a "
    "'# Method' section with numbered steps. Leave out ads, stories and comments."
)


def _load_config_data(vault_path: Path) -> Optional[dict]:
    """Load config data from <vault>/.recipe-parsing/config.toml if it exists."""
    config_file = vault_path / CONFIG_DIR_NAME / CONFIG_FILE_NAME

    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        # If config file is malformed, ignore it
        return None


def _get_str(data: dict, key: str) -> Optional[str]:
    value = data.get(key)
    return value if isinstance(value, str) else None


def _toml_str(value: str) -> str:
    # JSON string escapes are a subset of TOML basic string escapes
    return json.dumps(value, ensure_ascii=False)


def resolve_vault_path(cli_vault_path: Optional[str] = None) -> Path:
    """Resolve vault root with the following precedence:

    1. CLI --vault option (if provided)
    2. RECIPE_PARSING_VAULT environment variable
    3. Current working directory

    Raises:
        FileNotFoundError: If the resolved path is not a directory
    """
    if cli_vault_path:
        vault_path = Path(cli_vault_path).resolve()
    elif os.environ.get("RECIPE_PARSING_VAULT"):
        vault_path = Path(os.environ["RECIPE_PARSING_VAULT"]).resolve()
    else:
        vault_path = Path.cwd()

    if not vault_path.is_dir():
        raise FileNotFoundError(f"Vault path does not exist: {vault_path}")
    return vault_path


class RecipeParsingConfig(BaseModel):
    """Configuration for recipe parsing workflows.

    Passed explicitly into every workflow run.
    """

    vault_path: Path = Field(default_factory=Path.cwd)
    llm_endpoint: str = Field(default=DEFAULT_ENDPOINT)
    api_key: str = Field(default="")
    image_model: str = Field(default=DEFAULT_MODEL)
    text_model: str = Field(default=DEFAULT_MODEL)
    temperature: float = Field(default=0.2)
    timeout_seconds: int = Field(default=60)
    book_extraction_prompt: str = Field(default=DEFAULT_BOOK_EXTRACTION_PROMPT)
    shopping_list_prompt: str = Field(default=DEFAULT_SHOPPING_LIST_PROMPT)
    web_recipe_prompt: str = Field(default=DEFAULT_WEB_RECIPE_PROMPT)

    model_config = {"frozen": False}

    @property
    def config_file(self) -> Path:
        return self.vault_path / CONFIG_DIR_NAME / CONFIG_FILE_NAME

    @classmethod
    def from_data(cls, vault_path: Path, data: Optional[dict]) -> "RecipeParsingConfig":
        """Merge saved settings over defaults.

        A legacy single ``model`` key fills both image and text model, but
        only when neither of them was saved.
        """
        data = data or {}
        values: dict = {"vault_path": vault_path}
        for key in (
            "llm_endpoint",
            "api_key",
            "image_model",
            "text_model",
            "book_extraction_prompt",
            "shopping_list_prompt",
            "web_recipe_prompt",
        ):
            value = _get_str(data, key)
            if value is not None:
                values[key] = value

        if isinstance(data.get("temperature"), (int, float)):
            values["temperature"] = float(data["temperature"])
        if isinstance(data.get("timeout_seconds"), int):
            values["timeout_seconds"] = data["timeout_seconds"]

        legacy_model = (_get_str(data, "model") or "").strip()
        if legacy_model and "image_model" not in values and "text_model" not in values:
            values["image_model"] = legacy_model
            values["text_model"] = legacy_model

        return cls(**values)

    @classmethod
    def from_env(cls, cli_vault_path: Optional[str] = None) -> "RecipeParsingConfig":
        """Load configuration from the vault config file and environment variables.

        Environment variables override the config file.

        Args:
            cli_vault_path: Vault path from CLI --vault option (highest precedence)
        """
        vault_path = resolve_vault_path(cli_vault_path)
        config = cls.from_data(vault_path, _load_config_data(vault_path))

        endpoint = os.environ.get("RECIPE_PARSING_ENDPOINT")
        if endpoint:
            config.llm_endpoint = endpoint
        api_key = os.environ.get("RECIPE_PARSING_API_KEY") or os.environ.get("OPENAI_API_KEY")
        if api_key:
            config.api_key = api_key
        image_model = os.environ.get("RECIPE_PARSING_IMAGE_MODEL")
        if image_model:
            config.image_model = image_model
        text_model = os.environ.get("RECIPE_PARSING_TEXT_MODEL")
        if text_model:
            config.text_model = text_model

        return config

    def to_toml_str(self) -> str:
        """Generate TOML configuration string.

        The API key is left out; set RECIPE_PARSING_API_KEY instead.
        """
        return f"""# Recipe parsing configuration

llm_endpoint = {_toml_str(self.llm_endpoint)}
image_model = {_toml_str(self.image_model)}
text_model = {_toml_str(self.text_model)}
temperature = {self.temperature}
timeout_seconds = {self.timeout_seconds}

book_extraction_prompt = {_toml_str(self.book_extraction_prompt)}
shopping_list_prompt = {_toml_str(self.shopping_list_prompt)}
web_recipe_prompt = {_toml_str(self.web_recipe_prompt)}
"""
