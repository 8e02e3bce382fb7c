"""Tests for the recipe-parsing CLI."""

from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from recipe_parsing import __version__
from recipe_parsing.cli import app
from recipe_parsing.llm.client import FakeLLMClient

runner = CliRunner()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "RECIPE_PARSING_VAULT",
        "RECIPE_PARSING_ENDPOINT",
        "RECIPE_PARSING_API_KEY",
        "OPENAI_API_KEY",
        "RECIPE_PARSING_IMAGE_MODEL",
        "RECIPE_PARSING_TEXT_MODEL",
    ):
        monkeypatch.delenv(name, raising=False)


@patch("recipe_parsing.cli.get_llm_client")
def test_parse_images_updates_note(mock_get_client, temp_vault, write_note):
    write_note("recipes.md", "Intro\n![[a.png]]")
    write_note("a.png", b"png")
    client = FakeLLMClient(responses=["# Ingredients\n- flour"])
    mock_get_client.return_value = client

    result = runner.invoke(app, ["parse-images", "recipes.md", "--vault", str(temp_vault)])

    assert result.exit_code == 0
    assert "Recipe information extracted and inserted detected images." in result.stdout
    assert "Updated recipes.md" in result.stdout
    assert (temp_vault / "recipes.md").read_text() == "Intro\n# Ingredients\n- flour\n\n![[a.png]]"
    assert len(client.calls) == 1


@patch("recipe_parsing.cli.get_llm_client")
def test_parse_images_without_images_exits_nonzero(mock_get_client, temp_vault, write_note):
    write_note("recipes.md", "Just text")
    mock_get_client.return_value = FakeLLMClient()

    result = runner.invoke(app, ["parse-images", "recipes.md", "-v", str(temp_vault)])

    assert result.exit_code == 1
    assert "No image attachments found in this file." in result.stdout


@patch("recipe_parsing.cli.get_llm_client")
def test_notice_brackets_are_printed_verbatim(mock_get_client, temp_vault, write_note):
    """Test that link syntax in notices is not eaten as console markup."""
    write_note("recipes.md", "![[gone.png]]")
    mock_get_client.return_value = FakeLLMClient()

    result = runner.invoke(app, ["parse-images", "recipes.md", "--vault", str(temp_vault)])

    assert result.exit_code == 1
    assert "gone.png: Attachment not found: gone.png" in result.stdout


@patch("recipe_parsing.cli.get_llm_client")
def test_shopping_list_uses_vault_env(mock_get_client, temp_vault, write_note, monkeypatch):
    write_note("plan.md", "[[soup]]\n\n# Need to buy\n- [ ] item\n")
    write_note("recipes/soup.md", "# Soup\n- water")
    mock_get_client.return_value = FakeLLMClient(responses=["# Need to buy\n- [ ] water"])
    monkeypatch.setenv("RECIPE_PARSING_VAULT", str(temp_vault))

    result = runner.invoke(app, ["shopping-list", "plan.md"])

    assert result.exit_code == 0
    assert "Shopping list updated from linked recipes." in result.stdout
    assert (temp_vault / "plan.md").read_text() == "[[soup]]\n\n# Need to buy\n- [ ] water\n"


@patch("recipe_parsing.cli.get_llm_client")
@patch("recipe_parsing.workflows.web_recipe.requests.get")
def test_web_recipe_passes_selection(mock_get, mock_get_client, temp_vault, write_note):
    write_note("dinner.md", "https://example.com/a\nhttps://example.com/b\n")
    mock_get.return_value.status_code = 200
    mock_get.return_value.text = "<p>B</p>"
    mock_get_client.return_value = FakeLLMClient(responses=["Recipe B"])

    result = runner.invoke(
        app,
        ["web-recipe", "dinner.md", "--vault", str(temp_vault), "--selection", "https://example.com/b"],
    )

    assert result.exit_code == 0
    assert mock_get.call_args[0][0] == "https://example.com/b"
    assert (temp_vault / "dinner.md").read_text() == (
        "https://example.com/a\nhttps://example.com/b\n\nRecipe B\n"
    )


def test_missing_note_exits_nonzero(temp_vault):
    result = runner.invoke(app, ["parse-images", "nope.md", "--vault", str(temp_vault)])

    assert result.exit_code == 1
    assert "Note not found in vault" in result.stdout


def test_missing_vault_exits_nonzero(tmp_path):
    result = runner.invoke(app, ["shopping-list", "plan.md", "--vault", str(tmp_path / "missing")])

    assert result.exit_code == 1
    assert "Vault path does not exist" in result.stdout


def test_init_config_writes_file_without_api_key(temp_vault, monkeypatch):
    monkeypatch.setenv("RECIPE_PARSING_API_KEY", "sk-secret")

    result = runner.invoke(app, ["init-config", "--vault", str(temp_vault)])

    config_file = temp_vault / ".recipe-parsing" / "config.toml"
    assert result.exit_code == 0
    assert "Created config" in result.stdout
    content = config_file.read_text()
    assert 'image_model = "gpt-5.2"' in content
    assert "sk-secret" not in content
    assert "api_key" not in content


def test_init_config_keeps_existing_file(temp_vault):
    config_file = temp_vault / ".recipe-parsing" / "config.toml"
    config_file.parent.mkdir()
    config_file.write_text('text_model = "custom"\n')

    result = runner.invoke(app, ["init-config", "--vault", str(temp_vault)])

    assert result.exit_code == 0
    assert "Config already exists" in result.stdout
    assert config_file.read_text() == 'text_model = "custom"\n'


def test_init_config_force_rewrites_with_loaded_settings(temp_vault):
    config_file = temp_vault / ".recipe-parsing" / "config.toml"
    config_file.parent.mkdir()
    config_file.write_text('model = "legacy-model"\n')

    result = runner.invoke(app, ["init-config", "--vault", str(temp_vault), "--force"])

    assert result.exit_code == 0
    content = config_file.read_text()
    assert 'image_model = "legacy-model"' in content
    assert 'text_model = "legacy-model"' in content


def test_version():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert f"recipe-parsing v{__version__}" in result.stdout


@patch("recipe_parsing.cli.get_llm_client")
def test_cli_flags_override_env_and_config(mock_get_client, temp_vault, write_note, monkeypatch):
    """Test that --endpoint and --image-model win over env and the config file."""
    config_dir = temp_vault / ".recipe-parsing"
    config_dir.mkdir()
    (config_dir / "config.toml").write_text('image_model = "toml-model"\n')
    monkeypatch.setenv("RECIPE_PARSING_IMAGE_MODEL", "env-model")
    monkeypatch.setenv("RECIPE_PARSING_ENDPOINT", "https://env.example.com")
    write_note("recipes.md", "![[a.png]]")
    write_note("a.png", b"png")
    client = FakeLLMClient(responses=["Info"])
    mock_get_client.return_value = client

    result = runner.invoke(
        app,
        [
            "parse-images",
            "recipes.md",
            "--vault",
            str(temp_vault),
            "--endpoint",
            "https://flag.example.com",
            "--image-model",
            "flag-model",
        ],
    )

    assert result.exit_code == 0
    config = mock_get_client.call_args[0][0]
    assert config.llm_endpoint == "https://flag.example.com"
    assert client.calls[0][1] == "flag-model"


@patch("recipe_parsing.cli.get_llm_client")
def test_text_model_flag_for_shopping_list(mock_get_client, temp_vault, write_note, monkeypatch):
    monkeypatch.setenv("RECIPE_PARSING_TEXT_MODEL", "env-text")
    write_note("plan.md", "[[soup]]\n\n# Need to buy\n")
    write_note("soup.md", "# Soup")
    client = FakeLLMClient(responses=["# Need to buy\n- [ ] water"])
    mock_get_client.return_value = client

    result = runner.invoke(
        app, ["shopping-list", "plan.md", "--vault", str(temp_vault), "--text-model", "flag-text"]
    )

    assert result.exit_code == 0
    assert client.calls[0][1] == "flag-text"


@patch("recipe_parsing.cli.get_llm_client")
def test_without_flags_env_model_is_used(mock_get_client, temp_vault, write_note, monkeypatch):
    monkeypatch.setenv("RECIPE_PARSING_IMAGE_MODEL", "env-model")
    write_note("recipes.md", "![[a.png]]")
    write_note("a.png", b"png")
    client = FakeLLMClient(responses=["Info"])
    mock_get_client.return_value = client

    runner.invoke(app, ["parse-images", "recipes.md", "--vault", str(temp_vault)])

    assert client.calls[0][1] == "env-model"
