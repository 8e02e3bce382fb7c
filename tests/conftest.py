"""Pytest fixtures for recipe parsing tests."""

import pytest

from recipe_parsing.config import RecipeParsingConfig
from recipe_parsing.llm.client import FakeLLMClient
from recipe_parsing.vault import Vault


@pytest.fixture
def temp_vault(tmp_path):
    """Create a temporary vault for testing.

    Args:
        tmp_path: pytest's built-in temporary directory fixture

    Returns:
        Path to temporary vault root
    """
    vault_root = tmp_path / "test_vault"
    vault_root.mkdir()
    return vault_root


@pytest.fixture
def vault(temp_vault):
    """Vault wrapper around the temporary vault root."""
    return Vault(temp_vault)


@pytest.fixture
def vault_config(temp_vault):
    """Create RecipeParsingConfig pointing to temporary vault."""
    return RecipeParsingConfig(vault_path=temp_vault, llm_endpoint="https://llm.example.com/v1/chat")


@pytest.fixture
def notices():
    """Collected notice messages."""
    return []


@pytest.fixture
def fake_client():
    return FakeLLMClient()


@pytest.fixture
def write_note(temp_vault):
    """Write a file into the vault and return its vault-relative path."""

    def _write(rel_path: str, content: str | bytes) -> str:
        target = temp_vault / rel_path
        target.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            target.write_bytes(content)
        else:
            target.write_text(content, encoding="utf-8")
        return rel_path

    return _write
