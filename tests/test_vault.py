"""Tests for filesystem vault access and link lookup."""

import pytest

from recipe_parsing.vault import Vault, VaultFile


def test_vault_file_properties():
    f = VaultFile(path="assets/Photo.JPG")

    assert f.name == "Photo.JPG"
    assert f.basename == "Photo"
    assert f.extension == "jpg"
    assert f.parent == "assets"
    assert VaultFile(path="plan.md").parent == ""


def test_read_write_roundtrip(vault, write_note):
    write_note("plan.md", "# Plan\n")
    note = vault.get_file("plan.md")

    vault.write(note, "# Plan\nUpdated\n")

    assert vault.read(note) == "# Plan\nUpdated\n"


def test_read_binary(vault, write_note):
    write_note("img/a.png", b"\x89PNG")

    assert vault.read_binary(VaultFile(path="img/a.png")) == b"\x89PNG"


def test_read_missing_file_raises(vault):
    with pytest.raises(FileNotFoundError):
        vault.read(VaultFile(path="nope.md"))


def test_get_file_rejects_escape(vault):
    assert vault.get_file("../outside.md") is None
    assert vault.get_file("") is None


def test_iter_files_skips_dot_directories(vault, write_note):
    write_note("a.md", "a")
    write_note(".obsidian/app.json", "{}")
    write_note("sub/b.md", "b")

    assert [f.path for f in vault.iter_files()] == ["a.md", "sub/b.md"]


def test_resolve_adds_markdown_extension(vault, write_note):
    write_note("recipes/alpha.md", "# Alpha")

    assert vault.resolve_link_path("alpha", "plan.md") == VaultFile(path="recipes/alpha.md")


def test_resolve_exact_path_wins(vault, write_note):
    write_note("alpha.md", "root")
    write_note("recipes/alpha.md", "nested")

    assert vault.resolve_link_path("recipes/alpha", "plan.md").path == "recipes/alpha.md"
    assert vault.resolve_link_path("alpha", "plan.md").path == "alpha.md"


def test_resolve_prefers_source_folder(vault, write_note):
    write_note("a/photo.png", b"1")
    write_note("meals/photo.png", b"2")

    assert vault.resolve_link_path("photo.png", "meals/week.md").path == "meals/photo.png"


def test_resolve_prefers_shortest_path(vault, write_note):
    write_note("x/y/photo.png", b"1")
    write_note("z/photo.png", b"2")

    assert vault.resolve_link_path("photo.png", "plan.md").path == "z/photo.png"


def test_resolve_relative_link(vault, write_note):
    write_note("meals/img/photo.png", b"1")

    assert vault.resolve_link_path("./img/photo.png", "meals/week.md").path == "meals/img/photo.png"


def test_resolve_missing(vault):
    assert vault.resolve_link_path("missing.png", "plan.md") is None
    assert vault.resolve_link_path("  ", "plan.md") is None


@pytest.mark.parametrize("name", ["Mr. Smith pie", "2024.01.05", "v1.2 stew"])
def test_resolve_dotted_note_name(vault, write_note, name):
    """Test that a dot in a note name is not mistaken for an extension."""
    write_note(f"recipes/{name}.md", "# Recipe")

    assert vault.resolve_link_path(name, "plan.md") == VaultFile(path=f"recipes/{name}.md")


def test_resolve_prefers_link_as_written(vault, write_note):
    write_note("scans/v1.2", "raw")
    write_note("scans/v1.2.md", "# Note")

    assert vault.resolve_link_path("v1.2", "plan.md").path == "scans/v1.2"
