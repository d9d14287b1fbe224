from __future__ import annotations

import json
import tomllib
from pathlib import Path

import pytest

from ext_patch_bot.errors import PatchError
from ext_patch_bot.patches import (
    LegacyManifestRemoval,
    ManifestCleanup,
    ManifestPort,
    kebab_case,
)


def _write_legacy(repo: Path, **fields: object) -> None:
    (repo / "extension.json").write_text(json.dumps(fields), encoding="utf-8")


def test_port_without_grammar(tmp_path: Path) -> None:
    _write_legacy(tmp_path, name="My Cool Ext", version="1.0.0")

    assert ManifestPort().apply(tmp_path) is True

    text = (tmp_path / "extension.toml").read_text(encoding="utf-8")
    assert 'id = "my-cool-ext"' in text
    assert 'version = "1.0.1"' in text
    assert "schema_version = 1" in text
    assert "grammar" not in text
    assert tomllib.loads(text) == {
        "name": "My Cool Ext",
        "version": "1.0.1",
        "id": "my-cool-ext",
        "schema_version": 1,
    }


def test_port_embeds_companion_grammar_config(tmp_path: Path) -> None:
    _write_legacy(tmp_path, name="My Cool Ext", version="1.0.0")
    grammars = tmp_path / "grammars"
    grammars.mkdir()
    (grammars / "rust.toml").write_text('path = "grammars/rust"\n', encoding="utf-8")

    assert ManifestPort().apply(tmp_path) is True

    text = (tmp_path / "extension.toml").read_text(encoding="utf-8")
    assert 'grammar = "rust"' in text
    assert '[grammars.rust]\npath = "grammars/rust"\n' in text
    parsed = tomllib.loads(text)
    assert parsed["grammar"] == "rust"
    assert parsed["grammars"] == {"rust": {"path": "grammars/rust"}}


def test_port_does_not_redeclare_grammar_from_legacy_manifest(tmp_path: Path) -> None:
    declared = {"repository": "https://github.com/acme/tree-sitter-rust", "commit": "abc"}
    _write_legacy(tmp_path, name="Rust", version="1.0.0", grammars={"rust": declared})
    grammars = tmp_path / "grammars"
    grammars.mkdir()
    (grammars / "rust.toml").write_text('path = "grammars/rust"\n', encoding="utf-8")

    assert ManifestPort().apply(tmp_path) is True

    text = (tmp_path / "extension.toml").read_text(encoding="utf-8")
    assert text.count("[grammars.rust]") == 1
    parsed = tomllib.loads(text)
    assert parsed["grammar"] == "rust"
    assert parsed["grammars"] == {"rust": declared}


def test_port_refuses_to_write_invalid_toml(tmp_path: Path) -> None:
    _write_legacy(tmp_path, name="Rust", version="1.0.0")
    grammars = tmp_path / "grammars"
    grammars.mkdir()
    (grammars / "rust.toml").write_text("path = = broken\n", encoding="utf-8")

    with pytest.raises(PatchError):
        ManifestPort().apply(tmp_path)
    assert not (tmp_path / "extension.toml").exists()


def test_port_keeps_extra_legacy_fields(tmp_path: Path) -> None:
    _write_legacy(
        tmp_path,
        name="Themes",
        version="0.2.9",
        authors=["someone <a@b.c>"],
        themes={"Dark": "themes/dark.json"},
    )

    ManifestPort().apply(tmp_path)

    parsed = tomllib.loads((tmp_path / "extension.toml").read_text(encoding="utf-8"))
    assert parsed["version"] == "0.2.10"
    assert parsed["authors"] == ["someone <a@b.c>"]
    assert parsed["themes"] == {"Dark": "themes/dark.json"}


def test_existing_toml_is_left_alone(tmp_path: Path) -> None:
    (tmp_path / "extension.json").write_text("not even json", encoding="utf-8")
    existing = 'id = "x"\nversion = "9.9.9"\n'
    (tmp_path / "extension.toml").write_text(existing, encoding="utf-8")

    assert ManifestPort().apply(tmp_path) is False
    assert (tmp_path / "extension.toml").read_text(encoding="utf-8") == existing


@pytest.mark.parametrize(
    "name, expected",
    [
        ("My Cool Ext", "my-cool-ext"),
        ("MyCoolExt", "my-cool-ext"),
        ("  Nord_Theme (dark) ", "nord-theme-dark"),
        ("vue", "vue"),
        ("Catppuccin2", "catppuccin2"),
    ],
)
def test_kebab_case(name: str, expected: str) -> None:
    assert kebab_case(name) == expected


def test_legacy_manifest_removed_once_toml_exists(tmp_path: Path) -> None:
    _write_legacy(tmp_path, name="X", version="1.0.0")
    (tmp_path / "extension.toml").write_text('id = "x"\n', encoding="utf-8")

    assert LegacyManifestRemoval().apply(tmp_path) is True
    assert not (tmp_path / "extension.json").exists()
    assert LegacyManifestRemoval().apply(tmp_path) is False


def test_legacy_manifest_kept_without_toml(tmp_path: Path) -> None:
    _write_legacy(tmp_path, name="X", version="1.0.0")

    assert LegacyManifestRemoval().apply(tmp_path) is False
    assert (tmp_path / "extension.json").exists()


def test_cleanup_drops_port_leftovers(tmp_path: Path) -> None:
    (tmp_path / "extension.toml").write_text(
        'id = "x"\n'
        'version = "1.0.1"\n'
        'grammar = "x"\n'
        "\n"
        "[grammars]\n"
        "\n"
        "[grammars.x]\n"
        'repository = "https://github.com/acme/tree-sitter-x"\n'
        "\n"
        "[languages]\n"
        'x = "languages/x"\n',
        encoding="utf-8",
    )
    grammars = tmp_path / "grammars"
    grammars.mkdir()
    (grammars / "x.toml").write_text('path = "grammars/x"\n', encoding="utf-8")

    assert ManifestCleanup().apply(tmp_path) is True

    parsed = tomllib.loads((tmp_path / "extension.toml").read_text(encoding="utf-8"))
    assert parsed == {
        "id": "x",
        "version": "1.0.1",
        "grammars": {"x": {"repository": "https://github.com/acme/tree-sitter-x"}},
    }
    assert not grammars.exists()


def test_cleanup_leaves_a_clean_manifest_untouched(tmp_path: Path) -> None:
    clean = '# hand written\nid = "x"\nversion = "1.0.1"\n'
    (tmp_path / "extension.toml").write_text(clean, encoding="utf-8")

    assert ManifestCleanup().apply(tmp_path) is False
    assert (tmp_path / "extension.toml").read_text(encoding="utf-8") == clean


def test_cleanup_without_toml_is_a_no_op(tmp_path: Path) -> None:
    _write_legacy(tmp_path, name="X", version="1.0.0")

    assert ManifestCleanup().apply(tmp_path) is False
