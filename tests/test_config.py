"""Tests for postpipe.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from postpipe.config import ConfigError, OutputConfig, PostPipeConfig, load_config
from postpipe.splitter import SEPARATOR


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, PostPipeConfig)
    assert config.root == tmp_path.resolve()
    assert config.include == ["*.md", "*.markdown"]
    assert config.exclude_paths == []
    assert config.separator == SEPARATOR
    assert config.max_workers == 1
    assert config.output == OutputConfig()


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".postpipe.yml"
    config_file.write_text(
        """
include: ["*.md"]
exclude_paths:
  - "drafts/"
  - "*.tmp.md"
separator: "<!-- more articles -->"
max_workers: 4
output:
  manifest: "site/data/manifest.json"
  posts_dir: "site/content/posts"
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.include == ["*.md"]
    assert config.exclude_paths == ["drafts/", "*.tmp.md"]
    assert config.separator == "<!-- more articles -->"
    assert config.max_workers == 4
    assert config.output.manifest == tmp_path.resolve() / "site" / "data" / "manifest.json"
    assert config.output.posts_dir == tmp_path.resolve() / "site" / "content" / "posts"


def test_load_config_accepts_file_beside_config(tmp_path: Path) -> None:
    (tmp_path / ".postpipe.yml").write_text("max_workers: '2'\n", encoding="utf-8")

    config = load_config(tmp_path / "anything.md")

    assert config.max_workers == 2


def test_load_config_empty_file_uses_defaults(tmp_path: Path) -> None:
    (tmp_path / ".postpipe.yml").write_text("\n", encoding="utf-8")

    assert load_config(tmp_path).separator == SEPARATOR


@pytest.mark.parametrize(
    "content",
    [
        "- not\n- a mapping\n",
        "include: [unclosed\n",
        "max_workers: 0\n",
        "separator: '   '\n",
    ],
)
def test_load_config_rejects_invalid_files(tmp_path: Path, content: str) -> None:
    (tmp_path / ".postpipe.yml").write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)
