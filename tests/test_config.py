"""Tests for docpublish.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from docpublish.config import (
    DEFAULT_TEMPLATE_DIR,
    ConfigError,
    StaticFilesConfig,
    TemplateConfig,
    load_config,
    parse_template_config,
)


def test_missing_file_gives_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path / "conf.yml")

    assert config.root == tmp_path.resolve()
    assert config.template == TemplateConfig()
    assert config.options.destination == "./out/"
    assert config.options.template == DEFAULT_TEMPLATE_DIR
    assert config.options.include_private is False


def test_load_config_reads_template_and_options(tmp_path: Path) -> None:
    path = tmp_path / "conf.json"
    path.write_text(
        """
{
  "opts": {
    "destination": "docs",
    "encoding": "latin-1",
    "template": "theme",
    "readme": "<p>hi</p>",
    "mainpagetitle": "Demo",
    "access": ["public", "private"]
  },
  "templates": {
    "default": {
      "layoutFile": "layouts/site.html",
      "outputSourceFiles": false,
      "useLongnameInNav": "false",
      "hideReturnValues": true,
      "staticFiles": {
        "include": ["static"],
        "exclude": ["static/private"],
        "includePattern": "\\\\.css$"
      }
    }
  }
}
""",
        encoding="utf-8",
    )

    config = load_config(path)

    assert config.options.destination == "docs"
    assert config.options.encoding == "latin-1"
    assert config.options.template == tmp_path.resolve() / "theme"
    assert config.options.readme == "<p>hi</p>"
    assert config.options.mainpagetitle == "Demo"
    assert config.options.include_private is True
    assert config.template == TemplateConfig(
        layout_file="layouts/site.html",
        output_source_files=False,
        use_longname_in_nav=False,
        hide_return_values=True,
        static_files=StaticFilesConfig(
            include=["static"], exclude=["static/private"], include_pattern=r"\.css$"
        ),
    )


def test_snake_case_keys_are_accepted() -> None:
    config = parse_template_config(
        {"output_source_files": False, "static_files": {"include": "assets", "exclude_pattern": "~$"}}
    )

    assert config.output_source_files is False
    assert config.static_files == StaticFilesConfig(include=["assets"], exclude_pattern="~$")


def test_access_all_includes_private(tmp_path: Path) -> None:
    path = tmp_path / "conf.yml"
    path.write_text("opts:\n  access: all\n", encoding="utf-8")

    assert load_config(path).options.include_private is True


def test_empty_file_gives_defaults(tmp_path: Path) -> None:
    path = tmp_path / "conf.yml"
    path.write_text("\n", encoding="utf-8")

    assert load_config(path).template == TemplateConfig()


def test_non_mapping_root_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "conf.yml"
    path.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(path)


def test_invalid_yaml_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "conf.yml"
    path.write_text("templates: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(path)


def test_static_files_must_be_a_mapping() -> None:
    with pytest.raises(ConfigError):
        parse_template_config({"staticFiles": ["static"]})


def test_logging_options_are_read(tmp_path: Path) -> None:
    path = tmp_path / "conf.yml"
    path.write_text("opts:\n  verbose: true\n  logFile: logs/publish.log\n", encoding="utf-8")

    options = load_config(path).options

    assert options.verbose is True
    assert options.log_file == tmp_path.resolve() / "logs" / "publish.log"
