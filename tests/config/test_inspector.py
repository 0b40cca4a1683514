from __future__ import annotations

from pathlib import Path

from bloghub.config.inspector import check_config, explain_config


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "config.toml"
    path.write_text(text, encoding="utf-8")
    return path


def test_check_config_ok_without_warnings(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        """
[backend]
url = "https://demo.supabase.co"
anon_key = "env:BLOGHUB_ANON_KEY"
""",
    )

    result, code, config = check_config(path)

    assert code == 0
    assert result["status"] == "ok"
    assert result["warnings"] == []
    assert config is not None and config.backend is not None


def test_check_config_collects_warnings(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        """
[backend]
url = "https://demo.supabase.co"
anon_key = "inline-key"

[storage]
bookmark_limit = 25
""",
    )

    result, code, _ = check_config(path)

    assert code == 0
    assert any("anon_key" in warning for warning in result["warnings"])
    assert any("bookmark_limit" in warning for warning in result["warnings"])


def test_check_config_warns_without_backend(tmp_path: Path) -> None:
    result, code, _ = check_config(_write(tmp_path, 'logging_level = "DEBUG"\n'))

    assert code == 0
    assert result["warnings"] == ["No [backend] block configured; the site cannot load articles"]


def test_check_config_missing_file(tmp_path: Path) -> None:
    result, code, config = check_config(tmp_path / "absent.toml")

    assert code == 2
    assert config is None
    assert result["error"]["type"] == "missing_file"


def test_check_config_invalid_toml(tmp_path: Path) -> None:
    result, code, _ = check_config(_write(tmp_path, "[backend\n"))

    assert code == 1
    assert result["error"]["type"] == "invalid_format"


def test_check_config_validation_error_details(tmp_path: Path) -> None:
    result, code, _ = check_config(
        _write(tmp_path, '[backend]\nurl = "https://demo.supabase.co"\n\n[storage]\nbookmark_limit = 0\n')
    )

    assert code == 3
    assert result["error"]["type"] == "validation_error"
    locations = {detail["loc"] for detail in result["error"]["details"]}
    assert "backend.anon_key" in locations
    assert "storage.bookmark_limit" in locations


def test_explain_config_lists_nested_fields() -> None:
    fields = {field["name"]: field for field in explain_config()}

    assert "logging_level" in fields
    assert fields["backend.url"]["required"] is True
    assert fields["storage.bookmark_limit"]["default"] == 10
    assert fields["web.session_header"]["default"] == "X-Admin-Token"
    assert fields["backend.anon_key"]["description"]
