"""Tests for configuration loading and the command-line entry point."""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import io
import json

import pytest

from luhn_filter import ConfigError, FilterConfig, LuhnRedactor, create_filter, load_config, load_from_yaml
from luhn_filter.cli import main


# ── FilterConfig ─────────────────────────────────────────────────────

def test_filter_config_defaults():
    cfg = FilterConfig()
    assert cfg.capacity == 32 * 1024
    assert (cfg.min_digits, cfg.max_digits) == (14, 16)
    assert cfg.mask == "X"
    assert cfg.mask_byte == ord("X")


@pytest.mark.parametrize("kwargs", [
    {"capacity": 0},
    {"min_digits": 0},
    {"min_digits": 16, "max_digits": 14},
    {"mask": ""},
    {"mask": "XX"},
    {"mask": "é"},
    {"mask": "7"},
    {"mask": " "},
    {"mask": "-"},
])
def test_filter_config_rejects(kwargs):
    with pytest.raises(ConfigError):
        FilterConfig(**kwargs)


def test_config_error_is_value_error():
    with pytest.raises(ValueError):
        FilterConfig(capacity=-1)


# ── Dict / YAML loading ──────────────────────────────────────────────

def test_load_config_defaults():
    cfg = load_config({})
    assert cfg == {
        "enabled": True,
        "capacity": 32 * 1024,
        "min_digits": 14,
        "max_digits": 16,
        "mask": "X",
        "log_level": "WARNING",
    }


def test_load_config_nested():
    cfg = load_config({"luhn_filter": {"capacity": 1024, "mask": "#", "log_level": "debug"}})
    assert cfg["capacity"] == 1024
    assert cfg["mask"] == "#"
    assert cfg["log_level"] == "DEBUG"


def test_load_config_bad_value():
    with pytest.raises(ConfigError):
        load_config({"capacity": "lots"})


def test_load_config_not_a_mapping():
    with pytest.raises(ConfigError):
        load_config(["capacity", 1])


def test_load_from_yaml(tmp_path):
    path = tmp_path / "filter.yaml"
    path.write_text("luhn_filter:\n  capacity: 4096\n  min_digits: 13\n")
    cfg = load_from_yaml(path)
    assert cfg["capacity"] == 4096
    assert cfg["min_digits"] == 13
    assert cfg["max_digits"] == 16


def test_load_from_empty_yaml(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_from_yaml(path) == load_config({})


def test_load_from_broken_yaml(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("luhn_filter: [unclosed\n")
    with pytest.raises(ConfigError):
        load_from_yaml(path)


def test_create_filter():
    r = create_filter({"luhn_filter": {"mask": "*"}})
    assert isinstance(r, LuhnRedactor)
    assert r.redact(b"56613959932537") == b"*" * 14


def test_create_filter_disabled_passes_through():
    r = create_filter({"enabled": False})
    assert r.redact(b"56613959932537") == b"56613959932537"
    assert r.redact_text("4111 1111 1111 1111") == "4111 1111 1111 1111"
    sink = io.BytesIO()
    stats = r.redact_stream(io.BytesIO(b"56613959932537"), sink)
    assert sink.getvalue() == b"56613959932537"
    assert stats.digits_masked == 0


# ── CLI ──────────────────────────────────────────────────────────────

def _run(monkeypatch, data: bytes, argv: list[str]) -> tuple[int, bytes]:
    stdin = io.TextIOWrapper(io.BytesIO(data))
    stdout = io.TextIOWrapper(io.BytesIO())
    monkeypatch.setattr(sys, "stdin", stdin)
    monkeypatch.setattr(sys, "stdout", stdout)
    code = main(argv)
    return code, stdout.buffer.getvalue()


def test_cli_filters_stdin(monkeypatch):
    code, out = _run(monkeypatch, b"pay 4111 1111 1111 1111 now\n", [])
    assert code == 0
    assert out == b"pay XXXX XXXX XXXX XXXX now\n"


def test_cli_options(monkeypatch):
    code, out = _run(monkeypatch, b"4222222222222\n", ["--min-digits", "13", "--mask", "#"])
    assert code == 0
    assert out == b"#############\n"


def test_cli_stats(monkeypatch, capsys):
    code, _ = _run(monkeypatch, b"ref 56613959932537\n", ["--stats"])
    assert code == 0
    stats = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
    assert stats["digits_masked"] == 14
    assert stats["bytes_read"] == stats["bytes_written"] == 19


def test_cli_capacity_exceeded(monkeypatch, capsys):
    code, _ = _run(monkeypatch, b"1" * 64, ["--capacity", "16"])
    assert code == 1
    assert "--capacity" in capsys.readouterr().err


def test_cli_capacity_from_environment(monkeypatch, capsys):
    monkeypatch.setenv("LUHN_FILTER_CAPACITY", "16")
    code, _ = _run(monkeypatch, b"1" * 64, [])
    assert code == 1


def test_cli_config_file(monkeypatch, tmp_path):
    path = tmp_path / "filter.yaml"
    path.write_text("mask: '*'\n")
    code, out = _run(monkeypatch, b"56613959932537", ["--config", str(path)])
    assert code == 0
    assert out == b"*" * 14


def test_cli_bad_config(monkeypatch, capsys):
    code, _ = _run(monkeypatch, b"", ["--mask", "5"])
    assert code == 1
    assert "mask" in capsys.readouterr().err


def test_cli_missing_config_file(monkeypatch, tmp_path, capsys):
    code, _ = _run(monkeypatch, b"", ["--config", str(tmp_path / "nope.yaml")])
    assert code == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
