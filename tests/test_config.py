from unittest.mock import patch

import pytest

from authgate.core import config
from authgate.core.secrets import parse_secret_reference


def test_supabase_url_required(monkeypatch):
    monkeypatch.delenv("SUPABASE_URL", raising=False)
    with pytest.raises(RuntimeError, match="SUPABASE_URL"):
        config.get_supabase_url()


def test_key_from_environment(monkeypatch):
    monkeypatch.setenv("SUPABASE_KEY", "anon-key")
    assert config.get_supabase_key() == "anon-key"


def test_key_from_secret_manager(monkeypatch):
    monkeypatch.delenv("SUPABASE_KEY", raising=False)
    monkeypatch.setenv("SUPABASE_KEY_NAME", "Secret:supabase-anon:3")
    with patch("authgate.core.config.get_secret_value", return_value="from-secret") as lookup:
        assert config.get_supabase_key() == "from-secret"
    lookup.assert_called_once_with("Secret:supabase-anon:3")


def test_key_missing(monkeypatch):
    monkeypatch.delenv("SUPABASE_KEY", raising=False)
    monkeypatch.delenv("SUPABASE_KEY_NAME", raising=False)
    with pytest.raises(RuntimeError):
        config.get_supabase_key()


@pytest.mark.parametrize(
    "reference, expected",
    [
        ("Secret:supabase-anon:3", ("supabase-anon", "3")),
        ("Secret:supabase-anon", ("supabase-anon", "latest")),
        ("supabase-anon", ("supabase-anon", "latest")),
    ],
)
def test_parse_secret_reference(reference, expected):
    assert parse_secret_reference(reference) == expected


def test_allowed_origins(monkeypatch):
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.example, https://b.example,")
    assert config.get_allowed_origins() == ["https://a.example", "https://b.example"]
