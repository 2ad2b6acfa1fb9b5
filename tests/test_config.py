import pytest

from lecture_notes.config import Settings


def test_defaults_match_upload_limits():
    s = Settings(groq_api_key="gsk_x", _env_file=None)
    assert s.max_upload_mb == 100
    assert s.max_upload_bytes == 100 * 1024 * 1024
    assert s.transcription_model == "whisper-large-v3"


@pytest.mark.parametrize("key", ["", "   "])
def test_missing_api_key_fails_fast(key):
    with pytest.raises(RuntimeError, match="GROQ_API_KEY"):
        Settings(groq_api_key=key, _env_file=None).require_api_key()


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("GROQ_API_KEY", "gsk_env")
    monkeypatch.setenv("MAX_UPLOAD_MB", "5")
    s = Settings(_env_file=None)
    s.require_api_key()
    assert s.max_upload_bytes == 5 * 1024 * 1024
