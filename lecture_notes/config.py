from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Groq
    groq_api_key: str = ""
    default_model: str = "llama-3.3-70b-versatile"
    transcription_model: str = "whisper-large-v3"
    upstream_timeout_seconds: float = 60.0

    # Generation
    temperature: float = 0.7
    notes_max_tokens: int = 1000
    quiz_max_tokens: int = 1500
    flashcards_max_tokens: int = 1200
    quiz_questions: int = 5
    flashcard_count: int = 6

    # Uploads
    upload_dir: str = "uploads"
    max_upload_mb: int = 100

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"  # text | json

    # Server
    host: str = "127.0.0.1"
    port: int = 3000
    cors_origins: list[str] = ["*"]

    model_config = {"env_file": ".env", "extra": "ignore"}

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    def require_api_key(self) -> None:
        """Fail fast when no Groq credentials are configured."""
        if not self.groq_api_key.strip():
            raise RuntimeError(
                "GROQ_API_KEY is not set. Export it or add it to .env before starting the server."
            )


settings = Settings()
