from lecture_notes.clients.groq_client import GroqClient

__all__ = ["GroqClient"]
