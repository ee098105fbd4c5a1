from .openrouter import get_openrouter_chat_model, is_openrouter_configured

__all__ = [
    "get_openrouter_chat_model",
    "is_openrouter_configured",
]
