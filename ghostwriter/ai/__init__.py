"""AI package exports."""

from .ai_client import ChatBackend, CompletionClient, CompletionError, GenerateBackend, ResponseParseError, TransportError
from .context_extractor import CompletionContext, extract_context
from .prompt_builder import CompletionPrompt, PromptBuilder
from .session import SessionState, SuggestionPhase

__all__ = [
    "ChatBackend",
    "CompletionClient",
    "CompletionContext",
    "CompletionError",
    "CompletionPrompt",
    "GenerateBackend",
    "PromptBuilder",
    "ResponseParseError",
    "SessionState",
    "SuggestionPhase",
    "TransportError",
    "extract_context",
]
