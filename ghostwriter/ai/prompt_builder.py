"""Prompt construction for inline code completion."""
from __future__ import annotations

from dataclasses import dataclass

from ghostwriter.ai.context_extractor import CompletionContext

SYSTEM_PROMPT = (
    "You are a coding assistant. Your task is to provide code completions that continue the given "
    "snippet without repeating the existing code that comes either before or after the insertion "
    "point. Do not generate anything other than the code, do not use markdown, just plaintext code. "
    "Do not write more than needed, less is more unless told otherwise by comment."
)


@dataclass(frozen=True)
class CompletionPrompt:
    """System and user instructions for one completion request."""

    system: str
    user: str

    def as_prompt(self) -> str:
        """Single prompt string for completion-style backends."""

        return f"{self.system}\n{self.user}"

    def as_messages(self) -> list[dict[str, str]]:
        """System/user message pair for chat-style backends."""

        return [
            {"role": "system", "content": self.system},
            {"role": "user", "content": self.user},
        ]


class PromptBuilder:
    """Wraps the code around the cursor in completion instructions."""

    def __init__(self, system_prompt: str = SYSTEM_PROMPT) -> None:
        self.system_prompt = system_prompt

    def build(self, context: CompletionContext, filetype: str) -> CompletionPrompt:
        return CompletionPrompt(system=self.system_prompt, user=self.user_prompt(context, filetype))

    def user_prompt(self, context: CompletionContext, filetype: str) -> str:
        label = filetype or "code"
        return (
            f"Continue this {label} snippet starting from where the previous code ends. "
            "Do not repeat any of the existing code that comes before or after. "
            "Only provide new code that fits logically between the previous and following code:\n"
            f"Previous code:\n```\n{context.preceding}\n```\n"
            f"Following code:\n```\n{context.following}\n```"
        )
