"""
Command parsing for inbound text messages.

Case-sensitive prefix match against a fixed command set.
Anything that is not a command is a free-text question.
"""

from dataclasses import dataclass, field
from typing import List, Literal

CommandName = Literal["gemini", "play", "imagine", "ask"]

GEMINI = "/gemini"
PLAY = "/play"
IMAGINE = "/imagine"


@dataclass(frozen=True)
class ParsedCommand:
    name: CommandName
    argument: str  # Prompt / query text, stripped
    args: List[str] = field(default_factory=list)  # Whitespace tokens (/play)


def parse_command(text: str) -> ParsedCommand:
    """
    Classify a text message.

    Examples:
        "/gemini what is this" -> gemini, "what is this"
        "/play  never gonna"   -> play, "never gonna", ["never", "gonna"]
        "/imagine a red fox"   -> imagine, "a red fox"
        "hello"                -> ask, "hello"
    """
    if text.startswith(GEMINI):
        return ParsedCommand("gemini", text.replace(GEMINI, "", 1).strip())

    if text.startswith(PLAY):
        args = text.split()[1:]
        return ParsedCommand("play", " ".join(args), args)

    if text.startswith(IMAGINE):
        return ParsedCommand("imagine", text.replace(IMAGINE, "", 1).strip())

    return ParsedCommand("ask", text)
