"""Turn message text into display blocks.

Assistant replies use a light convention: blank lines separate paragraphs,
and a paragraph whose lines start with ``- `` is a bullet list.
"""

import re
from dataclasses import dataclass
from typing import List, Literal

from .session import ConversationMessage

_LEADING_DASHES = re.compile(r"^-+\s*")
_PARAGRAPH_BREAK = re.compile(r"\n{2,}")


@dataclass(frozen=True)
class Block:
    kind: Literal["paragraph", "list"]
    items: List[str]


def _is_list(paragraph: str) -> bool:
    return paragraph.strip().startswith("- ") or "\n- " in paragraph


def format_content(content: str) -> List[Block]:
    blocks: List[Block] = []
    for paragraph in _PARAGRAPH_BREAK.split(content.strip()):
        if _is_list(paragraph):
            items = [_LEADING_DASHES.sub("", line).strip() for line in paragraph.split("\n")]
            blocks.append(Block("list", [item for item in items if item]))
        else:
            blocks.append(Block("paragraph", [paragraph]))
    return blocks


def speaker_label(role: str, assistant_name: str = "Radius") -> str:
    return "You" if role == "user" else assistant_name


def blocks_to_markdown(blocks: List[Block]) -> str:
    parts = []
    for block in blocks:
        if block.kind == "list":
            parts.append("\n".join(f"- {item}" for item in block.items))
        else:
            # Single newlines inside a paragraph are kept as line breaks
            parts.append(block.items[0].replace("\n", "  \n"))
    return "\n\n".join(parts)


def show_extras(message: ConversationMessage) -> bool:
    """Steps and suggestions are only shown on assistant messages."""
    return message.role != "user" and bool(message.steps or message.suggestions)
