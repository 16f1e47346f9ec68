"""Slash commands recognised in issue and pull request comments.

Matching is literal: a command fires only when its keyword appears as a
whitespace-separated token, and only the first occurrence counts. The token
right after the keyword is the argument.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class Keyword(str, Enum):
    label = "/label"
    unlabel = "/un-label"
    lgtm = "/lgtm"


# Execution order when one comment carries several commands
PRIORITY = (Keyword.label, Keyword.unlabel, Keyword.lgtm)


@dataclass(frozen=True)
class Command:
    keyword: Keyword
    argument: Optional[str] = None


def extract(comment_body: str, keyword: Keyword) -> Optional[Command]:
    """Return the command for ``keyword`` or None when the keyword is absent.

    A keyword that ends the comment yields a Command whose argument is None.
    """
    tokens = comment_body.split()
    try:
        index = tokens.index(keyword.value)
    except ValueError:
        return None
    argument = tokens[index + 1] if index + 1 < len(tokens) else None
    return Command(keyword=keyword, argument=argument or None)


def extract_commands(comment_body: str) -> List[Command]:
    commands: List[Command] = []
    for keyword in PRIORITY:
        cmd = extract(comment_body, keyword)
        if cmd is not None:
            commands.append(cmd)
    return commands
