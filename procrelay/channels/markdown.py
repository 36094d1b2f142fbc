"""Telegram MarkdownV2 escaping and message layout."""

import re

MAX_MESSAGE_CHARS = 3000

_MARKDOWN_SPECIAL = re.compile(r"([_*\[\]()~`>#+\-=|{}.!])")
_CODE_SPECIAL = re.compile(r"([`\\])")


def escape_markdown(text: str) -> str:
    """Escape every character MarkdownV2 treats as markup."""
    return _MARKDOWN_SPECIAL.sub(r"\\\1", text)


def escape_markdown_code(text: str) -> str:
    """Escape text placed inside a pre/code block."""
    return _CODE_SPECIAL.sub(r"\\\1", text)


def truncate(text: str, limit: int = MAX_MESSAGE_CHARS) -> str:
    return text if len(text) < limit else text[:limit]


def format_message(source_name: str, text: str) -> str:
    """Build the message: bold source name, then the body in a code block.

    The body is truncated before escaping, so the limit applies to the raw
    text and the escaped result may be longer.
    """
    body = escape_markdown_code(truncate(text))
    return f"*{escape_markdown(source_name)}*\n\n```\n{body}```"
