"""
Parser for the shell assignments keychain writes to its per-host files.
Lines look like ``SSH_AUTH_SOCK=/tmp/ssh-XXXX/agent.1234; export SSH_AUTH_SOCK;``
"""
import string
from typing import Dict, Optional

TERMINATOR = ";"
NAME_START = string.ascii_letters + "_"
NAME_CHARS = NAME_START + string.digits


def find_assignment(text: str, name: str, digits_only: bool = False) -> Optional[str]:
    """
    Return the value of the first ``NAME=value;`` assignment in text.

    ``NAME=`` is matched anywhere in the text. The value is the shortest run
    of characters after it that ends at a ``;`` on the same line. With
    digits_only the value may hold ASCII digits only, possibly none.

    Returns:
        str or None: the value, or None when no occurrence matches.
    """
    marker = f"{name}="
    start = text.find(marker)
    while start != -1:
        value = _scan_value(text, start + len(marker), digits_only)
        if value is not None:
            return value
        start = text.find(marker, start + 1)
    return None


def _scan_value(text: str, pos: int, digits_only: bool) -> Optional[str]:
    end = pos
    while end < len(text):
        char = text[end]
        if char == TERMINATOR:
            return text[pos:end]
        if char == "\n" or (digits_only and char not in string.digits):
            return None
        end += 1
    return None


def parse_assignments(text: str) -> Dict[str, str]:
    """
    Collect every ``NAME=value;`` pair in text, in document order.
    The first assignment to a name wins.
    """
    found: Dict[str, str] = {}
    pos = text.find("=")
    while pos != -1:
        name_start = pos
        while name_start > 0 and text[name_start - 1] in NAME_CHARS:
            name_start -= 1
        # skip leading digits, they cannot start a shell name
        while name_start < pos and text[name_start] not in NAME_START:
            name_start += 1
        name = text[name_start:pos]
        value = _scan_value(text, pos + 1, False) if name else None
        if value is None:
            pos = text.find("=", pos + 1)
            continue
        if name not in found:
            found[name] = value
        pos = text.find("=", pos + len(value) + 2)
    return found
