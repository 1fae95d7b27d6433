"""
Repair JSON text that carries raw control characters.

Thunderbird hands message bodies to the MCP extension verbatim, so tool results
regularly arrive with literal newlines, tabs and stray control bytes inside JSON
strings. `sanitize_json` makes such text parseable again without touching
anything that was already valid escaping.
"""

import unicodedata

_ESCAPES = {"\n": "\\n", "\r": "\\r", "\t": "\\t"}


def _is_removable_control(ch: str) -> bool:
    return unicodedata.category(ch) == "Cc" and ch not in _ESCAPES


def sanitize_json(data: str) -> str:
    """
    Strip control characters and escape raw line breaks and tabs.

    Pass 1 drops every control character except LF, CR and TAB. Pass 2 escapes
    the LF, CR and TAB characters that are not already escaped, i.e. that
    follow an even-length run of backslashes.

    Never fails. The result is stable: sanitizing it again returns it unchanged.

    Note: other JSON-breaking characters, like unescaped quotes inside a
    string, are not repaired.
    """
    stripped = "".join(ch for ch in data if not _is_removable_control(ch))

    out: list[str] = []
    escaped = False
    for ch in stripped:
        if ch == "\\":
            # Toggle: a pair of backslashes escapes itself.
            escaped = not escaped
            out.append(ch)
        elif not escaped:
            out.append(_ESCAPES.get(ch, ch))
        else:
            out.append(ch)
            escaped = False

    return "".join(out)
