"""SQL statement tokenizer.

Splits a block of SQL text into individual statements on ``;``
while leaving semicolons inside string literals, quoted identifiers,
comments and PostgreSQL dollar-quoted bodies alone. Every database
backend goes through this one splitter so that apply and rollback
parse migrations identically.
"""

import re

_QUOTES = frozenset("'\"`")
_DOLLAR_TAG = re.compile(r"\$([A-Za-z_][A-Za-z0-9_]*)?\$")


def split_statements(sql: str) -> list[str]:
    """
    Split SQL text into trimmed, non-empty statements.

    Rules:
    - Inside a quoted literal (``'``, ``"`` or backtick) a backslash
      escapes the following character, which is copied verbatim.
    - ``--`` line comments and ``/* */`` block comments are copied
      through without quote tracking.
    - ``$$ ... $$`` and ``$tag$ ... $tag$`` bodies are copied through
      with no escape processing.
    - A ``;`` outside all of the above ends the current statement.

    Args:
        sql: Raw SQL text containing zero or more statements.

    Returns:
        Statements in source order, without their terminating ``;``.
    """
    statements: list[str] = []
    buf: list[str] = []
    quote: str | None = None
    i = 0
    n = len(sql)

    while i < n:
        ch = sql[i]

        if quote is not None:
            buf.append(ch)
            if ch == "\\" and i + 1 < n:
                buf.append(sql[i + 1])
                i += 2
                continue
            if ch == quote:
                quote = None
            i += 1
            continue

        if ch in _QUOTES:
            quote = ch
            buf.append(ch)
            i += 1
            continue

        if sql.startswith("--", i):
            end = sql.find("\n", i)
            end = n if end == -1 else end
            buf.append(sql[i:end])
            i = end
            continue

        if sql.startswith("/*", i):
            end = sql.find("*/", i + 2)
            end = n if end == -1 else end + 2
            buf.append(sql[i:end])
            i = end
            continue

        if ch == "$" and not _is_word_char(sql[i - 1] if i else ""):
            match = _DOLLAR_TAG.match(sql, i)
            if match:
                tag = match.group(0)
                close = sql.find(tag, match.end())
                end = n if close == -1 else close + len(tag)
                buf.append(sql[i:end])
                i = end
                continue

        if ch == ";":
            _flush(buf, statements)
            buf = []
            i += 1
            continue

        buf.append(ch)
        i += 1

    _flush(buf, statements)
    return statements


def _is_word_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


def _flush(buf: list[str], statements: list[str]) -> None:
    statement = "".join(buf).strip()
    if statement:
        statements.append(statement)


def _strip_block_comments(statement: str) -> str:
    return re.sub(r"/\*.*?\*/", "", statement, flags=re.DOTALL)


def is_executable(statement: str) -> bool:
    """
    Check whether a statement contains anything besides comments.

    This is the only filter applied before execution, on both the
    apply and the rollback path.
    """
    for line in _strip_block_comments(statement).splitlines():
        stripped = line.strip()
        if stripped and not stripped.startswith("--"):
            return True
    return False


def executable_statements(sql: str | None) -> list[str]:
    """Split SQL and keep only statements worth sending to the database."""
    if not sql:
        return []
    return [stmt for stmt in split_statements(sql) if is_executable(stmt)]
