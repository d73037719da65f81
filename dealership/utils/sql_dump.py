# dealership/utils/sql_dump.py
"""
Helpers for reading vehicles out of a MySQL dump.
Handles INSERT INTO `vehicles` (...) VALUES (...), (...); with any column order,
MySQL backslash escapes and parentheses inside quoted strings.
"""

import re
from typing import Optional

_INSERT_RE = re.compile(r"INSERT INTO `vehicles`\s*\(([^)]*)\)\s*VALUES\s*", re.IGNORECASE)
_TOKEN_RE = re.compile(r"'((?:[^'\\]|\\.|'')*)'|(NULL)|(-?\d+(?:\.\d+)?)|([(),;])", re.IGNORECASE)
_ESCAPES = {"n": "\n", "r": "\r", "t": "\t", "0": "\0"}

# Columns an import may set; anything else in the dump is ignored
IMPORTABLE_COLUMNS = (
    "name", "category", "price", "trunk_weight", "image_url", "seats",
    "particularity", "page_catalog", "manufacturer", "realname",
)


def unescape(value: str) -> str:
    """Undo MySQL string escaping (\\' \\\\ \\n ... and doubled quotes)."""
    value = value.replace("''", "'")
    return re.sub(r"\\(.)", lambda m: _ESCAPES.get(m.group(1), m.group(1)), value)


def _literal(match: re.Match):
    string, null, number, _ = match.groups()
    if string is not None:
        return unescape(string)
    if null is not None:
        return None
    return float(number) if "." in number else int(number)


def parse_vehicle_inserts(sql: str) -> list[dict]:
    """Return one {column: value} dict per row found in the dump."""
    rows = []
    for statement in _INSERT_RE.finditer(sql):
        columns = [c.strip().strip("`") for c in statement.group(1).split(",")]
        current: Optional[list] = None
        for token in _TOKEN_RE.finditer(sql, statement.end()):
            punct = token.group(4)
            if punct == ";":
                break
            if punct == "(":
                current = []
            elif punct == ")":
                if current is not None and len(current) == len(columns):
                    rows.append(dict(zip(columns, current)))
                current = None
            elif punct is None and current is not None:
                current.append(_literal(token))
    return rows


def to_vehicle_fields(row: dict) -> dict:
    return {k: v for k, v in row.items() if k in IMPORTABLE_COLUMNS}
