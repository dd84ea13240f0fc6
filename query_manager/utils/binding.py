"""Placeholder binding for query template bodies.

Template bodies reference runtime values as ``:name``. Binding never splices a
value into the SQL text: every supplied placeholder stays a driver-native bind
parameter and its value travels separately, so the driver does the quoting.

    >>> stmt = bind("SELECT * FROM users WHERE email = :email", {"email": "a@b.com"})
    >>> stmt.text, stmt.params
    ('SELECT * FROM users WHERE email = :email', {'email': 'a@b.com'})

Placeholders without a supplied value are escaped (``\\:name``) so they reach
the backend as literal text and fail there.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from query_manager.exceptions import BindingError

# Same grammar SQLAlchemy's text() uses for bind names; skips "::type" casts
_PLACEHOLDER_RE = re.compile(r"(?<![:\w\\]):(\w+)(?!:)")

_BINDABLE = (str, int, float, bool, type(None))


@dataclass(frozen=True)
class BoundStatement:
    """SQL text with named bind placeholders plus the values to bind."""

    text: str
    params: dict[str, Any] = field(default_factory=dict)

    def params_for(self, fragment: str) -> dict[str, Any]:
        """Return the params referenced by a fragment of ``text``."""
        names = set(placeholder_names(fragment))
        return {k: v for k, v in self.params.items() if k in names}


def placeholder_names(sql: str) -> list[str]:
    """Unescaped placeholder names in order of appearance, duplicates kept."""
    return _PLACEHOLDER_RE.findall(sql)


def bind(body: str, parameters: dict[str, Any]) -> BoundStatement:
    """Bind ``parameters`` to the ``:name`` placeholders in ``body``.

    Matching is case-sensitive and whole-word: ``:id`` and ``:identifier``
    are distinct placeholders. Parameters the body never references are
    dropped.
    """
    for name, value in parameters.items():
        if not isinstance(value, _BINDABLE):
            raise BindingError(
                f"Unsupported value for parameter '{name}': {type(value).__name__}"
            )

    params: dict[str, Any] = {}

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in parameters:
            params[name] = parameters[name]
            return match.group(0)
        return "\\" + match.group(0)

    text = _PLACEHOLDER_RE.sub(_replace, body)
    return BoundStatement(text=text, params=params)
