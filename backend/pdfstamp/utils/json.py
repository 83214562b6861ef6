from __future__ import annotations

from pathlib import Path
from typing import Any

import orjson
from flask.json.provider import DefaultJSONProvider


def _default(obj: Any) -> Any:
    if isinstance(obj, Path):
        return str(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


class ORJSONProvider(DefaultJSONProvider):
    """Flask JSON provider that uses orjson for fast serialization."""

    def dumps(self, obj: Any, *, option: int | None = None, **kwargs: Any) -> str:
        opts = option or orjson.OPT_INDENT_2
        return orjson.dumps(obj, default=_default, option=opts).decode()

    def loads(self, s: str | bytes | bytearray, **kwargs: Any) -> Any:
        return orjson.loads(s)
