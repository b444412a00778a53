from dataclasses import dataclass, field
import json
import logging
import math
from typing import Any, Dict, Optional


COLORS = {
    "DEBUG": "\033[36m",  # cyan
    "INFO": "\033[32m",  # green
    "WARNING": "\033[33m",  # yellow
    "ERROR": "\033[31m",  # red
    "CRITICAL": "\033[1;31m",  # bold red
}
COLOR_RESET = "\033[0m"

DEFAULT_SIZE = 24


class ColorFormatter(logging.Formatter):
    def format(self, record):
        color = COLORS.get(record.levelname, "")
        record.levelname = f"{color}{record.levelname}{COLOR_RESET}"
        return super().format(record)


def setup_logging():
    handler = logging.StreamHandler()
    handler.setFormatter(ColorFormatter("%(levelname)s %(message)s"))
    logging.root.addHandler(handler)
    logging.root.setLevel(logging.INFO)


class GalleryError(Exception):
    """Fatal error that aborts a gallery build."""


class ParseError(GalleryError):
    pass


class SchemaError(GalleryError):
    pass


class TemplateError(GalleryError):
    pass


class InvalidIconData(ValueError):
    """A single icon entry is unusable. The build skips it and carries on."""


class ExportError(Exception):
    """Failure of a single export. Never affects other icons."""


class ExportDataMissing(ExportError):
    pass


class ExportDecodeError(ExportError):
    pass


def js_number(value):
    # JavaScript prints 32.0 as 32
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _js_values(value):
    if isinstance(value, dict):
        return {k: _js_values(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_js_values(v) for v in value]
    return js_number(value)


def to_json(data: Dict[str, Any]) -> str:
    """Serialize the way JSON.stringify does: compact, unicode kept, key order kept."""
    return json.dumps(_js_values(data), separators=(",", ":"), ensure_ascii=False)


def _is_dimension(value) -> bool:
    return value is None or (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


@dataclass(frozen=True)
class IconEntry:
    name: str
    body: str
    width: Optional[float] = None
    height: Optional[float] = None
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    def __post_init__(self):
        if not isinstance(self.body, str) or not self.body.strip():
            raise InvalidIconData(
                f"Icon {self.name!r} has a missing, non-string or empty 'body'"
            )
        for attr in ("width", "height"):
            if not _is_dimension(getattr(self, attr)):
                raise InvalidIconData(
                    f"Icon {self.name!r} has a non-numeric {attr}: {getattr(self, attr)!r}"
                )

    @classmethod
    def from_dict(cls, name: str, data: Any) -> "IconEntry":
        if not isinstance(data, dict):
            raise InvalidIconData(f"Icon {name!r} is not an object")
        return cls(
            name=name,
            body=data.get("body"),
            width=data.get("width"),
            height=data.get("height"),
            raw=data,
        )

    def size(self, default_width=DEFAULT_SIZE, default_height=DEFAULT_SIZE):
        return self.width or default_width, self.height or default_height

    def payload(self, default_width=DEFAULT_SIZE, default_height=DEFAULT_SIZE):
        """The entry as embedded in the page, with effective dimensions filled in.

        Keys already present keep their order and value; a missing or falsy
        width/height is set to the icon set default.
        """
        data = dict(self.raw) if self.raw else {"body": self.body}
        width, height = self.size(default_width, default_height)
        if not data.get("width"):
            data["width"] = width
        if not data.get("height"):
            data["height"] = height
        return data

    def to_json(self, default_width=DEFAULT_SIZE, default_height=DEFAULT_SIZE) -> str:
        return to_json(self.payload(default_width, default_height))


@dataclass(frozen=True)
class IconSet:
    icons: Dict[str, Any]
    width: float = DEFAULT_SIZE
    height: float = DEFAULT_SIZE
    prefix: Optional[str] = None
