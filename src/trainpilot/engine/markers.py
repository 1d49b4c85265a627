"""Title marker classification.

A work item title is one of three things:

* an *open* marker, ``--- Some Name ---rt`` optionally followed by ``:<id>``
  naming the aggregate that already represents the group;
* a *close* marker (a separator), any title starting with a decoration run
  that is not an open marker;
* a plain title.

Decoration characters, the minimum run length and the suffix token all come
from :class:`~trainpilot.contracts.config.MarkerConfig`.
"""

from __future__ import annotations

import logging
import re
import string
from dataclasses import dataclass
from functools import lru_cache

from trainpilot.contracts.config import MarkerConfig

_LOG = logging.getLogger(__name__)

_DEFAULT_CONFIG = MarkerConfig()


@dataclass(frozen=True)
class OpenMarker:
    name: str
    existing_id: int | None = None


@dataclass(frozen=True)
class CloseMarker:
    pass


@dataclass(frozen=True)
class PlainTitle:
    pass


TitleClass = OpenMarker | CloseMarker | PlainTitle


@dataclass(frozen=True)
class _Patterns:
    open: re.Pattern[str]
    close: re.Pattern[str]
    strip_chars: str


@lru_cache(maxsize=16)
def _patterns(config: MarkerConfig) -> _Patterns:
    run = f"[{re.escape(config.decoration_chars)}]{{{config.min_run},}}"
    suffix = re.escape(config.suffix)
    return _Patterns(
        open=re.compile(rf"^{run}\s*(?P<name>.*?)\s*{run}{suffix}(?::(?P<ref>.*))?$", re.IGNORECASE),
        close=re.compile(rf"^{run}"),
        strip_chars=config.decoration_chars + string.whitespace,
    )


def clean_name(raw: str, config: MarkerConfig = _DEFAULT_CONFIG) -> str:
    """Strip decoration characters and whitespace from both ends until none remain."""
    return raw.strip(_patterns(config).strip_chars)


def _parse_ref(ref: str, title: str) -> int | None:
    try:
        value = int(ref.strip())
    except ValueError:
        _LOG.warning("Ignoring malformed aggregate id %r in marker title %r", ref, title)
        return None
    if value <= 0:
        _LOG.warning("Ignoring non-positive aggregate id %d in marker title %r", value, title)
        return None
    return value


def classify(title: str, config: MarkerConfig = _DEFAULT_CONFIG) -> TitleClass:
    patterns = _patterns(config)
    text = title.strip()

    match = patterns.open.match(text)
    if match is not None:
        name = clean_name(match.group("name"), config)
        if not name:
            _LOG.warning("Marker title %r has an empty group name; treating it as a separator", title)
            return CloseMarker()
        ref = match.group("ref")
        existing_id = _parse_ref(ref, title) if ref is not None else None
        return OpenMarker(name=name, existing_id=existing_id)

    if patterns.close.match(text):
        return CloseMarker()
    return PlainTitle()


def is_separator(title: str, config: MarkerConfig = _DEFAULT_CONFIG) -> bool:
    """True when *title* starts with a decoration run, marker or not."""
    return _patterns(config).close.match(title.strip()) is not None


def format_open_marker(name: str, aggregate_id: int, config: MarkerConfig = _DEFAULT_CONFIG) -> str:
    run = config.decoration_chars[0] * config.canonical_run
    return f"{run} {name} {run}{config.suffix}:{aggregate_id}"
