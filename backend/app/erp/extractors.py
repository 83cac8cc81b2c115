"""
First-match field extraction over loosely shaped ERP payloads.

Each logical field is described by an ordered list of named extractors;
the first one that yields a defined (non-None) value wins. Keeping the
priority order as data makes it auditable and testable on its own.
"""
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Sequence, Tuple


@dataclass(frozen=True)
class Extractor:
    name: str
    fn: Callable[[Mapping[str, Any]], Any]

    def __call__(self, record: Mapping[str, Any]) -> Any:
        return self.fn(record)


def key(field_name: str, accept: Optional[Callable[[Any], bool]] = None) -> Extractor:
    """Extractor reading one key; ``accept`` can reject values of the wrong shape."""

    def read(record: Mapping[str, Any]) -> Any:
        if not isinstance(record, Mapping):
            return None
        value = record.get(field_name)
        if value is None:
            return None
        if accept is not None and not accept(value):
            return None
        return value

    return Extractor(field_name, read)


def nested(field_name: str, inner: "FirstMatch") -> Extractor:
    """Extractor descending into a sub-record; a list sub-record uses its first element."""

    def read(record: Mapping[str, Any]) -> Any:
        if not isinstance(record, Mapping):
            return None
        sub = record.get(field_name)
        if isinstance(sub, list):
            sub = sub[0] if sub else None
        if not isinstance(sub, Mapping):
            return None
        return inner.resolve(sub)

    return Extractor(f"{field_name}.{'|'.join(inner.names)}", read)


class FirstMatch:
    def __init__(self, *extractors: Extractor, default: Any = None):
        self.extractors: Tuple[Extractor, ...] = extractors
        self.default = default

    @property
    def names(self) -> Sequence[str]:
        return [e.name for e in self.extractors]

    def match(self, record: Mapping[str, Any]) -> Tuple[Optional[str], Any]:
        """Return ``(extractor_name, value)``; name is None when the default was used."""
        for extractor in self.extractors:
            value = extractor(record)
            if value is not None:
                return extractor.name, value
        return None, self.default

    def resolve(self, record: Mapping[str, Any]) -> Any:
        return self.match(record)[1]


def is_scalar(value: Any) -> bool:
    return not isinstance(value, (Mapping, list, tuple))
