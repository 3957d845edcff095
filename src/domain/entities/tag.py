"""Customer tag domain entities.

A tag is identified by its *full tag* ``"{prefix}:{code}"``. The prefix is the
category namespace (e.g. ``categoria-di-sconto``); within one owning list
(customer tags, or one address's overrides) at most one tag per prefix is kept.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, Mapping
from uuid import uuid4

import structlog

from core.exceptions import InvalidTagFormatError, InvalidTagReferenceError

# Lowercase kebab-case: no leading/trailing/double hyphens, no colon
_SEGMENT_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

logger = structlog.get_logger()

FULL_TAG_SEPARATOR = ":"

# --- Well-known prefixes ---

TAG_PREFIXES: tuple[str, ...] = (
    "categoria-di-sconto",
    "categoria-clienti",
    "categoria-acquisto-medio-mensile",
)

TAG_PREFIX_LABELS: dict[str, str] = {
    "categoria-di-sconto": "Categoria di sconto",
    "categoria-clienti": "Categoria clienti",
    "categoria-acquisto-medio-mensile": "Categoria acquisto medio mensile",
}

TAG_PREFIX_DESCRIPTIONS: dict[str, str] = {
    "categoria-di-sconto": "Discount tier applied to the customer's price list",
    "categoria-clienti": "Customer trade or business category",
    "categoria-acquisto-medio-mensile": "Average monthly purchase volume band",
}


def is_valid_prefix(value: str) -> bool:
    """Check a prefix against the lowercase kebab-case format."""
    return bool(_SEGMENT_RE.match(value or ""))


def is_valid_code(value: str) -> bool:
    """Check a code against the lowercase kebab-case format."""
    return bool(_SEGMENT_RE.match(value or ""))


def build_full_tag(prefix: str, code: str) -> str:
    """Join prefix and code into the full tag string."""
    return f"{prefix}{FULL_TAG_SEPARATOR}{code}"


def parse_full_tag(full_tag: str) -> tuple[str, str] | None:
    """Split a full tag on its first colon.

    Returns ``(prefix, code)`` or ``None`` when the colon is missing or either
    side is empty.
    """
    prefix, sep, code = (full_tag or "").partition(FULL_TAG_SEPARATOR)
    if not sep or not prefix or not code:
        return None
    return prefix, code


def generate_tag_id() -> str:
    """Generate an opaque catalog identifier."""
    return f"ctag_{uuid4().hex[:12]}"


@dataclass
class TagDefinition:
    """Domain entity for a catalog tag definition."""

    prefix: str
    code: str
    tag_id: str = field(default_factory=generate_tag_id)
    description: str | None = None
    color: str | None = None
    is_active: bool = True
    customer_count: int = 0
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Reject malformed prefix/code values."""
        if not is_valid_prefix(self.prefix):
            raise InvalidTagFormatError("prefix", self.prefix)
        if not is_valid_code(self.code):
            raise InvalidTagFormatError("code", self.code)
        if self.color:
            self.color = self.color.upper()

    @property
    def full_tag(self) -> str:
        return build_full_tag(self.prefix, self.code)

    def to_reference(self) -> "TagReference":
        """Build the embedded pointer copied onto customers and addresses."""
        return TagReference(
            tag_id=self.tag_id,
            full_tag=self.full_tag,
            prefix=self.prefix,
            code=self.code,
        )


@dataclass(frozen=True, slots=True)
class TagReference:
    """Read-only value object embedded wherever a tag is assigned."""

    tag_id: str
    full_tag: str
    prefix: str
    code: str

    def to_dict(self) -> dict[str, str]:
        return {
            "tag_id": self.tag_id,
            "full_tag": self.full_tag,
            "prefix": self.prefix,
            "code": self.code,
        }

    @classmethod
    def from_raw(cls, value: Any) -> "TagReference":
        """Normalize a stored or submitted tag into a TagReference.

        Accepted shapes:
            - an existing ``TagReference``
            - a bare ``"prefix:code"`` string (no catalog id, ``tag_id`` is "")
            - a mapping with ``tag_id``/``full_tag``/``prefix``/``code``, where
              ``id`` or ``_id`` may stand in for ``tag_id`` and ``tag`` or
              ``name`` for ``full_tag``; missing prefix/code are derived from
              the full tag

        Raises:
            InvalidTagReferenceError: if no prefix/code can be determined
        """
        if isinstance(value, TagReference):
            return value

        if isinstance(value, str):
            parsed = parse_full_tag(value.strip())
            if parsed is None:
                raise InvalidTagReferenceError(value)
            prefix, code = parsed
            return cls(tag_id="", full_tag=build_full_tag(prefix, code), prefix=prefix, code=code)

        if isinstance(value, Mapping):
            return cls._from_mapping(value)

        raise InvalidTagReferenceError(value)

    @classmethod
    def _from_mapping(cls, value: Mapping[str, Any]) -> "TagReference":
        tag_id = value.get("tag_id") or value.get("id") or value.get("_id") or ""
        full_tag = value.get("full_tag") or value.get("tag") or value.get("name") or ""
        prefix = value.get("prefix") or ""
        code = value.get("code") or ""

        if full_tag and not (prefix and code):
            parsed = parse_full_tag(str(full_tag))
            if parsed is None:
                raise InvalidTagReferenceError(dict(value))
            prefix, code = parsed
        if not (prefix and code):
            raise InvalidTagReferenceError(dict(value))

        return cls(
            tag_id=str(tag_id),
            full_tag=build_full_tag(prefix, code),
            prefix=prefix,
            code=code,
        )


def load_tag_references(values: Iterable[Any] | None, owner: str = "") -> list[TagReference]:
    """Read a stored tag list, skipping entries that cannot be interpreted.

    Stored lists may predate the reference format; one unreadable entry must
    not make the owning customer unusable. Skipped entries are logged and are
    not written back on the next save.
    """
    refs: list[TagReference] = []
    for value in values or []:
        try:
            refs.append(TagReference.from_raw(value))
        except InvalidTagReferenceError:
            logger.warning("tag_reference_dropped", owner=owner, value=repr(value))
    return refs
