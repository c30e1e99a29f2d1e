"""Cross-reference resolution and Markdown link rewriting.

Two families of link targets appear in the source material:

* symbolic tokens from the API descriptions, e.g. ``runtime:LuaEntity``,
  ``runtime:LuaEntity::clone`` or ``prototype:defines.direction.north``;
* legacy hyperlinks copied from the vendor's HTML site, e.g. ``storage.html``,
  ``../classes/LuaEntity.html#clone`` or ``defines.html#defines.direction``.

Legacy hyperlinks are first normalised to a symbolic token plus an optional
anchor, so both families resolve through :meth:`Resolver.resolve` and the
catalog. Anything unresolvable is left exactly as written.
"""

from __future__ import annotations

import logging
import re
from typing import Optional, Tuple

from llmdocs.catalog.catalog import Catalog
from llmdocs.models import ResolvedLink
from llmdocs.utils.files import relative_link

LOGGER = logging.getLogger(__name__)

_LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
_SYMBOLIC_RE = re.compile(r"^(runtime|prototype|auxiliary):(.+)$")
_DEFINES_PAGE_RE = re.compile(r"^(?:\.\./)?defines\.html$", re.IGNORECASE)
_OVERVIEW_RE = re.compile(r"^(?:\.\./)?(classes|concepts|events|prototypes|types|defines)\.html$", re.IGNORECASE)
_MEMBER_PAGE_RE = re.compile(r"^(?:\.\./)?(classes|concepts|events|prototypes|types)/([^/]+)\.html$", re.IGNORECASE)
_AUXILIARY_PAGE_RE = re.compile(r"^([a-z0-9-]+)\.html$", re.IGNORECASE)

_PROTOTYPE_KINDS = {"prototypes", "types"}

# (symbolic token, anchor override); an override of None keeps the token's own anchor
NormalizedToken = Tuple[str, Optional[str]]


def stage_of_page(rel_path: str) -> str:
    return "prototype" if rel_path.startswith("prototype/") else "runtime"


def _stage_for_kind(kind: str, page_stage: str) -> str:
    kind = kind.lower()
    if kind in _PROTOTYPE_KINDS:
        return "prototype"
    if kind == "defines":
        return page_stage
    return "runtime"


class Resolver:
    """Resolves link targets against a fully built :class:`Catalog`."""

    def __init__(self, catalog: Catalog) -> None:
        self.catalog = catalog

    def resolve(self, token: str) -> Optional[ResolvedLink]:
        """Resolve a symbolic ``stage:...`` token to a page and optional anchor."""
        stage, sep, rest = token.partition(":")
        if not sep or not rest:
            return None

        if stage in ("runtime", "prototype") and rest.startswith("defines."):
            group, _, value = rest[len("defines."):].partition(".")
            entry = self.catalog.lookup(f"{stage}:defines.{group}")
            if entry is None:
                return None
            return ResolvedLink(entry.rel_path, value or None)

        if stage in ("runtime", "prototype") and "::" in rest:
            base, _, member = rest.partition("::")
            entry = self.catalog.lookup(f"{stage}:{base}") or self.catalog.lookup(f"auxiliary:{base}")
            if entry is None:
                return None
            return ResolvedLink(entry.rel_path, member or None)

        entry = self.catalog.lookup(token) or self.catalog.lookup(f"auxiliary:{rest}")
        if entry is None:
            return None
        return ResolvedLink(entry.rel_path, entry.anchor)

    def normalize(self, href: str, from_rel_path: str) -> Optional[NormalizedToken]:
        """Map any supported link form onto a symbolic token."""
        href = href.strip()
        if _SYMBOLIC_RE.match(href):
            return href, None

        raw_path, _, raw_hash = href.partition("#")
        page_stage = stage_of_page(from_rel_path)

        if _DEFINES_PAGE_RE.match(raw_path) and raw_hash.startswith("defines."):
            return f"{page_stage}:{raw_hash}", None

        overview = _OVERVIEW_RE.match(raw_path)
        if overview:
            kind = overview.group(1).lower()
            return f"{_stage_for_kind(kind, page_stage)}:{kind}", raw_hash or None

        member_page = _MEMBER_PAGE_RE.match(raw_path)
        if member_page:
            kind, name = member_page.group(1), member_page.group(2)
            return f"{_stage_for_kind(kind, page_stage)}:{name}", raw_hash or None

        auxiliary = _AUXILIARY_PAGE_RE.match(raw_path)
        if auxiliary:
            return f"auxiliary:{auxiliary.group(1)}", raw_hash or None

        return None

    def resolve_href(self, href: str, from_rel_path: str) -> Optional[ResolvedLink]:
        normalized = self.normalize(href, from_rel_path)
        if normalized is None:
            return None
        token, anchor = normalized
        resolved = self.resolve(token)
        if resolved is None:
            LOGGER.debug("Unresolved link %s in %s", href, from_rel_path)
            return None
        if anchor is not None:
            return ResolvedLink(resolved.rel_path, anchor)
        return resolved

    def rewrite_links(self, markdown: str, from_rel_path: str) -> str:
        """Rewrite every resolvable ``[label](href)`` relative to ``from_rel_path``."""

        def replace(match: re.Match) -> str:
            label, href = match.group(1), match.group(2)
            resolved = self.resolve_href(href, from_rel_path)
            if resolved is None:
                return match.group(0)
            target = relative_link(from_rel_path, resolved.rel_path)
            if resolved.anchor:
                target = f"{target}#{resolved.anchor}"
            return f"[{label}]({target})"

        return _LINK_RE.sub(replace, markdown)
