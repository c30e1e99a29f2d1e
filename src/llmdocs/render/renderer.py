"""Rendering of API symbols and auxiliary pages into Markdown pages and chunks."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from llmdocs.catalog.catalog import OVERVIEW_PAGES, auxiliary_rel_path, collections_for, overview_rel_path, symbol_page_path
from llmdocs.catalog.resolver import Resolver
from llmdocs.ingestion.api_json import ApiDocument
from llmdocs.models import ChunkRecord
from llmdocs.render.markdown import (
    by_order,
    call_convention,
    call_usage,
    examples_block,
    field_list,
    flag,
    frontmatter,
    lua_block,
    return_list,
    section,
    signature,
)
from llmdocs.render.types import render_type
from llmdocs.utils.text import first_line, title_case_from_slug

LOGGER = logging.getLogger(__name__)

Item = Dict[str, Any]


@dataclass(slots=True)
class RenderedPage:
    rel_path: str
    stage: str
    kind: str
    name: str
    source: str
    body: str

    def content(self, version: str) -> str:
        header = frontmatter(
            {"version": version, "stage": self.stage, "kind": self.kind, "name": self.name, "source": self.source}
        )
        return f"{header}\n{self.body.strip()}\n"


@dataclass(slots=True)
class RenderedUnit:
    """One page plus the chunk records cut from it."""

    page: RenderedPage
    chunks: List[ChunkRecord] = field(default_factory=list)
    counter: Optional[str] = None


def index_title(stage: str, kind: str) -> str:
    return f"{'Runtime' if stage == 'runtime' else 'Prototype'} {title_case_from_slug(kind)}"


def _header(title: str, description: Optional[str]) -> str:
    return f"# {title}\n\n{description}\n" if description else f"# {title}\n"


class Renderer:
    """Deterministically renders one version's symbols.

    Every page body and chunk text is passed through the resolver, relative to
    the page the text belongs to, before it is returned.
    """

    def __init__(self, version: str, resolver: Resolver) -> None:
        self.version = version
        self.resolver = resolver
        self._renderers: Dict[str, Callable[[str, str, Item], RenderedUnit]] = {
            "class": self._render_class,
            "concept": self._render_concept,
            "event": self._render_event,
            "define": self._render_define,
            "global_function": self._render_global_function,
            "global_object": self._render_global_object,
            "prototype": self._render_prototype,
            "type": self._render_type,
        }

    # -- entry points -------------------------------------------------------

    def render_stage(self, doc: ApiDocument) -> Iterator[RenderedUnit]:
        """Overview pages first, then every symbol in collection order."""
        stage = doc.stage
        collections = collections_for(stage)
        for overview in OVERVIEW_PAGES[stage]:
            collection = next(c for c, directory, _ in collections if directory == overview)
            yield self.render_index(stage, overview, doc.collection(collection), doc.source_name)
        for collection, directory, kind in collections:
            for item in doc.collection(collection):
                yield self._renderers[kind](stage, doc.source_name, item)

    def render_index(self, stage: str, kind: str, items: List[Item], source: str) -> RenderedUnit:
        rel_path = overview_rel_path(stage, kind)
        title = index_title(stage, kind)
        rows = []
        for item in sorted(items, key=lambda i: (i["name"].lower(), i["name"])):
            description = first_line(item.get("description"))
            row = f"- [`{item['name']}`]({item['name']}.md)"
            rows.append(f"{row} - {description}" if description else row)
        body = f"# {title}\n\n" + ("\n".join(rows) if rows else "_No entries._") + "\n"
        root = ChunkRecord(
            id=f"{self.version}/{stage}/{kind}/index",
            version=self.version,
            stage=stage,
            kind=f"{kind}_index",
            name=title,
            text=body,
            rel_path=rel_path,
        )
        return self._finish(RenderedPage(rel_path, stage, f"{kind}_index", title, source, body), [root])

    def render_auxiliary(self, name: str, title: str, markdown: str) -> RenderedUnit:
        rel_path = auxiliary_rel_path(name)
        body = f"# {title}\n\n{markdown}"
        root = ChunkRecord(
            id=f"{self.version}/auxiliary/auxiliary/{name}",
            version=self.version,
            stage="auxiliary",
            kind="auxiliary",
            name=name,
            text=body,
            rel_path=rel_path,
        )
        page = RenderedPage(rel_path, "auxiliary", "auxiliary", name, f"auxiliary/{name}.html", body)
        return self._finish(page, [root], counter="pages")

    # -- helpers ------------------------------------------------------------

    def _finish(self, page: RenderedPage, chunks: List[ChunkRecord], counter: Optional[str] = None) -> RenderedUnit:
        page.body = self.resolver.rewrite_links(page.body, page.rel_path)
        for chunk in chunks:
            chunk.text = self.resolver.rewrite_links(chunk.text, page.rel_path)
        return RenderedUnit(page=page, chunks=chunks, counter=counter)

    def _rel_path(self, stage: str, kind: str, name: str) -> str:
        return symbol_page_path(stage, kind, name)

    def _symbol_ref(self, stage: str, name: str) -> str:
        """Link to ``name`` when the catalog knows it, plain code otherwise."""
        token = f"{stage}:{name}"
        if self.resolver.resolve(token) is not None:
            return f"[`{name}`]({token})"
        return f"`{name}`"

    def _chunk(self, stage: str, id_kind: str, kind: str, name: str, rel_path: str, text: str, **extra: Any) -> ChunkRecord:
        member = extra.get("member")
        suffix = f"#{member}" if member else ""
        ident = name[len("defines."):] if id_kind == "define" else name
        return ChunkRecord(
            id=f"{self.version}/{stage}/{id_kind}/{ident}{suffix}",
            version=self.version,
            stage=stage,
            kind=kind,
            name=name,
            text=text,
            rel_path=rel_path,
            **extra,
        )

    def _member_chunk(
        self, stage: str, id_kind: str, kind: str, name: str, rel_path: str, member: str, title: str, body: str, **extra: Any
    ) -> ChunkRecord:
        return self._chunk(
            stage, id_kind, kind, name, rel_path, f"# {title}\n\n{body}", member=member, anchor=member, **extra
        )

    # -- runtime ------------------------------------------------------------

    def _render_class(self, stage: str, source: str, item: Item) -> RenderedUnit:
        name = item["name"]
        rel_path = self._rel_path(stage, "class", name)
        md = _header(name, item.get("description"))
        if item.get("parent"):
            md += section("Parent") + f"\n- {self._symbol_ref(stage, item['parent'])}\n"
        chunks = [self._chunk(stage, "class", "class", name, rel_path, md)]

        attributes = by_order(item.get("attributes"))
        if attributes:
            md += section("Attributes")
            for attribute in attributes:
                body = self._attribute_body(attribute)
                md += f"\n### {attribute['name']}\n\n{body}"
                chunks.append(
                    self._member_chunk(
                        stage, "class", "class_attribute", name, rel_path,
                        attribute["name"], f"{name}.{attribute['name']} (attribute)", body,
                    )
                )

        methods = by_order(item.get("methods"))
        if methods:
            md += section("Methods")
            for method in methods:
                qualified = f"{name}.{method['name']}"
                body, call = self._callable_body(qualified, method)
                md += f"\n### {method['name']}\n\n{body}"
                chunks.append(
                    self._member_chunk(
                        stage, "class", "class_method", name, rel_path,
                        method["name"], f"{qualified} (method)", body, **call,
                    )
                )

        page = RenderedPage(rel_path, stage, "class", name, source, md)
        return self._finish(page, chunks, counter="classes")

    def _attribute_body(self, attribute: Item) -> str:
        if "read_type" in attribute or "write_type" in attribute:
            read_type, write_type = attribute.get("read_type"), attribute.get("write_type")
        else:
            raw = attribute.get("type")
            read_type = raw if attribute.get("read", True) else None
            write_type = raw if attribute.get("write") else None

        lines = []
        if read_type is not None:
            lines.append(f"- Read: `{render_type(read_type)}`")
        if write_type is not None:
            lines.append(f"- Write: `{render_type(write_type)}`")
        lines.append(f"- Optional: `{flag(attribute.get('optional'))}`")
        if attribute.get("subclasses"):
            lines.append("- Subclasses: " + ", ".join(f"`{s}`" for s in attribute["subclasses"]))
        body = "\n".join(lines) + "\n"
        if attribute.get("description"):
            body += f"\n{attribute['description']}\n"
        return body

    def _callable_body(self, qualified: str, item: Item) -> Tuple[str, Dict[str, Any]]:
        """Signature, call form, description, parameters, returns and examples."""
        parameters = by_order(item.get("parameters"))
        returns = by_order(item.get("return_values"))
        takes_table, table_optional = call_convention(item)
        call = call_usage(qualified, parameters, takes_table)

        body = lua_block(signature(qualified, parameters, returns))
        body += f"\nCall: `{call}`"
        if takes_table:
            body += " (table argument" + (", optional" if table_optional else "") + ")"
        body += "\n"
        if item.get("description"):
            body += f"\n{item['description']}\n"
        if item.get("subclasses"):
            body += "\n- Subclasses: " + ", ".join(f"`{s}`" for s in item["subclasses"]) + "\n"
        if parameters:
            body += section("Parameters", 4) + "\n" + field_list(parameters) + "\n"
        if returns:
            body += section("Returns", 4) + "\n" + return_list(returns) + "\n"
        if item.get("raises"):
            body += section("Raises", 4) + "\n" + return_list(item["raises"]) + "\n"
        if item.get("examples"):
            body += section("Examples", 4) + "\n" + examples_block(item["examples"])
        return body, {"call": call, "takes_table": takes_table, "table_optional": table_optional}

    def _render_concept(self, stage: str, source: str, item: Item) -> RenderedUnit:
        name = item["name"]
        rel_path = self._rel_path(stage, "concept", name)
        md = _header(name, item.get("description"))
        raw_type = item.get("type")
        if raw_type is not None:
            md += section("Type") + f"\n`{render_type(raw_type)}`\n"
            if isinstance(raw_type, dict) and raw_type.get("complex_type") == "table" and raw_type.get("parameters"):
                md += section("Fields") + "\n" + field_list(by_order(raw_type["parameters"])) + "\n"
        if item.get("examples"):
            md += section("Examples") + "\n" + examples_block(item["examples"])
        page = RenderedPage(rel_path, stage, "concept", name, source, md)
        return self._finish(page, [self._chunk(stage, "concept", "concept", name, rel_path, md)], counter="concepts")

    def _render_event(self, stage: str, source: str, item: Item) -> RenderedUnit:
        name = item["name"]
        rel_path = self._rel_path(stage, "event", name)
        md = _header(name, item.get("description"))
        if item.get("filter"):
            md += f"\n- Filter: {self._symbol_ref(stage, item['filter'])}\n"

        member_chunks = []
        data = by_order(item.get("data"))
        if data:
            md += section("Event Data")
            for entry in data:
                body = f"- Type: `{render_type(entry.get('type'))}`\n- Optional: `{flag(entry.get('optional'))}`\n"
                if entry.get("description"):
                    body += f"\n{entry['description']}\n"
                md += f"\n### {entry['name']}\n\n{body}"
                member_chunks.append(
                    self._member_chunk(
                        stage, "event", "event_field", name, rel_path,
                        entry["name"], f"{name}.{entry['name']} (event field)", body,
                    )
                )
        if item.get("examples"):
            md += section("Examples") + "\n" + examples_block(item["examples"])

        chunks = [self._chunk(stage, "event", "event", name, rel_path, md)] + member_chunks
        page = RenderedPage(rel_path, stage, "event", name, source, md)
        return self._finish(page, chunks, counter="events")

    def _define_members(self, define: Item, prefix: str = "") -> Iterator[Tuple[str, Optional[str]]]:
        """Values and nested sub-groups, flattened to dotted member names."""
        for value in by_order(define.get("values")):
            yield f"{prefix}{value['name']}", value.get("description")
        for subkey in by_order(define.get("subkeys")):
            member = f"{prefix}{subkey['name']}"
            yield member, subkey.get("description")
            yield from self._define_members(subkey, f"{member}.")

    def _render_define(self, stage: str, source: str, item: Item) -> RenderedUnit:
        group = item["name"]
        name = f"defines.{group}"
        rel_path = self._rel_path(stage, "define", group)
        md = _header(name, item.get("description"))

        member_chunks = []
        members = list(self._define_members(item))
        if members:
            md += section("Values")
            for member, description in members:
                body = f"`{name}.{member}`\n"
                if description:
                    body += f"\n{description}\n"
                md += f"\n### {member}\n\n{body}"
                member_chunks.append(
                    self._member_chunk(stage, "define", "define_value", name, rel_path, member, f"{name}.{member}", body)
                )

        chunks = [self._chunk(stage, "define", "define", name, rel_path, md)] + member_chunks
        page = RenderedPage(rel_path, stage, "define", group, source, md)
        return self._finish(page, chunks, counter="defines")

    def _render_global_function(self, stage: str, source: str, item: Item) -> RenderedUnit:
        name = item["name"]
        rel_path = self._rel_path(stage, "global_function", name)
        body, call = self._callable_body(name, item)
        md = f"# {name}\n\n{body}"
        chunk = self._chunk(stage, "global_function", "global_function", name, rel_path, md, **call)
        page = RenderedPage(rel_path, stage, "global_function", name, source, md)
        return self._finish(page, [chunk], counter="global_functions")

    def _render_global_object(self, stage: str, source: str, item: Item) -> RenderedUnit:
        name = item["name"]
        rel_path = self._rel_path(stage, "global_object", name)
        raw_type = item.get("type")
        if isinstance(raw_type, str):
            type_ref = self._symbol_ref(stage, raw_type)
        else:
            type_ref = f"`{render_type(raw_type)}`"
        md = f"# {name}\n\nType: {type_ref}\n"
        if item.get("description"):
            md += f"\n{item['description']}\n"
        page = RenderedPage(rel_path, stage, "global_object", name, source, md)
        chunk = self._chunk(stage, "global_object", "global_object", name, rel_path, md)
        return self._finish(page, [chunk], counter="global_objects")

    # -- prototype ----------------------------------------------------------

    def _property_body(self, prop: Item, *, with_override: bool) -> str:
        lines = [f"- Type: `{render_type(prop.get('type'))}`", f"- Optional: `{flag(prop.get('optional'))}`"]
        if with_override:
            lines.append(f"- Override: `{flag(prop.get('override'))}`")
        default = prop.get("default")
        if default is not None:
            lines.append(f"- Default: `{default if isinstance(default, str) else render_type(default)}`")
        body = "\n".join(lines) + "\n"
        if prop.get("description"):
            body += f"\n{prop['description']}\n"
        if prop.get("examples"):
            body += section("Examples", 4) + "\n" + examples_block(prop["examples"])
        return body

    def _properties(
        self, stage: str, id_kind: str, kind: str, name: str, rel_path: str, item: Item, *, with_override: bool
    ) -> Tuple[str, List[ChunkRecord]]:
        md = ""
        chunks: List[ChunkRecord] = []
        properties = by_order(item.get("properties"))
        if not properties:
            return md, chunks
        md += section("Properties")
        for prop in properties:
            body = self._property_body(prop, with_override=with_override)
            md += f"\n### {prop['name']}\n\n{body}"
            chunks.append(
                self._member_chunk(
                    stage, id_kind, kind, name, rel_path, prop["name"], f"{name}.{prop['name']} (property)", body
                )
            )
        return md, chunks

    def _render_prototype(self, stage: str, source: str, item: Item) -> RenderedUnit:
        name = item["name"]
        rel_path = self._rel_path(stage, "prototype", name)
        md = _header(name, item.get("description"))
        facts = []
        if item.get("typename"):
            facts.append(f"- Type name: `{item['typename']}`")
        if item.get("abstract"):
            facts.append("- Abstract: `true`")
        if facts:
            md += "\n" + "\n".join(facts) + "\n"
        if item.get("parent"):
            md += section("Parent") + f"\n- {self._symbol_ref(stage, item['parent'])}\n"
        root = self._chunk(stage, "prototype", "prototype", name, rel_path, md)

        properties_md, member_chunks = self._properties(
            stage, "prototype", "prototype_property", name, rel_path, item, with_override=True
        )
        md += properties_md
        page = RenderedPage(rel_path, stage, "prototype", name, source, md)
        return self._finish(page, [root] + member_chunks, counter="prototypes")

    def _render_type(self, stage: str, source: str, item: Item) -> RenderedUnit:
        name = item["name"]
        rel_path = self._rel_path(stage, "type", name)
        md = _header(name, item.get("description"))
        if item.get("type") is not None:
            md += section("Type") + f"\n`{render_type(item['type'])}`\n"
        if item.get("examples"):
            md += section("Examples") + "\n" + examples_block(item["examples"])
        root = self._chunk(stage, "type", "type", name, rel_path, md)

        properties_md, member_chunks = self._properties(
            stage, "type", "type_property", name, rel_path, item, with_override=False
        )
        md += properties_md
        page = RenderedPage(rel_path, stage, "type", name, source, md)
        return self._finish(page, [root] + member_chunks, counter="types")
