"""Link registry and formatting helpers shared by the publisher and templates."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from urllib.parse import quote

from .logging import get_logger
from .models import Doclet
from .store import DocletStore, first
from .tutorials import Tutorial

logger = get_logger("helper")

FILE_EXTENSION = ".html"
GLOBAL_NAME = "global"
CONTAINERS = ("class", "module", "external", "namespace", "mixin", "interface")
SCOPE_TO_PUNC = {"static": ".", "inner": "~", "instance": "#"}

# Characters encodeURI leaves alone.
_URI_SAFE = ";,/?:@&=+$-_.!~*'()#"
_NAMESPACE_PREFIX = re.compile(r"^(module|external|event):")
_UNSAFE_FILENAME_CHARS = re.compile(r"[\\/?*:|'\"<>]")
_VARIATION = re.compile(r"\([\s\S]*\)$")
_GENERIC_TYPE = re.compile(r"^([^<>]+?)(\.?)<(.+)>$")
_EXTERNAL_URL = re.compile(r"^(?:https?|ftp)://")
_AUTHOR = re.compile(r"^\s?([\s\S]+)\b\s+<(\S+@\S+)>\s?$")
_INLINE_TAG = re.compile(
    r"(?:\[(?P<label>[^\]]+)\])?\{@(?P<tag>linkcode|linkplain|link|tutorial)\s+(?P<body>[^}]+?)\s*\}"
)


@dataclass
class Members:
    """Doclets grouped by the kinds that get their own navigation section."""

    classes: List[Doclet] = field(default_factory=list)
    externals: List[Doclet] = field(default_factory=list)
    events: List[Doclet] = field(default_factory=list)
    globals: List[Doclet] = field(default_factory=list)
    mixins: List[Doclet] = field(default_factory=list)
    modules: List[Doclet] = field(default_factory=list)
    namespaces: List[Doclet] = field(default_factory=list)
    interfaces: List[Doclet] = field(default_factory=list)
    tutorials: List[Tutorial] = field(default_factory=list)


def htmlsafe(text: object) -> str:
    """Escape the characters that would otherwise open markup."""
    return str(text).replace("&", "&amp;").replace("<", "&lt;")


def format_default(value: object) -> str:
    """Render a ``@default`` value the way the host wrote it (``true``, ``null``)."""
    if value is None or isinstance(value, bool):
        return json.dumps(value)
    return htmlsafe(value)


def is_module_exports(doclet: Doclet) -> bool:
    """True for symbols that are a module's sole export (``module.exports = ...``)."""
    return bool(
        doclet.longname
        and doclet.longname == doclet.name
        and doclet.longname.startswith("module:")
        and doclet.kind != "module"
    )


def get_attribs(doclet: Doclet | None) -> List[str]:
    attribs: List[str] = []
    if doclet is None:
        return attribs
    if doclet.is_async:
        attribs.append("async")
    if doclet.generator:
        attribs.append("generator")
    if doclet.virtual:
        attribs.append("abstract")
    if doclet.access and doclet.access != "public":
        attribs.append(doclet.access)
    if doclet.scope and doclet.scope not in ("instance", GLOBAL_NAME):
        if doclet.kind in ("function", "member", "constant"):
            attribs.append(doclet.scope)
    if doclet.readonly and doclet.kind == "member":
        attribs.append("readonly")
    if doclet.kind == "constant":
        attribs.append("constant")
    if doclet.nullable is True:
        attribs.append("nullable")
    elif doclet.nullable is False:
        attribs.append("non-null")
    return attribs


def get_param_attribs(item: object) -> List[str]:
    """Attributes of a return value or parameter: only nullability applies."""
    nullable = getattr(item, "nullable", None)
    if nullable is True:
        return ["nullable"]
    if nullable is False:
        return ["non-null"]
    return []


def resolve_author_links(text: str) -> str:
    """Turn ``Name <user@example.com>`` into a mailto link."""
    match = _AUTHOR.match(text)
    if match:
        return f'<a href="mailto:{match.group(2)}">{htmlsafe(match.group(1))}</a>'
    return htmlsafe(text)


class TemplateHelper:
    """Per-run link registry.

    Output filenames are handed out once and remembered, so a fresh helper
    must be created for each publish run.
    """

    def __init__(self) -> None:
        self.longname_to_url: Dict[str, str] = {}
        self._files: Dict[str, str] = {}
        self._tutorials: Optional[Tutorial] = None
        self._tutorial_urls: Dict[str, str] = {}

    # ------------------------------------------------------------------
    # Filenames and links

    def get_unique_filename(self, text: str) -> str:
        basename = _NAMESPACE_PREFIX.sub(r"\1-", text or "")
        basename = _UNSAFE_FILENAME_CHARS.sub("_", basename)
        basename = basename.replace("~", "-").replace("#", "_")
        basename = _VARIATION.sub("", basename)
        basename = re.sub(r"^[.-]", "", basename)
        return self._make_unique_filename(basename or "_", text) + FILE_EXTENSION

    def register_link(self, longname: str, url: str) -> None:
        self.longname_to_url[longname] = url

    def create_link(self, doclet: Doclet) -> str:
        fragment = ""
        if doclet.kind in CONTAINERS or is_module_exports(doclet):
            filename = self._get_filename(doclet.longname)
        elif doclet.scope == GLOBAL_NAME:
            filename = self._get_filename(GLOBAL_NAME)
            fragment = self._fragment(doclet)
        else:
            filename = self._get_filename(doclet.memberof or GLOBAL_NAME)
            if doclet.name != doclet.longname:
                fragment = self._fragment(doclet)
        url = f"{filename}#{fragment}" if fragment else filename
        return quote(url, safe=_URI_SAFE)

    def linkto(
        self,
        longname: str | None,
        link_text: str | None = None,
        css_class: str | None = None,
        fragment_id: str | None = None,
    ) -> str:
        """Return an anchor for ``longname`` or plain text when it is unknown."""
        if not longname:
            return link_text or ""

        generic = _GENERIC_TYPE.match(longname)
        if generic and longname not in self.longname_to_url:
            outer, dot, args = generic.groups()
            inner = [part.strip() for part in _split_type_args(args)]
            linked_inner = ", ".join(self.linkto(part, htmlsafe(part), css_class) for part in inner)
            return f"{self.linkto(outer, htmlsafe(outer), css_class)}{dot}&lt;{linked_inner}&gt;"

        url = self.longname_to_url.get(longname)
        if url is None and _EXTERNAL_URL.match(longname):
            url = longname
        text = link_text if link_text is not None else htmlsafe(longname)
        if not url:
            return text
        if fragment_id:
            url = f"{url}#{fragment_id}"
        class_attr = f' class="{css_class}"' if css_class else ""
        return f'<a href="{url}"{class_attr}>{text}</a>'

    def resolve_links(self, html: str) -> str:
        """Replace inline ``{@link}`` and ``{@tutorial}`` markup with anchors."""

        def _replace(match: re.Match[str]) -> str:
            tag = match.group("tag")
            label = match.group("label")
            body = match.group("body").strip()
            if tag == "tutorial":
                return self.to_tutorial(
                    body, label, tag="em", classname="disabled", prefix="Tutorial: "
                )

            target, text = _split_link_body(body)
            text = label or text or target
            if tag == "linkcode":
                text = f"<code>{text}</code>"
            return self.linkto(target, text)

        return _INLINE_TAG.sub(_replace, html)

    # ------------------------------------------------------------------
    # Doclet relationships

    def get_ancestor_links(
        self, store: DocletStore, doclet: Doclet, css_class: str | None = None
    ) -> List[str]:
        links: List[str] = []
        for ancestor in _get_ancestors(store, doclet):
            text = SCOPE_TO_PUNC.get(ancestor.scope or "", "") + ancestor.name
            links.append(self.linkto(ancestor.longname, text, css_class))
        if links:
            links[-1] += SCOPE_TO_PUNC.get(doclet.scope or "", "")
        return links

    def get_members(self, store: DocletStore) -> Members:
        members = Members(
            classes=store.find({"kind": "class"}),
            externals=store.find({"kind": "external"}),
            events=store.find({"kind": "event"}),
            globals=store.find(
                {
                    "kind": ["member", "function", "constant", "typedef"],
                    "memberof": {"isUndefined": True},
                }
            ),
            mixins=store.find({"kind": "mixin"}),
            modules=store.find({"kind": "module"}),
            namespaces=store.find({"kind": "namespace"}),
            interfaces=store.find({"kind": "interface"}),
        )
        # quoted external names such as "jquery.fn" are displayed without quotes
        for doclet in members.externals:
            doclet.name = doclet.name.strip('"')
        members.globals = [doclet for doclet in members.globals if not is_module_exports(doclet)]
        return members

    def add_event_listeners(self, store: DocletStore) -> None:
        for doclet in store:
            for event_name in doclet.listens:
                event = first(store.find({"longname": event_name, "kind": "event"}))
                if event is not None and doclet.longname not in event.listeners:
                    event.listeners.append(doclet.longname)

    # ------------------------------------------------------------------
    # Tutorials

    def set_tutorials(self, root: Tutorial) -> None:
        self._tutorials = root

    def tutorial_to_url(self, name: str) -> Optional[str]:
        node = self._find_tutorial(name)
        if node is None:
            logger.error("No such tutorial: %s", name)
            return None
        url = self._tutorial_urls.get(node.name)
        if url is None:
            url = self.get_unique_filename(f"tutorial-{node.name}")
            self._tutorial_urls[node.name] = url
        return url

    def to_tutorial(
        self,
        name: str,
        content: str | None = None,
        *,
        tag: str | None = None,
        classname: str | None = None,
        prefix: str | None = None,
    ) -> str:
        node = self._find_tutorial(name)
        if node is None:
            link = f"{prefix or ''}{name}"
            if tag:
                class_attr = f' class="{classname}"' if classname else ""
                link = f"<{tag}{class_attr}>{link}</{tag}>"
            return link
        return f'<a href="{self.tutorial_to_url(name)}">{content or node.title}</a>'

    # ------------------------------------------------------------------
    # Internal helpers

    def _get_filename(self, longname: str) -> str:
        url = self.longname_to_url.get(longname)
        if url is None:
            url = self.get_unique_filename(longname)
            self.register_link(longname, url)
        return url

    def _make_unique_filename(self, filename: str, text: str) -> str:
        key = filename.lower()
        while key in self._files:
            filename += "_"
            key = filename.lower()
        self._files[key] = text
        return filename

    @staticmethod
    def _fragment(doclet: Doclet) -> str:
        punc = SCOPE_TO_PUNC.get(doclet.scope or "", "")
        if doclet.scope == "instance":
            punc = ""
        prefix = "event:" if doclet.kind == "event" else ""
        return f"{punc}{prefix}{doclet.name}"

    def _find_tutorial(self, name: str) -> Optional[Tutorial]:
        if self._tutorials is None or not name:
            return None
        return self._tutorials.find(name)


def _get_ancestors(store: DocletStore, doclet: Doclet) -> List[Doclet]:
    ancestors: List[Doclet] = []
    current: Optional[Doclet] = doclet
    seen = {doclet.longname}
    while current is not None and current.memberof:
        current = first(store.find({"longname": current.memberof}))
        if current is None or current.longname in seen:
            break
        seen.add(current.longname)
        ancestors.insert(0, current)
    return ancestors


def _split_link_body(body: str) -> tuple[str, Optional[str]]:
    if "|" in body:
        target, text = body.split("|", 1)
        return target.strip(), text.strip() or None
    parts = body.split(None, 1)
    if len(parts) == 2:
        return parts[0], parts[1].strip()
    return body, None


def _split_type_args(args: str) -> List[str]:
    parts: List[str] = []
    depth = 0
    current: List[str] = []
    for char in args:
        if char == "<":
            depth += 1
        elif char == ">":
            depth -= 1
        if char == "," and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    if current:
        parts.append("".join(current))
    return parts


__all__ = [
    "CONTAINERS",
    "GLOBAL_NAME",
    "Members",
    "SCOPE_TO_PUNC",
    "TemplateHelper",
    "get_attribs",
    "format_default",
    "get_param_attribs",
    "htmlsafe",
    "is_module_exports",
    "resolve_author_links",
]
