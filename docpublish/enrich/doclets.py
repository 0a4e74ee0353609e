"""Per-doclet display rewrites: examples, see-tags and module symbols."""

from __future__ import annotations

import re
from collections import defaultdict
from typing import Dict, List, Sequence

from ..helper import TemplateHelper
from ..models import Doclet, Example

_CAPTION = re.compile(r"^\s*<caption>([\s\S]+?)</caption>(\s*[\n\r])([\s\S]+)$", re.IGNORECASE)
_FRAGMENT = re.compile(r"^(#.+)")


def format_example(example: str) -> Example:
    """Split a leading ``<caption>`` off an example; otherwise keep it verbatim."""
    match = _CAPTION.match(example)
    if match:
        return Example(caption=match.group(1), code=match.group(3))
    return Example(caption="", code=example)


def hash_to_link(helper: TemplateHelper, doclet: Doclet, see: str) -> str:
    """Link ``#fragment`` see-tags to the doclet's own page."""
    if not _FRAGMENT.match(see):
        return see
    url = helper.create_link(doclet)
    url = re.sub(r"(#.+|$)", lambda _match: see, url, count=1)
    return f'<a href="{url}">{see}</a>'


def attach_module_symbols(doclets: Sequence[Doclet], modules: Sequence[Doclet]) -> None:
    """Attach classes/functions that share a module's longname to ``module.modules``.

    Such a symbol is the module's only export. Only symbols with a description
    are kept, except classes, whose constructor heading is always shown. The
    attached symbols are copies, so the renamed display name does not reach the
    shared record collection.
    """
    symbols: Dict[str, List[Doclet]] = defaultdict(list)
    for symbol in doclets:
        if symbol.kind in ("class", "function"):
            symbols[symbol.longname].append(symbol)

    for module in modules:
        if module.longname not in symbols:
            continue
        attached: List[Doclet] = []
        for symbol in symbols[module.longname]:
            if not (symbol.description or symbol.kind == "class"):
                continue
            symbol = symbol.copy()
            symbol.name = symbol.name.replace("module:", '(require("', 1) + '"))'
            attached.append(symbol)
        module.modules = attached
