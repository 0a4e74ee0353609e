"""Signature and type-signature strings for functions, classes and members."""

from __future__ import annotations

from typing import Iterable, List, Optional

from ..helper import TemplateHelper, get_attribs, get_param_attribs, htmlsafe
from ..models import Doclet, Param


def needs_signature(doclet: Doclet) -> bool:
    """Functions and classes always get a signature; typedefs only when they describe a function."""
    if doclet.kind in ("function", "class"):
        return True
    if doclet.kind == "typedef" and doclet.type is not None:
        return any(name.lower() == "function" for name in doclet.type.names)
    return False


def format_params(params: Iterable[Param]) -> str:
    """Return ``(a, [b])`` for the top-level parameters; dotted sub-properties are skipped."""
    names = [_format_item_name(param) for param in params if param.name and "." not in param.name]
    return f"({', '.join(names)})"


def format_returns(
    returns: Iterable[Param], helper: TemplateHelper, *, hide_return_values: bool = False
) -> str:
    returns = list(returns)
    if not returns or hide_return_values:
        return ""

    # Attributes of every @returns tag are merged into one list.
    attribs: List[str] = []
    for item in returns:
        for attrib in get_param_attribs(item):
            if attrib not in attribs:
                attribs.append(attrib)

    types: List[str] = []
    for item in returns:
        types.extend(_item_type_strings(item, helper))
    if not types:
        return ""
    return f" &rarr; {_attribs_string(attribs)}{{{'|'.join(types)}}}"


def format_types(doclet: Doclet, helper: TemplateHelper) -> str:
    types = _item_type_strings(doclet, helper)
    return f" :{'|'.join(types)}" if types else ""


def add_signature_params(doclet: Doclet) -> None:
    doclet.signature = f"{doclet.signature or ''}{format_params(doclet.params)}"


def add_signature_returns(
    doclet: Doclet, helper: TemplateHelper, *, hide_return_values: bool = False
) -> None:
    returns = format_returns(doclet.returns, helper, hide_return_values=hide_return_values)
    doclet.signature = (
        f'<span class="signature">{doclet.signature or ""}</span>'
        f'<span class="type-signature">{returns}</span>'
    )


def add_signature_types(doclet: Doclet, helper: TemplateHelper) -> None:
    doclet.signature = (
        f'{doclet.signature or ""}<span class="type-signature">{format_types(doclet, helper)}</span>'
    )


def add_attribs(doclet: Doclet) -> None:
    doclet.attribs = f'<span class="type-signature">{_attribs_string(get_attribs(doclet))}</span>'


def _format_item_name(item: Param) -> str:
    attributes = _signature_attributes(item)
    name = item.name or ""
    if item.variable:
        name = f"&hellip;{name}"

    if "opt" in attributes:
        name = f'<span class="optional-param">[{name}]</span>'
        attributes.remove("opt")
    if attributes:
        name = f'{name}<span class="signature-attributes">{", ".join(attributes)}</span>'
    return name


def _signature_attributes(item: Param) -> List[str]:
    attributes: List[str] = []
    if item.optional:
        attributes.append("opt")
    if item.nullable is True:
        attributes.append("nullable")
    elif item.nullable is False:
        attributes.append("non-null")
    return attributes


def _item_type_strings(item: Optional[object], helper: TemplateHelper) -> List[str]:
    item_type = getattr(item, "type", None)
    if item_type is None:
        return []
    return [helper.linkto(name, htmlsafe(name)) for name in item_type.names]


def _attribs_string(attribs: List[str]) -> str:
    if not attribs:
        return ""
    return htmlsafe(f"({', '.join(attribs)}) ")
