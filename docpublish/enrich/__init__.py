"""Doclet enrichment: derived display fields computed before rendering."""

from .doclets import attach_module_symbols, format_example, hash_to_link
from .signatures import (
    add_attribs,
    add_signature_params,
    add_signature_returns,
    add_signature_types,
    needs_signature,
)
from .sources import SourceFile, common_prefix, path_from_doclet, shorten_paths

__all__ = [
    "SourceFile",
    "add_attribs",
    "add_signature_params",
    "add_signature_returns",
    "add_signature_types",
    "attach_module_symbols",
    "common_prefix",
    "format_example",
    "hash_to_link",
    "needs_signature",
    "path_from_doclet",
    "shorten_paths",
]
