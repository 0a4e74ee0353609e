"""Core data models shared across docpublish components."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional, Union


@dataclass
class DocletType:
    """Type expression attached to a doclet, parameter or return value."""

    names: List[str] = field(default_factory=list)


@dataclass
class Param:
    """A parameter, property, return value or thrown exception."""

    name: Optional[str] = None
    type: Optional[DocletType] = None
    description: Optional[str] = None
    optional: bool = False
    nullable: Optional[bool] = None
    variable: bool = False
    defaultvalue: Any = None

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Param":
        return cls(
            name=payload.get("name"),
            type=_type_from_payload(payload.get("type")),
            description=payload.get("description"),
            optional=bool(payload.get("optional", False)),
            nullable=payload.get("nullable"),
            variable=bool(payload.get("variable", False)),
            defaultvalue=payload.get("defaultvalue"),
        )


@dataclass
class DocletMeta:
    """Source location of a documented symbol."""

    filename: str
    path: Optional[str] = None
    lineno: Optional[int] = None
    code: Dict[str, Any] = field(default_factory=dict)
    shortpath: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "DocletMeta":
        return cls(
            filename=str(payload.get("filename", "")),
            path=payload.get("path"),
            lineno=payload.get("lineno"),
            code=dict(payload.get("code") or {}),
            shortpath=payload.get("shortpath"),
        )


@dataclass
class Example:
    """An ``@example`` block split into its optional caption and code."""

    caption: str
    code: str


@dataclass
class Doclet:
    """Structured record describing one documented code entity."""

    kind: str
    name: str = ""
    longname: str = ""
    memberof: Optional[str] = None
    scope: Optional[str] = None
    description: Optional[str] = None
    classdesc: Optional[str] = None
    summary: Optional[str] = None
    type: Optional[DocletType] = None
    params: List[Param] = field(default_factory=list)
    returns: List[Param] = field(default_factory=list)
    properties: List[Param] = field(default_factory=list)
    exceptions: List[Param] = field(default_factory=list)
    examples: List[Union[str, Example]] = field(default_factory=list)
    see: List[str] = field(default_factory=list)
    meta: Optional[DocletMeta] = None
    access: Optional[str] = None
    virtual: bool = False
    is_async: bool = False
    generator: bool = False
    readonly: bool = False
    nullable: Optional[bool] = None
    optional: bool = False
    variable: bool = False
    undocumented: bool = False
    ignore: bool = False
    version: Optional[str] = None
    since: Optional[str] = None
    deprecated: Union[bool, str, None] = None
    author: List[str] = field(default_factory=list)
    augments: List[str] = field(default_factory=list)
    fires: List[str] = field(default_factory=list)
    listens: List[str] = field(default_factory=list)
    defaultvalue: Any = None
    readme: Optional[str] = None
    code: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    # Display fields computed by the publisher.
    signature: Optional[str] = None
    attribs: str = ""
    ancestors: List[str] = field(default_factory=list)
    id: Optional[str] = None
    modules: Optional[List["Doclet"]] = None
    listeners: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Doclet":
        """Build a doclet from a host JSON record."""
        known = {item.name for item in fields(cls)}
        values: Dict[str, Any] = {}
        extra: Dict[str, Any] = {}
        for key, value in payload.items():
            if key == "async":
                values["is_async"] = bool(value)
            elif key == "type":
                values["type"] = _type_from_payload(value)
            elif key in {"params", "returns", "properties", "exceptions"}:
                values[key] = [Param.from_dict(item) for item in value or [] if isinstance(item, dict)]
            elif key == "meta":
                values["meta"] = DocletMeta.from_dict(value) if isinstance(value, dict) else None
            elif key in {"author", "augments", "fires", "listens", "see", "examples"}:
                values[key] = [value] if isinstance(value, str) else list(value or [])
            elif key in known and key != "extra":
                values[key] = value
            else:
                extra[key] = value
        values.setdefault("kind", "")
        return cls(extra=extra, **values)

    def copy(self) -> "Doclet":
        """Return a shallow copy so display-only edits stay local."""
        return copy.copy(self)


def _type_from_payload(payload: Any) -> Optional[DocletType]:
    if isinstance(payload, DocletType):
        return payload
    if isinstance(payload, dict):
        return DocletType(names=[str(name) for name in payload.get("names") or []])
    return None


__all__ = ["Doclet", "DocletMeta", "DocletType", "Example", "Param"]
