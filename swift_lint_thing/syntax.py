"""
Read-only model of what the syntax-analysis service reports for one file:
the declaration tree ("structure") and the flat list of classified tokens
("syntax map"). The JSON decoders accept SourceKit's key names, which is what
`sourcekitten structure` and `sourcekitten syntax` print.
"""

from __future__ import annotations

import enum
import functools
from dataclasses import dataclass, field
from typing import Any

from .positions import LineIndex

_DECL = "source.lang.swift.decl."
_SYNTAX = "source.lang.swift.syntaxtype."


class DeclarationKind(enum.Enum):
    CLASS = _DECL + "class"
    STRUCT = _DECL + "struct"
    ENUM = _DECL + "enum"
    ENUM_CASE = _DECL + "enumcase"
    ENUM_ELEMENT = _DECL + "enumelement"
    PROTOCOL = _DECL + "protocol"
    TYPEALIAS = _DECL + "typealias"
    GENERIC_TYPE_PARAM = _DECL + "generic_type_param"
    EXTENSION = _DECL + "extension"
    EXTENSION_CLASS = _DECL + "extension.class"
    EXTENSION_STRUCT = _DECL + "extension.struct"
    EXTENSION_ENUM = _DECL + "extension.enum"
    EXTENSION_PROTOCOL = _DECL + "extension.protocol"
    FUNCTION_ACCESSOR_ADDRESS = _DECL + "function.accessor.address"
    FUNCTION_ACCESSOR_DIDSET = _DECL + "function.accessor.didset"
    FUNCTION_ACCESSOR_GETTER = _DECL + "function.accessor.getter"
    FUNCTION_ACCESSOR_MUTABLEADDRESS = _DECL + "function.accessor.mutableaddress"
    FUNCTION_ACCESSOR_SETTER = _DECL + "function.accessor.setter"
    FUNCTION_ACCESSOR_WILLSET = _DECL + "function.accessor.willset"
    FUNCTION_CONSTRUCTOR = _DECL + "function.constructor"
    FUNCTION_DESTRUCTOR = _DECL + "function.destructor"
    FUNCTION_FREE = _DECL + "function.free"
    FUNCTION_METHOD_CLASS = _DECL + "function.method.class"
    FUNCTION_METHOD_INSTANCE = _DECL + "function.method.instance"
    FUNCTION_METHOD_STATIC = _DECL + "function.method.static"
    FUNCTION_OPERATOR = _DECL + "function.operator"
    FUNCTION_SUBSCRIPT = _DECL + "function.subscript"
    VAR_CLASS = _DECL + "var.class"
    VAR_GLOBAL = _DECL + "var.global"
    VAR_INSTANCE = _DECL + "var.instance"
    VAR_LOCAL = _DECL + "var.local"
    VAR_PARAMETER = _DECL + "var.parameter"
    VAR_STATIC = _DECL + "var.static"
    # Anything the service reports that is not a declaration we know about.
    UNCLASSIFIED = ""

    @classmethod
    def from_raw(cls, raw: str | None) -> DeclarationKind:
        if not raw:
            return cls.UNCLASSIFIED
        try:
            return cls(raw)
        except ValueError:
            return cls.UNCLASSIFIED


TYPE_KINDS = frozenset(
    {
        DeclarationKind.CLASS,
        DeclarationKind.STRUCT,
        DeclarationKind.TYPEALIAS,
        DeclarationKind.ENUM,
        DeclarationKind.ENUM_ELEMENT,
    }
)

TYPE_BODY_KINDS = frozenset({DeclarationKind.CLASS, DeclarationKind.STRUCT, DeclarationKind.ENUM})

VARIABLE_KINDS = frozenset(
    {
        DeclarationKind.VAR_CLASS,
        DeclarationKind.VAR_GLOBAL,
        DeclarationKind.VAR_INSTANCE,
        DeclarationKind.VAR_LOCAL,
        DeclarationKind.VAR_PARAMETER,
        DeclarationKind.VAR_STATIC,
    }
)

FUNCTION_KINDS = frozenset(
    {
        DeclarationKind.FUNCTION_ACCESSOR_ADDRESS,
        DeclarationKind.FUNCTION_ACCESSOR_DIDSET,
        DeclarationKind.FUNCTION_ACCESSOR_GETTER,
        DeclarationKind.FUNCTION_ACCESSOR_MUTABLEADDRESS,
        DeclarationKind.FUNCTION_ACCESSOR_SETTER,
        DeclarationKind.FUNCTION_ACCESSOR_WILLSET,
        DeclarationKind.FUNCTION_CONSTRUCTOR,
        DeclarationKind.FUNCTION_DESTRUCTOR,
        DeclarationKind.FUNCTION_FREE,
        DeclarationKind.FUNCTION_METHOD_CLASS,
        DeclarationKind.FUNCTION_METHOD_INSTANCE,
        DeclarationKind.FUNCTION_METHOD_STATIC,
        DeclarationKind.FUNCTION_OPERATOR,
        DeclarationKind.FUNCTION_SUBSCRIPT,
    }
)


class TokenKind(enum.Enum):
    KEYWORD = _SYNTAX + "keyword"
    IDENTIFIER = _SYNTAX + "identifier"
    TYPEIDENTIFIER = _SYNTAX + "typeidentifier"
    COMMENT = _SYNTAX + "comment"
    COMMENT_MARK = _SYNTAX + "comment.mark"
    COMMENT_URL = _SYNTAX + "comment.url"
    DOC_COMMENT = _SYNTAX + "doccomment"
    DOC_COMMENT_FIELD = _SYNTAX + "doccomment.field"
    STRING = _SYNTAX + "string"
    STRING_INTERPOLATION_ANCHOR = _SYNTAX + "string_interpolation_anchor"
    NUMBER = _SYNTAX + "number"
    ATTRIBUTE_BUILTIN = _SYNTAX + "attribute.builtin"
    ATTRIBUTE_ID = _SYNTAX + "attribute.id"
    BUILDCONFIG_KEYWORD = _SYNTAX + "buildconfig.keyword"
    BUILDCONFIG_ID = _SYNTAX + "buildconfig.id"
    PLACEHOLDER = _SYNTAX + "placeholder"
    PARAMETER = _SYNTAX + "parameter"


@dataclass(frozen=True)
class SyntaxToken:
    offset: int
    length: int
    kind: str

    @property
    def token_kind(self) -> TokenKind | None:
        try:
            return TokenKind(self.kind)
        except ValueError:
            return None


@dataclass(frozen=True)
class SyntaxNode:
    kind: DeclarationKind = DeclarationKind.UNCLASSIFIED
    name: str | None = None
    offset: int | None = None
    body_offset: int | None = None
    body_length: int | None = None
    children: tuple[SyntaxNode, ...] = ()


@dataclass(frozen=True)
class SourceFile:
    path: str | None
    contents: str
    structure: SyntaxNode = field(default_factory=SyntaxNode)
    tokens: tuple[SyntaxToken, ...] = ()

    @functools.cached_property
    def line_index(self) -> LineIndex:
        return LineIndex(self.contents)


class SyntaxFormatError(ValueError):
    pass


def _optional(d: dict[str, Any], key: str, typ: type, where: str) -> Any:
    if key not in d or d[key] is None:
        return None
    v = d[key]
    # bool is an int subclass; SourceKit never sends booleans for these keys.
    if not isinstance(v, typ) or isinstance(v, bool):
        raise SyntaxFormatError(f"Key '{key}' in {where} must be {typ.__name__}")
    return v


def _expect(d: dict[str, Any], key: str, typ: type, where: str) -> Any:
    if key not in d:
        raise SyntaxFormatError(f"Missing key '{key}' in {where}")
    v = _optional(d, key, typ, where)
    if v is None:
        raise SyntaxFormatError(f"Key '{key}' in {where} must be {typ.__name__}")
    return v


def node_from_dict(raw: Any, where: str = "structure") -> SyntaxNode:
    if not isinstance(raw, dict):
        raise SyntaxFormatError(f"{where} must be an object")

    subs = raw.get("key.substructure", [])
    if not isinstance(subs, list):
        raise SyntaxFormatError(f"{where}.key.substructure must be a list")

    return SyntaxNode(
        kind=DeclarationKind.from_raw(_optional(raw, "key.kind", str, where)),
        name=_optional(raw, "key.name", str, where),
        offset=_optional(raw, "key.offset", int, where),
        body_offset=_optional(raw, "key.bodyoffset", int, where),
        body_length=_optional(raw, "key.bodylength", int, where),
        children=tuple(
            node_from_dict(sub, f"{where}.key.substructure[{i}]") for i, sub in enumerate(subs)
        ),
    )


def tokens_from_list(raw: Any) -> tuple[SyntaxToken, ...]:
    if not isinstance(raw, list):
        raise SyntaxFormatError("syntax map must be a list")
    tokens: list[SyntaxToken] = []
    for i, rt in enumerate(raw):
        where = f"syntax[{i}]"
        if not isinstance(rt, dict):
            raise SyntaxFormatError(f"{where} must be an object")
        tokens.append(
            SyntaxToken(
                offset=_expect(rt, "offset", int, where),
                length=_expect(rt, "length", int, where),
                kind=_expect(rt, "type", str, where),
            )
        )
    tokens.sort(key=lambda t: t.offset)
    return tuple(tokens)
