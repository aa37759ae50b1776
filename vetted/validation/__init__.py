"""Declarative Validation Engine

Schemas are immutable trees of nodes built with chained constructors.
One pass over an input collects every issue, each carrying a JSON-style
path, a stable code and a truncated copy of the received value.

Key Features:
- Primitives with chainable checks and opt-in coercion
- Collections, objects with unknown-key policies and graph transforms
- Modifiers (optional, nullable, nullish, default, catch)
- Combinators (union, discriminated_union, intersection, lazy, pipe)
- Lenient per-field parsing with best-effort aggregates
- Error shaping (flatten, treeify, prettify, wire envelope) and i18n

Usage:
    from vetted.validation import object_, string, number, parse

    user = object_({
        "name": string().min(2).max(50),
        "email": string().email(),
        "age": number().int().non_negative().optional(),
    })
    result = parse(user, b'{"name": "Ada", "email": "ada@example.com"}')
"""

# Value model
from .values import (
    MISSING,
    canonical_text,
    project,
    read_file,
    to_value,
)

# Issues
from .errors import (
    Field,
    Index,
    IssueCode,
    InvalidType,
    TooSmall,
    TooBig,
    InvalidString,
    NotInt,
    NotFinite,
    MissingField,
    UnrecognizedField,
    RecursionLimitExceeded,
    Custom,
    Issue,
    IssueBuilder,
    ValidationError,
    format_path,
)

# Schema core and modifiers
from .schema import (
    Schema,
    ParseContext,
    Check,
    Rule,
    OptionalSchema,
    NullableSchema,
    NullishSchema,
    DefaultSchema,
    CatchSchema,
    RequiredSchema,
    RefineSchema,
    SuperRefineSchema,
    TransformSchema,
    PipeSchema,
    DescribeSchema,
    MessageSchema,
    optional,
)

# Coercion
from .coercion import (
    CoercionRule,
    ExplicitCoercion,
    coerce,
)

# Primitives
from .primitives import (
    StringSchema,
    NumberSchema,
    BooleanSchema,
    LiteralSchema,
    EnumSchema,
    AnySchema,
    DateSchema,
    DateTimeSchema,
    string,
    number,
    boolean,
    literal,
    enum_,
    any_,
    date,
    datetime,
)

# Collections
from .collections import (
    ArraySchema,
    TupleSchema,
    RecordSchema,
    MapSchema,
    SetSchema,
    array,
    tuple_,
    record,
    map_,
    set_,
)

# Objects
from .objects import (
    ObjectSchema,
    object_,
)

# Combinators
from .combinators import (
    UnionSchema,
    DiscriminatedUnionSchema,
    IntersectionSchema,
    LazySchema,
    CustomSchema,
    CustomIssue,
    PreprocessSchema,
    union,
    discriminated_union,
    intersection,
    lazy,
    custom,
    preprocess,
)

# Lenient engine
from .lenient import (
    FieldResult,
    ParseResult,
)

# Boundaries
from .boundaries import (
    BoundaryValidator,
    parse,
    parse_lenient,
    validate,
    is_valid,
    validate_output,
)

# Error shaping
from .formatting import (
    FlatError,
    ErrorTree,
    ValidationIssueBody,
    ValidationErrorBody,
    flatten_error,
    treeify_error,
    prettify_error,
    to_wire,
    to_wire_dict,
)

# i18n
from .i18n import (
    MapResolver,
    FnResolver,
    translate_error,
    english,
    russian,
    german,
    spanish,
)

__all__ = [
    # Value model
    "MISSING", "canonical_text", "project", "read_file", "to_value",
    # Issues
    "Field", "Index", "IssueCode", "InvalidType", "TooSmall", "TooBig", "InvalidString",
    "NotInt", "NotFinite", "MissingField", "UnrecognizedField", "RecursionLimitExceeded",
    "Custom", "Issue", "IssueBuilder", "ValidationError", "format_path",
    # Schema core
    "Schema", "ParseContext", "Check", "Rule",
    "OptionalSchema", "NullableSchema", "NullishSchema", "DefaultSchema", "CatchSchema",
    "RequiredSchema", "RefineSchema", "SuperRefineSchema", "TransformSchema", "PipeSchema",
    "DescribeSchema", "MessageSchema", "optional",
    # Coercion
    "CoercionRule", "ExplicitCoercion", "coerce",
    # Primitives
    "StringSchema", "NumberSchema", "BooleanSchema", "LiteralSchema", "EnumSchema",
    "AnySchema", "DateSchema", "DateTimeSchema",
    "string", "number", "boolean", "literal", "enum_", "any_", "date", "datetime",
    # Collections
    "ArraySchema", "TupleSchema", "RecordSchema", "MapSchema", "SetSchema",
    "array", "tuple_", "record", "map_", "set_",
    # Objects
    "ObjectSchema", "object_",
    # Combinators
    "UnionSchema", "DiscriminatedUnionSchema", "IntersectionSchema", "LazySchema",
    "CustomSchema", "CustomIssue", "PreprocessSchema",
    "union", "discriminated_union", "intersection", "lazy", "custom", "preprocess",
    # Lenient
    "FieldResult", "ParseResult",
    # Boundaries
    "BoundaryValidator", "parse", "parse_lenient", "validate", "is_valid", "validate_output",
    # Error shaping
    "FlatError", "ErrorTree", "ValidationIssueBody", "ValidationErrorBody",
    "flatten_error", "treeify_error", "prettify_error", "to_wire", "to_wire_dict",
    # i18n
    "MapResolver", "FnResolver", "translate_error", "english", "russian", "german", "spanish",
]
