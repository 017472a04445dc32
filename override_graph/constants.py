from enum import StrEnum


class MethodFlag(StrEnum):
    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"
    STATIC = "static"
    ABSTRACT = "abstract"
    FINAL = "final"


class TypeKind(StrEnum):
    CLASS = "Class"
    INTERFACE = "Interface"


class NodeLabel(StrEnum):
    CLASS = "Class"
    INTERFACE = "Interface"
    METHOD = "Method"


class RelationshipType(StrEnum):
    DEFINES_METHOD = "DEFINES_METHOD"
    INHERITS = "INHERITS"
    IMPLEMENTS = "IMPLEMENTS"
    OVERRIDES = "OVERRIDES"


class VisibilityMode(StrEnum):
    ALWAYS = "always"
    MODIFIERS = "modifiers"


class Color(StrEnum):
    GREEN = "green"
    YELLOW = "yellow"
    CYAN = "cyan"
    RED = "red"


class StyleModifier(StrEnum):
    BOLD = "bold"
    NONE = ""


SUPERTYPE_RELATIONSHIPS = (RelationshipType.INHERITS, RelationshipType.IMPLEMENTS)

# (H) Graph export keys
KEY_NODES = "nodes"
KEY_RELATIONSHIPS = "relationships"
KEY_NODE_ID = "node_id"
KEY_LABELS = "labels"
KEY_PROPERTIES = "properties"
KEY_FROM_ID = "from_id"
KEY_TO_ID = "to_id"
KEY_TYPE = "type"
KEY_METADATA = "metadata"
KEY_EXPORTED_AT = "exported_at"
KEY_TOTAL_NODES = "total_nodes"
KEY_TOTAL_RELATIONSHIPS = "total_relationships"

# (H) Property keys
KEY_NAME = "name"
KEY_QUALIFIED_NAME = "qualified_name"
KEY_MODIFIERS = "modifiers"
KEY_IS_CONSTRUCTOR = "is_constructor"
KEY_PARAMETERS = "parameters"

# (H) Qualified name separator
SEPARATOR_DOT = "."

# (H) Encoding
ENCODING_UTF8 = "utf-8"
JSON_INDENT = 2

# (H) Logger format
LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {message}"

# (H) Configuration defaults
DEFAULT_GRAPH_FILE = "graph.json"
DEFAULT_LOG_LEVEL = "INFO"

# (H) CLI messages
CLI_ERR_LOAD_GRAPH = "Failed to load graph: {error}"
CLI_ERR_UNKNOWN_METHOD = "Unknown method: {qualified_name}"
CLI_ERR_UNKNOWN_TYPE = "Unknown type: {qualified_name}"
CLI_ERR_QUERY_FAILED = "Override query failed: {error}"
CLI_MSG_GRAPH_SUMMARY = "Graph Summary:"
CLI_MSG_OVERRIDDEN = "{method} overrides {target}"
CLI_MSG_DECLARED_BY = "{method} is declared by {target}"
CLI_MSG_OVERRIDING = "{target} overrides {method}"
CLI_MSG_NO_OVERRIDDEN = "{method} does not override any method"
CLI_MSG_NO_OVERRIDING = "No method in {type_name} overrides {method}"
CLI_MSG_NO_OVERRIDES = "No override relationships found"
CLI_MSG_CHAIN_ARROW = " -> "

# (H) CLI table
TABLE_TITLE_OVERRIDES = "Method overrides"
TABLE_COL_METHOD = "Method"
TABLE_COL_OVERRIDES = "Overrides"

# (H) Comment checker
ALLOWED_COMMENT_MARKERS = frozenset({"(H)", "type:", "noqa", "pyright", "ty:"})
QUOTE_CHARS = frozenset({'"', "'"})
TRIPLE_QUOTES = ('"""', "'''")
COMMENT_CHAR = "#"
ESCAPE_CHAR = "\\"
PY_EXTENSION = ".py"
COMMENT_CHECK_DEFAULT_PATHS = ("override_graph", "scripts")
