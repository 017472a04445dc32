# (H) Backing model errors
UNKNOWN_TYPE = "Type '{type_name}' is not part of the type hierarchy"
GRAPH_FILE_NOT_FOUND = "Graph file not found: {path}"
GRAPH_MALFORMED = "Graph file {path} is malformed: {error}"
NODES_NOT_LOADED = "Nodes should be loaded"
RELATIONSHIPS_NOT_LOADED = "Relationships should be loaded"
DATA_NOT_LOADED = "Data should be loaded"
METHOD_NAME_REQUIRED = "Method node {node_id} has no name"
TYPE_NAME_REQUIRED = "Type node {node_id} has no qualified name"

# (H) Contract violations
NO_DECLARING_TYPE = "Method '{method}' has no declaring type"
HIERARCHY_FROZEN = "Type hierarchy is a read-only snapshot and cannot be modified"
OVERRIDE_CYCLE = (
    "Override chain of '{method}' revisits '{target}'; the hierarchy reports a "
    "method as overriding itself"
)

# (H) Configuration errors
UNKNOWN_VISIBILITY_MODE = "Unknown visibility mode '{mode}'. Available: {available}"


# (H) Exception classes
class OverrideGraphError(Exception):
    pass


class ModelBackingError(OverrideGraphError):
    pass


class ContractViolation(OverrideGraphError):
    pass
