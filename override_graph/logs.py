from __future__ import annotations

# (H) Graph loading logs
LOADING_GRAPH = "Loading graph from {path}"
LOADED_GRAPH = "Loaded {nodes} nodes and {relationships} relationships with indexes"

# (H) Hierarchy building logs
BUILDING_HIERARCHY = "Building type hierarchy from {path}"
BUILT_HIERARCHY = "Built type hierarchy with {types} types and {methods} methods"
UNKNOWN_MODIFIER = "Ignoring unknown modifier '{modifier}' on {method}"
DANGLING_RELATIONSHIP = (
    "Skipping {rel_type} relationship {from_id} -> {to_id}: endpoint is not a "
    "known type or method"
)
DUPLICATE_SUPERTYPE = "Ignoring duplicate supertype {supertype} of {type_name}"

# (H) Override resolution logs
INELIGIBLE_METHOD = "{method} cannot override: private, static or constructor"
CYCLE_GUARD_HIT = "Type {type_name} already visited, skipping"
OVERRIDDEN_FOUND = "{method} overrides {target}"
PRIVATE_CANDIDATE_DISCARDED = "Discarding private candidate {target} for {method}"
NOT_VISIBLE = "{target} is not visible from {context}, rejecting"
DECLARING_FOUND = "{method} is declared by {target}"

# (H) Override pass logs
OVERRIDE_PASS = "--- Resolving method overrides across {types} types ---"
OVERRIDE_EDGE = "Method override: {method_qn} -> {parent_method_qn}"
OVERRIDE_PASS_DONE = "Resolved {count} method overrides"

# (H) Graph export logs
EXPORT_INIT = "GraphExportIngestor initialized to write to: {path}"
EXPORT_UNRESOLVED_REL = (
    "Cannot resolve {rel_type} relationship {from_spec} -> {to_spec}. Skipping."
)
EXPORT_FLUSHING = "Flushing data to {path}..."
EXPORT_FLUSH_SUCCESS = (
    "Successfully added {rels} relationships and wrote graph to {path}"
)

# (H) Comment check logs
COMMENTS_FOUND = "Comments without (H) marker found:"
COMMENT_ERROR = "  {error}"
