"""Schema resolver and type mapper.

Public API:
    :func:`map_schema_to_type`: Describe one schema node as a
        :class:`~specir.models.TypeMapping`.
    :func:`map_entity`: Map every property of a named schema.
    :func:`synthesize_example`: Best-effort example value for a node.
"""

from specir.mapping.examples import synthesize_example
from specir.mapping.type_mapper import entity_class_name, map_entity, map_schema_to_type

__all__ = [
    "entity_class_name",
    "map_entity",
    "map_schema_to_type",
    "synthesize_example",
]
