"""
Graph data models.

Entities, relationships and stored graph records as submitted by callers
and returned by the REST gateway and MCP tools.  Unknown keys are kept
(``extra="allow"``) so a submitted graph round-trips without loss.
Field values are taken leniently: numeric ids become strings and
``null`` text or properties fall back to empty values.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

_ITEM_CONFIG = ConfigDict(extra="allow", coerce_numbers_to_str=True)


def _empty_if_null(value: Any, info: ValidationInfo) -> Any:
    if value is None:
        return {} if info.field_name == "properties" else ""
    return value


class Entity(BaseModel):
    """A node in the graph."""

    model_config = _ITEM_CONFIG

    id: str = Field("", description="Identifier, unique within a graph")
    type: str = Field("", description="Entity type, e.g. Team or Process")
    name: str = Field("", description="Display name")
    properties: dict[str, Any] = Field(
        default_factory=dict, description="Arbitrary entity properties"
    )

    @field_validator("id", "type", "name", "properties", mode="before")
    @classmethod
    def _null_to_empty(cls, value: Any, info: ValidationInfo) -> Any:
        return _empty_if_null(value, info)


class Relationship(BaseModel):
    """A directed, typed edge between two entity ids."""

    model_config = _ITEM_CONFIG

    source: str = Field("", description="Source entity id")
    target: str = Field("", description="Target entity id")
    type: str = Field("", description="Relationship type, e.g. PERFORMS")
    properties: dict[str, Any] = Field(
        default_factory=dict, description="Arbitrary relationship properties"
    )

    @field_validator("source", "target", "type", "properties", mode="before")
    @classmethod
    def _null_to_empty(cls, value: Any, info: ValidationInfo) -> Any:
        return _empty_if_null(value, info)


class Graph(BaseModel):
    """Entities plus relationships, both in caller insertion order."""

    model_config = ConfigDict(extra="allow")

    entities: list[Entity] = Field(..., description="Graph nodes")
    relationships: list[Relationship] = Field(..., description="Graph edges")


class GraphMetadata(BaseModel):
    """Derived counts and distinct types for a stored graph."""

    entityCount: int = Field(..., description="Number of entities")
    relationshipCount: int = Field(..., description="Number of relationships")
    entityTypes: list[str] = Field(
        default_factory=list, description="Distinct entity types, first-seen order"
    )
    relationshipTypes: list[str] = Field(
        default_factory=list, description="Distinct relationship types, first-seen order"
    )

    @classmethod
    def from_graph(cls, graph: Graph) -> "GraphMetadata":
        return cls(
            entityCount=len(graph.entities),
            relationshipCount=len(graph.relationships),
            entityTypes=list(dict.fromkeys(e.type for e in graph.entities)),
            relationshipTypes=list(dict.fromkeys(r.type for r in graph.relationships)),
        )


class GraphRecord(BaseModel):
    """A graph as held by the store, with its display metadata."""

    graph: Graph
    visualizationType: str = "force-directed"
    title: str = "Graph Visualization"
    timestamp: int = Field(..., description="Last write time, epoch milliseconds")
    metadata: GraphMetadata
