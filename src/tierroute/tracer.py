"""
Debug tracing infrastructure for tierroute.

When debug mode is enabled, the layout generator records a snapshot of the
data produced by every stage of a layout pass. This is primarily useful for:
1. Understanding why an edge got the lane it did (or none at all)
2. Seeing how the spacing adjuster moved each tier
3. Writing targeted tests against intermediate results

Usage:
    >>> generator = GraphLayoutGenerator()
    >>> result = generator.layout(nodes, edges, debug=True)
    >>> trace = generator.get_trace()
    >>> print(trace.summary())
    >>> trace.dump_to_file("layout_trace.txt")

The trace captures:
- coarse_layout: positions returned by the coarse layout strategy
- tiers: detected tiers and edge counts per gap
- spacing_adjusted: positions after the gaps were resized
- overrides_applied: positions after manual placements were merged in
- routes: lane per routed edge, and the edges left unrouted
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class PipelineStage:
    """
    Snapshot of state at a pipeline stage.

    Attributes:
        name: Name of this pipeline stage
        data: Dictionary of relevant data at this stage
    """

    name: str
    data: Dict[str, Any]

    def __str__(self) -> str:
        lines = [f"=== Stage: {self.name} ==="]
        for key, value in self.data.items():
            # Truncate long values
            str_val = str(value)
            if len(str_val) > 100:
                str_val = str_val[:100] + "..."
            lines.append(f"  {key}: {str_val}")
        return "\n".join(lines)


@dataclass
class LayoutTrace:
    """
    Complete trace of one layout pass.

    Attributes:
        stages: List of pipeline stages with their data
        direction: The flow direction (TB or LR)
        node_count: Number of input nodes
        edge_count: Number of input edges
    """

    stages: List[PipelineStage] = field(default_factory=list)
    direction: str = "TB"
    node_count: int = 0
    edge_count: int = 0

    def add_stage(self, name: str, data: Dict[str, Any]) -> None:
        """
        Add a pipeline stage snapshot.

        Args:
            name: Name of the stage (e.g., "tiers")
            data: Dictionary of relevant data at this stage
        """
        self.stages.append(PipelineStage(name, data.copy()))

    def get_stage(self, name: str) -> Optional[PipelineStage]:
        """Get a specific pipeline stage by name."""
        for stage in self.stages:
            if stage.name == name:
                return stage
        return None

    def stage_names(self) -> List[str]:
        return [stage.name for stage in self.stages]

    def summary(self) -> str:
        """Generate a human-readable summary of the trace."""
        lines = [
            "=" * 60,
            "LAYOUT TRACE SUMMARY",
            "=" * 60,
            "",
            f"Direction: {self.direction}",
            f"Nodes: {self.node_count}",
            f"Edges: {self.edge_count}",
            "",
            f"Pipeline stages: {len(self.stages)}",
        ]
        for stage in self.stages:
            lines.append(f"  {stage.name}")

        routes = self.get_stage("routes")
        if routes is not None:
            lines.extend(
                [
                    "",
                    f"Routed edges: {len(routes.data.get('lanes', {}))}",
                    f"Unrouted edges: {len(routes.data.get('unrouted', []))}",
                ]
            )

        return "\n".join(lines)

    def dump(self) -> str:
        """Generate a complete dump of the trace, with every stage's data."""
        lines = [self.summary(), "", "=" * 60, "DETAILED TRACE", "=" * 60, ""]
        for stage in self.stages:
            lines.append(str(stage))
            lines.append("")
        return "\n".join(lines)

    def dump_to_file(self, filename: str) -> None:
        """Write the complete trace dump to a file."""
        with open(filename, "w", encoding="utf-8") as f:
            f.write(self.dump())
