"""Graph Visualizations MCP server — graph store and query operations exposed as tools."""
