"""MCP tool layer exposing ChartFit rendering."""
