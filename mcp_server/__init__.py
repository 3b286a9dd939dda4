"""
MCP server package for story-build.
"""
