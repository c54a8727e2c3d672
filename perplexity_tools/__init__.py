# =============================================================================
# perplexity_tools/__init__.py
# =============================================================================
# This package contains the FastMCP tool server.
#
# ARCHITECTURAL ROLE:
#   perplexity_tools/ is the "translation layer" between MCP and the
#   Perplexity client in perplexity_core/.  It:
#     1. Declares the perplexity_ask tool and its input schema
#     2. Rejects unknown tool names and malformed arguments
#     3. Calls PerplexityClient and wraps the answer as MCP text content
#     4. Turns every failure into a structured MCP error
#
# WHAT THE TOOL SERVER DOES NOT DO:
#   - It does NOT build HTTP requests or format citations (perplexity_core/)
#   - It does NOT read the environment anywhere except main()
# =============================================================================
