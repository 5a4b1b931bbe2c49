"""LSP transport seams, wire messages and request dispatch."""
