"""Application layer: ports and the log writer use case."""
