"""Infrastructure layer: vault filesystem access and persisted state.

This layer depends on stdlib, third-party libs and the domain layer.
It must never import from services, commands, or output.
"""
