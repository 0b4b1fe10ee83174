"""Domain layer: pure types and text algorithms.

Nothing here touches the filesystem. Services and infrastructure
depend on the domain, never the reverse.
"""
