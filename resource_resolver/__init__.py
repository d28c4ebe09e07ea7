"""
Resource Resolver.

Resolves request paths to resources of a hierarchical repository tree
through ordered rewrite mappings, virtual URLs and progressive path
shortening, and maps repository paths back to external paths.
"""

__version__ = "0.1.0"
