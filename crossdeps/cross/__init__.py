"""
Cross-compilation support for crossdeps.

This package provides the target triple value type, the target environment
resolver (crossdeps.cross.resolver) and output rendering
(crossdeps.cross.render).
"""

from crossdeps.cross.targets import TargetTriple, as_triple

__all__ = [
    "TargetTriple",
    "as_triple",
]
