"""
gover

Save builds of a Go toolchain checkout keyed by git revision, list them,
and run commands against any saved toolchain.
"""

__version__ = "0.1.0"
