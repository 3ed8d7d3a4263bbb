"""Performance benchmarks for numcore.

This package contains microbenchmarks for hot paths in the library,
including Gauss-Kronrod evaluation and the L-BFGS iteration.
"""
