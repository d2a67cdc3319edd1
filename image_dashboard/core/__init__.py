"""
Core modules for Image Dashboard.

This package contains pricing, the default preset catalog,
and tabular export helpers.
"""
