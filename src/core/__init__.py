"""
Core domain models, numerical primitives, and contracts.

This module contains the finite probability space abstraction, which is
independent of the check harness and any I/O.
"""
