"""
specforge — incremental orchestration for schema-driven code generation.
"""

__version__ = "0.1.0"
