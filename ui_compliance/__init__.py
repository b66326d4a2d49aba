"""UI compliance validator.

Static analysis for React/TypeScript component sources: style,
design-system usage, data classification and accessibility rules, with
per-category scoring and textual autofixes.
"""

__version__ = "0.1.0"
