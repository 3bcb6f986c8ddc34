"""Output generators for storydocs."""

from .usage_example import UsageExampleGenerator, generate_usage_example

__all__ = [
    "UsageExampleGenerator",
    "generate_usage_example",
]
