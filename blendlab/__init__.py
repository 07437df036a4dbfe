"""Blend-Lab: fragrance formulation analysis and compliance."""

__version__ = "0.1.0"
