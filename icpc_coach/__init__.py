"""
ICPC Coach - Codeforces Question Answering Agent
================================================

A streaming agent that answers natural-language questions about Codeforces
data by calling read-only data tools and writing Markdown prose.

This package provides:
- A rate-limited Codeforces API client
- Gym simulation reconciliation and gym recommendations
- A tool registry the model routes through
- The streaming tool-calling agent loop and its HTTP surface
"""

__version__ = "1.0.0"
