"""
Core Package.

Contains the conversion logic:
- Span tree and edit buffer
- Node classification and static-require detection
- Dependency map construction and import naming
- Rewrite emission
"""
