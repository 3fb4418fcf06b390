"""Core utilities and shared infrastructure.

- config: Configuration loading and validation
- constants: WFS namespaces, request parameters, exit codes
- exceptions: Custom exception hierarchy
"""
