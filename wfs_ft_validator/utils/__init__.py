"""Shared helpers: XML parsing and WFS request shaping."""
