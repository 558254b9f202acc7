"""
Turtle Format Support

Reading and writing of the Turtle documents that make up an LV2 bundle.

Usage:
    from lv2bundle.formats.turtle import TurtleParser, TurtleWriter

    document = TurtleParser().parse(data, "file:///amp.lv2/manifest.ttl", "manifest.ttl")
    text = TurtleWriter().write(document, base_uri="file:///amp.lv2/")
"""

from .parser import TurtleParser, locate_offset
from .writer import TurtleWriter

__all__ = [
    'TurtleParser',
    'TurtleWriter',
    'locate_offset',
]
