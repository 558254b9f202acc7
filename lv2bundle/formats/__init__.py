"""Document formats read and written by the pipeline."""

from .turtle import TurtleParser, TurtleWriter

__all__ = ['TurtleParser', 'TurtleWriter']
