# Importing the language modules registers their parsers
from apilisting.lang.java import JavaSourceParser

__all__ = ["JavaSourceParser"]
