"""Pure-Python path tracer rendering OBJ scenes with JSON materials to JPEG images."""

__version__ = "0.1.0"