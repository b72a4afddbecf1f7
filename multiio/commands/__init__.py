from . import cat, size
