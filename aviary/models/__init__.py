from .bird import Bird

__all__ = [
    "Bird",
]
