"""Space domain."""

from space.domain.space import Space

__all__ = ["Space"]
