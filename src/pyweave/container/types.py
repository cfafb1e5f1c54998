"""Container types and enums."""

from enum import Enum, auto


class Lifetime(Enum):
    """Service lifetime.

    * ``SINGLETON`` — one instance per root provider.
    * ``SCOPED``    — one instance per scope; the root provider acts as its
      own scope.
    * ``TRANSIENT`` — a new instance on every resolution.
    """

    SINGLETON = auto()
    SCOPED = auto()
    TRANSIENT = auto()

    @classmethod
    def parse(cls, value: "str | Lifetime") -> "Lifetime":
        """Parse a lifetime name such as ``"scoped"`` (case-insensitive)."""
        if isinstance(value, Lifetime):
            return value
        try:
            return cls[str(value).strip().upper()]
        except KeyError:
            names = ", ".join(m.name.lower() for m in cls)
            raise ValueError(f"Unknown lifetime '{value}'; expected one of: {names}") from None
