"""virustiter titer — tallies, dose-response fitting, and fit plots."""

from virustiter.titer.fit import (
    DEFAULT_TARGET_FRACTION,
    DoseResponseFit,
    InverseDose,
    get_ec63,
    get_fit,
)
from virustiter.titer.tally import get_tally, join_phenotype, resolve_dose, resolve_key

__all__ = [
    "DEFAULT_TARGET_FRACTION",
    "DoseResponseFit",
    "InverseDose",
    "format_titer",
    "get_ec63",
    "get_fit",
    "get_tally",
    "join_phenotype",
    "plot_fit",
    "resolve_dose",
    "resolve_key",
]


def __getattr__(name: str):  # type: ignore[no-untyped-def]
    """Lazy imports for matplotlib-dependent symbols."""
    if name in ("plot_fit", "format_titer"):
        from virustiter.titer import plot

        return getattr(plot, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
