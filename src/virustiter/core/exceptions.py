"""Exception classes for virustiter."""


class VirusTiterError(Exception):
    """Base exception for all virustiter errors."""


class InvalidParameterError(VirusTiterError, ValueError):
    """Raised when a parameter or input array violates a stage's contract."""

    def __init__(self, name: str | None = None, reason: str | None = None) -> None:
        if name and reason:
            msg = f"Invalid parameter {name!r}: {reason}"
        elif name:
            msg = f"Invalid parameter: {name}"
        else:
            msg = "Invalid parameter"
        super().__init__(msg)
        self.name = name
        self.reason = reason


class MissingVariableError(VirusTiterError):
    """Raised when a required column (dose, key, or parameter) is absent."""

    def __init__(self, name: str | None = None, candidates: tuple[str, ...] = ()) -> None:
        if name:
            msg = f"Missing variable: {name}"
        elif candidates:
            msg = f"Missing variable: none of {', '.join(map(repr, candidates))} found"
        else:
            msg = "Missing variable"
        super().__init__(msg)
        self.name = name
        self.candidates = candidates


class AmbiguousGroupingError(VirusTiterError):
    """Raised when the grouping key cannot be resolved to exactly one column."""

    def __init__(self, found: tuple[str, ...] = ()) -> None:
        if found:
            msg = f"Ambiguous grouping: found {', '.join(map(repr, found))}; specify 'by'"
        else:
            msg = "Ambiguous grouping: no grouping column found; specify 'by'"
        super().__init__(msg)
        self.found = found


class ZeroCountGroupError(VirusTiterError):
    """Raised when a group has no classified objects."""

    def __init__(self, group: object = None) -> None:
        msg = f"Group has zero objects: {group}" if group is not None else "Zero objects to tally"
        super().__init__(msg)
        self.group = group


class NoPositiveDoseError(VirusTiterError):
    """Raised when no dose is positive, so log(dose) is undefined everywhere."""

    def __init__(self, n_rows: int | None = None) -> None:
        if n_rows is not None:
            msg = f"No positive dose among {n_rows} rows"
        else:
            msg = "No positive dose"
        super().__init__(msg)
        self.n_rows = n_rows


class FitError(VirusTiterError):
    """Raised when the dose-response model cannot be fit."""
