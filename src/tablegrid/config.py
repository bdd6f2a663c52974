from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, List, Union


class ConfigValidationError(ValueError):
    """Raised when a :class:`TableConfig` field is out of range."""


def _check_number(name: str, value: Any, kind: type = float) -> None:
    # bool is an int subclass but never a valid measure
    accepted = (int,) if kind is int else (int, float)
    if isinstance(value, bool) or not isinstance(value, accepted):
        raise ConfigValidationError(
            f"{name}={value!r} must be {'an integer' if kind is int else 'a number'}"
        )


def _check_positive(name: str, value: Any) -> None:
    _check_number(name, value)
    if value <= 0:
        raise ConfigValidationError(f"{name}={value} must be > 0")


def _check_non_negative(name: str, value: Any, kind: type = float) -> None:
    _check_number(name, value, kind)
    if value < 0:
        raise ConfigValidationError(f"{name}={value} must be >= 0")


# camelCase option names accepted by from_dict().
_OPTION_ALIASES = {
    "maxStrLength": "max_str_length",
    "ignoreTexts": "ignore_texts",
    "hasTitles": "has_titles",
    "columnProbeSteps": "column_probe_steps",
}


@dataclass
class TableConfig:
    """Tunables for table reconstruction from a PDF text layer."""

    # Max vertical distance (page units) for two fragments to share a row.
    threshold: float = 1.5
    # Fragments longer than this are left out of column inference.
    max_str_length: int = 30
    # Fragments containing any of these substrings are left out of column inference.
    ignore_texts: Union[str, List[str], None] = field(default_factory=list)
    # Apply the title-row column merge.
    has_titles: bool = True
    # Number of probe positions swept across the table width.
    column_probe_steps: int = 200

    # ── Text layer (pdfplumber extract_words) ──────────────────────────
    x_tolerance: float = 3.0
    y_tolerance: float = 3.0
    # Keep space-separated words together so fragments follow text runs.
    keep_blank_chars: bool = True
    use_text_flow: bool = False
    # Strip control characters from fragment text.
    filter_control_chars: bool = True
    # Do not emit fragments whose text is whitespace only.
    drop_blank_fragments: bool = True

    def __post_init__(self) -> None:
        """Normalise ignore_texts and validate ranges."""
        if self.ignore_texts is None:
            self.ignore_texts = []
        elif isinstance(self.ignore_texts, str):
            self.ignore_texts = [self.ignore_texts] if self.ignore_texts else []
        else:
            # An empty pattern would match every fragment.
            self.ignore_texts = [str(s) for s in self.ignore_texts if s]

        _check_non_negative("threshold", self.threshold)
        _check_non_negative("max_str_length", self.max_str_length, int)
        _check_positive("x_tolerance", self.x_tolerance)
        _check_positive("y_tolerance", self.y_tolerance)
        _check_number("column_probe_steps", self.column_probe_steps, int)
        if self.column_probe_steps < 1:
            raise ConfigValidationError(
                f"column_probe_steps={self.column_probe_steps} must be >= 1"
            )

    def is_column_candidate(self, text: str) -> bool:
        """True when *text* may shape column boundaries."""
        if len(text) > self.max_str_length:
            return False
        return not any(ig in text for ig in self.ignore_texts)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize config to a JSON-compatible dict."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TableConfig":
        """Build a config from a dict, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            name = _OPTION_ALIASES.get(key, key)
            if name in known:
                kwargs[name] = value
        return cls(**kwargs)
