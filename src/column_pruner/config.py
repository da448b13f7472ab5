"""Prune configuration — which columns to delete from which sheet."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path

from column_pruner import DEFAULT_DELETE_CONFIG
from column_pruner.columns import parse_column_list


def _normalize_sheet_key(name: str) -> str:
    return name.strip().lower()


@dataclass(frozen=True)
class SheetDirective:
    """Delete ``indices`` from the sheet whose name matches ``sheet``."""

    sheet: str
    labels: tuple[str, ...]
    indices: tuple[int, ...]

    @property
    def key(self) -> str:
        return _normalize_sheet_key(self.sheet)


def make_directive(sheet: str, columns: str) -> SheetDirective:
    """Build a directive from ``"G,K,AC"``; bad labels raise ``ValueError``."""
    name = sheet.strip()
    if not name:
        raise ValueError("Sheet name must not be empty")
    try:
        indices = parse_column_list(columns)
    except ValueError as exc:
        raise ValueError(f"Sheet {name!r}: {exc}") from exc
    if not indices:
        raise ValueError(f"Sheet {name!r}: no columns given")
    labels = tuple(item.strip().upper() for item in columns.split(",") if item.strip())
    return SheetDirective(sheet=name, labels=labels, indices=tuple(sorted(set(indices))))


@dataclass(frozen=True)
class PruneConfig:
    """Immutable set of directives, at most one per (case-insensitive) sheet name."""

    directives: tuple[SheetDirective, ...] = ()

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, str]]) -> PruneConfig:
        by_key: dict[str, SheetDirective] = {}
        for sheet, columns in pairs:
            directive = make_directive(sheet, columns)
            by_key[directive.key] = directive
        return cls(directives=tuple(by_key.values()))

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str]) -> PruneConfig:
        return cls.from_pairs(mapping.items())

    @classmethod
    def default(cls) -> PruneConfig:
        return cls.from_mapping(DEFAULT_DELETE_CONFIG)

    def merged(self, other: PruneConfig) -> PruneConfig:
        """Return a config where *other*'s directives override ours by sheet."""
        by_key = {d.key: d for d in self.directives}
        for directive in other.directives:
            by_key[directive.key] = directive
        return PruneConfig(directives=tuple(by_key.values()))

    def get(self, sheet: str) -> SheetDirective | None:
        key = _normalize_sheet_key(sheet)
        for directive in self.directives:
            if directive.key == key:
                return directive
        return None

    def __iter__(self) -> Iterator[SheetDirective]:
        return iter(self.directives)

    def __len__(self) -> int:
        return len(self.directives)


# ── Parsing ──────────────────────────────────────────────────────


def parse_directive(item: str) -> tuple[str, str]:
    """Split ``"invoice=G,K"`` into ``("invoice", "G,K")``."""
    if "=" not in item:
        raise ValueError(f"Invalid directive: {item!r}  (expected sheet=COLUMNS)")
    sheet, columns = item.split("=", 1)
    if not sheet.strip() or not columns.strip():
        raise ValueError(
            f"Invalid directive: {item!r}  (sheet and columns must be non-empty)"
        )
    return sheet.strip(), columns.strip()


def load_profile(profile: Path) -> list[str]:
    """Return the ``sheet=COLUMNS`` lines of a profile file."""
    if not profile.exists():
        raise ValueError(f"Profile not found: {profile} (expected lines like invoice=G,K,O)")
    if profile.is_dir():
        raise ValueError(f"Profile is a directory, not a file: {profile}")
    try:
        text = profile.read_text(encoding="utf-8")
    except OSError as exc:
        raise ValueError(f"Cannot read profile {profile}: {exc}") from exc

    lines: list[str] = []
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        lines.append(stripped)
    return lines


def build_config(
    *,
    use_defaults: bool = True,
    profile: Path | None = None,
    directives: list[str] | None = None,
) -> PruneConfig:
    """Layer defaults, then profile lines, then explicit directives."""
    config = PruneConfig.default() if use_defaults else PruneConfig()
    if profile is not None:
        pairs = [parse_directive(line) for line in load_profile(profile)]
        config = config.merged(PruneConfig.from_pairs(pairs))
    if directives:
        pairs = [parse_directive(item) for item in directives]
        config = config.merged(PruneConfig.from_pairs(pairs))
    return config
