"""Project templates into selection rows plus a reverse lookup."""

from __future__ import annotations

from dataclasses import dataclass, field

from .engine import TemplateEngine
from .errors import NoApplicableTemplatesError
from .models import CandidateRow, Template


@dataclass(slots=True)
class CandidateList:
    """Rows handed to the selection UI and the label lookup for its result."""

    rows: list[CandidateRow]
    _by_label: dict[str, CandidateRow] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        if not self._by_label:
            self._by_label = {row.label: row for row in self.rows}

    def __len__(self) -> int:
        return len(self.rows)

    def lookup(self, label: str | None) -> Template | None:
        if label is None:
            return None
        row = self._by_label.get(label)
        return row.template if row is not None else None

    @staticmethod
    def annotate(row: CandidateRow) -> str:
        return row.template.description or row.group_label

    @staticmethod
    def group_by(row: CandidateRow) -> str:
        return row.group_label

    @property
    def labels(self) -> list[str]:
        return [row.label for row in self.rows]


def candidate_label(template: Template) -> str:
    """Return the display label for ``template`` (name plus trigger key)."""

    if template.key and template.key != template.name:
        return f"{template.name} [{template.key}]"
    return template.name


def build_candidates(engine: TemplateEngine, mode: str) -> CandidateList:
    """Collect the templates applicable to ``mode`` as grouped rows.

    Raises :class:`NoApplicableTemplatesError` when nothing applies.
    """

    templates = engine.templates_for(mode)
    if not templates:
        raise NoApplicableTemplatesError(message=f"No snippets available for mode '{mode}'", mode=mode)

    grouped: dict[str, list[Template]] = {}
    for template in templates:
        group_label = engine.group_of(template) or template.group
        grouped.setdefault(group_label, []).append(template)

    rows: list[CandidateRow] = []
    seen: dict[str, int] = {}
    for group_label, members in grouped.items():
        for template in members:
            label = candidate_label(template)
            count = seen.get(label, 0) + 1
            seen[label] = count
            if count > 1:
                label = f"{label} <{count}>"
            rows.append(CandidateRow(label=label, group_label=group_label, template=template))
    return CandidateList(rows=rows)


__all__ = ["CandidateList", "build_candidates", "candidate_label"]
