"""
==============================================================================
Export Text Module
==============================================================================

Plain-text rendering of values for the clipboard / copy endpoints.

ExportContent is a closed union:
    SingleValue     one item's value
    GroupValues     every value of a group, in group order
    OrderedValues   values of an ordered item list (e.g. a reorder result)

Values are joined with a newline. Nothing to render raises NothingToExport.

==============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Union

from scanflow.core.exceptions import nothing_to_export
from scanflow.domain.models import Group, ScanItem


@dataclass(frozen=True)
class SingleValue:
    value: str

    def lines(self) -> List[str]:
        return [self.value] if self.value else []


@dataclass(frozen=True)
class GroupValues:
    group: Group

    def lines(self) -> List[str]:
        return self.group.values()


@dataclass(frozen=True)
class OrderedValues:
    items: Sequence[ScanItem]

    def lines(self) -> List[str]:
        return [item.value for item in self.items]


ExportContent = Union[SingleValue, GroupValues, OrderedValues]


def render_export_text(content: ExportContent) -> str:
    """
    Join the content's values with newlines.

    Raises:
        NothingToExport: If there is no value to render
    """
    lines = content.lines()
    if not lines:
        raise nothing_to_export()
    return "\n".join(lines)
