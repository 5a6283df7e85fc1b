from __future__ import annotations

import json
from dataclasses import asdict
from typing import Callable, Iterable, Iterator, List, Optional

from .config import SortOrder
from .humanize import format_size
from .store import DigestIndex, DuplicateGroup


NO_DUPLICATES = "No duplicates found"

Echo = Callable[[str], None]


def render_groups(
    groups: Iterable[DuplicateGroup],
    humanize: Callable[[int], str] = format_size,
) -> Iterator[str]:
    empty = True
    for group in groups:
        empty = False
        yield f"{group.digest_hex} (dupes: {group.member_count}, total: {humanize(group.total_size)})"
        last = len(group.members) - 1
        for i, member in enumerate(group.members):
            marker = "`-" if i == last else "|-"
            yield f"{marker} {member.path} {humanize(member.size)} {member.last_modified}"
    if empty:
        yield NO_DUPLICATES


def groups_to_json(groups: Iterable[DuplicateGroup]) -> str:
    payload = [
        {
            "digest": g.digest_hex,
            "count": g.member_count,
            "total_size": g.total_size,
            "members": [asdict(m) for m in g.members],
        }
        for g in groups
    ]
    return json.dumps(payload, ensure_ascii=False, indent=2)


class DuplicateReporter:
    """Read-only view over the duplicate groups of a DigestIndex."""

    def __init__(
        self,
        index: DigestIndex,
        echo: Optional[Echo] = None,
        humanize: Callable[[int], str] = format_size,
    ) -> None:
        self.index = index
        self.echo: Echo = echo or print
        self.humanize = humanize

    def report(self, sort_by: SortOrder | str = SortOrder.COUNT, *, as_json: bool = False) -> List[DuplicateGroup]:
        groups = self.index.duplicates(sort_by)
        if as_json:
            self.echo(groups_to_json(groups))
        else:
            for line in render_groups(groups, self.humanize):
                self.echo(line)
        return groups
