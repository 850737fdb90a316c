"""
Plain-text rendering of the dashboard, used by the watch_loot command.
"""
from typing import List

from .state import QUALITY_LABELS, DashboardState

MAX_STAT_LINES = 3


def render_text(state: DashboardState) -> str:
    stats = state.stats()
    lines: List[str] = [
        f"Total {stats['total']}  Uniques {stats['uniques']}  Sets {stats['sets']}  Runes {stats['runes']}",
        f"Filter: {state.category}",
    ]

    columns = state.grouped()
    if not columns:
        lines.append('No loot yet!')
        return '\n'.join(lines)

    for character, entries in columns.items():
        lines.append('')
        lines.append(f"== {character} ({len(entries)})")
        for entry in entries:
            quality = entry.get('quality', 'normal')
            label = QUALITY_LABELS.get(quality, quality)
            dropped_by = entry.get('droppedBy') or '-'
            lines.append(
                f"  [{label}] {entry.get('itemName')}  @ {entry.get('location')}  by {dropped_by}  {entry.get('timestamp')}"
            )
            item_stats = entry.get('stats') or []
            for stat in item_stats[:MAX_STAT_LINES]:
                lines.append(f"      {stat}")
            if len(item_stats) > MAX_STAT_LINES:
                lines.append(f"      +{len(item_stats) - MAX_STAT_LINES} more...")

    if state.has_more:
        lines.append('')
        lines.append('... more entries not shown')
    return '\n'.join(lines)
