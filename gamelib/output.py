"""
Output module for gamelib.

Provides consistent output formatting across all commands:
- JSONL (default): Newline-delimited JSON for piping
- Pretty: Human-readable tables using Rich

Usage:
    from gamelib.output import emit, emit_error

    # Stream items as JSONL (default) or pretty table
    emit(releases, pretty=pretty)

    # Emit error to stderr
    emit_error("Project not found: Foo", type="not_found", context={"project": "Foo"})
"""

import json
import sys
from typing import Iterable, Any, Dict, Optional, List

import click
from rich.console import Console
from rich.table import Table


def _to_dict(item: Any) -> Dict[str, Any]:
    if hasattr(item, 'to_dict'):
        return item.to_dict()
    if isinstance(item, dict):
        return item
    return {'value': str(item)}


def emit(
    items: Iterable[Any],
    pretty: bool = False,
    columns: Optional[List[str]] = None,
    err: bool = False
) -> None:
    """
    Emit items as JSONL or pretty table.

    Args:
        items: Items to emit (should have to_dict() method or be dicts)
        pretty: If True, render as table. If False, output JSONL
        columns: Column names for table (auto-detected if None)
        err: If True, output to stderr instead of stdout
    """
    if pretty:
        _emit_table(items, columns, err=err)
    else:
        _emit_jsonl(items, err=err)


def emit_one(item: Any, pretty: bool = False, columns: Optional[List[str]] = None) -> None:
    """Emit a single item."""
    emit([item], pretty=pretty, columns=columns)


def _emit_jsonl(items: Iterable[Any], err: bool = False) -> None:
    """Emit items as JSONL."""
    for item in items:
        # click.echo so CliRunner captures the stream
        click.echo(json.dumps(_to_dict(item), ensure_ascii=False), err=err)


def _emit_table(items: Iterable[Any], columns: Optional[List[str]] = None, err: bool = False) -> None:
    """Emit items as a Rich table."""
    rows = [_to_dict(item) for item in items]

    if not rows:
        click.echo("No results found", err=err)
        return

    # Auto-detect columns if not provided
    if not columns:
        columns = _auto_columns(rows)

    console = Console(file=click.get_text_stream('stderr' if err else 'stdout'))
    table = Table(show_header=True, header_style="bold")

    for col in columns:
        table.add_column(col)

    for row in rows:
        values = [_format_value(row.get(col, '')) for col in columns]
        table.add_row(*values)

    console.print(table)


def _auto_columns(rows: List[Dict]) -> List[str]:
    """Auto-detect columns from rows."""
    if not rows:
        return []

    # Common column order preference
    preferred = ['project', 'package', 'name', 'username', 'version', 'revision',
                 'filename', 'published_at', 'modified_at', 'created_at']

    # Get all keys from first row
    all_keys = set(rows[0].keys())

    # Start with preferred columns that exist
    columns = [col for col in preferred if col in all_keys]

    # Add remaining columns
    for key in sorted(all_keys):
        if key not in columns:
            columns.append(key)

    # Limit to reasonable number
    return columns[:8]


def _format_value(value: Any, max_len: int = 50) -> str:
    """Format a value for table display."""
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'Yes' if value else 'No'
    if isinstance(value, list):
        s = ', '.join(str(v) for v in value[:3])
        if len(value) > 3:
            s += f' (+{len(value) - 3} more)'
        return s
    if isinstance(value, dict):
        return '{...}'

    s = str(value)
    if len(s) > max_len:
        return s[:max_len-3] + '...'
    return s


def emit_error(
    error: str,
    type: str = "error",
    context: Optional[Dict[str, Any]] = None
) -> None:
    """
    Emit error to stderr as JSON.

    Args:
        error: Error message
        type: Error type (e.g., "not_found", "forbidden")
        context: Additional context dict
    """
    obj: Dict[str, Any] = {
        'error': error,
        'type': type
    }
    if context:
        obj['context'] = context

    click.echo(json.dumps(obj, ensure_ascii=False), err=True)
