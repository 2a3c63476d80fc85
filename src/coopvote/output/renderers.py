"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from coopvote.output.console import create_console, get_output, style_for

if TYPE_CHECKING:
    from collections.abc import Callable

    from rich.console import Console

    from coopvote.services.result import ServiceResult


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()
    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
        if verbose:
            _render_meta(console, result)
    else:
        _render_error(result, console, verbose=verbose)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Minimal output: IDs for lists, the id for single records, else OK."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    items = result.data.get("items")
    if isinstance(items, list):
        return "\n".join(str(item["id"]) for item in items if "id" in item)
    if result.op == "get_tally":
        return str(result.data.get("outcome", ""))
    if "id" in result.data:
        return str(result.data["id"])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="coop.ok"), Text(f"  {result.op}", style="coop.op"))


def _field(console: Console, key: str, value: Any, style: str = "") -> None:
    line = Text(f"  {key}: ", style="coop.key")
    if not style and (key == "id" or key.endswith("_id")):
        style = "coop.id"
    line.append(str(value), style=style)
    console.print(line)


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta:
        return
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        if k == "telemetry":
            _render_span(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_span(console: Console, span: dict[str, Any], indent: int) -> None:
    prefix = " " * indent
    duration = span.get("duration_ms", 0.0)
    console.print(f"{prefix}{duration:>8.2f}ms  {span.get('name', '?')}", style="dim")
    for child in span.get("children", []):
        _render_span(console, child, indent + 4)


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(
        Text("ERROR", style="coop.error"),
        Text(f"  {result.op}", style="coop.op"),
        Text(" — "),
        Text(msg),
    )
    if err is not None:
        console.print(Text(f"  code: {err.code}", style="dim"))
        if verbose and err.detail:
            for k, v in err.detail.items():
                console.print(f"    {k}: {v}", style="dim")


# ── Proposals ─────────────────────────────────────────────────────────


def _render_proposal(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    status = str(d.get("status", ""))
    content = Text("status: ")
    content.append(status, style=style_for("status", status))
    content.append(f"\ncreated: {d.get('created_at', '')}")
    body = d.get("body") or ""
    if body:
        content.append(f"\n\n{body.strip()}")
    title = Text(f"#{d.get('id', '?')} — {d.get('title', '')}")
    console.print(Panel(content, title=title, border_style="dim", expand=False))


def _render_proposal_table(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("ID", style="coop.id", no_wrap=True, justify="right")
    table.add_column("Title", style="coop.title")
    table.add_column("Status")
    if verbose:
        table.add_column("Created", style="dim")
    for item in items:
        status = str(item.get("status", ""))
        row: list[Any] = [
            str(item.get("id", "")),
            Text(str(item.get("title", ""))),
            Text(status, style=style_for("status", status)),
        ]
        if verbose:
            row.append(str(item.get("created_at", "")))
        table.add_row(*row)
    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} proposals")


# ── Votes ─────────────────────────────────────────────────────────────


def _render_vote(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    for key in ("id", "proposal_id", "member_id"):
        _field(console, key, d.get(key, ""))
    choice = d.get("choice", "")
    _field(console, "choice", choice, style_for("choice", choice))
    if d.get("notes"):
        _field(console, "notes", d["notes"])
    _field(console, "created_at", d.get("created_at", ""))


def _render_vote_table(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("ID", style="coop.id", no_wrap=True, justify="right")
    table.add_column("Member", justify="right")
    table.add_column("Choice")
    table.add_column("Notes")
    if verbose:
        table.add_column("Cast", style="dim")
    for item in items:
        choice = str(item.get("choice", ""))
        row: list[Any] = [
            str(item.get("id", "")),
            str(item.get("member_id", "")),
            Text(choice, style=style_for("choice", choice)),
            Text(str(item.get("notes", ""))),
        ]
        if verbose:
            row.append(str(item.get("created_at", "")))
        table.add_row(*row)
    console.print(table)
    d = result.data
    footer = f"\n{d.get('count', len(items))} votes on proposal {d.get('proposal_id')}"
    if d.get("limit") is not None or d.get("offset"):
        footer += f" (limit={d.get('limit')}, offset={d.get('offset', 0)})"
    console.print(footer)


# ── Tally ─────────────────────────────────────────────────────────────


def _render_tally(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    results = d.get("results", {})
    _status_line(console, result)
    _field(console, "proposal_id", d.get("proposal_id", ""))
    status = d.get("status", "")
    _field(console, "status", status, style_for("status", status))

    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("Choice")
    table.add_column("Votes", justify="right")
    for choice in ("for", "against", "abstain"):
        table.add_row(Text(choice, style=style_for("choice", choice)), str(results.get(choice, 0)))
    console.print(table)

    quorum = "met" if d.get("quorum_met") else "not met"
    _field(console, "votes_cast", f"{d.get('votes_cast', 0)} of {d.get('total_eligible', 0)}")
    _field(console, "quorum", quorum, "coop.ok" if d.get("quorum_met") else "coop.warning")
    outcome = d.get("outcome", "")
    _field(console, "outcome", outcome, style_for("outcome", outcome))


# ── Members ───────────────────────────────────────────────────────────


def _render_member_table(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("ID", style="coop.id", justify="right")
    table.add_column("Email")
    table.add_column("Name")
    table.add_column("Role")
    for item in items:
        table.add_row(
            str(item.get("id", "")),
            str(item.get("email", "")),
            str(item.get("display_name", "")),
            str(item.get("role", "")),
        )
    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} members")


# ── Generic ───────────────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


_OP_RENDERERS: dict[str, Callable[..., None]] = {
    "create_proposal": _render_proposal,
    "get_proposal": _render_proposal,
    "close_proposal": _render_proposal,
    "list_proposals": _render_proposal_table,
    "cast_vote": _render_vote,
    "change_vote": _render_vote,
    "get_vote": _render_vote,
    "list_votes": _render_vote_table,
    "get_tally": _render_tally,
    "list_members": _render_member_table,
}
