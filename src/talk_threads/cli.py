"""CLI for browsing talk page threads."""

import json
from typing import Annotated

import typer
from loguru import logger

from talk_threads.api import DiscussionToolsApi
from talk_threads.config import DEFAULT_SITE
from talk_threads.core.mentions import extract_user_mentions
from talk_threads.core.tree.navigation import find_item
from talk_threads.core.tree.render import plain_text, render_thread_as_text
from talk_threads.errors import LoadFailure
from talk_threads.logging_config import configure_logging
from talk_threads.session import Error, Loaded, TopicSession

app = typer.Typer(help="Talk threads: browse talk page discussions as collapsible trees.")

SiteOption = Annotated[str, typer.Option("--site", "-s", help="Wiki host name")]
CacheOption = Annotated[
    bool,
    typer.Option(
        "--cache",
        "-C",
        help="Cache requests and use cache. Returns stale data, but avoids "
        "hammering the API while developing",
    ),
]
JsonOption = Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")]


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging(verbose=verbose)


def _make_api(site: str, cache: bool) -> DiscussionToolsApi:
    return DiscussionToolsApi(site, from_cache=cache)


@app.command()
def topics(
    page: str = typer.Argument(..., help="Talk page title, e.g. 'Talk:Python'"),
    site: SiteOption = DEFAULT_SITE,
    cache: CacheOption = False,
    output_json: JsonOption = False,
) -> None:
    """List the topics of a talk page."""
    try:
        items = _make_api(site, cache).fetch_topics(page)
    except LoadFailure as e:
        logger.error("Cannot load {}: {}", page, e)
        raise typer.Exit(1) from e

    if output_json:
        data = {
            "page": page,
            "topics": [
                {
                    "id": t.id,
                    "subject": plain_text(t.html),
                    "replies": t.reply_count,
                    "placeholder": t.placeholder_heading,
                }
                for t in items
            ],
            "count": len(items),
        }
        typer.echo(json.dumps(data, indent=2))
        return

    typer.echo(f"{len(items)} topics on {page}:\n")
    for t in items:
        subject = plain_text(t.html) or "(no subject)"
        typer.echo(f"  {subject[:80]}")
        typer.echo(f"    id={t.id}  replies={t.reply_count}")


@app.command()
def show(
    page: str = typer.Argument(..., help="Talk page title"),
    topic_id: str = typer.Argument(..., help="Topic id (see 'topics')"),
    expand: Annotated[
        list[str] | None,
        typer.Option("--expand", "-e", help="Open this item's replies (repeatable)"),
    ] = None,
    expand_all: bool = typer.Option(False, "--expand-all", "-a", help="Expand every reply"),
    mentions: bool = typer.Option(False, "--mentions", "-m", help="List users linked in view"),
    width: int = typer.Option(100, "--width", "-w", help="Max characters of text per row"),
    site: SiteOption = DEFAULT_SITE,
    cache: CacheOption = False,
    output_json: JsonOption = False,
) -> None:
    """Show one topic's thread, collapsed except for the items given."""
    session = TopicSession(_make_api(site, cache), page)
    state = session.load(topic_id)
    if not isinstance(state, Loaded):
        cause = state.cause if isinstance(state, Error) else state
        logger.error("Cannot load topic {} of {}: {}", topic_id, page, cause)
        raise typer.Exit(1)

    if expand_all:
        session.expand_all()
    for item_id in expand or []:
        target = find_item(state.roots, item_id)
        if target is None:
            logger.warning("Item {} is not in this topic", item_id)
        elif not target.replies:
            logger.warning("Item {} has no replies to expand", item_id)
        else:
            session.expand(item_id)

    rows = session.current_flat_view()
    if output_json:
        data = {
            "topic": {"id": state.topic.id, "subject": plain_text(state.topic.html)},
            "rows": [
                {
                    "id": r.id,
                    "type": r.type,
                    "author": r.author,
                    "timestamp": r.timestamp,
                    "replies": r.reply_count,
                    "expanded": session.expand_state.is_expanded(r.id),
                }
                for r in rows
            ],
            "count": len(rows),
        }
        if mentions:
            data["mentions"] = extract_user_mentions(rows)
        typer.echo(json.dumps(data, indent=2))
        return

    typer.echo(f"== {plain_text(state.topic.html) or '(no subject)'} ==\n")
    typer.echo(render_thread_as_text(state.roots, session.expand_state, max_width=width), nl=False)
    if mentions:
        names = extract_user_mentions(rows)
        typer.echo(f"\nMentioned users: {', '.join(names) if names else '(none)'}")
