"""Interactive command loop.

Reads one command per line, dispatches it to the matching ``do_*`` function
and keeps going until ``exit`` or end of input. A failing command prints an
error line; it never ends the loop.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

import click

from bldrgraph.cli import commands
from bldrgraph.cli.session import Session
from bldrgraph.exceptions import BldrGraphError

logger = logging.getLogger(__name__)

AVAILABLE_COMMANDS = (
    "help, stats, top, find, resolve, filter, rdeps, deps, check, export, exit"
)


class ShellArgumentError(Exception):
    """A shell command was given missing or malformed arguments."""


def _require(args: list[str], index: int, message: str) -> str:
    if len(args) <= index:
        raise ShellArgumentError(message)
    return args[index]


def _count(args: list[str], index: int, default: int = 10) -> int:
    if len(args) <= index:
        return default
    try:
        value = int(args[index])
    except ValueError:
        raise ShellArgumentError(f"Invalid number: {args[index]}") from None
    if value < 0:
        raise ShellArgumentError(f"Invalid number: {args[index]}")
    return value


# ---------------------------------------------------------------------------
# Verb handlers: (session, args) -> None, args excluding the verb itself
# ---------------------------------------------------------------------------


def _help(session: Session, args: list[str]) -> None:
    commands.do_help()


def _stats(session: Session, args: list[str]) -> None:
    commands.do_stats(session)


def _top(session: Session, args: list[str]) -> None:
    commands.do_top(session, _count(args, 0))


def _filter(session: Session, args: list[str]) -> None:
    commands.do_filter(session, args[0] if args else None)


def _find(session: Session, args: list[str]) -> None:
    phrase = _require(args, 0, "Missing search term").lower()
    commands.do_find(session, phrase, _count(args, 1))


def _resolve(session: Session, args: list[str]) -> None:
    name = _require(args, 0, "Missing package name").lower()
    commands.do_resolve(session, name)


def _rdeps(session: Session, args: list[str]) -> None:
    name = _require(args, 0, "Missing package name").lower()
    commands.do_rdeps(session, name, _count(args, 1))


def _deps(session: Session, args: list[str]) -> None:
    name = _require(args, 0, "Missing package name").lower()
    commands.do_deps(session, name)


def _check(session: Session, args: list[str]) -> None:
    name = _require(args, 0, "Missing package name").lower()
    commands.do_check(session, name)


def _export(session: Session, args: list[str]) -> None:
    commands.do_export(session, _require(args, 0, "Missing file name"))


HANDLERS: dict[str, Callable[[Session, list[str]], None]] = {
    "help": _help,
    "stats": _stats,
    "top": _top,
    "filter": _filter,
    "find": _find,
    "resolve": _resolve,
    "rdeps": _rdeps,
    "deps": _deps,
    "check": _check,
    "export": _export,
}


def dispatch(session: Session, line: str) -> bool:
    """Run one command line.

    Returns:
        False if the loop should stop (``exit``), True otherwise.
    """
    words = line.split()
    if not words:
        return True

    verb, args = words[0].lower(), words[1:]
    if verb == "exit":
        return False

    handler = HANDLERS.get(verb)
    if handler is None:
        click.echo("Unknown command\n")
        return True

    try:
        handler(session, args)
    except ShellArgumentError as exc:
        click.echo(f"{exc}\n")
    except (BldrGraphError, OSError) as exc:
        logger.debug("Command %r failed", line, exc_info=True)
        click.echo(f"Error: {exc}\n")
    return True


def run_shell(session: Session) -> None:
    """Prompt for commands until ``exit`` or end of input."""
    click.echo(f"\nAvailable commands: {AVAILABLE_COMMANDS}\n")
    while True:
        try:
            line = click.prompt(
                "command", default="", show_default=False, prompt_suffix="> "
            )
        except click.Abort:
            click.echo()
            break
        if not dispatch(session, line):
            break
