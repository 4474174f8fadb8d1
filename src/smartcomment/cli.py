# smartcomment/cli.py
"""smartcomment command line.

    smartcomment FILE [GROUP ...] [-f PATH ...] [-e NAME] [-d NAME] [--reset]
                 [-s SYNTAX | -c PREFIX [--closing-comment SUFFIX]]
                 [-o] [-l] [--check] [--config PATH] [-v]

Exit status is 0 on success and 1 on any directive, selection or I/O error,
reported as a single line on stderr. With several files every file is
processed and written on its own; each failure is reported with its path and
the last one decides the exit status. ``--check`` exits 1 when any file would
change.
"""

import logging
from typing import Iterable, Optional

import click

from smartcomment import __version__
from smartcomment.core.Errors import SmartCommentError
from smartcomment.core.SmartCommenter import SmartCommenter, ToggleResult, toggle_file
from smartcomment.core.SyntaxDetector import CommentSyntax, detect_syntax
from smartcomment.utils.logging_config import setup_logging
from smartcomment.utils.utils import decode_bytes, load_config, load_environment, read_text_file

logger = logging.getLogger("smartcomment.cli")


def _split_names(values: Iterable[str]) -> list[str]:
    """Flattens ``-e a,b -e c`` into ``["a", "b", "c"]``."""
    names: list[str] = []
    for value in values:
        names.extend(part.strip() for part in value.split(",") if part.strip())
    return names


def _format_groups(groups: list[dict]) -> str:
    rows = []
    for info in groups:
        depth = 0
        parent = info["parent"]
        while parent is not None:
            depth += 1
            parent = next((g["parent"] for g in groups if g["group"] == parent), None)
        state = "active" if info["effective"] else "inactive"
        if info["active"] and not info["effective"]:
            state = "inactive (enclosing group off)"
        rows.append(
            f"{'  ' * depth}{info['group']:<20} {info['kind']:<10} line {info['line']:<6} {state}"
        )
    return "\n".join(rows)


def _emit(result: ToggleResult) -> None:
    out = click.get_binary_stream("stdout")
    out.write(result.text.encode(result.encoding))
    out.flush()


def _run_stdin(
    syntax: CommentSyntax, targets: list[str], disabled: list[str], reset: bool, list_groups: bool
) -> Optional[ToggleResult]:
    raw = click.get_binary_stream("stdin").read()
    text, encoding = decode_bytes(raw)
    commenter = SmartCommenter(syntax)
    if list_groups:
        click.echo(_format_groups(commenter.describe_groups(text)))
        return None
    result = commenter.toggle_text(text, targets, disabled, reset)
    result.encoding = encoding
    _emit(result)
    return result


def _run_file(
    path: str,
    syntax: CommentSyntax,
    targets: list[str],
    disabled: list[str],
    reset: bool,
    list_groups: bool,
    write: bool,
    to_stdout: bool,
    heading: bool,
) -> Optional[ToggleResult]:
    if list_groups:
        text, _ = read_text_file(path)
        if heading:
            click.echo(f"{path}:")
        click.echo(_format_groups(SmartCommenter(syntax).describe_groups(text)))
        return None
    result = toggle_file(path, syntax, targets, disabled, reset, write=write)
    if to_stdout:
        _emit(result)
    return result


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("file", type=click.Path(dir_okay=False, allow_dash=True))
@click.argument("groups", nargs=-1)
@click.option("-f", "--file", "more_files", multiple=True, metavar="PATH",
              type=click.Path(dir_okay=False),
              help="Another file to apply the same selection to. Repeatable.")
@click.option("-e", "--enable", multiple=True, metavar="NAME",
              help="Group to activate. Repeatable; comma-separated lists accepted.")
@click.option("-d", "--disable", multiple=True, metavar="NAME",
              help="Group to deactivate. Repeatable; comma-separated lists accepted.")
@click.option("--reset", is_flag=True,
              help="Deactivate every feature flag that is not enabled.")
@click.option("-s", "--syntax", "syntax_name", metavar="NAME",
              help="Comment syntax to use (python, shell, css...). Required for stdin.")
@click.option("-c", "--comment", metavar="PREFIX",
              help="Explicit comment prefix; overrides --syntax and detection.")
@click.option("--closing-comment", metavar="SUFFIX",
              help="Closing delimiter used with --comment, e.g. '*/'.")
@click.option("-o", "--stdout", "to_stdout", is_flag=True,
              help="Print the result instead of rewriting the file.")
@click.option("-l", "--list", "list_groups", is_flag=True,
              help="List the groups of the file and their state.")
@click.option("--check", is_flag=True,
              help="Do not write; exit with status 1 if a file would change.")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), metavar="PATH",
              help="Configuration file (default: ~/.config/smartcomment/config.toml).")
@click.option("-v", "--verbose", count=True, help="More output (-vv for debug).")
@click.version_option(__version__, prog_name="smartcomment")
@click.pass_context
def main(
    ctx: click.Context,
    file: str,
    groups: tuple[str, ...],
    more_files: tuple[str, ...],
    enable: tuple[str, ...],
    disable: tuple[str, ...],
    reset: bool,
    syntax_name: Optional[str],
    comment: Optional[str],
    closing_comment: Optional[str],
    to_stdout: bool,
    list_groups: bool,
    check: bool,
    config_path: Optional[str],
    verbose: int,
) -> None:
    """Comment and uncomment tagged groups of lines in FILE.

    Lines between '<comment> smc:begin NAME' and '<comment> smc:end NAME'
    belong to group NAME; sibling groups are exclusive, so activating one
    comments out the others. 'smc:flag NAME' opens an independent group and
    'smc:line NAME' tags just the next line. Use '-' as FILE to filter
    standard input (requires --syntax or --comment). Further files given
    with -f get the same selection; each one is written on its own.
    """
    load_environment()
    config = load_config(config_path)
    setup_logging(config, verbose)

    paths = [file, *more_files]
    if "-" in paths and len(paths) > 1:
        raise click.UsageError("'-' cannot be combined with other files.")

    targets = _split_names(groups) + _split_names(enable)
    disabled = _split_names(disable)
    several = len(paths) > 1

    errors: list[str] = []
    changed: list[str] = []
    for path in paths:
        try:
            syntax = detect_syntax(
                path=path,
                syntax_name=syntax_name,
                comment=comment,
                closing_comment=closing_comment,
                config=config,
            )
            logger.debug(
                "Using comment syntax '%s' %s for '%s'.", syntax.name, syntax.prefixes, path
            )

            if path == "-":
                result = _run_stdin(syntax, targets, disabled, reset, list_groups)
            else:
                result = _run_file(
                    path, syntax, targets, disabled, reset, list_groups,
                    write=not (to_stdout or check), to_stdout=to_stdout, heading=several,
                )
        except (SmartCommentError, OSError) as e:
            logger.debug("Giving up on '%s'.", path, exc_info=True)
            errors.append(f"{path}: {e}" if several else str(e))
            continue
        if result is not None and result.changed:
            changed.append(path)

    # Every failure is reported; the last one sets the exit status.
    for message in errors[:-1]:
        click.echo(f"Error: {message}", err=True)
    if errors:
        raise click.ClickException(errors[-1])

    if check and changed:
        for path in changed:
            click.echo(f"{path}: would change", err=True)
        ctx.exit(1)


if __name__ == "__main__":
    main()
