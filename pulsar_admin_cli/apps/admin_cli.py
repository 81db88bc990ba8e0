from __future__ import annotations

import sys
from typing import Any, Callable

import click
import typer
from dotenv import load_dotenv

from .. import __version__
from ..admin_client import AdminClient, new_admin_client
from ..cli_shared import (
    PULSAR_ADMIN_BK_SERVICE_URL,
    PULSAR_ADMIN_REQUEST_TIMEOUT,
    PULSAR_ADMIN_WEB_SERVICE_URL,
    AdminCliError,
    ArgumentError,
    GlobalOpts,
    RegistryError,
    UsageError,
    _eprint,
    resolve_global_opts,
)
from ..commands import build_registry
from ..output import EXIT_USAGE, print_error, render
from ..registry import CommandRegistry
from ..verb_cmd import VerbCommand, execute

ClientFactory = Callable[[GlobalOpts], AdminClient]


def _rich_error(msg: str) -> None:
    print_error(sys.stderr, msg)


def _render_usage_error_with_help(
    *,
    message: str,
    ctx: click.Context | None = None,
) -> None:
    _rich_error(message)
    if isinstance(ctx, click.Context):
        _eprint(ctx.get_usage())
        _eprint(f"Try '{ctx.command_path} --help' for help.")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"pulsar-admin {__version__}")
        raise typer.Exit(code=0)


class _AdminRootGroup(typer.core.TyperGroup):
    """Root group: Typer commands first, then one group per resource noun."""

    registry: CommandRegistry | None = None
    client_factory: ClientFactory | None = None

    def list_commands(self, ctx: click.Context) -> list[str]:
        names = list(self.commands)
        if self.registry is not None:
            names.extend(n for n in self.registry.nouns() if n not in names)
        return names

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        found = super().get_command(ctx, cmd_name)
        if found is not None or self.registry is None:
            return found
        if cmd_name not in self.registry.nouns():
            return None
        return _NounGroup(
            registry=self.registry,
            noun=cmd_name,
            client_factory=self.client_factory or new_admin_client,
        )

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[str | None, click.Command | None, list[str]]:
        name = click.utils.make_str(args[0])
        if not name.startswith("-") and self.get_command(ctx, name) is None and self.registry is not None:
            try:
                self.registry.noun_help(name)
            except RegistryError as e:
                ctx.fail(str(e))
        return super().resolve_command(ctx, args)


class _NounGroup(click.Group):
    def __init__(self, *, registry: CommandRegistry, noun: str, client_factory: ClientFactory) -> None:
        super().__init__(name=noun, help=registry.noun_help(noun), no_args_is_help=True)
        self.registry = registry
        self.noun = noun
        self.client_factory = client_factory

    def list_commands(self, ctx: click.Context) -> list[str]:
        return list(self.registry.verb_names(self.noun))

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        try:
            verb = self.registry.resolve(self.noun, cmd_name)
        except RegistryError:
            return None
        return _VerbClickCommand(verb, self.client_factory)

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[str | None, click.Command | None, list[str]]:
        name = click.utils.make_str(args[0])
        if not name.startswith("-"):
            try:
                self.registry.resolve(self.noun, name)
            except RegistryError as e:
                ctx.fail(str(e))
        return super().resolve_command(ctx, args)


class _VerbClickCommand(click.Command):
    """Click front for one VerbCommand; arity is left to the verb's policy."""

    def __init__(self, verb: VerbCommand, client_factory: ClientFactory) -> None:
        params: list[click.Parameter] = [click.Argument(["name_args"], nargs=-1)]
        params.extend(verb.options)
        super().__init__(
            name=verb.name,
            callback=self._run,
            params=params,
            help=verb.short,
            short_help=verb.short,
        )
        self.verb = verb
        self.client_factory = client_factory

    def collect_usage_pieces(self, ctx: click.Context) -> list[str]:
        pieces = [self.verb.usage()] if self.verb.usage() else []
        if self.verb.options:
            pieces.append(self.options_metavar or "[OPTIONS]")
        return pieces

    def format_help_text(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        formatter.write_paragraph()
        with formatter.indentation():
            formatter.write_text(self.verb.short)
        formatter.write_paragraph()
        with formatter.indentation():
            for line in self.verb.describe().splitlines():
                formatter.write(f"{' ' * formatter.current_indent}{line}\n" if line else "\n")

    def _run(self, name_args: tuple[str, ...] = (), **flags: Any) -> None:
        ctx = click.get_current_context()
        g = _ctx_global(ctx)
        result = execute(self.verb, name_args, flags, lambda: self.client_factory(g))
        code = render(result, sys.stdout, sys.stderr, pretty=g.pretty)
        if code == EXIT_USAGE and isinstance(result.error, ArgumentError) and result.error.cause is None:
            _eprint(ctx.get_usage())
        if code:
            raise typer.Exit(code=code)


app = typer.Typer(
    name="pulsar-admin",
    help="Administration client for Pulsar and BookKeeper clusters.",
    no_args_is_help=True,
    add_completion=False,
    cls=_AdminRootGroup,
)


@app.callback()
def app_callback(
    ctx: typer.Context,
    web_service_url: str | None = typer.Option(
        None,
        "--web-service-url",
        help=f"Pulsar admin web service URL (env: {PULSAR_ADMIN_WEB_SERVICE_URL}, default http://localhost:8080)",
    ),
    bk_service_url: str | None = typer.Option(
        None,
        "--bk-service-url",
        help=f"BookKeeper HTTP admin URL (env: {PULSAR_ADMIN_BK_SERVICE_URL}, default http://localhost:8080)",
    ),
    request_timeout: int | None = typer.Option(
        None,
        "--request-timeout",
        help=f"Request timeout in seconds (env: {PULSAR_ADMIN_REQUEST_TIMEOUT}, default 30)",
    ),
    plain_json: bool = typer.Option(False, "--plain-json", help="Emit compact JSON output"),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    del version
    try:
        g = resolve_global_opts(
            web_service_url=web_service_url,
            bk_service_url=bk_service_url,
            request_timeout=request_timeout,
            plain_json=plain_json,
        )
    except UsageError as e:
        _render_usage_error_with_help(message=str(e), ctx=ctx)
        raise typer.Exit(code=2)
    ctx.obj = {"g": g}


def _ctx_global(ctx: click.Context) -> GlobalOpts:
    if isinstance(ctx.obj, dict) and isinstance(ctx.obj.get("g"), GlobalOpts):
        return ctx.obj["g"]
    try:
        return resolve_global_opts()
    except UsageError as e:
        _render_usage_error_with_help(message=str(e), ctx=ctx)
        raise typer.Exit(code=2)


def _ctx_registry(ctx: click.Context) -> CommandRegistry:
    root = ctx.find_root().command
    registry = getattr(root, "registry", None)
    if registry is None:
        raise UsageError("no command registry attached to this CLI")
    return registry


@app.command("docs", help="Print the plain-text documentation of every verb (or of one resource).")
def docs(
    ctx: typer.Context,
    noun: str | None = typer.Argument(None, help="Optional resource noun, e.g. ledger"),
) -> None:
    try:
        text = _ctx_registry(ctx).docs_text(noun)
    except (RegistryError, UsageError) as e:
        _render_usage_error_with_help(message=str(e), ctx=ctx)
        raise typer.Exit(code=2)
    typer.echo(text)


def build_cli(
    registry: CommandRegistry,
    *,
    client_factory: ClientFactory | None = None,
) -> click.Group:
    cli = typer.main.get_command(app)
    if not isinstance(cli, _AdminRootGroup):
        raise TypeError(f"unexpected root command type: {type(cli).__name__}")
    cli.registry = registry
    cli.client_factory = client_factory or new_admin_client
    return cli


def _run_cli(
    *,
    registry: CommandRegistry,
    prog_name: str,
    argv: list[str] | None = None,
    client_factory: ClientFactory | None = None,
) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    # Discover .env without overriding already-exported environment values.
    load_dotenv()
    cli = build_cli(registry, client_factory=client_factory)
    try:
        result = cli.main(args=argv, prog_name=prog_name, standalone_mode=False)
        if result is None:
            return 0
        return int(result)
    except (typer.Exit, click.exceptions.Exit) as e:
        # --help on a noun or verb exits through the plain click command.
        return int(e.exit_code)
    except click.exceptions.Abort:
        _rich_error("aborted")
        return 1
    except click.exceptions.NoArgsIsHelpError as e:
        _eprint(e.format_message())
        return int(e.exit_code)
    except click.ClickException as e:
        if isinstance(e, click.UsageError):
            _render_usage_error_with_help(message=e.format_message(), ctx=getattr(e, "ctx", None))
            return int(e.exit_code)
        _rich_error(e.format_message())
        return int(e.exit_code)
    except UsageError as e:
        _rich_error(str(e))
        return 2
    except AdminCliError as e:
        _rich_error(str(e))
        return 1


def main(argv: list[str] | None = None) -> int:
    return _run_cli(registry=build_registry(), prog_name="pulsar-admin", argv=argv)
