"""
sophia_sdk.cli.main
===================

`sophia-sdk`: command-line helpers around the ACI marshalling layer and the
compiler service.

Examples
--------
    $ sophia-sdk version
    $ sophia-sdk encode-args Token.aci.json transfer '["ak_...", 10]'
    $ sophia-sdk decode '{"list": ["address"]}' '{"value": [{"value": 1}]}' --prefix ct
    $ sophia-sdk --compiler http://localhost:3080 aci Token.aes
    $ sophia-sdk compile Token.aes

Optional arguments in ARGS_JSON use `null` for None; any other JSON value is
taken as the Some payload.

Configuration
-------------
- Compiler URL : `--compiler` or env `SOPHIA_COMPILER_URL` (default: http://localhost:3080)
- HTTP timeout : `--timeout` or env `SOPHIA_COMPILER_TIMEOUT` seconds
- Log level    : `--log-level` or env `SOPHIA_LOG_LEVEL` (default: WARNING)
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, NoReturn, Optional

import typer

from ..aci.decode import transform_decoded
from ..aci.encode import map_pairs, prepare_args
from ..config import CompilerConfig
from ..contracts.compiler import CompilerClient
from ..errors import ArgumentValidationError, SophiaSdkError
from ..types.aci import ContractACI
from ..types.option import NOTHING, Some
from ..types.sophia import ListType, MapType, OptionType, RecordType, TupleType, parse_type
from ..version import __version__ as SDK_VERSION

log = logging.getLogger(__name__)

LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"

app = typer.Typer(
    name="sophia-sdk",
    help="Sophia contract SDK CLI: encode call data, decode results, talk to the compiler.",
    no_args_is_help=True,
    add_completion=False,
)

__all__ = ["app", "main", "from_json"]


@dataclass
class Ctx:
    compiler: CompilerConfig


def _print_json(obj: Any) -> None:
    typer.echo(json.dumps(obj, indent=2, ensure_ascii=False, default=str))


def _load_json(text: str, what: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise typer.BadParameter(f"{what} is not valid JSON: {e}") from e


def _fail(err: Exception) -> NoReturn:
    typer.echo(f"error: {err}", err=True)
    raise typer.Exit(code=1)


def from_json(typ: Any, value: Any) -> Any:
    """
    Lift a JSON-decoded value to the shape the encoder expects for `typ`:
    option slots become Some(...) / NOTHING, recursively. Values whose shape
    does not match the type are left alone for validation to report.
    """
    typ = parse_type(typ)
    if isinstance(typ, OptionType):
        return NOTHING if value is None else Some(from_json(typ.inner, value))
    if isinstance(typ, ListType) and isinstance(value, list):
        return [from_json(typ.item, v) for v in value]
    if isinstance(typ, TupleType) and isinstance(value, list) and len(value) == len(typ.elements):
        return [from_json(t, v) for t, v in zip(typ.elements, value)]
    if isinstance(typ, RecordType) and isinstance(value, Mapping):
        types = {f.name: f.type for f in typ.fields}
        return {k: from_json(types[k], v) if k in types else v for k, v in value.items()}
    if isinstance(typ, MapType) and isinstance(value, (Mapping, list)):
        try:
            pairs = map_pairs(value)
        except (TypeError, ValueError):
            return value
        return [(from_json(typ.key, k), from_json(typ.value, v)) for k, v in pairs]
    return value


@app.callback()
def _root(
    ctx: typer.Context,
    compiler: Optional[str] = typer.Option(
        None, "--compiler", help="Compiler service URL.", envvar="SOPHIA_COMPILER_URL"
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="HTTP timeout in seconds.", envvar="SOPHIA_COMPILER_TIMEOUT"
    ),
    log_level: str = typer.Option(
        "WARNING", "--log-level", help="Logging level.", envvar="SOPHIA_LOG_LEVEL"
    ),
) -> None:
    """Configure logging and the compiler endpoint for this process."""
    logging.basicConfig(level=log_level.upper(), format=LOG_FORMAT, force=True)
    ctx.obj = Ctx(compiler=CompilerConfig.with_overrides(url=compiler, timeout=timeout))


# --- Commands -----------------------------------------------------------------


@app.command("version")
def version() -> None:
    """Print the SDK version."""
    typer.echo(f"sophia-sdk {SDK_VERSION}")


@app.command("encode-args")
def encode_args(
    aci_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="ACI JSON file."),
    function: str = typer.Argument(..., help="Function name (init for the constructor)."),
    args_json: str = typer.Argument("[]", help="Arguments as a JSON array."),
) -> None:
    """Validate arguments against the ACI and print the Sophia literals."""
    aci = ContractACI.from_dict(_load_json(aci_file.read_text(encoding="utf-8"), "ACI"))
    params = _load_json(args_json, "ARGS_JSON")
    if not isinstance(params, list):
        raise typer.BadParameter("ARGS_JSON must be a JSON array")

    try:
        fn = aci.get_function(function)
        if fn is not None:
            types = fn.argument_types
            params = [from_json(types[i], p) if i < len(types) else p for i, p in enumerate(params)]
        encoded = asyncio.run(prepare_args(fn, params))
    except ArgumentValidationError as e:
        for issue in e.issues:
            typer.echo(f"{issue.kind}: {issue.message}", err=True)
        raise typer.Exit(code=1)
    except SophiaSdkError as e:
        _fail(e)
    _print_json(encoded)


@app.command("decode")
def decode(
    type_json: str = typer.Argument(..., help='Type descriptor, e.g. \'"int"\' or \'{"list": ["int"]}\'.'),
    node_json: str = typer.Argument(..., help="Decoded node as returned by the compiler."),
    prefix: str = typer.Option("ak", "--prefix", help="Address prefix for decoded addresses."),
) -> None:
    """Map a compiler-decoded node to native JSON."""
    try:
        typ = json.loads(type_json)
    except json.JSONDecodeError:
        typ = type_json
    node = _load_json(node_json, "NODE_JSON")
    try:
        value = transform_decoded(typ, node, address_prefix=prefix)
    except (SophiaSdkError, ValueError, KeyError, TypeError) as e:
        _fail(e)
    _print_json(value)


async def _with_compiler(cfg: CompilerConfig, op: str, source: str) -> Any:
    log.debug("%s via %s", op, cfg.url)
    async with CompilerClient(cfg) as client:
        return await getattr(client, op)(source, {})


@app.command("aci")
def aci(
    ctx: typer.Context,
    source: Path = typer.Argument(..., exists=True, dir_okay=False, help="Sophia source file."),
) -> None:
    """Fetch the contract interface (ACI) from the compiler service."""
    c: Ctx = ctx.obj
    try:
        out = asyncio.run(_with_compiler(c.compiler, "get_aci", source.read_text(encoding="utf-8")))
    except SophiaSdkError as e:
        _fail(e)
    _print_json(out)


@app.command("compile")
def compile_(
    ctx: typer.Context,
    source: Path = typer.Argument(..., exists=True, dir_okay=False, help="Sophia source file."),
) -> None:
    """Compile a contract through the compiler service and print the bytecode."""
    c: Ctx = ctx.obj
    try:
        out = asyncio.run(_with_compiler(c.compiler, "compile", source.read_text(encoding="utf-8")))
    except SophiaSdkError as e:
        _fail(e)
    typer.echo(out["bytecode"])


# --- Entrypoint ---------------------------------------------------------------


def main(argv: Optional[list[str]] = None) -> int:
    """Run the CLI. Returns an integer exit code."""
    try:
        rv = app(prog_name="sophia-sdk", standalone_mode=False, args=argv)
        return rv if isinstance(rv, int) else 0
    except typer.Exit as e:
        return int(e.exit_code)
    except Exception as e:
        typer.echo(f"error: {e}", err=True)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
