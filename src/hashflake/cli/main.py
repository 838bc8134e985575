"""
hashflake CLI

Command-line interface for generating, inspecting and benchmarking flakes.

Usage:
    hashflake next --count 5 --format base64
    hashflake next --raw --node-id 12
    hashflake decode QDBAQEBwAAE
    hashflake layout
    hashflake bench --count 1000000 --threads 8
"""

import json
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from enum import Enum
from typing import Optional

import typer
from typing_extensions import Annotated

from hashflake.codec import Flake, decode
from hashflake.flake import Flaker, get_default
from hashflake.kernel.errors import FormatError, InvalidNodeId
from hashflake.kernel.layout import (
    EPOCH_SPAN_NANOS,
    IGNORED_TIME_BITS,
    INTERVAL_BITS,
    NODE_ID_BITS,
    SEQUENCE_BITS,
    TICK_NANOS,
)
from hashflake.kernel.logging import LogOperation, configure_logging, get_logger, is_production
from hashflake.kernel.time import from_unix_nanos

# Logs go to stderr; stdout carries only flakes and reports
configure_logging(json_output=is_production(), log_level="WARNING")

logger = get_logger(__name__)

app = typer.Typer(
    name="hashflake",
    help="hashflake - coordination-free 63-bit ids that look random",
    add_completion=False,
)


class FlakeFormat(str, Enum):
    INT = "int"
    HEX = "hex"
    BASE32 = "base32"
    BASE64 = "base64"


def render(flake: Flake, fmt: FlakeFormat) -> str:
    if fmt == FlakeFormat.HEX:
        return flake.to_hex()
    if fmt == FlakeFormat.BASE32:
        return flake.to_base32()
    if fmt == FlakeFormat.BASE64:
        return flake.to_base64()
    return str(int(flake))


def get_flaker(node_id: Optional[int] = None, epoch_start: Optional[datetime] = None) -> Flaker:
    """Get the default generator, or one derived from it for the given overrides"""
    flaker = get_default()
    if node_id is not None:
        try:
            flaker = flaker.with_node_id(node_id)
        except InvalidNodeId as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1)
    if epoch_start is not None:
        flaker = flaker.with_epoch_start(epoch_start)
    return flaker


@app.command("next")
def next_command(
    count: Annotated[int, typer.Option("--count", "-n", min=1, help="Number of flakes")] = 1,
    raw: Annotated[bool, typer.Option("--raw", help="Emit raw, sortable flakes")] = False,
    fmt: Annotated[
        FlakeFormat,
        typer.Option("--format", "-f", help="Output encoding"),
    ] = FlakeFormat.INT,
    node_id: Annotated[
        Optional[int],
        typer.Option("--node-id", help="Node id 0-255 (default: detected)"),
    ] = None,
    epoch_start: Annotated[
        Optional[datetime],
        typer.Option("--epoch-start", help="Epoch origin (default: 2020-01-01)"),
    ] = None,
) -> None:
    """Generate flakes, one per line"""
    flaker = get_flaker(node_id, epoch_start)
    generate = flaker.next_raw if raw else flaker.next
    for _ in range(count):
        typer.echo(render(generate(), fmt))


@app.command("decode")
def decode_command(
    value: Annotated[str, typer.Argument(help="Flake as hex, base32 or base64")],
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """Decode a flake and show all of its encodings"""
    try:
        flake = decode(value)
    except FormatError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    encodings = {
        "int": int(flake),
        "hex": flake.to_hex(),
        "base32": flake.to_base32(),
        "base64": flake.to_base64(),
    }
    if json_output:
        typer.echo(json.dumps(encodings, indent=2))
        return

    for name, encoded in encodings.items():
        typer.echo(f"{name:>7}: {encoded}")


@app.command("layout")
def layout_command(
    epoch_start: Annotated[
        Optional[datetime],
        typer.Option("--epoch-start", help="Epoch origin (default: 2020-01-01)"),
    ] = None,
) -> None:
    """Show the bit layout, interval length and epoch span"""
    flaker = get_flaker(epoch_start=epoch_start)
    tick_ms = TICK_NANOS / 1_000_000
    epoch_years = EPOCH_SPAN_NANOS / 1_000_000_000 / 86_400 / 365
    epoch_end = from_unix_nanos(flaker.epoch_start_ns + EPOCH_SPAN_NANOS)

    typer.echo(f"Interval: {INTERVAL_BITS} bit, {tick_ms:.2f} ms (2^{IGNORED_TIME_BITS} ns)")
    typer.echo(f"Sequence: {SEQUENCE_BITS} bit")
    typer.echo(f"Node id:  {NODE_ID_BITS} bit, this node: {flaker.node_id}")
    typer.echo(f"Epoch:    {epoch_years:.2f} years")
    typer.echo(f"  Start: {from_unix_nanos(flaker.epoch_start_ns).isoformat()}")
    typer.echo(f"  End:   {epoch_end.isoformat()}")


@app.command("bench")
def bench_command(
    count: Annotated[int, typer.Option("--count", "-n", min=1, help="Flakes per thread")] = 100_000,
    threads: Annotated[int, typer.Option("--threads", "-t", min=1, help="Concurrent callers")] = 1,
    raw: Annotated[bool, typer.Option("--raw", help="Benchmark raw flakes")] = False,
) -> None:
    """Generate flakes from one shared generator and check them for duplicates"""
    flaker = get_default()
    generate = flaker.next_raw if raw else flaker.next

    def worker() -> list[Flake]:
        return [generate() for _ in range(count)]

    with LogOperation(logger, "bench", count=count, threads=threads, raw=raw) as op:
        with ThreadPoolExecutor(max_workers=threads) as pool:
            futures = [pool.submit(worker) for _ in range(threads)]
            results = [future.result() for future in futures]

    total = count * threads
    unique = len({flake for batch in results for flake in batch})
    duplicates = total - unique
    rate = total / (op.duration_ms / 1000) if op.duration_ms > 0 else 0.0

    typer.echo(f"Generated: {total}")
    typer.echo(f"Duplicates: {duplicates}")
    typer.echo(f"Flakes/sec: {rate:,.0f}")

    if duplicates:
        raise typer.Exit(1)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
