from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .client import DEFAULT_QR_SIZE, ImagefyClient
from .errors import ConfigError, ImagefyIOError, RemoteError, ValidationError
from .operations import OPERATIONS
from .qr import QR_ARGS, QRType
from .result import ImagefyResult
from .rules import NumberRange

app = typer.Typer(add_completion=False, no_args_is_help=True)
console = Console()

OUTPUT = typer.Option(..., "--output", "-o", dir_okay=False, help="Where to write the result")


def build_client(config_path: Optional[Path]) -> ImagefyClient:
    return ImagefyClient.from_config(config_path)


def _run(ctx: typer.Context, output: Path, action: Callable[[ImagefyClient], ImagefyResult]) -> None:
    config_path = ctx.obj.get("config") if ctx.obj else None
    try:
        client = build_client(config_path)
        result = action(client)
        result.save(output)
    except (ValidationError, ConfigError) as e:
        console.print(f"[bold red]Invalid input:[/bold red] {e}")
        raise typer.Exit(code=2) from e
    except (RemoteError, ImagefyIOError) as e:
        console.print(f"[bold red]Failed:[/bold red] {e}")
        raise typer.Exit(code=1) from e
    console.print(f"[bold green]Wrote[/bold green] {output} ({result.size} bytes)")


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, "--config", dir_okay=False, help="Path to imagefy.toml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log HTTP activity"),
):
    ctx.obj = {"config": config}
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, rich_tracebacks=True)],
        )
        logging.getLogger("imagefy").setLevel(logging.DEBUG)


@app.command()
def operations():
    """List the operations supported by the API."""
    table = Table(title="Imagefy operations")
    table.add_column("Name")
    table.add_column("Endpoint")
    table.add_column("Mode")
    table.add_column("Fields")
    for op in OPERATIONS.values():
        fields = ", ".join(f.name if f.required else f"[{f.name}]" for f in op.fields)
        table.add_row(op.name, op.endpoint, op.mode, fields)
    console.print(table)


@app.command()
def abbreviation(
    ctx: typer.Context,
    name: str = typer.Argument(...),
    background: str = typer.Option("#000000", "--background"),
    foreground: str = typer.Option("#ffffff", "--foreground"),
    size: str = typer.Option("256x256", "--size"),
    output: Path = OUTPUT,
):
    """Render an avatar with initials."""
    _run(
        ctx,
        output,
        lambda c: c.create_abbreviation(
            background=background, foreground=foreground, name=name, size=size
        ),
    )


@app.command()
def placeholder(
    ctx: typer.Context,
    text: str = typer.Argument(...),
    background: str = typer.Option("#cccccc", "--background"),
    foreground: str = typer.Option("#333333", "--foreground"),
    size: str = typer.Option("640x480", "--size"),
    output: Path = OUTPUT,
):
    """Render a placeholder image with a label."""
    _run(
        ctx,
        output,
        lambda c: c.create_placeholder(
            background=background, foreground=foreground, text=text, size=size
        ),
    )


def _parse_number(key: str, text: str) -> float | int:
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        raise ValidationError(key, "must be a number") from None


def parse_qr_args(qr_type: QRType, pairs: list[str]) -> dict[str, object]:
    numeric = {
        f.name for f in QR_ARGS[qr_type] if any(isinstance(r, NumberRange) for r in f.rules)
    }
    args: dict[str, object] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ValidationError(pair, "must be written as key=value")
        if key in numeric:
            args[key] = _parse_number(key, value)
        else:
            args[key] = value
    return args


@app.command()
def qr(
    ctx: typer.Context,
    qr_type: QRType = typer.Argument(..., help="QR payload type"),
    arg: list[str] = typer.Option([], "--arg", "-a", help="Payload argument as key=value"),
    size: int = typer.Option(DEFAULT_QR_SIZE, "--size"),
    output: Path = OUTPUT,
):
    """Generate a QR code, e.g. `qr Url -a url=https://example.com -o qr.png`."""
    _run(ctx, output, lambda c: c.create_qr_code(qr_type, size=size, **parse_qr_args(qr_type, arg)))


@app.command()
def compress(
    ctx: typer.Context,
    image: Path = typer.Argument(..., exists=True, dir_okay=False),
    quality: Optional[int] = typer.Option(None, "--quality", help="Lossy quality 1-100; lossless when omitted"),
    output: Path = OUTPUT,
):
    """Compress an image."""
    if quality is None:
        _run(ctx, output, lambda c: c.compress_lossless(image))
    else:
        _run(ctx, output, lambda c: c.compress_lossy(image, quality))


@app.command()
def resize(
    ctx: typer.Context,
    image: Path = typer.Argument(..., exists=True, dir_okay=False),
    size: str = typer.Option(..., "--size"),
    fill: bool = typer.Option(False, "--fill", help="Fill the exact size instead of fitting"),
    mode: str = typer.Option("cover", "--mode", help="Fill mode: cover or contain"),
    background: Optional[str] = typer.Option(None, "--background", help="Letterbox color when fitting"),
    output: Path = OUTPUT,
):
    """Resize an image."""
    if fill:
        _run(ctx, output, lambda c: c.resize_fill(image, size, mode))
    else:
        _run(ctx, output, lambda c: c.resize_fit(image, size, background))


@app.command()
def thumbnail(
    ctx: typer.Context,
    image: Path = typer.Argument(..., exists=True, dir_okay=False),
    size: str = typer.Option(..., "--size"),
    blur: Optional[int] = typer.Option(None, "--blur", help="Blurred backdrop strength 1-100"),
    output: Path = OUTPUT,
):
    """Create a thumbnail."""
    if blur is None:
        _run(ctx, output, lambda c: c.thumbnail_cropped(image, size))
    else:
        _run(ctx, output, lambda c: c.thumbnail_blurred(image, size, blur))


@app.command()
def watermark(
    ctx: typer.Context,
    image: Path = typer.Argument(..., exists=True, dir_okay=False),
    mark: Path = typer.Argument(..., exists=True, dir_okay=False),
    position: str = typer.Option("southeast", "--position"),
    opacity: int = typer.Option(50, "--opacity"),
    scale: int = typer.Option(20, "--scale"),
    output: Path = OUTPUT,
):
    """Stamp a watermark on an image."""
    _run(ctx, output, lambda c: c.watermark(image, mark, position, opacity, scale))


if __name__ == "__main__":
    app()
