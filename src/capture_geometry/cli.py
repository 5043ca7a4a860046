"""Command-line interface for capture_geometry."""

import logging
from pathlib import Path
from typing import Optional

import typer
from PIL import Image
from rich.console import Console

from . import __version__
from .config import get_settings
from .containment import is_in_scan_area, is_inside_guide, overlap_ratio
from .coordinates import ImageRect, NormalizedRect, OriginConvention, Size, ViewRect
from .crop import crop_image

app = typer.Typer(
    name="capture_geometry",
    help="Guide-region barcode checks and photo crop geometry",
    context_settings={"help_option_names": ["-h", "--help"]},
    add_completion=False,
)

console = Console(stderr=True)


def version_callback(value: bool) -> None:
    """Print version and exit if --version flag is provided."""
    if value:
        typer.echo(f"capture_geometry version {__version__}")
        raise typer.Exit()


def parse_rect(value: str, name: str) -> tuple[float, float, float, float]:
    """Parse 'x,y,width,height' into floats, exiting with an error message on bad input."""
    try:
        parts = [float(x.strip()) for x in value.split(",")]
        if len(parts) != 4:
            raise ValueError(f"{name} must have exactly 4 values")
    except ValueError as e:
        console.print(f"[red]Error:[/red] Invalid {name} format: {e}")
        console.print("Expected format: 'x,y,width,height' (e.g., '400,800,200,400')")
        raise typer.Exit(1) from None
    return parts[0], parts[1], parts[2], parts[3]


def parse_size(value: str, name: str) -> Size:
    """Parse 'WIDTHxHEIGHT' into a Size, exiting with an error message on bad input."""
    try:
        width, height = (float(x.strip()) for x in value.lower().split("x"))
    except ValueError:
        console.print(f"[red]Error:[/red] Invalid {name} format: {value!r}")
        console.print("Expected format: 'WIDTHxHEIGHT' (e.g., '1000x2000')")
        raise typer.Exit(1) from None
    return Size(width=width, height=height)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Guide-region barcode checks and photo crop geometry."""
    level = logging.DEBUG if verbose else get_settings().log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@app.command()
def check(
    feature: str = typer.Argument(..., help="Feature box as normalized 'x,y,width,height'"),
    guide: str = typer.Option(..., "--guide", "-g", help="Guide rectangle in view points 'x,y,width,height'"),
    preview: str = typer.Option(..., "--preview", "-p", help="Preview view size 'WIDTHxHEIGHT'"),
    origin: Optional[OriginConvention] = typer.Option(
        None,
        "--origin",
        "-o",
        help="Origin convention of the feature box (default: configured vision origin)",
    ),
) -> None:
    """Check whether a detected feature lies completely inside the guide.

    \b
    Example:
        capture-geometry check 0.45,0.45,0.1,0.1 --guide 300,600,400,800 --preview 1000x2000
    """
    if origin is None:
        origin = OriginConvention(get_settings().vision_origin)

    feature_rect = NormalizedRect(*parse_rect(feature, "feature"), origin=origin)
    guide_rect = ViewRect(*parse_rect(guide, "guide"))
    preview_size = parse_size(preview, "preview")

    accepted = is_inside_guide(feature_rect, guide_rect, preview_size)

    console.print("[bold cyan]Guide Containment[/bold cyan]")
    console.print(f"Feature: {feature_rect.as_tuple()} ({origin.value})")
    console.print(f"Guide: {guide_rect.as_tuple()} on {preview_size.width:g}×{preview_size.height:g}")
    if accepted:
        console.print("[green]✓[/green] Feature is inside the guide")
    else:
        console.print("[yellow]✗[/yellow] Feature is not inside the guide")
    typer.echo("accepted" if accepted else "rejected")


@app.command()
def overlap(
    feature: str = typer.Argument(..., help="Feature box in image pixels 'x,y,width,height'"),
    scan_area: str = typer.Argument(..., help="Scan area in image pixels 'x,y,width,height'"),
    threshold: Optional[float] = typer.Option(
        None,
        "--threshold",
        "-t",
        help="Minimum overlap fraction (default: configured threshold)",
        min=0.0,
        max=1.0,
    ),
) -> None:
    """Check whether enough of a feature overlaps the scan area.

    \b
    Example:
        capture-geometry overlap 0,0,200,200 100,0,400,400 --threshold 0.5
    """
    if threshold is None:
        threshold = get_settings().overlap_threshold

    feature_rect = ImageRect(*parse_rect(feature, "feature"))
    area_rect = ImageRect(*parse_rect(scan_area, "scan area"))

    ratio = overlap_ratio(feature_rect, area_rect)
    accepted = is_in_scan_area(feature_rect, area_rect, threshold)

    console.print("[bold cyan]Scan Area Overlap[/bold cyan]")
    console.print(f"Overlap: {ratio * 100:.1f}% (threshold {threshold * 100:.1f}%)")
    typer.echo("accepted" if accepted else "rejected")


@app.command()
def crop(
    image_path: Path = typer.Argument(
        ...,
        help="Captured photo",
        exists=True,
        dir_okay=False,
        resolve_path=True,
    ),
    output_path: Path = typer.Argument(..., help="Where to save the cropped photo"),
    guide: str = typer.Option(..., "--guide", "-g", help="Guide rectangle in view points 'x,y,width,height'"),
    preview: str = typer.Option(..., "--preview", "-p", help="Preview view size 'WIDTHxHEIGHT'"),
) -> None:
    """Crop a photo to what was visible inside the guide on an aspect-fill preview.

    Falls back to saving the full photo when no crop is available.

    \b
    Example:
        capture-geometry crop photo.jpg label.jpg --guide 400,800,200,400 --preview 1000x2000
    """
    guide_rect = ViewRect(*parse_rect(guide, "guide"))
    preview_size = parse_size(preview, "preview")

    console.print("[bold cyan]Guide Crop[/bold cyan]")
    console.print(f"Input: {image_path}")
    console.print(f"Output: {output_path}")

    try:
        with Image.open(image_path) as img:
            img.load()
            cropped = crop_image(img, guide_rect, preview_size)
            was_cropped = cropped is not img
            output_path.parent.mkdir(parents=True, exist_ok=True)
            cropped.save(output_path)
    except OSError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None

    if was_cropped:
        console.print(f"[green]✓[/green] Cropped to {cropped.width}x{cropped.height}")
    else:
        console.print("[yellow]![/yellow] Crop unavailable, saved full image")
    typer.echo(f"{cropped.width}x{cropped.height}")

