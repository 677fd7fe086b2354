"""CLI interface for Image Uploader using Typer.

Main entry point for the application. Handles command definitions,
argument parsing, progress bars, and Rich console output.
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, TaskProgressColumn
from rich.table import Table

from .config import load_config, validate_config, get_uploader_config, prepare_upload_dirs, ConfigError
from .errors import ImageUploadError
from .header import read_image_info
from .models import CropOnly, Identity, ResizeOnly, ResizeThenCrop, TransformPlan, VariantResult
from .storage import build_variant_name, build_variant_path
from .uploader import ImageUploader
from .utils import (
    copy_to_clipboard,
    format_output,
    format_file_size,
    print_success,
    print_error,
    print_warning,
    setup_logging,
)

app = typer.Typer(
    name="image-upload",
    help="Produce resized and cropped renditions of uploaded images",
    add_completion=False,
)
console = Console()


def describe_plan(plan: TransformPlan) -> str:
    """Render a TransformPlan as a short human-readable string."""
    if isinstance(plan, Identity):
        return "keep"
    if isinstance(plan, ResizeOnly):
        return f"resize to {plan.size[0]}x{plan.size[1]}"
    if isinstance(plan, CropOnly):
        r = plan.rect
        return f"crop {r.width}x{r.height} at ({r.x}, {r.y})"
    if isinstance(plan, ResizeThenCrop):
        w, h = plan.resize.size
        r = plan.rect
        return f"resize to {w}x{h}, crop {r.width}x{r.height} at ({r.x}, {r.y})"
    return repr(plan)


def load_uploader(config_path: Optional[Path]) -> ImageUploader:
    raw = load_config(config_path)
    validate_config(raw)
    return ImageUploader(get_uploader_config(raw))


def print_dry_run(uploader: ImageUploader, file_path: Path, main_name: str) -> None:
    descriptor = read_image_info(file_path)
    plans = uploader.plan_descriptor(descriptor)

    table = Table(title=f"{file_path.name} ({descriptor.format.name} {descriptor.width}x{descriptor.height})")
    table.add_column("Variant", style="cyan")
    table.add_column("Plan")
    table.add_column("Output", justify="right")
    table.add_column("Path", style="dim")

    for spec, plan in plans:
        name = build_variant_name(main_name, spec.name_suffix, descriptor.format)
        table.add_row(
            spec.name_suffix or "(none)",
            describe_plan(plan),
            f"{plan.size[0]}x{plan.size[1]}",
            str(build_variant_path(spec.upload_dir, name)),
        )

    console.print(table)


def print_results_table(results: list[VariantResult]) -> None:
    table = Table(title="Written Variants")
    table.add_column("File", style="cyan")
    table.add_column("Size", justify="right")
    table.add_column("Dimensions", justify="right")
    table.add_column("SHA-256", style="dim")

    for r in results:
        table.add_row(r.name, format_file_size(r.size_bytes), f"{r.width}x{r.height}", r.content_hash[:16])

    console.print(table)


@app.command()
def upload(
    files: list[Path] = typer.Argument(
        ...,
        help="Image files (PNG, JPEG, GIF) to produce variants for",
        exists=True,
        dir_okay=False,
    ),
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config JSON (default: ~/.config/image-uploader/config.json)",
    ),
    name: Optional[str] = typer.Option(
        None,
        "--name",
        "-N",
        help="Main name for the variants (single file only, default: file stem)",
    ),
    mkdir: bool = typer.Option(
        False,
        "--mkdir",
        "-m",
        help="Create missing upload directories",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "-n",
        help="Show planned transforms without writing",
    ),
    output_format: str = typer.Option(
        "table",
        "--output-format",
        "-o",
        help="Output format: table|plain|markdown|json",
    ),
    copy: bool = typer.Option(
        False,
        "--copy",
        help="Copy written paths to the clipboard",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
) -> None:
    """Produce every configured variant of each file.

    A failing file is reported and the remaining files are still processed.
    """
    setup_logging(verbose)

    if name is not None and len(files) > 1:
        print_error("--name can only be used with a single file")
        raise typer.Exit(2)

    try:
        uploader = load_uploader(config_path)
    except ConfigError as e:
        print_error(f"Configuration error: {e}")
        raise typer.Exit(1)

    if mkdir and not dry_run:
        try:
            prepare_upload_dirs(uploader.config)
        except OSError as e:
            print_error(f"Cannot create upload directories: {e}")
            raise typer.Exit(1)

    results: list[VariantResult] = []
    failed = 0

    if dry_run:
        for file_path in files:
            try:
                print_dry_run(uploader, file_path, name or file_path.stem)
            except ImageUploadError as e:
                print_error(f"{file_path.name}: {e}")
                failed += 1
        raise typer.Exit(1 if failed else 0)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("[cyan]Processing files...", total=len(files))

        for file_path in files:
            progress.update(task, description=f"[cyan]Processing {file_path.name}...")
            try:
                results.extend(uploader.produce_variants(file_path, name or file_path.stem))
            except ImageUploadError as e:
                print_error(f"Failed to process {file_path.name}: {e}")
                failed += 1
            progress.advance(task)

    if results:
        if output_format == 'table':
            print_results_table(results)
        else:
            console.print(format_output(results, output_format), markup=False, highlight=False)

        if copy:
            if copy_to_clipboard(format_output(results, 'plain')):
                console.print(f"\n[dim]{len(results)} paths copied to clipboard[/dim]")
            else:
                print_warning("Clipboard not available")

        print_success(f"Wrote {len(results)} variants from {len(files) - failed} of {len(files)} files")
    else:
        print_warning("No variants were written")

    if failed:
        raise typer.Exit(1)


@app.command()
def inspect(
    files: list[Path] = typer.Argument(
        ...,
        help="Image files to inspect",
        exists=True,
        dir_okay=False,
    ),
) -> None:
    """Show format and dimensions read from image headers.

    Images are not decoded, so this is fast even for very large files.
    """
    table = Table(title="Image Headers")
    table.add_column("File", style="cyan")
    table.add_column("Format")
    table.add_column("Dimensions", justify="right")
    table.add_column("Pixels", justify="right")

    failed = 0
    for file_path in files:
        try:
            info = read_image_info(file_path)
        except ImageUploadError as e:
            print_error(f"{file_path.name}: {e}")
            failed += 1
            continue
        table.add_row(file_path.name, info.format.name, f"{info.width}x{info.height}", f"{info.area:,}")

    if table.row_count:
        console.print(table)
    if failed:
        raise typer.Exit(1)


@app.command("config")
def config_cmd(
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config JSON",
    ),
) -> None:
    """Validate the configuration and list the configured variants."""
    try:
        uploader = load_uploader(config_path)
    except ConfigError as e:
        console.print(f"[red]✗[/red] Configuration error: {e}")
        raise typer.Exit(1)

    console.print("[green]✓[/green] Configuration valid")
    console.print(f"  Pixel budget: {uploader.max_dimensions:,}")

    table = Table(title="Image Versions")
    table.add_column("Suffix", style="cyan")
    table.add_column("Box", justify="right")
    table.add_column("Quality", justify="right")
    table.add_column("Crop")
    table.add_column("Directory", style="dim")

    for spec in uploader.image_versions:
        table.add_row(
            spec.name_suffix or "(none)",
            f"{spec.max_width}x{spec.max_height}",
            str(spec.quality),
            "yes" if spec.crop else "no",
            str(spec.upload_dir),
        )

    console.print(table)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
