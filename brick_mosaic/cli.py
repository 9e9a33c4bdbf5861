"""Rich command-line interface powered by Typer."""

from __future__ import annotations

import logging
import time
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from brick_mosaic.board import ColorBoard
from brick_mosaic.catalog import (
    BrickCatalog,
    default_catalog,
    dump_catalog,
    load_catalog,
    unpack_rgba,
)
from brick_mosaic.config import MosaicConfig
from brick_mosaic.errors import CatalogError, ImageLoadError, UnsolvableError
from brick_mosaic.image_io import (
    load_image,
    make_comparison_grid,
    render_board,
    render_placement,
    save_upscaled,
)
from brick_mosaic.placement import PlacementSet
from brick_mosaic.report import PartsList, build_parts_list, format_cents, format_parts_list
from brick_mosaic.solver_exhaustive import solve_exhaustive
from brick_mosaic.solver_greedy import solve_greedy

app = typer.Typer(
    name="brick-mosaic",
    help="Plan a brick mosaic of any image from a catalog of colours, shapes and prices.",
    add_completion=False,
    rich_markup_mode="rich",
)
console = Console()
logger = logging.getLogger("brick_mosaic")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, markup=True)],
    )


def _collect_images(folder: Path, extensions: frozenset[str]) -> list[Path]:
    if not folder.exists():
        return []
    return sorted(
        f for f in folder.iterdir()
        if f.is_file() and f.suffix.lower() in extensions
    )


def _load_catalog_or_exit(path: Path | None) -> BrickCatalog:
    if path is None:
        return default_catalog()
    try:
        return load_catalog(path)
    except CatalogError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1) from exc


def _parts_table(parts: PartsList, catalog: BrickCatalog) -> Table:
    table = Table(title="Parts list", header_style="bold cyan")
    table.add_column("Colour")
    table.add_column("Part", justify="right")
    table.add_column("Size", justify="center")
    table.add_column("Unit cost", justify="right")
    table.add_column("Count", justify="right")

    for color_id, name in enumerate(catalog.color_names):
        for definition_id, count in parts.entries(color_id):
            definition = catalog.definitions[definition_id]
            table.add_row(
                name,
                f"#{definition_id}",
                f"{definition.width} x {definition.height}",
                f"{definition.cost}c",
                str(count),
            )
    return table


def _solve(
    board: ColorBoard,
    catalog: BrickCatalog,
    cfg: MosaicConfig,
    stem: str,
) -> PlacementSet:
    def _save_preview(placement: PlacementSet, index: int) -> None:
        path = cfg.output_dir / f"{stem}_progress_{index:05d}.{cfg.output_format}"
        save_upscaled(render_placement(placement, catalog, cfg.tile_size), path)

    if cfg.strategy == "exhaustive":
        return solve_exhaustive(
            board,
            catalog.definitions,
            on_solution=_save_preview if cfg.save_progress else None,
        )

    return solve_greedy(
        board,
        catalog.definitions,
        ranking=cfg.ranking,
        workers=cfg.workers,
        seed_only=cfg.seed_only,
        on_step=(
            (lambda p: _save_preview(p, p.brick_count)) if cfg.save_progress else None
        ),
    )


def _process_image(img_path: Path, catalog: BrickCatalog, cfg: MosaicConfig) -> PlacementSet:
    """Match, solve, save previews and print the parts list for one image."""
    stem = img_path.stem
    t0 = time.perf_counter()

    source = load_image(img_path, cfg.max_side)
    board = ColorBoard.from_pixels(
        source, catalog.rgb, color_space=cfg.color_space, dither=cfg.dither,
    )
    logger.info(
        "Board: %dx%d, %d colourable pegs", board.width, board.height, board.colorable_count,
    )

    board_img = render_board(board, catalog)
    if cfg.save_board:
        save_upscaled(board_img, cfg.output_dir / f"{stem}_board.{cfg.output_format}")

    placement = _solve(board, catalog, cfg, stem)

    mosaic = render_placement(placement, catalog, cfg.tile_size)
    mosaic_path = cfg.output_dir / f"{stem}_mosaic.{cfg.output_format}"
    save_upscaled(mosaic, mosaic_path)

    if cfg.save_comparison:
        make_comparison_grid(
            source, board_img, mosaic,
            cfg.output_dir / f"{stem}_comparison.{cfg.output_format}",
            cfg.tile_size,
        )

    parts = build_parts_list(placement, catalog)
    report = "\n".join(format_parts_list(parts, catalog))
    (cfg.output_dir / f"{stem}_parts.txt").write_text(report + "\n")
    console.print(_parts_table(parts, catalog))
    console.print(
        f"  [green]✓[/green] {mosaic_path.name}  "
        f"[dim]bricks={parts.brick_count}  cost={format_cents(parts.total_cost)}"
        f"  time={time.perf_counter() - t0:.1f}s[/dim]"
    )
    return placement


# Defaults come from MosaicConfig - single source of truth
_DEFAULTS = MosaicConfig()


# -- solve command -----------------------------------------------------

@app.command()
def solve(
    catalog_path: Path = typer.Argument(..., help="Brick catalog text file"),
    image: Path = typer.Argument(..., help="Image to convert"),
    output_dir: Path = typer.Option(
        _DEFAULTS.output_dir, "--output", "-o", help="Results folder",
    ),
    strategy: str = typer.Option(
        _DEFAULTS.strategy, "--strategy", help="'greedy' or 'exhaustive'",
    ),
    ranking: str = typer.Option(
        _DEFAULTS.ranking, "--ranking", help="Greedy ranking: 'rank' or 'score'",
    ),
    workers: int = typer.Option(
        _DEFAULTS.workers, "--workers", "-w", help="Greedy threads (0 = all CPUs)",
    ),
    seed_only: bool = typer.Option(
        _DEFAULTS.seed_only, "--seed-only/--seed-edges",
        help="Start greedy search from the top-left peg only",
    ),
    color_space: str = typer.Option(
        _DEFAULTS.color_space, "--color-space", help="'rgb' or 'lab'",
    ),
    dither: bool = typer.Option(
        _DEFAULTS.dither, "--dither/--no-dither", help="Ordered (Bayer) dithering",
    ),
    max_side: int | None = typer.Option(
        _DEFAULTS.max_side, "--max-side", "-m", help="Downscale longest side to N pegs",
    ),
    tile_size: int = typer.Option(
        _DEFAULTS.tile_size, "--tile", "-t", help="Preview pixels per peg",
    ),
    save_progress: bool = typer.Option(
        _DEFAULTS.save_progress, "--progress/--no-progress",
        help="Save a preview after every step",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Plan the mosaic for a single IMAGE using the bricks in CATALOG_PATH."""
    _setup_logging(verbose)

    try:
        cfg = MosaicConfig(
            strategy=strategy,
            ranking=ranking,
            workers=workers,
            seed_only=seed_only,
            color_space=color_space,
            dither=dither,
            max_side=max_side,
            tile_size=tile_size,
            save_progress=save_progress,
            output_dir=output_dir,
        )
    except ValueError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1) from exc

    catalog = _load_catalog_or_exit(catalog_path)
    output_dir.mkdir(parents=True, exist_ok=True)

    try:
        _process_image(image, catalog, cfg)
    except ImageLoadError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1) from exc
    except UnsolvableError as exc:
        console.print(f"[red]Critical error:[/red] {exc}")
        raise typer.Exit(2) from exc


# -- batch command -----------------------------------------------------

@app.command()
def batch(
    catalog_path: Path | None = typer.Argument(
        None, help="Brick catalog text file (built-in catalog if omitted)",
    ),
    input_dir: Path = typer.Option(
        _DEFAULTS.input_dir, "--input", "-i", help="Folder with source images",
    ),
    output_dir: Path = typer.Option(
        _DEFAULTS.output_dir, "--output", "-o", help="Results folder",
    ),
    strategy: str = typer.Option(_DEFAULTS.strategy, "--strategy"),
    ranking: str = typer.Option(_DEFAULTS.ranking, "--ranking"),
    workers: int = typer.Option(_DEFAULTS.workers, "--workers", "-w"),
    color_space: str = typer.Option(_DEFAULTS.color_space, "--color-space"),
    dither: bool = typer.Option(_DEFAULTS.dither, "--dither/--no-dither"),
    max_side: int | None = typer.Option(32, "--max-side", "-m"),
    tile_size: int = typer.Option(_DEFAULTS.tile_size, "--tile", "-t"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Process all images in INPUT_DIR and write results to OUTPUT_DIR."""
    _setup_logging(verbose)

    try:
        cfg = MosaicConfig(
            strategy=strategy,
            ranking=ranking,
            workers=workers,
            color_space=color_space,
            dither=dither,
            max_side=max_side,
            tile_size=tile_size,
            input_dir=input_dir,
            output_dir=output_dir,
        )
    except ValueError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1) from exc

    catalog = _load_catalog_or_exit(catalog_path)
    input_dir.mkdir(exist_ok=True)
    output_dir.mkdir(parents=True, exist_ok=True)

    images = _collect_images(input_dir, cfg.SUPPORTED_EXTENSIONS)
    if not images:
        console.print(f"\n[yellow]No images found in {input_dir}/[/yellow]")
        console.print("Place .png / .bmp / ... files there and re-run.\n")
        raise typer.Exit(0)

    console.print(Panel.fit(
        f"[bold]BRICK MOSAIC PLANNER[/bold]\n"
        f"Strategy: {cfg.strategy}  |  Ranking: {cfg.ranking}\n"
        f"Colours: {len(catalog.colors)}  |  Bricks: {len(catalog.definitions)}\n"
        f"Dithering: {cfg.dither}  |  Images: {len(images)}",
        border_style="cyan",
    ))

    failed = 0
    for idx, img_path in enumerate(images, 1):
        console.rule(f"[bold cyan][{idx}/{len(images)}] {img_path.name}[/bold cyan]")
        try:
            _process_image(img_path, catalog, cfg)
        except (ImageLoadError, UnsolvableError) as exc:
            failed += 1
            console.print(f"  [red]✗[/red] {img_path.name}: {exc}")

    console.print(Panel.fit(
        f"[bold green]ALL DONE[/bold green] - results in [bold]{output_dir}/[/bold]"
        + (f"  [red]({failed} failed)[/red]" if failed else ""),
        border_style="green",
    ))
    if failed:
        raise typer.Exit(2)


# -- catalog command ---------------------------------------------------

@app.command("catalog")
def show_catalog(
    catalog_path: Path | None = typer.Argument(
        None, help="Brick catalog text file (built-in catalog if omitted)",
    ),
    export: Path | None = typer.Option(
        None, "--export", "-e", help="Also write the catalog to this text file",
    ),
) -> None:
    """List the colours and brick definitions, rotations included."""
    catalog = _load_catalog_or_exit(catalog_path)

    colors = Table(title="Colours", header_style="bold cyan")
    colors.add_column("#", justify="right")
    colors.add_column("Name")
    colors.add_column("RGB")
    for i, (name, packed) in enumerate(zip(catalog.color_names, catalog.colors, strict=True)):
        r, g, b, _ = unpack_rgba(packed)
        colors.add_row(str(i), name, f"[on rgb({r},{g},{b})]    [/] {r} {g} {b}")

    bricks = Table(title="Bricks", header_style="bold cyan")
    bricks.add_column("#", justify="right")
    bricks.add_column("Size", justify="center")
    bricks.add_column("Cost", justify="right")
    bricks.add_column("Rotated", justify="center")
    for definition in catalog.definitions:
        bricks.add_row(
            str(definition.id),
            f"{definition.width} x {definition.height}",
            f"{definition.cost}c",
            "yes" if definition.id >= catalog.base_count else "",
        )

    console.print(colors)
    console.print(bricks)

    if export is not None:
        export.write_text(dump_catalog(catalog))
        console.print(f"Catalog written to [bold]{export}[/bold]")


if __name__ == "__main__":
    app()
