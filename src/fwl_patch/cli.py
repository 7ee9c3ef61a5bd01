"""FWL Seed Patcher - rewrite the world seed of a save descriptor."""
from __future__ import annotations

from pathlib import Path

import click

from fwl_core.hashes import AUTO, HASH_ALGORITHMS
from fwl_patch.worlds import apply_seed

HASH_CHOICES = [AUTO, *HASH_ALGORITHMS]


@click.command()
@click.argument("world", required=False)
@click.argument("save_dir", required=False, type=click.Path(file_okay=False, path_type=Path))
@click.argument("seed", required=False)
@click.option(
    "--hash",
    "algorithm",
    type=click.Choice(HASH_CHOICES),
    default=AUTO,
    show_default=True,
    help="Seed checksum algorithm; auto tries each until the checksum is found",
)
@click.option("--dry-run", is_flag=True, help="Locate and rebuild, but write nothing")
@click.pass_context
def main(
    ctx: click.Context,
    world: str | None,
    save_dir: Path | None,
    seed: str | None,
    algorithm: str,
    dry_run: bool,
) -> None:
    """Patch WORLD under SAVE_DIR so it carries SEED."""
    if world is None or save_dir is None or seed is None:
        click.echo(ctx.get_usage())
        ctx.exit(1)

    try:
        result = apply_seed(world, save_dir, seed, algorithm=algorithm, dry_run=dry_run)
    except Exception as e:
        # Fail closed with a single-line reason; nothing was written.
        print(f"FATAL: {e}")
        raise SystemExit(1)

    if result["status"] == "PATCHED":
        print(f"PASS: Seed of {world} set to {seed}")


if __name__ == "__main__":
    main()
