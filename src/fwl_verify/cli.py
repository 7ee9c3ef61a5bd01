import json
from pathlib import Path
import click
from fwl_core.hashes import AUTO, HASH_ALGORITHMS
from .logic import verify_descriptor

@click.group()
def main():
    pass

@main.command("descriptor")
@click.argument("path", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--hash", "algorithm", type=click.Choice([AUTO, *HASH_ALGORITHMS]), default=AUTO)
def descriptor_cmd(path: Path, algorithm: str):
    result = verify_descriptor(path, algorithm)
    click.echo(json.dumps(result, sort_keys=True, separators=(",", ":"), ensure_ascii=False))
    if result["status"] != "PASS":
        raise SystemExit(1)

if __name__ == "__main__":
    main()
