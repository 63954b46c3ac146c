import logging
import sys
from typing import Optional

import typer
import yaml

from qtatoms.kernel.errors import ParseError
from qtatoms.kernel.preset import qt

app = typer.Typer()


@app.command()
def map_atoms(
    filename: str = typer.Argument(..., help='File to read from'),
    path: Optional[str] = typer.Option(
        None, '--path', '-p', help='Show only the atom at given path, e.g. moov/mvhd'
    ),
    dump_yaml: bool = typer.Option(False, '--yaml', help='Dump atom tree as YAML'),
    strict: bool = typer.Option(
        False, '--strict', help='Fail on malformed atoms instead of skipping them'
    ),
    verbose: bool = typer.Option(False, '--verbose', '-v', help='Verbose logging'),
) -> None:
    """Print the atom tree of a QuickTime / MP4 file."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)
    cfg = qt(strict=strict)

    try:
        root = cfg.parse_file(filename)
    except ParseError as exc:
        cfg.render(exc, stream=sys.stderr)
        raise typer.Exit(code=1)

    node = cfg.findpath(path, root) if path else root
    if node is None:
        typer.echo(f'no atom found at path: {path}', err=True)
        raise typer.Exit(code=1)

    if dump_yaml:
        yaml.safe_dump(cfg.to_dict(node), sys.stdout, sort_keys=False, allow_unicode=True)
    else:
        cfg.render(node, stream=sys.stdout)


if __name__ == '__main__':
    app()
