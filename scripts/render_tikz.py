#!/usr/bin/env python3
"""
TikZ Rendering CLI

Renders a file containing TikZ commands (the body of a tikzpicture) to PDF,
SVG or LaTeX source.

Commands:
    render - Render a TikZ body file to pdf, svg, tex or tikz

Examples:\n

    render_tikz.py render figure.tikzbody                      # figure.pdf

    render_tikz.py render figure.tikzbody --format svg         # figure.svg via pdf2svg

    render_tikz.py render figure.tikzbody -f svg --dvisvgm     # figure.svg via dvisvgm

    render_tikz.py render figure.tikzbody -o out/plot --keep   # keep scratch directories
"""

from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from tikzpictures import (
    PDF,
    SVG,
    TEX,
    TIKZ,
    RenderConfig,
    TikzPicture,
    TikzRenderError,
    save,
)
from tikzpictures.utils.logger import setup_logger


class OutputFormat(str, Enum):
    pdf = "pdf"
    svg = "svg"
    tex = "tex"
    tikz = "tikz"


TARGETS = {
    OutputFormat.pdf: PDF,
    OutputFormat.svg: SVG,
    OutputFormat.tex: TEX,
    OutputFormat.tikz: TIKZ,
}


app = typer.Typer(
    help="Render TikZ pictures to PDF, SVG or LaTeX source",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("render")
def render_command(
    input_file: Annotated[
        Path,
        typer.Argument(help="File with the tikzpicture body", exists=True, dir_okay=False),
    ],
    output_format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format"),
    ] = OutputFormat.pdf,
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Output path (default: input path without suffix)"),
    ] = None,
    options: Annotated[
        str,
        typer.Option("--options", help="tikzpicture options, e.g. 'scale=2'"),
    ] = "",
    preamble_file: Annotated[
        Optional[Path],
        typer.Option("--preamble", help="File with extra preamble lines", exists=True),
    ] = None,
    command: Annotated[
        Optional[str],
        typer.Option("--command", "-c", help="LaTeX engine (default: lualatex)"),
    ] = None,
    no_shell_escape: Annotated[
        bool,
        typer.Option("--no-shell-escape", help="Run the engine without --enable-write18"),
    ] = False,
    dvisvgm: Annotated[
        bool,
        typer.Option("--dvisvgm", help="Convert to SVG via DVI and dvisvgm instead of pdf2svg"),
    ] = False,
    keep: Annotated[
        bool,
        typer.Option("--keep", "-k", help="Keep intermediate files"),
    ] = False,
    config_file: Annotated[
        Optional[Path],
        typer.Option("--config", help="YAML render configuration", exists=True),
    ] = None,
    log_dir: Annotated[
        Optional[Path],
        typer.Option("--log-dir", help="Write a DEBUG-level render.log here"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug output on the console"),
    ] = False,
):
    """
    Render a TikZ body file.

    Examples:\n

        $ render_tikz.py render figure.tikzbody --format svg

        $ render_tikz.py render figure.tikzbody --options "scale=2" -o build/figure
    """
    config = RenderConfig.from_yaml(config_file) if config_file else RenderConfig.from_env()
    if command:
        config.latex_command = command
    if keep:
        config.delete_intermediate = False
    if dvisvgm:
        config.use_pdf2svg = False

    setup_logger(
        context_name="render",
        log_dir=log_dir,
        extra_provenance={"LaTeX engine": config.latex_command},
        console_level="DEBUG" if verbose else "INFO",
    )

    picture = TikzPicture(
        input_file.read_text(encoding="utf-8"),
        options=options,
        preamble=preamble_file.read_text(encoding="utf-8") if preamble_file else "",
        enable_write18=not no_shell_escape,
    )

    target = TARGETS[output_format](str(output if output else input_file.with_suffix("")))

    typer.secho(f"\nRendering: {input_file} -> {target.path}", fg=typer.colors.BLUE, bold=True)

    try:
        save(target, picture, config=config)
    except TikzRenderError as e:
        typer.secho(f"✗ Rendering failed\n{e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.secho(f"✓ Wrote {target.path}", fg=typer.colors.GREEN, bold=True)
    raise typer.Exit(code=0)


if __name__ == "__main__":
    app()
