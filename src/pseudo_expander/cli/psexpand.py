"""
psexpand - Pseudo-Instruction Expander Command-Line Interface
=============================================================

Expands RISC-V pseudo-instructions into the basic instructions an
assembler's encoder processes, using the built-in RV32I table or a
pseudo-op table file.

Usage Examples
--------------
Expand single statements:
    $ psexpand "li t0, 0x12345678"
    lui t0, 74565
    addi t0, t0, 1656

Labels and program counter:
    $ psexpand --pc 0x00400000 -S buffer=0x10010000 "la a0, buffer"

Expand a whole listing, showing addresses:
    $ psexpand -i program.s -a

List the pseudo-instruction table:
    $ psexpand --list
"""

import logging
from pathlib import Path
from typing import Optional

import click

from pseudo_expander import __version__
from pseudo_expander.cli.errors import handle_cli_exception
from pseudo_expander.config import ExpanderConfig
from pseudo_expander.expansion import (
    BASIC_INSTRUCTION_LENGTH,
    ExpansionResult,
    Expander,
    InstructionTable,
    SymbolTable,
    parse_int,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Option Parsing Helpers
# =============================================================================

def _parse_address(ctx: click.Context, param: click.Parameter, value: Optional[str]) -> Optional[int]:
    """Click callback: parse an address option (decimal, 0x hex, 0b binary)."""
    if value is None:
        return None
    try:
        return parse_int(value)
    except ValueError:
        raise click.BadParameter(f"invalid address {value!r}")


def _parse_symbols(
    ctx: click.Context, param: click.Parameter, values: tuple[str, ...]
) -> dict[str, int]:
    """Click callback: parse repeated NAME=ADDRESS options."""
    symbols: dict[str, int] = {}
    for definition in values:
        name, sep, address = definition.partition("=")
        name = name.strip()
        if not sep or not name:
            raise click.BadParameter(f"expected NAME=ADDRESS, got {definition!r}")
        try:
            symbols[name] = parse_int(address.strip())
        except ValueError:
            raise click.BadParameter(f"invalid address in {definition!r}")
    return symbols


def _setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


def _echo_table(table: InstructionTable) -> None:
    """Print every pseudo-instruction form with its translations."""
    for spec in table:
        header = spec.example
        if spec.description:
            header = f"{header:<20} {spec.description}"
        click.echo(header)
        for line in spec.template_list() or ():
            click.echo(f"    {line}")
        if spec.has_compact_translation:
            click.echo("  compact:")
            for line in spec.template_list(compact=True):
                click.echo(f"    {line}")


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument("statements", nargs=-1)
@click.option(
    "-i", "--input",
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Expand every statement of a source listing",
)
@click.option(
    "--pc",
    callback=_parse_address,
    help="Address of the first statement (default: $PSEXPAND_TEXT_BASE or 0x00400000)",
)
@click.option(
    "-S", "--symbol",
    "symbol_defs",
    multiple=True,
    callback=_parse_symbols,
    help="Define label (format: NAME=ADDRESS, can be repeated)",
)
@click.option(
    "-t", "--table",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Pseudo-op table file (default: built-in RV32I table)",
)
@click.option(
    "-c", "--compact/--no-compact",
    default=None,
    help="Use compact translations where available",
)
@click.option(
    "-a", "--addresses",
    is_flag=True,
    help="Prefix each generated statement with its address",
)
@click.option(
    "-l", "--list", "list_table",
    is_flag=True,
    help="List the pseudo-instruction table and exit",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="psexpand")
def main(
    statements: tuple[str, ...],
    input_file: Optional[Path],
    pc: Optional[int],
    symbol_defs: dict[str, int],
    table: Optional[Path],
    compact: Optional[bool],
    addresses: bool,
    list_table: bool,
    verbose: bool,
) -> None:
    """
    Expand RISC-V pseudo-instructions into basic instructions.

    STATEMENTS are pseudo-instruction statements, expanded in order at
    consecutive addresses. Use -i to expand a source listing instead; in a
    listing, labels may be defined with "name:" and basic instructions are
    copied through unchanged.

    \b
    Examples:
        psexpand "li t0, 100000"
        psexpand -S loop=0x00400000 "bnez t0, loop"
        psexpand -i program.s -a
    """
    _setup_logging(verbose)

    try:
        config = ExpanderConfig.from_env()
        if table is not None:
            config.table_path = table
        if compact is not None:
            config.compact = compact

        expander = Expander(config=config)
        logger.debug(f"Using {expander.table!r}")

        if list_table:
            _echo_table(expander.table)
            return

        if input_file is None and not statements:
            raise click.BadParameter("no statements given (pass STATEMENTS or -i FILE)")

        symbols = SymbolTable.from_mapping(symbol_defs)
        address = config.text_base if pc is None else pc

        if input_file is not None:
            if verbose:
                click.echo(f"Expanding {input_file}...", err=True)
            lines = input_file.read_text(encoding="utf-8").splitlines()
            for item in expander.expand_lines(lines, pc=address, symbols=symbols):
                _echo_statements(item.result, item.address, addresses)
            return

        for statement in statements:
            result = expander.expand(statement, pc=address, symbols=symbols)
            _echo_statements(result, address, addresses)
            address += result.length

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Expansion")


def _echo_statements(result: ExpansionResult, address: int, addresses: bool) -> None:
    """Print generated statements, optionally with their addresses."""
    for offset, line in enumerate(result):
        if addresses:
            click.echo(f"0x{(address + BASIC_INSTRUCTION_LENGTH * offset) & 0xFFFFFFFF:08x}  {line}")
        else:
            click.echo(line)


if __name__ == "__main__":
    main()
