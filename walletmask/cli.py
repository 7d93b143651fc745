"""
Command-line interface for WalletMask.

Usage:
    walletmask scan page.txt
    walletmask encode page.txt --strategy mask
    walletmask decode masked.txt --mapping mapping.json
"""

import json
import logging
from pathlib import Path

import click

from . import __version__
from .detectors import FAMILIES, find_matches, to_byte_offsets
from .encoder import encode, get_statistics
from .decoder import decode_file
from .mapper import Mapping
from .strategies import STRATEGIES


family_option = click.option(
    '-f', '--family', 'families', multiple=True, type=click.Choice(FAMILIES),
    help='Only detect this family (repeatable, default: all)'
)


def _read_text(input_file: str) -> str:
    with click.open_file(input_file, 'r', encoding='utf-8') as f:
        return f.read()


@click.group()
@click.version_option(version=__version__)
@click.option('-v', '--verbose', is_flag=True, help='Enable debug logging')
def cli(verbose):
    """WalletMask - Find and mask crypto wallet identifiers in text."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )


@cli.command()
@click.argument('input_file', type=click.Path(exists=True, allow_dash=True))
@family_option
@click.option('--bytes', 'byte_offsets', is_flag=True, help='Report UTF-8 byte offsets')
def scan(input_file, families, byte_offsets):
    """
    Print detected identifiers as JSON.

    Examples:

        walletmask scan page.txt

        cat page.txt | walletmask scan - --family eth --family ens
    """
    text = _read_text(input_file)
    matches = find_matches(text, families=families or None)
    if byte_offsets:
        matches = to_byte_offsets(text, matches)

    click.echo(json.dumps([m.to_dict() for m in matches], indent=2, ensure_ascii=False))


@cli.command()
@click.argument('input_file', type=click.Path(exists=True, allow_dash=True))
@family_option
def analyze(input_file, families):
    """
    Summarize detected identifiers by type.

    Shows what would be masked.
    """
    text = _read_text(input_file)
    matches = find_matches(text, families=families or None)

    click.echo(f"\nAnalyzing: {input_file}")
    click.echo(f"Size: {len(text):,} characters\n")

    by_type = {}
    for match in matches:
        by_type.setdefault(match.type, []).append(match)

    for match_type, type_matches in sorted(by_type.items()):
        click.echo(f"\n{match_type} ({len(type_matches)} found):")
        for match in type_matches[:5]:
            click.echo(f"  - {match.value} @ {match.index}")
        if len(type_matches) > 5:
            click.echo(f"  ... and {len(type_matches) - 5} more")

    click.echo(f"\n\nTotal: {len(matches)} wallet identifiers detected")


@cli.command('encode')
@click.argument('input_file', type=click.Path(exists=True))
@click.option('-o', '--output', type=click.Path(), help='Output file for masked text')
@click.option('-m', '--mapping', type=click.Path(), help='Output file for mapping JSON')
@click.option('-s', '--strategy', type=click.Choice(list(STRATEGIES)),
              default='replace', help='Masking strategy (default: replace)')
@family_option
@click.option('--dry-run', is_flag=True, help='Show what would be replaced without writing')
@click.option('--stats', is_flag=True, help='Show statistics after encoding')
def encode_cmd(input_file, output, mapping, strategy, families, dry_run, stats):
    """
    Mask wallet identifiers in a document.

    Examples:

        walletmask encode page.txt

        walletmask encode page.txt -o masked.txt -m mapping.json

        walletmask encode page.txt --strategy mask --family eth

        walletmask encode page.txt --dry-run
    """
    input_path = Path(input_file)

    if not output:
        output = input_path.stem + '_masked' + input_path.suffix
    if not mapping:
        mapping = input_path.stem + '_mapping.json'

    click.echo(f"Encoding: {input_file}")
    click.echo(f"Strategy: {strategy}")

    text = _read_text(input_file)
    masked, mapping_obj = encode(text, strategy=strategy, families=families or None)

    if dry_run:
        click.echo("\n--- DRY RUN - Detected identifiers ---\n")
        for placeholder, entry in mapping_obj.entries.items():
            click.echo(f"  {placeholder}: {entry.canonical}")
        click.echo(f"\nTotal: {len(mapping_obj.entries)} unique values")
        click.echo("\nNo files written (dry run)")
        return

    with open(output, 'w', encoding='utf-8') as f:
        f.write(masked)

    mapping_obj.save(mapping)

    click.echo(f"Masked:  {output}")
    click.echo(f"Mapping: {mapping}")

    if stats:
        click.echo("\n--- Statistics ---")
        stat_dict = get_statistics(mapping_obj)
        click.echo(f"Total unique values: {stat_dict['total_unique_values']}")
        click.echo(f"Total occurrences:   {stat_dict['total_occurrences']}")
        for cat, cat_stats in stat_dict['by_category'].items():
            click.echo(f"\n{cat}:")
            click.echo(f"  Unique: {cat_stats['unique']}")
            click.echo(f"  Occurrences: {cat_stats['occurrences']}")
            for example in cat_stats['examples']:
                click.echo(f"    {example}")


@cli.command('decode')
@click.argument('input_file', type=click.Path(exists=True))
@click.option('-m', '--mapping', type=click.Path(exists=True), required=True,
              help='Mapping JSON file from encoding')
@click.option('-o', '--output', type=click.Path(), help='Output file for decoded text')
def decode_cmd(input_file, mapping, output):
    """
    Restore placeholders to the original identifiers.

    Examples:

        walletmask decode masked.txt -m mapping.json
    """
    input_path = Path(input_file)

    if not output:
        output = input_path.stem + '_decoded' + input_path.suffix

    click.echo(f"Decoding: {input_file}")
    click.echo(f"Using mapping: {mapping}")

    decode_file(input_path, mapping, output)

    click.echo(f"Output: {output}")


@cli.command()
@click.argument('mapping_file', type=click.Path(exists=True))
def show_mapping(mapping_file):
    """Show contents of a mapping file."""
    mapping = Mapping.load(mapping_file)

    click.echo(f"\nMapping: {mapping_file}")
    click.echo(f"Version: {mapping.version}")
    click.echo(f"Created: {mapping.created}")
    click.echo(f"\nEntries ({len(mapping.entries)}):\n")

    for placeholder, entry in sorted(mapping.entries.items()):
        click.echo(f"  {placeholder}:")
        click.echo(f"    Canonical: {entry.canonical}")
        if len(entry.variations) > 1:
            click.echo(f"    Variations: {sorted(entry.variations)}")
        click.echo(f"    Occurrences: {entry.occurrences}")


def main():
    """Entry point."""
    cli()


if __name__ == '__main__':
    main()
