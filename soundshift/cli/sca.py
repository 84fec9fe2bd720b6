"""CLI for sound-change and phonetic search operations.

Commands:
- apply: Run rule sets over one or more words
- search: Fuzzy IPA search over a lexicon file
- match: List phonemes matching a feature expression
- distance: Feature distance between two phonemes
"""

from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from soundshift.errors import SoundShiftError
from soundshift.observ import get_logger, set_language_id, timer
from soundshift.services.features import get_feature_index, parse_feature_expression
from soundshift.services.phonetic import PhoneticService
from soundshift.services.sca import SoundChangeService
from soundshift.storage.loaders import load_inventory, load_lexicon, read_sca_config

logger = get_logger(__name__)
console = Console()

_existing_file = click.Path(exists=True, dir_okay=False, path_type=Path)


@click.group()
def cli():
    """SoundShift sound-change and phonetic search CLI"""
    pass


@cli.command()
@click.argument('words', nargs=-1, required=True)
@click.option('--rules', 'rules_path', required=True, type=_existing_file, help='SCA rules JSON file')
@click.option('--inventory', 'inventory_path', default=None, type=_existing_file, help='Phoneme inventory JSON file')
@click.option('--verbose', '-v', is_flag=True, help='Show the changelog for each word')
def apply(words, rules_path: Path, inventory_path: Optional[Path], verbose: bool):
    """Apply sound-change rule sets to WORDS."""
    try:
        config = read_sca_config(rules_path)
        inventory = load_inventory(inventory_path) if inventory_path else None
    except SoundShiftError as e:
        raise click.ClickException(e.message) from e

    if config.language_id:
        set_language_id(config.language_id)

    macros = inventory.build_macros() if inventory else {}
    phonemes = inventory.all_phonemes() if inventory else None
    service = SoundChangeService(get_feature_index())

    for word in words:
        outcome = service.apply(word, config.rule_sets, macros, phonemes)
        console.print(escape(f"{word} → {outcome.result}"))

        for warning in outcome.warnings:
            console.print(f"  [yellow]warning: {escape(warning)}[/yellow]")

        if verbose and outcome.changelog:
            table = Table(show_header=True, header_style="bold")
            table.add_column("Rule")
            table.add_column("Change")
            table.add_column("Before")
            table.add_column("After")
            table.add_column("Detail")
            for step in outcome.changelog:
                table.add_row(*(escape(cell) for cell in (
                    step.rule_id, step.description, step.before, step.after, step.feature_detail or ""
                )))
            console.print(table)


@cli.command()
@click.argument('query')
@click.option('--lexicon', 'lexicon_path', required=True, type=_existing_file, help='Lexicon JSON file')
@click.option('--inventory', 'inventory_path', default=None, type=_existing_file, help='Phoneme inventory JSON file')
@click.option('--threshold', default=None, type=click.FloatRange(0.0, 1.0), help='Maximum normalized distance')
def search(query: str, lexicon_path: Path, inventory_path: Optional[Path], threshold: Optional[float]):
    """Find lexicon entries that sound like QUERY."""
    try:
        words = load_lexicon(lexicon_path)
        inventory = load_inventory(inventory_path) if inventory_path else None
    except SoundShiftError as e:
        raise click.ClickException(e.message) from e

    index = get_feature_index()
    phonemes = inventory.all_phonemes() if inventory else list(index.phonemes)
    service = PhoneticService(index)

    with timer(logger, "fuzzy_search", query=query, entries=len(words)):
        results = service.search(query, words, phonemes, threshold)

    if not results:
        console.print("No matches.")
        return

    for hit in results:
        entry = hit.entry
        console.print(escape(f"{hit.distance:.3f}  {entry.entry_id}  {entry.con_word_romanized}  /{entry.phonetic_ipa}/"))


@cli.command()
@click.argument('expression')
def match(expression: str):
    """List phonemes matching EXPRESSION, e.g. "[+stop, -voiced]"."""
    try:
        expr = parse_feature_expression(expression)
    except SoundShiftError as e:
        raise click.ClickException(e.message) from e

    phonemes = get_feature_index().phonemes_matching(expr)
    console.print(escape(" ".join(phonemes)) if phonemes else "No matching phonemes.")


@cli.command()
@click.argument('phoneme_a')
@click.argument('phoneme_b')
def distance(phoneme_a: str, phoneme_b: str):
    """Feature distance between PHONEME_A and PHONEME_B."""
    value = PhoneticService().compute_distance(phoneme_a, phoneme_b)
    console.print(f"{value:.3f}")


if __name__ == '__main__':
    cli()
