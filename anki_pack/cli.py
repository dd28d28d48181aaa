"""
CLI tools for building Anki package (.apkg) files.

Commands:
    build   - Build an .apkg from a JSON package description
    inspect - Inspect a built .apkg (decks, models, cards, media, check)
"""

import logging
import sys
from collections import Counter
from pathlib import Path

import cyclopts

from anki_pack.config import MODEL_CLOZE
from anki_pack.loader import load_package
from anki_pack.reader import ArchiveReader

app = cyclopts.App(help="Build Anki package (.apkg) files")


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


@app.command
def build(description: Path, *, output: Path | None = None, verbose: bool = False) -> int:
    """Build an .apkg from a JSON package description.

    :param description: Path to the package description (.json).
    :param output: Output .apkg path (defaults to the description name with .apkg).
    :param verbose: Log debug output.
    :returns: Exit status; 1 if any cards were skipped.
    """
    _setup_logging(verbose)
    if output is None:
        output = description.with_suffix(".apkg")

    package = load_package(description)

    print(f"Creating APKG: {output}")
    for deck in package.decks:
        print(f"  Deck: {deck.name} ({deck.get_note_count()} notes, {deck.get_card_count()} cards)")
    print(f"  Note types: {', '.join(m.name for m in package.models) or '-'}")
    print(f"  Media files: {len(package.media)}")

    package.write_to_file(output)

    stats = package.last_write_stats
    print(f"\nWrote {stats.notes_written} notes and {stats.cards_written} cards to {output}")
    if stats.duplicate_guids:
        print(f"Warning: {len(stats.duplicate_guids)} duplicate note GUIDs were written once")
    if stats.skipped_guids:
        print(f"Error: cards skipped for {len(stats.skipped_guids)} notes without storage ids")
        return 1
    return 0


# =============================================================================
# Inspect commands - diagnostic tools for .apkg files
# =============================================================================

inspect_app = cyclopts.App(name="inspect", help="Inspect Anki package (.apkg) files")
app.command(inspect_app)


@inspect_app.command
def decks(apkg_path: Path):
    """List decks with their note and card counts.

    :param apkg_path: Path to .apkg file.
    """
    with ArchiveReader(apkg_path) as reader:
        deck_records = reader.get_decks()
        card_counts: Counter[str] = Counter()
        note_decks: dict[str, set[int]] = {}
        for card in reader.get_cards():
            card_counts[str(card["did"])] += 1
            note_decks.setdefault(str(card["did"]), set()).add(card["nid"])

    print(f"Decks ({len(deck_records)}):\n")
    for deck_id, record in sorted(deck_records.items(), key=lambda item: item[1].get("name", "")):
        notes = len(note_decks.get(deck_id, ()))
        print(f"  {record.get('name', deck_id)} [{deck_id}]")
        print(f"    Notes: {notes}, Cards: {card_counts[deck_id]}")
        if record.get("desc"):
            print(f"    Description: {record['desc']}")


@inspect_app.command
def models(apkg_path: Path, *, verbose: bool = False):
    """List note types with their fields, templates and note counts.

    :param apkg_path: Path to .apkg file.
    :param verbose: If True, also print each template's front and back.
    """
    with ArchiveReader(apkg_path) as reader:
        model_records = reader.get_models()
        note_counts = Counter(str(note["mid"]) for note in reader.get_notes())

    print(f"Note Types ({len(model_records)}):\n")
    for model_id, record in model_records.items():
        kind = "cloze" if record.get("type") == MODEL_CLOZE else "standard"
        print(f"  {record.get('name', model_id)} [{model_id}, {kind}]")
        print(f"    Notes: {note_counts[model_id]}")
        print(f"    Fields: {', '.join(f['name'] for f in record.get('flds', []))}")
        for tmpl in record.get("tmpls", []):
            print(f"    Template {tmpl['ord']}: {tmpl['name']}")
            if verbose:
                print(f"      Front: {tmpl.get('qfmt', '')}")
                print(f"      Back: {tmpl.get('afmt', '')}")


@inspect_app.command
def cards(apkg_path: Path, *, limit: int = 10):
    """List cards with their note fields.

    :param apkg_path: Path to .apkg file.
    :param limit: Maximum cards to show (0 for all).
    """
    with ArchiveReader(apkg_path) as reader:
        notes = {note["id"]: note for note in reader.get_notes()}
        models = reader.get_models()
        all_cards = reader.get_cards()

        print(f"Cards ({len(all_cards)}):\n")

        shown = all_cards if limit == 0 else all_cards[:limit]
        for card in shown:
            note = notes.get(card["nid"])
            if note is None:
                print(f"  Card {card['id']}: missing note {card['nid']}")
                continue
            model = models.get(str(note["mid"]), {})
            names = [f["name"] for f in model.get("flds", [])]
            values = reader.get_note_fields(note)
            print(f"  Card {card['id']} (ord {card['ord']}, due {card['due']})")
            for name, value in zip(names or [f"field {i}" for i in range(len(values))], values):
                print(f"    {name}: {value}")
            print()

        remaining = len(all_cards) - len(shown)
        if remaining > 0:
            print(f"... and {remaining} more cards")


@inspect_app.command
def media(apkg_path: Path):
    """List media files in the package.

    :param apkg_path: Path to .apkg file.
    """
    with ArchiveReader(apkg_path) as reader:
        mapping = reader.get_media_mapping()
        print(f"Media files ({len(mapping)}):\n")
        for file_id, filename in mapping.items():
            print(f"  {file_id}: {filename}")


@inspect_app.command
def check(apkg_path: Path) -> int:
    """Check notes, cards, decks and media for consistency.

    :param apkg_path: Path to .apkg file.
    :returns: Exit status; 1 if problems were found.
    """
    with ArchiveReader(apkg_path) as reader:
        report = reader.check_consistency()

    print(f"Notes: {report.note_count}")
    print(f"Cards: {report.card_count}")

    problems = {
        "Notes without cards": report.notes_without_cards,
        "Cards without notes": report.orphan_cards,
        "Cards in unknown decks": report.unknown_decks,
        "Cards with bad template ordinal": report.bad_ordinals,
        "Missing media files": report.missing_media,
    }
    for label, items in problems.items():
        if items:
            print(f"{label}: {len(items)}")

    if report.ok:
        print("OK")
        return 0
    return 1


def main() -> None:
    """Main entry point. Exits with the command's return status."""
    sys.exit(app())


if __name__ == "__main__":
    main()
