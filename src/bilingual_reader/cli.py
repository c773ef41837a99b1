"""Command-line interface for Bilingual Reader."""

import logging
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.text import Text

from bilingual_reader import __version__
from bilingual_reader.errors import BilingualReaderError
from bilingual_reader.models.diagnostics import Diagnostic

console = Console()


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Log segmentation details")
def main(verbose: bool) -> None:
    """Bilingual Reader - split bilingual novels into chapters for reading."""
    from bilingual_reader.config import get_settings

    level = logging.DEBUG if verbose else get_settings().log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _print_diagnostics(diagnostics: list[Diagnostic], limit: int = 20) -> None:
    if not diagnostics:
        console.print("[green]✓[/green] No diagnostics")
        return

    table = Table(title=f"Diagnostics ({len(diagnostics):,})")
    table.add_column("Kind", style="yellow")
    table.add_column("Paragraph", justify="right")
    table.add_column("Chapter")
    table.add_column("Message", style="dim")
    for d in diagnostics[:limit]:
        table.add_row(
            d.kind.value,
            "" if d.paragraph_id is None else str(d.paragraph_id),
            d.chapter_key or "",
            Text(d.message),
        )
    console.print(table)
    if len(diagnostics) > limit:
        console.print(f"[dim]... and {len(diagnostics) - limit:,} more[/dim]")


def _print_chapters(chapters, title: str = "Chapters") -> None:
    table = Table(title=title)
    table.add_column("#", style="cyan", justify="right")
    table.add_column("Key")
    table.add_column("Title")
    table.add_column("Paragraphs", style="green", justify="right")
    for c in chapters:
        table.add_row(str(c.sequence_number), c.chapter_key, c.title, f"{len(c.paragraphs):,}")
    console.print(table)


def _parse_expected(value: str | None) -> dict[int, int] | int | None:
    """Parse ``1=9,2=15,3=11`` (part=count) or a plain chapter count."""
    if value is None:
        return None
    value = value.strip()
    try:
        if "=" not in value:
            return int(value)
        expected = {}
        for item in value.split(","):
            part, count = item.split("=")
            expected[int(part)] = int(count)
        return expected
    except ValueError:
        raise click.BadParameter(f"expected 'N' or 'PART=COUNT,...', got {value!r}") from None


def _finish_split(book, vocabulary_path: str | None, result, out: str | None) -> None:
    """Partition vocabulary, report, and write artifacts for a segmented book."""
    from bilingual_reader.ingest.loader import load_vocabulary
    from bilingual_reader.ingest.writer import write_chapter_artifacts, write_vocabulary_artifacts
    from bilingual_reader.vocabulary.partition import partition_annotations

    diagnostics = list(result.diagnostics)

    console.print(
        f"[green]✓[/green] {len(result.chapters):,} chapters, "
        f"{result.paragraph_count:,} of {len(book.paragraphs):,} paragraphs assigned"
    )

    vocabulary = partition = None
    if vocabulary_path:
        vocabulary, vocab_diagnostics = load_vocabulary(Path(vocabulary_path))
        partition = partition_annotations(result.paragraph_map, vocabulary.vocabulary)
        diagnostics.extend(vocab_diagnostics)
        diagnostics.extend(partition.diagnostics)
        console.print(
            f"[green]✓[/green] {partition.annotation_count:,} of "
            f"{len(vocabulary.vocabulary):,} vocabulary items bundled"
        )

    _print_chapters(result.chapters)
    _print_diagnostics(diagnostics)

    if out:
        out_dir = Path(out)
        written = write_chapter_artifacts(book, result, out_dir)
        if vocabulary is not None and partition is not None:
            written += write_vocabulary_artifacts(vocabulary, result, partition, out_dir)
        console.print(f"\n[green]✓[/green] Wrote {len(written):,} files to {out_dir}")


# ============================================================================
# Split Commands
# ============================================================================


@main.command(name="split-markers")
@click.argument("bilingual", type=click.Path(exists=True, dir_okay=False))
@click.option("--vocabulary", "-V", type=click.Path(exists=True, dir_okay=False), help="Vocabulary artifact to partition")
@click.option("--markers", "-m", "markers_file", type=click.Path(exists=True, dir_okay=False), help="Marker config JSON")
@click.option("--chapter-style", type=click.Choice(["roman", "words", "digits"]), default="words", show_default=True)
@click.option("--chapter-prefix", default="Chapter", show_default=True, help="Empty for bare numerals")
@click.option("--part-style", type=click.Choice(["roman", "words", "digits"]), help="Enable part markers")
@click.option("--part-prefix", default="Part", show_default=True)
@click.option("--expected", "-e", help="Known structure: chapter count, or PART=COUNT,...")
@click.option("--book-id", "-b", default="book", show_default=True)
@click.option("--out", "-o", type=click.Path(file_okay=False), help="Directory for chapter artifacts")
def split_markers(
    bilingual: str,
    vocabulary: str | None,
    markers_file: str | None,
    chapter_style: str,
    chapter_prefix: str,
    part_style: str | None,
    part_prefix: str,
    expected: str | None,
    book_id: str,
    out: str | None,
) -> None:
    """Split a paragraph artifact on sentinel paragraphs."""
    from bilingual_reader.ingest.loader import load_bilingual, read_json
    from bilingual_reader.segment.markers import MarkerVocabulary, resolve_structure, scan_markers

    structure = _parse_expected(expected)
    try:
        if markers_file:
            marker_vocabulary = MarkerVocabulary.from_config(read_json(Path(markers_file)))
        else:
            marker_vocabulary = MarkerVocabulary.numbered(
                chapter_style=chapter_style,
                chapter_prefix=chapter_prefix,
                part_style=part_style,
                part_prefix=part_prefix,
            )

        console.print(f"[bold]Splitting:[/bold] {bilingual}")
        with console.status("Scanning for markers..."):
            book, load_diagnostics = load_bilingual(Path(bilingual))
            if structure is None:
                result = scan_markers(book.paragraphs, marker_vocabulary, book_id)
            else:
                result = resolve_structure(book.paragraphs, marker_vocabulary, structure, book_id)
        result.diagnostics[:0] = load_diagnostics

        _finish_split(book, vocabulary, result, out)
    except BilingualReaderError as exc:
        raise click.ClickException(str(exc)) from exc


@main.command(name="split-ranges")
@click.argument("bilingual", type=click.Path(exists=True, dir_okay=False))
@click.option("--structure", "-s", required=True, type=click.Path(exists=True, dir_okay=False), help="JSON list of {title, start_id, end_id}")
@click.option("--vocabulary", "-V", type=click.Path(exists=True, dir_okay=False), help="Vocabulary artifact to partition")
@click.option("--book-id", "-b", default="book", show_default=True)
@click.option("--out", "-o", type=click.Path(file_okay=False), help="Directory for section artifacts")
def split_ranges(
    bilingual: str, structure: str, vocabulary: str | None, book_id: str, out: str | None
) -> None:
    """Split a paragraph artifact by paragraph-id ranges."""
    from bilingual_reader.ingest.loader import load_bilingual
    from bilingual_reader.segment.ranges import segment_by_ranges

    try:
        descriptors = _load_descriptors(Path(structure))
        console.print(f"[bold]Splitting:[/bold] {bilingual}")
        book, load_diagnostics = load_bilingual(Path(bilingual))
        result = segment_by_ranges(book.paragraphs, descriptors, book_id)
        result.diagnostics[:0] = load_diagnostics

        _finish_split(book, vocabulary, result, out)
    except BilingualReaderError as exc:
        raise click.ClickException(str(exc)) from exc


def _load_descriptors(path: Path):
    from pydantic import ValidationError

    from bilingual_reader.errors import StructureError
    from bilingual_reader.ingest.loader import read_json
    from bilingual_reader.models.chapter import SectionDescriptor

    data = read_json(path)
    if not isinstance(data, list):
        raise StructureError(f"{path}: expected a JSON array of sections")
    try:
        return [SectionDescriptor.model_validate(d) for d in data]
    except ValidationError as exc:
        raise StructureError(f"{path}: {exc}") from exc


@main.command()
@click.argument("structure", type=click.Path(exists=True, dir_okay=False))
def check(structure: str) -> None:
    """Check that id-range sections don't overlap or leave gaps."""
    from bilingual_reader.segment.ranges import validate_descriptors

    try:
        descriptors = _load_descriptors(Path(structure))
    except BilingualReaderError as exc:
        raise click.ClickException(str(exc)) from exc

    problems = validate_descriptors(descriptors)
    if not problems:
        console.print(f"[green]✓[/green] {len(descriptors)} sections, no overlaps or gaps")
        return
    for problem in problems:
        console.print(f"[red]✗[/red] {problem}")
    raise SystemExit(1)


# ============================================================================
# Catalog Commands
# ============================================================================


@main.command()
@click.argument("book_id")
@click.option("--catalog", "-c", type=click.Path(exists=True, dir_okay=False), help="Book catalog JSON (default from settings)")
@click.option("--chapter", "-n", type=int, help="Show one chapter's paragraphs")
def chapters(book_id: str, catalog: str | None, chapter: int | None) -> None:
    """List a catalog book's chapters."""
    from bilingual_reader.config import get_settings
    from bilingual_reader.library.catalog import BookCatalog

    catalog_path = Path(catalog) if catalog else get_settings().catalog_file
    try:
        book_catalog = BookCatalog.from_file(catalog_path)
        if chapter is None:
            metadata = book_catalog.get_chapter_metadata(book_id)
            if not metadata:
                console.print(f"[yellow]No chapters found for book {book_id}[/yellow]")
                return
            segmented = book_catalog.segmented(book_id)
            _print_chapters(segmented.segmentation.chapters, title=f"Book {book_id}")
            return

        record = book_catalog.get_chapter(book_id, chapter)
    except BilingualReaderError as exc:
        raise click.ClickException(str(exc)) from exc

    if record is None:
        console.print(f"[yellow]Chapter {chapter} not found for book {book_id}[/yellow]")
        return
    console.print(f"[bold]{record.title}[/bold] [dim]({record.chapter_key})[/dim]\n")
    for p in record.paragraphs:
        console.print(f"  [dim]{p.id}[/dim]")
        console.print(Text(f"  {p.source}"))
        if p.translation:
            console.print(Text(f"  {p.translation}", style="cyan"))
        console.print()


@main.command()
@click.option("--catalog", "-c", type=click.Path(exists=True, dir_okay=False), help="Book catalog JSON (default from settings)")
@click.option("--out", "-o", type=click.Path(file_okay=False), help="Output root (default from settings)")
def build(catalog: str | None, out: str | None) -> None:
    """Write chapter and vocabulary artifacts for every catalog book."""
    from bilingual_reader.config import get_settings
    from bilingual_reader.ingest.writer import write_chapter_artifacts, write_vocabulary_artifacts
    from bilingual_reader.library.catalog import BookCatalog

    settings = get_settings()
    out_root = Path(out) if out else settings.output_dir
    try:
        book_catalog = BookCatalog.from_file(Path(catalog) if catalog else settings.catalog_file)
        for book_id, config in book_catalog.books.items():
            segmented = book_catalog.segmented(book_id)
            out_dir = out_root / book_id
            written = write_chapter_artifacts(segmented.book, segmented.segmentation, out_dir)
            if segmented.vocabulary is not None and segmented.partition is not None:
                written += write_vocabulary_artifacts(
                    segmented.vocabulary, segmented.segmentation, segmented.partition, out_dir
                )
            console.print(
                f"[green]✓[/green] {config.title}: {len(segmented.segmentation.chapters):,} chapters, "
                f"{len(written):,} files, {len(segmented.diagnostics):,} diagnostics"
            )
    except BilingualReaderError as exc:
        raise click.ClickException(str(exc)) from exc


@main.command()
@click.argument("text")
@click.option("--terms", "-t", "terms_file", required=True, type=click.Path(exists=True, dir_okay=False), help="JSON list of key terms")
@click.option("--side", type=click.Choice(["source", "target"]), default="source", show_default=True)
def highlight(text: str, terms_file: str, side: str) -> None:
    """Show which vocabulary terms would be highlighted in TEXT."""
    from pydantic import TypeAdapter, ValidationError

    from bilingual_reader.ingest.loader import read_json
    from bilingual_reader.models.vocabulary import KeyTerm
    from bilingual_reader.vocabulary.highlight import highlight as highlight_text

    try:
        terms = TypeAdapter(list[KeyTerm]).validate_python(read_json(Path(terms_file)))
    except ValidationError as exc:
        raise click.ClickException(f"{terms_file}: {exc}") from exc
    except BilingualReaderError as exc:
        raise click.ClickException(str(exc)) from exc

    spans = highlight_text(text, terms, side)
    rendered = Text()
    for s in spans:
        rendered.append(s.text, style="black on yellow" if s.highlighted else "")
    console.print(rendered)

    hits = [s for s in spans if s.highlighted]
    if hits:
        table = Table(title="Highlights")
        table.add_column("Text", style="yellow")
        table.add_column("Gloss", style="cyan")
        for s in hits:
            table.add_row(Text(s.text), Text(s.gloss(side)))
        console.print(table)


if __name__ == "__main__":
    main()
