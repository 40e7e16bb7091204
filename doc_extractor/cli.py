"""
Command-line interface for Doc Extractor.
"""

import logging
import os
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn, TimeRemainingColumn
from rich.table import Table

from doc_extractor import __version__
from doc_extractor.batch import BatchExtractor
from doc_extractor.exceptions import ExtractionError
from doc_extractor.extractor import extract_file
from doc_extractor.types import DocumentFormat
from doc_extractor.utils import SUFFIX_FORMATS, configure_logging, format_file_size
from doc_extractor.zip_reader import list_entries

# Status goes to stderr so extracted text on stdout can be piped.
console = Console(stderr=True)

FORMAT_CHOICES = click.Choice([fmt.value for fmt in DocumentFormat], case_sensitive=False)


def _print_warnings(warnings):
    for warning in warnings:
        console.print(f"[yellow]⚠ {warning}[/yellow]", highlight=False)


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
def cli(verbose):
    """
    Doc Extractor - Convert resumes and job descriptions to plain text.
    """
    configure_logging(logging.DEBUG if verbose else logging.WARNING)


@cli.command(name="extract")
@click.argument('input_file', type=click.Path(exists=True, dir_okay=False))
@click.option(
    '--format', '-f', 'format_hint',
    type=FORMAT_CHOICES,
    default=None,
    help='Document format (default: derived from the file suffix)'
)
@click.option(
    '--output', '-o',
    type=click.Path(dir_okay=False),
    default=None,
    help='Write the extracted text to this file instead of stdout'
)
@click.option('--quiet', '-q', is_flag=True, help='Do not print warnings')
def extract_command(input_file, format_hint, output, quiet):
    """
    Extract plain text from a TXT, MD, RTF, PDF or DOCX file.

    Examples:

        doc-extractor extract resume.docx

        doc-extractor extract resume.pdf -o resume.txt

        doc-extractor extract notes.dat --format text
    """
    try:
        result = extract_file(input_file, format_hint)
    except ExtractionError as e:
        console.print(f"[bold red]✗ Error:[/bold red] {e}", highlight=False)
        sys.exit(1)

    if not quiet:
        _print_warnings(result.warnings)

    if output:
        with open(output, 'w', encoding='utf-8') as handle:
            handle.write(result.body + "\n")
        console.print(
            f"[bold green]✓ Extracted {result.line_count} line(s) to[/bold green] {output}",
            highlight=False,
        )
    else:
        click.echo(result.body)


@cli.command(name="info")
@click.argument('input_file', type=click.Path(exists=True, dir_okay=False))
@click.option(
    '--format', '-f', 'format_hint',
    type=FORMAT_CHOICES,
    default=None,
    help='Document format (default: derived from the file suffix)'
)
def show_info(input_file, format_hint):
    """
    Display extraction statistics for a document.

    Example:

        doc-extractor info resume.docx
    """
    try:
        result = extract_file(input_file, format_hint)
        entries = list_entries(Path(input_file).read_bytes()) if result.format is DocumentFormat.DOCX else []
    except ExtractionError as e:
        console.print(f"[bold red]✗ Error:[/bold red] {e}", highlight=False)
        sys.exit(1)

    table = Table(title=f"Document Information: {os.path.basename(input_file)}")
    table.add_column("Property", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")

    table.add_row("File Path", os.path.abspath(input_file))
    table.add_row("File Size", format_file_size(os.path.getsize(input_file)))
    table.add_row("Format", result.format.value)
    table.add_row("Lines", str(result.line_count))
    table.add_row("Characters", str(len(result.body)))
    table.add_row("Warnings", str(len(result.warnings)))
    if entries:
        table.add_row("Archive Entries", str(len(entries)))

    console.print()
    console.print(table)
    _print_warnings(result.warnings)
    console.print()


@cli.command(name="batch")
@click.argument('input_dir', type=click.Path(exists=True, file_okay=False))
@click.option(
    '--output-dir', '-o',
    default='./output',
    help='Output directory for extracted text files',
    type=click.Path(file_okay=False)
)
@click.option('--no-resume', is_flag=True, help='Re-extract files already recorded as done')
def batch(input_dir, output_dir, no_resume):
    """
    Extract every supported document in a directory.

    Examples:

        doc-extractor batch ./resumes

        doc-extractor batch ./resumes -o ./text --no-resume
    """
    processor = BatchExtractor(resume=not no_resume)
    documents = processor.find_documents(input_dir)

    if not documents:
        console.print(f"[bold yellow]⚠ No supported documents found in {input_dir}[/bold yellow]")
        sys.exit(0)

    console.print(f"[bold green]✓ Found {len(documents)} document(s)[/bold green]")

    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        TimeRemainingColumn(),
        console=console
    ) as progress:
        task = progress.add_task("Extracting", total=len(documents))

        def update_progress(filename, current, total):
            progress.update(task, completed=current, description=f"Extracting: {filename}")

        result = processor.process_directory(input_dir, output_dir, progress_callback=update_progress)

    summary_table = Table(title="Batch Extraction Summary", show_header=False)
    summary_table.add_column("Metric", style="cyan")
    summary_table.add_column("Value", style="green")

    summary_table.add_row("Total Files", str(result.total))
    summary_table.add_row("✓ Successful", f"[green]{result.success}[/green]")
    summary_table.add_row("↷ Skipped", str(result.skipped))
    summary_table.add_row("✗ Failed", f"[red]{result.failure}[/red]")
    summary_table.add_row("Output Directory", os.path.abspath(output_dir))
    summary_table.add_row("Manifest", str(result.manifest_path))

    console.print(summary_table)

    if result.failure:
        console.print("\n[bold red]Failed Files:[/bold red]")
        for entry in result.results:
            if entry['status'] == 'failure':
                console.print(f"  ✗ {os.path.basename(entry['file'])}: {entry['error']}", highlight=False)

    sys.exit(0 if result.failure == 0 else 1)


@cli.command(name="formats")
def list_formats():
    """
    List supported document formats and file suffixes.
    """
    table = Table(title="Supported Formats")
    table.add_column("Format", style="cyan")
    table.add_column("Suffixes", style="green")

    for fmt in DocumentFormat:
        suffixes = ", ".join(suffix for suffix, value in SUFFIX_FORMATS.items() if value is fmt)
        table.add_row(fmt.value, suffixes)

    console.print(table)


if __name__ == '__main__':
    cli()
