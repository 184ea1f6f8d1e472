import logging
from typing import TextIO, Tuple

import click

from .codon_change import VariantAnnotator
from .config import load_transcript, load_variants
from .exceptions import VarCodonError
from .io.jsonio import generate_json_output

logger = logging.getLogger(__name__)


@click.command()
@click.option(
    "--transcript",
    "transcript_paths",
    type=click.Path(exists=True, dir_okay=False),
    required=True,
    multiple=True,
    help="Path to a transcript JSON file (exons, exon sequences, CDS bounds). May be repeated.",
)
@click.option(
    "--variants",
    "variants_path",
    type=click.Path(exists=True, dir_okay=False),
    required=True,
    help="Path to a JSON file holding a list of variants.",
)
@click.option(
    "--out",
    "out_json_file",
    type=click.File("w"),
    help="Path to write the output JSON effects. Defaults to stdout.",
)
@click.option(
    "--threads",
    type=click.IntRange(min=1),
    default=1,
    show_default=True,
    help="Number of worker threads used to evaluate (variant, transcript) pairs.",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    show_default=True,
    help="Logging verbosity.",
)
def main(
    transcript_paths: Tuple[str, ...],
    variants_path: str,
    out_json_file: TextIO | None,
    threads: int,
    log_level: str,
):
    """
    Computes the codons changed by each variant on each transcript.
    """
    logging.basicConfig(level=log_level.upper(), format="%(asctime)s - %(levelname)s - %(message)s")

    # --- Input Loading ---
    try:
        transcripts = [load_transcript(path) for path in transcript_paths]
        variants = load_variants(variants_path)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load inputs: {e}")
        raise click.Abort()

    # --- Core Logic ---
    annotator = VariantAnnotator()
    try:
        if threads > 1:
            annotator.annotate_all(variants, transcripts, max_workers=threads)
        else:
            for variant in variants:
                annotator.annotate(variant, transcripts)
    except VarCodonError as e:
        logger.error(f"An error occurred during codon change computation: {e}")
        raise click.Abort()

    # --- Output Generation ---
    output = generate_json_output(annotator.variant_effects)
    if out_json_file:
        logger.info(f"Writing JSON output to {out_json_file.name}")
        out_json_file.write(output + "\n")
    else:
        click.echo(output)

    logger.info("Processing complete.")


if __name__ == "__main__":
    main()
