"""
Command line interface for pmcsent.

This module provides the command line interface for extracting
sentences from PMC articles and ranking their demographic sentences.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from tqdm import tqdm

from . import __version__
from .core.analyzer import ArticleAnalyzer
from .models.article import ArticleExtraction
from .models.scoring import SentenceScore
from .utils.config import Config
from .utils.exceptions import PMCSentError, ProcessingError, ValidationError, log_exception


def setup_logging(level: str = "INFO") -> None:
    """
    Set up logging for CLI.

    Args:
        level: Logging level
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format='[%(levelname)s] %(message)s',
        stream=sys.stdout
    )


def parse_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        description="pmcsent - Sentence extraction and demographic scoring for PMC articles",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Extract sentences from a local article
  pmcsent --articles PMC4736352.nxml

  # Fetch articles from PubMed Central, waiting between requests
  pmcsent --pmc-ids PMC4736352 PMC3531190 --delay 0.5 --out results/

  # Rank a cluster of articles with corpus-frequency weights
  pmcsent --articles a.nxml b.nxml c.nxml --weighted --top-k 20
        """
    )

    parser.add_argument(
        "--articles", "-a",
        nargs='+',
        default=[],
        help="Paths to article files (.xml, .nxml)"
    )

    parser.add_argument(
        "--pmc-ids", "-p",
        nargs='+',
        default=[],
        help="PMC ids of articles to fetch from PubMed Central"
    )

    parser.add_argument(
        "--out", "-o",
        default=None,
        help="Output directory for results (default: pmcsent_results)"
    )

    parser.add_argument(
        "--top-k",
        type=int,
        default=None,
        help="Number of demographic sentences to report (default: 10)"
    )

    parser.add_argument(
        "--weighted",
        action="store_true",
        help="Weight scores by numeral frequencies across all given articles"
    )

    parser.add_argument(
        "--delay",
        type=float,
        default=None,
        help="Seconds to wait before each PubMed Central request"
    )

    parser.add_argument(
        "--config",
        help="Path to configuration file"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output"
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress non-error output"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    args = parser.parse_args(argv)
    if not args.articles and not args.pmc_ids:
        parser.error("at least one of --articles or --pmc-ids is required")
    return args


def load_extractions(analyzer: ArticleAnalyzer, args: argparse.Namespace) -> List[Tuple[str, ArticleExtraction]]:
    """
    Load and extract every requested article.

    Articles that fail to load are logged and skipped.

    Returns:
        List of (report stem, extraction) pairs
    """
    logger = logging.getLogger(__name__)
    inputs = [("file", path) for path in args.articles] + [("pmc", pmc_id) for pmc_id in args.pmc_ids]

    extractions = []
    used_stems = set()
    for kind, value in tqdm(inputs, desc="Processing articles", disable=args.quiet):
        try:
            if kind == "file":
                article = analyzer.load_article(value)
                stem = Path(value).stem
            else:
                article = analyzer.fetch_article(value, delay=args.delay)
                stem = article.source
            extractions.append((unique_stem(stem, used_stems), analyzer.extract(article)))
        except PMCSentError as e:
            log_exception(logger, e, f"Skipping {value}")

    return extractions


def unique_stem(stem: str, used: set) -> str:
    """
    Return a report stem not yet in ``used`` and record it.

    A repeated stem gets a numeric suffix, so ``a/PMC1.nxml`` and
    ``b/PMC1.nxml`` are reported as ``PMC1`` and ``PMC1_2``.
    """
    candidate = stem
    suffix = 2
    while candidate in used:
        candidate = f"{stem}_{suffix}"
        suffix += 1
    used.add(candidate)
    return candidate


def run_extraction(args: argparse.Namespace) -> None:
    """
    Run extraction and demographic ranking.

    Args:
        args: Parsed command line arguments
    """
    logger = logging.getLogger(__name__)

    try:
        config = Config(args.config) if args.config else Config()
        logger.debug(config.get_config_summary())
        output = config.get_output_config()
        out_dir = args.out or output.get("default_output_dir", "pmcsent_results")
        top_k = args.top_k if args.top_k is not None else output.get("top_k", 10)

        analyzer = ArticleAnalyzer(config)

        extractions = load_extractions(analyzer, args)
        if not extractions:
            raise ValidationError("No article could be loaded")

        counts = None
        if args.weighted:
            counts = analyzer.cluster_numeral_counts([e for _, e in extractions])
            logger.info(f"Built numeral counts over {len(extractions)} articles: {len(counts)} numerals")

        for stem, extraction in extractions:
            ranking = analyzer.scorer.rank(extraction.full_text, numeral_counts=counts, top_k=top_k)
            analyzer.generate_report(extraction, ranking, out_dir, stem=stem)

        ranking = analyzer.score_demographics([e for _, e in extractions], weighted=args.weighted,
                                              top_k=top_k)

        if not args.quiet:
            print_results(extractions, ranking, out_dir)

        logger.info(f"Extraction completed successfully. Results saved to {out_dir}")

    except ValidationError as e:
        logger.error(f"Validation error: {e}")
        sys.exit(1)
    except ProcessingError as e:
        logger.error(f"Processing error: {e}")
        sys.exit(1)
    except PMCSentError as e:
        logger.error(f"pmcsent error: {e}")
        sys.exit(1)
    except Exception as e:
        logger.critical(f"Unexpected error: {e}", exc_info=args.verbose)
        sys.exit(1)


def print_results(extractions: List[Tuple[str, ArticleExtraction]], ranking: List[SentenceScore],
                  out_dir: str) -> None:
    """
    Print extraction results to console.

    Args:
        extractions: Extracted articles with their report stems
        ranking: Demographic ranking across all articles
        out_dir: Output directory
    """
    print("\n" + "=" * 80)
    print("PMCSENT EXTRACTION RESULTS")
    print("=" * 80)

    for stem, extraction in extractions:
        print(f"\n{stem}: {extraction.metadata.get('title', '')[:70]}")
        print("-" * 40)
        print(f"Abstract sentences: {len(extraction.abstract)}")
        print(f"Full text sentences: {len(extraction.full_text)}")
        print(f"Figures: {len(extraction.figures)}  Tables: {len(extraction.tables)}  "
              f"References: {len(extraction.references)}")
        sections = extraction.full_text.sections
        print(f"Sections: {', '.join(sections[:5])}")
        if len(sections) > 5:
            print(f"  ... and {len(sections) - 5} more")

    print(f"\nTop {len(ranking)} Demographic Sentences:")
    print("-" * 40)
    for i, scored in enumerate(ranking, 1):
        print(f"{i}. [{scored.score:.1f}] {scored.sentence.text[:100]}")
        print(f"   Section: {scored.sentence.section} / {scored.sentence.subsection}")

    print(f"\nResults saved to: {out_dir}")
    print("=" * 80)


def main(argv: Optional[Sequence[str]] = None) -> None:
    """
    Main CLI entry point.
    """
    args = parse_arguments(argv)

    if args.quiet:
        log_level = "ERROR"
    elif args.verbose:
        log_level = "DEBUG"
    else:
        log_level = "INFO"

    setup_logging(log_level)

    run_extraction(args)


if __name__ == "__main__":
    main()
