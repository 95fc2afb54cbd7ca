#!/usr/bin/env python3

"""
Command-line interface for the exon length pipeline.

Usage:
  python exon_length_cli.py -g annotation.gtf -o lengths.txt [-t THREADS]
"""

import argparse
import sys
import os
import logging

from exon_length_pipeline import __version__
from exon_length_pipeline.core.config import COVERAGE_STRATEGIES, load_config
from exon_length_pipeline.core.exceptions import PipelineError


def setup_logging(log_level: str = "INFO") -> None:
    """Set up logging configuration."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def create_argument_parser() -> argparse.ArgumentParser:
    """Create command line argument parser."""
    parser = argparse.ArgumentParser(
        description="Per-gene non-overlapping exon length calculator for GTF/GFF files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Basic usage
  python exon_length_cli.py --gtf gencode.gtf --out lengths.txt

  # Fixed thread count, sweep coverage and sorted output
  python exon_length_cli.py -g annotation.gff3 -o lengths.txt -t 8 --strategy sweep --sort

On success a footer "Elapsed: Xs | Memory: Y MB" is printed to stderr. Memory is
the peak growth of resident memory of this process plus its worker processes,
sampled at phase boundaries and after each chunk a worker finishes.
        """
    )

    # Required arguments
    parser.add_argument(
        '-g', '--gtf',
        required=True,
        metavar='GTF/GFF',
        help='Input annotation file (.gtf, .gff or .gff3)'
    )
    parser.add_argument(
        '-o', '--out',
        required=True,
        metavar='OUTPUT',
        help='Output file, one "gene_id<TAB>length" line per gene'
    )

    # Optional parameters
    parser.add_argument(
        '-t', '--threads',
        type=int,
        default=None,
        metavar='THREADS',
        help=f'Number of worker processes (default: CPU count, {os.cpu_count() or 1})'
    )
    parser.add_argument(
        '--strategy',
        choices=COVERAGE_STRATEGIES,
        help='Coverage algorithm (default: buffer)'
    )
    parser.add_argument(
        '--sort',
        action='store_true',
        help='Sort output lines by gene id'
    )
    parser.add_argument(
        '--keep-version',
        action='store_true',
        help='Keep version suffixes of gene ids (ENSG00000290825.1)'
    )
    parser.add_argument(
        '--version-separator',
        help='Character that starts a gene id version suffix (default: ".")'
    )
    parser.add_argument(
        '--config',
        help='Configuration file (JSON or YAML)'
    )
    parser.add_argument(
        '--log-file',
        help='Also write the run log to this file'
    )
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        default='WARNING',
        help='Logging level (default: WARNING)'
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    return parser


def apply_overrides(config, args) -> None:
    """Override configuration values with command line arguments."""
    if args.threads is not None:
        config.workers = args.threads
    if args.strategy is not None:
        config.coverage_strategy = args.strategy
    if args.sort:
        config.sort_output = True
    if args.keep_version:
        config.strip_gene_version = False
    if args.version_separator is not None:
        config.version_separator = args.version_separator
    if args.log_level == 'DEBUG':
        config.debug_mode = True

    # Re-validate after CLI overrides.
    config.validate()


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    try:
        config = load_config(config_path=args.config, use_env=True)
        apply_overrides(config, args)

        from exon_length_pipeline import ExonLengthPipeline

        pipeline = ExonLengthPipeline(config)
        success = pipeline.run(args.gtf, args.out, log_file=args.log_file)

        if not success:
            logger.error("Pipeline failed!")
            return 1

        print(pipeline.monitor.format_footer(), file=sys.stderr)
        return 0

    except PipelineError as e:
        logger.error(f"Pipeline error: {e}")
        return 1
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        logger.debug("Full traceback:", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
