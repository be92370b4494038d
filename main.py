#!/usr/bin/env python3
"""
Awning Invoice Extractor - Developer Command Line.

Runs the extraction engine over one PDF or a directory of PDFs and
prints or writes the extracted records as JSON. The engine itself is a
library; this script exists for inspecting its output by hand.

Usage:
    Command Line:
        python main.py --input facture.pdf
        python main.py --input ./factures/ --output outputs/results.json

    Python:
        from main import run_extraction
        results = run_extraction("facture.pdf")

Author: ML Engineering Team
Version: 1.0.0
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, List, Dict, Any

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

# Import project modules
from invoice_engine.config import ConfigurationManager
from invoice_engine.extraction import InvoiceExtractor
from invoice_engine.utils.logger import ROOT_LOGGER_NAME, setup_logger_from_config, get_logger
from invoice_engine.utils.helpers import ensure_directory, generate_timestamp


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        argv: Argument list. Defaults to sys.argv[1:].

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        description="Awning invoice field extraction (developer tool)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    Process single invoice:
        python main.py --input facture.pdf

    Process directory into a JSON file:
        python main.py --input ./factures/ --output outputs/results.json
        """
    )

    parser.add_argument(
        "--input", "-i",
        type=str,
        required=True,
        help="Input PDF file or directory containing PDFs"
    )

    parser.add_argument(
        "--output", "-o",
        type=str,
        nargs="?",
        const="",
        default=None,
        help="Output JSON file. A directory gets a timestamped file name; "
             "without a value, paths.output_dir is used. Prints to stdout when omitted."
    )

    parser.add_argument(
        "--config", "-c",
        type=str,
        default=None,
        help="Path to custom configuration file"
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only log warnings and errors"
    )

    return parser.parse_args(argv)


def initialize_system(args: argparse.Namespace) -> ConfigurationManager:
    """
    Initialize configuration and logging.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Initialized configuration manager.
    """
    if args.config:
        ConfigurationManager.reset()
    config = ConfigurationManager(args.config)

    logger = setup_logger_from_config()

    if args.debug:
        _set_level(logging.DEBUG)
    elif args.quiet:
        _set_level(logging.WARNING)

    logger.info("=" * 60)
    logger.info("AWNING INVOICE EXTRACTOR")
    logger.info("=" * 60)
    logger.info(f"Version: {config.get('project.version', '1.0.0')}")
    logger.info(f"Input: {args.input}")

    return config


def _set_level(level: int) -> None:
    app_logger = logging.getLogger(ROOT_LOGGER_NAME)
    app_logger.setLevel(level)
    for handler in app_logger.handlers:
        handler.setLevel(level)


def collect_inputs(input_path: str) -> List[Path]:
    """
    Resolve the input argument to a sorted list of PDF files.

    Args:
        input_path: PDF file or directory.

    Returns:
        PDF files to process.

    Raises:
        FileNotFoundError: If the path does not exist.
        ValueError: If a file is not a PDF.
    """
    logger = get_logger(__name__)
    path = Path(input_path)

    if not path.exists():
        raise FileNotFoundError(f"Input path not found: {path}")

    if path.is_file():
        if path.suffix.lower() != ".pdf":
            raise ValueError(f"Unsupported file type: {path.suffix}")
        return [path]

    files = sorted(p for p in path.iterdir() if p.is_file() and p.suffix.lower() == ".pdf")
    if not files:
        logger.warning(f"No PDF files found in: {path}")
    else:
        logger.info(f"Found {len(files)} files to process")
    return files


def resolve_output_path(output: str) -> Path:
    """
    Turn the --output argument into a JSON file path.

    A path with a suffix is used as is; anything else is treated as a
    directory receiving ``extraction_<timestamp>.json``.
    """
    output_path = Path(output)
    if output_path.suffix:
        ensure_directory(output_path.parent)
        return output_path
    return ensure_directory(output_path) / f"extraction_{generate_timestamp()}.json"


def run_extraction(input_path: str, extractor: Optional[InvoiceExtractor] = None) -> List[Dict[str, Any]]:
    """
    Extract every PDF under ``input_path``.

    Args:
        input_path: PDF file or directory.
        extractor: Extractor to use. Defaults to a new InvoiceExtractor.

    Returns:
        One dictionary per file: ``source`` plus the record fields.

    Example:
        >>> results = run_extraction("factures/")
        >>> for r in results:
        ...     print(r['source'], r['last_name'])
    """
    logger = get_logger(__name__)
    extractor = extractor or InvoiceExtractor()

    results = []
    for file_path in collect_inputs(input_path):
        logger.info(f"Processing: {file_path.name}")
        record = extractor.extract(file_path)

        results.append({'source': file_path.name, **record.to_dict()})
        logger.info(
            f"  {record.first_name} {record.last_name} | "
            f"template={record.template_name or 'none'} | fallback={record.is_fallback}"
        )

    return results


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main function - entry point for command-line execution.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    try:
        args = parse_arguments(argv)

        config = initialize_system(args)
        logger = get_logger(__name__)

        results = run_extraction(args.input)
        payload = json.dumps(results, indent=2, ensure_ascii=False)

        if args.output is not None:
            output_path = resolve_output_path(args.output or config.get("paths.output_dir", "outputs"))
            output_path.write_text(payload, encoding="utf-8")
            logger.info(f"Results written to: {output_path}")
        else:
            print(payload)

        logger.info("=" * 60)
        logger.info(f"Extraction complete. Processed {len(results)} files.")
        logger.info("=" * 60)

        return 0

    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
