"""
Catalog Converter Module
Coordinates the conversion: read the export, map every product, write the CSV.
"""

from typing import IO, Any, Dict, Optional

from loguru import logger
from tqdm import tqdm

from .csv_handler import STDOUT, ShopifyCSVWriter
from .errors import ConversionError
from .mapper import ProductMapper
from .squarespace import Catalog, describe_catalog, load_catalog
from .validator import DataValidator


class CatalogConverter:
    """Orchestrate the complete conversion process."""

    def __init__(
        self,
        input_path: str,
        output_path: str = STDOUT,
        encoding: str = 'utf-8',
        atomic: bool = False,
        validate: bool = False,
        show_progress: bool = False,
        stream: Optional[IO[str]] = None
    ):
        """
        Initialize catalog converter.

        Args:
            input_path: Path to the Squarespace JSON export
            output_path: Path for the Shopify CSV, or "-" for standard output
            encoding: Output file encoding
            atomic: Replace the output file only when the run succeeds
            validate: Log advisory warnings for the catalog and rows
            show_progress: Show a progress bar on stderr
            stream: Already open text stream to write to instead of output_path
        """
        self.input_path = input_path
        self.output_path = output_path
        self.encoding = encoding
        self.atomic = atomic
        self.validate = validate
        self.show_progress = show_progress
        self.stream = stream

        self.mapper = ProductMapper()
        self._reset()

    def convert(self) -> Dict[str, Any]:
        """
        Run the conversion.

        The whole export is decoded before anything is written. The first
        product that cannot be mapped aborts the run.

        Returns:
            Report with products, rows, warnings and output

        Raises:
            ConversionError: On any decode, mapping or I/O failure
        """
        logger.info("Starting conversion...")
        self._reset()

        catalog = load_catalog(self.input_path)
        for line in describe_catalog(catalog):
            logger.debug(line)

        if self.validate:
            self.validator.validate_catalog(catalog)

        writer = ShopifyCSVWriter(
            output_path=self.output_path,
            encoding=self.encoding,
            atomic=self.atomic,
            stream=self.stream
        )
        with writer:
            writer.write_header()
            self._write_products(catalog, writer)

        validation_report = self.validator.generate_report()
        report = {
            'products': self.stats['products'],
            'rows': self.stats['rows'],
            'warnings': validation_report['warnings'],
            'output': self.output_path if self.stream is None else '<stream>',
        }
        self._log_summary(report)
        return report

    def _reset(self) -> None:
        """Start a run with fresh statistics and warnings."""
        self.validator = DataValidator()
        self.stats = {
            'products': 0,
            'rows': 0,
        }

    def _write_products(self, catalog: Catalog, writer: ShopifyCSVWriter) -> None:
        products = tqdm(
            catalog.products,
            total=len(catalog.products),
            desc="Converting",
            disable=not self.show_progress
        )
        for product in products:
            try:
                rows = self.mapper.map_product(product)
            except ConversionError as e:
                logger.error(f"Error processing product '{product.name}' ({product.id}): {e}")
                raise

            if self.validate:
                for offset, row in enumerate(rows, 1):
                    self.validator.validate_row(row, self.stats['rows'] + offset)

            writer.write_rows(rows)
            self.stats['products'] += 1
            self.stats['rows'] += len(rows)

    def _log_summary(self, report: Dict[str, Any]) -> None:
        """
        Log conversion summary.

        Args:
            report: Conversion report dictionary
        """
        logger.info("=" * 60)
        logger.info("CONVERSION SUMMARY")
        logger.info("=" * 60)
        logger.info(f"Products converted: {report['products']}")
        logger.info(f"Rows written: {report['rows']}")
        logger.info(f"Warnings: {len(report['warnings'])}")
        logger.info(f"Output file: {report['output']}")
        logger.info("=" * 60)
