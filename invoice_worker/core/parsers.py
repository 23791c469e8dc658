"""
Invoice parsers for XML and JSON formats.
Uses generators for memory-efficient batch processing.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, Generator, Optional, Union

import xmltodict

from invoice_worker.core.exceptions import ParserError
from invoice_worker.core.models import Invoice
from invoice_worker.core.money import DEFAULT_CURRENCY
from invoice_worker.utils.decorators import audit_log, measure_performance


logger = logging.getLogger(__name__)


class XMLInvoiceParser:
    """
    Parser for XML invoices of the form::

        <Invoice number="INV-1">
          <Recipient><Name/><Address>...</Address></Recipient>
          <BillToAddress>
            <AddressLine1/><City/><State/><ZipCode/>
          </BillToAddress>
          <Lines><Line product="Widget" amount="50" currency="USD"/></Lines>
          <Discount amount="10" currency="USD"/>
        </Invoice>
    """

    @staticmethod
    def _parse_address(node: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        if not node:
            return None
        return {
            'address_line1': node.get('AddressLine1'),
            'city': node.get('City'),
            'state': node.get('State'),
            'zip_code': node.get('ZipCode'),
        }

    @staticmethod
    def _parse_money(node: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        if not node:
            return None
        return {
            'amount': int(node['@amount']),
            'currency': node.get('@currency', DEFAULT_CURRENCY),
        }

    def _parse_recipient(self, node: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        if not node:
            return None
        return {
            'name': node.get('Name'),
            'address': self._parse_address(node.get('Address')),
        }

    def parse_string(self, content: Union[str, bytes]) -> Invoice:
        """Parse an XML document held in memory"""
        document = xmltodict.parse(content, force_list=('Line',))
        root = document.get('Invoice')
        if root is None:
            raise ParserError("Missing <Invoice> root element")

        lines_node = root.get('Lines') or {}
        lines = [
            {
                'product_name': line.get('@product'),
                'money': self._parse_money(line),
            }
            for line in lines_node.get('Line', [])
        ]

        return Invoice.model_validate({
            'invoice_number': root.get('@number'),
            'recipient': self._parse_recipient(root.get('Recipient')),
            'bill_to_address': self._parse_address(root.get('BillToAddress')),
            'lines': lines,
            'discount': self._parse_money(root.get('Discount')),
        })

    @measure_performance
    def parse(self, file_path: Union[str, Path]) -> Invoice:
        """
        Parse single XML invoice file.

        Args:
            file_path: Path to XML file

        Returns:
            Invoice object

        Raises:
            ParserError: If parsing fails
        """
        try:
            with open(file_path, 'rb') as f:
                return self.parse_string(f.read())
        except ParserError:
            raise
        except Exception as e:
            raise ParserError(f"Failed to parse XML invoice: {str(e)}") from e


class JSONInvoiceParser:
    """Parser for JSON-formatted invoices"""

    @measure_performance
    def parse(self, file_path: Union[str, Path]) -> Invoice:
        """
        Parse single JSON invoice file.

        Field names follow the models (``invoice_number``, ``bill_to_address``,
        ``lines[].money.amount`` ...).

        Raises:
            ParserError: If parsing fails
        """
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)

            # Direct mapping from JSON to model
            return Invoice.model_validate(data)

        except Exception as e:
            raise ParserError(f"Failed to parse JSON invoice: {str(e)}") from e


@audit_log
def parse_invoice_file(file_path: Union[str, Path]) -> Invoice:
    """
    Auto-detect format and parse invoice file.

    Args:
        file_path: Path to invoice file (XML or JSON)

    Returns:
        Parsed Invoice object
    """
    path = Path(file_path)

    if not path.exists():
        raise FileNotFoundError(f"Invoice file not found: {file_path}")

    suffix = path.suffix.lower()

    if suffix == '.xml':
        parser = XMLInvoiceParser()
    elif suffix == '.json':
        parser = JSONInvoiceParser()
    else:
        raise ParserError(f"Unsupported file format: {suffix}")

    return parser.parse(path)


def invoice_generator(directory: Union[str, Path],
                      pattern: str = "*") -> Generator[Invoice, None, None]:
    """
    Generator that yields parsed invoices from a directory.
    Files that fail to parse are logged and skipped.

    Args:
        directory: Directory containing invoice files
        pattern: Glob pattern for file matching (e.g., "*.xml")

    Yields:
        Parsed Invoice objects in file name order
    """
    dir_path = Path(directory)

    if not dir_path.exists():
        raise FileNotFoundError(f"Directory not found: {directory}")

    for file_path in sorted(dir_path.glob(pattern)):
        if file_path.is_file():
            try:
                yield parse_invoice_file(file_path)
            except ParserError as e:
                logger.error(f"Failed to parse {file_path}: {e}")
                continue


def load_invoice(file_path: Union[str, Path]) -> Invoice:
    """
    Convenience function to load a single invoice.
    Alias for parse_invoice_file.
    """
    return parse_invoice_file(file_path)
