"""
Spreadsheet interchange for inventory records.

Exports are written as CSV or as an Excel workbook (.xlsx) with the same
columns, and either format can be imported back. Importing a file produced
by an export changes nothing: Status and Last Updated are derived values and
are ignored on the way back in, and the Product ID column pins each row to
its product even when several products share a name.
"""
import csv
import io
import logging
import os
from datetime import date, datetime
from zipfile import BadZipFile
from django.utils import timezone
from openpyxl import Workbook, load_workbook
from openpyxl.utils.exceptions import InvalidFileException
from storefront.catalog.models import Product
from .models import InventoryItem
from .services import InventoryError, add_inventory, update_inventory, parse_quantity

logger = logging.getLogger(__name__)

EXPORT_HEADERS = ['Product Name', 'Size', 'Color', 'Quantity', 'Status', 'Location', 'Last Updated', 'Product ID']
REQUIRED_IMPORT_HEADERS = ['Product Name', 'Size', 'Color', 'Quantity']
WORKBOOK_SHEET_TITLE = 'Inventory'
WORKBOOK_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'

STATUS_LABELS = {
    'in_stock': 'IN STOCK',
    'low_stock': 'LOW STOCK',
    'out_of_stock': 'OUT OF STOCK',
}


def status_label(status):
    return STATUS_LABELS.get(status, status.replace('_', ' ').upper())


def inventory_row(item):
    return [
        item.product.name,
        item.size,
        item.color,
        item.quantity,
        status_label(item.status),
        item.location,
        timezone.localtime(item.updated_at).date().isoformat() if item.updated_at else '',
        item.product_id,
    ]


def export_inventory(items, stream):
    """Write the header row and one row per item to a text stream"""
    writer = csv.writer(stream)
    writer.writerow(EXPORT_HEADERS)
    count = 0
    for item in items:
        writer.writerow(inventory_row(item))
        count += 1
    logger.info(f"Exported {count} inventory row(s) as CSV")
    return count


def export_inventory_csv(items):
    buffer = io.StringIO()
    export_inventory(items, buffer)
    return buffer.getvalue()


def export_inventory_workbook(items, stream):
    """Write an .xlsx workbook with a single Inventory sheet to a binary stream"""
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = WORKBOOK_SHEET_TITLE
    sheet.append(EXPORT_HEADERS)
    count = 0
    for item in items:
        sheet.append(inventory_row(item))
        count += 1
    workbook.save(stream)
    logger.info(f"Exported {count} inventory row(s) as workbook")
    return count


def _cell_text(value):
    if value is None:
        return ''
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value).strip()


def _parse_rows(headers, records, first_line=2):
    headers = [(h or '').strip() for h in headers]
    missing = [h for h in REQUIRED_IMPORT_HEADERS if h not in headers]
    if missing:
        raise InventoryError(f"Missing column(s): {', '.join(missing)}")

    rows = []
    for line_number, values in enumerate(records, start=first_line):
        record = {key: _cell_text(value) for key, value in zip(headers, values) if key}
        if not any(record.values()):
            continue
        rows.append({
            'row': line_number,
            'product_name': record.get('Product Name', ''),
            'product_id': record.get('Product ID', ''),
            'size': record.get('Size', ''),
            'color': record.get('Color', ''),
            'quantity': record.get('Quantity', ''),
            'location': record.get('Location', ''),
        })
    return rows


def read_inventory_rows(stream):
    """
    Parse an inventory CSV.

    Returns a list of dicts with 'row' (spreadsheet line number, header is
    line 1), 'product_name', 'product_id', 'size', 'color', 'quantity' and
    'location'.

    Raises:
        InventoryError: the file has no header or lacks a required column
    """
    reader = csv.reader(stream)
    headers = next(reader, None)
    if not headers:
        raise InventoryError('The file is empty')
    return _parse_rows(headers, reader)


def read_inventory_workbook(stream):
    """Parse the first sheet of an .xlsx workbook; rows as in read_inventory_rows"""
    try:
        workbook = load_workbook(stream, read_only=True, data_only=True)
    except (InvalidFileException, BadZipFile, KeyError, ValueError) as e:
        logger.warning(f"Unreadable inventory workbook: {str(e)}")
        raise InventoryError('The file is not a valid Excel workbook')

    try:
        records = workbook.worksheets[0].iter_rows(values_only=True)
        headers = next(records, None)
        if not headers or not any(headers):
            raise InventoryError('The file is empty')
        return _parse_rows([_cell_text(h) for h in headers], records)
    finally:
        workbook.close()


def read_inventory_upload(filename, content):
    """
    Parse uploaded bytes, choosing the reader from the file extension.

    ``.xlsx`` files are read as workbooks; ``.csv`` files (or files without
    an extension) as UTF-8 CSV.
    """
    extension = os.path.splitext((filename or '').lower())[1]
    if extension == '.xlsx':
        return read_inventory_workbook(io.BytesIO(content))
    if extension == '.xls':
        raise InventoryError('Legacy .xls workbooks are not supported, save the file as .xlsx')
    if extension not in ('.csv', ''):
        raise InventoryError('Unsupported file type, upload a .csv or .xlsx file')

    try:
        text = content.decode('utf-8-sig')
    except UnicodeDecodeError:
        raise InventoryError('File must be UTF-8 encoded CSV')
    return read_inventory_rows(io.StringIO(text, newline=''))


def _row_errors(row):
    errors = []
    if not row['product_name'] and not row['product_id']:
        errors.append('Product name is required')
    if row['product_id'] and not row['product_id'].isdigit():
        errors.append('Product ID must be a whole number')
    if not row['size']:
        errors.append('Size is required')
    if not row['color']:
        errors.append('Color is required')
    try:
        parse_quantity(row['quantity'])
    except InventoryError as e:
        errors.append(e.message)
    return errors


def _find_product(row):
    if row['product_id']:
        product = Product.objects.filter(pk=int(row['product_id'])).first()
        if product is None:
            raise InventoryError(f"Product ID {row['product_id']} not found")
        return product

    matches = list(Product.objects.filter(name__iexact=row['product_name']).order_by('id')[:2])
    if not matches:
        raise InventoryError(f"Product \"{row['product_name']}\" not found")
    if len(matches) > 1:
        raise InventoryError(
            f"Several products are named \"{row['product_name']}\", add a Product ID column to choose one"
        )
    return matches[0]


def _find_item(product, size, color):
    """Exact size/color match first, then a unique case-insensitive one"""
    queryset = InventoryItem.objects.filter(product=product).select_related('product')
    item = queryset.filter(size=size, color=color).first()
    if item is not None:
        return item

    matches = list(queryset.filter(size__iexact=size, color__iexact=color)[:2])
    if len(matches) > 1:
        raise InventoryError(f"Several inventory records match size ({size}) and color ({color}) ignoring case")
    return matches[0] if matches else None


def import_inventory_rows(rows, user=None):
    """
    Apply parsed rows: update the matching record or create a new one.

    Products are matched by Product ID when the column is filled, else by a
    unique name (case-insensitive). Records are matched by product, size
    and color. A row that fails is reported and skipped; the other rows are
    still applied.

    Returns:
        dict: {'created': int, 'updated': int, 'unchanged': int,
               'errors': [{'row': int, 'errors': [str, ...]}, ...]}
    """
    result = {'created': 0, 'updated': 0, 'unchanged': 0, 'errors': []}

    for row in rows:
        errors = _row_errors(row)
        if errors:
            result['errors'].append({'row': row['row'], 'errors': errors})
            continue

        quantity = parse_quantity(row['quantity'])
        try:
            product = _find_product(row)
            item = _find_item(product, row['size'], row['color'])
            if item is None:
                add_inventory({
                    'product': product,
                    'size': row['size'],
                    'color': row['color'],
                    'quantity': quantity,
                    'location': row['location'],
                    'reason': 'Spreadsheet import',
                }, user)
                result['created'] += 1
            elif item.quantity != quantity or (row['location'] and row['location'] != item.location):
                update_inventory(item, quantity, user, reason='Spreadsheet import', location=row['location'])
                result['updated'] += 1
            else:
                result['unchanged'] += 1
        except InventoryError as e:
            result['errors'].append({'row': row['row'], 'errors': [e.message]})

    logger.info(
        f"Inventory import: {result['created']} created, {result['updated']} updated, "
        f"{result['unchanged']} unchanged, {len(result['errors'])} row(s) with errors"
    )
    return result
