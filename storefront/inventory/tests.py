"""
Test suite for storefront inventory
Tests: stock status, inventory operations, low stock alerts, CSV and workbook export/import, API endpoints
"""
import io
import os
import tempfile
from django.core.files.uploadedfile import SimpleUploadedFile
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase, override_settings
from openpyxl import Workbook, load_workbook
from rest_framework import status
from storefront.catalog.models import ProductSize
from storefront.core.models import AuditLog
from storefront.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from .models import InventoryItem, InventoryHistory
from .utils import get_inventory_status
from .services import (
    InventoryError, parse_quantity, add_inventory, update_inventory, bulk_update_inventory,
    check_low_stock_alert, get_low_stock_items,
)
from .spreadsheet import (
    EXPORT_HEADERS, WORKBOOK_CONTENT_TYPE, export_inventory_csv, export_inventory_workbook, read_inventory_rows,
    read_inventory_workbook, read_inventory_upload, import_inventory_rows,
)


def workbook_bytes(rows):
    """Build an .xlsx file in memory from a list of row values"""
    workbook = Workbook()
    for row in rows:
        workbook.active.append(row)
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


class InventoryStatusTests(TestCase):

    def test_get_inventory_status(self):
        self.assertEqual(get_inventory_status(0, 10), 'out_of_stock')
        self.assertEqual(get_inventory_status(10, 10), 'low_stock')
        self.assertEqual(get_inventory_status(11, 10), 'in_stock')

    def test_status_follows_quantity_on_save(self):
        item = TestDataFactory.create_inventory_item(quantity=50)
        self.assertEqual(item.status, 'in_stock')

        item.quantity = 4
        item.save(update_fields=['quantity'])
        item.refresh_from_db()
        self.assertEqual(item.status, 'low_stock')

        item.quantity = 0
        item.save()
        item.refresh_from_db()
        self.assertEqual(item.status, 'out_of_stock')

    @override_settings(INVENTORY_LOW_STOCK_THRESHOLD=25)
    def test_default_threshold_from_settings(self):
        product = TestDataFactory.create_product()
        item = InventoryItem.objects.create(product=product, size='S', color='Red', quantity=20, location='Shop')
        self.assertEqual(item.low_stock_threshold, 25)
        self.assertEqual(item.status, 'low_stock')


class InventoryServiceTests(TestCase):

    def setUp(self):
        self.admin = TestDataFactory.create_admin()
        self.product = TestDataFactory.create_product(name='Linen Shirt', sizes=['M', 'L'])

    def test_parse_quantity(self):
        self.assertEqual(parse_quantity('12'), 12)
        self.assertEqual(parse_quantity(3.0), 3)
        for value in (None, '', '-1', '2.5', 'ten', True, 'nan', 'inf'):
            with self.assertRaises(InventoryError):
                parse_quantity(value)

    def test_add_inventory_requires_fields(self):
        with self.assertRaises(InventoryError) as ctx:
            add_inventory({'product': self.product.id, 'size': 'M', 'quantity': 5, 'location': 'A'})
        self.assertEqual(ctx.exception.message, 'Color is required')

        with self.assertRaises(InventoryError) as ctx:
            add_inventory({'product': self.product.id, 'size': 'M', 'color': 'Blue', 'location': 'A'})
        self.assertEqual(ctx.exception.message, 'Valid quantity is required')

    def test_add_inventory_unknown_product(self):
        with self.assertRaises(InventoryError) as ctx:
            add_inventory({'product': 99999, 'size': 'M', 'color': 'Blue', 'quantity': 1, 'location': 'A'})
        self.assertEqual(ctx.exception.status_code, 404)

    def test_add_inventory_records_history_and_syncs_size(self):
        item = add_inventory({'product': self.product.id, 'size': 'M', 'color': 'Blue', 'quantity': 12,
                              'location': 'Main Warehouse'}, self.admin)
        self.assertEqual(item.status, 'in_stock')

        history = InventoryHistory.objects.get(item=item)
        self.assertEqual(history.change_type, 'increase')
        self.assertEqual(history.quantity, 12)
        self.assertEqual(history.reason, 'Initial stock')
        self.assertEqual(history.user, self.admin)

        self.assertEqual(ProductSize.objects.get(product=self.product, name='M').stock, 12)

    def test_add_inventory_duplicate_combination(self):
        data = {'product': self.product.id, 'size': 'M', 'color': 'Blue', 'quantity': 5, 'location': 'A'}
        add_inventory(data)
        with self.assertRaises(InventoryError) as ctx:
            add_inventory(data)
        self.assertIn('Inventory already exists for this product, size (M), and color (Blue)', ctx.exception.message)
        self.assertEqual(InventoryItem.objects.count(), 1)

    def test_update_inventory_sums_size_stock(self):
        blue = add_inventory({'product': self.product, 'size': 'M', 'color': 'Blue', 'quantity': 5, 'location': 'A'})
        add_inventory({'product': self.product, 'size': 'M', 'color': 'White', 'quantity': 3, 'location': 'A'})
        self.assertEqual(ProductSize.objects.get(product=self.product, name='M').stock, 8)

        update_inventory(blue, 20, self.admin, reason='Restock', location='B')
        blue.refresh_from_db()
        self.assertEqual(blue.location, 'B')
        self.assertEqual(ProductSize.objects.get(product=self.product, name='M').stock, 23)
        self.assertEqual(ProductSize.objects.get(product=self.product, name='L').stock, 0)

        history = InventoryHistory.objects.filter(item=blue).first()
        self.assertEqual(history.change_type, 'update')
        self.assertEqual(history.previous_quantity, 5)
        self.assertEqual(history.quantity, 20)
        self.assertEqual(history.reason, 'Restock')

    def test_update_inventory_keeps_location_when_blank(self):
        item = TestDataFactory.create_inventory_item(product=self.product, location='Main Warehouse')
        update_inventory(item, 7, location='   ')
        item.refresh_from_db()
        self.assertEqual(item.location, 'Main Warehouse')

        update_inventory(item, 7, location='  Store Room ')
        item.refresh_from_db()
        self.assertEqual(item.location, 'Store Room')

    def test_bulk_update_missing_id_changes_nothing(self):
        item = TestDataFactory.create_inventory_item(product=self.product, quantity=20)
        with self.assertRaises(InventoryError) as ctx:
            bulk_update_inventory([{'id': item.id, 'quantity': 1}, {'id': 99999, 'quantity': 1}])
        self.assertEqual(ctx.exception.status_code, 404)
        item.refresh_from_db()
        self.assertEqual(item.quantity, 20)

    def test_bulk_update_rejects_bad_quantity_before_writing(self):
        first = TestDataFactory.create_inventory_item(product=self.product, color='Black', quantity=20)
        second = TestDataFactory.create_inventory_item(product=self.product, color='Grey', quantity=20)
        with self.assertRaises(InventoryError):
            bulk_update_inventory([{'id': first.id, 'quantity': 1}, {'id': second.id, 'quantity': -4}])
        first.refresh_from_db()
        self.assertEqual(first.quantity, 20)

    def test_bulk_update(self):
        first = TestDataFactory.create_inventory_item(product=self.product, color='Black', quantity=20)
        second = TestDataFactory.create_inventory_item(product=self.product, color='Grey', quantity=20)
        updated = bulk_update_inventory([{'id': str(first.id), 'quantity': '2'}, {'id': second.id, 'quantity': 0}])
        self.assertEqual([i.quantity for i in updated], [2, 0])
        self.assertEqual(InventoryHistory.objects.filter(reason='Bulk update').count(), 2)

    def test_low_stock_alert_severity(self):
        item = TestDataFactory.create_inventory_item(product=self.product, quantity=0)
        self.assertEqual(check_low_stock_alert(item)['severity'], 'critical')

        item.quantity = 3
        self.assertEqual(check_low_stock_alert(item)['severity'], 'high')

        item.quantity = 8
        alert = check_low_stock_alert(item)
        self.assertEqual(alert['severity'], 'medium')
        self.assertEqual(alert['current_stock'], 8)
        self.assertEqual(alert['product_id'], self.product.id)

        item.quantity = 30
        self.assertIsNone(check_low_stock_alert(item))

    def test_get_low_stock_items(self):
        TestDataFactory.create_inventory_item(product=self.product, color='A', quantity=50)
        low = TestDataFactory.create_inventory_item(product=self.product, color='B', quantity=4)
        out = TestDataFactory.create_inventory_item(product=self.product, color='C', quantity=0)
        self.assertEqual(list(get_low_stock_items()), [low])
        self.assertEqual(list(get_low_stock_items(include_out_of_stock=True)), [out, low])


class SpreadsheetTests(TestCase):

    def setUp(self):
        self.shirt = TestDataFactory.create_product(name='Linen Shirt')
        self.dress = TestDataFactory.create_product(name='Silk Dress')

    def test_export_rows(self):
        TestDataFactory.create_inventory_item(product=self.shirt, size='M', color='Blue', quantity=4)
        lines = export_inventory_csv(InventoryItem.objects.all()).splitlines()
        self.assertEqual(lines[0], ','.join(EXPORT_HEADERS))
        self.assertTrue(lines[1].startswith('Linen Shirt,M,Blue,4,LOW STOCK,Main Warehouse,'))

    def test_export_then_import_changes_nothing(self):
        TestDataFactory.create_inventory_item(product=self.shirt, size='M', color='Blue', quantity=4)
        TestDataFactory.create_inventory_item(product=self.dress, size='S', color='Red', quantity=0)
        TestDataFactory.create_inventory_item(product=self.dress, size='L', color='Red', quantity=40)
        exported = export_inventory_csv(InventoryItem.objects.select_related('product'))

        result = import_inventory_rows(read_inventory_rows(io.StringIO(exported)))
        self.assertEqual(result, {'created': 0, 'updated': 0, 'unchanged': 3, 'errors': []})
        self.assertEqual(InventoryHistory.objects.count(), 0)

    def test_import_creates_updates_and_reports_errors(self):
        existing = TestDataFactory.create_inventory_item(product=self.shirt, size='M', color='Blue', quantity=4)
        content = (
            'Product Name,Size,Color,Quantity,Location\n'
            'linen shirt,m,blue,15,\n'
            'Silk Dress,S,Red,7,Store Room\n'
            'Velvet Coat,M,Green,2,Store Room\n'
            ',L,Red,abc,Store Room\n'
        )
        result = import_inventory_rows(read_inventory_rows(io.StringIO(content)))

        self.assertEqual(result['created'], 1)
        self.assertEqual(result['updated'], 1)
        self.assertEqual(result['errors'], [
            {'row': 4, 'errors': ['Product "Velvet Coat" not found']},
            {'row': 5, 'errors': ['Product name is required', 'Valid quantity is required']},
        ])
        existing.refresh_from_db()
        self.assertEqual(existing.quantity, 15)
        self.assertEqual(existing.location, 'Main Warehouse')
        self.assertTrue(InventoryItem.objects.filter(product=self.dress, size='S', color='Red', quantity=7).exists())

    def test_read_requires_columns(self):
        with self.assertRaises(InventoryError) as ctx:
            read_inventory_rows(io.StringIO('Product Name,Size,Color\nLinen Shirt,M,Blue\n'))
        self.assertEqual(ctx.exception.message, 'Missing column(s): Quantity')

        with self.assertRaises(InventoryError):
            read_inventory_rows(io.StringIO(''))

    def test_blank_lines_skipped(self):
        rows = read_inventory_rows(io.StringIO('Product Name,Size,Color,Quantity\n,,,\nLinen Shirt,M,Blue,1\n'))
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0]['row'], 3)

    def test_same_named_products_keep_their_stock(self):
        first = TestDataFactory.create_product(name='Basic Tee')
        second = TestDataFactory.create_product(name='Basic Tee')
        TestDataFactory.create_inventory_item(product=first, size='M', color='Blue', quantity=4)
        TestDataFactory.create_inventory_item(product=second, size='M', color='Blue', quantity=30)
        exported = export_inventory_csv(InventoryItem.objects.select_related('product'))

        result = import_inventory_rows(read_inventory_rows(io.StringIO(exported)))
        self.assertEqual(result, {'created': 0, 'updated': 0, 'unchanged': 2, 'errors': []})
        stock = sorted(InventoryItem.objects.filter(product__name='Basic Tee').values_list('product_id', 'quantity'))
        self.assertEqual(stock, [(first.id, 4), (second.id, 30)])

    def test_ambiguous_product_name_reported(self):
        first = TestDataFactory.create_product(name='Basic Tee')
        TestDataFactory.create_product(name='Basic Tee')
        item = TestDataFactory.create_inventory_item(product=first, size='M', color='Blue', quantity=4)
        content = 'Product Name,Size,Color,Quantity\nBasic Tee,M,Blue,9\n'

        result = import_inventory_rows(read_inventory_rows(io.StringIO(content)))
        self.assertEqual(result['errors'], [{'row': 2, 'errors': [
            'Several products are named "Basic Tee", add a Product ID column to choose one',
        ]}])
        item.refresh_from_db()
        self.assertEqual(item.quantity, 4)

    def test_product_id_column(self):
        content = f'Product Name,Size,Color,Quantity,Location,Product ID\n,S,Red,3,Store Room,{self.dress.id}\n'
        result = import_inventory_rows(read_inventory_rows(io.StringIO(content)))
        self.assertEqual(result['created'], 1)
        self.assertTrue(InventoryItem.objects.filter(product=self.dress, size='S', color='Red', quantity=3).exists())

        content = 'Product Name,Size,Color,Quantity,Location,Product ID\nSilk Dress,S,Red,3,Store Room,99999\n'
        result = import_inventory_rows(read_inventory_rows(io.StringIO(content)))
        self.assertEqual(result['errors'], [{'row': 2, 'errors': ['Product ID 99999 not found']}])

    def test_exact_size_and_color_match_first(self):
        upper = TestDataFactory.create_inventory_item(product=self.shirt, size='M', color='Blue', quantity=4)
        lower = TestDataFactory.create_inventory_item(product=self.shirt, size='m', color='Blue', quantity=9)
        content = 'Product Name,Size,Color,Quantity\nLinen Shirt,M,Blue,7\nLinen Shirt,M,BLUE,1\n'

        result = import_inventory_rows(read_inventory_rows(io.StringIO(content)))
        self.assertEqual(result['updated'], 1)
        self.assertEqual(result['errors'], [{'row': 3, 'errors': [
            'Several inventory records match size (M) and color (BLUE) ignoring case',
        ]}])
        upper.refresh_from_db()
        lower.refresh_from_db()
        self.assertEqual((upper.quantity, lower.quantity), (7, 9))

    def test_workbook_export_then_import_changes_nothing(self):
        TestDataFactory.create_inventory_item(product=self.shirt, size='M', color='Blue', quantity=4)
        TestDataFactory.create_inventory_item(product=self.dress, size='L', color='Red', quantity=40)
        buffer = io.BytesIO()
        self.assertEqual(export_inventory_workbook(InventoryItem.objects.select_related('product'), buffer), 2)

        sheet = load_workbook(io.BytesIO(buffer.getvalue())).active
        self.assertEqual(sheet.title, 'Inventory')
        self.assertEqual([cell.value for cell in sheet[1]], EXPORT_HEADERS)

        buffer.seek(0)
        result = import_inventory_rows(read_inventory_workbook(buffer))
        self.assertEqual(result, {'created': 0, 'updated': 0, 'unchanged': 2, 'errors': []})

    def test_workbook_numeric_cells(self):
        rows = read_inventory_workbook(io.BytesIO(workbook_bytes([
            ['Product Name', 'Size', 'Color', 'Quantity'],
            ['Linen Shirt', 'M', 'Blue', 12.0],
            ['Silk Dress', 38, 'Red', 3],
        ])))
        self.assertEqual([(r['row'], r['size'], r['quantity']) for r in rows], [(2, 'M', '12'), (3, '38', '3')])

    def test_read_upload_by_extension(self):
        rows = read_inventory_upload('stock.XLSX', workbook_bytes([
            ['Product Name', 'Size', 'Color', 'Quantity'],
            ['Linen Shirt', 'M', 'Blue', 1],
        ]))
        self.assertEqual(len(rows), 1)

        rows = read_inventory_upload('stock.csv', 'Product Name,Size,Color,Quantity\nLinen Shirt,M,Blue,1\n'.encode())
        self.assertEqual(len(rows), 1)

        for filename, content, message in (
            ('stock.xls', b'data', 'Legacy .xls workbooks are not supported, save the file as .xlsx'),
            ('stock.pdf', b'data', 'Unsupported file type, upload a .csv or .xlsx file'),
            ('stock.xlsx', b'not a workbook', 'The file is not a valid Excel workbook'),
            ('stock.csv', b'\xff\xfe\x00bad', 'File must be UTF-8 encoded CSV'),
        ):
            with self.assertRaises(InventoryError) as ctx:
                read_inventory_upload(filename, content)
            self.assertEqual(ctx.exception.message, message)


class InventoryAPITests(TestCase):

    def setUp(self):
        self.admin = TestDataFactory.create_admin()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)
        self.product = TestDataFactory.create_product(name='Linen Shirt', sizes=['M'])

    def test_requires_admin(self):
        client = AuthenticatedAPIClient()
        client.authenticate_user(TestDataFactory.create_user())
        response = client.get('/api/v1/inventory/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_create_inventory(self):
        data = {'product': self.product.id, 'size': 'M', 'color': 'Blue', 'quantity': 6, 'location': 'Main Warehouse'}
        response = self.client.post('/api/v1/inventory/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'low_stock')
        self.assertEqual(response.data['product_name'], 'Linen Shirt')
        self.assertTrue(AuditLog.objects.filter(model_name='InventoryItem', action='create').exists())

        response = self.client.post('/api/v1/inventory/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('Inventory already exists', response.data['error'])

    def test_list_filter_by_status(self):
        TestDataFactory.create_inventory_item(product=self.product, color='Blue', quantity=50)
        TestDataFactory.create_inventory_item(product=self.product, color='Red', quantity=0)
        response = self.client.get('/api/v1/inventory/?status=out_of_stock')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([i['color'] for i in response.data], ['Red'])

    def test_update_quantity_and_history(self):
        item = TestDataFactory.create_inventory_item(product=self.product, quantity=20)
        response = self.client.put(f'/api/v1/inventory/{item.id}/', {'quantity': 2, 'reason': 'Damaged'},
                                   format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['quantity'], 2)
        self.assertEqual(response.data['status'], 'low_stock')

        response = self.client.get(f'/api/v1/inventory/{item.id}/history/')
        self.assertEqual(response.data[0]['reason'], 'Damaged')
        self.assertEqual(response.data[0]['previous_quantity'], 20)
        self.assertEqual(response.data[0]['username'], self.admin.username)

    def test_update_invalid_quantity(self):
        item = TestDataFactory.create_inventory_item(product=self.product, quantity=20)
        response = self.client.put(f'/api/v1/inventory/{item.id}/', {'quantity': -3}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Valid quantity is required')

    def test_delete_inventory(self):
        item = TestDataFactory.create_inventory_item(product=self.product)
        response = self.client.delete(f'/api/v1/inventory/{item.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(InventoryItem.objects.filter(id=item.id).exists())

    def test_low_stock_endpoint(self):
        TestDataFactory.create_inventory_item(product=self.product, color='Blue', quantity=50)
        TestDataFactory.create_inventory_item(product=self.product, color='Red', quantity=3)
        TestDataFactory.create_inventory_item(product=self.product, color='Green', quantity=0)

        response = self.client.get('/api/v1/inventory/low-stock/')
        self.assertEqual([i['color'] for i in response.data], ['Red'])

        response = self.client.get('/api/v1/inventory/low-stock/?include_out_of_stock=true')
        self.assertEqual([i['color'] for i in response.data], ['Green', 'Red'])

    def test_bulk_update_missing_id(self):
        item = TestDataFactory.create_inventory_item(product=self.product, quantity=20)
        payload = {'items': [{'id': item.id, 'quantity': 1}, {'id': 99999, 'quantity': 1}]}
        response = self.client.put('/api/v1/inventory/bulk/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'Inventory record(s) not found: 99999')
        item.refresh_from_db()
        self.assertEqual(item.quantity, 20)

    def test_bulk_update(self):
        item = TestDataFactory.create_inventory_item(product=self.product, quantity=20)
        response = self.client.put('/api/v1/inventory/bulk/', {'items': [{'id': item.id, 'quantity': 9}]},
                                   format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data[0]['quantity'], 9)

    def test_export_csv(self):
        TestDataFactory.create_inventory_item(product=self.product, color='Blue', quantity=50)
        response = self.client.get('/api/v1/inventory/export/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('attachment; filename="inventory_export_', response['Content-Disposition'])
        lines = response.content.decode('utf-8').splitlines()
        self.assertEqual(lines[0], ','.join(EXPORT_HEADERS))
        self.assertTrue(lines[1].startswith('Linen Shirt,M,Blue,50,IN STOCK'))

    def test_import_csv(self):
        item = TestDataFactory.create_inventory_item(product=self.product, color='Blue', quantity=50)
        content = '\ufeffProduct Name,Size,Color,Quantity,Location\nLinen Shirt,M,Blue,12,\n'
        upload = SimpleUploadedFile('inventory.csv', content.encode('utf-8'), content_type='text/csv')
        response = self.client.post('/api/v1/inventory/import/', {'file': upload}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['updated'], 1)
        item.refresh_from_db()
        self.assertEqual(item.quantity, 12)
        self.assertTrue(AuditLog.objects.filter(action='stock_import').exists())

    def test_export_workbook(self):
        TestDataFactory.create_inventory_item(product=self.product, color='Blue', quantity=50)
        response = self.client.get('/api/v1/inventory/export/?file_format=xlsx')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response['Content-Type'], WORKBOOK_CONTENT_TYPE)
        self.assertIn('.xlsx"', response['Content-Disposition'])
        sheet = load_workbook(io.BytesIO(response.content)).active
        rows = list(sheet.iter_rows(values_only=True))
        self.assertEqual(list(rows[0]), EXPORT_HEADERS)
        self.assertEqual(list(rows[1][:5]), ['Linen Shirt', 'M', 'Blue', 50, 'IN STOCK'])
        self.assertEqual(rows[1][7], self.product.id)

    def test_export_unknown_format(self):
        response = self.client.get('/api/v1/inventory/export/?file_format=pdf')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_import_workbook(self):
        item = TestDataFactory.create_inventory_item(product=self.product, color='Blue', quantity=50)
        content = workbook_bytes([
            ['Product Name', 'Size', 'Color', 'Quantity', 'Location', 'Product ID'],
            ['Linen Shirt', 'M', 'Blue', 8, 'Store Room', self.product.id],
        ])
        upload = SimpleUploadedFile('inventory_export.xlsx', content, content_type=WORKBOOK_CONTENT_TYPE)
        response = self.client.post('/api/v1/inventory/import/', {'file': upload}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['updated'], 1)
        item.refresh_from_db()
        self.assertEqual((item.quantity, item.location), (8, 'Store Room'))

    def test_import_legacy_workbook_rejected(self):
        upload = SimpleUploadedFile('inventory.xls', b'\xd0\xcf\x11\xe0', content_type='application/vnd.ms-excel')
        response = self.client.post('/api/v1/inventory/import/', {'file': upload}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('.xls', response.data['error'])

    def test_non_object_body_rejected(self):
        item = TestDataFactory.create_inventory_item(product=self.product, quantity=20)
        for method, url in (
            ('post', '/api/v1/inventory/'),
            ('put', f'/api/v1/inventory/{item.id}/'),
            ('put', '/api/v1/inventory/bulk/'),
        ):
            response = getattr(self.client, method)(url, [{'id': item.id, 'quantity': 1}], format='json')
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
            self.assertEqual(response.data['errors'], ['Request body must be a JSON object'])
        item.refresh_from_db()
        self.assertEqual(item.quantity, 20)

    def test_import_without_file(self):
        response = self.client.post('/api/v1/inventory/import/', {}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['errors'], ['No file provided'])

    def test_import_missing_column(self):
        upload = SimpleUploadedFile('inventory.csv', b'Product Name,Size\nLinen Shirt,M\n', content_type='text/csv')
        response = self.client.post('/api/v1/inventory/import/', {'file': upload}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Missing column(s): Color, Quantity')


class ImportInventoryCommandTests(TestCase):

    def setUp(self):
        self.product = TestDataFactory.create_product(name='Linen Shirt')
        self.item = TestDataFactory.create_inventory_item(product=self.product, size='M', color='Blue', quantity=5)
        self.tmpdir = tempfile.TemporaryDirectory()
        self.csv_path = os.path.join(self.tmpdir.name, 'inventory.csv')
        with open(self.csv_path, 'w', encoding='utf-8', newline='') as f:
            f.write('Product Name,Size,Color,Quantity,Location\nLinen Shirt,M,Blue,30,\n')

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_import(self):
        out = io.StringIO()
        call_command('import_inventory', file=self.csv_path, stdout=out)
        self.item.refresh_from_db()
        self.assertEqual(self.item.quantity, 30)
        self.assertIn('Updated: 1', out.getvalue())

    def test_dry_run_saves_nothing(self):
        out = io.StringIO()
        call_command('import_inventory', file=self.csv_path, dry_run=True, stdout=out)
        self.item.refresh_from_db()
        self.assertEqual(self.item.quantity, 5)
        self.assertIn('Dry run', out.getvalue())

    def test_import_workbook(self):
        path = os.path.join(self.tmpdir.name, 'inventory.xlsx')
        with open(path, 'wb') as f:
            f.write(workbook_bytes([
                ['Product Name', 'Size', 'Color', 'Quantity'],
                ['Linen Shirt', 'M', 'Blue', 11],
            ]))
        out = io.StringIO()
        call_command('import_inventory', file=path, stdout=out)
        self.item.refresh_from_db()
        self.assertEqual(self.item.quantity, 11)

    def test_missing_file(self):
        with self.assertRaises(CommandError):
            call_command('import_inventory', file=os.path.join(self.tmpdir.name, 'nope.csv'), stdout=io.StringIO())
