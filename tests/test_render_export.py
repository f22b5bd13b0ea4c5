#!/usr/bin/env python
"""Tests for result table rendering and CSV export."""
import io
import os
import tempfile
import unittest
from unittest import mock

from xlquery.core.errors import ExportError
from xlquery.core.output_writer import csv_records, export_csv
from xlquery.core.table_render import RenderedTable, build_table, print_table, render_table


class BuildTableTests(unittest.TestCase):

    def test_row_count_includes_header(self):
        for n in (0, 1, 5):
            rows = [(i, 'x') for i in range(n)]
            table = build_table(['id', 'name'], rows)
            self.assertEqual(len(table), 1 + n)
            self.assertEqual(table.rows[0], ['id', 'name'])

    def test_cells_are_normalized(self):
        table = build_table(['a', 'b', 'c', 'd'], [(None, 12345, 'txt', b'\x00')])
        self.assertEqual(table.data_rows, [['NULL', '12,345', 'txt', 'BLOB']])
        table = build_table(['b'], [(12345,)], group_digits=False)
        self.assertEqual(table.data_rows, [['12345']])

    def test_unreadable_cell_is_skipped(self):
        log = mock.Mock()
        table = build_table(['a', 'b'], [(1,), (2, 3)], log=log)
        self.assertEqual(table.data_rows, [['1'], ['2', '3']])
        self.assertEqual(log.error.call_count, 1)
        self.assertEqual(log.error.call_args[0][0], "Get value error: %s")


class RenderTableTests(unittest.TestCase):

    def test_grid_layout(self):
        table = build_table(['a', 'bb'], [(1, 'x')])
        self.assertEqual(render_table(table), [
            '+---+----+',
            '| a | bb |',
            '+---+----+',
            '| 1 | x  |',
            '+---+----+',
            '(1 row)',
        ])

    def test_header_only(self):
        table = build_table(['service_name'], [])
        self.assertEqual(render_table(table), [
            '+--------------+',
            '| service_name |',
            '+--------------+',
            '(0 rows)',
        ])

    def test_short_rows_are_padded_on_screen(self):
        table = RenderedTable(['a', 'b'])
        table.add_row(['1'])
        lines = render_table(table)
        self.assertEqual(lines[3], '| 1 |   |')
        self.assertEqual(table.data_rows, [['1']])

    def test_truncation_is_display_only(self):
        table = build_table(['name'], [('abcdefghij',)])
        lines = render_table(table, max_col_width=5)
        self.assertEqual(lines[3], '| abcd… |')
        self.assertEqual(table.data_rows, [['abcdefghij']])

    def test_wide_characters(self):
        table = build_table(['名前'], [('ab',)])
        lines = render_table(table)
        self.assertEqual(lines[0], '+------+')
        self.assertEqual(lines[3], '| ab   |')

    def test_no_columns_prints_ok(self):
        out = io.StringIO()
        print_table(RenderedTable([]), out=out)
        self.assertEqual(out.getvalue(), 'OK\n')


class ExportCsvTests(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_grouping_commas_are_stripped(self):
        table = build_table(['service_name', 'count'], [('alpha', 1234), ('beta', 7)])
        self.assertEqual(csv_records(table), [['service_name', 'count'], ['alpha', '1234'], ['beta', '7']])
        path = os.path.join(self.temp_dir.name, 'out.csv')
        written = export_csv(table, path)
        self.assertEqual(written, 3)
        with open(path, encoding='utf-8') as f:
            self.assertEqual(f.read(), 'service_name,count\nalpha,1234\nbeta,7\n')

    def test_existing_file_is_truncated(self):
        path = os.path.join(self.temp_dir.name, 'out.csv')
        with open(path, 'w', encoding='utf-8') as f:
            f.write('old content\n' * 10)
        export_csv(build_table(['n'], []), path)
        with open(path, encoding='utf-8') as f:
            self.assertEqual(f.read(), 'n\n')

    def test_unwritable_destination(self):
        path = os.path.join(self.temp_dir.name, 'missing', 'out.csv')
        with self.assertRaises(ExportError):
            export_csv(build_table(['n'], [(1,)]), path)
        self.assertFalse(os.path.exists(path))

    def test_compression_is_never_inferred(self):
        table = build_table(['one'], [(1,)])
        for name in ('out.csv.gz', 'out.zst', 'out.bz2'):
            path = os.path.join(self.temp_dir.name, name)
            export_csv(table, path)
            with open(path, 'rb') as f:
                data = f.read()
            self.assertFalse(data.startswith(b'\x1f\x8b'))
            self.assertEqual(data, b'one\n1\n')

    def test_short_rows_are_padded_in_csv(self):
        table = RenderedTable(['a', 'b', 'c'])
        table.add_row(['1,000', 'x', 'y'])
        table.add_row(['2'])
        self.assertEqual(csv_records(table), [['a', 'b', 'c'], ['1000', 'x', 'y'], ['2', '', '']])
        path = os.path.join(self.temp_dir.name, 'short.csv')
        self.assertEqual(export_csv(table, path), 3)
        with open(path, encoding='utf-8') as f:
            self.assertEqual(f.read(), 'a,b,c\n1000,x,y\n2,,\n')

    def test_skipped_cell_is_exported_as_empty_field(self):
        table = build_table(['service_name', 'count'], [('alpha',)], log=mock.Mock())
        path = os.path.join(self.temp_dir.name, 'degraded.csv')
        export_csv(table, path)
        with open(path, encoding='utf-8') as f:
            self.assertEqual(f.read(), 'service_name,count\nalpha,\n')

    def test_missing_codec_becomes_export_error(self):
        path = os.path.join(self.temp_dir.name, 'out.csv')
        with mock.patch('pandas.DataFrame.to_csv', side_effect=ImportError('zstandard')):
            with self.assertRaises(ExportError):
                export_csv(build_table(['n'], [(1,)]), path)


if __name__ == "__main__":
    unittest.main()
