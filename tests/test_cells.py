#!/usr/bin/env python
"""Tests for cell classification and display formatting."""
import unittest
from datetime import date
from decimal import Decimal

from xlquery.core.cells import Cell, CellKind, format_cell, read_cell
from xlquery.core.errors import CellReadError


class CellClassificationTests(unittest.TestCase):

    def test_engine_values_map_to_kinds(self):
        self.assertEqual(Cell.from_value(None).kind, CellKind.NULL)
        self.assertEqual(Cell.from_value(7).kind, CellKind.INTEGER)
        self.assertEqual(Cell.from_value(True), Cell(CellKind.INTEGER, 1))
        self.assertEqual(Cell.from_value(1.5).kind, CellKind.REAL)
        self.assertEqual(Cell.from_value(Decimal('2.25')).kind, CellKind.REAL)
        self.assertEqual(Cell.from_value('abc'), Cell(CellKind.TEXT, 'abc'))
        self.assertEqual(Cell.from_value(b'\x00\x01').kind, CellKind.BLOB)
        self.assertEqual(Cell.from_value(memoryview(b'xy')), Cell(CellKind.BLOB, b'xy'))

    def test_other_values_become_text(self):
        self.assertEqual(Cell.from_value(date(2024, 1, 31)), Cell(CellKind.TEXT, '2024-01-31'))

    def test_read_cell_out_of_range(self):
        with self.assertRaises(CellReadError):
            read_cell((1, 2), 5)
        with self.assertRaises(CellReadError):
            read_cell(None, 0)


class FormatCellTests(unittest.TestCase):

    def test_every_kind_has_a_display_string(self):
        samples = {
            CellKind.NULL: Cell(CellKind.NULL),
            CellKind.INTEGER: Cell(CellKind.INTEGER, 3),
            CellKind.REAL: Cell(CellKind.REAL, 0.5),
            CellKind.TEXT: Cell(CellKind.TEXT, ''),
            CellKind.BLOB: Cell(CellKind.BLOB, b'\xff'),
        }
        self.assertEqual(set(samples), set(CellKind))
        for cell in samples.values():
            self.assertIsInstance(format_cell(cell), str)

    def test_tokens(self):
        self.assertEqual(format_cell(Cell(CellKind.NULL)), 'NULL')
        self.assertEqual(format_cell(Cell(CellKind.BLOB, b'secret')), 'BLOB')

    def test_text_is_verbatim(self):
        self.assertEqual(format_cell(Cell(CellKind.TEXT, 'a,b "c"')), 'a,b "c"')

    def test_grouped_numbers(self):
        self.assertEqual(format_cell(Cell(CellKind.INTEGER, 1234567)), '1,234,567')
        self.assertEqual(format_cell(Cell(CellKind.INTEGER, -1234)), '-1,234')
        self.assertEqual(format_cell(Cell(CellKind.REAL, 1234.5)), '1,234.5')
        self.assertEqual(format_cell(Cell(CellKind.REAL, 12.0)), '12.0')
        self.assertEqual(format_cell(Cell(CellKind.REAL, Decimal('9876.50'))), '9,876.50')

    def test_ungrouped_numbers(self):
        self.assertEqual(format_cell(Cell(CellKind.INTEGER, 1234567), group_digits=False), '1234567')
        self.assertEqual(format_cell(Cell(CellKind.REAL, 1234.5), group_digits=False), '1234.5')


if __name__ == "__main__":
    unittest.main()
