import io
from datetime import date

import pytest
from openpyxl import load_workbook

from ledgerbook.services.spreadsheet import EXPORT_HEADERS, template_rows, to_rows
from ledgerbook.services.workbook import (
    EXPORT_SHEET,
    TEMPLATE_SHEET,
    export_filename,
    read_rows,
    write_rows,
)



class TestWriteRows:
    def test_header_row_is_bold(self, ledger):
        content = write_rows(to_rows(ledger), EXPORT_HEADERS)
        ws = load_workbook(io.BytesIO(content)).active
        assert ws.title == EXPORT_SHEET
        assert [c.value for c in ws[1]] == EXPORT_HEADERS
        assert all(c.font.bold for c in ws[1])
        assert ws.max_row == len(ledger) + 1

    def test_custom_sheet_title(self):
        content = write_rows(template_rows(), EXPORT_HEADERS, TEMPLATE_SHEET)
        assert load_workbook(io.BytesIO(content)).active.title == TEMPLATE_SHEET

    def test_headers_only_when_no_rows(self):
        assert read_rows(write_rows([], EXPORT_HEADERS)) == []


class TestReadRows:
    def test_rows_keyed_by_header(self, ledger):
        rows = read_rows(write_rows(to_rows(ledger), EXPORT_HEADERS))
        assert len(rows) == len(ledger)
        assert rows[0]["날짜"] == "2024. 1. 10."
        assert rows[0]["유형"] == "수입"
        assert rows[0]["금액"] == 5000000
        assert rows[1]["영수증 유무"] == "O"

    def test_blank_rows_skipped(self):
        content = write_rows(
            [{"날짜": "2024-01-01", "금액": 10}, {}, {"날짜": "2024-01-02", "금액": 20}],
            ["날짜", "금액"],
        )
        rows = read_rows(content)
        assert [r["금액"] for r in rows] == [10, 20]

    def test_whitespace_cells_become_none(self):
        rows = read_rows(write_rows([{"내역": "   ", "금액": 5}], ["내역", "금액"]))
        assert rows == [{"내역": None, "금액": 5}]

    def test_not_a_workbook(self):
        with pytest.raises(ValueError):
            read_rows(b"this is not a zip file")


class TestExportFilename:
    def test_org_and_day(self):
        assert export_filename("학생회_회계", date(2024, 2, 15)) == "학생회_회계_2024-02-15.xlsx"
