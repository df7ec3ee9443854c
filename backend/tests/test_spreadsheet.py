from ledgerbook.services.spreadsheet import (
    COL_AMOUNT,
    COL_CATEGORY,
    COL_DATE,
    COL_DESCRIPTION,
    COL_RECEIPT,
    COL_TYPE,
    EXPORT_HEADERS,
    format_locale_date,
    from_rows,
    template_rows,
    to_rows,
)

from helpers import TODAY, tx


def _today():
    return TODAY


def _row(**cells):
    base = {COL_DATE: "2024-02-01", COL_TYPE: "지출", COL_CATEGORY: "간식", COL_DESCRIPTION: "간식", COL_AMOUNT: 1000}
    base.update(cells)
    return base


class TestExport:
    def test_row_layout(self):
        rows = to_rows([tx("1", "2024-01-05", 50000, "expense", "간식", "회의 간식", receipt="https://r")])
        assert rows == [{
            COL_DATE: "2024. 1. 5.",
            COL_TYPE: "지출",
            COL_CATEGORY: "간식",
            COL_DESCRIPTION: "회의 간식",
            COL_AMOUNT: 50000,
            COL_RECEIPT: "O",
        }]
        assert list(rows[0]) == EXPORT_HEADERS

    def test_income_word_and_missing_receipt(self):
        row = to_rows([tx("1", "2024-03-01", 10, "income")])[0]
        assert row[COL_TYPE] == "수입"
        assert row[COL_RECEIPT] == "X"

    def test_fractional_amount_kept(self):
        assert to_rows([tx("1", "2024-03-01", 10.5)])[0][COL_AMOUNT] == 10.5

    def test_order_preserved(self, ledger):
        rows = to_rows(ledger)
        assert [r[COL_DESCRIPTION] for r in rows] == [t.description for t in ledger]

    def test_locale_date(self):
        assert format_locale_date("2024-12-31") == "2024. 12. 31."

    def test_locale_date_pads_early_years(self):
        assert format_locale_date("0999-01-01") == "0999. 1. 1."


class TestImport:
    def test_date_recovery(self):
        result = from_rows([_row(**{COL_DATE: "2024.1.5"})], today=_today)
        assert result.transactions[0].date == "2024-01-05"

    def test_bad_date_uses_today(self):
        result = from_rows([_row(**{COL_DATE: "지난주"})], today=_today)
        assert result.transactions[0].date == "2024-02-15"

    def test_missing_date_uses_today(self):
        row = _row()
        del row[COL_DATE]
        assert from_rows([row], today=_today).transactions[0].date == "2024-02-15"

    def test_type_recovery(self):
        result = from_rows(
            [_row(**{COL_TYPE: "수입"}), _row(**{COL_TYPE: "환불"}), {COL_AMOUNT: 10}],
            today=_today,
        )
        assert [t.type for t in result.transactions] == ["income", "expense", "expense"]

    def test_defaults_for_missing_text(self):
        result = from_rows([{COL_AMOUNT: 3000}], today=_today)
        t = result.transactions[0]
        assert t.category == "기타"
        assert t.description == ""

    def test_non_positive_amounts_dropped(self):
        rows = [
            _row(**{COL_AMOUNT: 0, COL_DESCRIPTION: "zero"}),
            _row(**{COL_AMOUNT: "-5", COL_DESCRIPTION: "negative"}),
            _row(**{COL_AMOUNT: 50000, COL_DESCRIPTION: "kept"}),
            _row(**{COL_AMOUNT: "금액", COL_DESCRIPTION: "header artefact"}),
            {},
        ]
        result = from_rows(rows, today=_today)
        assert [t.description for t in result.transactions] == ["kept"]
        assert result.total_rows == 5
        assert result.skipped == 4
        assert result.accepted == 1
        assert not result.is_empty

    def test_no_valid_rows_signal(self):
        result = from_rows([_row(**{COL_AMOUNT: 0})], today=_today)
        assert result.is_empty
        assert result.transactions == ()

    def test_ids_assigned_by_normalizer(self, id_factory):
        result = from_rows([_row(), _row()], today=_today, id_factory=id_factory)
        assert [t.id for t in result.transactions] == ["tx-1", "tx-2"]

    def test_receipt_presence_not_restored(self):
        result = from_rows([_row(**{COL_RECEIPT: "O"})], today=_today)
        assert result.transactions[0].receipt is None

    def test_template_imports_cleanly(self):
        result = from_rows(template_rows(), today=_today)
        assert result.accepted == 2
        assert [t.type for t in result.transactions] == ["expense", "income"]
        assert result.transactions[1].amount == 5000000


class TestRoundTrip:
    def test_fields_survive(self, ledger):
        result = from_rows(to_rows(ledger), today=_today)
        fields = ("date", "category", "description", "amount", "type")
        got = [tuple(getattr(t, f) for f in fields) for t in result.transactions]
        want = [tuple(getattr(t, f) for f in fields) for t in ledger]
        assert got == want

    def test_early_year_survives(self):
        result = from_rows(to_rows([tx("1", "0999-01-01", 10)]), today=_today)
        assert result.transactions[0].date == "0999-01-01"

    def test_zero_amount_not_reimported(self):
        ledger = [tx("1", "2024-01-01", 0), tx("2", "2024-01-02", 10)]
        result = from_rows(to_rows(ledger), today=_today)
        assert [t.date for t in result.transactions] == ["2024-01-02"]

    def test_idempotent(self, ledger):
        assert to_rows(ledger) == to_rows(ledger)
        a = from_rows(to_rows(ledger), today=_today, id_factory=lambda: "x")
        b = from_rows(to_rows(ledger), today=_today, id_factory=lambda: "x")
        assert a == b
