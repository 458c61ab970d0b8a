"""Unit tests for statement line classification and candidate extraction"""

import pytest
from datetime import date
from decimal import Decimal
from rmc_recalc.domain.statement_parser import (
    classify_line,
    is_noise,
    match_amount,
    match_competence_date,
    normalize_line,
    parse_statement,
)


def test_normalize_line_repairs_ocr_digits():
    """Letters misread for digits are fixed next to digits, words are left alone"""
    line = normalize_line("O7/2O2O  2I7 Empréstimo sobre a RMC   15O,00")
    assert line == "07/2020 217 EMPRESTIMO SOBRE A RMC 150,00"


def test_normalize_line_keeps_words_intact():
    assert normalize_line("o valor do periodo") == "O VALOR DO PERIODO"
    assert normalize_line("Total 1O") == "TOTAL 10"


@pytest.mark.parametrize(
    "line",
    [
        "DATA DE CONCESSAO DO BENEFICIO: 10/2010, NASCIDO EM 1970 217 EMPRESTIMO SOBRE A RMC 150,00",
        "COMPETENCIA INICIAL: 01/2015",
        "COMPETENCIA FINAL: 12/2023",
        "GERADO EM 10/10/2023",
        "PAGINA 2 DE 5",
        "MARGEM RESERVADA 217 150,00",
        "216 CONSIGNACAO EMPRESTIMO BANCARIO 07/2020 300,00",
        "07/2020 217 EMPRESTIMO SOBRE A RMC 150,00 IMPRESSO AS 10:15",
    ],
)
def test_is_noise(line):
    assert is_noise(line)


@pytest.mark.parametrize(
    "line",
    [
        "07/2020 01/07/2020 A 31/07/2020",
        "217 EMPRESTIMO SOBRE A RMC R$ 150,00",
        "VALOR 1.216,00",
    ],
)
def test_is_not_noise(line):
    assert not is_noise(line)


def test_noise_line_never_moves_cursor_or_yields_debit():
    cursor = date(2020, 7, 1)
    line = normalize_line("Data de concessão do benefício: 10/2010, nascido em 1970 217 EMPRESTIMO SOBRE A RMC 150,00")

    new_cursor, amount = classify_line(line, cursor)

    assert new_cursor == cursor
    assert amount is None


@pytest.mark.parametrize(
    "line, expected",
    [
        ("07/2020", date(2020, 7, 1)),
        ("15/07/2020", date(2020, 7, 1)),
        ("07.2020", date(2020, 7, 1)),
        ("07/2020 01/07/2020 A 31/07/2020", date(2020, 7, 1)),
        ("REF 1/2021", date(2021, 1, 1)),
    ],
)
def test_match_competence_date(line, expected):
    assert match_competence_date(line) == expected


@pytest.mark.parametrize("line", ["15/03/1958", "01/2031", "13/2020", "1.500,00", "217 150,00"])
def test_match_competence_date_rejects_out_of_range(line):
    assert match_competence_date(line) is None


@pytest.mark.parametrize(
    "line, expected",
    [
        ("217 EMPRESTIMO SOBRE A RMC 850,00", Decimal("850.00")),
        ("217 EMPRESTIMO SOBRE A RMC R$ 1.234,56", Decimal("1234.56")),
        ("217 EMPRESTIMO SOBRE A RMC 5,00", None),
        ("217 EMPRESTIMO SOBRE A RMC 15.000,00", None),
        ("217 EMPRESTIMO SOBRE A RMC 10,00", None),
        ("217 EMPRESTIMO SOBRE A RMC 10.000,00", None),
        ("217 EMPRESTIMO SOBRE A RMC 2,50 152,35", Decimal("152.35")),
        ("217 EMPRESTIMO SOBRE A RMC", None),
    ],
)
def test_match_amount_plausibility_range(line, expected):
    assert match_amount(line) == expected


def test_parse_statement_assigns_cursor_dates(hiscre_text):
    candidates = parse_statement(hiscre_text)

    assert [c.id for c in candidates] == [1, 2]
    assert [c.competence_date for c in candidates] == [date(2020, 7, 1), date(2020, 8, 1)]
    assert [c.amount for c in candidates] == [Decimal("150.00"), Decimal("152.35")]
    assert candidates[0].source_line == "217 EMPRESTIMO SOBRE A RMC R$ 150,00"


def test_parse_statement_amount_range_filter():
    text = "\n".join(
        [
            "07/2020",
            "217 EMPRESTIMO SOBRE A RMC 5,00",
            "217 EMPRESTIMO SOBRE A RMC 15.000,00",
            "217 EMPRESTIMO SOBRE A RMC 850,00",
        ]
    )

    candidates = parse_statement(text)

    assert len(candidates) == 1
    assert candidates[0].amount == Decimal("850.00")
    assert candidates[0].id == 1


def test_parse_statement_debit_before_any_date_is_undated():
    text = "\n".join(
        [
            "EMPRESTIMO SOBRE A RMC 120,00",
            "09/2020",
            "EMPRESTIMO SOBRE A RMC 120,00",
        ]
    )

    candidates = parse_statement(text)

    assert [c.competence_date for c in candidates] == [None, date(2020, 9, 1)]


def test_parse_statement_line_with_own_date_and_debit():
    candidates = parse_statement("03/2021 217 EMPRESTIMO SOBRE A RMC 99,90")

    assert candidates[0].competence_date == date(2021, 3, 1)
    assert candidates[0].amount == Decimal("99.90")


def test_parse_statement_ignores_birth_year_headers():
    text = "\n".join(
        [
            "05/2019",
            "NASC. 02/1999",
            "217 EMPRESTIMO SOBRE A RMC 80,00",
            "15/03/1958 217 EMPRESTIMO SOBRE A RMC 80,00",
        ]
    )

    candidates = parse_statement(text)

    assert [c.competence_date for c in candidates] == [date(2019, 5, 1), date(2019, 5, 1)]


def test_parse_statement_code_inside_amount_is_not_a_debit():
    assert parse_statement("07/2020\nVALOR BRUTO 1.217,00") == []


def test_parse_statement_no_matches():
    assert parse_statement("nothing to see here\n") == []
    assert parse_statement("") == []


def test_match_amount_skips_out_of_range_tokens_before_first_plausible():
    assert match_amount("217 EMPRESTIMO SOBRE A RMC 5,00 850,00 900,00") == Decimal("850.00")


def test_parse_statement_debit_after_small_fee_token():
    records = parse_statement("07/2020\n217 EMPRESTIMO SOBRE A RMC 5,00 850,00")

    assert [r.amount for r in records] == [Decimal("850.00")]
