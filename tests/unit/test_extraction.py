"""Unit tests for the parse + reconcile pipeline"""

import pytest
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from rmc_recalc.domain.extraction import extract_payments
from rmc_recalc.domain.exceptions import DegradedDateRecovery, NoRecordsFoundError


def test_extract_payments(hiscre_text):
    result = extract_payments(hiscre_text)

    assert len(result.payments) == 2
    assert result.degraded_dates is False
    assert [p.competence_date for p in result.payments] == [date(2020, 7, 1), date(2020, 8, 1)]


def test_extract_payments_no_records():
    with pytest.raises(NoRecordsFoundError):
        extract_payments("HISTORICO DE CREDITOS\nsem descontos")


def test_extract_payments_flags_degraded_dates():
    text = "217 EMPRESTIMO SOBRE A RMC 150,00\n217 EMPRESTIMO SOBRE A RMC 150,00"

    result = extract_payments(text, today=date(2023, 2, 10))

    assert result.degraded_dates is True
    assert [p.competence_date for p in result.payments] == [date(2023, 1, 1), date(2023, 2, 1)]


def test_degraded_flag_does_not_use_warnings(recwarn):
    extract_payments("217 EMPRESTIMO SOBRE A RMC 150,00")

    assert not [w for w in recwarn if issubclass(w.category, DegradedDateRecovery)]


def test_degraded_flag_is_per_call_under_concurrency(hiscre_text):
    """Undated and dated statements extracted in parallel keep their own flag"""
    undated = "217 EMPRESTIMO SOBRE A RMC 150,00\n217 EMPRESTIMO SOBRE A RMC 150,00"
    jobs = [(undated, True), (hiscre_text, False)] * 400

    def run(job):
        text, expected = job
        return extract_payments(text).degraded_dates == expected

    with ThreadPoolExecutor(max_workers=8) as pool:
        outcomes = list(pool.map(run, jobs))

    assert all(outcomes)
