"""Tests for premium ceiling detection."""

from takehome_jp.calculator import TakeHomeInputs, TakeHomeResults, calculate_taxes
from takehome_jp.caps import CapStatus, describe_caps, detect_caps
from takehome_jp.health_insurance import DEPENDENT_COVERAGE_ID, NATIONAL_HEALTH_INSURANCE_ID
from takehome_jp.income import BonusIncome, SalaryIncome


def _results(salary, *extra, provider="KyokaiKenpo", **kwargs):
    return calculate_taxes(TakeHomeInputs(
        income_streams=[SalaryIncome(amount=salary), *extra],
        health_insurance_provider=provider,
        **kwargs,
    ))


class TestEmployeeCaps:
    def test_no_caps_at_5m(self):
        status = detect_caps(_results(5_000_000))
        assert status == CapStatus()
        assert describe_caps(status) == []

    def test_high_salary(self):
        """月額約167万 → 健保・厚年とも最高等級"""
        status = detect_caps(_results(20_000_000))
        assert status.health_insurance_capped
        assert status.pension_capped
        assert not status.bonus_cap_reached

    def test_pension_caps_before_health(self):
        """月額70万: 厚年は最高等級（63.5万以上）、健保はまだ"""
        status = detect_caps(_results(8_400_000))
        assert status.pension_capped
        assert not status.health_insurance_capped

    def test_bonus_cap(self):
        status = detect_caps(_results(5_000_000, BonusIncome(6_000_000, 5)))
        assert status.bonus_cap_reached
        assert "標準賞与額が年度累計上限に到達" in describe_caps(status)

    def test_bonus_below_cap(self):
        status = detect_caps(_results(5_000_000, BonusIncome(2_000_000, 5), BonusIncome(2_000_000, 11)))
        assert not status.bonus_cap_reached


class TestNationalHealthInsuranceCaps:
    def test_high_income(self):
        status = detect_caps(_results(20_000_000, provider=NATIONAL_HEALTH_INSURANCE_ID))
        assert status.medical_capped
        assert status.support_capped
        assert not status.ltc_capped
        assert status.health_insurance_capped
        assert not status.pension_capped
        assert describe_caps(status) == ["国民健康保険料が賦課限度額に到達（医療分・支援金分）"]

    def test_high_income_with_ltc(self):
        status = detect_caps(_results(20_000_000, provider=NATIONAL_HEALTH_INSURANCE_ID, is_subject_to_ltc=True))
        assert status.ltc_capped

    def test_moderate_income(self):
        status = detect_caps(_results(5_000_000, provider=NATIONAL_HEALTH_INSURANCE_ID))
        assert status == CapStatus()


class TestNoCaps:
    def test_manual_override(self):
        status = detect_caps(_results(20_000_000, manual_social_insurance_entry=True,
                                      manual_social_insurance_amount=1_000_000))
        assert status == CapStatus()

    def test_dependent_coverage(self):
        assert detect_caps(_results(1_000_000, provider=DEPENDENT_COVERAGE_ID)) == CapStatus()

    def test_empty_results(self):
        assert detect_caps(TakeHomeResults()) == CapStatus()


class TestDescribe:
    def test_employee_health(self):
        notes = describe_caps(CapStatus(health_insurance_capped=True, pension_capped=True))
        assert notes == [
            "健康保険料が標準報酬月額の最高等級に到達",
            "厚生年金保険料が標準報酬月額の最高等級に到達",
        ]

    def test_nhi_ltc_only(self):
        notes = describe_caps(CapStatus(health_insurance_capped=True, ltc_capped=True))
        assert notes == ["国民健康保険料が賦課限度額に到達（介護分）"]
