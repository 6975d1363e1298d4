"""Tests for AGGR_IP curve parsing and IP_DETAIL POD extraction."""

import pytest

from dispatch.parsing.curves import (
    UNRECOGNISED_FORMAT_WARNING,
    calculate_average_curve,
    parse_aggr_ip_csv,
    parse_decimal,
)
from dispatch.parsing.ip_detail import parse_ip_detail_csv


def _qh_csv(rows: list[list[str]]) -> str:
    header = ";".join(["POD", "DATA"] + [f"QH{i}" for i in range(1, 97)])
    return "\n".join([header] + [";".join(["IT001E00000001", "2024-03-01"] + r) for r in rows])


@pytest.mark.parametrize(
    "raw, expected",
    [("1,5", 1.5), ("2.25", 2.25), ("1.234,5", 1234.5), ("1,234.5", 1234.5), ("", 0.0), ("n/d", 0.0)],
)
def test_parse_decimal(raw, expected):
    assert parse_decimal(raw) == pytest.approx(expected)


class TestAverageCurve:
    def test_zero_curves_gives_96_zeros(self):
        curve = calculate_average_curve([])

        assert len(curve) == 96
        assert all(v == 0 for v in curve)

    def test_mean_per_slot(self):
        curve = calculate_average_curve([[1.0] * 96, [3.0] * 96])

        assert len(curve) == 96
        assert curve[0] == pytest.approx(2.0)
        assert curve[95] == pytest.approx(2.0)


class TestParseAggrIp:
    def test_reads_named_quarter_hour_columns(self):
        content = _qh_csv([["1,0"] * 96, ["3,0"] * 96])

        parsed = parse_aggr_ip_csv(content)

        assert len(parsed.daily_curves) == 2
        assert parsed.daily_curves[1][0] == pytest.approx(3.0)
        assert parsed.warnings == []

    def test_skips_all_zero_days(self):
        content = _qh_csv([["0"] * 96, ["2"] * 96])

        assert len(parse_aggr_ip_csv(content).daily_curves) == 1

    def test_falls_back_to_fixed_offset(self):
        header = ";".join(f"C{i}" for i in range(104))
        row = ";".join(["x"] * 8 + ["4"] * 96)

        parsed = parse_aggr_ip_csv(f"{header}\n{row}\n")

        assert parsed.daily_curves == [[4.0] * 96]

    def test_unrecognised_layout_warns(self):
        parsed = parse_aggr_ip_csv("POD;DATA;VALORE\nIT001E00000001;2024-03-01;5\n")

        assert parsed.daily_curves == []
        assert parsed.warnings == [UNRECOGNISED_FORMAT_WARNING]


class TestParseIpDetail:
    def test_takes_first_pod_of_each_row(self):
        content = (
            "COMUNE;POD;POD_ALT\n"
            "Roma;IT001E00000001;IT001E00000099\n"
            "Roma;IT12;IT001E00000002\n"
            "Roma;nessuno;\n"
        )

        assert parse_ip_detail_csv(content) == ["IT001E00000001", "IT001E00000002"]

    def test_empty(self):
        assert parse_ip_detail_csv("") == []
