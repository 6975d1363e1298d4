"""Tests for LETTURE POD extraction (CSV, XML, filename)."""

import pytest

from dispatch.parsing.letture import (
    extract_pods_from_filename,
    parse_letture_csv,
    parse_letture_xml,
    parse_pod_entry,
)


class TestParseLettureCsv:
    def test_reads_pod_column_by_header(self):
        content = "DATA;POD;ENERGIA\n2024-03-01;IT001E00000001;1,2\n2024-03-02;IT001E00000002;0,8\n"

        assert parse_letture_csv(content) == ["IT001E00000001", "IT001E00000002"]

    @pytest.mark.parametrize("header", ["CODICE_POD", "cod_pod", "Punto_Prelievo", "IDENTIFICATIVO_POD"])
    def test_accepts_header_variants(self, header):
        content = f"{header},KWH\nIT001E00000001,3\n"

        assert parse_letture_csv(content) == ["IT001E00000001"]

    def test_detects_pod_column_from_first_data_row(self):
        content = "A;B;C\n2024-03-01;IT001E00000009;5\n2024-03-02;IT001E00000010;6\n"

        assert parse_letture_csv(content) == ["IT001E00000009", "IT001E00000010"]

    def test_returns_empty_when_no_pod_column(self):
        content = "A;B\n1;2\n3;4\n"

        assert parse_letture_csv(content) == []

    @pytest.mark.parametrize(
        "value, accepted",
        [
            ("IT001E00000001", True),
            ("IT12345678X", True),       # 11 chars
            ("IT12345678", False),       # exactly 10 chars
            ("FR001E00000001", False),
            ("it001e00000001", False),
            ("", False),
        ],
    )
    def test_pod_acceptance_rule(self, value, accepted):
        content = f"POD\n{value}\n"

        assert (parse_letture_csv(content) == [value]) is accepted

    def test_strips_quotes_and_whitespace(self):
        content = 'POD;KWH\n "IT001E00000001" ;1\n'

        assert parse_letture_csv(content) == ["IT001E00000001"]

    def test_skips_short_rows_and_blank_lines(self):
        content = "DATA;POD\n2024-03-01\n\n2024-03-02;IT001E00000002\n"

        assert parse_letture_csv(content) == ["IT001E00000002"]

    def test_keeps_duplicates_for_caller_to_dedupe(self):
        content = "POD\nIT001E00000001\nIT001E00000001\n"

        assert parse_letture_csv(content) == ["IT001E00000001", "IT001E00000001"]

    def test_empty_content(self):
        assert parse_letture_csv("") == []


class TestParseLettureXml:
    def test_matches_every_known_spelling(self):
        content = (
            "<Letture>"
            "<POD>IT001E00000001</POD>"
            "<codpod>IT001E00000002</codpod>"
            "<CodicePOD> IT001E00000003 </CodicePOD>"
            '<Misura pod="IT001E00000004" />'
            "</Letture>"
        )

        assert sorted(parse_letture_xml(content)) == [
            "IT001E00000001",
            "IT001E00000002",
            "IT001E00000003",
            "IT001E00000004",
        ]

    def test_rejects_invalid_values(self):
        content = "<POD>IT123</POD><POD>XX001E00000001</POD>"

        assert parse_letture_xml(content) == []


class TestFilenamePods:
    def test_extracts_embedded_pod(self):
        assert extract_pods_from_filename("LETTURE_IT001E12345678_202403.zip") == ["IT001E12345678"]

    def test_upper_cases_and_dedupes(self):
        name = "it001e12345678_IT001E12345678_IT002E87654321.csv"

        assert extract_pods_from_filename(name) == ["IT001E12345678", "IT002E87654321"]

    def test_no_match(self):
        assert extract_pods_from_filename("letture_marzo.zip") == []


def test_parse_pod_entry_routes_by_suffix():
    assert parse_pod_entry("a/B.XML", "<POD>IT001E00000001</POD>") == ["IT001E00000001"]
    assert parse_pod_entry("a/b.csv", "POD\nIT001E00000002\n") == ["IT001E00000002"]
