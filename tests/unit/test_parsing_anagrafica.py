"""Tests for ANAGRAFICA treatment classification."""

import pytest

from dispatch.parsing.anagrafica import (
    classify_treatment,
    looks_like_header,
    parse_anagrafica_csv,
    trattamento_column_names,
)


@pytest.mark.parametrize("code", ["O", "ORARIO", "1", "TM", "TMO", " o "])
def test_hourly_treatments(code):
    assert classify_treatment(code) == "O"


@pytest.mark.parametrize("code", ["F", "LP", "NM", "lp"])
def test_load_profile_treatments(code):
    assert classify_treatment(code) == "LP"


@pytest.mark.parametrize("code", ["", "X", "2", "ORA"])
def test_other_treatments_are_unclassified(code):
    assert classify_treatment(code) is None


def test_month_specific_column_names():
    names = trattamento_column_names("2024-03")

    assert "TRATTAMENTO_03" in names
    assert "TRATTAMENTO_3" in names
    assert "TIPO_TRATTAMENTO_03" in names
    assert trattamento_column_names(None) == []
    assert trattamento_column_names("2024") == []


def test_classifies_rows_into_sets():
    """
    Arrange: registry with one row per treatment family
    Act: parse
    Assert: hourly and load-profile sets; unknown treatment dropped
    """
    content = (
        "POD;TRATTAMENTO;COMUNE\n"
        "IT001E00000001;O;Roma\n"
        "IT001E00000002;ORARIO;Roma\n"
        "IT001E00000003;LP;Roma\n"
        "IT001E00000004;NM;Roma\n"
        "IT001E00000005;X;Roma\n"
    )

    parsed = parse_anagrafica_csv(content)

    assert parsed.pod_codes_o == ["IT001E00000001", "IT001E00000002"]
    assert parsed.pod_codes_lp == ["IT001E00000003", "IT001E00000004"]
    assert parsed.warnings == []


def test_prefers_month_specific_column():
    content = (
        "POD;TRATTAMENTO;TRATTAMENTO_03\n"
        "IT001E00000001;LP;O\n"
        "IT001E00000002;O;F\n"
    )

    parsed = parse_anagrafica_csv(content, month_reference="2024-03")

    assert parsed.pod_codes_o == ["IT001E00000001"]
    assert parsed.pod_codes_lp == ["IT001E00000002"]


def test_skips_metadata_line_before_header():
    content = (
        "Estrazione del 01/03/2024 - Zona NORD\n"
        "CODICE_POD,TIPO_TRATTAMENTO\n"
        "IT001E00000001,TM\n"
    )

    parsed = parse_anagrafica_csv(content)

    assert parsed.pod_codes_o == ["IT001E00000001"]


def test_metadata_line_mentioning_pod_is_not_a_header():
    """
    Arrange: export line that contains the word POD, then the real header
    Act: parse with the November reference
    Assert: header found on line 2, month column used
    """
    content = (
        "Estrazione anagrafica POD zona NORD del 05/11/2024\n"
        "POD;TRATTAMENTO_11\n"
        "IT001E00000001;O\n"
        "IT001E00000002;LP\n"
    )

    parsed = parse_anagrafica_csv(content, month_reference="2024-11")

    assert parsed.pod_codes_o == ["IT001E00000001"]
    assert parsed.pod_codes_lp == ["IT001E00000002"]
    assert parsed.warnings == []


def test_header_detection_matches_whole_cells():
    assert looks_like_header("POD;TRATTAMENTO", ";")
    assert looks_like_header("ID;TRATTAMENTO_11", ";", "2024-11")
    assert not looks_like_header("Estrazione anagrafica POD zona NORD", ";")
    assert not looks_like_header("ELENCO_POD;DATA", ";")


def test_missing_treatment_column_classifies_it_pods_as_hourly():
    content = "POD;COMUNE\nIT001E00000001;Roma\nXX001E00000002;Milano\n"

    parsed = parse_anagrafica_csv(content)

    assert parsed.pod_codes_o == ["IT001E00000001"]
    assert parsed.pod_codes_lp == []
    assert len(parsed.warnings) == 1


def test_missing_pod_column_warns():
    content = "A;B\n1;2\n"

    parsed = parse_anagrafica_csv(content)

    assert parsed.pod_codes_o == []
    assert parsed.warnings == ["Colonna POD non trovata nel file anagrafica"]


def test_skips_very_short_pods():
    content = "POD;TRATTAMENTO\nIT1;O\nIT001E00000001;O\n"

    assert parse_anagrafica_csv(content).pod_codes_o == ["IT001E00000001"]
