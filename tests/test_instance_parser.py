"""
Tests for raw fact extraction from XBRL instance documents.
"""

from __future__ import annotations

import pytest

from edgar_ingest.services.ingestion.errors import FormatFailure
from edgar_ingest.services.ingestion.xbrl.instance_parser import parse_instance_document


TEN_Q = """<?xml version="1.0" encoding="utf-8"?>
<xbrli:xbrl
    xmlns:xbrli="http://www.xbrl.org/2003/instance"
    xmlns:xbrldi="http://xbrl.org/2006/xbrldi"
    xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"
    xmlns:dei="http://xbrl.sec.gov/dei/2019-01-31"
    xmlns:us-gaap="http://fasb.org/us-gaap/2019-01-31"
    xmlns:acme="http://acme.example.com/20200630">
  <xbrli:context id="Q2">
    <xbrli:entity><xbrli:identifier scheme="http://www.sec.gov/CIK">0000012345</xbrli:identifier></xbrli:entity>
    <xbrli:period><xbrli:startDate>2020-04-01</xbrli:startDate><xbrli:endDate>2020-06-30</xbrli:endDate></xbrli:period>
  </xbrli:context>
  <xbrli:context id="YTD">
    <xbrli:entity><xbrli:identifier scheme="http://www.sec.gov/CIK">0000012345</xbrli:identifier></xbrli:entity>
    <xbrli:period><xbrli:startDate>2020-01-01</xbrli:startDate><xbrli:endDate>2020-06-30</xbrli:endDate></xbrli:period>
  </xbrli:context>
  <xbrli:context id="I0630">
    <xbrli:entity><xbrli:identifier scheme="http://www.sec.gov/CIK">0000012345</xbrli:identifier></xbrli:entity>
    <xbrli:period><xbrli:instant>2020-06-30</xbrli:instant></xbrli:period>
  </xbrli:context>
  <xbrli:context id="I1231">
    <xbrli:entity><xbrli:identifier scheme="http://www.sec.gov/CIK">0000012345</xbrli:identifier></xbrli:entity>
    <xbrli:period><xbrli:instant>2019-12-31</xbrli:instant></xbrli:period>
  </xbrli:context>
  <xbrli:context id="Q2_Segment">
    <xbrli:entity>
      <xbrli:identifier scheme="http://www.sec.gov/CIK">0000012345</xbrli:identifier>
      <xbrli:segment><xbrldi:explicitMember dimension="us-gaap:StatementBusinessSegmentsAxis">acme:WidgetsMember</xbrldi:explicitMember></xbrli:segment>
    </xbrli:entity>
    <xbrli:period><xbrli:startDate>2020-04-01</xbrli:startDate><xbrli:endDate>2020-06-30</xbrli:endDate></xbrli:period>
  </xbrli:context>
  <dei:DocumentPeriodEndDate contextRef="Q2">2020-06-30</dei:DocumentPeriodEndDate>
  <us-gaap:Revenues contextRef="Q2_Segment" unitRef="usd" decimals="-3">400000</us-gaap:Revenues>
  <us-gaap:Revenues contextRef="YTD" unitRef="usd" decimals="-3">1900000</us-gaap:Revenues>
  <us-gaap:Revenues contextRef="Q2" unitRef="usd" decimals="-3">1000000</us-gaap:Revenues>
  <us-gaap:NetCashProvidedByUsedInOperatingActivities contextRef="Q2" unitRef="usd" decimals="-3">90000</us-gaap:NetCashProvidedByUsedInOperatingActivities>
  <us-gaap:NetCashProvidedByUsedInOperatingActivities contextRef="YTD" unitRef="usd" decimals="-3">250000</us-gaap:NetCashProvidedByUsedInOperatingActivities>
  <us-gaap:Assets contextRef="I1231" unitRef="usd" decimals="-3">4000000</us-gaap:Assets>
  <us-gaap:Assets contextRef="I0630" unitRef="usd" decimals="-3">5000000</us-gaap:Assets>
  <us-gaap:NetIncomeLoss contextRef="Q2" unitRef="usd" decimals="2">-1234.56</us-gaap:NetIncomeLoss>
  <us-gaap:LiabilitiesCurrent contextRef="I0630" xsi:nil="true"/>
  <us-gaap:OperatingExpenses contextRef="Q2" unitRef="usd">n/a</us-gaap:OperatingExpenses>
  <us-gaap:EarningsPerShareBasic contextRef="Q2" unitRef="usdPerShare" decimals="2">1.25</us-gaap:EarningsPerShareBasic>
  <acme:Revenues contextRef="Q2" unitRef="usd">7</acme:Revenues>
</xbrli:xbrl>
"""


@pytest.fixture
def instance_path(tmp_path):
    path = tmp_path / "acme-20200630.xml"
    path.write_text(TEN_Q, encoding="utf-8")
    return path


def test_extracts_raw_fields_for_document_period(instance_path):
    raw = parse_instance_document(instance_path, cik=12345, year=2020, quarter=3)

    assert (raw.cik, raw.year, raw.quarter) == (12345, 2020, 3)
    assert raw.raw_fields == {
        "Revenues": 1000000,
        "NetCashProvidedByUsedInOperatingActivities": 250000,
        "Assets": 5000000,
        "NetIncomeLoss": -1234,
    }


def test_flow_tags_take_quarter_and_cash_flow_tags_take_year_to_date(instance_path):
    raw = parse_instance_document(instance_path, cik=12345, year=2020, quarter=3)

    assert raw.raw_fields["Revenues"] == 1000000
    assert raw.raw_fields["NetCashProvidedByUsedInOperatingActivities"] == 250000


def test_nil_and_non_numeric_facts_are_ignored(instance_path):
    raw = parse_instance_document(instance_path, cik=12345, year=2020, quarter=3)

    assert "LiabilitiesCurrent" not in raw.raw_fields
    assert "OperatingExpenses" not in raw.raw_fields
    assert "EarningsPerShareBasic" not in raw.raw_fields


def test_latest_context_end_is_used_without_declared_period(tmp_path):
    document = TEN_Q.replace(
        '<dei:DocumentPeriodEndDate contextRef="Q2">2020-06-30</dei:DocumentPeriodEndDate>', ""
    )
    path = tmp_path / "acme.xml"
    path.write_text(document, encoding="utf-8")

    raw = parse_instance_document(path, cik=12345, year=2020, quarter=3)

    assert raw.raw_fields["Assets"] == 5000000


def test_unreadable_document_is_a_format_failure(tmp_path):
    path = tmp_path / "broken.xml"
    path.write_text("<xbrl><unclosed></xbrl>", encoding="utf-8")

    with pytest.raises(FormatFailure):
        parse_instance_document(path, cik=1, year=2020, quarter=1)


def test_missing_document_is_a_format_failure(tmp_path):
    with pytest.raises(FormatFailure):
        parse_instance_document(tmp_path / "missing.xml", cik=1, year=2020, quarter=1)


def test_document_without_contexts_is_a_format_failure(tmp_path):
    path = tmp_path / "empty.xml"
    path.write_text('<xbrli:xbrl xmlns:xbrli="http://www.xbrl.org/2003/instance"/>', encoding="utf-8")

    with pytest.raises(FormatFailure):
        parse_instance_document(path, cik=1, year=2020, quarter=1)
