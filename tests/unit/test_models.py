from ipintel.common.models import (
    AggregatedIntelligence,
    BatchItemResult,
    Confidence,
    Location,
    Network,
    NormalizedGeoRecord,
    RiskAssessment,
    ThreatSignals,
)


def test_record_to_dict_uses_camel_case_and_keeps_absent_as_none():
    record = NormalizedGeoRecord(
        source="ipinfo",
        status="success",
        ip="1.1.1.1",
        location=Location(country_code="AU", postal_code="4000", lat=0.0),
        network=Network(asn_name="CLOUDFLARENET"),
        threat_signals=ThreatSignals(is_anycast=False),
    )

    payload = record.to_dict()

    assert payload["location"]["countryCode"] == "AU"
    assert payload["location"]["postalCode"] == "4000"
    assert payload["location"]["lat"] == 0.0
    assert payload["location"]["city"] is None
    assert payload["network"]["asnName"] == "CLOUDFLARENET"
    assert payload["threatSignals"] == {"isProxyOrVpn": None, "isHosting": None, "isMobile": None, "isAnycast": False}
    assert payload["message"] is None


def test_failure_record_has_message_and_empty_blocks():
    record = NormalizedGeoRecord.failure("ipwho", "Invalid IP address")

    assert not record.ok
    assert record.to_dict()["status"] == "failure"
    assert record.location == Location()


def test_aggregated_intelligence_to_dict():
    merged = AggregatedIntelligence(
        ip="1.1.1.1",
        location=Location(city="Brisbane"),
        network=Network(),
        threat_signals=ThreatSignals(),
        confidence=Confidence(sources_queried=3, sources_responded=2),
        sources=("ip-api", "ipinfo"),
    )

    payload = merged.to_dict()

    assert payload["confidence"] == {"sourcesQueried": 3, "sourcesResponded": 2}
    assert payload["sources"] == ["ip-api", "ipinfo"]
    assert payload["location"]["city"] == "Brisbane"


def test_risk_and_batch_item_serialization():
    assert RiskAssessment(score=10, level="low", factors=("no_reverse_dns",)).to_dict() == {
        "score": 10,
        "level": "low",
        "factors": ["no_reverse_dns"],
    }
    assert BatchItemResult(ip="1.1.1.1", error="Request failed").to_dict() == {"ip": "1.1.1.1", "error": "Request failed"}
