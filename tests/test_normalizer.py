"""Tests for stored-record normalization."""

from datetime import datetime, timezone

import pytest

from resource_hub.models.resources import (
    ResourceType,
    format_manual_last_update,
    parse_manual_last_update,
)
from resource_hub.repositories.base import RawRecord
from resource_hub.services.normalizer import (
    DEFAULT_CATEGORY,
    DEFAULT_FULL_URL,
    DEFAULT_NAME,
    DEFAULT_TOPIC,
    EPOCH,
    DiagnosticsCollector,
    normalize_record,
)


def test_well_formed_record_has_no_diagnostics(make_record):
    result = normalize_record(RawRecord(id="r1", data=make_record()))

    assert result.diagnostics == []
    resource = result.resource
    assert resource.id == "r1"
    assert resource.name == "Advanced React Patterns"
    assert resource.type == ResourceType.COURSE
    assert resource.tags == ["React", "Hooks"]
    assert resource.relativeUrl == ""
    assert resource.manualLastUpdate is None


def test_missing_type_defaults_silently(make_record):
    data = make_record()
    del data["type"]

    result = normalize_record(RawRecord(id="r1", data=data))

    assert result.resource.type == ResourceType.ARTICLE
    assert result.diagnostics == []


def test_null_type_defaults_silently(make_record):
    result = normalize_record(RawRecord(id="r1", data=make_record(type=None)))

    assert result.resource.type == ResourceType.ARTICLE
    assert result.diagnostics == []


def test_unknown_type_defaults_with_diagnostic(make_record):
    result = normalize_record(RawRecord(id="r1", data=make_record(type="Bogus")))

    assert result.resource.type == ResourceType.ARTICLE
    assert [d.field for d in result.diagnostics] == ["type"]
    assert "Bogus" in result.diagnostics[0].message
    assert result.diagnostics[0].record_id == "r1"


def test_empty_record_is_fully_defaulted():
    result = normalize_record(RawRecord(id="legacy", data={}))

    resource = result.resource
    assert resource.name == DEFAULT_NAME
    assert resource.fullUrl == DEFAULT_FULL_URL
    assert resource.relativeUrl == ""
    assert resource.tags == []
    assert resource.duration == ""
    assert resource.type == ResourceType.ARTICLE
    assert resource.category == DEFAULT_CATEGORY
    assert resource.topic == DEFAULT_TOPIC
    assert resource.updatedDate == EPOCH
    assert resource.manualLastUpdate is None
    # Absence of type, category, topic or updatedDate is not an anomaly
    assert sorted(d.field for d in result.diagnostics) == ["fullUrl", "name"]


def test_non_mapping_data_does_not_raise():
    result = normalize_record(RawRecord(id="broken", data=None))

    assert result.resource.name == DEFAULT_NAME


def test_wrong_shape_updated_date_defaults_to_epoch_with_diagnostic(make_record):
    result = normalize_record(RawRecord(id="r1", data=make_record(updatedDate="yesterday")))

    assert result.resource.updatedDate == EPOCH
    assert [d.field for d in result.diagnostics] == ["updatedDate"]


def test_naive_updated_date_is_treated_as_utc(make_record):
    result = normalize_record(
        RawRecord(id="r1", data=make_record(updatedDate=datetime(2024, 1, 2, 3, 4)))
    )

    assert result.resource.updatedDate == datetime(2024, 1, 2, 3, 4, tzinfo=timezone.utc)


def test_tags_that_are_not_a_sequence_become_empty(make_record):
    result = normalize_record(RawRecord(id="r1", data=make_record(tags="react, hooks")))

    assert result.resource.tags == []
    assert result.diagnostics == []


def test_non_string_tags_are_dropped_with_diagnostic(make_record):
    result = normalize_record(RawRecord(id="r1", data=make_record(tags=["React", 3, "", None])))

    assert result.resource.tags == ["React"]
    assert [d.field for d in result.diagnostics] == ["tags"]


def test_empty_category_and_topic_are_defaulted(make_record):
    result = normalize_record(RawRecord(id="r1", data=make_record(category="", topic=None)))

    assert result.resource.category == DEFAULT_CATEGORY
    assert result.resource.topic == DEFAULT_TOPIC
    assert result.diagnostics == []


@pytest.mark.parametrize("value", ["01/2024", "12/1999", "07/0999"])
def test_manual_last_update_round_trip(value):
    month, year = parse_manual_last_update(value)

    assert format_manual_last_update(month, year) == value


@pytest.mark.parametrize("value", ["13/2024", "1/2024", "00/2024", "2024/01", "01/24"])
def test_invalid_manual_last_update_string_is_absent(make_record, value):
    result = normalize_record(
        RawRecord(id="r1", data=make_record(manualLastUpdateString=value))
    )

    assert result.resource.manualLastUpdate is None
    assert result.resource.manualLastUpdateMonth is None
    assert result.resource.manualLastUpdateYear is None


def test_manual_last_update_synthesized_from_parts(make_record):
    result = normalize_record(
        RawRecord(
            id="r1",
            data=make_record(manualLastUpdateMonth=3, manualLastUpdateYear=2023),
        )
    )

    assert result.resource.manualLastUpdate == "03/2023"
    assert result.resource.manualLastUpdateMonth == 3
    assert result.resource.manualLastUpdateYear == 2023


def test_manual_last_update_accepts_whole_number_doubles(make_record):
    result = normalize_record(
        RawRecord(
            id="r1",
            data=make_record(manualLastUpdateMonth=1.0, manualLastUpdateYear=2024),
        )
    )

    assert result.resource.manualLastUpdate == "01/2024"
    assert result.resource.manualLastUpdateMonth == 1
    assert result.resource.manualLastUpdateYear == 2024


@pytest.mark.parametrize("month, year", [(1.5, 2024), (True, 2024), ("01", 2024), (1, 2024.2)])
def test_manual_last_update_rejects_non_whole_parts(month, year):
    assert format_manual_last_update(month, year) is None


def test_manual_last_update_string_preferred_over_parts(make_record):
    result = normalize_record(
        RawRecord(
            id="r1",
            data=make_record(
                manualLastUpdateString="11/2022",
                manualLastUpdateMonth=3,
                manualLastUpdateYear=2023,
            ),
        )
    )

    assert result.resource.manualLastUpdate == "11/2022"


def test_manual_last_update_needs_both_parts(make_record):
    result = normalize_record(RawRecord(id="r1", data=make_record(manualLastUpdateMonth=3)))

    assert result.resource.manualLastUpdate is None


def test_shared_collector_accumulates_across_records(make_record):
    collector = DiagnosticsCollector()

    normalize_record(RawRecord(id="a", data=make_record(type="Bogus")), collector)
    normalize_record(RawRecord(id="b", data=make_record(name="")), collector)
    normalize_record(RawRecord(id="c", data=make_record()), collector)

    assert len(collector) == 2
    assert [(d.record_id, d.field) for d in collector] == [("a", "type"), ("b", "name")]
