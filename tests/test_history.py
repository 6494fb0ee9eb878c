import pytest
from pydantic import ValidationError

from api_explorer.form.model import FormState
from api_explorer.history import HistoryEntry, HistoryLog
from api_explorer.parser.base import ApiEndpoint, Param

ENDPOINT = ApiEndpoint(
    method="GET",
    path="/pets/{petId}",
    summary="Info for a specific pet",
    parameters=[Param(name="petId", location="path", required=True, param_type="integer")],
)


def _entry(log: HistoryLog, pet_id: int = 1) -> HistoryEntry:
    return log.create_entry(
        ENDPOINT,
        FormState(query={"petId": pet_id}),
        response={"id": pet_id},
        status=200,
        duration_ms=12,
    )


class TestHistoryLog:
    def test_empty(self):
        log = HistoryLog()
        assert len(log) == 0
        assert log.next_id == 1

    def test_record_prepends(self):
        log = HistoryLog()
        log = log.record(_entry(log, 1))
        log = log.record(_entry(log, 2))
        assert [e.id for e in log] == [2, 1]
        assert log.entries[0].form_data.query == {"petId": 2}

    def test_record_returns_new_log(self):
        log = HistoryLog()
        new_log = log.record(_entry(log))
        assert len(log) == 0
        assert len(new_log) == 1

    def test_record_rejects_stale_id(self):
        log = HistoryLog()
        entry = _entry(log)
        log = log.record(entry)
        with pytest.raises(ValueError):
            log.record(entry)

    def test_snapshot_is_detached_from_form(self):
        body = {"tags": ["a"]}
        form = FormState(body=body)
        entry = HistoryLog().create_entry(ENDPOINT, form)
        form.body["tags"].append("b")
        assert entry.form_data.body == {"tags": ["a"]}

    def test_replay_round_trip(self):
        log = HistoryLog()
        form = FormState(query={"petId": 5}, body={"note": ""})
        log = log.record(log.create_entry(ENDPOINT, form, status=200))
        endpoint, replayed = log.replay(log.entries[0])
        assert endpoint == ENDPOINT
        assert replayed == form

    def test_get(self):
        log = HistoryLog()
        log = log.record(_entry(log))
        assert log.get(1).status == 200
        assert log.get(99) is None

    def test_entries_are_frozen(self):
        entry = _entry(HistoryLog())
        with pytest.raises(ValidationError):
            entry.status = 500

    def test_json_round_trip(self):
        log = HistoryLog()
        log = log.record(_entry(log, 1))
        log = log.record(_entry(log, 2))
        restored = HistoryLog.from_json(log.to_json())
        assert restored == log
        assert restored.entries[0].endpoint.key == "GET /pets/{petId}"
