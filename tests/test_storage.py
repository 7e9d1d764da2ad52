"""Tests for storage.py – JSON output per campus and term."""
import json

import pytest

from cagr_scraper.errors import PageFetchError
from cagr_scraper.models import Campus, Class, Course, TimeSlot, Weekday
from cagr_scraper.orchestrator import SessionOutcome
from cagr_scraper.storage import output_path, persist_outcomes, write_classes


def _class(class_id: str = "04208A") -> Class:
    return Class(
        id=class_id,
        course=Course(id="INE5410", title="Programação Concorrente", credits=4),
        labels=["Turma especial"],
        capacity=40,
        enrolled=38,
        times=[TimeSlot(weekday=Weekday.MON, time="08:20", credits=2, place="CTC-CTC107")],
        professors=["Ana Souza"],
    )


class TestWriteClasses:
    def test_writes_json(self, tmp_path):
        outcome = SessionOutcome(Campus.FLO, "20241", classes=[_class()])
        path = write_classes(outcome, tmp_path / "out")

        assert path == tmp_path / "out" / "FLO-20241.json"
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data == [
            {
                "id": "04208A",
                "course": {"id": "INE5410", "title": "Programação Concorrente", "credits": 4},
                "labels": ["Turma especial"],
                "capacity": 40,
                "enrolled": 38,
                "waiting": 0,
                "times": [
                    {"weekday": "Mon", "time": "08:20:00", "credits": 2, "place": "CTC-CTC107"}
                ],
                "professors": ["Ana Souza"],
            }
        ]

    def test_empty_list_writes_nothing(self, tmp_path):
        outcome = SessionOutcome(Campus.JOI, "20241")
        assert write_classes(outcome, tmp_path) is None
        assert not output_path(tmp_path, outcome).exists()

    def test_failed_outcome_rejected(self, tmp_path):
        outcome = SessionOutcome(Campus.JOI, "20241", error=PageFetchError("boom", 1))
        with pytest.raises(ValueError):
            write_classes(outcome, tmp_path)


class TestPersistOutcomes:
    def test_only_successful_non_empty(self, tmp_path):
        outcomes = [
            SessionOutcome(Campus.FLO, "20241", classes=[_class(), _class("04209")]),
            SessionOutcome(Campus.JOI, "20241"),
            SessionOutcome(Campus.ARA, "20241", error=PageFetchError("boom", 1)),
            SessionOutcome(Campus.BLN, "20232", classes=[_class()]),
        ]
        written = persist_outcomes(outcomes, tmp_path)

        assert sorted(path.name for path in written) == ["BLN-20232.json", "FLO-20241.json"]
        assert len(json.loads((tmp_path / "FLO-20241.json").read_text(encoding="utf-8"))) == 2


class TestOutputPath:
    @pytest.mark.parametrize("term", ["../20241", "2024/1", "..\\20241"])
    def test_term_with_separator_rejected(self, tmp_path, term):
        outcome = SessionOutcome(Campus.FLO, term, classes=[_class()])
        with pytest.raises(ValueError):
            write_classes(outcome, tmp_path / "out")
        assert not (tmp_path / "out").exists()

    def test_dots_stay_inside_output_dir(self, tmp_path):
        outcome = SessionOutcome(Campus.FLO, "..", classes=[_class()])
        assert output_path(tmp_path, outcome).parent == tmp_path
