"""
Test: clamping, totals, session finalization and student aggregates.
"""
from datetime import datetime, timezone

import pytest

from quran_tracker.records.models import SessionDraft, StudentRecord
from quran_tracker.rubrics.models import ReviewLevel
from quran_tracker.scoring import (
    ScoringSession,
    SessionState,
    append_session,
    category_subtotal,
    clamp_score,
    compute_session_total,
    finalize_session,
    parse_points,
)


class TestParsePoints:
    @pytest.mark.parametrize("raw, expected", [
        (7, 7),
        (-3, -3),
        (7.9, 7),
        (-2.5, -2),
        ("12", 12),
        ("  5 ", 5),
        ("+4", 4),
        ("-3", -3),
        ("12abc", 12),
        ("7.9", 7),
        ("", 0),
        ("abc", 0),
        (None, 0),
        (float("nan"), 0),
        (float("inf"), 0),
        (True, 0),
        ([3], 0),
    ])
    def test_values(self, raw, expected):
        assert parse_points(raw) == expected


class TestClampScore:
    def test_value_above_max_is_clamped(self, basic_rubric):
        # pronunciation[0] is worth 8 points
        assert clamp_score(basic_rubric, "pronunciation", 0, 15) == 8

    def test_negative_value_is_zero(self, basic_rubric):
        assert clamp_score(basic_rubric, "pronunciation", 0, -3) == 0

    def test_non_numeric_is_zero(self, basic_rubric):
        assert clamp_score(basic_rubric, "fluency", 2, "five") == 0

    def test_in_range_kept(self, basic_rubric):
        assert clamp_score(basic_rubric, "pronunciation", 1, "9") == 9

    def test_bounds_are_inclusive(self, basic_rubric):
        assert clamp_score(basic_rubric, "mistakes", 1, 7) == 7
        assert clamp_score(basic_rubric, "mistakes", 1, 0) == 0

    @pytest.mark.parametrize("level", ["basic", "advanced"])
    @pytest.mark.parametrize("raw", [-100, -1, 0, 1, 3, 6, 10, 11, 1000, "x", "4.5", None])
    def test_always_within_sub_criterion_range(self, level, raw):
        from quran_tracker.scoring import select_rubric

        rubric = select_rubric(level)
        for key, category in rubric.categories.items():
            for index, sub in enumerate(category.subcriteria):
                assert 0 <= clamp_score(rubric, key, index, raw) <= sub.points

    def test_unknown_category_raises(self, basic_rubric):
        with pytest.raises(KeyError):
            clamp_score(basic_rubric, "tajweed", 0, 3)

    def test_unknown_index_raises(self, basic_rubric):
        with pytest.raises(IndexError):
            clamp_score(basic_rubric, "pronunciation", 4, 3)


class TestComputeSessionTotal:
    def test_empty_entry_is_zero(self, basic_rubric):
        assert compute_session_total(basic_rubric, {}) == 0

    def test_all_zero_scores(self, basic_rubric):
        entry = {
            key: {i: 0 for i in range(len(c.subcriteria))}
            for key, c in basic_rubric.categories.items()
        }
        assert compute_session_total(basic_rubric, entry) == 0

    def test_pronunciation_maxed_only(self, basic_rubric):
        entry = {"pronunciation": {0: 8, 1: 10, 2: 7, 3: 5}}
        assert compute_session_total(basic_rubric, entry) == 30

    def test_full_marks_is_100(self, advanced_rubric):
        entry = {
            key: {i: sub.points for i, sub in enumerate(c.subcriteria)}
            for key, c in advanced_rubric.categories.items()
        }
        assert compute_session_total(advanced_rubric, entry) == 100

    def test_sparse_entry(self, basic_rubric):
        entry = {"basicRules": {3: 7}, "mistakes": {0: 4}}
        assert compute_session_total(basic_rubric, entry) == 11

    def test_keys_outside_rubric_are_ignored(self, basic_rubric):
        entry = {"pronunciation": {0: 8}, "makhraj": {0: 4}, "fluency": {9: 5}}
        assert compute_session_total(basic_rubric, entry) == 8

    def test_stays_within_bounds_for_oversized_values(self, basic_rubric):
        entry = {
            key: {i: 999 for i in range(len(c.subcriteria))}
            for key, c in basic_rubric.categories.items()
        }
        entry["fluency"][0] = -50
        total = compute_session_total(basic_rubric, entry)
        assert 0 <= total <= 100
        assert total == 92

    def test_does_not_modify_entry(self, basic_rubric):
        entry = {"pronunciation": {0: 8}}
        compute_session_total(basic_rubric, entry)
        assert entry == {"pronunciation": {0: 8}}

    def test_category_subtotal(self, basic_rubric):
        entry = {"fluency": {0: 8, 3: 4}, "mistakes": {1: 2}}
        assert category_subtotal(basic_rubric, entry, "fluency") == 12
        assert category_subtotal(basic_rubric, entry, "pronunciation") == 0


class TestFinalizeSession:
    NOW = datetime(2026, 10, 19, 9, 30, 5, 123000, tzinfo=timezone.utc)

    def test_builds_record(self):
        draft = SessionDraft(date="2026-10-19", surah=" Al-Fatiha ", ayah_range="1-7", notes="Clear")
        record = finalize_session(draft, {"pronunciation": {0: 8, 1: 10}}, "basic", now=self.NOW)

        assert record.date == "2026-10-19"
        assert record.surah == "Al-Fatiha"
        assert record.ayah_range == "1-7"
        assert record.total_score == 18
        assert record.notes == "Clear"
        assert record.review_level is ReviewLevel.BASIC
        assert record.timestamp == "2026-10-19T09:30:05.123Z"

    def test_scores_are_snapshotted(self):
        entry = {"mistakes": {0: 8}}
        record = finalize_session(SessionDraft(), entry, ReviewLevel.ADVANCED, now=self.NOW)
        entry["mistakes"][0] = 1
        entry["fluency"] = {0: 5}
        assert record.scores == {"mistakes": {0: 8}}
        assert record.total_score == 8

    def test_record_is_frozen(self):
        record = finalize_session(SessionDraft(), {}, "basic", now=self.NOW)
        with pytest.raises(AttributeError):
            record.total_score = 100

    def test_record_scores_are_read_only(self):
        record = finalize_session(
            SessionDraft(date="2026-10-19"), {"pronunciation": {0: 8}}, "basic", now=self.NOW
        )
        with pytest.raises(TypeError):
            record.scores["pronunciation"][0] = 99
        with pytest.raises(TypeError):
            record.scores["fluency"] = {0: 5}
        assert record.scores == {"pronunciation": {0: 8}}
        assert record.total_score == 8

    def test_score_snapshot_is_mutable_copy(self):
        record = finalize_session(SessionDraft(), {"pronunciation": {0: 8}}, "basic", now=self.NOW)
        snapshot = record.score_snapshot()
        snapshot["pronunciation"][0] = 1
        assert snapshot == {"pronunciation": {0: 1}}
        assert record.scores["pronunciation"][0] == 8

    def test_record_is_hashable(self):
        record = finalize_session(SessionDraft(), {"fluency": {1: 4}}, "basic", now=self.NOW)
        assert len({record, record}) == 1

    def test_uses_rubric_of_level(self):
        # "makhraj" only exists in the advanced rubric
        entry = {"makhraj": {1: 8}}
        assert finalize_session(SessionDraft(), entry, "basic", now=self.NOW).total_score == 0
        assert finalize_session(SessionDraft(), entry, "advanced", now=self.NOW).total_score == 8

    def test_default_date_is_today(self):
        from datetime import date

        assert SessionDraft().date == date.today().isoformat()


class TestAppendSession:
    def test_empty_student_all_zero_session(self, basic_rubric):
        student = StudentRecord(id=1, name="Aisha")
        session = finalize_session(SessionDraft(), {}, "basic")
        updated = append_session(student, session)
        assert session.total_score == 0
        assert updated.average_score == 0
        assert updated.total_score == 0

    def test_two_sessions_average(self, session_factory):
        student = StudentRecord(id=1, name="Aisha")
        first, second = session_factory(80), session_factory(90)
        updated = append_session(append_session(student, first), second)

        assert updated.total_score == 170
        assert updated.average_score == 85.0
        assert [s.total_score for s in updated.sessions] == [80, 90]

    def test_prior_sessions_untouched(self, session_factory):
        sessions = [session_factory(t, surah=f"S{t}") for t in (55, 70, 64)]
        student = StudentRecord(id=1, name="Aisha")
        for s in sessions:
            student = append_session(student, s)

        before = student.sessions
        updated = append_session(student, session_factory(99))

        assert updated.sessions[:3] == before
        assert all(a is b for a, b in zip(updated.sessions, before))
        assert updated.sessions[-1].total_score == 99

    def test_input_student_not_mutated(self, session_factory):
        student = StudentRecord(id=1, name="Aisha")
        append_session(student, session_factory(50))
        assert student.sessions == ()
        assert student.average_score == 0.0

    def test_average_equals_sum_over_count(self, session_factory):
        student = StudentRecord(id=1, name="Aisha")
        totals = [67, 71, 88, 93, 59, 100, 0]
        for t in totals:
            student = append_session(student, session_factory(t))
        assert student.total_score == sum(totals)
        assert student.average_score == sum(totals) / len(totals)

    def test_aggregates_recomputed_not_accumulated(self, session_factory):
        # a stale stored total must not leak into the new aggregate
        stale = StudentRecord(id=1, name="Aisha", sessions=(session_factory(40),), total_score=999, average_score=3.0)
        updated = append_session(stale, session_factory(60))
        assert updated.total_score == 100
        assert updated.average_score == 50.0


class TestScoringSession:
    def test_walks_states(self):
        session = ScoringSession("basic")
        assert session.state is SessionState.COLLECTING_FIELDS

        session.update_fields(surah="An-Nas", ayah_range="1-6")
        assert session.set_score("pronunciation", 0, "15") == 8
        assert session.state is SessionState.ENTERING_SCORES

        record = session.finalize()
        assert session.state is SessionState.FINALIZED
        assert record.total_score == 8
        assert record.surah == "An-Nas"

    def test_total_and_subtotal(self):
        session = ScoringSession("advanced")
        session.set_score("sifatAridah", 0, 7)
        session.set_score("sifatAridah", 3, "6")
        session.set_score("fluency", 0, -2)
        assert session.subtotal("sifatAridah") == 13
        assert session.score_of("fluency", 0) == 0
        assert session.score_of("fluency", 1) == 0
        assert session.total == 13

    def test_switch_level_drops_scores(self):
        session = ScoringSession("basic")
        session.set_score("pronunciation", 1, 10)
        session.switch_level("advanced")
        assert session.level is ReviewLevel.ADVANCED
        assert session.scores == {}

    def test_switch_to_same_level_keeps_scores(self):
        session = ScoringSession("basic")
        session.set_score("pronunciation", 1, 10)
        session.switch_level("basic")
        assert session.total == 10

    def test_finalized_session_is_closed(self):
        session = ScoringSession()
        session.finalize()
        with pytest.raises(RuntimeError):
            session.set_score("pronunciation", 0, 1)
        with pytest.raises(RuntimeError):
            session.finalize()

    def test_unknown_field(self):
        with pytest.raises(AttributeError):
            ScoringSession().update_fields(reciter="someone")
