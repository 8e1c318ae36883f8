"""Tests for detecting drift between a GitHub issue and its Jira mirror."""

from datetime import datetime, timezone

import pytest

from gh2jira.application.reconcile import build_issue_fields, issue_changed, to_jira_labels
from gh2jira.core.domain.entities import SourceIssue, TargetIssue
from gh2jira.core.domain.value_objects import FieldName, Num, Str, StrList


@pytest.fixture
def source():
    return SourceIssue(
        id=1001,
        number=1,
        title="Crash on start",
        body="Steps to reproduce",
        state="open",
        reporter="bilbo",
        labels=("bug", "good first issue"),
    )


@pytest.fixture
def target():
    return TargetIssue(
        key="PROJ-1",
        summary="Crash on start",
        description="Steps to reproduce",
        custom_fields={
            FieldName.GITHUB_ID: Num(1001.0),
            FieldName.GITHUB_STATUS: Str("open"),
            FieldName.GITHUB_REPORTER: Str("bilbo"),
            FieldName.GITHUB_LABELS: StrList(("bug", "good-first-issue")),
        },
    )


class TestIssueChanged:
    """Tests for issue_changed."""

    def test_in_sync(self, source, target):
        assert issue_changed(source, target) is False

    def test_title_changed(self, source, target):
        target.summary = "Old title"
        assert issue_changed(source, target) is True

    def test_body_changed(self, source, target):
        target.description = "Old body"
        assert issue_changed(source, target) is True

    def test_empty_bodies_agree(self, target):
        source = SourceIssue(
            id=1001, number=1, title="Crash on start", body="",
            state="open", reporter="bilbo", labels=("bug",),
        )
        target.description = ""
        assert issue_changed(source, target) is False

    def test_state_changed(self, source, target):
        target.custom_fields[FieldName.GITHUB_STATUS] = Str("closed")
        assert issue_changed(source, target) is True

    def test_reporter_changed(self, source, target):
        target.custom_fields[FieldName.GITHUB_REPORTER] = Str("frodo")
        assert issue_changed(source, target) is True

    @pytest.mark.parametrize("field", [FieldName.GITHUB_STATUS, FieldName.GITHUB_REPORTER])
    def test_missing_text_field_forces_update(self, source, target, field):
        del target.custom_fields[field]
        assert issue_changed(source, target) is True

    def test_wrongly_typed_text_field_forces_update(self, source, target):
        target.custom_fields[FieldName.GITHUB_STATUS] = Num(1)
        assert issue_changed(source, target) is True


class TestLabelComparison:
    """Labels only count when a GitHub label is missing from Jira."""

    def test_label_added_on_github(self, source, target):
        target.custom_fields[FieldName.GITHUB_LABELS] = StrList(("bug",))
        assert issue_changed(source, target) is True

    def test_extra_jira_label_is_ignored(self, source, target):
        target.custom_fields[FieldName.GITHUB_LABELS] = StrList(
            ("bug", "good-first-issue", "triaged")
        )
        assert issue_changed(source, target) is False

    def test_label_order_is_ignored(self, source, target):
        target.custom_fields[FieldName.GITHUB_LABELS] = StrList(("good-first-issue", "bug"))
        assert issue_changed(source, target) is False

    def test_missing_labels_field(self, source, target):
        del target.custom_fields[FieldName.GITHUB_LABELS]
        assert issue_changed(source, target) is True

    def test_no_github_labels_never_differs(self, target):
        source = SourceIssue(
            id=1001, number=1, title="Crash on start", body="Steps to reproduce",
            state="open", reporter="bilbo",
        )
        del target.custom_fields[FieldName.GITHUB_LABELS]
        assert issue_changed(source, target) is False

    def test_spaces_become_hyphens(self):
        assert to_jira_labels(["good first issue", "bug"]) == ["good-first-issue", "bug"]


class TestBuildIssueFields:
    """Tests for build_issue_fields."""

    @pytest.fixture
    def now(self):
        return datetime(2019, 4, 17, 16, 27, tzinfo=timezone.utc)

    def test_create_fields(self, source, now):
        draft = build_issue_fields(source, now=now, issue_type="Task")

        assert draft.summary == "Crash on start"
        assert draft.description == "Steps to reproduce"
        assert draft.issue_type == "Task"
        assert draft.custom_fields == {
            FieldName.GITHUB_ID: 1001,
            FieldName.GITHUB_NUMBER: 1,
            FieldName.GITHUB_STATUS: "open",
            FieldName.GITHUB_REPORTER: "bilbo",
            FieldName.GITHUB_LABELS: ["bug", "good-first-issue"],
            FieldName.LAST_SYNC: "2019-04-17T16:27:00.0+0000",
        }

    def test_update_fields_leave_identity_alone(self, source, now):
        draft = build_issue_fields(source, now=now, issue_type="Task", include_identity=False)

        assert FieldName.GITHUB_ID not in draft.custom_fields
        assert FieldName.GITHUB_NUMBER not in draft.custom_fields
        assert draft.custom_fields[FieldName.GITHUB_STATUS] == "open"

    def test_written_fields_read_back_as_unchanged(self, source, now):
        draft = build_issue_fields(source, now=now, issue_type="Task")
        mirror = TargetIssue(
            key="PROJ-1",
            summary=draft.summary,
            description=draft.description,
            custom_fields={
                FieldName.GITHUB_ID: Num(float(draft.custom_fields[FieldName.GITHUB_ID])),
                FieldName.GITHUB_STATUS: Str(draft.custom_fields[FieldName.GITHUB_STATUS]),
                FieldName.GITHUB_REPORTER: Str(draft.custom_fields[FieldName.GITHUB_REPORTER]),
                FieldName.GITHUB_LABELS: StrList(tuple(draft.custom_fields[FieldName.GITHUB_LABELS])),
            },
        )

        assert issue_changed(source, mirror) is False
