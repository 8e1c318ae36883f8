"""Tests for matching GitHub issues to their Jira mirrors."""

import pytest

from gh2jira.application.reconcile import IssuePair, compare_issues
from gh2jira.application.reconcile.issues import match_issue
from gh2jira.core.domain.entities import SourceIssue, TargetIssue
from gh2jira.core.domain.value_objects import FieldName, Num, Str, StrList


def make_target(key: str, github_id=None) -> TargetIssue:
    custom_fields = {}
    if github_id is not None:
        custom_fields[FieldName.GITHUB_ID] = github_id
    return TargetIssue(key=key, custom_fields=custom_fields)


class TestCompareIssues:
    """Tests for compare_issues."""

    @pytest.fixture
    def issues(self):
        return [
            SourceIssue(id=1001, number=1, title="First"),
            SourceIssue(id=1002, number=2, title="Second"),
        ]

    def test_new_and_existing_issues(self, issues):
        target = make_target("PROJ-7", Num(1001.0))

        result = compare_issues(issues, [target])

        assert result.to_create == [issues[1]]
        assert result.to_update == [IssuePair(source=issues[0], target=target)]

    def test_unrelated_targets_match_nothing(self, issues):
        result = compare_issues(issues, [make_target("PROJ-9", Num(42.0))])

        assert result.to_create == issues
        assert result.to_update == []

    def test_no_source_issues(self):
        result = compare_issues([], [make_target("PROJ-1", Num(1.0))])

        assert result.to_create == []
        assert result.to_update == []

    def test_preserves_source_order(self):
        issues = [SourceIssue(id=n, number=n, title=str(n)) for n in (5, 3, 4)]
        targets = [make_target(f"PROJ-{n}", Num(float(n))) for n in (3, 4, 5)]

        result = compare_issues(issues, targets)

        assert [pair.source.id for pair in result.to_update] == [5, 3, 4]
        assert [pair.target.key for pair in result.to_update] == ["PROJ-5", "PROJ-3", "PROJ-4"]


class TestMatchIssue:
    """Tests for match_issue."""

    @pytest.fixture
    def source(self):
        return SourceIssue(id=1001, number=1, title="First")

    @pytest.mark.parametrize("value", [Num(1001.0), Num(1001), Str("1001")])
    def test_numeric_encodings_match(self, source, value):
        target = make_target("PROJ-1", value)
        assert match_issue(source, [target]) is target

    @pytest.mark.parametrize("value", [None, Str("abc"), Num(1001.5), StrList(("1001",))])
    def test_unusable_ids_never_match(self, source, value):
        assert match_issue(source, [make_target("PROJ-1", value)]) is None

    def test_skips_broken_targets_and_keeps_looking(self, source):
        good = make_target("PROJ-2", Num(1001.0))

        assert match_issue(source, [make_target("PROJ-1", Str("abc")), good]) is good

    def test_first_match_wins(self, source):
        first = make_target("PROJ-1", Num(1001.0))
        second = make_target("PROJ-2", Num(1001.0))

        assert match_issue(source, [first, second]) is first
