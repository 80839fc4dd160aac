from __future__ import annotations

from tests.support.relay_helpers import valid_body

from pr_relay.core.validator import validate


def test_valid_body_is_normalized() -> None:
    result = validate(valid_body())
    assert result.ok
    assert result.errors == []
    assert result.request is not None
    assert result.request.pr_body == ""
    assert result.request.file_changes == {"a.txt": "hi"}


def test_missing_fields_are_all_reported() -> None:
    result = validate({"target_repo": "octocat/hello-world"})
    assert not result.ok
    assert set(result.errors) == {
        '"branch_name" is required',
        '"file_changes" is required',
        '"commit_message" is required',
        '"pr_title" is required',
    }


def test_target_repo_shape_is_enforced() -> None:
    result = validate(valid_body(target_repo="not-a-repo"))
    assert result.errors == ['target_repo must be in format "owner/repo"']

    for bad in ("owner/repo/extra", "/repo", "owner/", "own er/repo"):
        assert not validate(valid_body(target_repo=bad)).ok


def test_empty_file_changes_is_rejected() -> None:
    result = validate(valid_body(file_changes={}))
    assert result.errors == ['"file_changes" must have at least 1 key']


def test_file_change_values_must_be_strings() -> None:
    result = validate(valid_body(file_changes={"a.txt": 1}))
    assert result.errors == ['"file_changes.a.txt" must be a string']


def test_file_changes_must_be_a_mapping() -> None:
    result = validate(valid_body(file_changes=["a.txt"]))
    assert result.errors == ['"file_changes" must be of type object']


def test_length_bounds() -> None:
    result = validate(
        valid_body(
            branch_name="b" * 251,
            commit_message="",
            pr_title="t" * 250,
            pr_body="x" * 65537,
        )
    )
    assert set(result.errors) == {
        '"branch_name" length must be less than or equal to 250 characters long',
        '"commit_message" is not allowed to be empty',
        '"pr_body" length must be less than or equal to 65536 characters long',
    }


def test_numbers_are_not_coerced_to_strings() -> None:
    result = validate(valid_body(pr_title=42))
    assert result.errors == ['"pr_title" must be a string']


def test_unknown_keys_are_rejected() -> None:
    result = validate(valid_body(reviewers=["octocat"]))
    assert result.errors == ['"reviewers" is not allowed']


def test_non_object_body_is_rejected() -> None:
    assert validate(None).errors == ['"value" must be of type object']
    assert validate([valid_body()]).errors == ['"value" must be of type object']


def test_lengths_count_utf16_units() -> None:
    at_limit = validate(valid_body(pr_title="\U0001f600" * 125))
    assert at_limit.ok

    over_limit = validate(valid_body(pr_title="\U0001f600" * 126))
    assert over_limit.errors == [
        '"pr_title" length must be less than or equal to 250 characters long'
    ]
