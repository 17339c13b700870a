from __future__ import annotations

import pytest

from userdir import create_directory
from userdir.config import DirectoryConfig
from userdir.directory import UserDirectory
from userdir.errors import RecordIndexError
from userdir.models import AddStatus, AuthStatus, RemovalStatus, UserCandidate


def _reject_all(record) -> bool:
    return False


@pytest.fixture()
def directory() -> UserDirectory:
    return UserDirectory()


def test_add_record_without_candidate_uses_defaults(directory: UserDirectory) -> None:
    result = directory.add_record()

    assert result.status is AddStatus.ACCEPTED
    assert len(directory) == 1
    record = directory.users[0]
    assert (record.name, record.email, record.age, record.active) == ("x", "x@x.com", 0, "yes")
    assert directory.current_user is record


def test_add_record_does_not_mutate_candidate(directory: UserDirectory) -> None:
    candidate = {"email": "nameless@example.com"}
    result = directory.add_record(candidate)

    assert candidate == {"email": "nameless@example.com"}
    assert result.record.name == "x"
    assert result.record.email == "nameless@example.com"


def test_add_record_invokes_callback_with_matches_in_order(directory: UserDirectory) -> None:
    first = directory.add_record({"name": "ana", "email": "ana@a", "age": 22}).record
    directory.add_record({"name": "bia"})
    calls = []

    result = directory.add_record(
        UserCandidate(name="ana", email="ana@b", age=30),
        on_complete=lambda status, matches: calls.append((status, matches)),
    )

    assert calls == [("feito", (first, result.record))]
    assert result.matches == (first, result.record)


def test_rejected_add_leaves_directory_untouched() -> None:
    directory = UserDirectory(gate=_reject_all)
    directory.authenticate_or_create("leo", "123")
    before = directory.users
    current = directory.current_user
    calls = []

    result = directory.add_record({"name": "leo"}, on_complete=lambda *args: calls.append(args))

    assert result.status is AddStatus.REJECTED
    assert directory.users == before
    assert directory.current_user is current
    assert calls == []
    assert result.matches == before


def test_authenticate_twice_with_same_name_does_not_duplicate(directory: UserDirectory) -> None:
    created = directory.authenticate_or_create("leo", "123")
    again = directory.authenticate_or_create("leo", "456")

    assert created.status is AuthStatus.CREATED
    assert again.status is AuthStatus.AUTHENTICATED
    assert len(directory.find_by_name("leo")) == 1
    assert len(directory) == 1
    assert directory.current_user is created.record
    assert again.record is created.record


def test_authenticate_defaults_and_regenerates_token(directory: UserDirectory) -> None:
    result = directory.authenticate_or_create("", None)

    assert result.record is not None
    assert result.record.name == "x"
    assert result.record.password == "123"
    assert result.record.email == "x@x.com"
    assert result.token.startswith("token-")
    assert directory.last_token == result.token


def test_authenticate_selects_first_match(directory: UserDirectory) -> None:
    first = directory.add_record({"name": "ana"}).record
    directory.add_record({"name": "ana"})
    directory.add_record({"name": "bia"})

    result = directory.authenticate_or_create("ana", "whatever")

    assert result.record is first
    assert directory.current_user is first
    assert len(directory) == 3


def test_authenticate_with_password_verification() -> None:
    directory = UserDirectory(DirectoryConfig(verify_passwords=True))
    directory.authenticate_or_create("leo", "secret")

    rejected = directory.authenticate_or_create("leo", "wrong")
    assert rejected.status is AuthStatus.REJECTED
    assert rejected.record is None
    assert len(directory) == 1

    accepted = directory.authenticate_or_create("leo", "secret")
    assert accepted.status is AuthStatus.AUTHENTICATED


def test_remove_negative_index_keeps_users(directory: UserDirectory) -> None:
    directory.add_record({"name": "ana"})

    result = directory.remove_by_position(-1)

    assert result.status is RemovalStatus.NOT_REMOVED
    assert result.describe() == "not removed"
    assert len(directory) == 1


def test_remove_in_range_preserves_order(directory: UserDirectory) -> None:
    for name in ("ana", "bia", "caio"):
        directory.add_record({"name": name})

    result = directory.remove_by_position(1)

    assert result.status is RemovalStatus.REMOVED
    assert result.removed is not None and result.removed.name == "bia"
    assert [user.name for user in directory] == ["ana", "caio"]
    assert result.describe() == "not empty"


def test_remove_current_user_clears_reference(directory: UserDirectory) -> None:
    directory.add_record({"name": "ana"})

    result = directory.remove_by_position(0)

    assert directory.current_user is None
    assert result.is_empty
    assert result.describe() == "empty"


def test_remove_from_empty_directory_reports_empty(directory: UserDirectory) -> None:
    result = directory.remove_by_position(0)

    assert result.status is RemovalStatus.NOT_REMOVED
    assert len(directory) == 0
    assert result.describe() == "empty"


def test_strict_removal_raises_for_out_of_range() -> None:
    directory = UserDirectory(DirectoryConfig(strict_removal=True))
    directory.add_record({"name": "ana"})

    with pytest.raises(RecordIndexError):
        directory.remove_by_position(3)
    assert len(directory) == 1


def test_format_report(directory: UserDirectory) -> None:
    assert directory.format_report() == ""

    directory.add_record({"name": "ana", "email": "ana@a", "age": 22})
    assert directory.format_report() == "ana-ana@a-22"

    directory.add_record({"name": "bia", "email": "bia@b", "age": 31})
    directory.authenticate_or_create("leo", "123")
    report = directory.format_report()
    assert report.count("|") == 2
    assert report == "ana-ana@a-22|bia-bia@b-31|leo-x@x.com-0"


def test_format_report_uses_configured_separator() -> None:
    directory = UserDirectory(DirectoryConfig(report_separator=";"))
    directory.add_record({"name": "ana"})
    directory.add_record({"name": "bia"})

    assert directory.format_report() == "ana-x@x.com-0;bia-x@x.com-0"
    assert directory.format_report(separator="|") == "ana-x@x.com-0|bia-x@x.com-0"


def test_create_directory_factory_starts_empty() -> None:
    config = DirectoryConfig(default_name="anon")
    directory = create_directory(config)

    assert directory.config is config
    assert len(directory) == 0
    assert directory.current_user is None
    assert directory.last_token is None
    assert directory.add_record().record.name == "anon"


def test_add_record_accepts_existing_record(directory: UserDirectory) -> None:
    original = directory.add_record({"name": "ana", "email": "ana@a", "age": 22}).record

    result = directory.add_record(original)

    assert result.status is AddStatus.ACCEPTED
    assert result.record is not original
    assert (result.record.name, result.record.email, result.record.age) == ("ana", "ana@a", 22)
    assert result.matches == (original, result.record)
    assert len(directory) == 2


def test_add_record_keeps_explicit_empty_email(directory: UserDirectory) -> None:
    result = directory.add_record({"name": "ana", "email": ""})

    assert result.record.email == ""
    assert directory.format_report() == "ana--0"


def test_remove_out_of_range_on_populated_directory(directory: UserDirectory) -> None:
    directory.add_record({"name": "ana"})

    result = directory.remove_by_position(5)

    assert result.status is RemovalStatus.NOT_REMOVED
    assert result.removed is None
    assert result.describe() == "not empty"
    assert len(directory) == 1
