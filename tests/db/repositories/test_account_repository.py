"""Tests for AccountRepository."""

import pytest

from chatdesk.db import AccountRepository
from chatdesk.db.database_models import AccountDO


@pytest.fixture
def repo(db):
    """Provide an AccountRepository."""
    return AccountRepository(db.conn)


class TestAccountRepository:
    """Tests for AccountRepository."""

    class TestCreate:
        """SUT: AccountRepository.create"""

        def test_assigns_id(self, repo):
            account = repo.create(AccountDO(name="Acme"))
            assert account.id is not None

        def test_fields_persisted(self, repo):
            account = repo.create(AccountDO(name="Acme"))
            result = repo.get(account.id)
            assert result.name == "Acme"
            assert result.conversation_sequence == 0

    class TestGet:
        """SUT: AccountRepository.get"""

        def test_not_found(self, repo):
            assert repo.get(999) is None

    class TestNextDisplayId:
        """SUT: AccountRepository.next_display_id"""

        def test_increments_per_account(self, repo):
            first = repo.create(AccountDO(name="First"))
            second = repo.create(AccountDO(name="Second"))
            assert [repo.next_display_id(first.id) for _ in range(3)] == [1, 2, 3]
            assert repo.next_display_id(second.id) == 1

        def test_persists_sequence(self, repo):
            account = repo.create(AccountDO(name="Acme"))
            repo.next_display_id(account.id)
            repo.next_display_id(account.id)
            assert repo.get(account.id).conversation_sequence == 2
