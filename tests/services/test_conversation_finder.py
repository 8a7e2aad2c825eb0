"""Tests for ConversationFinder."""

from datetime import datetime, timedelta

import pytest

from chatdesk.db.database_models import ConversationStatus, UserRole
from chatdesk.services import AssigneeType, ConversationFinder, parse_assignee_type


@pytest.fixture
def admin_scenario(seed, make_conversation):
    """Five open conversations: 2 for the admin, 1 unassigned, 2 for others, plus one resolved."""
    admin = seed.admin
    open_conversations = [
        make_conversation(seed, assignee=admin),
        make_conversation(seed, assignee=admin),
        make_conversation(seed),
        make_conversation(seed, assignee=seed.agents[0]),
        make_conversation(seed, assignee=seed.agents[1]),
    ]
    make_conversation(seed, assignee=admin, status=ConversationStatus.RESOLVED)
    return seed, open_conversations


class TestParseAssigneeType:
    """SUT: parse_assignee_type"""

    @pytest.mark.parametrize("raw,expected", [
        (0, AssigneeType.ME),
        (1, AssigneeType.UNASSIGNED),
        (2, AssigneeType.ALL),
        ("1", AssigneeType.UNASSIGNED),
        ("2", AssigneeType.ALL),
        (None, AssigneeType.ME),
        ("", AssigneeType.ME),
        ("mine", AssigneeType.ME),
        ("1.0", AssigneeType.UNASSIGNED),
        ("2abc", AssigneeType.ALL),
        (" 1", AssigneeType.UNASSIGNED),
        ("-2", AssigneeType.ME),
        ("abc2", AssigneeType.ME),
        (AssigneeType.ALL, AssigneeType.ALL),
        (-1, AssigneeType.ME),
        (99, AssigneeType.ME),
        (10 ** 12, AssigneeType.ME),
    ])
    def test_total(self, raw, expected):
        assert parse_assignee_type(raw) is expected


class TestConversationFinder:
    """Tests for ConversationFinder."""

    class TestPerform:
        """SUT: ConversationFinder.perform"""

        def test_administrator_defaults(self, db, admin_scenario):
            """No filters: the caller's open conversations and counts 2/1/5."""
            seed, open_conversations = admin_scenario
            result = ConversationFinder(db, seed.admin).perform()

            assert sorted(c.id for c in result.conversations) == sorted(c.id for c in open_conversations[:2])
            assert (result.counts.mine, result.counts.unassigned, result.counts.all) == (2, 1, 5)

        @pytest.mark.parametrize("assignee_type_id,expected", [(0, 2), (1, 1), (2, 5), ("junk", 2)])
        def test_counts_independent_of_assignee_type(self, db, admin_scenario, assignee_type_id, expected):
            seed, _ = admin_scenario
            result = ConversationFinder(db, seed.admin, assignee_type_id=assignee_type_id).perform()
            assert len(result.conversations) == expected
            assert (result.counts.mine, result.counts.unassigned, result.counts.all) == (2, 1, 5)

        def test_counts_invariant(self, db, admin_scenario):
            counts = ConversationFinder(db, admin_scenario[0].admin).perform().counts
            assert counts.mine + counts.unassigned <= counts.all

        def test_status_filter(self, db, admin_scenario):
            result = ConversationFinder(
                db, admin_scenario[0].admin, status="resolved", assignee_type_id=AssigneeType.ALL
            ).perform()
            assert len(result.conversations) == 1
            assert result.counts.all == 1
            assert result.conversations[0].status == ConversationStatus.RESOLVED

        def test_unknown_status(self, db, seed):
            with pytest.raises(KeyError):
                ConversationFinder(db, seed.admin, status="archived")

        def test_ordered_by_last_activity(self, db, seed, make_conversation):
            now = datetime.utcnow()
            old = make_conversation(seed, last_activity_at=now - timedelta(hours=1))
            new = make_conversation(seed, last_activity_at=now)
            result = ConversationFinder(db, seed.admin, assignee_type_id=AssigneeType.ALL).perform()
            assert [c.id for c in result.conversations] == [new.id, old.id]

        def test_pagination(self, db, seed, make_conversation):
            now = datetime.utcnow()
            created = [
                make_conversation(seed, last_activity_at=now - timedelta(minutes=n)) for n in range(5)
            ]
            finder = ConversationFinder(db, seed.admin, assignee_type_id=2, page=2, per_page=2)
            result = finder.perform()
            assert [c.id for c in result.conversations] == [created[2].id, created[3].id]
            assert result.counts.all == 5

    class TestScope:
        """SUT: ConversationFinder inbox scoping"""

        def test_agent_sees_member_inboxes_only(self, db, seed, make_inbox, make_user, make_conversation):
            agent = seed.agents[0]
            other_inbox = make_inbox(seed.account.id, name="Other", agents=[make_user(seed.account.id, "Elsewhere")])
            visible = make_conversation(seed)
            make_conversation(seed, inbox=other_inbox)

            result = ConversationFinder(db, agent, assignee_type_id=AssigneeType.ALL).perform()
            assert [c.id for c in result.conversations] == [visible.id]
            assert result.counts.all == 1

        def test_administrator_sees_every_inbox(self, db, seed, make_inbox, make_conversation):
            other_inbox = make_inbox(seed.account.id, name="Other")
            make_conversation(seed)
            make_conversation(seed, inbox=other_inbox)
            result = ConversationFinder(db, seed.admin, assignee_type_id=AssigneeType.ALL).perform()
            assert result.counts.all == 2

        def test_inbox_filter(self, db, seed, make_inbox, make_conversation):
            other_inbox = make_inbox(seed.account.id, name="Other")
            make_conversation(seed)
            in_other = make_conversation(seed, inbox=other_inbox)
            result = ConversationFinder(
                db, seed.admin, inbox_id=other_inbox.id, assignee_type_id=AssigneeType.ALL
            ).perform()
            assert [c.id for c in result.conversations] == [in_other.id]

        def test_inbox_of_other_account(self, db, seed, make_inbox, make_conversation):
            foreign = make_inbox(seed.account.id + 100, name="Foreign")
            make_conversation(seed)
            result = ConversationFinder(db, seed.admin, inbox_id=foreign.id).perform()
            assert result.conversations == []
            assert result.counts.all == 0

        def test_unknown_role_sees_nothing(self, db, seed, make_user, make_conversation):
            make_conversation(seed)
            viewer = make_user(seed.account.id, "Viewer")
            viewer.role = "viewer"
            result = ConversationFinder(db, viewer, assignee_type_id=AssigneeType.ALL).perform()
            assert result.counts.all == 0

        def test_other_accounts_excluded(self, db, seed, make_user, make_inbox):
            outsider_admin = make_user(seed.account.id + 100, "Other Admin", UserRole.ADMINISTRATOR)
            result = ConversationFinder(db, outsider_admin, assignee_type_id=AssigneeType.ALL).perform()
            assert result.counts.all == 0
