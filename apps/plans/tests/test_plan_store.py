"""
Plan store tests.

Concurrency is exercised deterministically: a builder wrapper performs a
competing write after the snapshot was read and before the conditional
write, which is exactly the window a concurrent request would hit.
"""

import pytest
from uuid import uuid4

from apps.plans.models import Plan, PlanStatus, InviteStatus
from apps.plans.services import plan_store
from apps.plans.services.exceptions import (
    PlanNotFoundError,
    PlanConflictError,
    PlanNotEditableError,
)
from apps.plans.services.plan_store import PlanPatch, conditional_update


def bump(plan_id, **fields):
    """Simulate another request committing a change to the plan."""
    plan = Plan.objects.get(id=plan_id)
    Plan.objects.filter(id=plan_id).update(version=plan.version + 1, **fields)


@pytest.mark.django_db
class TestGetPlan:

    def test_get_plan(self, planned_plan, bob):
        plan = plan_store.get_plan(plan_id=planned_plan.id)

        assert plan.id == planned_plan.id
        assert [str(i.user_id) for i in plan.invites.all()] == [str(bob.id)]

    def test_get_plan_not_found(self):
        with pytest.raises(PlanNotFoundError):
            plan_store.get_plan(plan_id=uuid4())

    def test_get_plan_malformed_id(self):
        with pytest.raises(PlanNotFoundError):
            plan_store.get_plan(plan_id='not-a-uuid')


@pytest.mark.django_db
class TestListVisibleTo:

    def test_owned_and_invited_plans_only(self, plan_factory, alice, bob, carol, dave):
        owned = plan_factory(alice)
        invited = plan_factory(bob, [alice])
        plan_factory(carol, [dave])

        visible = {p.id for p in plan_store.list_visible_to(user=alice)}

        assert visible == {owned.id, invited.id}

    def test_no_duplicates_with_many_invites(self, plan_factory, alice, bob, carol):
        plan_factory(alice, [bob, carol])

        assert plan_store.list_visible_to(user=alice).count() == 1


@pytest.mark.django_db
class TestPlanPatch:

    def test_views_reflect_pending_changes(self, three_person_plan, alice, bob, carol):
        patch = PlanPatch()
        patch.remove_invite(bob.id)
        patch.change_invite(carol.id, status=InviteStatus.DECLINED)

        assert patch.invite_statuses(three_person_plan) == {str(carol.id): InviteStatus.DECLINED}
        assert patch.member_ids(three_person_plan) == [str(alice.id), str(carol.id)]

        patch.set(owner_id=carol.id)
        assert patch.owner_id(three_person_plan) == str(carol.id)

    def test_remove_invite_discards_pending_change(self, planned_plan, bob):
        patch = PlanPatch().change_invite(bob.id, status=InviteStatus.ACCEPTED)
        patch.remove_invite(bob.id)

        assert patch.invite_changes == {}
        assert patch.removed_invites == {str(bob.id)}

    def test_is_empty(self):
        assert PlanPatch().is_empty()
        assert not PlanPatch().set(title='x').is_empty()


@pytest.mark.django_db
class TestConditionalUpdate:

    def test_writes_patch_and_bumps_version(self, planned_plan, bob):
        plan, patch = conditional_update(
            plan_id=planned_plan.id,
            build=lambda p: PlanPatch()
                .set(title='Saturday dinner')
                .change_invite(bob.id, status=InviteStatus.ACCEPTED),
        )

        assert plan.title == 'Saturday dinner'
        assert plan.version == planned_plan.version + 1
        assert plan.invites.get().status == InviteStatus.ACCEPTED

    def test_removes_invites(self, planned_plan, bob):
        plan, _ = conditional_update(
            plan_id=planned_plan.id,
            build=lambda p: PlanPatch().remove_invite(bob.id),
        )

        assert plan.invites.count() == 0

    def test_empty_patch_writes_nothing(self, planned_plan):
        plan, _ = conditional_update(plan_id=planned_plan.id, build=lambda p: PlanPatch())

        assert plan.version == planned_plan.version

    def test_builder_error_writes_nothing(self, planned_plan):
        def build(plan):
            raise PlanNotEditableError("nope")

        with pytest.raises(PlanNotEditableError):
            conditional_update(plan_id=planned_plan.id, build=build)

        planned_plan.refresh_from_db()
        assert planned_plan.version == 0

    def test_stale_snapshot_is_retried_against_fresh_state(self, planned_plan):
        """A write that lost the race re-runs its builder on the new state."""
        seen_titles = []

        def build(plan):
            seen_titles.append(plan.title)
            if len(seen_titles) == 1:
                bump(plan.id, title='Changed elsewhere')
            return PlanPatch().set(cuisine='Thai')

        plan, _ = conditional_update(plan_id=planned_plan.id, build=build)

        assert seen_titles == ['Friday dinner', 'Changed elsewhere']
        assert plan.title == 'Changed elsewhere'
        assert plan.cuisine == 'Thai'
        assert plan.version == 2

    def test_precondition_rechecked_on_retry(self, planned_plan):
        """The retry sees the competing change and can reject it."""
        calls = []

        def build(plan):
            calls.append(plan.status)
            if plan.status != PlanStatus.VOTING:
                raise PlanNotEditableError("Plan is no longer voting")
            bump(plan.id, status=PlanStatus.CANCELLED)
            return PlanPatch().set(title='Too late')

        with pytest.raises(PlanNotEditableError):
            conditional_update(plan_id=planned_plan.id, build=build)

        planned_plan.refresh_from_db()
        assert calls == [PlanStatus.VOTING, PlanStatus.CANCELLED]
        assert planned_plan.title == 'Friday dinner'

    def test_conflict_after_max_retries(self, planned_plan):
        def build(plan):
            bump(plan.id)
            return PlanPatch().set(title='Never lands')

        with pytest.raises(PlanConflictError):
            conditional_update(plan_id=planned_plan.id, build=build, max_retries=3)

        planned_plan.refresh_from_db()
        assert planned_plan.title == 'Friday dinner'
        assert planned_plan.version == 3

    def test_missing_plan(self):
        with pytest.raises(PlanNotFoundError):
            conditional_update(plan_id=uuid4(), build=lambda p: PlanPatch())
