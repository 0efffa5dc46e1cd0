import pytest
from datetime import date, timedelta
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.plans.models import Plan, PlanInvite, PlanType, PlanStatus, InviteStatus


RESTAURANT_OPTIONS = [
    {'id': 'r1', 'name': 'Sushi Place', 'cuisine': 'Japanese', 'priceLevel': 2, 'rating': 4.5},
    {'id': 'r2', 'name': 'Taco Stand', 'cuisine': 'Mexican', 'priceLevel': 1, 'rating': 4.7},
    {'id': 'r3', 'name': 'Pasta House', 'cuisine': 'Italian', 'priceLevel': 3, 'rating': 4.1},
]


def make_user(email, name):
    return User.objects.create_user(
        email=email,
        password='TestPass123!',
        name=name,
        avatar_uri=f'https://example.com/avatars/{name.lower()}.png',
    )


def make_plan(owner, invitees=(), **fields):
    """Create a plan with invites; invitees are users or (user, status) pairs."""
    fields.setdefault('title', 'Friday dinner')
    fields.setdefault('type', PlanType.PLANNED)
    if fields['type'] == PlanType.PLANNED:
        fields.setdefault('date', date.today() + timedelta(days=7))
        fields.setdefault('time', '19:00')
    else:
        fields.setdefault('restaurant_options', [dict(o) for o in RESTAURANT_OPTIONS])

    plan = Plan.objects.create(owner=owner, **fields)
    for invitee in invitees:
        user, status = invitee if isinstance(invitee, tuple) else (invitee, InviteStatus.PENDING)
        PlanInvite.objects.create(
            plan=plan,
            user=user,
            name=user.get_display_name(),
            avatar_uri=user.avatar_uri,
            status=status,
            responded_at=None if status == InviteStatus.PENDING else timezone.now(),
        )
    return plan


def client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def alice(db):
    """Plan owner."""
    return make_user('alice@example.com', 'Alice')


@pytest.fixture
def bob(db):
    return make_user('bob@example.com', 'Bob')


@pytest.fixture
def carol(db):
    return make_user('carol@example.com', 'Carol')


@pytest.fixture
def dave(db):
    """User with no relation to any plan fixture."""
    return make_user('dave@example.com', 'Dave')


@pytest.fixture
def alice_client(alice):
    return client_for(alice)


@pytest.fixture
def bob_client(bob):
    return client_for(bob)


@pytest.fixture
def carol_client(carol):
    return client_for(carol)


@pytest.fixture
def dave_client(dave):
    return client_for(dave)


@pytest.fixture
def restaurant_options():
    return [dict(option) for option in RESTAURANT_OPTIONS]


@pytest.fixture
def planned_plan(alice, bob):
    """Planned plan: alice owns, bob pending."""
    return make_plan(alice, [bob])


@pytest.fixture
def accepted_plan(alice, bob):
    """Planned plan: alice owns, bob accepted."""
    return make_plan(alice, [(bob, InviteStatus.ACCEPTED)])


@pytest.fixture
def three_person_plan(alice, bob, carol):
    """Planned plan: alice owns, bob and carol accepted."""
    return make_plan(alice, [(bob, InviteStatus.ACCEPTED), (carol, InviteStatus.ACCEPTED)])


@pytest.fixture
def swipe_plan(alice, bob):
    """Group swipe plan: alice owns, bob pending, options r1..r3."""
    return make_plan(alice, [bob], type=PlanType.GROUP_SWIPE, title='Where to eat?')


@pytest.fixture
def group_swipe_plan(alice, bob, carol):
    """Group swipe plan: alice owns, bob and carol pending."""
    return make_plan(alice, [bob, carol], type=PlanType.GROUP_SWIPE, title='Where to eat?')


@pytest.fixture
def confirmed_plan(alice, bob):
    """Planned plan already confirmed at r1."""
    return make_plan(
        alice,
        [(bob, InviteStatus.ACCEPTED)],
        status=PlanStatus.CONFIRMED,
        restaurant_options=[dict(RESTAURANT_OPTIONS[0])],
        restaurant=dict(RESTAURANT_OPTIONS[0]),
    )


@pytest.fixture
def plan_factory(db):
    """Return the make_plan helper for ad-hoc plan layouts."""
    return make_plan
