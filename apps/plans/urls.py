from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'plans'

router = DefaultRouter()
router.register(r'', views.PlanViewSet, basename='plan')

urlpatterns = [
    # GET    /api/plans/                 - List plans the user owns or is invited to
    # POST   /api/plans/                 - Create plan
    # GET    /api/plans/{id}/            - Get plan
    # PUT    /api/plans/{id}/            - Edit plan (owner)
    # PATCH  /api/plans/{id}/            - Edit plan (owner)
    # POST   /api/plans/{id}/rsvp/       - Accept / decline invite
    # POST   /api/plans/{id}/swipe/      - Submit group swipe votes
    # PUT    /api/plans/{id}/status/     - Confirm / complete / cancel (owner)
    # POST   /api/plans/{id}/delegate/   - Delegate ownership (owner)
    # POST   /api/plans/{id}/leave/      - Leave plan
    path('', include(router.urls)),
]
