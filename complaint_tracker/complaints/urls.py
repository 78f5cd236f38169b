from django.urls import path

from .views import (
    ComplaintAppealView,
    ComplaintCreateView,
    ComplaintDetailView,
    ComplaintTrackView,
    StaffComplaintUpdateView,
    StaffDashboardView,
    StaffEscalateView,
)

app_name = "complaints"

urlpatterns = [
    path("complaints/new/", ComplaintCreateView.as_view(), name="complaint_create"),
    path("complaints/track/", ComplaintTrackView.as_view(), name="complaint_track"),
    path("complaints/<str:complaint_id>/", ComplaintDetailView.as_view(), name="complaint_detail"),
    path("complaints/<str:complaint_id>/appeal/", ComplaintAppealView.as_view(), name="complaint_appeal"),
    path("staff/dashboard/", StaffDashboardView.as_view(), name="staff_dashboard"),
    path(
        "staff/complaints/<str:complaint_id>/update-status/",
        StaffComplaintUpdateView.as_view(),
        name="staff_update_status",
    ),
    path("staff/complaints/<str:complaint_id>/escalate/", StaffEscalateView.as_view(), name="staff_escalate"),
]
