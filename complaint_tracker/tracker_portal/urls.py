from django.contrib import admin
from django.urls import include, path

from complaints.views import ComplaintCreateView

urlpatterns = [
    path("admin/", admin.site.urls),
    path("", ComplaintCreateView.as_view(), name="home"),
    path("accounts/", include("django.contrib.auth.urls")),
    path("", include("complaints.urls")),
]
