"""
URL configuration for license API endpoints.
"""

from django.urls import path

from api.license import views

urlpatterns = [
    path(
        "generate-test-license",
        views.GenerateTestLicenseView.as_view(),
        name="generate-test-license",
    ),
    path(
        "activate-license",
        views.ActivateLicenseView.as_view(),
        name="activate-license",
    ),
    path(
        "verify-license",
        views.VerifyLicenseView.as_view(),
        name="verify-license",
    ),
    path(
        "admin/licenses",
        views.AdminLicenseListView.as_view(),
        name="admin-list-licenses",
    ),
]
