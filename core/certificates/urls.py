from django.urls import path

from .views import (
    AdminCertificateListView,
    ApproveCertificateView,
    IssueCertificateView,
    MyCertificatesView,
    RejectCertificateView,
    ResendCertificateView,
    RevokeCertificateView,
    VerifyCertificateView,
)

urlpatterns = [
    path("certificates/mine/", MyCertificatesView.as_view(), name="my-certificates"),
    path("certificates/verify/<str:code>/", VerifyCertificateView.as_view(), name="certificate-verify"),
    path("certificates/review/", AdminCertificateListView.as_view(), name="certificate-review"),
    path("certificates/<int:certificate_id>/approve/", ApproveCertificateView.as_view(), name="certificate-approve"),
    path("certificates/<int:certificate_id>/reject/", RejectCertificateView.as_view(), name="certificate-reject"),
    path("certificates/<int:certificate_id>/issue/", IssueCertificateView.as_view(), name="certificate-issue"),
    path("certificates/<int:certificate_id>/revoke/", RevokeCertificateView.as_view(), name="certificate-revoke"),
    path("certificates/<int:certificate_id>/resend/", ResendCertificateView.as_view(), name="certificate-resend"),
]
