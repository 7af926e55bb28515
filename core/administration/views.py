from datetime import datetime, time

from django.core.paginator import Paginator
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime
from drf_spectacular.utils import OpenApiParameter, extend_schema, inline_serializer
from rest_framework import serializers, status
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import AdminAuditLog
from .permissions import IsAdminUser
from .serializers import AdminAuditLogSerializer


def _parse_int(value, default, min_value=None, max_value=None):
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return default
    if min_value is not None:
        parsed = max(min_value, parsed)
    if max_value is not None:
        parsed = min(max_value, parsed)
    return parsed


def _parse_datetime_filter(value, end_of_day=False):
    if not value:
        return None

    dt = parse_datetime(value)
    if dt:
        if timezone.is_naive(dt):
            dt = timezone.make_aware(dt, timezone.get_current_timezone())
        return dt

    d = parse_date(value)
    if not d:
        return None

    if end_of_day:
        dt = datetime.combine(d, time.max).replace(microsecond=0)
    else:
        dt = datetime.combine(d, time.min)
    return timezone.make_aware(dt, timezone.get_current_timezone())


class AdminAuditLogView(APIView):
    """Certificate review history, newest first."""

    permission_classes = [IsAdminUser]
    serializer_class = AdminAuditLogSerializer

    @extend_schema(
        parameters=[
            OpenApiParameter("action", str, OpenApiParameter.QUERY),
            OpenApiParameter("admin", str, OpenApiParameter.QUERY),
            OpenApiParameter("target", str, OpenApiParameter.QUERY),
            OpenApiParameter("date_from", str, OpenApiParameter.QUERY),
            OpenApiParameter("date_to", str, OpenApiParameter.QUERY),
            OpenApiParameter("page", int, OpenApiParameter.QUERY, default=1),
            OpenApiParameter("page_size", int, OpenApiParameter.QUERY, default=50),
        ],
        responses={
            200: inline_serializer(
                name="AdminAuditLogResponse",
                fields={
                    "count": serializers.IntegerField(),
                    "page": serializers.IntegerField(),
                    "page_size": serializers.IntegerField(),
                    "total_pages": serializers.IntegerField(),
                    "results": AdminAuditLogSerializer(many=True),
                },
            )
        },
    )
    def get(self, request):
        logs = AdminAuditLog.objects.all()

        action = (request.query_params.get("action") or "").strip()
        admin_username = (request.query_params.get("admin") or "").strip()
        target_username = (request.query_params.get("target") or "").strip()
        date_from = _parse_datetime_filter(request.query_params.get("date_from"))
        date_to = _parse_datetime_filter(request.query_params.get("date_to"), end_of_day=True)

        page_size = _parse_int(request.query_params.get("page_size"), 50, 1, 500)
        page = _parse_int(request.query_params.get("page"), 1, min_value=1)

        if action:
            logs = logs.filter(action=action)
        if admin_username:
            logs = logs.filter(admin_username__icontains=admin_username)
        if target_username:
            logs = logs.filter(target_username__icontains=target_username)
        if date_from:
            logs = logs.filter(timestamp__gte=date_from)
        if date_to:
            logs = logs.filter(timestamp__lte=date_to)

        paginator = Paginator(logs.order_by("-timestamp", "-id"), page_size)
        page_obj = paginator.get_page(page)
        serializer = AdminAuditLogSerializer(page_obj.object_list, many=True)
        return Response(
            {
                "count": paginator.count,
                "page": page_obj.number,
                "page_size": page_size,
                "total_pages": paginator.num_pages,
                "results": serializer.data,
            },
            status=status.HTTP_200_OK,
        )
