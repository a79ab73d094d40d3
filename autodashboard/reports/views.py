import logging
from datetime import datetime, timedelta

from django.http import HttpResponse
from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from autodashboard.core.permissions import IsAdminRole, IsDealerRole
from autodashboard.core.utils import action_result, parse_bool, parse_int
from . import exports
from .queries import (
    get_admin_dashboard_stats, get_recent_activity, get_dealer_dashboard_stats, get_ports_dashboard,
    get_reports_summary, get_dealer_balances, get_status_distribution, get_monthly_trends,
)

logger = logging.getLogger('autodashboard.reports')

DEFAULT_REPORT_DAYS = 30
MAX_ACTIVITY_LIMIT = 50


class InvalidDate(ValueError):
    pass


def _parse_date(value):
    try:
        return datetime.strptime(value, '%Y-%m-%d').date()
    except (TypeError, ValueError):
        raise InvalidDate(value)


def _date_range(params, required=True):
    """
    (date_from, date_to) from the query string. With required the range
    defaults to the last 30 days; otherwise missing bounds stay None.
    """
    date_from = params.get('date_from')
    date_to = params.get('date_to')
    date_from = _parse_date(date_from) if date_from else None
    date_to = _parse_date(date_to) if date_to else None
    if required:
        date_to = date_to or timezone.localdate()
        date_from = date_from or date_to - timedelta(days=DEFAULT_REPORT_DAYS)
    return date_from, date_to


def _invalid_date():
    return action_result(False, 'Invalid date format. Use YYYY-MM-DD')


@api_view(['GET'])
@permission_classes([IsAdminRole])
def admin_dashboard(request):
    return Response(get_admin_dashboard_stats())


@api_view(['GET'])
@permission_classes([IsAdminRole])
def recent_activity(request):
    limit = min(max(parse_int(request.query_params.get('limit'), 10), 1), MAX_ACTIVITY_LIMIT)
    return Response({'activities': get_recent_activity(limit)})


@api_view(['GET'])
@permission_classes([IsDealerRole])
def dealer_dashboard(request):
    return Response(get_dealer_dashboard_stats(request.user))


@api_view(['GET'])
@permission_classes([IsAdminRole])
def ports_dashboard(request):
    return Response(get_ports_dashboard())


@api_view(['GET'])
@permission_classes([IsAdminRole])
def reports_overview(request):
    """Summary, dealer balances, status distribution and monthly trends for a date range"""
    try:
        date_from, date_to = _date_range(request.query_params)
    except InvalidDate:
        return _invalid_date()
    if date_from > date_to:
        return action_result(False, 'date_from must be before date_to')

    return Response({
        'period': {'from': date_from.isoformat(), 'to': date_to.isoformat()},
        'summary': get_reports_summary(date_from, date_to),
        'dealerBalances': get_dealer_balances(),
        'statusDistribution': get_status_distribution(),
        'monthlyTrends': get_monthly_trends(date_from, date_to),
    })


@api_view(['GET'])
@permission_classes([IsAdminRole])
def reports_summary(request):
    try:
        date_from, date_to = _date_range(request.query_params)
    except InvalidDate:
        return _invalid_date()
    return Response(get_reports_summary(date_from, date_to))


@api_view(['GET'])
@permission_classes([IsAdminRole])
def reports_dealer_balances(request):
    return Response({'dealers': get_dealer_balances()})


@api_view(['GET'])
@permission_classes([IsAdminRole])
def reports_status_distribution(request):
    return Response({'statuses': get_status_distribution()})


@api_view(['GET'])
@permission_classes([IsAdminRole])
def reports_monthly_trends(request):
    try:
        date_from, date_to = _date_range(request.query_params)
    except InvalidDate:
        return _invalid_date()
    if date_from > date_to:
        return action_result(False, 'date_from must be before date_to')
    return Response({'trends': get_monthly_trends(date_from, date_to)})


def _export_response(request, name, title, columns, rows):
    export_format = (request.query_params.get('format') or exports.FORMAT_EXCEL).lower()
    if export_format not in (exports.FORMAT_EXCEL, exports.FORMAT_PDF):
        return action_result(False, 'Invalid format. Use excel or pdf')

    try:
        if export_format == exports.FORMAT_PDF:
            content = exports.build_pdf(title, columns, rows)
            content_type, extension = exports.PDF_CONTENT_TYPE, 'pdf'
        else:
            content = exports.build_excel(title, columns, rows)
            content_type, extension = exports.EXCEL_CONTENT_TYPE, 'xlsx'
    except Exception as e:
        logger.error(f"Error exporting {name}: {str(e)}", exc_info=True)
        return action_result(False, f'Failed to export {name}', status.HTTP_500_INTERNAL_SERVER_ERROR)

    logger.info(f"User {request.user.email} exported {name} as {export_format}")
    filename = f"{name}-export-{timezone.localdate().isoformat()}.{extension}"
    response = HttpResponse(content, content_type=content_type)
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    return response


@api_view(['GET'])
@permission_classes([IsAdminRole])
def export_dealers(request):
    return _export_response(request, 'dealers', 'Dealers', exports.DEALER_COLUMNS, exports.dealers_export_rows())


@api_view(['GET'])
@permission_classes([IsAdminRole])
def export_vehicles(request):
    show_archived = parse_bool(request.query_params.get('show_archived'))
    rows = exports.vehicles_export_rows(show_archived=show_archived)
    return _export_response(request, 'vehicles', 'Vehicles', exports.VEHICLE_COLUMNS, rows)


@api_view(['GET'])
@permission_classes([IsAdminRole])
def export_transactions(request):
    try:
        date_from, date_to = _date_range(request.query_params, required=False)
    except InvalidDate:
        return _invalid_date()
    rows = exports.transactions_export_rows(date_from, date_to)
    return _export_response(request, 'transactions', 'Transactions', exports.TRANSACTION_COLUMNS, rows)


@api_view(['GET'])
@permission_classes([IsAdminRole])
def export_invoices(request):
    try:
        date_from, date_to = _date_range(request.query_params, required=False)
    except InvalidDate:
        return _invalid_date()
    rows = exports.invoices_export_rows(date_from, date_to, request.query_params.get('status') or None)
    return _export_response(request, 'invoices', 'Invoices', exports.INVOICE_COLUMNS, rows)
