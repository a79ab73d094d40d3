"""Aggregations behind the admin, dealer and ports dashboards and the reports page"""
import calendar
from datetime import date

from django.db.models import Q, Count, Sum, Avg
from django.utils import timezone

from autodashboard.balances.models import BalanceRequest
from autodashboard.catalog.models import Status
from autodashboard.core.cache_utils import cached_query, DASHBOARD_CACHE_TTL, DASHBOARD_PREFIX
from autodashboard.core.models import User
from autodashboard.invoices.models import Invoice
from autodashboard.locations.models import Port
from autodashboard.notifications.models import Notification
from autodashboard.vehicles.models import Vehicle, VehicleStatusHistory

RECENT_PER_SOURCE = 5

# Status.order of each column on the ports dashboard
PORT_STATUS_ORDERS = {'enRoute': 2, 'atPort': 3, 'loaded': 4, 'shipped': 5}
PORT_STATUS_DEFAULT_COLORS = {
    'enRoute': '#8B5CF6',
    'atPort': '#A855F7',
    'loaded': '#D946EF',
    'shipped': '#EC4899',
}


def _vehicles_by_status(vehicles):
    """Non-archived vehicle counts for every status, in status order"""
    statuses = Status.objects.annotate(
        vehicle_count=Count('vehicles', filter=Q(vehicles__in=vehicles, vehicles__is_archived=False))
    ).order_by('order', 'id')
    return [
        {
            'statusId': status.pk,
            'statusName': status.name_en,
            'statusNameKa': status.name_ka,
            'statusColor': status.color or None,
            'count': status.vehicle_count,
        }
        for status in statuses
    ]


@cached_query(cache_ttl=DASHBOARD_CACHE_TTL, key_prefix=DASHBOARD_PREFIX)
def get_admin_dashboard_stats():
    dealers = User.objects.filter(role=User.ROLE_DEALER).aggregate(
        total=Count('id'),
        active=Count('id', filter=Q(status=User.STATUS_ACTIVE)),
        blocked=Count('id', filter=Q(status=User.STATUS_BLOCKED)),
    )
    vehicles = Vehicle.objects.aggregate(
        total=Count('id'),
        active=Count('id', filter=Q(is_archived=False)),
        archived=Count('id', filter=Q(is_archived=True)),
    )
    pending = BalanceRequest.objects.filter(status=BalanceRequest.STATUS_PENDING).aggregate(
        count=Count('id'), amount=Sum('amount')
    )
    month_start = timezone.localtime().replace(day=1, hour=0, minute=0, second=0, microsecond=0)

    return {
        'totalDealers': dealers['total'],
        'activeDealers': dealers['active'],
        'blockedDealers': dealers['blocked'],
        'totalVehicles': vehicles['total'],
        'activeVehicles': vehicles['active'],
        'archivedVehicles': vehicles['archived'],
        'pendingBalanceRequests': pending['count'],
        'totalPendingAmount': float(pending['amount'] or 0),
        'invoicesThisMonth': Invoice.objects.filter(created_at__gte=month_start).count(),
        'pendingInvoices': Invoice.objects.filter(status=Invoice.STATUS_PENDING).count(),
        'vehiclesByStatus': _vehicles_by_status(Vehicle.objects.all()),
    }


def _vehicle_title(vehicle):
    return f"{vehicle.year} {vehicle.make.name} {vehicle.model.name}"


def get_recent_activity(limit=10):
    """The newest rows of each activity source merged into one timeline"""
    activities = []

    for vehicle in Vehicle.objects.select_related('dealer', 'make', 'model').order_by('-created_at')[:RECENT_PER_SOURCE]:
        title = _vehicle_title(vehicle)
        activities.append({
            'id': f'vehicle-{vehicle.pk}',
            'type': 'vehicle_added',
            'description': f'New vehicle added: {title}',
            'metadata': {'entityId': vehicle.pk, 'entityName': title, 'dealerName': vehicle.dealer.name},
            'createdAt': vehicle.created_at,
        })

    changes = VehicleStatusHistory.objects.select_related(
        'vehicle__make', 'vehicle__model', 'status'
    ).order_by('-changed_at')[:RECENT_PER_SOURCE]
    for change in changes:
        title = _vehicle_title(change.vehicle)
        activities.append({
            'id': f'status-{change.pk}',
            'type': 'status_change',
            'description': f'Status changed to "{change.status.name_en}" for {title}',
            'metadata': {'entityId': change.vehicle_id, 'entityName': title, 'statusName': change.status.name_en},
            'createdAt': change.changed_at,
        })

    for balance_request in BalanceRequest.objects.select_related('dealer').order_by('-created_at')[:RECENT_PER_SOURCE]:
        amount = float(balance_request.amount)
        activities.append({
            'id': f'balance-{balance_request.pk}',
            'type': 'balance_request',
            'description': f'Balance request: ${amount:,.2f} from {balance_request.dealer.name}',
            'metadata': {'entityId': balance_request.pk, 'dealerName': balance_request.dealer.name, 'amount': amount},
            'createdAt': balance_request.created_at,
        })

    for invoice in Invoice.objects.select_related('dealer').order_by('-created_at')[:RECENT_PER_SOURCE]:
        activities.append({
            'id': f'invoice-{invoice.pk}',
            'type': 'invoice_created',
            'description': f'Invoice {invoice.invoice_number} created for {invoice.dealer.name}',
            'metadata': {
                'entityId': invoice.pk,
                'entityName': invoice.invoice_number,
                'dealerName': invoice.dealer.name,
                'amount': float(invoice.total_amount),
            },
            'createdAt': invoice.created_at,
        })

    for dealer in User.objects.filter(role=User.ROLE_DEALER).order_by('-created_at')[:RECENT_PER_SOURCE]:
        activities.append({
            'id': f'dealer-{dealer.pk}',
            'type': 'dealer_added',
            'description': f'New dealer registered: {dealer.name}',
            'metadata': {'entityId': dealer.pk, 'dealerName': dealer.name},
            'createdAt': dealer.created_at,
        })

    activities.sort(key=lambda activity: activity['createdAt'], reverse=True)
    return activities[:limit]


def get_dealer_dashboard_stats(dealer):
    vehicles = Vehicle.objects.filter(dealer=dealer)
    vehicle_counts = vehicles.aggregate(
        total=Count('id'),
        active=Count('id', filter=Q(is_archived=False)),
        archived=Count('id', filter=Q(is_archived=True)),
    )
    pending_requests = BalanceRequest.objects.filter(
        dealer=dealer, status=BalanceRequest.STATUS_PENDING
    ).aggregate(count=Count('id'), amount=Sum('amount'))
    pending_invoices = Invoice.objects.filter(
        dealer=dealer, status=Invoice.STATUS_PENDING
    ).aggregate(count=Count('id'), amount=Sum('total_amount'))

    return {
        'totalVehicles': vehicle_counts['total'],
        'activeVehicles': vehicle_counts['active'],
        'archivedVehicles': vehicle_counts['archived'],
        'vehiclesByStatus': _vehicles_by_status(vehicles),
        'currentBalance': float(dealer.balance),
        'pendingBalanceRequests': pending_requests['count'],
        'pendingBalanceAmount': float(pending_requests['amount'] or 0),
        'pendingInvoices': pending_invoices['count'],
        'pendingInvoiceAmount': float(pending_invoices['amount'] or 0),
        'unreadNotifications': Notification.objects.filter(user=dealer, is_read=False).count(),
    }


def _empty_totals():
    return {name: 0 for name in PORT_STATUS_ORDERS} | {'total': 0}


def _add_totals(target, source):
    for name in target:
        target[name] += source[name]


def get_ports_dashboard():
    """
    Vehicles heading through each origin port, grouped country > state > port,
    counted per shipping stage with totals at every level.
    """
    statuses = {status.order: status for status in Status.objects.filter(order__in=PORT_STATUS_ORDERS.values())}
    status_colors = {
        name: (statuses[order].color if order in statuses and statuses[order].color else PORT_STATUS_DEFAULT_COLORS[name])
        for name, order in PORT_STATUS_ORDERS.items()
    }
    category_by_status_id = {
        statuses[order].pk: name for name, order in PORT_STATUS_ORDERS.items() if order in statuses
    }

    counts = {}
    rows = Vehicle.objects.filter(
        is_archived=False, port__isnull=False, status_id__in=category_by_status_id.keys()
    ).values('port_id', 'status_id').annotate(count=Count('id'))
    for row in rows:
        counts.setdefault(row['port_id'], {})[category_by_status_id[row['status_id']]] = row['count']

    countries = {}
    grand_totals = _empty_totals()
    ports = Port.objects.filter(is_destination=False).select_related('state__country').order_by('name')
    for port in ports:
        state, country = port.state, port.state.country
        country_data = countries.setdefault(country.pk, {
            'countryId': country.pk,
            'countryName': country.name_en,
            'countryCode': country.code,
            'states': {},
            'totals': _empty_totals(),
        })
        state_data = country_data['states'].setdefault(state.pk, {
            'stateId': state.pk,
            'stateName': state.name_en,
            'stateCode': state.code,
            'ports': [],
            'totals': _empty_totals(),
        })

        port_counts = counts.get(port.pk, {})
        port_stats = {name: port_counts.get(name, 0) for name in PORT_STATUS_ORDERS}
        port_stats['total'] = sum(port_stats.values())
        state_data['ports'].append({'portId': port.pk, 'portName': port.name, **port_stats})

        _add_totals(state_data['totals'], port_stats)
        _add_totals(country_data['totals'], port_stats)
        _add_totals(grand_totals, port_stats)

    result = []
    for country_data in sorted(countries.values(), key=lambda c: c['countryName']):
        country_data['states'] = sorted(country_data['states'].values(), key=lambda s: s['stateName'])
        result.append(country_data)

    return {'countries': result, 'grandTotals': grand_totals, 'statusColors': status_colors}


def get_reports_summary(date_from, date_to):
    dealer_balance = User.objects.filter(
        role=User.ROLE_DEALER, status=User.STATUS_ACTIVE
    ).aggregate(total=Sum('balance'))['total']
    paid = Invoice.objects.filter(
        status=Invoice.STATUS_PAID, created_at__date__gte=date_from, created_at__date__lte=date_to
    ).aggregate(count=Count('id'), total=Sum('total_amount'), average=Avg('total_amount'))
    deposits = BalanceRequest.objects.filter(
        status=BalanceRequest.STATUS_APPROVED,
        processed_at__date__gte=date_from,
        processed_at__date__lte=date_to,
    ).aggregate(total=Sum('amount'))['total']

    return {
        'totalDealerBalance': float(dealer_balance or 0),
        'totalActiveVehicles': Vehicle.objects.filter(is_archived=False).count(),
        'totalRevenueInPeriod': float(paid['total'] or 0),
        'totalInvoicesInPeriod': paid['count'],
        'totalDepositsInPeriod': float(deposits or 0),
        'averageInvoiceAmount': float(paid['average'] or 0),
    }


def get_dealer_balances():
    dealers = User.objects.filter(role=User.ROLE_DEALER).annotate(
        vehicle_count=Count('vehicles', filter=Q(vehicles__is_archived=False), distinct=True),
        pending_invoices_count=Count('invoices', filter=Q(invoices__status=Invoice.STATUS_PENDING), distinct=True),
    ).order_by('-balance', 'name')

    pending_amounts = dict(
        Invoice.objects.filter(status=Invoice.STATUS_PENDING).values('dealer_id')
        .annotate(total=Sum('total_amount')).values_list('dealer_id', 'total')
    )
    return [
        {
            'id': dealer.pk,
            'name': dealer.name,
            'companyName': dealer.company_name,
            'email': dealer.email,
            'balance': float(dealer.balance),
            'vehicleCount': dealer.vehicle_count,
            'pendingInvoicesCount': dealer.pending_invoices_count,
            'totalPendingAmount': float(pending_amounts.get(dealer.pk) or 0),
        }
        for dealer in dealers
    ]


def get_status_distribution():
    rows = _vehicles_by_status(Vehicle.objects.all())
    total = sum(row['count'] for row in rows)
    for row in rows:
        row['percentage'] = round(row['count'] * 100 / total) if total else 0
    return rows


def _month_starts(date_from, date_to):
    current = date(date_from.year, date_from.month, 1)
    while current <= date_to:
        yield current
        if current.month == 12:
            current = date(current.year + 1, 1, 1)
        else:
            current = date(current.year, current.month + 1, 1)


def get_monthly_trends(date_from, date_to):
    """One row per calendar month touched by the range, clipped to the range"""
    trends = []
    for month_start in _month_starts(date_from, date_to):
        last_day = calendar.monthrange(month_start.year, month_start.month)[1]
        start = max(month_start, date_from)
        end = min(month_start.replace(day=last_day), date_to)

        invoices = Invoice.objects.filter(created_at__date__gte=start, created_at__date__lte=end).aggregate(
            count=Count('id'), revenue=Sum('total_amount')
        )
        trends.append({
            'month': month_start.strftime('%Y-%m'),
            'monthLabel': month_start.strftime('%b %Y'),
            'vehiclesAdded': Vehicle.objects.filter(created_at__date__gte=start, created_at__date__lte=end).count(),
            'invoicesCreated': invoices['count'],
            'depositsApproved': BalanceRequest.objects.filter(
                status=BalanceRequest.STATUS_APPROVED,
                processed_at__date__gte=start,
                processed_at__date__lte=end,
            ).count(),
            'revenue': float(invoices['revenue'] or 0),
        })
    return trends
