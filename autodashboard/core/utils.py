"""Shared helpers: audit logging, action results, list pagination and sorting"""
import logging

from django.core.paginator import Paginator, EmptyPage
from django.db import IntegrityError
from django.db.models import ProtectedError
from rest_framework import status
from rest_framework.response import Response

from .models import AuditLog

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


def get_client_ip(request):
    """Extract client IP address from request"""
    if not request or not hasattr(request, 'META'):
        return None
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        ip = x_forwarded_for.split(',')[0].strip()
    else:
        ip = request.META.get('HTTP_X_REAL_IP') or request.META.get('REMOTE_ADDR')
    return ip or None


def create_audit_log(request=None, action=None, model_name=None, object_id=None,
                     changes=None, user=None, object_name=None, object_reference=None):
    """
    Create an audit log entry

    Args:
        request: DRF/Django request (for user and IP) - optional if user is provided
        action: Action type (create, update, status_change, invoice_paid, ...)
        model_name: Name of the model being acted upon
        object_id: ID of the object (as string)
        changes: Dictionary of changes made (old_data/new_data for status changes)
        user: Optional user override (defaults to request.user if request provided)
        object_name: Human-readable name of the object (e.g., VIN, invoice number)
        object_reference: Reference identifier (e.g., dealer email)
    """
    try:
        audit_user = user
        if audit_user is None and request is not None and hasattr(request, 'user'):
            audit_user = request.user

        if not action or not model_name or not object_id:
            logger.warning(f"Audit log creation skipped: missing required fields (action={action}, model_name={model_name}, object_id={object_id})")
            return None

        return AuditLog.objects.create(
            user=audit_user if audit_user and audit_user.is_authenticated else None,
            action=action,
            model_name=model_name,
            object_id=str(object_id),
            object_name=object_name,
            object_reference=object_reference,
            changes=changes or {},
            ip_address=get_client_ip(request) if request else None,
        )
    except Exception as e:
        # Don't fail the main operation if audit logging fails
        logger.error(f"Failed to create audit log: {str(e)}")
        return None


def action_result(success, message, status_code=None, **extra):
    """Build the {success, message} response returned by every mutation"""
    if status_code is None:
        status_code = status.HTTP_200_OK if success else status.HTTP_400_BAD_REQUEST
    payload = {'success': success, 'message': message}
    payload.update(extra)
    return Response(payload, status=status_code)


def first_error_message(errors, default='Validation failed'):
    """Return the first human readable message out of serializer.errors"""
    if isinstance(errors, dict):
        for value in errors.values():
            message = first_error_message(value, default=None)
            if message:
                return message
    elif isinstance(errors, (list, tuple)):
        for value in errors:
            message = first_error_message(value, default=None)
            if message:
                return message
    elif errors:
        return str(errors)
    return default


def validation_failed(serializer):
    """Action result for an invalid serializer"""
    logger.warning(f"Validation failed: {serializer.errors}")
    return action_result(False, first_error_message(serializer.errors), errors=serializer.errors)


def parse_bool(value, default=False):
    if value is None or value == '':
        return default
    return str(value).lower() in ('1', 'true', 'yes', 'on')


def parse_int(value, default=None):
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def apply_sorting(queryset, params, sort_fields, default='created_at'):
    """
    Order a queryset by the sort_by/sort_order query params.

    sort_fields maps the public sort_by names to ORM lookups; unknown
    names fall back to the default.
    """
    sort_by = params.get('sort_by') or default
    lookup = sort_fields.get(sort_by, sort_fields[default])
    sort_order = (params.get('sort_order') or 'desc').lower()
    prefix = '' if sort_order == 'asc' else '-'
    return queryset.order_by(f'{prefix}{lookup}', f'{prefix}id')


def paginate(queryset, params, serialize):
    """
    Paginate a queryset into the list envelope used by every list endpoint:
    {items, totalCount, totalPages, currentPage}

    serialize receives the page's object list and returns the items.
    """
    page = max(parse_int(params.get('page'), 1), 1)
    page_size = parse_int(params.get('page_size'), DEFAULT_PAGE_SIZE)
    page_size = min(max(page_size, 1), MAX_PAGE_SIZE)

    paginator = Paginator(queryset, page_size)
    try:
        object_list = paginator.page(page).object_list
    except EmptyPage:
        object_list = []

    total_count = paginator.count
    return {
        'items': serialize(object_list),
        'totalCount': total_count,
        'totalPages': paginator.num_pages if total_count else 0,
        'currentPage': page,
    }


def save_serializer(request, serializer, label, created=False):
    """
    Validate and save a serializer, writing an audit row.

    Returns the action result: 201/200 with the saved id and data, 400 on
    validation or integrity failure, 500 on anything unexpected.
    """
    if not serializer.is_valid():
        return validation_failed(serializer)

    verb = 'create' if created else 'update'
    try:
        instance = serializer.save()
    except IntegrityError as e:
        logger.error(f"IntegrityError on {verb} {label}: {str(e)}", exc_info=True)
        return action_result(False, f'Failed to {verb} {label.lower()}')
    except Exception as e:
        logger.error(f"Unexpected error on {verb} {label}: {str(e)}", exc_info=True)
        return action_result(False, f'Failed to {verb} {label.lower()}', status.HTTP_500_INTERNAL_SERVER_ERROR)

    logger.info(f"User {request.user.email} {verb}d {label} {instance.pk}")
    create_audit_log(
        request=request,
        action=verb,
        model_name=instance.__class__.__name__,
        object_id=instance.pk,
        object_name=str(instance),
        changes={'new_data': serializer.data},
    )
    return action_result(
        True,
        f'{label} {verb}d successfully',
        status.HTTP_201_CREATED if created else None,
        id=instance.pk,
        data=serializer.data,
    )


def delete_guarded(request, instance, label, refusal=None):
    """
    Delete a row unless a guard refused it.

    refusal is the "Cannot delete: ..." message computed by the caller, or
    None when nothing references the row.
    """
    if refusal:
        logger.warning(f"User {request.user.email} refused delete of {label} {instance.pk}: {refusal}")
        return action_result(False, refusal)

    object_id, object_name = instance.pk, str(instance)
    try:
        instance.delete()
    except ProtectedError:
        return action_result(False, f'Cannot delete: this {label.lower()} is still referenced')
    except Exception as e:
        logger.error(f"Error deleting {label} {object_id}: {str(e)}", exc_info=True)
        return action_result(False, f'Failed to delete {label.lower()}', status.HTTP_500_INTERNAL_SERVER_ERROR)

    logger.info(f"User {request.user.email} deleted {label} {object_id}")
    create_audit_log(
        request=request,
        action='delete',
        model_name=instance.__class__.__name__,
        object_id=object_id,
        object_name=object_name,
    )
    return action_result(True, f'{label} deleted successfully')
