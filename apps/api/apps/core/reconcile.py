"""
Join-row reconciliation.

Replaces the full member set of a many-to-many association in one
transaction and reports what changed.
"""
import logging
from typing import Iterable, Optional, Set, Tuple

from django.db import transaction

logger = logging.getLogger(__name__)


def reconcile_join_rows(
    model,
    owner_field: str,
    owner_id,
    child_field: str,
    desired_ids: Iterable,
    defaults: Optional[dict] = None,
    refresh_kept: bool = False,
) -> Tuple[Set, Set]:
    """
    Make the join rows of ``owner_id`` match ``desired_ids`` exactly.

    Args:
        model: join model (e.g. ClinicSpecialty, ExamRequest)
        owner_field: FK name pointing at the owner (e.g. 'clinic')
        owner_id: primary key of the owner
        child_field: FK name pointing at the member (e.g. 'specialty')
        desired_ids: member primary keys that must remain attached
        defaults: extra column values written on new rows
        refresh_kept: also write ``defaults`` onto rows that are kept

    Returns:
        (added, removed) sets of member ids
    """
    owner_column = f'{owner_field}_id'
    child_column = f'{child_field}_id'
    desired = {_normalize(value) for value in desired_ids}
    defaults = defaults or {}

    with transaction.atomic():
        existing = {
            _normalize(value)
            for value in model.objects.select_for_update()
            .filter(**{owner_column: owner_id})
            .values_list(child_column, flat=True)
        }

        added = desired - existing
        removed = existing - desired
        kept = existing & desired

        if removed:
            model.objects.filter(
                **{owner_column: owner_id, f'{child_column}__in': removed}
            ).delete()

        model.objects.bulk_create([
            model(**{owner_column: owner_id, child_column: child_id, **defaults})
            for child_id in added
        ])

        if refresh_kept and defaults and kept:
            model.objects.filter(
                **{owner_column: owner_id, f'{child_column}__in': kept}
            ).update(**defaults)

    logger.debug(
        'Join rows reconciled',
        extra={
            'join_model': model._meta.db_table,
            'owner_id': str(owner_id),
            'added_count': len(added),
            'removed_count': len(removed),
        }
    )
    return added, removed


def _normalize(value):
    return str(value)
