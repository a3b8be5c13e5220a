"""
placements/signals.py
─────────────────────
Keeps SchoolQuota.registered_count in step with Registration rows, whichever
way a row is written (registration flow, Django admin, shell or cascade).

A saved registration takes a slot from the oldest quota of its school and
subject that still has room; a deleted one gives a slot back.  Moving a
registration to another school or subject does both.
"""

import logging

from django.db.models import F
from django.db.models.signals import post_delete, post_save, pre_save
from django.dispatch import receiver

from .models import Registration, SchoolQuota

logger = logging.getLogger(__name__)


def _claim_slot(school_id, subject, quota_id=None):
    quotas = SchoolQuota.objects.filter(school_id=school_id, subject=subject).order_by('id')
    quota = None
    if quota_id is not None:
        quota = quotas.filter(pk=quota_id).first()
    if quota is None:
        quota = quotas.filter(registered_count__lt=F('total_quota')).first() or quotas.first()
    if quota is None:
        logger.warning("No %s quota at school %s to count a registration against", subject, school_id)
        return
    SchoolQuota.objects.filter(pk=quota.pk).update(registered_count=F('registered_count') + 1)


def _release_slot(school_id, subject):
    quota = (
        SchoolQuota.objects
        .filter(school_id=school_id, subject=subject, registered_count__gt=0)
        .order_by('id')
        .first()
    )
    if quota is None:
        return
    SchoolQuota.objects.filter(pk=quota.pk).update(registered_count=F('registered_count') - 1)


@receiver(pre_save, sender=Registration)
def remember_previous_placement(sender, instance, raw=False, **kwargs):
    instance._previous_placement = None
    if raw or instance.pk is None:
        return
    instance._previous_placement = (
        Registration.objects
        .filter(pk=instance.pk)
        .values_list('school_id', 'subject')
        .first()
    )


@receiver(post_save, sender=Registration)
def claim_quota_slot(sender, instance, created, raw=False, **kwargs):
    # Fixture loads carry their own counters.
    if raw:
        return
    placement = (instance.school_id, instance.subject)
    if created:
        _claim_slot(*placement, quota_id=getattr(instance, 'claimed_quota_id', None))
        return

    previous = getattr(instance, '_previous_placement', None)
    if previous is not None and tuple(previous) != placement:
        _release_slot(*previous)
        _claim_slot(*placement)
        logger.info(
            "Registration %s moved from %s/%s to %s/%s",
            instance.pk, previous[0], previous[1], *placement,
        )


@receiver(post_delete, sender=Registration)
def release_quota_slot(sender, instance, **kwargs):
    _release_slot(instance.school_id, instance.subject)
    logger.info(
        "Released %s slot at school %s after registration %s was deleted",
        instance.subject, instance.school_id, instance.pk,
    )
