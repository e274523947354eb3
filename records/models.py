"""
Database models for the staff clinic records.

Three related tables capture the whole domain: staff members keyed by
their hospital number, the dependants registered under a staff member,
and the clinic visits (optionally admissions) logged against a staff
member.  Staff is the root record; dependants and visits have no
lifecycle of their own.
"""
from __future__ import annotations

from django.db import models
from django.utils import timezone


class Outcome(models.TextChoices):
    """Closed vocabulary for how a visit or admission ended."""
    RECOVERED = 'Recovered', 'Recovered'
    DISCHARGED = 'Discharged', 'Discharged'
    DIED = 'Died', 'Died'
    REFERRED = 'Referred', 'Referred'


class Staff(models.Model):
    """A registered staff member.

    ``hospital_number`` is the natural key used for registration upserts;
    the surrogate ``id`` stays stable across re-registration so owned
    dependants and visits remain attached.
    """
    hospital_number = models.CharField(max_length=64, unique=True)
    full_name = models.CharField(max_length=255)
    dob = models.DateField(null=True, blank=True)
    gender = models.CharField(max_length=20, blank=True)
    telephone = models.CharField(max_length=32, blank=True)
    force_file_number = models.CharField(max_length=64, blank=True)
    station = models.CharField(max_length=128, blank=True)
    rank = models.CharField(max_length=64, blank=True)
    # Relative to MEDIA_ROOT, e.g. 'uploads/1700000000_photo.jpg'
    photo = models.CharField(max_length=512, null=True, blank=True)
    # created_at survives re-registration; updated_at marks the latest one
    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'staff'
        ordering = ['-created_at']
        verbose_name_plural = 'staff'

    def __str__(self) -> str:
        return f"{self.full_name} ({self.hospital_number})"


class Dependant(models.Model):
    """A family member registered under a staff record (at most 10 each)."""
    staff = models.ForeignKey(Staff, on_delete=models.CASCADE, related_name='dependants')
    name = models.CharField(max_length=255)
    dob = models.DateField(null=True, blank=True)
    relation = models.CharField(max_length=64, blank=True)
    photo = models.CharField(max_length=512, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'dependant'
        ordering = ['created_at', 'id']

    def __str__(self) -> str:
        return f"{self.name} ({self.relation}) of {self.staff_id}"


class Visit(models.Model):
    """A single clinic encounter, optionally an admission with an outcome.

    Admission and outcome fields are stored as submitted; no consistency
    between ``admitted`` and the outcome fields is enforced.
    """
    staff = models.ForeignKey(Staff, on_delete=models.CASCADE, related_name='visits')
    date_visit = models.DateField(default=timezone.localdate)
    reason = models.CharField(max_length=255, blank=True)
    condition = models.CharField(max_length=128, blank=True)
    visit_type = models.CharField(max_length=64, blank=True)
    admitted = models.BooleanField(default=False, db_index=True)
    date_admission = models.DateField(null=True, blank=True)
    outcome = models.CharField(max_length=16, choices=Outcome.choices, null=True, blank=True, db_index=True)
    referral_destination = models.CharField(max_length=255, null=True, blank=True)
    discharge_date = models.DateField(null=True, blank=True)
    notes = models.TextField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'visit'
        ordering = ['-date_visit', '-id']
        indexes = [
            models.Index(fields=['staff', 'date_visit'], name='visit_staff_date_idx'),
        ]

    def __str__(self) -> str:
        return f"visit {self.id} staff={self.staff_id} on {self.date_visit}"
