# vault/management/commands/create_test_accounts.py
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from vault.models import Admin, Hospital, MedicalRecord, Patient

PASSWORD = "Password123!"
HOSPITAL_EMAIL = "test_hospital@example.com"
PATIENT_EMAIL = "test_patient@example.com"


class Command(BaseCommand):
    help = "Ensure a test hospital account and a test patient account with a sample record exist (idempotent)."

    def _ensure_admin(self, email, user_type, phone):
        admin, created = Admin.objects.get_or_create(
            email=email,
            defaults={"user_type": user_type, "phone_number": phone, "email_verified": True},
        )
        # always reset password and status so the accounts are usable
        admin.set_password(PASSWORD)
        admin.account_status = "active"
        admin.user_type = user_type
        admin.save()
        self.stdout.write(self.style.SUCCESS(f"ok: {email} ({user_type}){' created' if created else ''}"))
        return admin

    @transaction.atomic
    def handle(self, *args, **opts):
        hospital_admin = self._ensure_admin(HOSPITAL_EMAIL, "hospital", "1234567890")
        Hospital.objects.update_or_create(
            admin=hospital_admin,
            defaults={
                "hospital_name": "Test City Hospital",
                "address": "123 Health St",
                "city": "Testville",
                "state": "Test State",
                "phone_number": "1234567890",
                "email": HOSPITAL_EMAIL,
                "hospital_type": "private",
                "is_verified": True,
            },
        )

        patient_admin = self._ensure_admin(PATIENT_EMAIL, "patient", "0987654321")
        patient, _ = Patient.objects.update_or_create(
            admin=patient_admin,
            is_primary=True,
            defaults={
                "full_name": "John Test Patient",
                "date_of_birth": "1990-01-01",
                "gender": "male",
                "relationship": "self",
            },
        )
        MedicalRecord.objects.get_or_create(
            patient=patient,
            title="Annual Blood Test",
            defaults={
                "category": "Lab Report",
                "file_type": "application/pdf",
                "record_date": timezone.localdate(),
                "description": "Test results for annual checkup.",
                "file_path": "/media/medivault/medical-records/sample.pdf",
            },
        )

        self.stdout.write(self.style.SUCCESS(f"Hospital: {HOSPITAL_EMAIL} / {PASSWORD}"))
        self.stdout.write(self.style.SUCCESS(f"Patient: {PATIENT_EMAIL} / {PASSWORD}"))
