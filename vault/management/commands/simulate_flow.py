from django.core.management.base import BaseCommand, CommandError

from vault.models import Hospital, Patient, SharedAccess
from vault.services import hospital_admin, shared_access


class Command(BaseCommand):
    help = "Run share -> accept -> fetch files against the test accounts (see create_test_accounts)."

    def handle(self, *args, **opts):
        patient = Patient.objects.select_related("admin").filter(full_name="John Test Patient").first()
        hospital = Hospital.objects.select_related("admin").filter(hospital_name="Test City Hospital").first()
        if patient is None or hospital is None or hospital.admin is None:
            raise CommandError("Test accounts not found. Run create_test_accounts first.")

        self.stdout.write("--- Step 1: patient shares records with the hospital ---")
        share = shared_access.create_share(
            patient.admin,
            patient.pk,
            provider_name=hospital.admin.email,
            provider_type="Hospital",
            access_level="Full Access",
        )
        self.stdout.write(f"share {share.pk} created, status={share.status}")

        try:
            self.stdout.write("--- Step 2: hospital accepts the request ---")
            share = hospital_admin.accept_share(hospital.admin, share.pk)
            self.stdout.write(f"status={share.status}")

            self.stdout.write("--- Step 3: hospital retrieves shared files ---")
            files = hospital_admin.get_shared_record_files(hospital.admin, share.pk)
            for record in files:
                self.stdout.write(f" - {record.title} ({record.category})")

            if share.status == "active" and files:
                self.stdout.write(self.style.SUCCESS(f"Flow OK: {len(files)} file(s) visible to the hospital."))
            else:
                raise CommandError(f"Unexpected result: status={share.status}, files={len(files)}")
        finally:
            SharedAccess.objects.filter(pk=share.pk).delete()
