from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from complaints.records import RejectionReason, Severity, Status
from complaints.services import get_repository, get_workflow

User = get_user_model()


class Command(BaseCommand):
    help = "Seed the complaint store with sample complaints and a staff account."

    def handle(self, *args, **options):
        staff_user, created_staff = User.objects.get_or_create(
            username="staff_admin",
            defaults={
                "email": "staff_admin@example.com",
                "is_staff": True,
                "is_superuser": False,
            },
        )
        if created_staff:
            staff_user.set_password("StaffPass123!")
            staff_user.save()

        repository = get_repository()
        workflow = get_workflow()
        if repository.get_all():
            self.stdout.write(self.style.WARNING("Complaint store already has data; skipping complaints."))
            return

        sample_definitions = [
            {
                "fields": {
                    "category": "Garbage Dump",
                    "ward": "W2",
                    "zone": "North",
                    "severity": Severity.HIGH,
                    "description": "Municipal bins are not being cleared regularly near the market.",
                    "citizen": {"name": "Asha Verma", "phone": "9876543210"},
                },
                "status": None,
            },
            {
                "fields": {
                    "category": "Road Damage",
                    "ward": "W5",
                    "zone": "East",
                    "severity": Severity.MEDIUM,
                    "description": "Large potholes causing traffic congestion on the ring road.",
                    "citizen": {"name": "Ravi Kumar", "phone": "9123456780"},
                },
                "status": Status.IN_PROGRESS,
            },
            {
                "fields": {
                    "category": "Water Logging",
                    "ward": "W1",
                    "zone": "South",
                    "severity": Severity.LOW,
                    "description": "Water collects outside the school after every rain.",
                    "citizen": {"name": "Meena Iyer", "phone": "9988776655"},
                },
                "status": Status.REJECTED,
            },
        ]

        created_count = 0
        for item in sample_definitions:
            result = repository.create(item["fields"])
            if not result:
                raise CommandError(result.message)
            created_count += 1
            complaint = result.complaint
            if item["status"] == Status.IN_PROGRESS:
                result = workflow.update_status(
                    complaint.id,
                    Status.IN_PROGRESS,
                    comment="Assigned to municipal maintenance team.",
                    eta="3 days",
                    department="Public Works",
                    admin=staff_user.username,
                )
            elif item["status"] == Status.REJECTED:
                result = workflow.update_status(
                    complaint.id,
                    Status.REJECTED,
                    comment="The submitted photo does not show the reported location.",
                    rejection_reason=RejectionReason.INSUFFICIENT_EVIDENCE,
                    admin=staff_user.username,
                )
            if not result:
                raise CommandError(f"Could not seed status for {complaint.id}: {result.message}")

        self.stdout.write(self.style.SUCCESS("Seed complete."))
        self.stdout.write(self.style.WARNING("Credentials: staff_admin / StaffPass123!"))
        self.stdout.write(self.style.SUCCESS(f"New complaints created: {created_count}"))
