"""
Seed Data Script - Creates demo subjects for local testing
Run: python -m scripts.seed_data
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from admissions.repositories.mongo_client import SUBJECTS, get_collection, create_indexes
from admissions.domain.enums import Role
from admissions.domain.models import ActorContext
from admissions.engine.status_model import STATUS_CHAIN
from admissions.services.enrollment_service import EnrollmentWorkflowService
from admissions.utils.logger import correlation_scope, setup_logging


STAFF = [
    ("SUB-DEMO-ADMIN", Role.SUPER_ADMIN, "System Admin", "admin@school.example"),
    ("SUB-DEMO-REGISTRAR", Role.REGISTRAR, "Front Office Registrar", "registrar@school.example"),
    ("SUB-DEMO-ACCOUNTANT", Role.ACCOUNTANT, "School Accountant", "accounts@school.example"),
    ("SUB-DEMO-PARENT", Role.PARENT, "Demo Parent", "parent@school.example"),
]


def create_demo_subjects():
    """Create staff accounts and one student per lifecycle status"""

    subjects_col = get_collection(SUBJECTS)

    # Check if already seeded
    if subjects_col.count_documents({}) > 0:
        print("Database already has data. Skipping seed.")
        return

    service = EnrollmentWorkflowService()

    for subject_id, role, name, email in STAFF:
        service.register_subject(role=role, display_name=name, email=email, subject_id=subject_id)
        print(f"Created {role.value}: {subject_id}")

    actor = ActorContext(subject_id="SUB-DEMO-REGISTRAR", role=Role.REGISTRAR)

    for position, status in enumerate(STATUS_CHAIN):
        subject_id = f"SUB-DEMO-{status.value.upper().replace('_', '-')}"
        service.register_subject(
            role=Role.STUDENT,
            display_name=f"Demo {status.value.replace('_', ' ').title()}",
            email=f"{status.value}@students.example",
            subject_id=subject_id
        )
        # Walk the chain so every seeded status has a full audit trail
        with correlation_scope():
            for target in STATUS_CHAIN[1:position + 1]:
                service.advance(subject_id, target, actor=actor)
        print(f"Created student at {status.value}: {subject_id}")

    print("\n[OK] Seed data created successfully!")
    print(f"   - {len(STAFF)} staff/parent accounts")
    print(f"   - {len(STATUS_CHAIN)} students, one per status")


def main():
    setup_logging(level="WARNING", log_to_files=False)

    print("=== Seeding database ===")
    print("-" * 40)

    # Create indexes first
    create_indexes()

    # Create sample data
    create_demo_subjects()

    print("-" * 40)
    print("Done!")


if __name__ == "__main__":
    main()
