"""Script to validate an area registry file"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pydantic import ValidationError as SchemaError

from admissions.config.areas import load_area_registry
from admissions.domain.enums import ApplicationStatus, Role
from admissions.domain.errors import AreaRegistryError
from admissions.domain.models import SubjectState
from admissions.engine.access_policy import AccessPolicy


def check_areas(path: str) -> bool:
    try:
        registry = load_area_registry(path)
    except OSError as e:
        print(f"[FAIL] Cannot read {path}: {e}")
        return False
    except SchemaError as e:
        print(f"[FAIL] Malformed registry: {e}")
        return False
    except AreaRegistryError as e:
        print(f"[FAIL] {e.message}: {e.details}")
        return False

    policy = AccessPolicy(registry)
    print(f"[OK] Registry loaded; sign-in area is {registry.sign_in_area}")
    print("=" * 60)

    for role in Role:
        if role == Role.STUDENT:
            continue
        _describe(policy, role.value, SubjectState(role=role))

    for status in ApplicationStatus:
        _describe(policy, f"student/{status.value}", SubjectState(role=Role.STUDENT, status=status))

    _describe(policy, "archived", SubjectState(role=Role.STUDENT, active=False))
    return True


def _describe(policy: AccessPolicy, label: str, subject: SubjectState) -> None:
    areas = ", ".join(sorted(policy.reachable_areas(subject)))
    print(f"{label:<32} home={policy.home_area(subject)}")
    print(f"{'':<32} areas={areas}")


def main():
    if len(sys.argv) != 2:
        print("Usage: python -m scripts.check_areas path/to/areas.json")
        sys.exit(2)
    sys.exit(0 if check_areas(sys.argv[1]) else 1)


if __name__ == "__main__":
    main()
