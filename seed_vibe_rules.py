#!/usr/bin/env python3
"""
Script to seed the default base schedule for a household.
Run this after the database migration has been completed.

The default schedule splits the day into three base rules:
    0-7   Down
    7-19  Mid
    19-0  Down/Mid

Usage:
    python seed_vibe_rules.py <household_name>

Example:
    python seed_vibe_rules.py "Living Room House"
"""

import sys
from pathlib import Path

# Add the apps/api directory to the path so we can import from speaker_api
api_dir = Path(__file__).parent / "apps" / "api"
sys.path.insert(0, str(api_dir))

from speaker_api.core.database import session_scope
from speaker_api.services.rule_repository import RepositoryUnavailable, SqlRuleRepository
from speaker_api.services.rule_store import save_rule
from speaker_api.services.validators import RuleValidationError

DEFAULT_BASE_SCHEDULE = [
    {"name": "Overnight", "start_hour": 0, "end_hour": 7, "allowed_vibes": ["Down"]},
    {"name": "Daytime", "start_hour": 7, "end_hour": 19, "allowed_vibes": ["Mid"]},
    {"name": "Evening", "start_hour": 19, "end_hour": 0, "allowed_vibes": ["Down/Mid"]},
]


def seed_household(household_name: str) -> bool:
    """Create the default base rules; stops at the first rule that doesn't fit."""
    with session_scope() as db:
        repo = SqlRuleRepository(db)
        for entry in DEFAULT_BASE_SCHEDULE:
            try:
                rule = save_rule(repo, {**entry, "rule_type": "base"}, household_name=household_name)
            except RuleValidationError as e:
                print(f"❌ Could not add {entry['name']}: {e}")
                return False
            except RepositoryUnavailable as e:
                print(f"❌ Database error: {e}")
                return False
            print(f"✅ {rule.name}: {rule.start_hour}-{rule.end_hour} {', '.join(rule.allowed_vibes)} (id {rule.id})")
    return True

if __name__ == "__main__":
    if len(sys.argv) != 2 or not sys.argv[1].strip():
        print("Usage: python seed_vibe_rules.py <household_name>")
        print('Example: python seed_vibe_rules.py "Living Room House"')
        sys.exit(1)

    success = seed_household(sys.argv[1].strip())
    sys.exit(0 if success else 1)
