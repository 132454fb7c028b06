#!/usr/bin/env python3
"""
Display database migrations that need to be applied to Supabase.
"""

from pathlib import Path

from config.settings import settings


def main():
    """Display migrations."""
    migrations_dir = Path(__file__).parent / "supabase" / "migrations"
    migrations = sorted(migrations_dir.glob("*.sql"))

    print("=== Database Migrations for the Demo API ===\n")
    print("Tables used by this deployment:\n")
    print(f"  app_data:      {settings.app_data_table}")
    print(f"  public_mirror: {settings.public_mirror_table}")
    print(f"  lead_intake:   {settings.lead_intake_table}\n")

    print("The following migrations need to be applied:\n")
    for migration_file in migrations:
        print(f"  ✓ {migration_file.name}")

    print("\n" + "="*70)
    print("\nTo apply these migrations, you have two options:\n")
    print("Option 1: Supabase Dashboard (Recommended)")
    print("  1. Go to: https://supabase.com/dashboard")
    print("  2. Select your project")
    print("  3. Go to SQL Editor")
    print("  4. Copy and paste the SQL from each file below")
    print("  5. Click 'Run'\n")

    print("Option 2: psql command line")
    for migration_file in migrations:
        print(f"  psql postgresql://[CONNECTION_STRING] < supabase/migrations/{migration_file.name}")
    print()

    # Print the actual SQL
    for migration_file in migrations:
        print(f"\n{'='*70}")
        print(f"File: {migration_file.name}")
        print(f"{'='*70}\n")
        print(migration_file.read_text())
        print(f"\n{'='*70}\n")


if __name__ == "__main__":
    main()
