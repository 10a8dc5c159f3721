#!/usr/bin/env python3
"""
Bring the ads table up to the columns the ads API reads and writes:
1. Add any missing column (snake_case, with defaults)
2. Drop NOT NULL from legacy columns the API no longer fills
3. Print the final column list
"""

import sys
from pathlib import Path

# Add project root to path
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

import psycopg2

from core.database import get_pg_connection

REQUIRED_COLUMNS = {
    "description": "TEXT",
    "image_url": "TEXT",
    "link": "TEXT",
    "medicine_name": "VARCHAR(500)",
    "indications": "VARCHAR(500)",
    "is_new_medicine": "BOOLEAN DEFAULT false",
    "department_id": "UUID",
    "target_audience": "VARCHAR(50) DEFAULT 'all'",
    "is_active": "BOOLEAN DEFAULT true",
    "start_date": "TIMESTAMP",
    "end_date": "TIMESTAMP",
    "click_count": "INTEGER DEFAULT 0 NOT NULL",
    "created_at": "TIMESTAMP DEFAULT CURRENT_TIMESTAMP",
    "updated_at": "TIMESTAMP DEFAULT CURRENT_TIMESTAMP",
}

# Columns from the first ads schema that inserts no longer provide
LEGACY_NULLABLE = ("slot", "image_url")

COLUMNS_SQL = """
    SELECT column_name, data_type, is_nullable
    FROM information_schema.columns
    WHERE table_schema = 'public' AND table_name = 'ads'
    ORDER BY ordinal_position;
"""


def get_columns(cur):
    cur.execute(COLUMNS_SQL)
    return {row[0]: {"data_type": row[1], "is_nullable": row[2]} for row in cur.fetchall()}


def fix_ads_table():
    try:
        conn = get_pg_connection()
    except Exception as e:
        print(f"❌ Could not connect to database: {e}")
        return False

    print("=" * 60)
    print("FIXING ADS TABLE")
    print("=" * 60)

    try:
        with conn.cursor() as cur:
            columns = get_columns(cur)
            if not columns:
                print("❌ ads table not found")
                return False
            print(f"\n📋 ads currently has {len(columns)} column(s)")

            added = 0
            for name, definition in REQUIRED_COLUMNS.items():
                if name in columns:
                    continue
                try:
                    cur.execute(f'ALTER TABLE "ads" ADD COLUMN IF NOT EXISTS "{name}" {definition};')
                    conn.commit()
                    print(f"   ✅ Added {name} ({definition})")
                    added += 1
                except psycopg2.Error as e:
                    conn.rollback()
                    print(f"   ❌ Could not add {name}: {e}")

            for name in LEGACY_NULLABLE:
                if columns.get(name, {}).get("is_nullable") == "NO":
                    try:
                        cur.execute(f'ALTER TABLE "ads" ALTER COLUMN "{name}" DROP NOT NULL;')
                        conn.commit()
                        print(f"   ✅ Made {name} nullable")
                    except psycopg2.Error as e:
                        conn.rollback()
                        print(f"   ⚠️  Could not relax {name}: {e}")

            print("\n" + "=" * 60)
            print("FINAL ADS COLUMNS")
            print("=" * 60)
            for name, info in get_columns(cur).items():
                print(f"   {name}: {info['data_type']} (nullable: {info['is_nullable']})")

        print(f"\n✅ ads table fixed ({added} column(s) added)")
        return True

    except Exception as e:
        print(f"❌ Error fixing ads table: {e}")
        import traceback
        traceback.print_exc()
        return False
    finally:
        conn.close()


if __name__ == "__main__":
    success = fix_ads_table()
    sys.exit(0 if success else 1)
