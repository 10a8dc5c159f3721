#!/usr/bin/env python3
"""
Point appointments.patient_id at users(id).

Older databases still carry a foreign key to the retired `patients` table, which
makes every booking by a registered user fail. Steps:
1. List patient-related foreign keys on appointments
2. Drop them
3. Check appointments.patient_id and users.id
4. Create appointments_patient_id_fkey -> users(id)
5. Verify

Needs DATABASE_URL (a direct Postgres connection) since Supabase's REST API
cannot run DDL. The same SQL lives in fix_appointments_patient_fk.sql for
running by hand.
"""

import sys
from pathlib import Path

# Add project root to path
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

import psycopg2
from psycopg2.extras import RealDictCursor

from core.database import get_pg_connection

CONSTRAINT_NAME = "appointments_patient_id_fkey"

LIST_PATIENT_FKS_SQL = """
    SELECT conname AS constraint_name,
           confrelid::regclass::text AS referenced_table,
           pg_get_constraintdef(oid) AS constraint_definition
    FROM pg_constraint
    WHERE conrelid = 'appointments'::regclass
      AND contype = 'f'
      AND (conname LIKE '%patient%' OR pg_get_constraintdef(oid) LIKE '%patient%');
"""

COLUMN_SQL = """
    SELECT column_name, data_type, is_nullable
    FROM information_schema.columns
    WHERE table_schema = 'public' AND table_name = %s AND column_name = %s;
"""

CONVERT_PATIENT_ID_SQL = """
    ALTER TABLE appointments
    ALTER COLUMN patient_id TYPE uuid USING NULLIF(patient_id, '')::uuid;
"""

CREATE_FK_SQL = f"""
    ALTER TABLE appointments
    ADD CONSTRAINT {CONSTRAINT_NAME}
    FOREIGN KEY (patient_id)
    REFERENCES users(id)
    ON UPDATE CASCADE
    ON DELETE CASCADE;
"""

VERIFY_SQL = """
    SELECT conname AS constraint_name,
           confrelid::regclass::text AS referenced_table,
           pg_get_constraintdef(oid) AS constraint_definition
    FROM pg_constraint
    WHERE conrelid = 'appointments'::regclass
      AND contype = 'f'
      AND conname = %s;
"""


def print_manual_fix():
    print("\n💡 Manual fix required:")
    print("   Run this SQL in your database (see scripts/fix_appointments_patient_fk.sql):")
    print(f"   ALTER TABLE appointments DROP CONSTRAINT IF EXISTS {CONSTRAINT_NAME};")
    print("   ALTER TABLE appointments ALTER COLUMN patient_id TYPE uuid USING NULLIF(patient_id, '')::uuid;")
    print(f"   ALTER TABLE appointments ADD CONSTRAINT {CONSTRAINT_NAME} FOREIGN KEY (patient_id) "
          "REFERENCES users(id) ON UPDATE CASCADE ON DELETE CASCADE;")


def drop_patient_constraints(cur):
    print("🔍 Checking current foreign key constraints...")
    cur.execute(LIST_PATIENT_FKS_SQL)
    constraints = cur.fetchall()

    print(f"\n📋 Found {len(constraints)} patient-related foreign key constraint(s):")
    for c in constraints:
        print(f"   - {c['constraint_name']}")
        print(f"     References: {c['referenced_table']}")
        print(f"     Definition: {c['constraint_definition']}\n")

    if constraints:
        print("🔧 Dropping old foreign key constraint(s)...")
    for c in constraints:
        try:
            cur.execute(f'ALTER TABLE appointments DROP CONSTRAINT IF EXISTS "{c["constraint_name"]}";')
            cur.connection.commit()
            print(f"   ✅ Dropped: {c['constraint_name']}")
        except psycopg2.Error as e:
            cur.connection.rollback()
            print(f"   ⚠️  Could not drop {c['constraint_name']}: {e}")


def get_column(cur, table, column):
    cur.execute(COLUMN_SQL, (table, column))
    return cur.fetchone()


def create_constraint(cur, patient_type, user_type):
    print("\n🔧 Creating new foreign key constraint...")
    if patient_type == "text" and user_type == "uuid":
        print("   ⚠️  Type mismatch: patient_id is text, users.id is uuid")
        print("   🔧 Converting patient_id to uuid...")
        try:
            cur.execute(CONVERT_PATIENT_ID_SQL)
            cur.connection.commit()
            print("   ✅ patient_id is now uuid")
        except psycopg2.Error as e:
            cur.connection.rollback()
            print(f"   ❌ Could not convert patient_id to uuid: {e}")
            print_manual_fix()
            return False

    try:
        cur.execute(CREATE_FK_SQL)
        cur.connection.commit()
        print(f"   ✅ Created foreign key: {CONSTRAINT_NAME} -> users(id)")
        return True
    except psycopg2.Error as e:
        cur.connection.rollback()
        print(f"   ❌ Error creating foreign key: {e}")
        print_manual_fix()
        return False


def verify_constraint(cur):
    print("\n🔍 Verifying new foreign key constraint...")
    cur.execute(VERIFY_SQL, (CONSTRAINT_NAME,))
    rows = cur.fetchall()
    if not rows:
        print("   ⚠️  Foreign key constraint not found after creation")
        return False
    print("   ✅ Foreign key constraint verified:")
    for c in rows:
        print(f"   - {c['constraint_name']}")
        print(f"     References: {c['referenced_table']}")
        print(f"     Definition: {c['constraint_definition']}")
    return True


def fix_patient_foreign_key():
    """Returns False when the constraint could not be created or verified. A missing column ends the run early."""
    try:
        conn = get_pg_connection()
    except Exception as e:
        print(f"❌ Could not connect to database: {e}")
        return False
    print("✅ Database connection established.\n")

    try:
        with conn.cursor(cursor_factory=RealDictCursor) as cur:
            drop_patient_constraints(cur)

            print("\n🔍 Checking patient_id column...")
            patient_col = get_column(cur, "appointments", "patient_id")
            if not patient_col:
                print("   ⚠️  patient_id column not found!")
                return True
            print(f"   Found: patient_id ({patient_col['data_type']}, nullable: {patient_col['is_nullable']})")

            print("\n🔍 Checking users table...")
            users_col = get_column(cur, "users", "id")
            if not users_col:
                print("   ❌ users table or id column not found!")
                return True
            print(f"   ✅ users.id exists ({users_col['data_type']})")

            if not create_constraint(cur, patient_col["data_type"], users_col["data_type"]):
                print("\n❌ Foreign key fix failed: constraint was not created")
                return False
            if not verify_constraint(cur):
                print("\n❌ Foreign key fix failed: constraint missing after creation")
                return False

        print("\n✅ Foreign key fix completed!")
        return True

    except Exception as e:
        print(f"❌ Error fixing foreign key: {e}")
        import traceback
        traceback.print_exc()
        return False
    finally:
        conn.close()


if __name__ == "__main__":
    success = fix_patient_foreign_key()
    sys.exit(0 if success else 1)
