#!/usr/bin/env python3
"""
Create doctors table entries for users with role='doctor' that have none:
1. Find doctor users without a doctors row
2. Pick a department (or create "General Medicine")
3. Insert an approved doctor profile with default working hours
4. Print every doctor for verification
"""

import sys
from pathlib import Path

# Add project root to path
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

from core.database import get_supabase
from models import DoctorStatus

DEFAULT_DEPARTMENT = {"name": "General Medicine", "description": "General Medicine Department"}

DEFAULT_DOCTOR_PROFILE = {
    "status": DoctorStatus.APPROVED.value,
    "specialization": "General Medicine",
    "experience": 0,
    "consultation_fee": 500.00,
    "is_available": True,
    "daily_appointment_limit": 18,
    "appointment_duration": 30,
    "available_from": "09:00:00",
    "available_to": "17:00:00",
    "available_days": ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"],
}


def find_doctor_users_without_profile(supabase):
    doctor_users = supabase.table("users").select("id, name, email").eq("role", "doctor").order("name").execute()
    existing = supabase.table("doctors").select("user_id").execute()
    linked = {str(d.get("user_id")) for d in (existing.data or []) if d.get("user_id")}
    return [u for u in (doctor_users.data or []) if str(u.get("id")) not in linked]


def get_or_create_department(supabase):
    departments = supabase.table("departments").select("id, name").limit(1).execute()
    if departments.data:
        dept = departments.data[0]
        print(f"Using department: {dept.get('name')} ({dept.get('id')})\n")
        return dept["id"]

    print("⚠️  No departments found. Creating a default department...")
    created = supabase.table("departments").insert(DEFAULT_DEPARTMENT).execute()
    dept = created.data[0]
    print(f"Created department: {dept.get('name')} ({dept.get('id')})\n")
    return dept["id"]


def create_doctors_from_users():
    """Create missing doctors rows. Returns True on completion."""
    supabase = get_supabase()
    if not supabase:
        print("❌ Database not configured")
        return False

    print("=" * 60)
    print("CREATING DOCTORS FROM USERS")
    print("=" * 60)

    try:
        doctor_users = find_doctor_users_without_profile(supabase)
        print(f"\nFound {len(doctor_users)} doctor users without doctors table entries\n")

        if not doctor_users:
            print("✅ All doctor users already have entries in doctors table!")
            return True

        department_id = get_or_create_department(supabase)

        print("Creating doctors table entries...\n")
        created = 0
        for user in doctor_users:
            try:
                record = {**DEFAULT_DOCTOR_PROFILE, "user_id": user["id"], "department_id": department_id}
                result = supabase.table("doctors").insert(record).execute()
                doctor = result.data[0]
                print(f"✅ Created doctor entry for: {user.get('name')} ({user.get('email')})")
                print(f"   Doctor ID: {doctor.get('id')}, Status: {doctor.get('status')}\n")
                created += 1
            except Exception as e:
                print(f"❌ Error creating doctor for {user.get('name')}: {e}")
                print(f"   User ID: {user.get('id')}\n")

        # Verify
        print("\n📋 Verifying created doctors...")
        all_doctors = supabase.table("doctors").select(
            "id, user_id, status, specialization, user:users(name, email)"
        ).order("created_at", desc=True).execute()
        doctors = all_doctors.data or []
        print(f"Total doctors in database: {len(doctors)}")
        for index, doctor in enumerate(doctors, start=1):
            user = doctor.get("user") or {}
            print(f"  {index}. {user.get('name') or 'No user'} - Status: {doctor.get('status')} "
                  f"- Specialization: {doctor.get('specialization') or 'N/A'}")

        print(f"\n✅ Doctors creation completed! ({created}/{len(doctor_users)} created)")
        return True

    except Exception as e:
        print(f"❌ Error creating doctors: {e}")
        import traceback
        traceback.print_exc()
        return False


if __name__ == "__main__":
    success = create_doctors_from_users()
    sys.exit(0 if success else 1)
