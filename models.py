"""
Model enums for type hints and validation
Note: the database schema lives in Supabase; these enums back the schemas.
"""
import enum

class UserRole(str, enum.Enum):
    PATIENT = "patient"
    DOCTOR = "doctor"
    ADMIN = "admin"

class TargetAudience(str, enum.Enum):
    ALL = "all"
    PATIENT = "patient"
    DOCTOR = "doctor"

class DoctorStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
