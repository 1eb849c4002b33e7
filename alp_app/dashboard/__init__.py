"""
Dashboard view models.

One surface per role: administrators get course/funding forms, participants
get registration or the course list with progress and claim forms. Every
surface catches dashboard errors at the action boundary and turns them into
notifications.
"""
from .admin import AdminDashboard
from .app import DashboardApp
from .student import StudentDashboard

__all__ = ["AdminDashboard", "DashboardApp", "StudentDashboard"]
