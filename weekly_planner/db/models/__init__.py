"""SQLAlchemy model package."""
from weekly_planner.db.models.daily_plan import DailyPlan
from weekly_planner.db.models.grade import Grade
from weekly_planner.db.models.planning_week import PlanningWeek
from weekly_planner.db.models.subject import Subject
from weekly_planner.db.models.teacher_grade import TeacherGrade
from weekly_planner.db.models.teacher_subject import TeacherSubject
from weekly_planner.db.models.user import User
from weekly_planner.db.models.weekly_plan import WeeklyPlan

__all__ = [
    "DailyPlan",
    "Grade",
    "PlanningWeek",
    "Subject",
    "TeacherGrade",
    "TeacherSubject",
    "User",
    "WeeklyPlan",
]
