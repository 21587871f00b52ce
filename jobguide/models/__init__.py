from jobguide.models.profile import Profile
from jobguide.models.application import Application, ApplicationDetails
from jobguide.models.student_schedule import StudentSchedule
from jobguide.models.mentoring import InstructorAvailability, MentoringBooking
from jobguide.models.message import Message, UserMessage
from jobguide.models.advertisement import Advertisement
from jobguide.models.feedback import Feedback

__all__ = [
    "Profile",
    "Application",
    "ApplicationDetails",
    "StudentSchedule",
    "InstructorAvailability",
    "MentoringBooking",
    "Message",
    "UserMessage",
    "Advertisement",
    "Feedback",
]
