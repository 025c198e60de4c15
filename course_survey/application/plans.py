"""Survey plans, registered per role.

Only the BADM554 student survey exists today; new roles get their own
``PlanProvider`` and a ``register_plan_provider`` call.
"""
from typing import Dict

from ..core.exceptions import PlanNotFoundError
from ..core.interfaces import PlanProvider
from .interview_session import EducationRole, InterviewPlan

FIXED_TOPIC = "BADM554 Course Survey"

GREETING = (
    "Welcome to BADM554 Enterprise Database Management! I'm here to learn a bit "
    "about your background before the course begins.\n\n"
    "This quick survey will help us understand your experience with databases and "
    "data tools, so we can tailor the course to serve you better. There are no right "
    "or wrong answers. Just share honestly about your background and goals."
)

BADM554_SURVEY_PLAN = InterviewPlan(
    objectives=[
        "Understand student academic background and current program",
        "Assess prior experience with databases and data management",
        "Identify technical skill levels across key course topics",
        "Gather learning goals and areas of interest",
        "Identify anticipated challenges and support needs",
    ],
    questions=[
        "To start, could you tell me about your academic background? What was your undergraduate major, and what program are you currently in?",
        "How much work experience do you have, and has any of it involved working with data or databases?",
        "Have you taken any courses related to databases, data management, or data analytics before? If so, what did you cover?",
        "How would you describe your experience with data modeling and ER diagrams? Have you created database designs before?",
        "What about SQL and relational databases - have you written queries or worked with systems like MySQL, PostgreSQL, or SQL Server?",
        "Have you had any exposure to NoSQL databases like MongoDB, or other non-relational data stores?",
        "What about ETL processes - have you worked on extracting, transforming, and loading data between systems?",
        "Have you used any cloud data platforms like AWS, Google Cloud, or Azure for data storage or processing?",
        "Which data tools are you already familiar with? For example: Jupyter notebooks, KNIME, database clients, or cloud consoles?",
        "What concepts or skills are you most hoping to learn in this course?",
        "Are there specific tools or technologies you want hands-on experience with?",
        "What aspects of the course do you anticipate being most challenging for you?",
        "Is there anything else about your background or goals you would like to share?",
    ],
    focus_areas=[
        "Academic and professional background",
        "Prior database coursework",
        "Data modeling and ER diagram experience",
        "SQL and relational database skills",
        "NoSQL and alternative data stores",
        "ETL and data pipeline experience",
        "Cloud platform familiarity",
        "Tool proficiency",
        "Learning objectives",
        "Anticipated challenges",
    ],
)


class Badm554PlanProvider(PlanProvider):
    def get_plan(self) -> InterviewPlan:
        return BADM554_SURVEY_PLAN


_PLAN_PROVIDERS: Dict[EducationRole, PlanProvider] = {
    EducationRole.STUDENT: Badm554PlanProvider(),
}


def register_plan_provider(role: EducationRole, provider: PlanProvider) -> None:
    _PLAN_PROVIDERS[role] = provider


def get_plan_provider(role: EducationRole) -> PlanProvider:
    try:
        return _PLAN_PROVIDERS[role]
    except KeyError:
        raise PlanNotFoundError(getattr(role, "value", role)) from None


def get_plan(role: EducationRole = EducationRole.STUDENT) -> InterviewPlan:
    return get_plan_provider(role).get_plan()


def get_first_question(role: EducationRole = EducationRole.STUDENT) -> str:
    return get_plan_provider(role).get_first_question()


def objectives_message(plan: InterviewPlan) -> str:
    """Content of the system message that opens every transcript."""
    return (
        "You are conducting a pre-course survey for BADM554 Enterprise Database "
        f"Management. Your objectives are: {', '.join(plan.objectives)}"
    )


def opening_message(role: EducationRole = EducationRole.STUDENT) -> str:
    return f"{GREETING}\n\n{get_first_question(role)}"
