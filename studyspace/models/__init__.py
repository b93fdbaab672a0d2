from studyspace.models.user import User
from studyspace.models.academic_group import AcademicGroup
from studyspace.models.group import Group
from studyspace.models.membership import GroupMember, GroupModerator
from studyspace.models.application import GroupApplication
from studyspace.models.subject import Subject
from studyspace.models.task import Task

__all__ = [
    "User",
    "AcademicGroup",
    "Group",
    "GroupMember",
    "GroupModerator",
    "GroupApplication",
    "Subject",
    "Task",
]
