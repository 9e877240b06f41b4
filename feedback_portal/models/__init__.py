from .user import User, UserRole
from .section import Section
from .subject import Subject
from .feedback import Feedback, COMMENT_MAX_LENGTH
