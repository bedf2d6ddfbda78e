from app.models.catalog_course import CatalogCourse  # noqa: F401
from app.models.enums import MeetingBlockType, SectionModality  # noqa: F401
from app.models.instructor import Instructor  # noqa: F401
from app.models.instructor_term_lock import InstructorTermLock  # noqa: F401
from app.models.meeting_block import MeetingBlock  # noqa: F401
from app.models.office_hour_block import OfficeHourBlock  # noqa: F401
from app.models.offering import Offering  # noqa: F401
from app.models.room import Room  # noqa: F401
from app.models.section import Section  # noqa: F401
from app.models.term import Term  # noqa: F401
