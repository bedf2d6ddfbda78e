from enum import Enum


class SectionModality(str, Enum):
    in_person = "IN_PERSON"
    hybrid = "HYBRID"
    online = "ONLINE"


class MeetingBlockType(str, Enum):
    lecture = "LECTURE"
    lab = "LAB"
    other = "OTHER"
