class UnknownCourseError(LookupError, ValueError):
    """Raised by catalog lookups when a course id is not configured."""

    def __init__(self, course_id):
        self.course_id = course_id
        super().__init__(f"Unknown course: {course_id}")
