class InvalidTransitionError(ValueError):
    """Raised when a certificate is not in the state an action requires."""

    def __init__(self, action, current_status):
        self.action = action
        self.current_status = current_status
        super().__init__(f"Cannot {action} a certificate that is {current_status}")


class MissingReasonError(ValueError):
    def __init__(self, action):
        self.action = action
        super().__init__(f"A reason is required to {action} a certificate")


class IneligibleCompletionError(ValueError):
    """Raised when certificate generation is attempted for an unfinished course."""

    def __init__(self, course_id, detail):
        self.course_id = course_id
        super().__init__(f"Course {course_id} is not eligible for a certificate: {detail}")


class ImmutableFieldError(ValueError):
    def __init__(self, field_name):
        self.field_name = field_name
        super().__init__(f"Certificate field '{field_name}' cannot be changed once created")
