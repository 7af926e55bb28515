from django.dispatch import Signal

# Sent once per (learner, video) when the record first becomes completed.
# Arguments: user, record
video_completed = Signal()
