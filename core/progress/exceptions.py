class InvalidDurationError(ValueError):
    """Raised when a playback tick carries a duration that is not a positive number."""

    def __init__(self, video_id, duration):
        self.video_id = video_id
        self.duration = duration
        super().__init__(f"Invalid duration {duration!r} for video {video_id}")
