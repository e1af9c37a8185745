"""Metrics tracking for circuit synthesis."""

import time


class Metrics:
    """Collects variable/constraint counts and synthesis time."""

    def __init__(self):
        self.start_time = None
        self.end_time = None
        self.constants = 0
        self.public = 0
        self.private = 0
        self.constraints = 0

    def start(self):
        self.start_time = time.time()

    def stop(self):
        self.end_time = time.time()

    @property
    def elapsed(self):
        if self.start_time is None:
            return 0.0
        end = self.end_time if self.end_time else time.time()
        return end - self.start_time

    @property
    def variables(self):
        return self.public + self.private

    def __repr__(self):
        return (f"constants={self.constants} public={self.public} "
                f"private={self.private} constraints={self.constraints}")
